from __future__ import annotations

from datetime import datetime
from typing import TypedDict


# PUBLIC_INTERFACE
class BookmarkEntity(TypedDict):
    """
    Domain model for a saved link as stored in the bookmarks table.

    Fields:
    - id: Unique integer identifier assigned by storage
    - title: Non-empty title
    - url: Non-empty URL, stored as given
    - description: Free text, may be empty
    - tags: Free-form tag string, not decomposed into a set
    - created_at: Insertion timestamp assigned by storage
    """

    id: int
    title: str
    url: str
    description: str
    tags: str
    created_at: datetime

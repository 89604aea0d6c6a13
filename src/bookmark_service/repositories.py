from __future__ import annotations

import logging
from typing import Any, List

from sqlalchemy import text
from sqlalchemy.engine import RowMapping

from .db import BOOKMARKS, Database
from .errors import StorageError, ValidationError
from .models import BookmarkEntity
from .schemas import EMPTY_FIELDS_MESSAGE, BookmarkCreate

logger = logging.getLogger(__name__)

_c = BOOKMARKS.c

_SELECT_ALL = text(
    f"""
    SELECT {_c.id.name}, {_c.title.name}, {_c.url.name}, {_c.description.name},
        {_c.tags.name}, {_c.created_at.name}
    FROM {BOOKMARKS.name}
    ORDER BY {_c.created_at.name} DESC, {_c.id.name} DESC
    """
).columns(_c.id, _c.title, _c.url, _c.description, _c.tags, _c.created_at)

_INSERT = text(
    f"""
    INSERT INTO {BOOKMARKS.name} ({_c.title.name}, {_c.url.name}, {_c.description.name}, {_c.tags.name})
    VALUES (:title, :url, :description, :tags)
    RETURNING {_c.id.name}, {_c.created_at.name}
    """
).columns(_c.id, _c.created_at)

_DELETE = text(f"DELETE FROM {BOOKMARKS.name} WHERE {_c.id.name} = :id")


def _required(row: RowMapping, name: str) -> Any:
    value = row[name]
    if value is None:
        raise TypeError(f"column {name!r} is NULL")
    return value


def _required_text(row: RowMapping, name: str) -> str:
    value = _required(row, name)
    if not isinstance(value, str):
        raise TypeError(f"column {name!r} is not text: {value!r}")
    return value


# PUBLIC_INTERFACE
class BookmarkRepository:
    """
    Owns every SQL statement touching the bookmarks table.

    Each operation is a single statement run in its own transaction through
    the shared Database connector.
    """

    def __init__(self, database: Database) -> None:
        self._db = database

    def _row_to_entity(self, row: RowMapping) -> BookmarkEntity:
        return {
            "id": int(_required(row, "id")),
            "title": _required_text(row, "title"),
            "url": _required_text(row, "url"),
            "description": _required_text(row, "description"),
            "tags": _required_text(row, "tags"),
            "created_at": _required(row, "created_at"),
        }

    def list(self) -> List[BookmarkEntity]:
        """Return every bookmark, newest first. Fails as a whole on any bad row."""
        try:
            # Column types are applied while fetching, so a bad value surfaces here.
            rows = self._db.query(_SELECT_ALL)
            return [self._row_to_entity(r) for r in rows]
        except (KeyError, TypeError, ValueError) as e:
            raise StorageError(f"Error decoding bookmark row: {e}") from e

    def create(self, data: BookmarkCreate) -> BookmarkEntity:
        """
        Insert a bookmark and return it with its storage-assigned id and
        created_at, both read back from the same INSERT ... RETURNING statement.

        Raises:
            ValidationError: title or url is empty; nothing is sent to storage.
            StorageError: the insert failed.
        """
        if not data.title or not data.url:
            raise ValidationError(EMPTY_FIELDS_MESSAGE)

        row = self._db.query_one(
            _INSERT,
            {
                "title": data.title,
                "url": data.url,
                "description": data.description,
                "tags": data.tags,
            },
        )
        if row is None or row["created_at"] is None:
            raise StorageError("Insert did not return the generated id and created_at")

        logger.info("Created bookmark id=%s", row["id"])
        return {
            "id": int(row["id"]),
            "title": data.title,
            "url": data.url,
            "description": data.description,
            "tags": data.tags,
            "created_at": row["created_at"],
        }

    def delete(self, bookmark_id: int) -> None:
        """Delete a bookmark by id. Deleting a missing id is not an error."""
        affected = self._db.execute(_DELETE, {"id": bookmark_id})
        logger.debug("Deleted bookmark id=%s (rows affected: %s)", bookmark_id, affected)

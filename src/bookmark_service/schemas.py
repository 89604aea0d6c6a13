from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError

EMPTY_FIELDS_MESSAGE = "Title and URL cannot be empty."


# PUBLIC_INTERFACE
class BookmarkCreate(BaseModel):
    """
    Validated input for creating a bookmark.

    Values are kept exactly as submitted (no trimming) so that they round-trip
    unchanged through storage.
    """

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "title": "Example",
                "url": "https://example.com",
                "description": "",
                "tags": "demo",
            }
        },
    )

    title: StrictStr = Field(..., description="Bookmark title")
    url: StrictStr = Field(..., description="Bookmarked URL")
    description: StrictStr = Field(default="", description="Optional description")
    tags: StrictStr = Field(default="", description="Free-form tag string")

    @field_validator("title", "url")
    @classmethod
    def require_non_empty(cls, v: str) -> str:
        if v == "":
            raise ValueError("must not be empty")
        return v


def _is_empty_required(err: Mapping[str, Any]) -> bool:
    # Missing or empty title/url; every other failure is a malformed body.
    loc = err.get("loc", ())
    return bool(loc) and loc[0] in {"title", "url"} and err.get("type") in {"missing", "value_error"}


def _describe(exc: PydanticValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)


# PUBLIC_INTERFACE
def parse_bookmark_input(fields: Mapping[str, Any]) -> BookmarkCreate:
    """
    Map raw request fields (form or JSON) onto a validated BookmarkCreate.

    Missing description/tags default to the empty string. Any client-supplied
    id or created_at is ignored.

    Raises:
        ValidationError: if title/url are missing or empty, or any field is
            not a string.
    """
    raw = {
        name: fields[name]
        for name in ("title", "url", "description", "tags")
        if name in fields
    }
    try:
        return BookmarkCreate(**raw)
    except PydanticValidationError as e:
        if all(_is_empty_required(err) for err in e.errors()):
            raise ValidationError(EMPTY_FIELDS_MESSAGE) from e
        raise ValidationError(f"Invalid request data: {_describe(e)}") from e

from __future__ import annotations

from pathlib import Path
from typing import List

from fastapi import Request
from fastapi.templating import Jinja2Templates
from starlette.responses import Response

from .models import BookmarkEntity

PACKAGE_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = PACKAGE_DIR / "templates"
STATIC_DIR = PACKAGE_DIR / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


# PUBLIC_INTERFACE
def render_index(request: Request, bookmarks: List[BookmarkEntity]) -> Response:
    """Render the full page listing every bookmark."""
    return templates.TemplateResponse(request, "index.html", {"bookmarks": bookmarks})


# PUBLIC_INTERFACE
def render_bookmark(request: Request, bookmark: BookmarkEntity) -> Response:
    """Render the fragment for a single bookmark, as inserted after a create."""
    return templates.TemplateResponse(request, "bookmark.html", {"bookmark": bookmark})

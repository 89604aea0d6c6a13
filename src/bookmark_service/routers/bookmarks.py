from __future__ import annotations

import logging
from typing import Any, Mapping

from fastapi import APIRouter, Depends, HTTPException, Path, Request, Response, status

from ..db import Database
from ..errors import StorageError, ValidationError
from ..repositories import BookmarkRepository
from ..schemas import BookmarkCreate, parse_bookmark_input
from ..views import render_bookmark, render_index

logger = logging.getLogger(__name__)

router = APIRouter(tags=["bookmarks"])

# Ids are stored as signed 64-bit integers at most.
MAX_BOOKMARK_ID = 2**63 - 1


def get_database(request: Request) -> Database:
    """
    Dependency returning the connector created at startup and stored on the
    application state.
    """
    return request.app.state.database


def get_repository(database: Database = Depends(get_database)) -> BookmarkRepository:
    return BookmarkRepository(database)


async def _read_fields(request: Request) -> Mapping[str, Any]:
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            payload = await request.json()
        except ValueError as e:
            raise ValidationError(f"Invalid request data: {e}") from e
        if not isinstance(payload, dict):
            raise ValidationError("Invalid request data: expected a JSON object")
        return payload
    return await request.form()


async def bookmark_input(request: Request) -> BookmarkCreate:
    """
    Bind the request body (form or JSON) into a validated BookmarkCreate,
    answering 400 before the repository is ever reached.
    """
    try:
        return parse_bookmark_input(await _read_fields(request))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


# PUBLIC_INTERFACE
@router.get(
    "/",
    summary="List Bookmarks",
    description="Render every bookmark, newest first.",
    responses={500: {"description": "Storage failure"}},
)
def list_bookmarks(request: Request, repo: BookmarkRepository = Depends(get_repository)) -> Response:
    try:
        bookmarks = repo.list()
    except StorageError as e:
        logger.error("Error fetching bookmarks: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error fetching bookmarks: {e}",
        ) from e
    return render_index(request, bookmarks)


# PUBLIC_INTERFACE
@router.post(
    "/bookmarks",
    summary="Add Bookmark",
    description="Create a bookmark from form or JSON fields and render it.",
    responses={
        400: {"description": "Unparseable body or empty title/url"},
        500: {"description": "Storage failure"},
    },
)
def add_bookmark(
    request: Request,
    payload: BookmarkCreate = Depends(bookmark_input),
    repo: BookmarkRepository = Depends(get_repository),
) -> Response:
    try:
        created = repo.create(payload)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except StorageError as e:
        logger.error("Error adding bookmark: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error adding bookmark: {e}",
        ) from e
    return render_bookmark(request, created)


# PUBLIC_INTERFACE
@router.post(
    "/bookmarks/delete/{bookmark_id}",
    summary="Delete Bookmark",
    description="Delete a bookmark by id. Unknown ids also answer 200.",
    responses={500: {"description": "Storage failure"}},
)
def delete_bookmark(
    bookmark_id: int = Path(..., ge=-MAX_BOOKMARK_ID - 1, le=MAX_BOOKMARK_ID, description="Bookmark id"),
    repo: BookmarkRepository = Depends(get_repository),
) -> Response:
    try:
        repo.delete(bookmark_id)
    except StorageError as e:
        logger.error("Error deleting bookmark %s: %s", bookmark_id, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error deleting bookmark: {e}",
        ) from e
    return Response(status_code=status.HTTP_200_OK)

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .db import Database
from .errors import StartupError, StorageError
from .routers import bookmarks as bookmarks_router
from .settings import Settings, get_settings
from .views import STATIC_DIR

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "bookmarks", "description": "List, add and delete bookmarks."},
]


def connect_database(settings: Settings) -> Database:
    """Create the connection pool, verify it and make sure the schema exists."""
    database = Database.connect(
        settings.database_uri,
        pool_size=settings.db_pool_size,
        echo=settings.db_echo,
    )
    try:
        database.create_schema()
    except StorageError as e:
        database.close()
        raise StartupError(f"Unable to create the database schema: {e}") from e
    return database


# PUBLIC_INTERFACE
def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Build the FastAPI application.

    If a Database is given it is used as-is and left open on shutdown (the
    caller owns it). Otherwise settings are loaded and a connector is created
    during startup; any StartupError aborts startup before traffic is served.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if database is not None:
            app.state.database = database
            yield
            return

        owned = connect_database(get_settings())
        app.state.database = owned
        try:
            yield
        finally:
            owned.close()

    app = FastAPI(
        title="Bookmark Service",
        description="Stores bookmarks in a relational database and serves a server-rendered list.",
        version="0.1.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )

    app.mount("/styles", StaticFiles(directory=str(STATIC_DIR)), name="styles")

    # Errors are answered as plain text carrying a human-readable message.
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> PlainTextResponse:
        """
        Return 400 for requests FastAPI could not bind (e.g. a non-integer id).
        """
        details = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
        )
        return PlainTextResponse(f"Invalid request data: {details}", status_code=status.HTTP_400_BAD_REQUEST)

    # PUBLIC_INTERFACE
    @app.get("/health", summary="Health Check", tags=["health"])
    def health_check(request: Request) -> JSONResponse:
        """
        Health check endpoint.

        Returns:
            200 with {"message": "Healthy", "database": "ok"} when the store
            answers a liveness probe, otherwise 503 with the error text.
        """
        try:
            request.app.state.database.ping()
        except StorageError as e:
            logger.error("Health check failed: %s", e)
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"message": "Unhealthy", "database": str(e)},
            )
        return JSONResponse(content={"message": "Healthy", "database": "ok"})

    app.include_router(bookmarks_router.router)
    return app


app = create_app()

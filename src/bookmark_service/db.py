from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Generator, List, Mapping, Optional, Union

from sqlalchemy import (
    Column,
    DateTime,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    create_engine,
    func,
    text,
)
from sqlalchemy.engine import URL, Connection, Engine, RowMapping, make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.sql.expression import Executable

from .errors import StartupError, StorageError

logger = logging.getLogger(__name__)

Statement = Union[str, Executable]
Params = Optional[Mapping[str, Any]]


metadata = MetaData()

# Column types drive result decoding for text statements (e.g. SQLite
# timestamps come back as strings unless typed as DateTime).
BOOKMARKS = Table(
    "bookmarks",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", Text, nullable=False),
    Column("url", Text, nullable=False),
    Column("description", Text, nullable=False, server_default=""),
    Column("tags", Text, nullable=False, server_default=""),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Index("idx_bookmarks_created_at", "created_at"),
)


def _normalize_url(raw: str) -> URL:
    """
    Parse a connection URI, routing bare PostgreSQL schemes
    (postgres://, postgresql://) to the psycopg driver.
    """
    url = make_url(raw)
    if url.drivername in {"postgres", "postgresql"}:
        url = url.set(drivername="postgresql+psycopg")
    return url


def _as_text(statement: Statement) -> Executable:
    return text(statement) if isinstance(statement, str) else statement


# PUBLIC_INTERFACE
class Database:
    """
    Storage connector: a pool of connections to the relational store.

    All statements are parameterized; values are always passed as bound
    parameters and never interpolated into SQL text. Every failure from the
    underlying driver is surfaced as StorageError.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @classmethod
    def connect(
        cls,
        uri: str,
        *,
        pool_size: int = 5,
        echo: bool = False,
        **engine_options: Any,
    ) -> "Database":
        """
        Create the connection pool and verify connectivity once.

        Raises:
            StartupError: if the URI is invalid, its driver is unavailable, or
                the liveness probe fails.
        """
        try:
            url = _normalize_url(uri)
            engine = create_engine(
                url,
                echo=echo,
                pool_size=pool_size,
                pool_pre_ping=True,
                **engine_options,
            )
        except (ArgumentError, ImportError) as e:
            raise StartupError(f"Invalid database URI: {e}") from e

        database = cls(engine)
        try:
            database.ping()
        except StorageError as e:
            engine.dispose()
            raise StartupError(f"Unable to ping the database: {e}") from e

        logger.info("Connected to the database (%s).", url.get_backend_name())
        return database

    def ping(self) -> None:
        """Run a trivial round-trip to verify the store is reachable."""
        self.query_one("SELECT 1")

    def create_schema(self) -> None:
        """Create the bookmarks table and its index if they do not exist."""
        try:
            metadata.create_all(self._engine, checkfirst=True)
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e
        logger.debug("Schema ensured for table %s", BOOKMARKS.name)

    @contextmanager
    def transaction(self) -> Generator[Connection, None, None]:
        """
        Yield a pooled connection inside a transaction.

        Commits when the block exits normally, rolls back on any exception and
        always returns the connection to the pool.
        """
        try:
            with self._engine.begin() as conn:
                yield conn
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e
        except OverflowError as e:
            # Raised by drivers (e.g. sqlite3) while binding an integer too
            # large for the column type, outside SQLAlchemy's error wrapping.
            raise StorageError(f"Parameter out of range: {e}") from e

    def query(self, statement: Statement, params: Params = None) -> List[RowMapping]:
        with self.transaction() as conn:
            return list(conn.execute(_as_text(statement), dict(params or {})).mappings().all())

    def query_one(self, statement: Statement, params: Params = None) -> Optional[RowMapping]:
        with self.transaction() as conn:
            return conn.execute(_as_text(statement), dict(params or {})).mappings().first()

    def execute(self, statement: Statement, params: Params = None) -> int:
        """Execute a statement and return the number of affected rows."""
        with self.transaction() as conn:
            return conn.execute(_as_text(statement), dict(params or {})).rowcount

    def close(self) -> None:
        """Release every pooled connection."""
        self._engine.dispose()
        logger.info("Database connection pool closed.")

import os

import pytest
from fastapi.testclient import TestClient

from bookmark_service.db import Database
from bookmark_service.main import create_app
from bookmark_service.repositories import BookmarkRepository


@pytest.fixture
def database(tmp_path):
    db = Database.connect(
        f"sqlite:///{os.path.join(tmp_path, 'bookmarks.db')}",
        connect_args={"check_same_thread": False},
    )
    db.create_schema()
    yield db
    db.close()


@pytest.fixture
def repo(database):
    return BookmarkRepository(database)


@pytest.fixture
def client(database):
    with TestClient(create_app(database)) as c:
        yield c


@pytest.fixture
def row_count(database):
    def _count() -> int:
        row = database.query_one("SELECT COUNT(*) AS cnt FROM bookmarks")
        return int(row["cnt"])

    return _count

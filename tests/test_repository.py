import os
from datetime import datetime, timezone

import pytest

from bookmark_service.db import Database
from bookmark_service.errors import StorageError, ValidationError
from bookmark_service.repositories import BookmarkRepository
from bookmark_service.schemas import BookmarkCreate


def make_bookmark(title="Example", url="https://example.com", description="", tags="demo"):
    return BookmarkCreate(title=title, url=url, description=description, tags=tags)


class TestCreate:
    def test_create_assigns_id_and_created_at(self, repo):
        # SQLite's CURRENT_TIMESTAMP is UTC with one-second resolution
        before = datetime.now(timezone.utc).replace(tzinfo=None, microsecond=0)
        created = repo.create(make_bookmark())

        assert created["id"] == 1
        assert created["title"] == "Example"
        assert created["url"] == "https://example.com"
        assert created["description"] == ""
        assert created["tags"] == "demo"
        assert isinstance(created["created_at"], datetime)
        assert created["created_at"].replace(tzinfo=None) >= before

    def test_ids_are_unique(self, repo):
        ids = [repo.create(make_bookmark(title=f"Link {i}"))["id"] for i in range(5)]
        assert len(set(ids)) == 5

    @pytest.mark.parametrize("title,url", [("", "https://x.com"), ("Title", ""), ("", "")])
    def test_empty_title_or_url_is_rejected_without_writing(self, repo, row_count, title, url):
        # model_construct skips pydantic validation so the repository check is exercised
        data = BookmarkCreate.model_construct(title=title, url=url, description="d", tags="t")
        with pytest.raises(ValidationError):
            repo.create(data)
        assert row_count() == 0

    def test_storage_failure_is_wrapped(self, repo, database):
        database.execute("DROP TABLE bookmarks")
        with pytest.raises(StorageError):
            repo.create(make_bookmark())


class TestList:
    def test_empty(self, repo):
        assert repo.list() == []

    def test_newest_first(self, repo):
        for i in range(3):
            repo.create(make_bookmark(title=f"Link {i}"))

        items = repo.list()
        assert [b["id"] for b in items] == [3, 2, 1]
        created = [b["created_at"] for b in items]
        assert created == sorted(created, reverse=True)

    def test_fields_round_trip_unchanged(self, repo):
        data = make_bookmark(
            title="  Spaced title ",
            url="https://example.com/path?q=1&r=ü",
            description="Line one\nLine two",
            tags="python, web ,  ",
        )
        created = repo.create(data)

        (listed,) = repo.list()
        assert listed == created
        assert listed["title"] == "  Spaced title "
        assert listed["url"] == "https://example.com/path?q=1&r=ü"
        assert listed["description"] == "Line one\nLine two"
        assert listed["tags"] == "python, web ,  "

    def test_undecodable_row_fails_whole_list(self, repo, database):
        repo.create(make_bookmark())
        database.execute(
            "INSERT INTO bookmarks (title, url, description, tags, created_at) "
            "VALUES (:title, :url, '', '', :created_at)",
            {"title": "Broken", "url": "https://broken.example", "created_at": "not-a-timestamp"},
        )
        with pytest.raises(StorageError):
            repo.list()

    def test_null_column_in_existing_table_fails_decode(self, tmp_path):
        # A table created outside this service may allow NULLs; create_schema leaves it as-is.
        legacy = Database.connect(f"sqlite:///{os.path.join(tmp_path, 'legacy.db')}")
        try:
            legacy.execute(
                "CREATE TABLE bookmarks (id INTEGER PRIMARY KEY, title TEXT, url TEXT, "
                "description TEXT, tags TEXT, created_at DATETIME DEFAULT CURRENT_TIMESTAMP)"
            )
            legacy.create_schema()
            legacy.execute(
                "INSERT INTO bookmarks (title, url, description, tags) "
                "VALUES ('Old', 'https://old.example', NULL, NULL)"
            )
            with pytest.raises(StorageError, match="description"):
                BookmarkRepository(legacy).list()
        finally:
            legacy.close()

    def test_missing_table_raises_storage_error(self, repo, database):
        database.execute("DROP TABLE bookmarks")
        with pytest.raises(StorageError):
            repo.list()


class TestDelete:
    def test_delete_existing_removes_only_that_bookmark(self, repo):
        first = repo.create(make_bookmark(title="First"))
        second = repo.create(make_bookmark(title="Second"))

        assert repo.delete(first["id"]) is None

        remaining = repo.list()
        assert [b["id"] for b in remaining] == [second["id"]]

    def test_delete_unknown_id_is_noop(self, repo, row_count):
        repo.create(make_bookmark())
        repo.delete(999)
        assert row_count() == 1

    def test_delete_twice_is_idempotent(self, repo):
        created = repo.create(make_bookmark())
        repo.delete(created["id"])
        repo.delete(created["id"])
        assert repo.list() == []

    def test_id_out_of_storage_range_is_storage_error(self, repo):
        with pytest.raises(StorageError):
            repo.delete(10**20)

    def test_storage_failure_is_wrapped(self, repo, database):
        database.execute("DROP TABLE bookmarks")
        with pytest.raises(StorageError):
            repo.delete(1)


def test_end_to_end_create_list_delete(repo):
    created = repo.create(make_bookmark(title="Example", url="https://example.com", description="", tags="demo"))
    assert created["id"] == 1
    assert created["created_at"] is not None

    assert repo.list() == [created]

    repo.delete(1)
    assert repo.list() == []

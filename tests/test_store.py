"""Tests for the JSON document store."""

import os
import stat

import pytest

from book_catalog_api.app.core import store
from book_catalog_api.app.core.config import settings
from book_catalog_api.app.core.store import StorageError

from .conftest import SAMPLE_BOOKS, read_books_file, write_books


class TestLoadAll:
    def test_preserves_file_order(self, seeded_books):
        assert [b["Id"] for b in store.load_all()] == [1, 2]

    def test_missing_file_is_empty(self, books_path):
        assert not books_path.exists()
        assert store.load_all() == []

    def test_empty_array_is_empty(self, books_path):
        write_books(books_path, [])
        assert store.load_all() == []

    @pytest.mark.parametrize("content", ["", "{not json", '{"Id": 1}', "[1, 2]"])
    def test_invalid_document_degrades_to_empty(self, books_path, content):
        books_path.write_text(content, encoding="utf-8")
        assert store.load_all() == []

    def test_strict_reads_surface_errors(self, books_path, monkeypatch):
        books_path.write_text("{not json", encoding="utf-8")
        monkeypatch.setattr(settings, "strict_reads", True)
        with pytest.raises(StorageError):
            store.load_all()


class TestReadBooks:
    def test_missing_file_is_empty(self, books_path):
        assert store.read_books() == []

    def test_invalid_json_raises(self, books_path):
        books_path.write_text("[{]", encoding="utf-8")
        with pytest.raises(StorageError):
            store.read_books()

    def test_non_array_raises(self, books_path):
        books_path.write_text('{"books": []}', encoding="utf-8")
        with pytest.raises(StorageError):
            store.read_books()


class TestSaveAll:
    def test_round_trips_extra_fields(self, books_path):
        store.save_all(SAMPLE_BOOKS)
        assert read_books_file(books_path) == SAMPLE_BOOKS

    def test_creates_parent_directory(self, tmp_path, monkeypatch):
        target = tmp_path / "nested" / "dir" / "books.json"
        monkeypatch.setattr(settings, "books_file", str(target))
        store.save_all([])
        assert read_books_file(target) == []

    def test_keeps_document_permissions(self, seeded_books):
        os.chmod(seeded_books, 0o644)
        store.save_all([])
        assert stat.S_IMODE(os.stat(seeded_books).st_mode) == 0o644

    def test_new_document_follows_umask(self, books_path):
        old_umask = os.umask(0o022)
        try:
            store.save_all([])
        finally:
            os.umask(old_umask)
        assert stat.S_IMODE(os.stat(books_path).st_mode) == 0o644

    def test_unserializable_value_raises(self, books_path):
        with pytest.raises(StorageError):
            store.save_all([{"Id": 1, "Title": object()}])
        assert not books_path.exists()

    def test_failed_write_keeps_previous_document(self, seeded_books, monkeypatch):
        def broken_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", broken_replace)
        with pytest.raises(StorageError):
            store.save_all([])
        assert read_books_file(seeded_books) == SAMPLE_BOOKS
        assert [p.name for p in seeded_books.parent.iterdir()] == ["books.json"]


class TestBooksPath:
    def test_relative_path_resolves_inside_package(self, monkeypatch):
        monkeypatch.setattr(settings, "books_file", "data/books.json")
        path = store.get_books_path()
        assert path.is_absolute()
        assert path.parts[-3:] == ("book_catalog_api", "data", "books.json")

    def test_absolute_path_used_as_is(self, books_path):
        assert store.get_books_path() == books_path


class TestWriteGuard:
    def test_no_lock_by_default(self, books_path):
        with store.write_guard():
            assert not store._write_lock.locked()

    def test_holds_lock_when_serializing(self, books_path, monkeypatch):
        monkeypatch.setattr(settings, "serialize_writes", True)
        with store.write_guard():
            assert store._write_lock.locked()
        assert not store._write_lock.locked()

"""Shared fixtures: every test runs against its own books document."""

import json

import pytest
from fastapi.testclient import TestClient

from book_catalog_api.app.core.config import settings
from book_catalog_api.app.main import app

ORWELL = {
    "Id": 1,
    "Title": "1984",
    "Author": "Orwell",
    "PrintLength": 328,
    "Publisher": "Secker",
}

SAMPLE_BOOKS = [
    ORWELL,
    {
        "Id": 2,
        "Title": "Brave New World",
        "Author": "Huxley",
        "Description": "A world state of engineered contentment.",
        "PrintLength": 311,
        "Publisher": "Chatto & Windus",
        "ISBN": "978-0060850524",
    },
]


def write_books(path, books):
    path.write_text(json.dumps(books), encoding="utf-8")


def read_books_file(path):
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.fixture
def books_path(tmp_path, monkeypatch):
    """Point the store at an (initially missing) document in ``tmp_path``."""
    path = tmp_path / "books.json"
    monkeypatch.setattr(settings, "books_file", str(path))
    monkeypatch.setattr(settings, "strict_reads", False)
    monkeypatch.setattr(settings, "serialize_writes", False)
    return path


@pytest.fixture
def seeded_books(books_path):
    """Books document holding ``SAMPLE_BOOKS``."""
    write_books(books_path, SAMPLE_BOOKS)
    return books_path


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client

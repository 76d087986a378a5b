"""Tests for the requests-based BookCatalogAPI client."""

import json

import requests

from book_catalog_client import BookCatalogAPI


def make_response(status_code, body=None, url="http://books.test/api/v1/books/"):
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    response._content = b"" if body is None else json.dumps(body).encode("utf-8")
    return response


class FakeSession:
    """Records calls and replays queued responses (or raises exceptions)."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = []

    def request(self, **kwargs):
        self.calls.append(kwargs)
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


def make_client(*results, **kwargs):
    session = FakeSession(*results)
    return BookCatalogAPI(base_url="http://books.test/", session=session, **kwargs), session


class TestBookCatalogAPI:
    def test_list_books_unwraps_envelope(self):
        api, session = make_client(make_response(200, {"message": "ok", "data": [{"Id": 1}]}))
        books, error = api.list_books()
        assert books == [{"Id": 1}]
        assert error is None
        assert session.calls[0]["method"] == "GET"
        assert session.calls[0]["url"] == "http://books.test/api/v1/books/"

    def test_get_book_not_found(self):
        api, _ = make_client(make_response(404, {"message": "Book with ID 9 not found"}))
        book, error = api.get_book(9)
        assert book is None
        assert error == {"status_code": 404, "message": "Book with ID 9 not found"}

    def test_update_book_sends_patch(self):
        api, session = make_client(make_response(200, {"message": "ok", "data": {"Id": 1, "Title": "X"}}))
        book, error = api.update_book(1, {"Title": "X"})
        assert book == {"Id": 1, "Title": "X"}
        assert error is None
        call = session.calls[0]
        assert call["method"] == "PUT"
        assert call["url"].endswith("/api/v1/books/1")
        assert call["json"] == {"Title": "X"}

    def test_register_book(self):
        api, session = make_client(make_response(201, {"message": "ok", "data": {"Id": 3, "Title": "Dune"}}))
        book, error = api.register_book({"Title": "Dune", "Author": "Herbert"})
        assert book["Id"] == 3
        assert session.calls[0]["method"] == "POST"

    def test_delete_book(self):
        api, session = make_client(make_response(200, {"message": "ok", "data": {"Id": 2}}))
        book, error = api.delete_book(2)
        assert book == {"Id": 2}
        assert session.calls[0]["method"] == "DELETE"

    def test_transport_error_is_returned(self):
        api, _ = make_client(requests.ConnectionError("refused"))
        books, error = api.list_books()
        assert books == []
        assert error["status_code"] is None
        assert "refused" in error["message"]

    def test_api_key_and_timeout(self):
        api, session = make_client(make_response(200, {"data": []}), api_key="tok", timeout=3)
        api.list_books()
        assert session.calls[0]["headers"] == {"Authorization": "Bearer tok"}
        assert session.calls[0]["timeout"] == 3

"""Book Catalog API client.

A thin wrapper around the REST API served by ``book_catalog_api``.
It uses the ``requests`` library internally and exposes one method per
operation:

* :meth:`list_books` – return every stored book.
* :meth:`get_book` – fetch a single book by its ``Id``.
* :meth:`update_book` – change the editable fields of a book.
* :meth:`register_book` – add a new book.
* :meth:`delete_book` – remove a book.

Every method returns a tuple ``(data, error)``.  On success ``error``
is ``None`` and ``data`` holds the unwrapped ``data`` member of the
response envelope.  On failure ``data`` is empty and ``error`` is a
dictionary with keys ``status_code`` and ``message``; transport errors
are logged and reported the same way instead of being raised.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Error = Optional[Dict[str, Any]]


class BookCatalogAPI:
    """Client for the book catalog API."""

    BOOKS_PATH = "/api/v1/books"

    def __init__(
        self,
        *,
        base_url: str,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the service, e.g. ``http://localhost:7500``.
            api_key: Optional token sent as ``Authorization: Bearer <api_key>``
                (useful behind an authenticating proxy; the service
                itself does not check it).
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, json_body: Any | None = None
    ) -> Tuple[Optional[Any], Error]:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET``, ``PUT``, ``POST``, ``DELETE``).
            path: Path relative to :attr:`base_url`.
            json_body: JSON body to send with the request.
        Returns:
            A tuple ``(payload, error)`` where ``payload`` is the parsed
            JSON response body.
        """
        url = f"{self.base_url}{path}"
        headers: Dict[str, str] = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    message = err_json.get("message") or err_json.get("detail") or str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    def _book_path(self, book_id: Any) -> str:
        return f"{self.BOOKS_PATH}/{book_id}"

    @staticmethod
    def _unwrap(payload: Any) -> Any:
        if isinstance(payload, dict) and "data" in payload:
            return payload["data"]
        return payload

    # ------------------------------------------------------------------
    # Book operations
    # ------------------------------------------------------------------
    def list_books(self) -> Tuple[List[Dict[str, Any]], Error]:
        """Retrieve every stored book."""
        payload, error = self._request("GET", f"{self.BOOKS_PATH}/")
        if error:
            return [], error
        books = self._unwrap(payload)
        return (books if isinstance(books, list) else []), None

    def get_book(self, book_id: Any) -> Tuple[Optional[Dict[str, Any]], Error]:
        """Retrieve a single book; a missing book is a 404 error."""
        payload, error = self._request("GET", self._book_path(book_id))
        if error:
            return None, error
        return self._unwrap(payload), None

    def update_book(self, book_id: Any, patch: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Error]:
        """Apply ``patch`` to a book and return the stored record."""
        payload, error = self._request("PUT", self._book_path(book_id), json_body=patch)
        if error:
            return None, error
        return self._unwrap(payload), None

    def register_book(self, book: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Error]:
        """Register a new book and return it with its assigned ``Id``."""
        payload, error = self._request("POST", f"{self.BOOKS_PATH}/", json_body=book)
        if error:
            return None, error
        return self._unwrap(payload), None

    def delete_book(self, book_id: Any) -> Tuple[Optional[Dict[str, Any]], Error]:
        """Delete a book and return the removed record."""
        payload, error = self._request("DELETE", self._book_path(book_id))
        if error:
            return None, error
        return self._unwrap(payload), None

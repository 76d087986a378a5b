"""
Book endpoints for API v1.

These routes expose the book collection stored in the JSON document:
list, retrieve, update, register and delete.  Handlers only translate
service results into HTTP responses; every body is a JSON object with
a ``message`` key, and successful responses carry the book (or the
list of books) under ``data``.

Storage failures are logged and answered with a generic 500 so that
no internal detail (paths, tracebacks) reaches the client.
"""

import logging
from typing import Any, Dict, NoReturn

from fastapi import APIRouter, Body, HTTPException, status

from book_catalog_api.app.schemas.book import BookEnvelope, BookListEnvelope, ErrorMessage
from book_catalog_api.app.services.book_service import (
    BookService,
    BookValidationError,
    DuplicateBookError,
    StorageError,
    UpdateOutcome,
)

router = APIRouter()

logger = logging.getLogger(__name__)

_ERROR_RESPONSES: Dict[int | str, Dict[str, Any]] = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorMessage},
    status.HTTP_404_NOT_FOUND: {"model": ErrorMessage},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorMessage},
}


def _server_error(action: str, exc: Exception) -> NoReturn:
    logger.error("Failed to %s: %s", action, exc, exc_info=exc)
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server error")


def _require_id(book_id: str) -> str:
    book_id = book_id.strip()
    if not book_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Book ID is required")
    return book_id


def _not_found(book_id: str) -> NoReturn:
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Book with ID {book_id} not found",
    )


@router.get("/", response_model=BookListEnvelope, responses=_ERROR_RESPONSES)
async def list_books() -> BookListEnvelope:
    """Return every stored book in document order.

    A missing or unreadable document yields an empty list unless
    strict reads are enabled.
    """
    try:
        books = await BookService.list_books()
    except StorageError as exc:
        _server_error("read books", exc)
    return BookListEnvelope(message="List of books retrieved successfully", data=books)


@router.get("/{book_id}", response_model=BookEnvelope, responses=_ERROR_RESPONSES)
async def get_book(book_id: str) -> BookEnvelope:
    """Retrieve a single book by ``Id``; 404 if it does not exist."""
    book_id = _require_id(book_id)
    try:
        book = await BookService.get_book(book_id)
    except StorageError as exc:
        _server_error("fetch book", exc)
    if book is None:
        _not_found(book_id)
    return BookEnvelope(message="Book retrieved successfully", data=book)


@router.put("/", response_model=None, include_in_schema=False)
@router.delete("/", response_model=None, include_in_schema=False)
async def missing_book_id() -> None:
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Book ID is required")


@router.put("/{book_id}", response_model=BookEnvelope, responses=_ERROR_RESPONSES)
async def update_book(book_id: str, patch: Any = Body(None)) -> BookEnvelope:
    """Update the editable fields of a book.

    Only ``Title``, ``Author``, ``Description``, ``PrintLength`` and
    ``Publisher`` are applied; other keys (including ``Id``) are
    ignored.  A body with none of those keys leaves the book unchanged
    and still answers 200 with the current record.
    """
    book_id = _require_id(book_id)
    if patch is None:
        patch = {}
    if not isinstance(patch, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Request body must be a JSON object",
        )
    try:
        result = await BookService.update_book(book_id, patch)
    except BookValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except StorageError as exc:
        _server_error("update book", exc)

    if result.outcome is UpdateOutcome.NOT_FOUND:
        _not_found(book_id)
    if result.outcome is UpdateOutcome.NO_OP:
        return BookEnvelope(message="No updatable fields provided; book unchanged", data=result.book)
    return BookEnvelope(message="Book updated successfully", data=result.book)


@router.post(
    "/",
    response_model=BookEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={**_ERROR_RESPONSES, status.HTTP_409_CONFLICT: {"model": ErrorMessage}},
)
async def register_book(payload: Any = Body(None)) -> BookEnvelope:
    """Register a new book.

    ``Title`` and ``Author`` are required.  ``Id`` may be supplied (it
    must be unused) or left out to receive the next free identifier.
    """
    if not isinstance(payload, dict):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Failed to register book")
    try:
        book = await BookService.register_book(payload)
    except BookValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "Failed to register book", "errors": exc.errors},
        ) from exc
    except DuplicateBookError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except StorageError as exc:
        _server_error("register book", exc)
    return BookEnvelope(message="Book registered successfully", data=book)


@router.delete("/{book_id}", response_model=BookEnvelope, responses=_ERROR_RESPONSES)
async def delete_book(book_id: str) -> BookEnvelope:
    """Delete a book by ``Id`` and return the removed record."""
    book_id = _require_id(book_id)
    try:
        book = await BookService.delete_book(book_id)
    except StorageError as exc:
        _server_error("delete book", exc)
    if book is None:
        _not_found(book_id)
    return BookEnvelope(message="Book deleted successfully", data=book)

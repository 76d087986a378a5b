"""
Service layer for books.

Every operation starts by loading the whole collection from the JSON
document (see ``core.store``) and works on that in-memory copy; there
is no cache across requests.  Mutations rewrite the whole document.

Lookups coerce the requested identifier to an integer and scan the
collection linearly for the first record with a matching ``Id``.
Updates only touch the fields listed in ``UPDATABLE_FIELDS``; the
``Id`` and any extra stored fields are carried over unchanged.

Storage failures raised while persisting (``StorageError``) are never
turned into "not found" results; they propagate so the API layer can
answer with a server error.
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from book_catalog_api.app.core.store import (
    StorageError,
    load_all,
    read_books,
    save_all,
    write_guard,
)
from book_catalog_api.app.schemas.book import UPDATABLE_FIELDS, BookCreate, BookUpdate

__all__ = [
    "BookService",
    "BookValidationError",
    "DuplicateBookError",
    "StorageError",
    "UpdateOutcome",
    "UpdateResult",
]


_NUMBER_RE = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\Z", re.ASCII)


class BookValidationError(ValueError):
    """Raised when a book payload fails validation."""

    def __init__(self, errors: List[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors


class DuplicateBookError(ValueError):
    """Raised when registering a book whose ``Id`` is already taken."""

    def __init__(self, book_id: int) -> None:
        super().__init__(f"Book with ID {book_id} already exists")
        self.book_id = book_id


class UpdateOutcome(enum.Enum):
    NOT_FOUND = "not_found"
    NO_OP = "no_op"
    UPDATED = "updated"


@dataclass
class UpdateResult:
    """Result of ``BookService.update_book``.

    ``book`` is ``None`` for ``NOT_FOUND``, the unchanged record for
    ``NO_OP`` and the merged record for ``UPDATED``.
    """

    outcome: UpdateOutcome
    book: Optional[Dict[str, Any]] = None


def coerce_book_id(book_id: Any) -> Optional[int]:
    """Convert a path or payload identifier to an integer.

    Strings are read as plain decimal numbers (optional sign, fraction
    and exponent, surrounding whitespace ignored), so ``"1.0"`` and
    ``"1e0"`` both name book 1.  Digit separators, non-ASCII digits and
    non-integral values yield ``None``, which matches no stored record.
    """
    if isinstance(book_id, bool):
        return None
    if isinstance(book_id, int):
        return book_id
    if isinstance(book_id, str):
        text = book_id.strip()
        if not _NUMBER_RE.match(text):
            return None
        book_id = float(text)
    if isinstance(book_id, float):
        return int(book_id) if book_id.is_integer() else None
    return None


def _find_index(books: List[Dict[str, Any]], book_id: Any) -> int:
    wanted = coerce_book_id(book_id)
    if wanted is None:
        return -1
    for index, book in enumerate(books):
        stored = book.get("Id")
        if not isinstance(stored, bool) and stored == wanted:
            return index
    return -1


def _validation_messages(exc: ValidationError) -> List[str]:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()))
        messages.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return messages


class BookService:
    """Service class for reading and mutating the book collection."""

    @classmethod
    async def list_books(cls) -> List[Dict[str, Any]]:
        """Return the whole collection in stored order."""
        return load_all()

    @classmethod
    async def get_book(cls, book_id: Any) -> Optional[Dict[str, Any]]:
        """Retrieve a single book by its ``Id``.

        Returns ``None`` when no record matches; this is an expected
        outcome, not an error.
        """
        logger = logging.getLogger(__name__)
        books = load_all()
        index = _find_index(books, book_id)
        if index == -1:
            logger.warning("Book with Id %s not found", book_id)
            return None
        logger.info("Book with Id %s fetched", book_id)
        return books[index]

    @classmethod
    async def update_book(cls, book_id: Any, patch: Dict[str, Any]) -> UpdateResult:
        """Merge the allowed fields of ``patch`` into an existing book.

        Keys outside ``UPDATABLE_FIELDS`` are discarded, so ``Id`` can
        never change.  An empty filtered patch leaves storage untouched
        and yields ``UpdateOutcome.NO_OP`` with the current record.

        Raises
        ------
        BookValidationError
            If an allowed field carries a value of the wrong type.
        StorageError
            If the document cannot be read or rewritten.
        """
        logger = logging.getLogger(__name__)
        allowed = {key: value for key, value in patch.items() if key in UPDATABLE_FIELDS}

        with write_guard():
            books = read_books()
            index = _find_index(books, book_id)
            if index == -1:
                logger.warning("Book with Id %s not found", book_id)
                return UpdateResult(UpdateOutcome.NOT_FOUND)
            try:
                safe_data = BookUpdate(**allowed).model_dump(exclude_unset=True)
            except ValidationError as exc:
                raise BookValidationError(_validation_messages(exc)) from exc
            if not safe_data:
                logger.warning("No valid fields provided for update on book %s", book_id)
                return UpdateResult(UpdateOutcome.NO_OP, books[index])

            books[index] = {**books[index], **safe_data}
            save_all(books)
        logger.info("Book with Id %s updated (%s)", book_id, ", ".join(sorted(safe_data)))
        return UpdateResult(UpdateOutcome.UPDATED, books[index])

    @classmethod
    async def register_book(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        """Validate and append a new book, returning the stored record.

        ``Title`` and ``Author`` are required.  A supplied ``Id`` must
        be unused; without one the next identifier after the current
        maximum is assigned (1 for an empty collection).  Extra fields
        are stored as given.

        Raises
        ------
        BookValidationError
            If the payload is not a valid book.
        DuplicateBookError
            If the supplied ``Id`` already exists.
        StorageError
            If the document cannot be read or rewritten.
        """
        logger = logging.getLogger(__name__)
        try:
            book_in = BookCreate(**data)
        except ValidationError as exc:
            raise BookValidationError(_validation_messages(exc)) from exc
        # Unset optional fields come back as None; extra fields are kept
        # exactly as sent, nulls included.
        fields = {
            key: value for key, value in book_in.model_dump().items()
            if not (key in UPDATABLE_FIELDS and value is None)
        }
        fields.pop("Id", None)

        with write_guard():
            books = read_books()
            if book_in.Id is not None:
                if _find_index(books, book_in.Id) != -1:
                    raise DuplicateBookError(book_in.Id)
                new_id = book_in.Id
            else:
                existing = [
                    b["Id"] for b in books
                    if isinstance(b.get("Id"), int) and not isinstance(b.get("Id"), bool)
                ]
                new_id = max(existing, default=0) + 1
            book = {"Id": new_id, **fields}
            books.append(book)
            save_all(books)
        logger.info("Registered book %s (%s)", new_id, book.get("Title"))
        return book

    @classmethod
    async def delete_book(cls, book_id: Any) -> Optional[Dict[str, Any]]:
        """Delete a book by ``Id``.

        Returns the removed record, or ``None`` if nothing matched (in
        which case storage is not rewritten).
        """
        logger = logging.getLogger(__name__)
        with write_guard():
            books = read_books()
            index = _find_index(books, book_id)
            if index == -1:
                logger.warning("Book with Id %s not found", book_id)
                return None
            removed = books.pop(index)
            save_all(books)
        logger.info("Deleted book %s", book_id)
        return removed

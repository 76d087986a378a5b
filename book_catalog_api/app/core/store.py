"""
JSON document storage for the book collection.

The whole collection lives in a single JSON document holding an array
of book objects.  There is no partial I/O: every read parses the full
document (``load_all``/``read_books``) and every write serializes and
replaces it (``save_all``).  Writes go to a temporary sibling file
which then atomically replaces the document, so the file on disk is
always a complete, valid JSON array.

Two read flavours are provided.  ``read_books`` is strict and raises
``StorageError`` on unreadable or malformed content.  ``load_all``
degrades to an empty list on the same failures (unless
``settings.strict_reads`` is enabled), which keeps the listing
endpoints answering even when the document is damaged.
"""

import json
import logging
import os
import stat
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List

from .config import settings

logger = logging.getLogger(__name__)

# Held around read-modify-write cycles when ``settings.serialize_writes``
# is enabled.
_write_lock = threading.Lock()


class StorageError(Exception):
    """Raised when the backing document cannot be read, parsed or written."""


def get_books_path() -> Path:
    """Compute the path to the backing JSON document.

    If ``settings.books_file`` is an absolute path, use it directly.
    Otherwise resolve it relative to the ``book_catalog_api`` package
    directory.
    """
    books_file = settings.books_file
    if os.path.isabs(books_file):
        return Path(books_file)
    base_dir = Path(__file__).resolve().parent.parent.parent  # book_catalog_api/
    return (base_dir / books_file).resolve()


def _document_mode(path: Path) -> int:
    """Permission bits the rewritten document should carry.

    An existing document keeps its mode; a new one gets the usual
    ``0o666`` minus the process umask (``mkstemp`` files start at 0600).
    """
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def read_books() -> List[Dict[str, Any]]:
    """Read and parse the whole document, failing loudly.

    A missing document is an empty collection.  Any other problem
    (permissions, invalid JSON, a top-level value that is not an
    array of objects) raises ``StorageError``.
    """
    path = get_books_path()
    if not path.exists():
        return []
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        raise StorageError(f"Cannot read {path}: {exc}") from exc
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise StorageError(f"{path} does not contain a JSON array of book objects")
    return data


def load_all() -> List[Dict[str, Any]]:
    """Return the whole collection in file order.

    Read failures are logged and reported as an empty collection, so
    callers cannot tell "no books" from "storage error".  Set
    ``BOOKS_STRICT_READS`` to propagate ``StorageError`` instead.
    """
    try:
        return read_books()
    except StorageError:
        if settings.strict_reads:
            raise
        logger.warning("Failed to read books document; returning empty collection", exc_info=True)
        return []


def save_all(books: List[Dict[str, Any]]) -> None:
    """Serialize ``books`` and fully overwrite the backing document.

    Raises
    ------
    StorageError
        If the collection cannot be serialized or the file cannot be
        written.  The previous document is left untouched in that case.
    """
    path = get_books_path()
    try:
        payload = json.dumps(books, indent=2, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise StorageError(f"Cannot serialize books: {exc}") from exc

    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
            f.write("\n")
        os.chmod(tmp_name, _document_mode(path))
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as exc:
        raise StorageError(f"Cannot write {path}: {exc}") from exc
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
    logger.debug("Saved %d books to %s", len(books), path)


@contextmanager
def write_guard() -> Iterator[None]:
    """Wrap a read-modify-write cycle on the backing document.

    Holds the process-wide write lock when ``settings.serialize_writes``
    is enabled; otherwise concurrent cycles are not coordinated.
    """
    if not settings.serialize_writes:
        yield
        return
    with _write_lock:
        yield

"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service runs out of the box against the bundled sample document.
"""

import os
from dataclasses import dataclass


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Book Catalog API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    environment: str = os.getenv("ENVIRONMENT", "development")
    debug: bool = _flag("DEBUG")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Path of the JSON document holding the whole book collection.  A
    # relative path is resolved against the ``book_catalog_api``
    # package directory by ``core.store``.
    books_file: str = os.getenv("BOOKS_FILE", "data/books.json")

    # When enabled, a missing-or-corrupt document on the read path is
    # reported as a storage failure instead of an empty collection.
    strict_reads: bool = _flag("BOOKS_STRICT_READS")

    # When enabled, every read-modify-write cycle runs under a
    # process-wide lock.  Off by default: concurrent mutations may then
    # overwrite each other (last save wins).
    serialize_writes: bool = _flag("BOOKS_SERIALIZE_WRITES")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "7500"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# must be set before importing this module.
settings = Settings()

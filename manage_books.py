#!/usr/bin/env python3
"""
Export or import snapshots of the Book Catalog backing document.

``export`` copies the current collection to another file; ``import``
validates a JSON array of books and replaces the collection with it.
The books document defaults to the service's ``BOOKS_FILE`` setting
and can be overridden with ``--file``.

Usage:
    python manage_books.py export ./backup/books.json
    python manage_books.py --file /srv/books.json import ./seed.json --force
"""

import argparse
import json
import os
import sys
from typing import Any, List, Optional

from book_catalog_api.app.core.config import settings
from book_catalog_api.app.core.store import StorageError, get_books_path, read_books, save_all, write_guard


def validate_snapshot(data: Any) -> List[str]:
    """Return the problems that make ``data`` unfit as a books document."""
    if not isinstance(data, list):
        return ["top-level value must be a JSON array"]
    problems = []
    seen = set()
    for position, book in enumerate(data):
        if not isinstance(book, dict):
            problems.append(f"item {position} is not an object")
            continue
        book_id = book.get("Id")
        if not isinstance(book_id, int) or isinstance(book_id, bool):
            problems.append(f"item {position} has no integer Id")
        elif book_id in seen:
            problems.append(f"item {position} repeats Id {book_id}")
        else:
            seen.add(book_id)
    return problems


def export_books(dest: str) -> int:
    books = read_books()
    with open(dest, "w", encoding="utf-8") as f:
        json.dump(books, f, indent=2, ensure_ascii=False)
        f.write("\n")
    print(f"[+] Exported {len(books)} books from {get_books_path()} to {dest}")
    return 0


def import_books(src: str, force: bool) -> int:
    try:
        with open(src, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        print(f"[!] Cannot read {src}: {exc}", file=sys.stderr)
        return 1

    problems = validate_snapshot(data)
    if problems:
        for problem in problems:
            print(f"[!] {src}: {problem}", file=sys.stderr)
        return 1

    with write_guard():
        current = read_books()
        if current and not force:
            print(
                f"[!] {get_books_path()} already holds {len(current)} books; use --force to replace them.",
                file=sys.stderr,
            )
            return 1
        save_all(data)
    print(f"[+] Imported {len(data)} books into {get_books_path()}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Export or import the Book Catalog JSON document.")
    ap.add_argument("--file", help="Books document to operate on (defaults to BOOKS_FILE)")
    sub = ap.add_subparsers(dest="command", required=True)

    exp = sub.add_parser("export", help="Write the current collection to DEST")
    exp.add_argument("dest")

    imp = sub.add_parser("import", help="Replace the collection with the books in SRC")
    imp.add_argument("src")
    imp.add_argument("--force", action="store_true", help="Overwrite a non-empty collection")

    args = ap.parse_args(argv)
    if args.file:
        settings.books_file = os.path.abspath(args.file)

    try:
        if args.command == "export":
            return export_books(args.dest)
        return import_books(args.src, args.force)
    except (StorageError, OSError) as exc:
        print(f"[!] {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

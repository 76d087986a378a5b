"""
Logging setup for the Book Catalog API.

Log lines go to the console and, when ``LOG_FILE`` is set, to a file.
Each request is logged once by the HTTP middleware in ``main``, so
uvicorn's own access log is turned down to warnings.
"""

import logging
from pathlib import Path
from typing import List, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

CONSOLE_HANDLER = "book_catalog.console"
FILE_HANDLER = "book_catalog.file"

# Loggers that would duplicate the per-request lines.
QUIET_LOGGERS = ("uvicorn.access",)


def _build_handlers(logfile: Optional[str]) -> List[logging.Handler]:
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    console = logging.StreamHandler()
    console.set_name(CONSOLE_HANDLER)
    handlers: List[logging.Handler] = [console]
    if logfile:
        log_path = Path(logfile).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.set_name(FILE_HANDLER)
        handlers.append(file_handler)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> bool:
    """Attach the service's handlers to the root logger.

    ``level`` is a level name, case insensitive; unknown names fall
    back to ``INFO``.  Calling this again (e.g. for every ``create_app``
    in the test suite) leaves the existing setup alone.

    Returns
    -------
    bool
        ``True`` if handlers were attached, ``False`` if they were
        already present.
    """
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root = logging.getLogger()
    if any(handler.get_name() == CONSOLE_HANDLER for handler in root.handlers):
        return False

    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in _build_handlers(logfile):
        root.addHandler(handler)
    return True

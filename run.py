"""Entry point for the Book Catalog API.

Serves the FastAPI application with uvicorn.  Host, port, log level
and the location of the books document are read from environment
variables (see ``book_catalog_api.app.core.config``), e.g.::

    PORT=7500 BOOKS_FILE=/srv/books.json python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from book_catalog_api.app.core.config import settings
from book_catalog_api.app.main import app


async def run_api() -> None:
    """Start the API using Uvicorn."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    logging.getLogger(__name__).info(
        "Server listening on port %s in mode %s", settings.port, settings.environment
    )
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(run_api())
    except (KeyboardInterrupt, SystemExit):
        pass

"""
Command-line entry point.

Usage:
    python -m bookmark_service
    bookmark-service

Settings are read from the environment (see bookmark_service.settings). The
database connection is established and verified before the server starts;
any startup failure is logged and the process exits with status 1.
"""
from __future__ import annotations

import logging
import sys

import uvicorn

from .errors import StartupError
from .main import connect_database, create_app
from .settings import get_settings

logger = logging.getLogger("bookmark_service")


# PUBLIC_INTERFACE
def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        settings = get_settings()
        logging.getLogger().setLevel(settings.log_level)
        database = connect_database(settings)
    except StartupError as e:
        logger.critical("Startup failed: %s", e)
        sys.exit(1)

    try:
        uvicorn.run(create_app(database), host=settings.host, port=settings.port)
    finally:
        database.close()


if __name__ == "__main__":
    main()

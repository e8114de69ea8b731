"""Run the Shawty URL shortener with uvicorn.

Usage:
    python -m shawty
"""

import sys

import uvicorn
from loguru import logger
from pydantic import ValidationError

from shawty.core.config import get_settings
from shawty.core.logging import setup_logging
from shawty.main import create_app


def main() -> int:
    try:
        settings = get_settings()
    except ValidationError as e:
        logger.critical("Failed to load configuration: {}", e)
        return 1

    setup_logging(settings)
    app = create_app(settings)

    config = uvicorn.Config(
        app,
        host=settings.HOST,
        port=settings.PORT,
        lifespan="on",
        timeout_keep_alive=settings.SERVER_IDLE_TIMEOUT,
        timeout_graceful_shutdown=settings.SERVER_SHUTDOWN_TIMEOUT,
        # The short URL scheme follows the connection itself, not X-Forwarded-Proto
        proxy_headers=False,
        log_config=None,
    )
    server = uvicorn.Server(config)
    server.run()

    # A failed startup (e.g. MongoDB unreachable) never sets started
    return 0 if server.started else 1


if __name__ == "__main__":
    sys.exit(main())

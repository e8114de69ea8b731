"""
Core logging module.

This module configures the application logging with Loguru.
"""

import logging
import os
import sys

from loguru import logger

from shawty.core.config import Settings


class InterceptHandler(logging.Handler):
    """
    Intercept standard logging and redirect to loguru.

    uvicorn and pymongo log through the standard library; this handler
    routes their records into the loguru sinks configured below.
    """

    def emit(self, record: logging.LogRecord) -> None:
        # Try to get corresponding Loguru level or use level number
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where the logged message originated
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def register_request_level() -> None:
    """Register the custom REQUEST level used by request logging, once."""
    try:
        logger.level("REQUEST")
    except ValueError:
        logger.level("REQUEST", no=25, color="<green>")


def setup_logging(settings: Settings):
    """
    Configure application logging using Loguru.

    Args:
        settings: Application settings holding the LOG_* options

    Returns:
        The configured loguru logger
    """
    level = settings.LOG_LEVEL.upper()

    # Remove default handlers
    logger.remove()

    logger.add(
        sys.stderr,
        level=level,
        format=settings.LOG_FORMAT,
        serialize=settings.LOG_JSON,
        backtrace=settings.DEBUG,
        diagnose=settings.DEBUG,
    )

    if settings.LOG_TO_FILE:
        os.makedirs(settings.LOG_DIR, exist_ok=True)
        logger.add(
            os.path.join(settings.LOG_DIR, settings.LOG_FILENAME),
            level=level,
            format=settings.LOG_FORMAT,
            serialize=settings.LOG_JSON,
            rotation=settings.LOG_ROTATION,
            retention=settings.LOG_RETENTION,
            compression="gz",
            enqueue=True,
        )

    register_request_level()

    # Intercept standard library logging
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    for log_name in ["uvicorn", "uvicorn.access", "uvicorn.error", "fastapi", "pymongo"]:
        logging_logger = logging.getLogger(log_name)
        logging_logger.handlers = [InterceptHandler()]
        logging_logger.propagate = False

    # pymongo is chatty at DEBUG (command and heartbeat events)
    logging.getLogger("pymongo").setLevel(logging.WARNING)

    return logger

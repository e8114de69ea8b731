"""Main application module.

This module builds the FastAPI application, includes routes,
and configures middleware and exception handlers.
"""

import time
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from shawty.api import api_router
from shawty.core.config import Settings, get_settings
from shawty.db import DatabaseConnectionError, get_collection, mongo_client
from shawty.middleware import (
    ClientDisconnectMiddleware,
    CORSHeadersMiddleware,
    RequestLoggingMiddleware,
    TimeoutMiddleware,
    cors_headers,
)
from shawty.repositories import MongoURLRepository, URLRepository


def create_app(
    settings: Optional[Settings] = None,
    url_repository: Optional[URLRepository] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Application settings, loaded from the environment when omitted
        url_repository: Repository to serve from; when omitted the lifespan
            connects to MongoDB and owns the client for the app's lifetime

    Returns:
        FastAPI: The configured application
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting {} v{}", settings.APP_NAME, settings.APP_VERSION)
        logger.info("Configuration: {}", settings.safe_summary())

        async with AsyncExitStack() as stack:
            if url_repository is not None:
                app.state.url_repository = url_repository
            else:
                try:
                    client = await stack.enter_async_context(mongo_client(settings))
                except DatabaseConnectionError as e:
                    logger.critical("Failed to connect to MongoDB: {}", e)
                    raise

                repository = MongoURLRepository(
                    get_collection(client, settings),
                    operation_timeout=settings.STORE_OPERATION_TIMEOUT,
                )
                await repository.ensure_indexes()
                app.state.url_repository = repository

            logger.info("Server listening on {}:{}", settings.HOST, settings.PORT)
            yield
            logger.info("Shutting down {}", settings.APP_NAME)

        logger.info("Server gracefully stopped")

    app = FastAPI(
        title=settings.APP_NAME,
        description="Shortens URLs into 8-character identifiers and redirects them back",
        version=settings.APP_VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        redirect_slashes=False,
        lifespan=lifespan,
    )

    # The last middleware added runs outermost. TimeoutMiddleware stays
    # innermost so the 408 raised from receive() reaches body parsing unwrapped.
    app.add_middleware(
        TimeoutMiddleware,
        read_timeout=settings.SERVER_READ_TIMEOUT,
        write_timeout=settings.SERVER_WRITE_TIMEOUT,
    )
    app.add_middleware(
        CORSHeadersMiddleware,
        allow_origin=settings.CORS_ALLOWED_ORIGIN,
        allow_methods=settings.CORS_ALLOWED_METHODS,
        allow_headers=settings.CORS_ALLOWED_HEADERS,
    )
    if settings.REQUEST_LOGGING_ENABLED:
        app.add_middleware(RequestLoggingMiddleware)
    # Outermost, so a cancelled request unwinds every layer without a response
    app.add_middleware(ClientDisconnectMiddleware)

    app.include_router(api_router)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return PlainTextResponse(
            str(exc.detail),
            status_code=exc.status_code,
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Malformed bodies are client errors, reported as plain text."""
        logger.debug("Request validation error on {} {}: {}", request.method, request.url.path, exc.errors())
        return PlainTextResponse("Invalid request body", status_code=status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler to catch and log all unhandled exceptions.

        Runs outside the CORS middleware, so the headers are added here.
        """
        error_id = f"error-{time.time()}"
        logger.opt(exception=exc).error(
            "Unhandled exception in {} {} ({})",
            request.method, request.url.path, error_id,
        )
        return PlainTextResponse(
            "Internal server error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            headers=cors_headers(
                settings.CORS_ALLOWED_ORIGIN,
                settings.CORS_ALLOWED_METHODS,
                settings.CORS_ALLOWED_HEADERS,
            ),
        )

    return app

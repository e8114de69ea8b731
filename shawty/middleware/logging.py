"""
Request logging middleware for FastAPI using Loguru.

Each request gets an ID, returned in the X-Request-ID header, and one
line at the REQUEST log level once the response is ready.
"""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from shawty.core.logging import register_request_level


def client_ip(request: Request) -> str:
    """Client address, preferring the first X-Forwarded-For hop."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.client.host if request.client else "unknown"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and latency of every request."""

    def __init__(self, app: ASGIApp):
        super().__init__(app)
        register_request_level()

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Records logged while handling the request carry its ID
        request_id = str(uuid.uuid4())
        with logger.contextualize(request_id=request_id):
            start_time = time.perf_counter()
            response = await call_next(request)
            process_time_ms = round((time.perf_counter() - start_time) * 1000, 2)

            # Add request ID to response headers for traceability
            response.headers["X-Request-ID"] = request_id

            logger.log(
                "REQUEST",
                "{method} {path} {status_code} {process_time_ms}ms {client_ip} {request_id}",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                process_time_ms=process_time_ms,
                client_ip=client_ip(request),
                request_id=request_id,
            )
        return response

"""API dependencies for FastAPI.

This module provides dependency injection functions for FastAPI endpoints
to access the repository and service instances created at startup.
"""

from fastapi import Depends, Request

from shawty.repositories.base import URLRepository
from shawty.services.shortener import ShortenedURLService


async def get_url_repository(request: Request) -> URLRepository:
    """Get the URL repository acquired by the application lifespan."""
    return request.app.state.url_repository


async def get_shortener_service(
    url_repo: URLRepository = Depends(get_url_repository),
) -> ShortenedURLService:
    """Get an instance of the URL shortening service."""
    return ShortenedURLService(url_repository=url_repo)


def build_short_url(request: Request, short_id: str) -> str:
    """Assemble the absolute short URL from the request's scheme and Host header."""
    scheme = "https" if request.url.scheme == "https" else "http"
    host = request.headers.get("host") or request.url.netloc
    return f"{scheme}://{host}/r/{short_id}"

"""Routes package initialization.

This module exports the route collection for the application.
"""

from fastapi import APIRouter

from shawty.api.routes import health, redirect, shortener

# Create root router
api_router = APIRouter()

api_router.include_router(health.router)
api_router.include_router(shortener.router)

# Short URLs are served under /r/{short_id}
api_router.include_router(redirect.router)

__all__ = ["api_router"]

"""API package for the Shawty URL shortener.

This package contains the API layer components including routes,
request/response schemas, and dependency providers.
"""

from shawty.api.routes import api_router

__all__ = ["api_router"]

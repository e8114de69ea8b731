"""Service layer for the Shawty URL shortener.

Services orchestrate interactions between repositories and provide domain-specific operations.
"""

from shawty.services.shortener import ShortenedURLService, generate_short_id

__all__ = ["ShortenedURLService", "generate_short_id"]

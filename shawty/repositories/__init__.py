"""Repository layer for the Shawty URL shortener.

This module provides repository classes that abstract database operations
and implement the Repository pattern for clean separation of concerns.
"""

from shawty.repositories.base import (
    DuplicateEntityError,
    EntityNotFoundError,
    OperationCancelledError,
    RepositoryError,
    URLRepository,
)
from shawty.repositories.url_repository import MongoURLRepository

__all__ = [
    # Base classes and exceptions
    "URLRepository",
    "RepositoryError",
    "EntityNotFoundError",
    "DuplicateEntityError",
    "OperationCancelledError",

    # Concrete repositories
    "MongoURLRepository",
]

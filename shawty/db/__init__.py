"""Database module for the Shawty URL shortener."""
from shawty.db.base import (
    DatabaseConnectionError,
    connect_with_retry,
    get_collection,
    mongo_client,
)

__all__ = [
    "DatabaseConnectionError",
    "connect_with_retry",
    "get_collection",
    "mongo_client",
]

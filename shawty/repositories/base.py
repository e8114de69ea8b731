"""Base repository definitions for the Shawty URL shortener.

This module provides the repository error taxonomy and the abstract
URLRepository contract that concrete stores implement.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Optional, TypeVar

from shawty.models.url import URLRecord

T = TypeVar("T")


class RepositoryError(Exception):
    """Base exception for repository errors.

    Raised as-is for transport or backing-store failures.
    """
    pass


class EntityNotFoundError(RepositoryError):
    """Exception raised when an entity cannot be found."""

    def __init__(self, entity_id: Any):
        self.entity_id = entity_id
        super().__init__(f"URL with id '{entity_id}' not found")


class DuplicateEntityError(RepositoryError):
    """Exception raised when a unique constraint is violated."""

    def __init__(self, field_name: str, value: Any):
        self.field_name = field_name
        self.value = value
        super().__init__(f"URL with {field_name}={value} already exists")


class OperationCancelledError(RepositoryError):
    """Exception raised when a store operation exceeds its deadline."""

    def __init__(self, operation: str, timeout: float):
        self.operation = operation
        self.timeout = timeout
        super().__init__(f"{operation} cancelled after {timeout:.2f}s deadline")


async def run_with_deadline(
    operation: str,
    awaitable: Awaitable[T],
    timeout: Optional[float],
) -> T:
    """
    Await an operation, aborting it once the deadline elapses.

    Args:
        operation: Name of the operation, used in the error message
        awaitable: The store call to run
        timeout: Deadline in seconds, or None for no deadline

    Raises:
        OperationCancelledError: If the deadline elapsed
    """
    if timeout is None:
        return await awaitable
    try:
        return await asyncio.wait_for(awaitable, timeout)
    except asyncio.TimeoutError as e:
        raise OperationCancelledError(operation, timeout) from e


class URLRepository(ABC):
    """
    Durable, unique-keyed storage of URL records.

    Implementations must be safe for concurrent use by many request
    handlers, must not retry, and must keep DuplicateEntityError and
    EntityNotFoundError distinguishable from plain RepositoryError.
    Every operation takes an optional timeout overriding the default.
    """

    @abstractmethod
    async def save(self, record: URLRecord, timeout: Optional[float] = None) -> None:
        """
        Insert a record.

        Raises:
            DuplicateEntityError: If a record with the same id exists
            OperationCancelledError: If the deadline elapsed
            RepositoryError: On other store errors
        """

    @abstractmethod
    async def get_by_id(self, short_id: str, timeout: Optional[float] = None) -> URLRecord:
        """
        Exact-match lookup by short identifier.

        Raises:
            EntityNotFoundError: If no record has this id
            OperationCancelledError: If the deadline elapsed
            RepositoryError: On other store errors
        """

    @abstractmethod
    async def ensure_indexes(self, timeout: Optional[float] = None) -> None:
        """Create any secondary indexes. Called once at startup."""

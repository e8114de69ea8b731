"""URL Repository for the Shawty URL shortener.

This module provides the MongoDB implementation of the URLRepository
contract. Records live in a single collection keyed by ``_id``.
"""

from typing import Optional

from loguru import logger
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import DuplicateKeyError, PyMongoError

from shawty.models.url import URLRecord
from shawty.repositories.base import (
    DuplicateEntityError,
    EntityNotFoundError,
    RepositoryError,
    URLRepository,
    run_with_deadline,
)


class MongoURLRepository(URLRepository):
    """
    Repository for URLRecord documents stored in MongoDB.

    Uniqueness relies on the implicit unique index on ``_id``, so two
    concurrent inserts of the same id yield one success and one
    DuplicateEntityError without any locking here.
    """

    def __init__(self, collection: AsyncCollection, operation_timeout: Optional[float] = None):
        """
        Initialize the repository.

        Args:
            collection: The MongoDB collection holding URL records
            operation_timeout: Default deadline in seconds for each operation
        """
        self.collection = collection
        self.operation_timeout = operation_timeout

    def _deadline(self, timeout: Optional[float]) -> Optional[float]:
        return self.operation_timeout if timeout is None else timeout

    async def save(self, record: URLRecord, timeout: Optional[float] = None) -> None:
        """
        Insert a new URL record.

        Args:
            record: The record to insert
            timeout: Optional deadline overriding the default

        Raises:
            DuplicateEntityError: If the id already exists
            OperationCancelledError: If the deadline elapsed
            RepositoryError: On other database errors
        """
        try:
            await run_with_deadline(
                "save",
                self.collection.insert_one(record.to_document()),
                self._deadline(timeout),
            )
        except DuplicateKeyError as e:
            raise DuplicateEntityError("id", record.id) from e
        except PyMongoError as e:
            raise RepositoryError(f"Failed to insert URL into MongoDB: {e}") from e

    async def get_by_id(self, short_id: str, timeout: Optional[float] = None) -> URLRecord:
        """
        Find a URL record by its short identifier.

        Args:
            short_id: The short identifier (``_id``) to look up
            timeout: Optional deadline overriding the default

        Returns:
            The matching URLRecord

        Raises:
            EntityNotFoundError: If no record has this id
            OperationCancelledError: If the deadline elapsed
            RepositoryError: On other database errors
        """
        try:
            document = await run_with_deadline(
                "get_by_id",
                self.collection.find_one({"_id": short_id}),
                self._deadline(timeout),
            )
        except PyMongoError as e:
            raise RepositoryError(f"Error retrieving URL from MongoDB: {e}") from e

        if document is None:
            raise EntityNotFoundError(short_id)
        return URLRecord.from_document(document)

    async def ensure_indexes(self, timeout: Optional[float] = None) -> None:
        """
        Ensure the indexes the collection needs.

        MongoDB always keeps a unique index on ``_id``, which is the only
        index lookups use, so nothing is created here.
        """
        logger.info(
            "MongoDB maintains the unique index on _id for collection '{}'; no extra indexes required",
            self.collection.name,
        )

"""URL shortening service for the Shawty URL shortener.

This module contains the ShortenedURLService class which derives short
identifiers and reconciles inserts against the store's uniqueness constraint.
"""

import hashlib

from shawty.models.url import URLRecord
from shawty.repositories.base import (
    DuplicateEntityError,
    EntityNotFoundError,
    OperationCancelledError,
    RepositoryError,
    URLRepository,
)
from shawty.services.exceptions import (
    HashCollisionError,
    InvalidURLError,
    ReconciliationError,
    RequestCancelledError,
    URLCreationError,
    URLNotFoundError,
    URLRetrievalError,
)

SHORT_ID_LENGTH = 8


def generate_short_id(original_url: str) -> str:
    """
    Derive the short identifier for a URL.

    The identifier is the first 8 lowercase hex characters of the MD5
    digest of the URL's UTF-8 bytes, so identical inputs always map to
    the same identifier.

    Args:
        original_url: The URL to derive an identifier for

    Returns:
        str: An 8-character lowercase hex string
    """
    return hashlib.md5(original_url.encode("utf-8")).hexdigest()[:SHORT_ID_LENGTH]


class ShortenedURLService:
    """
    Service for URL shortening business logic.

    The service is stateless; the repository is its only collaborator.
    Instead of checking for an existing record before inserting, it
    inserts and reconciles a duplicate-key failure afterwards, which
    stays correct when identical URLs are submitted concurrently.
    """

    def __init__(self, url_repository: URLRepository):
        """
        Initialize the URL shortening service.

        Args:
            url_repository: Repository for URL data access
        """
        self.url_repository = url_repository

    async def create_short_url(self, original_url: str) -> URLRecord:
        """
        Create a shortened URL, or return the existing record for it.

        Args:
            original_url: The original URL to shorten

        Returns:
            URLRecord: The newly stored record, or the record already
            stored for this exact URL

        Raises:
            InvalidURLError: If the URL is empty
            HashCollisionError: If a different URL owns the derived identifier
            ReconciliationError: If the lookup after a duplicate insert failed
            RequestCancelledError: If a store deadline elapsed
            URLCreationError: If the insert failed for other reasons
        """
        if not original_url:
            raise InvalidURLError("original URL cannot be empty")

        short_id = generate_short_id(original_url)
        candidate = URLRecord.new(short_id, original_url)

        try:
            await self.url_repository.save(candidate)
            return candidate
        except DuplicateEntityError:
            pass
        except OperationCancelledError as e:
            raise RequestCancelledError(f"saving short ID '{short_id}' was cancelled: {e}") from e
        except RepositoryError as e:
            raise URLCreationError(f"failed to save URL: {e}") from e

        # The identifier is taken: either the same URL again or a collision
        try:
            existing = await self.url_repository.get_by_id(short_id)
        except OperationCancelledError as e:
            raise RequestCancelledError(
                f"reconciling short ID '{short_id}' was cancelled: {e}"
            ) from e
        except RepositoryError as e:
            raise ReconciliationError(
                f"error retrieving existing URL for short ID '{short_id}' "
                f"after duplicate detection: {e}"
            ) from e

        if existing.original_url == original_url:
            return existing
        raise HashCollisionError(short_id, original_url, existing.original_url)

    async def get_original_url(self, short_id: str) -> str:
        """
        Retrieve the original URL for a short identifier.

        Args:
            short_id: The short identifier to look up

        Returns:
            str: The original URL, verbatim as submitted

        Raises:
            InvalidURLError: If the identifier is empty
            URLNotFoundError: If no record has this identifier
            RequestCancelledError: If the store deadline elapsed
            URLRetrievalError: On other store errors
        """
        if not short_id:
            raise InvalidURLError("short ID cannot be empty")

        try:
            record = await self.url_repository.get_by_id(short_id)
        except EntityNotFoundError as e:
            raise URLNotFoundError(f"URL with ID '{short_id}' not found") from e
        except OperationCancelledError as e:
            raise RequestCancelledError(f"lookup of short ID '{short_id}' was cancelled: {e}") from e
        except RepositoryError as e:
            raise URLRetrievalError(f"error retrieving URL for short ID '{short_id}': {e}") from e

        return record.original_url

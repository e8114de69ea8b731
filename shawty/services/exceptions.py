"""Exceptions for the Shawty service layer.

This module contains the exception hierarchy for the service layer,
providing domain-specific exceptions that abstract underlying implementation details.
"""


class ServiceError(Exception):
    """Base exception for all service-level errors."""
    pass


class URLError(ServiceError):
    """Base exception for URL-related errors."""
    pass


class InvalidURLError(URLError):
    """The URL or short identifier is empty or otherwise unusable."""
    pass


class URLCreationError(URLError):
    """Error occurred during URL creation."""
    pass


class HashCollisionError(URLCreationError):
    """Two different original URLs derived the same short identifier."""

    def __init__(self, short_id: str, submitted_url: str, existing_url: str):
        self.short_id = short_id
        self.submitted_url = submitted_url
        self.existing_url = existing_url
        super().__init__(
            f"hash collision detected: short ID '{short_id}' generated for a different "
            f"original URL (submitted: '{submitted_url}', existing: '{existing_url}')"
        )


class ReconciliationError(URLCreationError):
    """The lookup following a duplicate insert failed."""
    pass


class URLNotFoundError(URLError):
    """URL with the specified short identifier was not found."""
    pass


class URLRetrievalError(URLError):
    """Error occurred while retrieving a URL."""
    pass


class RequestCancelledError(ServiceError):
    """A store operation was abandoned because its deadline elapsed."""
    pass

"""Test utilities for URL shortener tests."""

import asyncio
import random
import string
from typing import Dict, Optional

from shawty.models.url import URLRecord
from shawty.repositories.base import DuplicateEntityError, EntityNotFoundError, URLRepository


def random_string(length: int = 10) -> str:
    """Generate a random alphanumeric string."""
    return ''.join(random.choice(string.ascii_letters + string.digits) for _ in range(length))


def random_url() -> str:
    """Generate a random URL for testing."""
    domain = f"{random_string(8)}.com"
    path = random_string(12)
    return f"https://{domain}/{path}"


def create_test_record(
    short_id: Optional[str] = None,
    original_url: Optional[str] = None,
) -> URLRecord:
    """Build a URLRecord with random values for anything not given."""
    return URLRecord.new(
        short_id or random_string(8).lower(),
        original_url or random_url(),
    )


class InMemoryURLRepository(URLRepository):
    """
    Dict-backed URLRepository for tests.

    Inserts yield to the event loop before the uniqueness check so
    concurrent creates genuinely interleave.
    """

    def __init__(self):
        self.records: Dict[str, URLRecord] = {}
        self.save_calls = 0
        self._lock = asyncio.Lock()

    def seed(self, record: URLRecord) -> URLRecord:
        self.records[record.id] = record
        return record

    async def save(self, record: URLRecord, timeout: Optional[float] = None) -> None:
        self.save_calls += 1
        await asyncio.sleep(0)
        async with self._lock:
            if record.id in self.records:
                raise DuplicateEntityError("id", record.id)
            self.records[record.id] = record

    async def get_by_id(self, short_id: str, timeout: Optional[float] = None) -> URLRecord:
        await asyncio.sleep(0)
        try:
            return self.records[short_id]
        except KeyError:
            raise EntityNotFoundError(short_id)

    async def ensure_indexes(self, timeout: Optional[float] = None) -> None:
        pass

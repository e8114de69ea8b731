"""Database base configuration for MongoDB.

This module provides the MongoDB client lifecycle:
- Client construction from settings
- Connection retry with exponential backoff
- Scoped acquisition with guaranteed release
"""

import asyncio
import random
from contextlib import asynccontextmanager
from datetime import timezone
from typing import AsyncIterator

from loguru import logger
from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import PyMongoError

from shawty.core.config import Settings


class DatabaseConnectionError(Exception):
    """Raised when the store cannot be reached during startup."""
    pass


def create_client(settings: Settings) -> AsyncMongoClient:
    """Create a MongoDB client configured from settings.

    The client connects lazily; ``ping`` forces the first round trip.
    """
    timeout_ms = int(settings.MONGO_CONNECT_TIMEOUT * 1000)
    return AsyncMongoClient(
        settings.MONGO_URI,
        tz_aware=True,
        tzinfo=timezone.utc,
        connectTimeoutMS=timeout_ms,
        serverSelectionTimeoutMS=timeout_ms,
        appname=settings.APP_NAME,
    )


async def ping(client: AsyncMongoClient, timeout: float) -> None:
    """Round-trip a ping command within the given deadline."""
    await asyncio.wait_for(client.admin.command("ping"), timeout)


def backoff_delay(attempt: int, settings: Settings) -> float:
    """Exponential backoff with jitter for the given 1-based attempt."""
    delay = min(
        settings.MONGO_CONNECT_RETRY_INITIAL_DELAY * (2 ** (attempt - 1)),
        settings.MONGO_CONNECT_RETRY_MAX_DELAY,
    )
    jitter = delay * settings.MONGO_CONNECT_RETRY_JITTER
    return max(0.0, delay + random.uniform(-jitter, jitter)) if jitter > 0 else delay


async def connect_with_retry(settings: Settings) -> AsyncMongoClient:
    """Connect to MongoDB, retrying with exponential backoff.

    Each failed attempt closes its client before the next one starts.

    Returns:
        AsyncMongoClient: A client that answered a ping

    Raises:
        DatabaseConnectionError: If every attempt failed
    """
    max_attempts = settings.MONGO_CONNECT_RETRY_ATTEMPTS
    logger.info("Connecting to MongoDB at {} (max attempts: {})", settings.mongo_hosts(), max_attempts)

    last_error: Exception = DatabaseConnectionError("no connection attempt made")
    for attempt in range(1, max_attempts + 1):
        client = create_client(settings)
        try:
            await ping(client, settings.MONGO_PING_TIMEOUT)
        except (PyMongoError, asyncio.TimeoutError) as e:
            last_error = e
            await _close_quietly(client)
            if attempt < max_attempts:
                backoff_time = backoff_delay(attempt, settings)
                logger.warning(
                    "MongoDB connection attempt {}/{} failed: {}. Retrying in {:.2f} seconds...",
                    attempt, max_attempts, e, backoff_time,
                )
                await asyncio.sleep(backoff_time)
            continue
        except BaseException:
            await _close_quietly(client)
            raise

        logger.info("Successfully connected to MongoDB on attempt {}", attempt)
        return client

    logger.error("Failed to connect to MongoDB after {} attempts. Last error: {}", max_attempts, last_error)
    raise DatabaseConnectionError(
        f"failed to ping MongoDB after {max_attempts} attempts: {last_error}"
    ) from last_error


async def _close_quietly(client: AsyncMongoClient) -> None:
    try:
        await client.close()
    except PyMongoError as e:
        logger.error("Failed to disconnect client after ping failure: {}", e)


@asynccontextmanager
async def mongo_client(settings: Settings) -> AsyncIterator[AsyncMongoClient]:
    """Scoped MongoDB client: connected on entry, closed on every exit path.

    Example:
        ```python
        async with mongo_client(settings) as client:
            collection = get_collection(client, settings)
        ```
    """
    client = await connect_with_retry(settings)
    try:
        yield client
    finally:
        logger.info("Disconnecting from MongoDB")
        await client.close()
        logger.info("Disconnected from MongoDB")


def get_collection(client: AsyncMongoClient, settings: Settings) -> AsyncCollection:
    """Resolve the configured URL collection."""
    return client[settings.MONGO_DB_NAME][settings.MONGO_COLLECTION_NAME]


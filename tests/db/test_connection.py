"""Tests for MongoDB connection bootstrap."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from shawty.db.base import (
    DatabaseConnectionError,
    backoff_delay,
    connect_with_retry,
    get_collection,
    mongo_client,
)


def make_client(ping_error=None):
    """Build a mock AsyncMongoClient whose ping succeeds or fails."""
    client = MagicMock()
    client.admin.command = AsyncMock(return_value={"ok": 1.0}, side_effect=ping_error)
    client.close = AsyncMock()
    return client


@pytest.mark.db
class TestConnectWithRetry:
    """Tests for connect_with_retry and the scoped client."""

    @pytest.mark.asyncio
    async def test_connects_on_first_attempt(self, settings):
        client = make_client()

        with patch("shawty.db.base.AsyncMongoClient", return_value=client) as client_cls:
            connected = await connect_with_retry(settings)

        assert connected is client
        client_cls.assert_called_once()
        assert client_cls.call_args.args[0] == settings.MONGO_URI
        client.admin.command.assert_awaited_once_with("ping")
        client.close.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self, settings):
        bad = make_client(ServerSelectionTimeoutError("down"))
        good = make_client()

        with patch("shawty.db.base.AsyncMongoClient", side_effect=[bad, good]):
            connected = await connect_with_retry(settings)

        assert connected is good
        bad.close.assert_awaited_once()
        good.close.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_ping_failure_releases_every_client(self, settings):
        clients = [make_client(ServerSelectionTimeoutError("down")) for _ in range(3)]

        with patch("shawty.db.base.AsyncMongoClient", side_effect=clients):
            with pytest.raises(DatabaseConnectionError) as excinfo:
                await connect_with_retry(settings)

        assert "3 attempts" in str(excinfo.value)
        assert isinstance(excinfo.value.__cause__, ServerSelectionTimeoutError)
        for client in clients:
            client.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_ping_deadline(self, settings):
        async def hang(*args, **kwargs):
            await asyncio.sleep(10)

        settings = settings.model_copy(update={"MONGO_PING_TIMEOUT": 0.05, "MONGO_CONNECT_RETRY_ATTEMPTS": 1})
        client = make_client()
        client.admin.command = AsyncMock(side_effect=hang)

        with patch("shawty.db.base.AsyncMongoClient", return_value=client):
            with pytest.raises(DatabaseConnectionError):
                await connect_with_retry(settings)

        client.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_scoped_client_is_closed_on_exit(self, settings):
        client = make_client()

        with patch("shawty.db.base.AsyncMongoClient", return_value=client):
            async with mongo_client(settings) as scoped:
                assert scoped is client
                client.close.assert_not_awaited()

        client.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_scoped_client_is_closed_on_error(self, settings):
        client = make_client()

        with patch("shawty.db.base.AsyncMongoClient", return_value=client):
            with pytest.raises(RuntimeError):
                async with mongo_client(settings):
                    raise RuntimeError("boom")

        client.close.assert_awaited_once()


@pytest.mark.db
class TestHelpers:

    def test_backoff_grows_and_caps(self, settings):
        settings = settings.model_copy(update={
            "MONGO_CONNECT_RETRY_INITIAL_DELAY": 1.0,
            "MONGO_CONNECT_RETRY_MAX_DELAY": 3.0,
            "MONGO_CONNECT_RETRY_JITTER": 0.0,
        })

        assert [backoff_delay(n, settings) for n in (1, 2, 3, 4)] == [1.0, 2.0, 3.0, 3.0]

    def test_backoff_jitter_bounds(self, settings):
        settings = settings.model_copy(update={
            "MONGO_CONNECT_RETRY_INITIAL_DELAY": 1.0,
            "MONGO_CONNECT_RETRY_MAX_DELAY": 10.0,
            "MONGO_CONNECT_RETRY_JITTER": 0.1,
        })

        for _ in range(20):
            assert 0.9 <= backoff_delay(1, settings) <= 1.1

    def test_get_collection(self, settings):
        client = MagicMock()

        get_collection(client, settings)

        client.__getitem__.assert_called_once_with("shawtydb")
        client.__getitem__.return_value.__getitem__.assert_called_once_with("urls")

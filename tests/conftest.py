"""Test fixtures for the URL shortener application."""

from typing import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from shawty.core.config import EnvironmentType, Settings
from shawty.main import create_app
from tests.utils import InMemoryURLRepository

TEST_MONGO_URI = "mongodb://localhost:27017"


@pytest.fixture
def settings() -> Settings:
    """Settings for tests, independent of any .env file."""
    return Settings(
        _env_file=None,
        ENVIRONMENT=EnvironmentType.TESTING,
        DEBUG=False,
        MONGO_URI=TEST_MONGO_URI,
        CORS_ALLOWED_ORIGIN="http://localhost:3000",
        CORS_ALLOWED_METHODS=["POST", "GET", "OPTIONS", "PUT", "DELETE"],
        CORS_ALLOWED_HEADERS=["Accept", "Content-Type"],
        MONGO_CONNECT_RETRY_ATTEMPTS=3,
        MONGO_CONNECT_RETRY_INITIAL_DELAY=0.001,
        MONGO_CONNECT_RETRY_MAX_DELAY=0.01,
        MONGO_CONNECT_RETRY_JITTER=0.0,
        REQUEST_LOGGING_ENABLED=False,
    )


@pytest.fixture
def url_repository() -> InMemoryURLRepository:
    """Return an empty in-memory URL repository."""
    return InMemoryURLRepository()


@pytest.fixture
def test_app(settings, url_repository) -> FastAPI:
    """Create FastAPI test app serving from the in-memory repository."""
    return create_app(settings, url_repository)


@pytest.fixture
def client(test_app) -> Generator[TestClient, None, None]:
    """Return FastAPI TestClient instance."""
    with TestClient(test_app) as test_client:
        yield test_client

"""Application configuration module.

This module contains settings for the Shawty URL shortener,
loaded from environment variables with appropriate defaults.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import Any, Dict, List, Union
from urllib.parse import urlsplit

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentType(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """Application settings loaded from environment variables with defaults.

    Settings are loaded from environment variables, with fallback to
    values in .env file if present, and finally to the default values
    specified here. MONGO_URI has no default and must be provided.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment setting
    ENVIRONMENT: EnvironmentType = EnvironmentType.DEVELOPMENT

    # App Information
    APP_NAME: str = "Shawty URL Shortener"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    SERVER_READ_TIMEOUT: float = 5.0
    SERVER_WRITE_TIMEOUT: float = 10.0
    SERVER_IDLE_TIMEOUT: int = 120
    SERVER_SHUTDOWN_TIMEOUT: int = 5

    # MongoDB settings
    MONGO_URI: str
    MONGO_DB_NAME: str = "shawtydb"
    MONGO_COLLECTION_NAME: str = "urls"
    MONGO_CONNECT_TIMEOUT: float = 10.0
    MONGO_PING_TIMEOUT: float = 5.0

    # Connection resilience settings
    MONGO_CONNECT_RETRY_ATTEMPTS: int = 3
    MONGO_CONNECT_RETRY_INITIAL_DELAY: float = 1.0
    MONGO_CONNECT_RETRY_MAX_DELAY: float = 10.0
    MONGO_CONNECT_RETRY_JITTER: float = 0.1  # Jitter factor (0.0-1.0)

    # Deadline handed to every store operation
    STORE_OPERATION_TIMEOUT: float = 10.0

    # CORS settings
    CORS_ALLOWED_ORIGIN: str = "http://localhost:3000"
    CORS_ALLOWED_METHODS: Union[List[str], str] = ["POST", "GET", "OPTIONS", "PUT", "DELETE"]
    CORS_ALLOWED_HEADERS: Union[List[str], str] = [
        "Accept",
        "Content-Type",
        "Content-Length",
        "Accept-Encoding",
        "X-CSRF-Token",
        "Authorization",
    ]

    # Logging configuration
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {name}:{line} | {message}"
    LOG_JSON: bool = False
    LOG_TO_FILE: bool = False
    LOG_DIR: str = "logs"
    LOG_FILENAME: str = "shawty.log"
    LOG_ROTATION: str = "10 MB"
    LOG_RETENTION: str = "7 days"
    REQUEST_LOGGING_ENABLED: bool = False

    @field_validator("MONGO_URI")
    def validate_mongo_uri(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("MONGO_URI environment variable is required")
        return v.strip()

    @field_validator("MONGO_CONNECT_RETRY_ATTEMPTS")
    def validate_retry_attempts(cls, v: int) -> int:
        if v < 1:
            raise ValueError("MONGO_CONNECT_RETRY_ATTEMPTS must be at least 1")
        return v

    @field_validator("CORS_ALLOWED_METHODS", "CORS_ALLOWED_HEADERS")
    def validate_list_or_string(cls, v: Union[List[str], str]) -> List[str]:
        """Convert comma-separated string to list if needed."""
        if isinstance(v, str):
            if not v.strip():
                return []
            return [item.strip() for item in v.split(",")]
        return v

    def mongo_hosts(self) -> str:
        """Return the host list of MONGO_URI without credentials."""
        netloc = urlsplit(self.MONGO_URI).netloc
        return netloc.rpartition("@")[2] or "<unknown>"

    def safe_summary(self) -> Dict[str, Any]:
        """Non-secret configuration suitable for the startup log."""
        return {
            "environment": self.ENVIRONMENT.value,
            "mongo_hosts": self.mongo_hosts(),
            "mongo_db": self.MONGO_DB_NAME,
            "mongo_collection": self.MONGO_COLLECTION_NAME,
            "port": self.PORT,
            "cors_origin": self.CORS_ALLOWED_ORIGIN,
            "store_timeout": self.STORE_OPERATION_TIMEOUT,
        }


@lru_cache()
def get_settings() -> Settings:
    """
    Get the settings instance (singleton).

    Raises:
        pydantic.ValidationError: If required settings are missing or invalid
    """
    return Settings()

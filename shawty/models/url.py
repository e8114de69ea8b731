"""URL shortener data models.

This module defines the URLRecord model, one persisted mapping from a short
identifier to the original URL it was derived from.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_now() -> datetime:
    """Current UTC time truncated to millisecond precision.

    BSON dates carry milliseconds, so a record read back from the store
    compares equal to the one that was written.
    """
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


class URLRecord(BaseModel):
    """
    Persisted mapping between a short identifier and an original URL.

    The identifier doubles as the primary key, and short_url always
    equals id. Records are created once and never mutated.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Short identifier, also the primary key")
    original_url: str = Field(
        min_length=1,
        description="The original (long) URL, stored verbatim"
    )
    short_url: str = Field(description="Short identifier, always equal to id")
    creation_date: datetime = Field(
        default_factory=utc_now,
        description="UTC timestamp set at insert time"
    )

    @field_validator("creation_date")
    def ensure_utc(cls, v: datetime) -> datetime:
        # Naive datetimes coming back from the driver are UTC
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    @classmethod
    def new(cls, short_id: str, original_url: str) -> "URLRecord":
        """Build a candidate record stamped with the current UTC time."""
        return cls(
            id=short_id,
            original_url=original_url,
            short_url=short_id,
            creation_date=utc_now(),
        )

    def to_document(self) -> Dict[str, Any]:
        """Serialize to the persisted document layout."""
        return {
            "_id": self.id,
            "original_url": self.original_url,
            "short_url": self.short_url,
            "creation_date": self.creation_date,
        }

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "URLRecord":
        """Build a record from a persisted document."""
        return cls(
            id=document["_id"],
            original_url=document["original_url"],
            short_url=document.get("short_url", document["_id"]),
            creation_date=document["creation_date"],
        )

    def creation_date_rfc3339(self) -> str:
        """Creation date as an RFC 3339 timestamp with second precision."""
        return self.creation_date.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

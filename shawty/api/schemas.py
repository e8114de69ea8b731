"""API request and response schemas.

This module contains Pydantic models for API request validation
and response serialization.
"""

from pydantic import BaseModel, Field, field_validator


class ShortenURLRequest(BaseModel):
    """Request schema for creating a shortened URL.

    Unknown fields are ignored. A missing url is treated as empty.
    """
    url: str = Field(default="", description="The original URL to shorten")

    @field_validator("url", mode="before")
    def replace_lone_surrogates(cls, v):
        """JSON may escape unpaired surrogates; store and hash U+FFFD instead."""
        if not isinstance(v, str):
            return v
        return v.encode("utf-16", "surrogatepass").decode("utf-16", "replace")


class ShortenURLResponse(BaseModel):
    """Response schema for a successful shortening."""
    short_url: str = Field(description="Absolute short URL, <scheme>://<host>/r/<id>")
    original_url: str
    creation_date: str = Field(description="RFC 3339 creation timestamp")

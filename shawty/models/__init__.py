"""
Data models for the Shawty URL shortener.
"""

from shawty.models.url import URLRecord, utc_now

__all__ = ["URLRecord", "utc_now"]

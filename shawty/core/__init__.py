"""Core module for the Shawty URL shortener."""

from shawty.core.config import Settings, get_settings
from shawty.core.logging import setup_logging

__all__ = ["Settings", "get_settings", "setup_logging"]

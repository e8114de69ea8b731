"""Shawty URL shortener.

A small HTTP service that shortens URLs into deterministic 8-character
identifiers stored in MongoDB and redirects them back.
"""

__version__ = "0.1.0"

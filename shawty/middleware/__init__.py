"""HTTP middleware for the Shawty URL shortener."""

from shawty.middleware.cors import CORSHeadersMiddleware, cors_headers
from shawty.middleware.disconnect import ClientDisconnectMiddleware
from shawty.middleware.logging import RequestLoggingMiddleware
from shawty.middleware.timeout import TimeoutMiddleware

__all__ = [
    "CORSHeadersMiddleware",
    "ClientDisconnectMiddleware",
    "RequestLoggingMiddleware",
    "TimeoutMiddleware",
    "cors_headers",
]

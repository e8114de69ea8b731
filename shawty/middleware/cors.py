"""CORS headers middleware.

Every response carries the configured Allow-Origin, Allow-Methods and
Allow-Headers values; preflight requests are answered directly.
"""

from typing import Callable, Dict, List

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp


def cors_headers(allow_origin: str, allow_methods: List[str], allow_headers: List[str]) -> Dict[str, str]:
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Methods": ", ".join(allow_methods),
        "Access-Control-Allow-Headers": ", ".join(allow_headers),
    }


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """Attach fixed CORS headers and short-circuit OPTIONS with an empty 200."""

    def __init__(
        self,
        app: ASGIApp,
        allow_origin: str,
        allow_methods: List[str],
        allow_headers: List[str],
    ):
        super().__init__(app)
        self.cors_headers = cors_headers(allow_origin, allow_methods, allow_headers)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.method == "OPTIONS":
            response = Response(status_code=200)
        else:
            response = await call_next(request)

        response.headers.update(self.cors_headers)
        return response

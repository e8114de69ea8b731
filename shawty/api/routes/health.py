"""Liveness endpoint."""

from fastapi import APIRouter, status
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["health"])

BANNER = "Hello from Shawty URL Shortener!"


@router.get(
    "/",
    response_class=PlainTextResponse,
    status_code=status.HTTP_200_OK,
    summary="Liveness probe",
)
async def home():
    """Simple check that application is running."""
    return BANNER

"""URL redirection endpoint."""

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from starlette.responses import RedirectResponse

from shawty.api.dependencies import get_shortener_service
from shawty.services.exceptions import (
    InvalidURLError,
    RequestCancelledError,
    ServiceError,
    URLNotFoundError,
)
from shawty.services.shortener import ShortenedURLService

router = APIRouter(tags=["redirect"])


def ensure_scheme(url: str) -> str:
    """Prefix http:// when the stored URL has neither an http nor https scheme."""
    if url.startswith("http://") or url.startswith("https://"):
        return url
    return "http://" + url


@router.get(
    "/r/{short_id:path}",
    response_class=RedirectResponse,
    status_code=status.HTTP_302_FOUND,
)
async def redirect_to_original_url(
    short_id: str,
    shortener_service: ShortenedURLService = Depends(get_shortener_service),
):
    """Redirect to the original URL."""
    if not short_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Short URL ID is missing in the path"
        )

    try:
        original_url = await shortener_service.get_original_url(short_id)
    except InvalidURLError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except URLNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Short URL '{short_id}' not found"
        )
    except RequestCancelledError as e:
        logger.debug("Redirect for '{}' abandoned: {}", short_id, e)
        raise HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail="Request timed out")
    except ServiceError as e:
        logger.error("Error retrieving original URL for short ID '{}': {}", short_id, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error retrieving URL"
        )

    return RedirectResponse(url=ensure_scheme(original_url), status_code=status.HTTP_302_FOUND)

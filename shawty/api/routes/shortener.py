"""URL shortening endpoint."""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from loguru import logger

from shawty.api import schemas
from shawty.api.dependencies import build_short_url, get_shortener_service
from shawty.repositories.base import DuplicateEntityError
from shawty.services.exceptions import (
    HashCollisionError,
    InvalidURLError,
    RequestCancelledError,
    ServiceError,
)
from shawty.services.shortener import ShortenedURLService

router = APIRouter(tags=["shortener"])

PLAIN_TEXT_ERROR = {"content": {"text/plain": {}}}


@router.post(
    "/shorten",
    response_model=schemas.ShortenURLResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {**PLAIN_TEXT_ERROR, "description": "Malformed body or empty URL"},
        409: {**PLAIN_TEXT_ERROR, "description": "Hash collision with a different URL"},
        500: {**PLAIN_TEXT_ERROR, "description": "Store failure"},
    }
)
async def shorten_url(
    request: Request,
    url_data: schemas.ShortenURLRequest,
    shortener_service: ShortenedURLService = Depends(get_shortener_service),
):
    """Create a short URL for {"url": "..."}; resubmitting a URL returns the same record."""
    if not url_data.url:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="URL field is missing or empty in request body"
        )

    try:
        record = await shortener_service.create_short_url(url_data.url)
    except InvalidURLError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except HashCollisionError as e:
        logger.warning("Error creating short URL for '{}': {}", url_data.url, e)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Failed to create short URL due to a hash collision. "
                   "Please try again or modify the URL slightly."
        )
    except DuplicateEntityError as e:
        logger.error("Error creating short URL for '{}': {}", url_data.url, e)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="This URL may have already been shortened or a conflict occurred."
        )
    except RequestCancelledError as e:
        logger.debug("Create for '{}' abandoned: {}", url_data.url, e)
        raise HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail="Request timed out")
    except ServiceError as e:
        logger.error("Error creating short URL for '{}': {}", url_data.url, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create short URL"
        )

    return schemas.ShortenURLResponse(
        short_url=build_short_url(request, record.short_url),
        original_url=record.original_url,
        creation_date=record.creation_date_rfc3339(),
    )

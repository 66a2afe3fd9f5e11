import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from imagegen.adapters.image.factory import create_image_client
from imagegen.adapters.rate_limit.base import RateLimitResult
from imagegen.core.config import settings
from imagegen.core.errors import (
    ImageProviderAppError,
    ProviderAuthenticationAppError,
    ValidationAppError,
)
from imagegen.core.rate_limit import current_quota, enforce_rate_limit
from imagegen.schemas.image import (
    ImageGenerationRequest,
    ImageGenerationResponse,
    QuotaResponse,
)
from imagegen.services.generation_service import ImageGenerationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Images"])

# Provider client is built once at import; a missing IMAGE_API_KEY fails startup.
_image_client = create_image_client()
_generation_service = ImageGenerationService(image_client=_image_client)


@router.post(
    "/images/generate",
    response_model=ImageGenerationResponse,
)
async def generate_image(
    body: ImageGenerationRequest,
    admission: Annotated[RateLimitResult | None, Depends(enforce_rate_limit)],
) -> ImageGenerationResponse:
    """Generate an image from a text prompt.

    The caller is admitted (or rejected with 429) before the prompt is looked
    at, so an admitted request consumes one generation even if it then fails
    validation or the provider call.

    Raises:
        HTTPException: 400 invalid prompt/size, 401 provider key rejected,
            429 quota exhausted, 500 provider or unexpected failure.
    """
    remaining = admission.remaining if admission is not None else None

    try:
        return await _generation_service.generate(
            body.prompt,
            body.size,
            remaining=remaining,
        )
    except ValidationAppError as exc:
        raise HTTPException(status_code=400, detail=exc.message)
    except ProviderAuthenticationAppError as exc:
        logger.error("image.generate.provider_auth_failed", extra={"error_code": exc.code})
        raise HTTPException(status_code=401, detail=exc.message)
    except ImageProviderAppError as exc:
        logger.error(
            "image.generate.provider_failed",
            extra={"error_code": exc.code, "error_message": exc.message},
        )
        raise HTTPException(status_code=500, detail=exc.message)
    except Exception as exc:
        logger.exception("image.generate.unexpected_error")
        raise HTTPException(
            status_code=500,
            detail="Failed to generate image. Please try again later.",
        ) from exc


@router.get("/images/quota", response_model=QuotaResponse)
async def get_quota(
    quota: Annotated[RateLimitResult, Depends(current_quota)],
) -> QuotaResponse:
    """Report how many generations the caller has left, without consuming any."""

    return QuotaResponse(
        limit=quota.limit,
        remaining=quota.remaining,
        window_seconds=settings.app.rate_limit_window_seconds,
        reset_at=quota.reset_at,
    )

"""Image generation service orchestrating validation and the provider call.

Admission control happens before this service is reached (see
``imagegen.core.rate_limit``); the service itself is stateless.
"""

from __future__ import annotations

import logging
import time

from imagegen.adapters.image.base import AbstractImageClient
from imagegen.core.config import settings
from imagegen.core.errors import ValidationAppError
from imagegen.schemas.image import ImageGenerationResponse

logger = logging.getLogger(__name__)

DEFAULT_DIMENSION = 1024

SUPPORTED_SIZES: frozenset[tuple[int, int]] = frozenset(
    {
        (1024, 1024),
        (1024, 1792),
        (1792, 1024),
    }
)


def _parse_dimension(raw: str) -> int:
    try:
        value = int(raw.strip())
    except ValueError:
        return DEFAULT_DIMENSION
    return value if value > 0 else DEFAULT_DIMENSION


def parse_size(size: str | None) -> tuple[int, int]:
    """Parse a ``WIDTHxHEIGHT`` string.

    Missing, non-numeric or non-positive components fall back to 1024.

    Examples:
        >>> parse_size("1792x1024")
        (1792, 1024)
        >>> parse_size("bogus")
        (1024, 1024)
        >>> parse_size("1024x")
        (1024, 1024)
    """
    parts = (size or "").lower().split("x")
    width = _parse_dimension(parts[0])
    height = _parse_dimension(parts[1]) if len(parts) > 1 else DEFAULT_DIMENSION
    return width, height


class ImageGenerationService:
    """Service turning a prompt into a generated image.

    Attributes:
        image_client: Provider adapter producing base64 image payloads.
    """

    def __init__(self, image_client: AbstractImageClient) -> None:
        self.image_client = image_client

    def _validate_prompt(self, prompt: str | None) -> str:
        """Return the trimmed prompt or raise when it is unusable.

        Raises:
            ValidationAppError: If the prompt is blank or too long.
        """
        prompt = (prompt or "").strip()
        if not prompt:
            raise ValidationAppError(
                code="prompt_required",
                message="Prompt is required",
            )

        max_chars = settings.app.max_prompt_chars
        if len(prompt) > max_chars:
            raise ValidationAppError(
                code="prompt_too_long",
                message=f"Prompt is too long (maximum {max_chars} characters).",
                details={"max_value": max_chars, "actual_value": len(prompt)},
            )
        return prompt

    def _validate_size(self, size: str | None) -> tuple[int, int]:
        width, height = parse_size(size)
        if (width, height) not in SUPPORTED_SIZES:
            supported = ", ".join(f"{w}x{h}" for w, h in sorted(SUPPORTED_SIZES))
            raise ValidationAppError(
                code="unsupported_size",
                message=f"Unsupported image size {width}x{height}. Supported sizes: {supported}",
            )
        return width, height

    async def generate(
        self,
        prompt: str | None,
        size: str | None = "1024x1024",
        *,
        remaining: int | None = None,
    ) -> ImageGenerationResponse:
        """Validate inputs, call the provider and build the API response.

        Args:
            prompt: User prompt.
            size: Requested ``WIDTHxHEIGHT``.
            remaining: Caller's quota after admission, echoed in the response.

        Returns:
            ImageGenerationResponse with the base64 image.

        Raises:
            ValidationAppError: If the prompt or size is invalid.
            ImageProviderAppError: If the provider call fails.
        """
        prompt = self._validate_prompt(prompt)
        width, height = self._validate_size(size)

        start = time.perf_counter()
        image = await self.image_client.generate_image(prompt, width=width, height=height)

        logger.info(
            "image.generate.success",
            extra={
                "model": image.model,
                "width": width,
                "height": height,
                "prompt_chars": len(prompt),
                "duration_ms": round((time.perf_counter() - start) * 1000, 2),
            },
        )

        return ImageGenerationResponse(
            image_b64=image.b64_json,
            media_type=image.media_type,
            size=f"{width}x{height}",
            remaining=remaining,
        )

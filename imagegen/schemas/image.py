"""Pydantic schemas for image generation requests and responses."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ImageGenerationRequest(BaseModel):
    """Body of ``POST /v1/images/generate``."""

    prompt: str = Field(
        "",
        description="Text description of the image to generate.",
    )
    size: str = Field(
        "1024x1024",
        description="Requested size as WIDTHxHEIGHT: 1024x1024, 1024x1792 or 1792x1024.",
    )


class ImageGenerationResponse(BaseModel):
    """Generated image with the caller's remaining quota."""

    image_b64: str = Field(
        ...,
        description="Base64-encoded image bytes.",
    )
    media_type: str = Field(
        "image/webp",
        description="MIME type of the decoded image.",
    )
    size: str = Field(
        ...,
        description="Effective size as WIDTHxHEIGHT.",
    )
    remaining: int | None = Field(
        default=None,
        description="Generations left in the current window (null when rate limiting is disabled).",
    )


class QuotaResponse(BaseModel):
    """Read-only view of the caller's generation quota."""

    limit: int = Field(..., description="Generations allowed per window.")
    remaining: int = Field(..., description="Generations left in the current window.")
    window_seconds: int = Field(..., description="Length of the trailing window in seconds.")
    reset_at: int | None = Field(
        default=None,
        description="UNIX time when the oldest counted generation leaves the window.",
    )

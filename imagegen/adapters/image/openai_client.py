"""OpenAI-compatible image generation client adapter."""

import logging
from typing import Any

from openai import APIStatusError, AsyncOpenAI, AuthenticationError, OpenAIError

from imagegen.adapters.image.base import AbstractImageClient, GeneratedImage
from imagegen.core.errors import ImageProviderAppError, ProviderAuthenticationAppError

logger = logging.getLogger(__name__)

_MEDIA_TYPES = {
    "webp": "image/webp",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
}


class OpenAIImageClient(AbstractImageClient):
    """Client for an OpenAI-compatible ``images.generate`` endpoint.

    Uses the official OpenAI Python SDK with async support. Provider-specific
    diffusion options (size, steps, seed) travel in ``extra_body``.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout_seconds: float = 60.0,
        num_inference_steps: int = 4,
        response_extension: str = "webp",
    ) -> None:
        """Initialize the async images client.

        Args:
            api_key: Provider API key.
            model: Image model name (e.g., "black-forest-labs/flux-schnell").
            base_url: Optional custom base URL for the provider API.
            timeout_seconds: Timeout for requests in seconds.
            num_inference_steps: Diffusion steps to request.
            response_extension: Image encoding requested from the provider.
        """
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
        )
        self.model = model
        self.num_inference_steps = num_inference_steps
        self.response_extension = response_extension

    def _build_request(self, prompt: str, width: int, height: int) -> dict[str, Any]:
        return {
            "model": self.model,
            "prompt": prompt,
            "response_format": "b64_json",
            "extra_body": {
                "response_extension": self.response_extension,
                "width": width,
                "height": height,
                "num_inference_steps": self.num_inference_steps,
                "negative_prompt": "",
                "seed": -1,
            },
        }

    async def generate_image(
        self,
        prompt: str,
        *,
        width: int,
        height: int,
    ) -> GeneratedImage:
        """Generate one image through the provider.

        Raises:
            ProviderAuthenticationAppError: If the provider rejects the API key (HTTP 401).
            ImageProviderAppError: On any other provider failure or an empty payload.
        """
        try:
            response = await self.client.images.generate(
                **self._build_request(prompt, width, height)
            )
        except AuthenticationError as exc:
            raise ProviderAuthenticationAppError(
                code="invalid_provider_api_key",
                message="Invalid API key. Please check the IMAGE_API_KEY environment variable.",
                details={"http_status": 401, "model": self.model},
            ) from exc
        except APIStatusError as exc:
            raise ImageProviderAppError(
                code="image_provider_error",
                message=exc.message or "Failed to generate image. Please try again later.",
                details={"http_status": exc.status_code, "model": self.model},
            ) from exc
        except OpenAIError as exc:
            raise ImageProviderAppError(
                code="image_provider_error",
                message=str(exc) or "Failed to generate image. Please try again later.",
                details={"model": self.model},
            ) from exc

        data = getattr(response, "data", None) or []
        b64_json = getattr(data[0], "b64_json", None) if data else None
        if not b64_json:
            logger.error(
                "image.provider.invalid_response",
                extra={"model": self.model, "items": len(data)},
            )
            raise ImageProviderAppError(
                code="invalid_provider_response",
                message="Failed to generate image: Invalid API response",
                details={"model": self.model},
            )

        return GeneratedImage(
            b64_json=b64_json,
            model=self.model,
            media_type=_MEDIA_TYPES.get(self.response_extension.lower(), "application/octet-stream"),
        )

"""Factory pattern for creating image client instances."""

from imagegen.adapters.image.base import AbstractImageClient
from imagegen.adapters.image.openai_client import OpenAIImageClient
from imagegen.core.config import settings
from imagegen.core.errors import ValidationAppError


def create_image_client() -> AbstractImageClient:
    """Instantiate the image client configured in settings.

    Returns:
        AbstractImageClient: Configured image client instance.

    Raises:
        ValidationAppError: If provider-specific requirements are not met.
    """
    provider = settings.image.provider.lower()

    if provider == "openai":
        if not settings.image.api_key:
            raise ValidationAppError(
                code="image_missing_api_key",
                message="Image provider requires IMAGE_API_KEY environment variable",
            )
        return OpenAIImageClient(
            api_key=settings.image.api_key,
            model=settings.image.model,
            base_url=settings.image.base_url,
            timeout_seconds=settings.image.timeout_seconds,
            num_inference_steps=settings.image.num_inference_steps,
            response_extension=settings.image.response_extension,
        )

    raise ValidationAppError(
        code="image_unknown_provider",
        message=(
            f"Unknown image provider: '{provider}'. Supported providers: openai"
        ),
    )

"""Image provider adapter layer."""

from imagegen.adapters.image.base import AbstractImageClient, GeneratedImage
from imagegen.adapters.image.factory import create_image_client
from imagegen.adapters.image.openai_client import OpenAIImageClient

__all__ = [
    "AbstractImageClient",
    "GeneratedImage",
    "OpenAIImageClient",
    "create_image_client",
]

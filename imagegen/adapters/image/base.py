from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class GeneratedImage:
	"""Image payload returned by a provider.

	Attributes:
		b64_json: Base64-encoded image bytes.
		model: Model that produced the image.
		media_type: MIME type of the decoded image.
	"""

	b64_json: str
	model: str
	media_type: str = "image/webp"


class AbstractImageClient(ABC):
	"""Interface for text-to-image provider clients."""

	@abstractmethod
	async def generate_image(
		self,
		prompt: str,
		*,
		width: int,
		height: int,
	) -> GeneratedImage:
		"""Generate a single image for the prompt.

		Args:
			prompt: Text description of the desired image.
			width: Image width in pixels.
			height: Image height in pixels.

		Returns:
			GeneratedImage: Base64 payload and metadata.

		Raises:
			ImageProviderAppError: If the provider call fails or the response has no image.
		"""
		...

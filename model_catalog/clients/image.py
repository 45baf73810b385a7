"""
Image Generation Client - call-through to an OpenAI-style images API.
"""

import base64
import logging
from dataclasses import dataclass
from typing import Any

from model_catalog.clients.base import ModelClient
from model_catalog.registry.models import ImageModelSpec

logger = logging.getLogger(__name__)


@dataclass
class GeneratedImage:
    """One generated image."""

    mime_type: str
    data: bytes


class ImageGenerationClient(ModelClient[ImageModelSpec]):
    """Image generation client for a resolved ImageModelSpec."""

    async def generate_image(
        self,
        prompt: str,
        size: str = "1024x1024",
        n: int = 1,
    ) -> list[GeneratedImage]:
        """
        Generate images for a prompt.

        Args:
            prompt: Text description of the image
            size: Image size as ``<width>x<height>``
            n: Number of images

        Returns:
            Decoded PNG images
        """
        request: dict[str, Any] = {
            "model": self.get_model_id(),
            "prompt": prompt,
            "size": size,
            "n": n,
            "response_format": "b64_json",
        }
        request = self._prepare_request(request)

        try:
            response = await self.model_spec.impl.images.generate(**request)
        except Exception as e:
            logger.error(f"Image generation failed for {self.model_spec.key}: {e}")
            raise

        return [
            GeneratedImage(mime_type="image/png", data=base64.b64decode(item.b64_json))
            for item in response.data
        ]

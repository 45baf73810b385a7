"""
Speech Client - call-through to an OpenAI-style text-to-speech API.
"""

import logging
from typing import Any

from model_catalog.clients.base import ModelClient
from model_catalog.registry.models import SpeechModelSpec

logger = logging.getLogger(__name__)


class SpeechClient(ModelClient[SpeechModelSpec]):
    """Text-to-speech client for a resolved SpeechModelSpec."""

    async def generate_speech(
        self,
        text: str,
        voice: str = "alloy",
        speed: float | None = None,
    ) -> bytes:
        """
        Synthesize speech for a text.

        Returns:
            Encoded audio bytes (mp3 unless the request hook changes the format)
        """
        request: dict[str, Any] = {
            "model": self.get_model_id(),
            "input": text,
            "voice": voice,
        }
        if speed is not None:
            request["speed"] = speed
        request = self._prepare_request(request)

        try:
            response = await self.model_spec.impl.audio.speech.create(**request)
        except Exception as e:
            logger.error(f"Speech generation failed for {self.model_spec.key}: {e}")
            raise
        return response.content

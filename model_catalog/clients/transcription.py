"""
Transcription Client - call-through to an OpenAI-style speech-to-text API.
"""

import logging
from typing import Any

from model_catalog.clients.base import ModelClient
from model_catalog.registry.models import TranscriptionModelSpec

logger = logging.getLogger(__name__)


class TranscriptionClient(ModelClient[TranscriptionModelSpec]):
    """Transcription client for a resolved TranscriptionModelSpec."""

    async def transcribe(
        self,
        audio: Any,
        language: str | None = None,
        prompt: str | None = None,
    ) -> str:
        """
        Transcribe audio to text.

        Args:
            audio: File object, bytes, or ``(filename, bytes)`` tuple
            language: Optional ISO-639-1 language hint
            prompt: Optional text to guide style or vocabulary

        Returns:
            The transcribed text
        """
        request: dict[str, Any] = {"model": self.get_model_id(), "file": audio}
        if language:
            request["language"] = language
        if prompt:
            request["prompt"] = prompt
        request = self._prepare_request(request)

        try:
            response = await self.model_spec.impl.audio.transcriptions.create(**request)
        except Exception as e:
            logger.error(f"Transcription failed for {self.model_spec.key}: {e}")
            raise
        return response.text

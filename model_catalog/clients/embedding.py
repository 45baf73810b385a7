"""
Embedding Client - call-through to an OpenAI-style embeddings API.

Each input string is sent as its own request so the model's request hook can
adjust every item (for example, prefixing a task instruction).
"""

import asyncio
import logging
from dataclasses import dataclass

from model_catalog.clients.base import ModelClient
from model_catalog.registry.models import EmbeddingModelSpec

logger = logging.getLogger(__name__)


@dataclass
class EmbeddingResult:
    """Embedding vector for one input string."""

    value: str
    embedding: list[float]
    input_tokens: int = 0


class EmbeddingClient(ModelClient[EmbeddingModelSpec]):
    """Embedding client for a resolved EmbeddingModelSpec."""

    async def get_embeddings(self, inputs: list[str]) -> list[EmbeddingResult]:
        """
        Generate embeddings for each input string, preserving order.

        Raises:
            TypeError: If inputs is not a list of strings
        """
        if not isinstance(inputs, list):
            raise TypeError("Input must be a list of strings.")
        return list(await asyncio.gather(*(self._embed(value) for value in inputs)))

    async def _embed(self, value: str) -> EmbeddingResult:
        request = self._prepare_request({"model": self.get_model_id(), "input": value})
        try:
            response = await self.model_spec.impl.embeddings.create(**request)
        except Exception as e:
            logger.error(f"Embedding request failed for {self.model_spec.key}: {e}")
            raise

        usage = getattr(response, "usage", None)
        tokens = getattr(usage, "prompt_tokens", 0)
        return EmbeddingResult(
            value=request["input"],
            embedding=list(response.data[0].embedding),
            input_tokens=tokens if isinstance(tokens, int) else 0,
        )

"""
Clients module: thin per-category call-through wrappers.

Each client holds a resolved ModelSpec plus its parsed feature map and
dispatches to the vendor SDK handle stored on the spec (``impl``).
"""

from model_catalog.clients.base import ModelClient
from model_catalog.clients.chat import ChatClient, ChatResult
from model_catalog.clients.cost import CostBreakdown, TokenUsage, calculate_cost
from model_catalog.clients.embedding import EmbeddingClient, EmbeddingResult
from model_catalog.clients.image import GeneratedImage, ImageGenerationClient
from model_catalog.clients.reranking import RerankingClient, RerankResult
from model_catalog.clients.speech import SpeechClient
from model_catalog.clients.transcription import TranscriptionClient

__all__ = [
    "ModelClient",
    "ChatClient",
    "ChatResult",
    "CostBreakdown",
    "TokenUsage",
    "calculate_cost",
    "EmbeddingClient",
    "EmbeddingResult",
    "GeneratedImage",
    "ImageGenerationClient",
    "RerankingClient",
    "RerankResult",
    "SpeechClient",
    "TranscriptionClient",
]

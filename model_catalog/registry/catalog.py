"""
Model Registry - the aggregate of all per-category registries.

Holds one TypeRegistry per model category, wires each to its client class,
and registers provider adapters from configuration. Selection of a chat
model by requirements is exposed here as a convenience.
"""

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from model_catalog.clients.chat import ChatClient
from model_catalog.clients.embedding import EmbeddingClient
from model_catalog.clients.image import ImageGenerationClient
from model_catalog.clients.reranking import RerankingClient
from model_catalog.clients.speech import SpeechClient
from model_catalog.clients.transcription import TranscriptionClient
from model_catalog.errors import ProviderConfigurationError, UnknownCategoryError
from model_catalog.registry.models import (
    ChatModelSpec,
    EmbeddingModelSpec,
    ImageModelSpec,
    RerankingModelSpec,
    SpeechModelSpec,
    TranscriptionModelSpec,
)
from model_catalog.registry.selection import (
    RequirementsInput,
    filter_chat_specs,
    get_first_online_chat_client,
)
from model_catalog.registry.type_registry import TypeRegistry

if TYPE_CHECKING:
    from model_catalog.providers.config import ProviderConfig

logger = logging.getLogger(__name__)

CATEGORIES = (
    "chat",
    "embedding",
    "image_generation",
    "speech",
    "transcription",
    "reranking",
)


class ModelRegistry:
    """
    Aggregate of per-category model registries.

    Usage:
        registry = get_model_registry()
        await registry.initialize_providers(auto_config(get_settings()))
        client = await registry.get_first_online_chat_client("auto:intelligence>=4")
        result = await client.chat([{"role": "user", "content": "Hi"}])
    """

    def __init__(self) -> None:
        self.chat: TypeRegistry[ChatModelSpec, ChatClient] = TypeRegistry("chat", ChatClient)
        self.embedding: TypeRegistry[EmbeddingModelSpec, EmbeddingClient] = TypeRegistry(
            "embedding", EmbeddingClient
        )
        self.image_generation: TypeRegistry[ImageModelSpec, ImageGenerationClient] = TypeRegistry(
            "image_generation", ImageGenerationClient
        )
        self.speech: TypeRegistry[SpeechModelSpec, SpeechClient] = TypeRegistry(
            "speech", SpeechClient
        )
        self.transcription: TypeRegistry[TranscriptionModelSpec, TranscriptionClient] = TypeRegistry(
            "transcription", TranscriptionClient
        )
        self.reranking: TypeRegistry[RerankingModelSpec, RerankingClient] = TypeRegistry(
            "reranking", RerankingClient
        )
        self.providers: dict[str, str] = {}

    def category(self, name: str) -> TypeRegistry[Any, Any]:
        """
        Return the registry for a category name.

        Accepts hyphenated names (``image-generation``) as well as the
        attribute form (``image_generation``).

        Raises:
            UnknownCategoryError: If the category does not exist
        """
        normalized = name.strip().lower().replace("-", "_")
        if normalized not in CATEGORIES:
            raise UnknownCategoryError(
                f"Unknown model category '{name}'. Valid categories: {', '.join(CATEGORIES)}",
                name=name,
            )
        return getattr(self, normalized)

    def categories(self) -> dict[str, TypeRegistry[Any, Any]]:
        return {name: getattr(self, name) for name in CATEGORIES}

    async def initialize_providers(self, configs: Mapping[str, "ProviderConfig"]) -> list[str]:
        """
        Register every configured provider under its display name.

        A provider with invalid configuration is logged and skipped; the
        remaining providers still register.

        Args:
            configs: Mapping of provider display name to provider config

        Returns:
            Display names of the providers that registered successfully
        """
        from model_catalog.providers import PROVIDERS

        registered = []
        for display_name, config in configs.items():
            init = PROVIDERS[config.provider]
            try:
                await init(display_name, self, config)
            except ProviderConfigurationError as e:
                logger.error(f"Skipping provider {display_name}: {e}")
                continue

            self.providers[display_name] = config.provider
            registered.append(display_name)
            logger.info(f"Registered provider {display_name} ({config.provider})")

        return registered

    def filter_chat_models(self, requirements: RequirementsInput) -> list[ChatModelSpec]:
        """Return chat specs satisfying the requirements, cheapest first."""
        return filter_chat_specs(self.chat, requirements)

    async def get_first_online_chat_client(self, requirements: RequirementsInput) -> ChatClient:
        """
        Select the cheapest online chat model satisfying the requirements.

        Raises:
            RequirementSyntaxError: For malformed requirements
            NoOnlineModelError: If every matching model is offline
        """
        return await get_first_online_chat_client(self.chat, requirements)


# Singleton registry instance
_registry_instance: ModelRegistry | None = None


def get_model_registry() -> ModelRegistry:
    """
    Get or create the process-wide model registry.

    Returns:
        ModelRegistry: The singleton registry
    """
    global _registry_instance
    if _registry_instance is None:
        _registry_instance = ModelRegistry()
    return _registry_instance


def reset_model_registry() -> None:
    """Discard the singleton registry (used by tests)."""
    global _registry_instance
    _registry_instance = None

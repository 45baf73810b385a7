"""
OpenAI-Compatible Provider

Discovers models from any server exposing an OpenAI-style ``/models``
listing (vLLM, llama.cpp, DeepSeek, OpenRouter). The listing is fetched
once at registration; each listed id becomes a chat, embedding or
reranking spec depending on its name.

Self-hosted servers are assumed to keep their models loaded, so every
spec reports hot and is available whenever the listing endpoint answers.
"""

import logging
import re
from typing import Any

import httpx
from openai import AsyncOpenAI

from model_catalog.errors import ProviderConfigurationError
from model_catalog.providers.base import (
    always_hot,
    bearer_headers,
    model_listing,
    reachable_probe,
)
from model_catalog.providers.config import OpenAICompatibleProviderConfig
from model_catalog.registry.models import (
    ChatModelSpec,
    EmbeddingModelSpec,
    ModelSpec,
    RerankingModelSpec,
)

logger = logging.getLogger(__name__)

DEFAULT_EMBEDDING_CONTEXT_LENGTH = 8192

_EMBED_PATTERN = re.compile(r"embed", re.IGNORECASE)
_RERANK_PATTERN = re.compile(r"rerank", re.IGNORECASE)


def classify_model(model_id: str) -> str:
    """Guess a listed model's category from its id."""
    if _RERANK_PATTERN.search(model_id):
        return "reranking"
    if _EMBED_PATTERN.search(model_id):
        return "embedding"
    return "chat"


def listed_context_length(info: dict[str, Any], default: int) -> int:
    """Context length reported by vLLM (max_model_len) or llama.cpp (meta.n_ctx_train)."""
    meta = info.get("meta") or {}
    return info.get("max_model_len") or meta.get("n_ctx_train") or default


async def init(display_name: str, registry, config: OpenAICompatibleProviderConfig) -> None:
    """
    Fetch the model listing and register every listed model under display_name.

    Raises:
        ProviderConfigurationError: If no base URL is configured
    """
    if not config.base_url:
        raise ProviderConfigurationError(
            f"No base_url provided for {display_name} provider.", provider=display_name
        )

    base_url = config.base_url.rstrip("/")
    api_key = config.api_key.get_secret_value() if config.api_key else None
    headers = bearer_headers(api_key, config.headers)

    listing = model_listing(base_url, headers)
    body = await listing()
    if not isinstance(body, dict) or not body.get("data"):
        logger.warning(f"No models listed by {display_name} at {base_url}; nothing registered")
        return

    # The SDK insists on a key even when the server does not check one
    client = AsyncOpenAI(api_key=api_key or "unused", base_url=base_url, default_headers=config.headers)
    rerank_client = httpx.AsyncClient(base_url=base_url, headers=headers)
    is_available = reachable_probe(listing)

    specs: dict[str, list[ModelSpec]] = {"chat": [], "embedding": [], "reranking": []}
    for info in body["data"]:
        model_id = info.get("id")
        if not model_id:
            continue

        common = {
            "model_id": model_id,
            "provider_display_name": display_name,
            "is_available": is_available,
            "is_hot": always_hot,
        }
        match classify_model(model_id):
            case "reranking":
                specs["reranking"].append(
                    RerankingModelSpec(impl=rerank_client, cost_per_million_input_tokens=0, **common)
                )
            case "embedding":
                specs["embedding"].append(
                    EmbeddingModelSpec(
                        impl=client,
                        context_length=DEFAULT_EMBEDDING_CONTEXT_LENGTH,
                        cost_per_million_input_tokens=0,
                        **common,
                    )
                )
            case _:
                specs["chat"].append(
                    ChatModelSpec(
                        impl=client,
                        context_length=listed_context_length(info, config.default_context_length),
                        cost_per_million_input_tokens=0,
                        cost_per_million_output_tokens=0,
                        **common,
                    )
                )

    for category, category_specs in specs.items():
        if category_specs:
            registry.category(category).register_all(category_specs)

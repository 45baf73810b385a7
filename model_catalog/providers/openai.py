"""
OpenAI Provider

Registers OpenAI chat, embedding, image, speech and transcription models.
Pricing is USD per 1M tokens unless the field name says otherwise.

Availability of every model is derived from the ``/models`` listing, which
is fetched once per TTL window and shared by all probes of this provider.
"""

import logging
from typing import Any

from openai import AsyncOpenAI

from model_catalog.providers.base import (
    bearer_headers,
    listed_probe,
    model_listing,
    require_api_key,
)
from model_catalog.providers.config import OpenAIProviderConfig
from model_catalog.registry.models import (
    ChatModelSpec,
    EmbeddingModelSpec,
    FeatureOptions,
    FeatureSpec,
    FeatureType,
    ImageModelSpec,
    SpeechModelSpec,
    TranscriptionModelSpec,
)

logger = logging.getLogger(__name__)


WEB_SEARCH = FeatureSpec(
    description="Enables web search",
    type=FeatureType.BOOLEAN,
    default_value=False,
)

REASONING_EFFORT = FeatureSpec(
    description="Reasoning effort for reasoning models",
    type=FeatureType.ENUM,
    default_value="medium",
    values=["minimal", "low", "medium", "high"],
)

REASONING_FEATURES = {"websearch": WEB_SEARCH, "reasoning_effort": REASONING_EFFORT}


CHAT_MODELS: dict[str, dict[str, Any]] = {
    "gpt-4.1": {
        "cost_per_million_input_tokens": 2.0,
        "cost_per_million_cached_input_tokens": 0.5,
        "cost_per_million_output_tokens": 8.0,
        "reasoning_text": 3,
        "intelligence": 5,
        "tools": 5,
        "speed": 3,
        "context_length": 1000000,
    },
    "gpt-4.1-mini": {
        "cost_per_million_input_tokens": 0.4,
        "cost_per_million_cached_input_tokens": 0.1,
        "cost_per_million_output_tokens": 1.6,
        "reasoning_text": 2,
        "intelligence": 4,
        "tools": 4,
        "speed": 4,
        "context_length": 1000000,
    },
    "gpt-4.1-nano": {
        "cost_per_million_input_tokens": 0.1,
        "cost_per_million_cached_input_tokens": 0.025,
        "cost_per_million_output_tokens": 0.4,
        "reasoning_text": 1,
        "intelligence": 2,
        "tools": 2,
        "speed": 5,
        "context_length": 1000000,
    },
    "gpt-5": {
        "cost_per_million_input_tokens": 1.25,
        "cost_per_million_cached_input_tokens": 0.125,
        "cost_per_million_output_tokens": 10.0,
        "reasoning_text": 4,
        "intelligence": 6,
        "tools": 6,
        "speed": 3,
        "context_length": 400000,
        "features": REASONING_FEATURES,
    },
    "gpt-5-mini": {
        "cost_per_million_input_tokens": 0.25,
        "cost_per_million_cached_input_tokens": 0.025,
        "cost_per_million_output_tokens": 2.0,
        "reasoning_text": 3,
        "intelligence": 5,
        "tools": 5,
        "speed": 4,
        "context_length": 400000,
        "features": REASONING_FEATURES,
    },
    "gpt-5-nano": {
        "cost_per_million_input_tokens": 0.05,
        "cost_per_million_cached_input_tokens": 0.005,
        "cost_per_million_output_tokens": 0.4,
        "reasoning_text": 2,
        "intelligence": 3,
        "tools": 3,
        "speed": 5,
        "context_length": 400000,
        "features": REASONING_FEATURES,
    },
    "o3": {
        "cost_per_million_input_tokens": 10.0,
        "cost_per_million_output_tokens": 40.0,
        "reasoning_text": 6,
        "intelligence": 6,
        "tools": 6,
        "speed": 2,
        "context_length": 200000,
        "features": REASONING_FEATURES,
    },
    "o4-mini": {
        "cost_per_million_input_tokens": 1.1,
        "cost_per_million_cached_input_tokens": 0.275,
        "cost_per_million_output_tokens": 4.4,
        "reasoning_text": 5,
        "intelligence": 5,
        "tools": 5,
        "speed": 3,
        "context_length": 200000,
        "features": REASONING_FEATURES,
    },
}

EMBEDDING_MODELS: dict[str, dict[str, Any]] = {
    "text-embedding-3-small": {"context_length": 8191, "cost_per_million_input_tokens": 0.02},
    "text-embedding-3-large": {"context_length": 8191, "cost_per_million_input_tokens": 0.13},
}

# Registered id -> (vendor model, quality, cost per 1024x1024 image)
IMAGE_VARIANTS: dict[str, tuple[str, str, float]] = {
    "gpt-image-1-high": ("gpt-image-1", "high", 0.167),
    "gpt-image-1-medium": ("gpt-image-1", "medium", 0.042),
    "gpt-image-1-low": ("gpt-image-1", "low", 0.011),
    "gpt-image-1-mini-high": ("gpt-image-1-mini", "high", 0.036),
    "gpt-image-1-mini-medium": ("gpt-image-1-mini", "medium", 0.011),
    "gpt-image-1-mini-low": ("gpt-image-1-mini", "low", 0.005),
}

SPEECH_MODELS: dict[str, float] = {
    "tts-1": 15.0,
    "tts-1-hd": 30.0,
}

TRANSCRIPTION_MODELS: dict[str, float] = {
    "whisper-1": 0.006,
}


def apply_chat_features(request: dict[str, Any], features: FeatureOptions) -> None:
    """Translate enabled chat features into Chat Completions parameters."""
    if features.get("websearch"):
        request.setdefault("web_search_options", {})
    effort = features.get("reasoning_effort")
    if effort:
        request["reasoning_effort"] = effort


def image_quality_hook(quality: str):
    """Pin the quality of an image variant; gpt-image models always return base64."""

    def mangle_request(request: dict[str, Any], features: FeatureOptions) -> None:
        request["quality"] = quality
        request.pop("response_format", None)

    return mangle_request


async def init(display_name: str, registry, config: OpenAIProviderConfig) -> None:
    """
    Register OpenAI models under display_name.

    Raises:
        ProviderConfigurationError: If no API key is configured
    """
    api_key = require_api_key(config.api_key, display_name)
    client = AsyncOpenAI(api_key=api_key, base_url=config.base_url)
    listing = model_listing(config.base_url, bearer_headers(api_key))

    registry.chat.register_all(
        ChatModelSpec(
            model_id=model_id,
            provider_display_name=display_name,
            impl=client,
            is_available=listed_probe(listing, model_id),
            mangle_request=apply_chat_features,
            **attributes,
        )
        for model_id, attributes in CHAT_MODELS.items()
    )

    registry.embedding.register_all(
        EmbeddingModelSpec(
            model_id=model_id,
            provider_display_name=display_name,
            impl=client,
            is_available=listed_probe(listing, model_id),
            **attributes,
        )
        for model_id, attributes in EMBEDDING_MODELS.items()
    )

    registry.image_generation.register_all(
        ImageModelSpec(
            model_id=variant_id,
            api_model_name=vendor_model,
            provider_display_name=display_name,
            impl=client,
            is_available=listed_probe(listing, vendor_model),
            mangle_request=image_quality_hook(quality),
            cost_per_image=cost,
            cost_per_million_input_tokens=10.0,
        )
        for variant_id, (vendor_model, quality, cost) in IMAGE_VARIANTS.items()
    )

    registry.speech.register_all(
        SpeechModelSpec(
            model_id=model_id,
            provider_display_name=display_name,
            impl=client,
            is_available=listed_probe(listing, model_id),
            cost_per_million_characters=cost,
        )
        for model_id, cost in SPEECH_MODELS.items()
    )

    registry.transcription.register_all(
        TranscriptionModelSpec(
            model_id=model_id,
            provider_display_name=display_name,
            impl=client,
            is_available=listed_probe(listing, model_id),
            cost_per_minute=cost,
        )
        for model_id, cost in TRANSCRIPTION_MODELS.items()
    )

    logger.debug(f"OpenAI provider {display_name} using {config.base_url}")

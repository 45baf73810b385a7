"""
Groq Provider

Registers Groq-hosted open-weight chat models and Whisper transcription.
Groq's LPU inference keeps every listed model warm, so only availability
is probed.
"""

from typing import Any

from groq import AsyncGroq

from model_catalog.providers.base import (
    bearer_headers,
    listed_probe,
    model_listing,
    require_api_key,
)
from model_catalog.providers.config import GroqProviderConfig
from model_catalog.registry.models import ChatModelSpec, TranscriptionModelSpec

CHAT_MODELS: dict[str, dict[str, Any]] = {
    "llama-3.1-8b-instant": {
        "context_length": 131072,
        "max_completion_tokens": 131072,
        "cost_per_million_input_tokens": 0.05,
        "cost_per_million_output_tokens": 0.08,
        "reasoning_text": 3,
        "intelligence": 3,
        "speed": 6,
        "tools": 2,
    },
    "llama-3.3-70b-versatile": {
        "context_length": 131072,
        "max_completion_tokens": 32768,
        "cost_per_million_input_tokens": 0.59,
        "cost_per_million_output_tokens": 0.79,
        "reasoning_text": 4,
        "intelligence": 4,
        "speed": 5,
        "tools": 3,
    },
    "meta-llama/llama-4-maverick-17b-128e-instruct": {
        "context_length": 131072,
        "max_completion_tokens": 8192,
        "cost_per_million_input_tokens": 0.2,
        "cost_per_million_output_tokens": 0.6,
        "reasoning_text": 4,
        "intelligence": 4,
        "speed": 4,
        "tools": 3,
    },
    "meta-llama/llama-4-scout-17b-16e-instruct": {
        "context_length": 131072,
        "max_completion_tokens": 8192,
        "cost_per_million_input_tokens": 0.11,
        "cost_per_million_output_tokens": 0.34,
        "reasoning_text": 4,
        "intelligence": 4,
        "speed": 4,
        "tools": 3,
    },
    "openai/gpt-oss-120b": {
        "context_length": 131072,
        "max_completion_tokens": 65536,
        "cost_per_million_input_tokens": 0.15,
        "cost_per_million_output_tokens": 0.75,
        "reasoning_text": 5,
        "intelligence": 5,
        "speed": 3,
        "tools": 5,
    },
    "openai/gpt-oss-20b": {
        "context_length": 131072,
        "max_completion_tokens": 65536,
        "cost_per_million_input_tokens": 0.1,
        "cost_per_million_output_tokens": 0.5,
        "reasoning_text": 4,
        "intelligence": 4,
        "speed": 4,
        "tools": 4,
    },
    "qwen/qwen3-32b": {
        "context_length": 131072,
        "max_completion_tokens": 40960,
        "cost_per_million_input_tokens": 0.29,
        "cost_per_million_output_tokens": 0.59,
        "reasoning_text": 4,
        "intelligence": 4,
        "speed": 4,
        "tools": 3,
    },
    "moonshotai/kimi-k2-instruct-0905": {
        "context_length": 131072,
        "max_completion_tokens": 16384,
        "cost_per_million_input_tokens": 1.0,
        "cost_per_million_output_tokens": 3.0,
        "reasoning_text": 4,
        "intelligence": 4,
        "speed": 5,
        "tools": 5,
    },
}

# USD per minute of audio
TRANSCRIPTION_MODELS: dict[str, float] = {
    "whisper-large-v3": 0.00185,
    "whisper-large-v3-turbo": 0.000667,
}


async def init(display_name: str, registry, config: GroqProviderConfig) -> None:
    """
    Register Groq models under display_name.

    Raises:
        ProviderConfigurationError: If no API key is configured
    """
    api_key = require_api_key(config.api_key, display_name)
    client = AsyncGroq(api_key=api_key)
    listing = model_listing(config.base_url, bearer_headers(api_key))

    registry.chat.register_all(
        ChatModelSpec(
            model_id=model_id,
            provider_display_name=display_name,
            impl=client,
            is_available=listed_probe(listing, model_id),
            **attributes,
        )
        for model_id, attributes in CHAT_MODELS.items()
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

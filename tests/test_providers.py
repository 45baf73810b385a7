"""
Tests for provider configuration and adapters.

Vendor listings are served by stub fetchers so no test reaches the network.
"""

import pytest
from pydantic import SecretStr, ValidationError
from unittest.mock import AsyncMock, patch

from model_catalog.config import Settings
from model_catalog.errors import ProviderConfigurationError
from model_catalog.providers import PROVIDERS, register_providers
from model_catalog.providers.base import listed_model_ids, require_api_key
from model_catalog.providers.config import (
    DEEPSEEK_BASE_URL,
    OPENROUTER_BASE_URL,
    GroqProviderConfig,
    OpenAICompatibleProviderConfig,
    OpenAIProviderConfig,
    auto_config,
    parse_provider_configs,
)
from model_catalog.providers.openai import apply_chat_features, image_quality_hook
from model_catalog.providers.openai_compatible import classify_model
from model_catalog.registry.fetcher import CachedFetcher
from model_catalog.registry.models import ModelStatusName

from fixtures import OPENAI_LISTING, SELF_HOSTED_LISTING


def stub_listing(body):
    """Patch target replacement returning a fetcher over a fixed body."""

    def _listing(*args, **kwargs):
        return CachedFetcher(AsyncMock(return_value=body), label="stub")

    return _listing


class TestProviderConfig:
    """Config schemas and auto configuration."""

    def test_discriminated_union(self):
        """Configs are selected by their provider field."""
        configs = parse_provider_configs(
            {
                "OpenAI": {"provider": "openai", "api_key": "sk-1"},
                "Local": {"provider": "openai_compatible", "base_url": "http://localhost:8000/v1"},
            }
        )

        assert isinstance(configs["OpenAI"], OpenAIProviderConfig)
        assert isinstance(configs["Local"], OpenAICompatibleProviderConfig)
        assert configs["OpenAI"].api_key.get_secret_value() == "sk-1"

    def test_unknown_provider_rejected(self):
        """An unknown provider fails validation."""
        with pytest.raises(ValidationError):
            parse_provider_configs({"X": {"provider": "nonexistent"}})

    def test_auto_config_from_settings(self):
        """Every configured credential yields a provider config."""
        settings = Settings(
            _env_file=None,
            openai_api_key="sk-openai",
            groq_api_key="gsk-groq",
            deepseek_api_key="sk-deepseek",
            openrouter_api_key="sk-or",
            openai_compatible_base_url="http://localhost:11434/v1/",
        )

        configs = auto_config(settings)

        assert set(configs) == {"OpenAI", "Groq", "DeepSeek", "OpenRouter", "OpenAICompatible"}
        assert configs["DeepSeek"].base_url == DEEPSEEK_BASE_URL
        assert configs["OpenRouter"].base_url == OPENROUTER_BASE_URL
        assert configs["OpenAICompatible"].base_url == "http://localhost:11434/v1"
        assert configs["Groq"].provider == "groq"

    def test_auto_config_empty_without_credentials(self):
        """No credentials means no providers."""
        assert auto_config(Settings(_env_file=None)) == {}

    def test_require_api_key(self):
        """A missing key raises with the provider name."""
        assert require_api_key(SecretStr("k"), "OpenAI") == "k"
        with pytest.raises(ProviderConfigurationError) as exc_info:
            require_api_key(SecretStr(""), "OpenAI")
        assert exc_info.value.provider == "OpenAI"

    def test_listed_model_ids(self):
        """Model ids are read from an OpenAI-style listing."""
        assert listed_model_ids(OPENAI_LISTING) == {"gpt-4.1", "gpt-4.1-mini", "whisper-1"}
        assert listed_model_ids(None) == set()


class TestOpenAIProvider:
    """OpenAI adapter registration and probes."""

    @pytest.mark.asyncio
    async def test_registers_every_category(self, model_registry):
        """OpenAI registers models in all five categories."""
        with patch("model_catalog.providers.openai.model_listing", side_effect=stub_listing(OPENAI_LISTING)):
            await PROVIDERS["openai"]("OpenAI", model_registry, OpenAIProviderConfig(api_key="sk-test"))

        assert "openai:gpt-4.1" in model_registry.chat
        assert "openai:text-embedding-3-small" in model_registry.embedding
        assert "openai:gpt-image-1-low" in model_registry.image_generation
        assert "openai:tts-1" in model_registry.speech
        assert "openai:whisper-1" in model_registry.transcription

    @pytest.mark.asyncio
    async def test_availability_follows_listing(self, model_registry):
        """Only listed models are available."""
        with patch("model_catalog.providers.openai.model_listing", side_effect=stub_listing(OPENAI_LISTING)):
            await PROVIDERS["openai"]("OpenAI", model_registry, OpenAIProviderConfig(api_key="sk-test"))

        statuses = await model_registry.chat.all_statuses()

        assert statuses["openai:gpt-4.1"].status == ModelStatusName.ONLINE
        assert statuses["openai:gpt-5"].status == ModelStatusName.OFFLINE

    @pytest.mark.asyncio
    async def test_missing_api_key(self, model_registry):
        """A missing API key fails registration."""
        with pytest.raises(ProviderConfigurationError):
            await PROVIDERS["openai"]("OpenAI", model_registry, OpenAIProviderConfig())
        assert len(model_registry.chat) == 0

    def test_chat_feature_hook(self):
        """Enabled features become request parameters."""
        request = {"model": "gpt-5"}
        apply_chat_features(request, {"websearch": True, "reasoning_effort": "high"})
        assert request == {"model": "gpt-5", "web_search_options": {}, "reasoning_effort": "high"}

        untouched = {"model": "gpt-5"}
        apply_chat_features(untouched, {"websearch": False})
        assert untouched == {"model": "gpt-5"}

    def test_image_quality_hook(self):
        """The quality hook pins quality and drops response_format."""
        request = {"model": "gpt-image-1", "response_format": "b64_json"}
        image_quality_hook("medium")(request, {})
        assert request == {"model": "gpt-image-1", "quality": "medium"}

    @pytest.mark.asyncio
    async def test_gpt5_resolves_reasoning_effort(self, model_registry):
        """Reasoning models accept effort and web search features."""
        with patch("model_catalog.providers.openai.model_listing", side_effect=stub_listing(OPENAI_LISTING)):
            await PROVIDERS["openai"]("OpenAI", model_registry, OpenAIProviderConfig(api_key="sk-test"))

        client = model_registry.chat.resolve("OpenAI:gpt-5?reasoning_effort=low&websearch")

        assert client.get_features() == {"reasoning_effort": "low", "websearch": True}


class TestGroqProvider:
    """Groq adapter registration."""

    @pytest.mark.asyncio
    async def test_registers_chat_and_transcription(self, model_registry, offline_listings):
        """Groq registers chat and transcription models."""
        await PROVIDERS["groq"]("Groq", model_registry, GroqProviderConfig(api_key="gsk-test"))

        assert "groq:llama-3.1-8b-instant" in model_registry.chat
        assert "groq:whisper-large-v3" in model_registry.transcription
        spec = model_registry.chat.get_spec("groq:llama-3.3-70b-versatile")
        assert spec.max_completion_tokens == 32768

    @pytest.mark.asyncio
    async def test_missing_api_key(self, model_registry):
        """A missing API key fails registration."""
        with pytest.raises(ProviderConfigurationError):
            await PROVIDERS["groq"]("Groq", model_registry, GroqProviderConfig())


class TestOpenAICompatibleProvider:
    """Discovery from a self-hosted model listing."""

    @pytest.mark.parametrize(
        "model_id,category",
        [
            ("llama-3-8b", "chat"),
            ("nomic-embed-text-v1.5", "embedding"),
            ("BAAI/bge-reranker-v2-m3", "reranking"),
        ],
    )
    def test_classify_model(self, model_id, category):
        """Listed ids are classified by name."""
        assert classify_model(model_id) == category

    @pytest.mark.asyncio
    async def test_registers_listed_models(self, model_registry):
        """Every listed model registers with its context length."""
        config = OpenAICompatibleProviderConfig(base_url="http://gpu-box:8000/v1/")
        with patch(
            "model_catalog.providers.openai_compatible.model_listing",
            side_effect=stub_listing(SELF_HOSTED_LISTING),
        ):
            await PROVIDERS["openai_compatible"]("Local", model_registry, config)

        assert model_registry.chat.get_spec("local:qwen/qwen2.5-7b-instruct").context_length == 32768
        assert model_registry.chat.get_spec("local:llama-3-8b").context_length == 8192
        assert model_registry.chat.get_spec("local:mistral-7b").context_length == 4000
        assert "local:nomic-embed-text-v1.5" in model_registry.embedding
        assert "local:baai/bge-reranker-v2-m3" in model_registry.reranking

        statuses = await model_registry.chat.all_statuses()
        assert {status.status for status in statuses.values()} == {ModelStatusName.ONLINE}

    @pytest.mark.asyncio
    async def test_unreachable_server_registers_nothing(self, model_registry, offline_listings):
        """An empty listing registers nothing."""
        config = OpenAICompatibleProviderConfig(base_url="http://gpu-box:8000/v1")

        await PROVIDERS["openai_compatible"]("Local", model_registry, config)

        assert len(model_registry.chat) == 0

    @pytest.mark.asyncio
    async def test_missing_base_url(self, model_registry):
        """A missing base URL fails registration."""
        with pytest.raises(ProviderConfigurationError):
            await PROVIDERS["openai_compatible"]("Local", model_registry, OpenAICompatibleProviderConfig())


class TestRegisterProviders:
    """Registration through the aggregate isolates bad configs."""

    @pytest.mark.asyncio
    async def test_bad_provider_does_not_block_others(self, model_registry, offline_listings):
        """A failing provider does not stop the rest."""
        registered = await register_providers(
            model_registry,
            {
                "Broken": OpenAIProviderConfig(),
                "Groq": GroqProviderConfig(api_key="gsk-test"),
            },
        )

        assert registered == ["Groq"]
        assert model_registry.providers == {"Groq": "groq"}
        assert "groq:llama-3.1-8b-instant" in model_registry.chat

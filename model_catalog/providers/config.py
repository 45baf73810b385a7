"""
Provider Configuration Schemas

Each configured provider instance is keyed by a display name (e.g.
"OpenAI", "DeepSeek") and carries a config selected by its ``provider``
discriminator. auto_config() derives a default configuration from the
credentials present in Settings.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, Field, SecretStr, TypeAdapter

from model_catalog.config import Settings

DEEPSEEK_BASE_URL = "https://api.deepseek.com"
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


class OpenAIProviderConfig(BaseModel):
    """Configuration for the OpenAI provider."""

    provider: Literal["openai"] = "openai"
    api_key: SecretStr | None = Field(default=None, description="OpenAI API key")
    base_url: str = Field(default="https://api.openai.com/v1", description="API base URL")


class GroqProviderConfig(BaseModel):
    """Configuration for the Groq provider."""

    provider: Literal["groq"] = "groq"
    api_key: SecretStr | None = Field(default=None, description="Groq API key")
    base_url: str = Field(default="https://api.groq.com/openai/v1", description="API base URL")


class OpenAICompatibleProviderConfig(BaseModel):
    """Configuration for any server exposing the OpenAI ``/models`` listing."""

    provider: Literal["openai_compatible"] = "openai_compatible"
    base_url: str | None = Field(default=None, description="API base URL ending in /v1")
    api_key: SecretStr | None = Field(default=None, description="Optional bearer token")
    headers: dict[str, str] = Field(default_factory=dict, description="Extra request headers")
    default_context_length: int = Field(
        default=4000,
        gt=0,
        description="Context length used when the listing does not report one",
    )


ProviderConfig = Annotated[
    OpenAIProviderConfig | GroqProviderConfig | OpenAICompatibleProviderConfig,
    Field(discriminator="provider"),
]

_provider_configs_adapter = TypeAdapter(dict[str, ProviderConfig])


def parse_provider_configs(raw: dict) -> dict[str, ProviderConfig]:
    """
    Validate a ``{display_name: {provider: ..., ...}}`` mapping.

    Raises:
        pydantic.ValidationError: On an unknown provider or invalid field
    """
    return _provider_configs_adapter.validate_python(raw)


def auto_config(settings: Settings) -> dict[str, ProviderConfig]:
    """
    Build provider configs from the credentials present in settings.

    Returns:
        Mapping of display name to provider config, in registration order
    """
    config: dict[str, ProviderConfig] = {}

    if settings.deepseek_api_key:
        config["DeepSeek"] = OpenAICompatibleProviderConfig(
            base_url=DEEPSEEK_BASE_URL,
            api_key=settings.deepseek_api_key,
        )

    if settings.groq_api_key:
        config["Groq"] = GroqProviderConfig(api_key=settings.groq_api_key)

    if settings.openai_api_key:
        config["OpenAI"] = OpenAIProviderConfig(api_key=settings.openai_api_key)

    if settings.openai_compatible_base_url:
        config["OpenAICompatible"] = OpenAICompatibleProviderConfig(
            base_url=settings.openai_compatible_base_url,
            api_key=settings.openai_compatible_api_key,
        )

    if settings.openrouter_api_key:
        config["OpenRouter"] = OpenAICompatibleProviderConfig(
            base_url=OPENROUTER_BASE_URL,
            api_key=settings.openrouter_api_key,
        )

    return config

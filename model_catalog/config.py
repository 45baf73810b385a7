"""
Model-Catalog Configuration Module

This module manages application settings and environment variables using
pydantic-settings for type-safe configuration management.

Environment variables are loaded from .env file or system environment.
All provider credentials use SecretStr to prevent accidental logging.
Every credential is optional: providers without credentials are simply
not registered.
"""

from functools import lru_cache
from typing import Literal
import logging
import sys

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Pydantic Settings automatically reads from:
    1. Environment variables
    2. .env file in working directory
    3. Default values defined here

    API keys use SecretStr to prevent accidental exposure in logs.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore unknown env vars
    )

    openai_api_key: SecretStr | None = Field(
        default=None, description="OpenAI API key (chat, embeddings, images, audio)"
    )

    groq_api_key: SecretStr | None = Field(
        default=None, description="Groq API key for hosted open-weight models"
    )

    deepseek_api_key: SecretStr | None = Field(
        default=None, description="DeepSeek API key (OpenAI-compatible endpoint)"
    )

    openrouter_api_key: SecretStr | None = Field(
        default=None, description="OpenRouter API key (OpenAI-compatible endpoint)"
    )

    openai_compatible_base_url: str | None = Field(
        default=None,
        description="Base URL of a self-hosted OpenAI-compatible server (vLLM, llama.cpp)",
    )

    openai_compatible_api_key: SecretStr | None = Field(
        default=None, description="Optional API key for the self-hosted server"
    )

    fetch_cache_ttl_seconds: float = Field(
        default=30.0,
        gt=0.0,
        description="How long a vendor model listing stays fresh",
    )

    probe_timeout_seconds: float = Field(
        default=1.0,
        gt=0.0,
        description="Per-call timeout for availability probes",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Application log level"
    )

    host: str = Field(default="0.0.0.0", description="Server bind host")

    port: int = Field(default=8000, description="Server bind port")

    debug: bool = Field(default=False, description="Enable debug mode")

    @field_validator("openai_compatible_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str | None) -> str | None:
        """Normalize the base URL so endpoint paths can be appended."""
        if v is None:
            return v
        return v.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    """
    Returns cached settings instance.

    Using lru_cache ensures settings are loaded once and reused,
    avoiding repeated file reads and environment parsing.

    Returns:
        Settings: The application settings singleton.
    """
    return Settings()


def configure_logging(settings: Settings) -> None:
    """
    Configure application logging based on settings.

    Sets up structured logging with timestamps and reduces noise
    from third-party HTTP libraries.

    Args:
        settings: The application settings instance.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("groq").setLevel(logging.WARNING)

"""
Providers module: adapters that register vendor models into a ModelRegistry.

Each adapter exposes ``async init(display_name, registry, config)`` and is
selected by the ``provider`` field of its config.

Public API:
- PROVIDERS: provider name -> init coroutine function
- ProviderConfig: discriminated union of provider configs
- auto_config(): provider configs derived from Settings credentials
- register_providers(): register configured providers into a registry
"""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from model_catalog.providers import groq, openai, openai_compatible
from model_catalog.providers.config import (
    GroqProviderConfig,
    OpenAICompatibleProviderConfig,
    OpenAIProviderConfig,
    ProviderConfig,
    auto_config,
    parse_provider_configs,
)

ProviderInit = Callable[[str, Any, Any], Awaitable[None]]

PROVIDERS: dict[str, ProviderInit] = {
    "openai": openai.init,
    "groq": groq.init,
    "openai_compatible": openai_compatible.init,
}


async def register_providers(registry, configs: Mapping[str, ProviderConfig]) -> list[str]:
    """
    Register every configured provider into registry.

    Returns:
        Display names of the providers that registered successfully
    """
    return await registry.initialize_providers(configs)


__all__ = [
    "PROVIDERS",
    "ProviderConfig",
    "OpenAIProviderConfig",
    "GroqProviderConfig",
    "OpenAICompatibleProviderConfig",
    "auto_config",
    "parse_provider_configs",
    "register_providers",
]

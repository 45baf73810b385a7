"""
Shared helpers for provider adapters.

Adapters publish their models' availability from a vendor ``/models``
listing fetched through a CachedFetcher, so every probe of one provider
shares a single cached HTTP round trip.
"""

from typing import Any

from pydantic import SecretStr

from model_catalog.config import get_settings
from model_catalog.errors import ProviderConfigurationError
from model_catalog.registry.fetcher import CachedFetcher, cached_http_get
from model_catalog.registry.models import ProbeFunction


def require_api_key(api_key: SecretStr | None, display_name: str) -> str:
    """
    Return the plain API key or fail the provider's registration.

    Raises:
        ProviderConfigurationError: If the key is missing or empty
    """
    value = api_key.get_secret_value() if api_key is not None else ""
    if not value:
        raise ProviderConfigurationError(
            f"No api_key provided for {display_name} provider.", provider=display_name
        )
    return value


def bearer_headers(api_key: str | None, extra: dict[str, str] | None = None) -> dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    headers.update(extra or {})
    return headers


def model_listing(base_url: str, headers: dict[str, str]) -> CachedFetcher[Any]:
    """Build the cached ``{base_url}/models`` fetcher with configured TTL and timeout."""
    settings = get_settings()
    return cached_http_get(
        f"{base_url}/models",
        headers=headers,
        ttl=settings.fetch_cache_ttl_seconds,
        timeout=settings.probe_timeout_seconds,
    )


def listed_model_ids(listing: Any) -> set[str]:
    """Extract model ids from an OpenAI-style ``{"data": [{"id": ...}]}`` body."""
    if not isinstance(listing, dict):
        return set()
    return {item["id"] for item in listing.get("data") or [] if isinstance(item, dict) and "id" in item}


def listed_probe(fetcher: CachedFetcher[Any], model_id: str) -> ProbeFunction:
    """Availability probe: the model id appears in the cached listing."""

    async def is_available() -> bool:
        return model_id in listed_model_ids(await fetcher())

    return is_available


def reachable_probe(fetcher: CachedFetcher[Any]) -> ProbeFunction:
    """Availability probe: the listing endpoint answered at all."""

    async def is_available() -> bool:
        return await fetcher() is not None

    return is_available


async def always_hot() -> bool:
    return True

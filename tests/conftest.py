"""
Pytest configuration and shared fixtures.

Provides spec factories, probe helpers, and a FastAPI test client for the
model catalog test suite.

IMPORTANT: Environment variables must be set BEFORE importing modules that
use pydantic-settings, and provider credentials are removed so the app
lifespan never reaches a real vendor.
"""

import os

# Set test environment variables before importing catalog modules
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["DEBUG"] = "false"
for _key in (
    "OPENAI_API_KEY",
    "GROQ_API_KEY",
    "DEEPSEEK_API_KEY",
    "OPENROUTER_API_KEY",
    "OPENAI_COMPATIBLE_BASE_URL",
    "OPENAI_COMPATIBLE_API_KEY",
):
    os.environ.pop(_key, None)

# Now safe to import everything else
import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from fastapi.testclient import TestClient

from fixtures import make_probe


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "asyncio: mark test as async")


@pytest.fixture(autouse=True)
def reset_singletons():
    """
    Reset all singleton instances between tests.

    This ensures each test starts with a clean state.
    """
    from model_catalog.config import get_settings
    from model_catalog.registry.catalog import reset_model_registry

    get_settings.cache_clear()
    reset_model_registry()

    yield

    get_settings.cache_clear()
    reset_model_registry()


@pytest.fixture
def chat_spec():
    """
    Factory fixture for creating ChatModelSpec objects.

    Usage:
        spec = chat_spec("cheap", available=True, hot=False, intelligence=3)
    """

    def _create(
        model_id: str,
        provider: str = "TestProvider",
        available: bool | None = True,
        hot: bool | None = True,
        **attributes,
    ):
        from model_catalog.registry.models import ChatModelSpec

        return ChatModelSpec(
            model_id=model_id,
            provider_display_name=provider,
            impl=attributes.pop("impl", MagicMock()),
            is_available=None if available is None else make_probe(available),
            is_hot=None if hot is None else make_probe(hot),
            **attributes,
        )

    return _create


@pytest.fixture
def model_registry():
    """Get a fresh model registry instance."""
    from model_catalog.registry.catalog import get_model_registry

    return get_model_registry()


@pytest.fixture
def chat_registry(model_registry):
    """The chat TypeRegistry of a fresh model registry."""
    return model_registry.chat


@pytest.fixture
def mock_chat_response():
    """Create a mock Chat Completions response object."""
    response = MagicMock()
    response.choices = [
        MagicMock(message=MagicMock(content="Hello there"), finish_reason="stop")
    ]
    response.usage = MagicMock(prompt_tokens=100, completion_tokens=50)
    return response


@pytest.fixture
def mock_openai_client(mock_chat_response):
    """Create a fully mocked AsyncOpenAI-style client."""
    mock = AsyncMock()
    mock.chat = MagicMock()
    mock.chat.completions = MagicMock()
    mock.chat.completions.create = AsyncMock(return_value=mock_chat_response)
    return mock


@pytest.fixture
def offline_listings():
    """
    Patch every provider's model listing with a fetcher that returns None.

    Keeps provider registration (and the background status sweep) off
    the network.
    """
    from model_catalog.registry.fetcher import CachedFetcher

    def _listing(*args, **kwargs):
        return CachedFetcher(AsyncMock(return_value=None), label="offline")

    with patch("model_catalog.providers.openai.model_listing", side_effect=_listing), patch(
        "model_catalog.providers.groq.model_listing", side_effect=_listing
    ), patch("model_catalog.providers.openai_compatible.model_listing", side_effect=_listing):
        yield


@pytest.fixture
def test_client():
    """
    Create a FastAPI TestClient over an empty registry.

    No provider credentials are configured, so the lifespan registers
    nothing; tests populate get_model_registry() directly.
    """
    from model_catalog.main import app

    with TestClient(app) as client:
        yield client

"""
Test Fixtures

Shared probe helpers and vendor payloads for the model catalog test suite.
"""

from unittest.mock import AsyncMock


def make_probe(result: bool = True) -> AsyncMock:
    """Async probe returning a fixed result."""
    return AsyncMock(return_value=result)


def failing_probe(message: str = "probe exploded") -> AsyncMock:
    """Async probe that raises."""
    return AsyncMock(side_effect=RuntimeError(message))


# OpenAI /v1/models listing with a subset of the catalog's models
OPENAI_LISTING = {
    "object": "list",
    "data": [
        {"id": "gpt-4.1", "object": "model", "owned_by": "openai", "created": 1744316542},
        {"id": "gpt-4.1-mini", "object": "model", "owned_by": "openai", "created": 1744318173},
        {"id": "whisper-1", "object": "model", "owned_by": "openai-internal", "created": 1677532384},
    ],
}

# vLLM-style listing from a self-hosted OpenAI-compatible server
SELF_HOSTED_LISTING = {
    "object": "list",
    "data": [
        {"id": "Qwen/Qwen2.5-7B-Instruct", "object": "model", "max_model_len": 32768},
        {"id": "llama-3-8b", "object": "model", "meta": {"n_ctx_train": 8192}},
        {"id": "mistral-7b", "object": "model"},
        {"id": "nomic-embed-text-v1.5", "object": "model"},
        {"id": "BAAI/bge-reranker-v2-m3", "object": "model"},
    ],
}

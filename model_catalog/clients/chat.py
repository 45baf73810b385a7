"""
Chat Client - call-through to an OpenAI-style chat completions API.

The model's ``impl`` is an async SDK client exposing
``chat.completions.create`` (AsyncOpenAI, AsyncGroq, or AsyncOpenAI pointed
at an OpenAI-compatible server). The client builds the request, lets the
request hook adjust it, dispatches it, and reports usage, cost and
latency.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any

from model_catalog.clients.base import ModelClient
from model_catalog.clients.cost import CostBreakdown, TokenUsage, calculate_cost
from model_catalog.registry.models import ChatModelSpec

logger = logging.getLogger(__name__)


@dataclass
class ChatResult:
    """
    Result from one chat completion.

    Attributes:
        text: Assistant message content
        model_id: Model name sent to the vendor
        finish_reason: Vendor-reported stop reason
        latency_ms: Request time in milliseconds
        usage: Token usage for cost calculation
        cost: Cost breakdown from the spec's pricing
        raw_response: Vendor response object for debugging
    """

    text: str | None
    model_id: str
    finish_reason: str | None
    latency_ms: float
    usage: TokenUsage = field(default_factory=TokenUsage)
    cost: CostBreakdown = field(default_factory=CostBreakdown)
    raw_response: Any = None

    @property
    def tokens_per_sec(self) -> float | None:
        """Throughput over the whole request, None for instant responses."""
        if self.latency_ms <= 0:
            return None
        return self.usage.total_tokens / (self.latency_ms / 1000)


def _count(source: Any, name: str) -> int:
    value = getattr(source, name, None)
    return value if isinstance(value, int) else 0


def _extract_usage(response: Any) -> TokenUsage:
    """Split vendor usage into uncached/cached input and output/reasoning."""
    usage = getattr(response, "usage", None)
    if usage is None:
        return TokenUsage()

    prompt_tokens = _count(usage, "prompt_tokens")
    completion_tokens = _count(usage, "completion_tokens")

    # Detail objects are absent on some OpenAI-compatible servers
    cached = _count(getattr(usage, "prompt_tokens_details", None), "cached_tokens")
    reasoning = _count(getattr(usage, "completion_tokens_details", None), "reasoning_tokens")

    return TokenUsage(
        input_tokens=prompt_tokens - cached,
        output_tokens=completion_tokens - reasoning,
        cached_input_tokens=cached,
        reasoning_tokens=reasoning,
    )


class ChatClient(ModelClient[ChatModelSpec]):
    """
    Chat client for a resolved ChatModelSpec.

    Usage:
        client = registry.chat.resolve("OpenAI:gpt-4.1-mini?temperature=0.2")
        result = await client.chat([{"role": "user", "content": "Hello"}])
    """

    def calculate_cost(self, usage: TokenUsage) -> CostBreakdown:
        return calculate_cost(self.model_spec, usage)

    async def chat(self, messages: list[dict[str, Any]], **options: Any) -> ChatResult:
        """
        Send a chat completion request.

        Args:
            messages: OpenAI-style message dicts
            **options: Extra request parameters (max_tokens, tools, ...)

        Returns:
            ChatResult with text, usage, cost and latency

        Raises:
            Any vendor SDK error, after logging it
        """
        request: dict[str, Any] = {
            "model": self.get_model_id(),
            "messages": list(messages),
            **options,
        }
        if self.model_spec.max_completion_tokens is not None:
            request.setdefault("max_completion_tokens", self.model_spec.max_completion_tokens)
        request = self._prepare_request(request)

        start_time = time.perf_counter()
        try:
            response = await self.model_spec.impl.chat.completions.create(**request)
        except Exception as e:
            logger.error(f"Chat request failed for {self.model_spec.key}: {e}")
            raise

        latency_ms = (time.perf_counter() - start_time) * 1000
        usage = _extract_usage(response)
        choice = response.choices[0]

        logger.info(
            f"Chat completed: model={self.model_spec.key}, "
            f"latency={latency_ms:.0f}ms, tokens={usage.total_tokens}"
        )

        return ChatResult(
            text=choice.message.content,
            model_id=self.get_model_id(),
            finish_reason=getattr(choice, "finish_reason", None),
            latency_ms=latency_ms,
            usage=usage,
            cost=self.calculate_cost(usage),
            raw_response=response,
        )

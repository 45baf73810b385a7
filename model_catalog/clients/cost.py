"""
Cost Calculation for Chat Inference

Converts token usage reported by a vendor into a cost breakdown using the
per-million pricing declared on a ChatModelSpec.

Cached input tokens are billed at the cached-input rate when declared,
otherwise at the input rate. Reasoning tokens are billed at the reasoning
rate when declared, otherwise at the output rate.
"""

from dataclasses import dataclass

from model_catalog.registry.models import ChatModelSpec


@dataclass
class TokenUsage:
    """
    Token usage from model inference.

    input_tokens and output_tokens exclude the cached and reasoning portions,
    which are tracked separately for pricing.
    """

    input_tokens: int = 0
    output_tokens: int = 0
    cached_input_tokens: int = 0
    reasoning_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        """Total tokens consumed across all buckets."""
        return (
            self.input_tokens
            + self.output_tokens
            + self.cached_input_tokens
            + self.reasoning_tokens
        )


@dataclass
class CostBreakdown:
    """
    Cost of a single request in the provider's currency (usually USD).

    Attributes:
        input: Cost of uncached input tokens
        cached_input: Cost of cached input tokens
        output: Cost of output tokens
        reasoning: Cost of reasoning tokens
    """

    input: float = 0.0
    cached_input: float = 0.0
    output: float = 0.0
    reasoning: float = 0.0

    @property
    def total(self) -> float:
        """Sum of all cost components."""
        return self.input + self.cached_input + self.output + self.reasoning


def calculate_cost(spec: ChatModelSpec, usage: TokenUsage) -> CostBreakdown:
    """
    Calculate the cost breakdown for a request.

    Undeclared prices count as free.

    Args:
        spec: Chat model spec with pricing information
        usage: Token usage reported by the vendor

    Returns:
        CostBreakdown with per-bucket costs
    """
    input_rate = (spec.cost_per_million_input_tokens or 0.0) / 1_000_000
    output_rate = (spec.cost_per_million_output_tokens or 0.0) / 1_000_000

    cached_rate = input_rate
    if spec.cost_per_million_cached_input_tokens is not None:
        cached_rate = spec.cost_per_million_cached_input_tokens / 1_000_000

    reasoning_rate = output_rate
    if spec.cost_per_million_reasoning_tokens is not None:
        reasoning_rate = spec.cost_per_million_reasoning_tokens / 1_000_000

    return CostBreakdown(
        input=usage.input_tokens * input_rate,
        cached_input=usage.cached_input_tokens * cached_rate,
        output=usage.output_tokens * output_rate,
        reasoning=usage.reasoning_tokens * reasoning_rate,
    )

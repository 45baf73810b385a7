"""
Chat Model Selection - requirement filter with price ranking.

Accepts either structured requirements or a compact string:

    <provider>:<key><op><value>{,<key><op><value>}

where <op> is one of >, <, >=, <=, = or empty (equality). A bare string
equal to a registered key is a name shortcut. A provider of "auto" means
no provider constraint.

Matches are ranked ascending by a fixed price estimate:

    max(10000, requested context length) * (input cost per 1M ?? 600)
        + 1000 * (output cost per 1M ?? 600)

Client selection then prefers the first hot model in ranked order and falls
back to the first merely available one.
"""

import logging
import re
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from model_catalog.errors import RequirementSyntaxError
from model_catalog.registry.models import ChatModelSpec
from model_catalog.registry.requirements import (
    ChatModelRequirements,
    Condition,
)
from model_catalog.registry.type_registry import TypeRegistry

logger = logging.getLogger(__name__)

# Price estimate constants
MIN_ESTIMATED_CONTEXT_TOKENS = 10000
ESTIMATED_OUTPUT_TOKENS = 1000
DEFAULT_COST_PER_MILLION = 600

_FILTER_PATTERN = re.compile(r"^([A-Za-z0-9_]+)([<>=].*)$", re.DOTALL)

RequirementsInput = ChatModelRequirements | Mapping[str, Any] | str


def _validate(values: Mapping[str, Any]) -> ChatModelRequirements:
    try:
        return ChatModelRequirements.model_validate(dict(values))
    except ValidationError as e:
        raise RequirementSyntaxError(f"Invalid model requirements: {e}") from e


def parse_requirement_string(text: str, registry: TypeRegistry) -> ChatModelRequirements:
    """
    Parse the compact requirement string.

    Examples:
        "openai:gpt-4.1"                      registered key -> name shortcut
        "auto:intelligence>3,speed>=2"        any provider, two conditions
        "OpenAI:contextLength>=100000"        one provider, one condition

    Raises:
        RequirementSyntaxError: If a filter is not ``<key><op><value>``
    """
    if text in registry:
        return _validate({"name": text})

    provider, sep, filters = text.partition(":")
    if not sep or not filters:
        return _validate({"name": text})

    values: dict[str, Any] = {"provider": provider}
    for item in filters.split(","):
        match = _FILTER_PATTERN.match(item.strip())
        if match is None:
            raise RequirementSyntaxError(
                f"Invalid requirement '{item}', expected <key><op><value>"
            )
        key, condition = match.groups()
        values[key] = condition
    return _validate(values)


def parse_requirements(requirements: RequirementsInput, registry: TypeRegistry) -> ChatModelRequirements:
    """
    Normalize any accepted requirement form and drop an 'auto' provider.

    Raises:
        RequirementSyntaxError: For unknown fields or malformed conditions
    """
    if isinstance(requirements, str):
        parsed = parse_requirement_string(requirements, registry)
    elif isinstance(requirements, ChatModelRequirements):
        parsed = requirements
    else:
        parsed = _validate(requirements)
    return parsed.without_auto_provider()


def requested_context_length(requirements: ChatModelRequirements) -> int:
    """Return the context length used for price estimation."""
    if requirements.context_length is None:
        return MIN_ESTIMATED_CONTEXT_TOKENS
    return max(MIN_ESTIMATED_CONTEXT_TOKENS, int(requirements.context_length.numeric_value()))


def estimate_price(spec: ChatModelSpec, context_length: int = MIN_ESTIMATED_CONTEXT_TOKENS) -> float:
    """
    Estimate the price of one request against a spec.

    Args:
        spec: Candidate chat model
        context_length: Requested context length in tokens

    Returns:
        Relative price (context tokens at input cost + 1000 output tokens)
    """
    input_cost = spec.cost_per_million_input_tokens
    output_cost = spec.cost_per_million_output_tokens
    return (
        max(MIN_ESTIMATED_CONTEXT_TOKENS, context_length)
        * (DEFAULT_COST_PER_MILLION if input_cost is None else input_cost)
        + ESTIMATED_OUTPUT_TOKENS
        * (DEFAULT_COST_PER_MILLION if output_cost is None else output_cost)
    )


def _check_condition(key: str, spec: ChatModelSpec, field: str, condition: Condition) -> bool:
    if field == "name":
        return condition.matches(key, ignore_case=True)
    if field in ("provider", "provider_display_name"):
        return condition.matches(spec.provider_display_name, ignore_case=True)
    return condition.matches(getattr(spec, field, None))


def spec_matches(key: str, spec: ChatModelSpec, requirements: ChatModelRequirements) -> bool:
    """Check whether one registered spec satisfies every condition."""
    return all(
        _check_condition(key, spec, field, condition)
        for field, condition in requirements.conditions().items()
    )


def filter_chat_specs(
    registry: TypeRegistry[ChatModelSpec, Any],
    requirements: RequirementsInput,
) -> list[ChatModelSpec]:
    """
    Return specs satisfying the requirements, cheapest first.

    Raises:
        RequirementSyntaxError: For malformed requirements
    """
    parsed = parse_requirements(requirements, registry)
    context_length = requested_context_length(parsed)

    eligible = [
        spec for spec in registry.all_specs() if spec_matches(spec.key, spec, parsed)
    ]
    eligible.sort(key=lambda spec: estimate_price(spec, context_length))

    logger.debug(
        f"Requirements {parsed.conditions()} matched {len(eligible)} model(s): "
        f"{[spec.key for spec in eligible]}"
    )
    return eligible


async def get_first_online_chat_client(
    registry: TypeRegistry[ChatModelSpec, Any],
    requirements: RequirementsInput,
):
    """
    Select the cheapest reachable chat model satisfying the requirements.

    Hot models are preferred; a cold model is used only if no hot model
    qualifies.

    Raises:
        RequirementSyntaxError: For malformed requirements
        NoOnlineModelError: If no matching model is available
    """
    specs = filter_chat_specs(registry, requirements)
    return await registry.first_online_client(specs)

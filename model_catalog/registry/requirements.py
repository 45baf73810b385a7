"""
Requirement Conditions

Chat model requirements are expressed as conditions on spec attributes,
written with an operator prefix on the value:

    ">3"  "<0.5"  ">=100000"  "<=2"  "=OpenAI"  "OpenAI"

Each condition is parsed once per query into a tagged Condition (operator
plus comparison value) and applied through a single comparator table.
An unrecognized operator is a hard error.
"""

import operator
import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, PlainValidator, model_validator
from pydantic.alias_generators import to_camel

from model_catalog.errors import RequirementSyntaxError


class Op(str, Enum):
    """Comparison operators accepted as a value prefix."""

    EQ = "="
    GT = ">"
    LT = "<"
    GTE = ">="
    LTE = "<="


_COMPARATORS: dict[Op, Callable[[Any, Any], bool]] = {
    Op.EQ: operator.eq,
    Op.GT: operator.gt,
    Op.LT: operator.lt,
    Op.GTE: operator.ge,
    Op.LTE: operator.le,
}

_CONDITION_PATTERN = re.compile(r"^([<>=]*)(.*)$", re.DOTALL)


@dataclass(frozen=True)
class Condition:
    """
    One parsed requirement: an operator and the value to compare against.

    Attributes:
        op: Comparison operator
        value: Comparison value as written (str) or as given (number/bool)
    """

    op: Op
    value: str | float | bool

    def numeric_value(self) -> float:
        """Return the comparison value as a number."""
        if isinstance(self.value, (int, float)):
            return float(self.value)
        try:
            return float(self.value)
        except ValueError:
            raise RequirementSyntaxError(
                f"Condition value '{self.value}' is not a number"
            ) from None

    def matches(self, actual: Any, *, ignore_case: bool = False) -> bool:
        """
        Apply this condition to a spec attribute value.

        Numeric attributes support every operator; string attributes support
        equality only. A missing attribute (None) never matches.

        Raises:
            RequirementSyntaxError: If the operator or value does not fit
                the attribute type
        """
        if actual is None:
            return False

        if isinstance(actual, (int, float)) and not isinstance(actual, bool):
            return _COMPARATORS[self.op](actual, self.numeric_value())

        if self.op != Op.EQ:
            raise RequirementSyntaxError(
                f"Operator '{self.op.value}' is not supported for non-numeric values"
            )

        expected = self.value
        if isinstance(actual, bool):
            if isinstance(expected, str):
                expected = expected.lower() in ("1", "true")
            return actual == expected

        actual_text, expected_text = str(actual), str(expected)
        if ignore_case:
            return actual_text.lower() == expected_text.lower()
        return actual_text == expected_text


def parse_condition(value: Any) -> Condition:
    """
    Parse a raw requirement value into a Condition.

    Numbers and booleans become equality conditions. Strings carry an
    optional operator prefix (=, >, <, >=, <=).

    Raises:
        RequirementSyntaxError: For an unrecognized operator or empty value
    """
    if isinstance(value, Condition):
        return value
    if isinstance(value, bool):
        return Condition(Op.EQ, value)
    if isinstance(value, (int, float)):
        return Condition(Op.EQ, float(value))
    if not isinstance(value, str):
        raise RequirementSyntaxError(f"Unsupported requirement value: {value!r}")

    op_text, rest = _CONDITION_PATTERN.match(value.strip()).groups()
    try:
        op = Op(op_text or "=")
    except ValueError:
        raise RequirementSyntaxError(f"Unknown operator '{op_text}'") from None
    if not rest:
        raise RequirementSyntaxError(f"Requirement '{value}' has no comparison value")
    return Condition(op, rest)


Requirement = Annotated[Condition, PlainValidator(parse_condition)]

# Compared as text; every other requirement field is numeric
IDENTITY_FIELDS = frozenset({"name", "provider", "provider_display_name"})


class ChatModelRequirements(BaseModel):
    """
    Structured requirements for selecting a chat model.

    Field names are accepted in snake_case or camelCase
    (``context_length`` or ``contextLength``); unknown fields are rejected.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )

    name: Requirement | None = Field(
        default=None, description="Registry key the model must have"
    )
    provider: Requirement | None = Field(
        default=None, description="Provider display name, or 'auto' for any provider"
    )
    provider_display_name: Requirement | None = Field(default=None)

    context_length: Requirement | None = Field(
        default=None, description="Context length in tokens the model allows"
    )
    max_completion_tokens: Requirement | None = Field(
        default=None, description="Output tokens the model allows"
    )
    research: Requirement | None = Field(default=None, description="Research ability (0-infinity)")
    reasoning_text: Requirement | None = Field(default=None, description="Reasoning score (0-infinity)")
    intelligence: Requirement | None = Field(default=None, description="Intelligence score (0-infinity)")
    speed: Requirement | None = Field(default=None, description="Speed score (0-infinity)")
    web_search: Requirement | None = Field(default=None, description="Web search score (0-infinity)")
    tools: Requirement | None = Field(default=None, description="Tool-use score (0-infinity)")

    cost_per_million_input_tokens: Requirement | None = Field(default=None)
    cost_per_million_output_tokens: Requirement | None = Field(default=None)

    @model_validator(mode="after")
    def check_conditions(self) -> "ChatModelRequirements":
        """
        Validate every condition up front, independent of registered models.

        Identity fields accept equality only; numeric fields need a value
        that parses as a number.
        """
        for field, condition in self.conditions().items():
            if field in IDENTITY_FIELDS:
                if condition.op != Op.EQ:
                    raise RequirementSyntaxError(
                        f"Operator '{condition.op.value}' is not supported for {field}"
                    )
            else:
                condition.numeric_value()
        return self

    def conditions(self) -> dict[str, Condition]:
        """Return the set conditions keyed by field name."""
        return {
            field: getattr(self, field)
            for field in type(self).model_fields
            if getattr(self, field) is not None
        }

    def without_auto_provider(self) -> "ChatModelRequirements":
        """Drop a provider condition of 'auto', which means no constraint."""
        if self.provider is not None and str(self.provider.value).lower() == "auto":
            return self.model_copy(update={"provider": None})
        return self

"""
Model Descriptors

This module defines the declarative shape of a registered model:
- FeatureSpec: one typed, boundable per-call tuning parameter
- ModelSpec: identity, probes, features and request hook shared by every category
- Category specs (chat, embedding, image, speech, transcription, reranking)
  adding the capability and cost attributes used for selection
- ModelStatus: derived online/cold/offline view of a spec

A spec is identified by ``providerDisplayName:modelId`` (lowercased), which
must be unique within one category registry.
"""

import math
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from model_catalog.errors import FeatureValidationError


class FeatureType(str, Enum):
    """Value types a feature may declare."""

    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ENUM = "enum"
    ARRAY = "array"


class ModelStatusName(str, Enum):
    """
    Availability classification of a model.

    ONLINE: reachable and warmed for low-latency inference
    COLD: reachable but requires a cold-start delay
    OFFLINE: not reachable
    """

    ONLINE = "online"
    COLD = "cold"
    OFFLINE = "offline"


FeatureValue = bool | float | str | list[str]
FeatureOptions = dict[str, FeatureValue]

ProbeFunction = Callable[[], Awaitable[bool]]
RequestHook = Callable[[Any, FeatureOptions], None]


class FeatureSpec(BaseModel):
    """
    Declaration of one tunable request parameter.

    Values supplied by callers are coerced through coerce(), which enforces
    the declared type and, for numbers, the declared bounds.
    """

    model_config = ConfigDict(frozen=True)

    description: str = Field(
        default="",
        description="Human-readable explanation of the feature",
    )

    type: FeatureType = Field(
        ...,
        description="Declared value type",
    )

    default_value: Any = Field(
        default=None,
        description="Value used when the feature is not supplied",
    )

    min: float | None = Field(
        default=None,
        description="Inclusive lower bound (number features only)",
    )

    max: float | None = Field(
        default=None,
        description="Inclusive upper bound (number features only)",
    )

    values: list[str] | None = Field(
        default=None,
        description="Allowed values (enum features only)",
    )

    @model_validator(mode="after")
    def check_declaration(self) -> "FeatureSpec":
        """Reject declarations whose bounds or allowed values do not fit the type."""
        if self.type == FeatureType.ENUM and not self.values:
            raise ValueError("enum features must declare a non-empty 'values' list")
        if self.type != FeatureType.NUMBER and (self.min is not None or self.max is not None):
            raise ValueError("'min' and 'max' are only valid for number features")
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(f"'min' ({self.min}) must not exceed 'max' ({self.max})")
        return self

    def coerce(self, raw: str, name: str = "feature") -> FeatureValue:
        """
        Convert a raw query-string value to the declared type.

        Args:
            raw: The decoded value from the feature query
            name: Feature name, used in error messages

        Returns:
            The typed feature value

        Raises:
            FeatureValidationError: If a number is unparseable or out of bounds
        """
        match self.type:
            case FeatureType.BOOLEAN:
                return raw == "1" or raw.lower() == "true"
            case FeatureType.NUMBER:
                return self._coerce_number(raw, name)
            case FeatureType.ENUM:
                return raw if raw in self.values else self.default_value
            case FeatureType.ARRAY:
                return [item.strip() for item in raw.split(",")]
            case _:
                return raw

    def _coerce_number(self, raw: str, name: str) -> float:
        try:
            # float() also accepts digit separators ("1_000"); query syntax does not
            if "_" in raw:
                raise ValueError(raw)
            number = float(raw)
        except ValueError:
            raise FeatureValidationError(
                f'Feature "{name}" expects a number, got "{raw}"', feature=name
            ) from None

        if not math.isfinite(number):
            raise FeatureValidationError(
                f'Feature "{name}" expects a finite number, got "{raw}"', feature=name
            )
        if self.min is not None and number < self.min:
            raise FeatureValidationError(
                f'Feature "{name}" value {number} is below the minimum {self.min}',
                feature=name,
            )
        if self.max is not None and number > self.max:
            raise FeatureValidationError(
                f'Feature "{name}" value {number} is above the maximum {self.max}',
                feature=name,
            )
        return number


class ModelSpec(BaseModel):
    """
    Registered descriptor of one concrete vendor model within one category.

    Probes (is_available, is_hot) are async callables owned by the provider
    adapter; they usually consult a CachedFetcher and may perform a network
    round trip. The registry treats a missing is_available as unavailable
    and a missing is_hot as hot.

    mangle_request, when set, is invoked exactly once by the client wrapper
    immediately before a request is dispatched to the vendor, receiving the
    mutable request and the resolved feature map.
    """

    model_config = ConfigDict(
        protected_namespaces=(),
        arbitrary_types_allowed=True,
    )

    model_id: str = Field(
        ...,
        min_length=1,
        description="Vendor model identifier",
    )

    provider_display_name: str = Field(
        ...,
        min_length=1,
        description="Display name of the configured provider instance",
    )

    api_model_name: str | None = Field(
        default=None,
        description="Model name used in vendor API calls (defaults to model_id)",
    )

    impl: Any = Field(
        default=None,
        exclude=True,
        description="Vendor SDK handle used by the client wrappers",
    )

    is_available: ProbeFunction | None = Field(default=None, exclude=True)

    is_hot: ProbeFunction | None = Field(default=None, exclude=True)

    features: dict[str, FeatureSpec] = Field(
        default_factory=dict,
        description="Tunable per-call parameters keyed by feature name",
    )

    mangle_request: RequestHook | None = Field(default=None, exclude=True)

    @property
    def key(self) -> str:
        """Registry key: ``providerDisplayName:modelId`` lowercased."""
        return f"{self.provider_display_name}:{self.model_id}".lower()

    @property
    def vendor_model_name(self) -> str:
        return self.api_model_name or self.model_id

    def describe(self) -> dict[str, Any]:
        """Return the declarative, JSON-safe fields of this spec."""
        return self.model_dump(mode="json", exclude_none=True)


class ChatModelSpec(ModelSpec):
    """Chat/completion model with context, cost and capability scores."""

    context_length: int | None = Field(default=None, gt=0, description="Maximum context in tokens")
    max_completion_tokens: int | None = Field(default=None, gt=0, description="Maximum output tokens")

    cost_per_million_input_tokens: float | None = Field(default=None, ge=0)
    cost_per_million_cached_input_tokens: float | None = Field(default=None, ge=0)
    cost_per_million_output_tokens: float | None = Field(default=None, ge=0)
    cost_per_million_reasoning_tokens: float | None = Field(default=None, ge=0)

    reasoning_text: int | None = Field(default=None, ge=0, description="Reasoning capability score")
    intelligence: int | None = Field(default=None, ge=0, description="Intelligence capability score")
    speed: int | None = Field(default=None, ge=0, description="Speed capability score")
    research: int | None = Field(default=None, ge=0, description="Research capability score")
    web_search: int | None = Field(default=None, ge=0, description="Web search capability score")
    tools: int | None = Field(default=None, ge=0, description="Tool-use capability score")


class EmbeddingModelSpec(ModelSpec):
    """Text embedding model."""

    context_length: int | None = Field(default=None, gt=0)
    cost_per_million_input_tokens: float | None = Field(default=None, ge=0)
    cost_per_million_output_tokens: float | None = Field(default=None, ge=0)


class ImageModelSpec(ModelSpec):
    """Image generation model."""

    cost_per_image: float | None = Field(default=None, ge=0)
    cost_per_million_input_tokens: float | None = Field(default=None, ge=0)
    cost_per_million_output_tokens: float | None = Field(default=None, ge=0)


class SpeechModelSpec(ModelSpec):
    """Text-to-speech model."""

    cost_per_million_characters: float | None = Field(default=None, ge=0)


class TranscriptionModelSpec(ModelSpec):
    """Speech-to-text model."""

    cost_per_minute: float | None = Field(default=None, ge=0)


class RerankingModelSpec(ModelSpec):
    """Document reranking model."""

    cost_per_million_input_tokens: float | None = Field(default=None, ge=0)


def derive_status(available: bool, hot: bool) -> ModelStatusName:
    """
    Classify a model from its probe results.

    Returns:
        ONLINE if available and hot, COLD if available but not hot,
        OFFLINE otherwise (regardless of hot)
    """
    if not available:
        return ModelStatusName.OFFLINE
    return ModelStatusName.ONLINE if hot else ModelStatusName.COLD


@dataclass
class ModelStatus:
    """
    Status of one registered model, recomputed on every query.

    Attributes:
        status: Derived classification (online, cold, offline)
        available: Result of the availability probe
        hot: Result of the hot probe
        model_spec: The registered spec
    """

    status: ModelStatusName
    available: bool
    hot: bool
    model_spec: ModelSpec

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "status": self.status.value,
            "available": self.available,
            "hot": self.hot,
            "model_spec": self.model_spec.describe(),
        }

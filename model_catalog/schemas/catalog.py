"""
Pydantic Schemas for the Catalog API

This module defines the response models for the read-only query surface:
- Model status listings (flat and grouped by provider)
- Name resolution results
- Error responses and health check schemas
"""

from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from model_catalog.registry.models import ModelStatusName

if TYPE_CHECKING:
    from model_catalog.registry.models import ModelStatus


# =============================================================================
# MODEL STATUS MODELS
# =============================================================================


class ModelStatusEntry(BaseModel):
    """
    Status of one registered model.

    model_spec holds the declarative fields only; SDK handles, probes and
    request hooks are never serialized.
    """

    status: ModelStatusName = Field(
        ...,
        description="online (available and hot), cold (available, not hot) or offline",
    )

    available: bool = Field(..., description="Result of the availability probe")

    hot: bool = Field(..., description="Result of the hot probe")

    model_spec: dict[str, Any] = Field(
        default_factory=dict,
        description="Declarative model attributes (costs, capabilities, features)",
    )


class ModelListResponse(BaseModel):
    """
    Response from GET /models/{category}.

    Example:
        {
            "category": "chat",
            "models": {
                "openai:gpt-4.1": {"status": "online", "available": true, "hot": true, ...}
            },
            "total_models": 1
        }
    """

    category: str = Field(..., description="Model category")

    models: dict[str, ModelStatusEntry] = Field(
        default_factory=dict,
        description="Status keyed by providerDisplayName:modelId",
    )

    total_models: int = Field(default=0, ge=0)


class ModelsByProviderResponse(BaseModel):
    """Response from GET /models/{category}/by-provider."""

    category: str = Field(..., description="Model category")

    models_by_provider: dict[str, dict[str, ModelStatusEntry]] = Field(
        default_factory=dict,
        description="Provider display name -> {key: status}",
    )


class ResolveResponse(BaseModel):
    """Response from GET /models/{category}/resolve."""

    category: str = Field(..., description="Model category")

    name: str = Field(..., description="The requested name, as given")

    key: str = Field(..., description="The registry key the name resolved to")

    model_spec: dict[str, Any] = Field(default_factory=dict)

    features: dict[str, Any] = Field(
        default_factory=dict,
        description="Parsed and typed feature values from the name's query",
    )


# =============================================================================
# ERROR MODELS
# =============================================================================


class ErrorCodes:
    """
    Standard error codes for API responses.

    These codes enable programmatic error handling by clients
    without parsing human-readable messages.
    """

    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNKNOWN_CATEGORY = "UNKNOWN_CATEGORY"
    MODEL_NOT_FOUND = "MODEL_NOT_FOUND"
    AMBIGUOUS_MODEL = "AMBIGUOUS_MODEL"
    UNKNOWN_FEATURE = "UNKNOWN_FEATURE"
    INVALID_FEATURE = "INVALID_FEATURE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorDetail(BaseModel):
    """Machine-readable code plus human-readable message."""

    code: str = Field(
        ...,
        description="Machine-readable error code for programmatic handling",
    )

    message: str = Field(
        ...,
        description="Human-readable error message",
    )

    field: str | None = Field(
        default=None,
        description="Field that caused the error (for validation errors)",
    )


class ErrorResponse(BaseModel):
    """
    Standard error response format for all API errors.

    Example:
        {
            "error": {
                "code": "MODEL_NOT_FOUND",
                "message": "Model openai:gpt-9 not found"
            }
        }
    """

    error: ErrorDetail = Field(..., description="Error details")

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "error": {
                        "code": "AMBIGUOUS_MODEL",
                        "message": "Model pattern openai:gpt-* is ambiguous, matches: ...",
                    }
                }
            ]
        }
    )


# =============================================================================
# HEALTH MODELS
# =============================================================================


class ComponentHealth(BaseModel):
    """
    Health status of an individual system component.

    Used to report the state of each category registry.
    """

    name: str = Field(
        ...,
        description="Component name (e.g., 'chat', 'embedding')",
    )

    status: Literal["healthy", "degraded", "unhealthy"] = Field(
        ...,
        description="Component health status",
    )

    message: str | None = Field(
        default=None,
        description="Additional status information",
    )


class HealthResponse(BaseModel):
    """
    Response from the /health endpoint.

    Example:
        {
            "status": "healthy",
            "service": "model-catalog",
            "version": "0.1.0",
            "providers": ["OpenAI", "Groq"],
            "components": [{"name": "chat", "status": "healthy", "message": "17 models registered"}],
            "uptime_seconds": 3600.5
        }
    """

    status: Literal["healthy", "degraded", "unhealthy"] = Field(
        ...,
        description="Overall service health status",
    )

    service: str = Field(default="model-catalog", description="Service identifier")

    version: str = Field(..., description="Application version")

    providers: list[str] = Field(
        default_factory=list,
        description="Display names of registered providers",
    )

    components: list[ComponentHealth] = Field(default_factory=list)

    uptime_seconds: float | None = Field(default=None, ge=0.0)


# =============================================================================
# CONVERSION UTILITIES
# =============================================================================


def status_entry(status: "ModelStatus") -> ModelStatusEntry:
    """Convert a ModelStatus dataclass to its response model."""
    return ModelStatusEntry.model_validate(status.to_dict())

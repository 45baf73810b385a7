"""
Schemas module: Pydantic response models for the catalog API.
"""

from model_catalog.schemas.catalog import (
    ComponentHealth,
    ErrorCodes,
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    ModelListResponse,
    ModelsByProviderResponse,
    ModelStatusEntry,
    ResolveResponse,
    status_entry,
)

__all__ = [
    "ComponentHealth",
    "ErrorCodes",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    "ModelListResponse",
    "ModelsByProviderResponse",
    "ModelStatusEntry",
    "ResolveResponse",
    "status_entry",
]

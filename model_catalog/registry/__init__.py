"""
Registry module: model descriptors, per-category registries and chat
requirement selection.

This module contains:
- fetcher.py: CachedFetcher, TTL-cached single-flight fetches for probes
- models.py: FeatureSpec, ModelSpec and per-category specs, ModelStatus
- type_registry.py: TypeRegistry, per-category catalog and name resolver
- requirements.py / selection.py: chat requirement parsing and price ranking
- catalog.py: ModelRegistry aggregate and singleton accessor

catalog.py is not re-exported here because it depends on the client
wrappers, which in turn depend on models.py.
"""

from model_catalog.registry.fetcher import CachedFetcher, cached_http_get
from model_catalog.registry.models import (
    ChatModelSpec,
    EmbeddingModelSpec,
    FeatureSpec,
    FeatureType,
    ImageModelSpec,
    ModelSpec,
    ModelStatus,
    ModelStatusName,
    RerankingModelSpec,
    SpeechModelSpec,
    TranscriptionModelSpec,
)
from model_catalog.registry.requirements import ChatModelRequirements
from model_catalog.registry.type_registry import TypeRegistry

__all__ = [
    "CachedFetcher",
    "cached_http_get",
    "ChatModelRequirements",
    "ChatModelSpec",
    "EmbeddingModelSpec",
    "FeatureSpec",
    "FeatureType",
    "ImageModelSpec",
    "ModelSpec",
    "ModelStatus",
    "ModelStatusName",
    "RerankingModelSpec",
    "SpeechModelSpec",
    "TranscriptionModelSpec",
    "TypeRegistry",
]

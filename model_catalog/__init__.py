"""
Model-Catalog: Category-scoped Registry for Inference Models

A catalog and selection engine for chat, embedding, image-generation,
speech, transcription and reranking models from many vendors. Callers
describe what they need (a model name with per-call features, or capability
and price requirements) and the catalog resolves it to one reachable model
and a configured client for it.
"""

__version__ = "0.1.0"

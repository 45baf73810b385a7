"""
Reranking Client - call-through to a ``/rerank`` HTTP endpoint.

The model's ``impl`` is an ``httpx.AsyncClient`` configured with the vendor
base URL and credentials. The request body follows the common
``{model, query, documents, top_n}`` shape.
"""

import logging
from dataclasses import dataclass
from typing import Any

from model_catalog.clients.base import ModelClient
from model_catalog.registry.models import RerankingModelSpec

logger = logging.getLogger(__name__)


@dataclass
class RerankResult:
    """Relevance of one document, by its original index."""

    index: int
    relevance_score: float


class RerankingClient(ModelClient[RerankingModelSpec]):
    """Reranking client for a resolved RerankingModelSpec."""

    async def rerank(
        self,
        query: str,
        documents: list[str],
        top_n: int | None = None,
    ) -> list[RerankResult]:
        """
        Rank documents by relevance to a query, most relevant first.
        """
        request: dict[str, Any] = {
            "model": self.get_model_id(),
            "query": query,
            "documents": list(documents),
        }
        if top_n is not None:
            request["top_n"] = top_n
        request = self._prepare_request(request)

        try:
            response = await self.model_spec.impl.post("/rerank", json=request)
            response.raise_for_status()
        except Exception as e:
            logger.error(f"Rerank request failed for {self.model_spec.key}: {e}")
            raise

        results = [
            RerankResult(index=item["index"], relevance_score=item["relevance_score"])
            for item in response.json()["results"]
        ]
        return sorted(results, key=lambda r: r.relevance_score, reverse=True)

"""
Abstract base class and result types for reranking implementations.

All rerankers must implement this interface to be swappable.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence


def item_data(item: Mapping[str, Any]) -> Mapping[str, Any]:
    """The nested data object of a host record ({} when absent)."""
    data = item.get("json")
    return data if isinstance(data, Mapping) else {}


@dataclass(frozen=True)
class RawSignals:
    """Per-document relevance signals before normalization and fusion"""
    semantic: float  # Cosine similarity or external score
    bm25: float      # Raw BM25 (>= 0)
    exact: float     # Fraction of query tokens present (0-1)
    recency: float   # Exponential time decay (0-1]


@dataclass
class ScoredDocument:
    """Candidate with its signals and final fused score"""
    index: int                  # Original index in candidates list
    item: Mapping[str, Any]     # Caller-owned record (never mutated)
    signals: RawSignals
    bm25_normalized: float
    score: float

    def to_output(self, debug: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Augmented copy of the record: original fields + score fields."""
        data = dict(item_data(self.item))
        data["rerank_score"] = self.score
        data["bm25_raw"] = self.signals.bm25
        if debug is not None:
            data["debug"] = {
                "semantic": self.signals.semantic,
                "bm25": self.signals.bm25,
                "bm25_normalized": self.bm25_normalized,
                "exact": self.signals.exact,
                "recency": self.signals.recency,
                **debug,
            }
        return {**self.item, "json": data}


@dataclass
class RerankOutcome:
    """Ranked records plus non-fatal diagnostics"""
    results: List[Dict[str, Any]]
    warnings: List[str] = field(default_factory=list)


class BaseReranker(ABC):
    """
    Abstract base class for reranking implementations.

    All rerankers must implement this interface to be swappable.
    """

    @abstractmethod
    def rerank(
        self,
        query: str,
        query_embedding: Sequence[float],
        items: Sequence[Mapping[str, Any]],
        now: Optional[datetime] = None,
    ) -> RerankOutcome:
        """
        Rerank candidate records by relevance to query.

        Args:
            query: Search query text
            query_embedding: Query vector (may be empty)
            items: Candidate records ({"json": {"chunk": ..., ...}})
            now: Reference time for recency (default: current UTC time)

        Returns:
            RerankOutcome with records sorted by rerank_score (descending)
        """
        pass

    @abstractmethod
    def get_model_info(self) -> dict:
        """
        Get information about the reranker.

        Returns:
            Dict with keys: name, type, parameters
        """
        pass

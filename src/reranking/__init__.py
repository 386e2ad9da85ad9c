"""
Reranking module: hybrid semantic + lexical + recency reranker.

Usage:
    # Get reranker (auto-configured from env):
    from src.reranking import get_reranker

    reranker = get_reranker()
    outcome = reranker.rerank(query, query_embedding, items)
    results = outcome.results

    # Or go through the never-raising request boundary:
    from src.reranking import RerankConfig, rerank_request

    results = rerank_request(
        {"query": query, "query_embedding": [], "items": items},
        RerankConfig(topN=3, normalizeMethod="minmax"),
    )
"""

from .base import BaseReranker, RawSignals, RerankOutcome, ScoredDocument
from .config import ModelWeights, RerankConfig, ScoreWeights
from .errors import (
    InputMissingError,
    ModelConfigInvalidError,
    RerankError,
    SchemaInvalidError,
)
from .factory import RerankingFactory
from .fusion import fuse, select_top_n
from .hybrid import HybridReranker
from .invocation import execute, rerank_request


def get_reranker(force_reload: bool = False) -> BaseReranker:
    """
    Get configured reranker instance (factory convenience function).
    """
    return RerankingFactory.create(force_reload=force_reload)


__all__ = [
    'BaseReranker',
    'RawSignals',
    'RerankOutcome',
    'ScoredDocument',
    'ModelWeights',
    'RerankConfig',
    'ScoreWeights',
    'RerankError',
    'InputMissingError',
    'SchemaInvalidError',
    'ModelConfigInvalidError',
    'HybridReranker',
    'fuse',
    'select_top_n',
    'execute',
    'rerank_request',
    'get_reranker',
]

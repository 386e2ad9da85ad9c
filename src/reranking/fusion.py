"""
Score fusion and top-N selection.

Two fusion modes combine the normalized signals into one rerank score:

Linear (default):
    score = sem × Ws + bm25n × Wl + exact × We + rec × Wt

Logistic (learned model, opt-in):
    z     = sem × ws + bm25n × wb + exact × we + rec × wr + bias
    score = 1 / (1 + e^-z)            always in (0, 1)

Ranking sorts by score descending; equal scores keep input order.
"""

from typing import List, Optional, Sequence

from ..bm25.normalization import sigmoid
from .base import RawSignals, ScoredDocument
from .config import ModelWeights, ScoreWeights


def fuse_linear(signals: RawSignals, bm25_normalized: float, weights: ScoreWeights) -> float:
    """Weighted sum of the signals (not clamped)."""
    return (
        signals.semantic * weights.semantic
        + bm25_normalized * weights.lexical
        + signals.exact * weights.exact
        + signals.recency * weights.recency
    )


def fuse_logistic(signals: RawSignals, bm25_normalized: float, model: ModelWeights) -> float:
    """Logistic-regression blend of the signals."""
    z = (
        signals.semantic * model.semantic
        + bm25_normalized * model.bm25
        + signals.exact * model.exact
        + signals.recency * model.recency
        + model.bias
    )
    return sigmoid(z)


def fuse(
    signals: RawSignals,
    bm25_normalized: float,
    weights: ScoreWeights,
    model: Optional[ModelWeights] = None,
) -> float:
    """
    Final rerank score for one document.

    Args:
        signals: Raw signals (semantic, bm25, exact, recency)
        bm25_normalized: BM25 after batch normalization, in [0, 1]
        weights: Linear fusion weights
        model: Logistic coefficients; when given, overrides linear fusion

    Returns:
        Fused score
    """
    if model is not None:
        return fuse_logistic(signals, bm25_normalized, model)
    return fuse_linear(signals, bm25_normalized, weights)


def select_top_n(scored: Sequence[ScoredDocument], n: int) -> List[ScoredDocument]:
    """
    Highest-scoring documents first, at most n of them.

    Ties on score are broken by original input index (ascending), so the
    ranking is deterministic regardless of batch boundaries.
    """
    ranked = sorted(scored, key=lambda d: (-d.score, d.index))
    return ranked[:max(n, 0)]

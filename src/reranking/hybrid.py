"""
Hybrid reranker: semantic + lexical + recency score fusion.

Offline, dependency-light reranking of an upstream candidate list:
- Semantic: cosine similarity of embeddings, or an external score
- Lexical: BM25 (global IDF) + exact token overlap
- Recency: exponential decay with configurable half-life
- BM25 normalization: sigmoid (default) or min-max per batch
- Fusion: weighted sum, or logistic regression with learned weights

Two passes over the candidates:
1. Tokenize every document and build the global DF map (IDF must see the
   whole corpus, never a single batch)
2. Per batch: score raw signals, normalize BM25 from that batch's values,
   fuse into the final score

Batches are processed sequentially; they only bound the working set of
batch-local statistics (average length, min/max BM25).
"""

import logging
from datetime import datetime, timezone
from functools import partial
from typing import Any, List, Mapping, Optional, Sequence

from ..bm25.corpus_stats import compute_global_df
from ..bm25.normalization import build_normalizer
from ..bm25.scorer import BM25Scorer
from ..bm25.tokenizer import build_stopwords, tokenize
from .base import BaseReranker, RerankOutcome, ScoredDocument, item_data
from .config import RerankConfig
from .fusion import fuse, select_top_n
from .signals import score_document

logger = logging.getLogger(__name__)


def _chunk_text(item: Mapping[str, Any]) -> str:
    chunk = item_data(item).get("chunk")
    return chunk if isinstance(chunk, str) else ""


class HybridReranker(BaseReranker):
    """
    Rerank candidates by fusing semantic, lexical and recency signals.

    Holds configuration only: every rerank() call recomputes its own
    statistics, so one instance can be shared between requests.
    """

    def __init__(self, config: Optional[RerankConfig] = None, k1: float = 1.2, b: float = 0.75):
        """
        Initialize hybrid reranker.

        Args:
            config: Reranking options (default: RerankConfig())
            k1: BM25 term frequency saturation
            b: BM25 length normalization
        """
        self.config = config or RerankConfig()
        self.scorer = BM25Scorer(k1=k1, b=b)
        self._tokenize = partial(
            tokenize,
            min_length=self.config.min_token_length,
            stopwords=build_stopwords(self.config.custom_stopwords),
        )

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
            RerankOutcome: top_n augmented records + warnings

        Raises:
            ModelConfigInvalidError: use_model without 5 numeric weights
                (checked only when there is something to rank)
        """
        config = self.config
        warnings: List[str] = []

        sum_warning = config.weight_sum_warning()
        if sum_warning:
            warnings.append(sum_warning)

        query_tokens = self._tokenize((query or "").lower().strip())
        if not query_tokens or not items:
            logger.debug(f"Nothing to rank (query tokens={len(query_tokens)}, items={len(items)})")
            return RerankOutcome(results=[], warnings=warnings)

        model = config.parse_model_weights()
        weights = config.weights

        now = now or datetime.now(timezone.utc)
        corpus_size = len(items)

        # Pass 1: global DF over the whole candidate set
        global_df = compute_global_df(
            query_tokens,
            (_chunk_text(item) for item in items),
            tokenizer=self._tokenize,
        )

        # Pass 2: batch scoring
        scored: List[ScoredDocument] = []
        batch_size = config.batch_size

        for start in range(0, corpus_size, batch_size):
            batch = items[start:start + batch_size]
            batch_tokens = [self._tokenize(_chunk_text(item)) for item in batch]
            avgdl = sum(len(t) for t in batch_tokens) / max(len(batch), 1)

            raw = [
                score_document(
                    data=item_data(item),
                    doc_tokens=tokens,
                    query_tokens=query_tokens,
                    query_embedding=query_embedding,
                    document_frequencies=global_df,
                    corpus_size=corpus_size,
                    avgdl=avgdl,
                    now=now,
                    scorer=self.scorer,
                    use_external_score=config.use_external_score,
                    recency_half_life=config.recency_half_life,
                )
                for item, tokens in zip(batch, batch_tokens)
            ]

            normalize = build_normalizer([s.bm25 for s in raw], config.normalize_method)

            for offset, (item, signals) in enumerate(zip(batch, raw)):
                bm25_normalized = normalize(signals.bm25)
                scored.append(ScoredDocument(
                    index=start + offset,
                    item=item,
                    signals=signals,
                    bm25_normalized=bm25_normalized,
                    score=fuse(signals, bm25_normalized, weights, model),
                ))

            logger.debug(f"Scored batch {start // batch_size + 1}: {len(batch)} documents (avgdl={avgdl:.1f})")

        top = select_top_n(scored, config.top_n)
        debug = self._debug_info(model) if config.debug else None

        logger.info(f"Reranked {corpus_size} documents, returning top {len(top)}")
        return RerankOutcome(
            results=[doc.to_output(debug) for doc in top],
            warnings=warnings,
        )

    def _debug_info(self, model) -> dict:
        info = {
            "bm25_normalization": self.config.normalize_method.value,
            "weights": self.config.weights.to_dict(),
        }
        if model is not None:
            info["model"] = model.to_dict()
        return info

    def get_model_info(self) -> dict:
        """Get reranker metadata."""
        return {
            "name": "hybrid",
            "type": "local_hybrid",
            "fusion": "logistic" if self.config.use_model else "linear",
            "bm25": {"k1": self.scorer.k1, "b": self.scorer.b},
            "parameters": self.config.model_dump(mode="json"),
        }

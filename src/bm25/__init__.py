"""
BM25 (Best Match 25) lexical scoring for the hybrid reranker.

Components:
- tokenizer: Unicode-aware tokenization with multilingual stopwords
- corpus_stats: Global document frequency over the whole candidate set
- scorer: BM25 with global IDF and batch-local length normalization
- normalization: Sigmoid / per-batch min-max squashing into [0, 1]

IDF is always computed from corpus-wide statistics, never per batch.
"""

from .tokenizer import BASE_STOPWORDS, build_stopwords, tokenize
from .corpus_stats import compute_global_df
from .scorer import BM25Scorer
from .normalization import NormalizationMethod, build_normalizer, sigmoid

__all__ = [
    "BASE_STOPWORDS",
    "build_stopwords",
    "tokenize",
    "compute_global_df",
    "BM25Scorer",
    "NormalizationMethod",
    "build_normalizer",
    "sigmoid",
]

"""
BM25 scorer with corpus-wide IDF.

BM25 (Best Match 25) is a probabilistic ranking function used for information retrieval.

Formula:
    score(doc) = Σ idf(t) × (tf × (k1 + 1)) / (tf + k1 × (1 - b + b × dl/avgdl))
    idf(t)     = ln((N + 1) / df(t))

Where:
    tf = term frequency in document
    k1 = term frequency saturation parameter (default: 1.2)
    b = length normalization parameter (default: 0.75)
    dl = document length (number of tokens, minimum 1)
    avgdl = average document length of the current batch
    N = number of documents in the whole candidate set
    df(t) = global document frequency of t (1 if unknown)

The IDF statistics are global (see corpus_stats.py), the length
normalization is batch-local.
"""

import math
from typing import Dict, List


class BM25Scorer:
    """
    BM25 scoring over pre-tokenized documents.

    Stateless apart from its two parameters, so one instance can score
    any number of documents and batches.
    """

    def __init__(self, k1: float = 1.2, b: float = 0.75):
        """
        Initialize BM25 scorer.

        Args:
            k1: Term frequency saturation parameter
                Higher = more weight to term frequency
                Default: 1.2 (standard)

            b: Length normalization parameter
                Higher = more penalty for long documents
                Range: 0.0 - 1.0
                Default: 0.75 (standard)
        """
        self.k1 = k1
        self.b = b

    @staticmethod
    def idf(term: str, document_frequencies: Dict[str, int], corpus_size: int) -> float:
        """Inverse document frequency from the global DF map."""
        df = document_frequencies.get(term) or 1
        return math.log((corpus_size + 1) / df)

    def score(
        self,
        query_terms: List[str],
        doc_term_frequencies: Dict[str, int],
        token_count: int,
        avgdl: float,
        document_frequencies: Dict[str, int],
        corpus_size: int,
    ) -> float:
        """
        Compute BM25 score for a document given query terms.

        Args:
            query_terms: Tokenized query (a repeated term contributes again)
            doc_term_frequencies: Term frequency map {term: count}
            token_count: Total number of tokens in document
            avgdl: Average token count of the documents in the batch
            document_frequencies: Global DF map {query_term: doc count}
            corpus_size: Number of documents in the whole candidate set

        Returns:
            BM25 score (>= 0, higher = more relevant)

        Example:
            >>> scorer = BM25Scorer()
            >>> scorer.score(
            ...     query_terms=["machine", "learning"],
            ...     doc_term_frequencies={"machine": 1, "learning": 1, "basics": 1},
            ...     token_count=3,
            ...     avgdl=2.67,
            ...     document_frequencies={"machine": 1, "learning": 2},
            ...     corpus_size=3,
            ... )
            1.979...
        """
        if not query_terms or not doc_term_frequencies:
            return 0.0

        doc_length = max(token_count, 1)
        avgdl = avgdl or 1.0
        length_norm = 1 - self.b + self.b * (doc_length / avgdl)

        score = 0.0
        for term in query_terms:
            tf = doc_term_frequencies.get(term, 0)

            if tf == 0:
                continue

            numerator = tf * (self.k1 + 1)
            denominator = tf + self.k1 * length_norm

            score += self.idf(term, document_frequencies, corpus_size) * numerator / denominator

        return score

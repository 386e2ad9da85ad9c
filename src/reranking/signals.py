"""
Per-document relevance signals.

- semantic: cosine similarity of query/document embeddings, or an
  externally supplied score (e.g. from the upstream vector search)
- exact: fraction of distinct query tokens present in the document
- recency: exponential decay by document age, exp(-age_days / half_life)

BM25 lives in bm25/scorer.py; score_document() combines all four.
Every signal has a defined fallback, nothing here raises on bad input.
"""

import math
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Collection, Dict, List, Mapping, Optional, Sequence

import numpy as np

from ..bm25.scorer import BM25Scorer
from .base import RawSignals

MS_PER_DAY = 86_400_000
MISSING_AGE_DAYS = 999.0  # Age assumed for documents without a usable timestamp

# Tried after ISO 8601 and RFC 2822; all read as UTC
DATE_FORMATS = (
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M:%S",
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M:%S",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d, %Y %H:%M:%S",
)


def cosine_similarity(a: Optional[Sequence[float]], b: Optional[Sequence[float]]) -> float:
    """
    Cosine similarity of two vectors.

    Returns 0.0 when either vector is missing/empty, the lengths differ,
    either norm is zero, or the values are not numeric.

    Examples:
        >>> cosine_similarity([1.0, 0.0], [1.0, 0.0])
        1.0
        >>> cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0])
        0.0
    """
    if not a or not b or len(a) != len(b):
        return 0.0

    try:
        va = np.asarray(a, dtype=float)
        vb = np.asarray(b, dtype=float)
    except (TypeError, ValueError):
        return 0.0

    if va.ndim != 1 or vb.ndim != 1:
        return 0.0

    denom = float(np.linalg.norm(va) * np.linalg.norm(vb))
    if not denom or not math.isfinite(denom):
        return 0.0

    return float(np.clip(np.dot(va, vb) / denom, -1.0, 1.0))


def _is_real_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def semantic_score(
    data: Mapping[str, Any],
    query_embedding: Sequence[float],
    use_external_score: bool = False,
) -> float:
    """External score (0 if absent/non-numeric) or embedding cosine similarity."""
    if use_external_score:
        score = data.get("score")
        return float(score) if _is_real_number(score) else 0.0
    return cosine_similarity(query_embedding, data.get("embedding"))


def exact_overlap(query_tokens: Sequence[str], doc_terms: Collection[str]) -> float:
    """Fraction of distinct query tokens found in the document (0.0 for empty query)."""
    distinct = set(query_tokens)
    if not distinct:
        return 0.0
    return sum(1 for t in distinct if t in doc_terms) / len(distinct)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a document timestamp into an aware UTC datetime.

    Accepts epoch milliseconds (int/float), ISO 8601 strings ("Z" suffix
    allowed, naive values are read as UTC), RFC 2822 strings and the
    slash/month-name forms in DATE_FORMATS ("2024/01/15", "01/15/2024",
    "January 15, 2024"). Returns None for empty or unparseable values.

    Examples:
        >>> parse_timestamp("2024-01-01T00:00:00Z")
        datetime.datetime(2024, 1, 1, 0, 0, tzinfo=datetime.timezone.utc)
        >>> parse_timestamp(0) is None
        True
    """
    if not value:
        return None

    if isinstance(value, datetime):
        parsed = value
    elif _is_real_number(value):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        parsed = _parse_timestamp_text(value.strip())
        if parsed is None:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_timestamp_text(text: str) -> Optional[datetime]:
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        pass

    try:
        parsed = parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        parsed = None
    if parsed is not None:
        return parsed

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def age_in_days(timestamp: Any, now: datetime) -> float:
    """Days since timestamp (MISSING_AGE_DAYS if unusable, never negative)."""
    parsed = parse_timestamp(timestamp)
    if parsed is None:
        return MISSING_AGE_DAYS
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    age_ms = (now - parsed).total_seconds() * 1000
    return max(age_ms / MS_PER_DAY, 0.0)


def recency_score(timestamp: Any, now: datetime, half_life_days: float) -> float:
    """
    Exponential recency decay: exp(-age_days / half_life_days).

    Future timestamps count as age 0 (score 1.0).
    """
    return math.exp(-age_in_days(timestamp, now) / half_life_days)


def term_frequencies(tokens: List[str]) -> Dict[str, int]:
    tf: Dict[str, int] = {}
    for t in tokens:
        tf[t] = tf.get(t, 0) + 1
    return tf


def score_document(
    data: Mapping[str, Any],
    doc_tokens: List[str],
    query_tokens: List[str],
    query_embedding: Sequence[float],
    document_frequencies: Dict[str, int],
    corpus_size: int,
    avgdl: float,
    now: datetime,
    scorer: BM25Scorer,
    use_external_score: bool = False,
    recency_half_life: float = 60.0,
) -> RawSignals:
    """
    Compute the four raw signals of one document.

    Args:
        data: The document's data object (chunk, embedding, score, timestamp)
        doc_tokens: Tokenized chunk
        query_tokens: Tokenized query (must be non-empty)
        query_embedding: Query vector (used unless use_external_score)
        document_frequencies: Global DF map for the query tokens
        corpus_size: Number of documents in the whole candidate set
        avgdl: Average token count of the current batch
        now: Reference time for recency
        scorer: BM25 scorer
        use_external_score: Take semantic signal from data["score"]
        recency_half_life: Decay constant in days (> 0)

    Returns:
        RawSignals(semantic, bm25, exact, recency)
    """
    tf = term_frequencies(doc_tokens)

    bm25 = scorer.score(
        query_terms=query_tokens,
        doc_term_frequencies=tf,
        token_count=len(doc_tokens),
        avgdl=avgdl,
        document_frequencies=document_frequencies,
        corpus_size=corpus_size,
    )

    return RawSignals(
        semantic=semantic_score(data, query_embedding, use_external_score),
        bm25=bm25,
        exact=exact_overlap(query_tokens, tf),
        recency=recency_score(data.get("timestamp"), now, recency_half_life),
    )

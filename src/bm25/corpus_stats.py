"""
Corpus statistics for BM25 IDF.

Builds the global document-frequency (DF) map over the *entire* candidate
set before any batch is scored. Computing DF per batch would bias IDF
toward batch-local term distributions, so this always runs as a separate
first pass.

Only query tokens are tracked: DF is never looked up for any other term.
"""

import logging
from collections import defaultdict
from typing import Callable, Dict, Iterable, List, Sequence

from .tokenizer import tokenize

logger = logging.getLogger(__name__)


def compute_global_df(
    query_tokens: Sequence[str],
    texts: Iterable[str],
    tokenizer: Callable[[str], List[str]] = tokenize,
) -> Dict[str, int]:
    """
    Count in how many documents each query token appears.

    Args:
        query_tokens: Tokenized query (duplicates are counted once)
        texts: Text of every candidate document in the corpus
        tokenizer: Tokenizer configured like the one used for the query

    Returns:
        Dict {query_token: number of distinct documents containing it}
        Tokens that appear in no document are absent from the map.

    Example:
        >>> compute_global_df(
        ...     ["machine", "learning"],
        ...     ["machine learning basics", "deep learning", "cooking"],
        ... )
        {'machine': 1, 'learning': 2}
    """
    distinct_query = list(dict.fromkeys(query_tokens))
    document_frequencies = defaultdict(int)
    corpus_size = 0

    for text in texts:
        corpus_size += 1
        doc_terms = set(tokenizer(text))
        for term in distinct_query:
            if term in doc_terms:
                document_frequencies[term] += 1

    logger.debug(
        f"Global DF: {len(document_frequencies)}/{len(distinct_query)} query terms "
        f"present across {corpus_size} documents"
    )

    return dict(document_frequencies)

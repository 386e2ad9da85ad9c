"""
Invocation boundary for the hybrid reranker.

Validates one logical request, runs the reranker and converts any failure
into a single error record instead of raising:

    [{"error": True, "message": "No input items provided."}]

Request shape:
    {
        "query": "machine learning",
        "query_embedding": [0.1, 0.2, ...],          # may be empty
        "items": [
            {"json": {"chunk": "...", "embedding": [...], "score": 0.8,
                      "timestamp": "2025-01-01T00:00:00Z"}},
            ...
        ]
    }

execute() accepts the host's list of input records and uses the first
record's "json" object as the request.
"""

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from .config import RerankConfig
from .errors import InputMissingError, RerankError, SchemaInvalidError
from .hybrid import HybridReranker

logger = logging.getLogger(__name__)

_SEQUENCE_TYPES = (list, tuple)


def error_result(message: str) -> List[Dict[str, Any]]:
    return [{"error": True, "message": message}]


def validate_request(request: Any) -> tuple:
    """
    Check request field types.

    Returns:
        (query, query_embedding, items)

    Raises:
        InputMissingError: No request or empty items
        SchemaInvalidError: Wrong field types
    """
    if request is None:
        raise InputMissingError("No input items provided.")
    if not isinstance(request, Mapping):
        raise SchemaInvalidError("Request must be an object.")

    query = request.get("query")
    query_embedding = request.get("query_embedding")
    items = request.get("items")

    if not isinstance(query, str):
        raise SchemaInvalidError("Missing or invalid 'query'.")
    if not isinstance(query_embedding, _SEQUENCE_TYPES):
        raise SchemaInvalidError("Missing or invalid 'query_embedding'.")
    if not isinstance(items, _SEQUENCE_TYPES):
        raise SchemaInvalidError("Missing or invalid 'items' array.")
    if not items:
        raise InputMissingError("No input items provided.")

    for position, item in enumerate(items):
        if not isinstance(item, Mapping):
            raise SchemaInvalidError(f"Invalid item at position {position}: expected an object.")

    return query, list(query_embedding), list(items)


def _run(request: Any, config: Optional[RerankConfig], now: Optional[datetime]) -> List[Dict[str, Any]]:
    query, query_embedding, items = validate_request(request)

    reranker = HybridReranker(config or RerankConfig())
    outcome = reranker.rerank(query, query_embedding, items, now=now)

    for warning in outcome.warnings:
        logger.warning(warning)

    return outcome.results


def rerank_request(
    request: Any,
    config: Optional[RerankConfig] = None,
    now: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    """
    Rerank one request; never raises.

    Args:
        request: {"query", "query_embedding", "items"}
        config: Reranking options (default: RerankConfig())
        now: Reference time for recency (default: current UTC time)

    Returns:
        Ranked records, or a single {"error": True, "message": ...} record
    """
    try:
        return _run(request, config, now)
    except RerankError as e:
        logger.warning(f"Rerank request rejected: {e}")
        return error_result(str(e))
    except Exception as e:
        logger.exception("Unexpected reranker failure")
        return error_result(str(e) or "Unknown reranker error")


def execute(
    input_items: Optional[Sequence[Any]],
    config: Optional[RerankConfig] = None,
    now: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    """
    Host-style entry point: the first input record carries the request.

    Args:
        input_items: Host input records ([{"json": request}, ...])
        config: Reranking options
        now: Reference time for recency

    Returns:
        Same as rerank_request()
    """
    if not input_items:
        logger.warning("Rerank request rejected: no input items")
        return error_result("No input items provided.")

    first = input_items[0]
    request = first.get("json") if isinstance(first, Mapping) else None
    return rerank_request(request if request is not None else {}, config, now)

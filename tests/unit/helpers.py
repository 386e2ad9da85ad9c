"""Builders shared by the unit tests"""

from datetime import datetime, timezone

# Fixed reference time so recency scores are reproducible
NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)


def make_item(chunk, **fields):
    """Host-style candidate record: {"json": {"chunk": ..., **fields}}"""
    return {"json": {"chunk": chunk, **fields}}


def make_request(query, chunks, query_embedding=None, **fields):
    """Request with one candidate per chunk; each item gets an "id" = position"""
    return {
        "query": query,
        "query_embedding": query_embedding if query_embedding is not None else [],
        "items": [make_item(chunk, id=i, **fields) for i, chunk in enumerate(chunks)],
    }

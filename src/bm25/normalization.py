"""
BM25 score normalization into [0, 1].

Raw BM25 is unbounded, so before fusion with the other [0, 1] signals it is
squashed by one of two interchangeable strategies:

- sigmoid: 1 / (1 + e^-x). Stateless, so scores are comparable across
  batches and runs (default).
- minmax: (x - min) / (max - min) over the current batch. Adaptive: more
  contrast inside a batch, no consistency across batches. A degenerate
  batch (all values equal) normalizes to 0.

A normalizer is built once per batch from that batch's raw values only.
"""

import math
from enum import Enum
from typing import Callable, Iterable, Union


class NormalizationMethod(str, Enum):
    """Supported BM25 normalization strategies"""
    SIGMOID = "sigmoid"  # Stable default
    MINMAX = "minmax"    # Per-batch min-max (adaptive)

    @classmethod
    def parse(cls, value: Union[str, "NormalizationMethod", None]) -> "NormalizationMethod":
        """Resolve a method name; anything unknown falls back to sigmoid."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            return cls.SIGMOID


def sigmoid(x: float) -> float:
    """Logistic function, safe for large negative inputs."""
    if x >= 0:
        return 1.0 / (1.0 + math.exp(-x))
    z = math.exp(x)
    return z / (1.0 + z)


def build_normalizer(
    values: Iterable[float],
    method: Union[str, NormalizationMethod] = NormalizationMethod.SIGMOID,
) -> Callable[[float], float]:
    """
    Build a BM25 normalizer for one batch.

    Args:
        values: Raw BM25 scores of the batch (only used by minmax)
        method: "sigmoid" or "minmax"

    Returns:
        Function mapping a raw score to [0, 1]

    Examples:
        >>> build_normalizer([], "sigmoid")(0.0)
        0.5
        >>> norm = build_normalizer([1.0, 3.0, 2.0], "minmax")
        >>> norm(2.0)
        0.5
        >>> build_normalizer([4.0, 4.0], "minmax")(4.0)
        0.0
    """
    if NormalizationMethod.parse(method) is NormalizationMethod.SIGMOID:
        return sigmoid

    values = list(values)
    if not values:
        return lambda raw: 0.0

    low, high = min(values), max(values)
    if high == low:
        return lambda raw: 0.0

    span = high - low

    def minmax(raw: float) -> float:
        return min(1.0, max(0.0, (raw - low) / span))

    return minmax

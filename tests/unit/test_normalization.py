"""
Unit tests for BM25 normalization strategies.
"""

import pytest
from src.bm25.normalization import NormalizationMethod, build_normalizer, sigmoid

EXTREMES = [-1e6, -750.0, -10.0, -1.0, 0.0, 0.5, 1.0, 10.0, 750.0, 1e6]


class TestSigmoid:
    """Test stateless sigmoid normalization"""

    def test_midpoint(self):
        assert sigmoid(0.0) == 0.5

    def test_bounds(self):
        """Output lies in [0, 1] for any finite input (no overflow)"""
        for raw in EXTREMES:
            assert 0.0 <= sigmoid(raw) <= 1.0

    def test_monotonic(self):
        values = [sigmoid(x) for x in EXTREMES]
        assert values == sorted(values)

    def test_independent_of_batch(self):
        """Same raw value, different batches -> same normalized value"""
        first = build_normalizer([0.1, 0.2], "sigmoid")
        second = build_normalizer([5.0, 50.0], "sigmoid")
        assert first(2.0) == second(2.0) == pytest.approx(sigmoid(2.0))


class TestMinMax:
    """Test per-batch min-max normalization"""

    def test_scaling(self):
        normalize = build_normalizer([2.0, 4.0, 6.0], "minmax")
        assert normalize(2.0) == 0.0
        assert normalize(4.0) == 0.5
        assert normalize(6.0) == 1.0

    def test_degenerate_batch(self):
        """min == max -> every document normalizes to 0"""
        normalize = build_normalizer([3.3, 3.3], "minmax")
        assert normalize(3.3) == 0.0

    def test_all_zero_batch(self):
        normalize = build_normalizer([0.0, 0.0, 0.0], NormalizationMethod.MINMAX)
        assert normalize(0.0) == 0.0

    def test_empty_batch(self):
        assert build_normalizer([], "minmax")(1.0) == 0.0

    def test_bounds_outside_batch_range(self):
        """Values outside the batch's own range are clamped to [0, 1]"""
        normalize = build_normalizer([1.0, 2.0], "minmax")
        for raw in EXTREMES:
            assert 0.0 <= normalize(raw) <= 1.0

    def test_batch_local(self):
        """Same raw value normalizes differently in different batches"""
        assert build_normalizer([0.0, 4.0], "minmax")(2.0) != build_normalizer([0.0, 8.0], "minmax")(2.0)

    def test_accepts_generator(self):
        normalize = build_normalizer((v for v in [0.0, 10.0]), "minmax")
        assert normalize(5.0) == 0.5


class TestNormalizationMethod:
    """Test method resolution"""

    @pytest.mark.parametrize("value,expected", [
        ("sigmoid", NormalizationMethod.SIGMOID),
        ("minmax", NormalizationMethod.MINMAX),
        (" MINMAX ", NormalizationMethod.MINMAX),
        (NormalizationMethod.MINMAX, NormalizationMethod.MINMAX),
        ("zscore", NormalizationMethod.SIGMOID),
        ("", NormalizationMethod.SIGMOID),
        (None, NormalizationMethod.SIGMOID),
    ])
    def test_parse(self, value, expected):
        assert NormalizationMethod.parse(value) is expected

    def test_unknown_method_uses_sigmoid(self):
        assert build_normalizer([1.0, 3.0], "unknown")(0.0) == 0.5

"""
Unit tests for RerankConfig, ScoreWeights and ModelWeights.
"""

import pytest
from src.bm25.normalization import NormalizationMethod
from src.reranking.config import ModelWeights, RerankConfig, ScoreWeights
from src.reranking.errors import ModelConfigInvalidError


class TestRerankConfigDefaults:
    """Test documented defaults"""

    def test_defaults(self):
        config = RerankConfig()
        assert config.top_n == 5
        assert config.batch_size == 200
        assert config.sem_weight == 0.7
        assert config.lex_weight == 0.25
        assert config.exact_weight == 0.10
        assert config.time_weight == 0.05
        assert config.use_external_score is False
        assert config.recency_half_life == 60
        assert config.min_token_length == 2
        assert config.normalize_method is NormalizationMethod.SIGMOID
        assert config.custom_stopwords == ""
        assert config.use_model is False
        assert config.model_weights == ""
        assert config.debug is False

    def test_host_aliases(self):
        config = RerankConfig(topN=3, batchSize=50, normalizeMethod="minmax", useExternalScore=True)
        assert config.top_n == 3
        assert config.batch_size == 50
        assert config.normalize_method is NormalizationMethod.MINMAX
        assert config.use_external_score is True

    def test_snake_case_names(self):
        config = RerankConfig(top_n=7, sem_weight=0.5)
        assert config.top_n == 7
        assert config.sem_weight == 0.5

    def test_numeric_strings(self):
        config = RerankConfig.model_validate({"topN": "3", "semWeight": "0.4", "recencyHalfLife": "30"})
        assert config.top_n == 3
        assert config.sem_weight == 0.4
        assert config.recency_half_life == 30.0


class TestRerankConfigFallbacks:
    """Invalid values fall back to defaults instead of failing"""

    @pytest.mark.parametrize("value", [None, "abc", 0, -3, float("nan"), True])
    def test_invalid_top_n(self, value):
        assert RerankConfig.model_validate({"topN": value}).top_n == 5

    @pytest.mark.parametrize("value", [None, "", 0, -1])
    def test_invalid_half_life(self, value):
        assert RerankConfig.model_validate({"recencyHalfLife": value}).recency_half_life == 60.0

    @pytest.mark.parametrize("value", [None, "heavy", -0.5, float("inf")])
    def test_invalid_weight(self, value):
        assert RerankConfig.model_validate({"lexWeight": value}).lex_weight == 0.25

    def test_zero_weight_allowed(self):
        assert RerankConfig(timeWeight=0).time_weight == 0.0

    def test_float_sizes_truncated(self):
        assert RerankConfig(topN=3.9).top_n == 3

    @pytest.mark.parametrize("value,expected", [
        ("true", True), ("1", True), ("Yes", True), ("false", False), ("", False), (1, True), (0, False),
    ])
    def test_flags(self, value, expected):
        assert RerankConfig.model_validate({"debug": value}).debug is expected

    def test_unknown_method(self):
        assert RerankConfig(normalizeMethod="zscore").normalize_method is NormalizationMethod.SIGMOID

    def test_unknown_keys_ignored(self):
        assert RerankConfig.model_validate({"unknownOption": 1}).top_n == 5


class TestWeights:
    """Test linear weights and the soft sum check"""

    def test_weights_property(self):
        weights = RerankConfig(semWeight=0.6, lexWeight=0.3, exactWeight=0.05, timeWeight=0.05).weights
        assert weights == ScoreWeights(semantic=0.6, lexical=0.3, exact=0.05, recency=0.05)
        assert weights.total == pytest.approx(1.0)

    def test_to_dict_includes_sum(self):
        data = ScoreWeights().to_dict()
        assert set(data) == {"semantic", "lexical", "exact", "recency", "sum"}
        assert data["sum"] == pytest.approx(1.10)

    def test_default_sum_within_tolerance(self):
        """Defaults sum to 1.10: at the edge, no warning"""
        assert RerankConfig().weight_sum_warning() is None

    def test_sum_warning(self):
        message = RerankConfig(semWeight=2.0).weight_sum_warning()
        assert message is not None
        assert "2.40" in message


class TestModelWeights:
    """Test logistic coefficient parsing"""

    def test_parse(self):
        model = ModelWeights.parse("0.8, 0.5,0.3 ,0.1,-0.2")
        assert model == ModelWeights(semantic=0.8, bm25=0.5, exact=0.3, recency=0.1, bias=-0.2)

    @pytest.mark.parametrize("text", ["", "0.1,0.2", "1,2,3,4,5,6", "a,b,c,d,e", None])
    def test_invalid(self, text):
        with pytest.raises(ModelConfigInvalidError, match="exactly 5 numbers"):
            ModelWeights.parse(text)

    def test_non_numeric_entries_skipped(self):
        """Junk entries are ignored as long as 5 numbers remain"""
        assert ModelWeights.parse("1,x,2,3,4,5").bias == 5.0

    def test_config_without_model(self):
        assert RerankConfig(modelWeights="0.1,0.2").parse_model_weights() is None

    def test_config_with_model(self):
        config = RerankConfig(useModel=True, modelWeights="1,1,1,1,0")
        assert config.parse_model_weights() == ModelWeights(1.0, 1.0, 1.0, 1.0, 0.0)

    def test_config_with_invalid_model(self):
        config = RerankConfig(useModel=True, modelWeights="0.1,0.2")
        with pytest.raises(ModelConfigInvalidError):
            config.parse_model_weights()


class TestFromEnvAndOverrides:
    """Test env loading and per-request overrides"""

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("RERANKER_TOP_N", "2")
        monkeypatch.setenv("RERANKER_NORMALIZE_METHOD", "minmax")
        monkeypatch.setenv("RERANKER_DEBUG", "true")
        monkeypatch.setenv("RERANKER_CUSTOM_STOPWORDS", "foo,bar")
        config = RerankConfig.from_env()
        assert config.top_n == 2
        assert config.normalize_method is NormalizationMethod.MINMAX
        assert config.debug is True
        assert config.custom_stopwords == "foo,bar"

    def test_from_env_defaults(self, monkeypatch):
        monkeypatch.delenv("RERANKER_TOP_N", raising=False)
        assert RerankConfig.from_env().top_n == 5

    def test_merged(self):
        base = RerankConfig(topN=2, debug=True)
        merged = base.merged({"topN": 9, "lex_weight": 0.5})
        assert merged.top_n == 9
        assert merged.lex_weight == 0.5
        assert merged.debug is True
        assert base.top_n == 2

    def test_merged_without_overrides(self):
        base = RerankConfig()
        assert base.merged(None) is base
        assert base.merged({}) is base

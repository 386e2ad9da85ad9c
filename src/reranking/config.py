"""
Reranker configuration.

RerankConfig accepts both the host's camelCase option names ("topN",
"semWeight", ...) and snake_case field names. Invalid values never fail
validation: they are replaced by the documented defaults, so a config
built from loosely typed sources (env vars, JSON forms) always works.

Environment variables (RerankConfig.from_env):
    RERANKER_TOP_N, RERANKER_BATCH_SIZE,
    RERANKER_SEM_WEIGHT, RERANKER_LEX_WEIGHT, RERANKER_EXACT_WEIGHT, RERANKER_TIME_WEIGHT,
    RERANKER_USE_EXTERNAL_SCORE, RERANKER_RECENCY_HALF_LIFE, RERANKER_MIN_TOKEN_LENGTH,
    RERANKER_NORMALIZE_METHOD, RERANKER_CUSTOM_STOPWORDS,
    RERANKER_USE_MODEL, RERANKER_MODEL_WEIGHTS, RERANKER_DEBUG
"""

import math
import os
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..bm25.normalization import NormalizationMethod
from .errors import ModelConfigInvalidError

# Soft bounds for the linear weight sum
WEIGHT_SUM_MIN = 0.9
WEIGHT_SUM_MAX = 1.1

_TRUE_STRINGS = {"true", "1", "yes", "on"}


@dataclass(frozen=True)
class ScoreWeights:
    """Linear fusion weights (expected to sum to ~1.0)"""
    semantic: float = 0.7
    lexical: float = 0.25
    exact: float = 0.10
    recency: float = 0.05

    @property
    def total(self) -> float:
        return self.semantic + self.lexical + self.exact + self.recency

    def to_dict(self) -> Dict[str, float]:
        return {**asdict(self), "sum": self.total}


@dataclass(frozen=True)
class ModelWeights:
    """Logistic-regression coefficients: sem, bm25, exact, rec, bias"""
    semantic: float
    bm25: float
    exact: float
    recency: float
    bias: float

    @classmethod
    def parse(cls, text: Optional[str]) -> "ModelWeights":
        """
        Parse "sem,bm25,exact,rec,bias" (e.g. "0.8,0.5,0.3,0.1,-0.2").

        Entries that are not finite numbers are ignored; exactly five
        must remain.

        Raises:
            ModelConfigInvalidError: Not exactly 5 numeric values
        """
        values = []
        for part in str(text or "").split(","):
            try:
                value = float(part.strip())
            except ValueError:
                continue
            if math.isfinite(value):
                values.append(value)

        if len(values) != 5:
            raise ModelConfigInvalidError(
                "Model weights must contain exactly 5 numbers: sem,bm25,exact,rec,bias "
                f"(got {len(values)})"
            )
        return cls(*values)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def _as_number(value: Any) -> Optional[float]:
    """Coerce loosely typed input to a finite float, or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


class RerankConfig(BaseModel):
    """Options for one rerank invocation (all with defaults)"""

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        extra="ignore",
        protected_namespaces=(),  # allows the "model_weights" field name
    )

    top_n: int = Field(default=5, alias="topN", description="Number of results to return")
    batch_size: int = Field(default=200, alias="batchSize", description="Documents per scoring batch")

    sem_weight: float = Field(default=0.7, alias="semWeight")
    lex_weight: float = Field(default=0.25, alias="lexWeight")
    exact_weight: float = Field(default=0.10, alias="exactWeight")
    time_weight: float = Field(default=0.05, alias="timeWeight")

    use_external_score: bool = Field(
        default=False,
        alias="useExternalScore",
        description="Use item score instead of cosine similarity",
    )
    recency_half_life: float = Field(default=60.0, alias="recencyHalfLife", description="Days")
    min_token_length: int = Field(default=2, alias="minTokenLength")
    normalize_method: NormalizationMethod = Field(
        default=NormalizationMethod.SIGMOID,
        alias="normalizeMethod",
        description="How to normalize BM25 into [0,1]",
    )
    custom_stopwords: str = Field(
        default="",
        alias="customStopwords",
        description="Extra stopwords (comma-separated, case-insensitive)",
    )

    use_model: bool = Field(default=False, alias="useModel", description="Use logistic fusion")
    model_weights: str = Field(
        default="",
        alias="modelWeights",
        description="sem,bm25,exact,rec,bias (e.g. 0.8,0.5,0.3,0.1,-0.2)",
    )

    debug: bool = Field(default=False, description="Attach per-document scoring breakdown")

    @field_validator("top_n", "batch_size", "min_token_length", mode="before")
    @classmethod
    def _positive_int(cls, value, info):
        number = _as_number(value)
        if number is None or int(number) < 1:
            return cls.model_fields[info.field_name].default
        return int(number)

    @field_validator("recency_half_life", mode="before")
    @classmethod
    def _positive_float(cls, value, info):
        number = _as_number(value)
        if number is None or number <= 0:
            return cls.model_fields[info.field_name].default
        return number

    @field_validator("sem_weight", "lex_weight", "exact_weight", "time_weight", mode="before")
    @classmethod
    def _weight(cls, value, info):
        number = _as_number(value)
        if number is None or number < 0:
            return cls.model_fields[info.field_name].default
        return number

    @field_validator("use_external_score", "use_model", "debug", mode="before")
    @classmethod
    def _flag(cls, value):
        return _as_bool(value)

    @field_validator("normalize_method", mode="before")
    @classmethod
    def _method(cls, value):
        return NormalizationMethod.parse(value)

    @field_validator("custom_stopwords", "model_weights", mode="before")
    @classmethod
    def _text(cls, value):
        return "" if value is None else str(value)

    @property
    def weights(self) -> ScoreWeights:
        return ScoreWeights(
            semantic=self.sem_weight,
            lexical=self.lex_weight,
            exact=self.exact_weight,
            recency=self.time_weight,
        )

    def parse_model_weights(self) -> Optional[ModelWeights]:
        """Logistic coefficients when use_model is on, else None."""
        if not self.use_model:
            return None
        return ModelWeights.parse(self.model_weights)

    def weight_sum_warning(self) -> Optional[str]:
        """Soft validation: message if linear weights are far from 1.0."""
        total = self.weights.total
        if total < WEIGHT_SUM_MIN or total > WEIGHT_SUM_MAX:
            return f"Weights sum to {total:.2f} - recommended total ≈ 1.0"
        return None

    def merged(self, overrides: Optional[Mapping[str, Any]]) -> "RerankConfig":
        """Copy of this config with per-request overrides applied."""
        if not overrides:
            return self
        data = self.model_dump()
        for key, value in overrides.items():
            data[_FIELD_BY_KEY.get(key, key)] = value
        return RerankConfig.model_validate(data)

    @classmethod
    def from_env(cls, prefix: str = "RERANKER_") -> "RerankConfig":
        """Build config from RERANKER_* environment variables."""
        data = {}
        for name in cls.model_fields:
            value = os.getenv(f"{prefix}{name.upper()}")
            if value is not None:
                data[name] = value
        return cls.model_validate(data)


_FIELD_BY_KEY = {
    field.alias: name
    for name, field in RerankConfig.model_fields.items()
    if field.alias
}

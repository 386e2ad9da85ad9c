"""
Factory to create reranker instances based on configuration.
"""

from typing import Optional
import logging

from .base import BaseReranker
from .config import RerankConfig
from .hybrid import HybridReranker

logger = logging.getLogger(__name__)


class RerankingFactory:
    """Factory to create reranker instances based on configuration."""

    _instance: Optional[BaseReranker] = None  # Singleton cache

    @classmethod
    def create(cls, force_reload: bool = False) -> BaseReranker:
        """
        Create hybrid reranker from environment configuration.

        Config (env vars, all optional):
            RERANKER_TOP_N, RERANKER_BATCH_SIZE, RERANKER_SEM_WEIGHT, ...
            (see reranking.config for the full list)

        The cached instance holds configuration only; corpus statistics
        are recomputed on every rerank() call.

        Args:
            force_reload: If True, re-read the environment even if cached

        Returns:
            Reranker instance
        """
        if cls._instance is not None and not force_reload:
            logger.debug(f"Returning cached reranker instance: {cls._instance}")
            return cls._instance

        config = RerankConfig.from_env()
        logger.info(
            f"Creating hybrid reranker (top_n={config.top_n}, batch_size={config.batch_size}, "
            f"normalize={config.normalize_method.value}, use_model={config.use_model})"
        )

        sum_warning = config.weight_sum_warning()
        if sum_warning:
            logger.warning(sum_warning)

        cls._instance = HybridReranker(config)
        return cls._instance

    @classmethod
    def cleanup(cls):
        """Cleanup cached reranker instance."""
        if cls._instance is not None:
            logger.info("Cleaning up reranker instance")
            cls._instance = None

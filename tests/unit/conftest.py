"""Unit test configuration - shared fixtures for reranker tests"""

import pytest

from src.reranking.factory import RerankingFactory

from .helpers import NOW, make_request


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def ml_request():
    """Scenario corpus: two relevant documents, one unrelated"""
    return make_request(
        "machine learning",
        ["machine learning basics", "deep learning networks", "cooking recipes"],
    )


@pytest.fixture(autouse=True)
def reset_reranker_factory():
    """Each test starts without a cached env-configured reranker"""
    RerankingFactory.cleanup()
    yield
    RerankingFactory.cleanup()

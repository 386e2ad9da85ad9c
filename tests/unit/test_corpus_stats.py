"""
Unit tests for global document frequency.
"""

from functools import partial

from src.bm25.corpus_stats import compute_global_df
from src.bm25.tokenizer import build_stopwords, tokenize


class TestGlobalDF:
    """Test corpus-wide DF collection"""

    def test_counts_documents_not_occurrences(self):
        """Token in 2 of 3 documents -> DF 2, however often it repeats"""
        tokenizer = partial(tokenize, min_length=1)
        df = compute_global_df(["x"], ["x x x", "y x", "z"], tokenizer=tokenizer)
        assert df == {"x": 2}

    def test_only_query_tokens_tracked(self):
        df = compute_global_df(
            ["machine", "learning"],
            ["machine learning basics", "deep learning networks", "cooking recipes"],
        )
        assert df == {"machine": 1, "learning": 2}
        assert "basics" not in df

    def test_absent_query_token_not_in_map(self):
        df = compute_global_df(["quantum"], ["machine learning"])
        assert df == {}

    def test_duplicate_query_tokens_counted_once(self):
        df = compute_global_df(["data", "data"], ["data science", "big data"])
        assert df == {"data": 2}

    def test_empty_corpus(self):
        assert compute_global_df(["data"], []) == {}

    def test_accepts_generator(self):
        texts = (t for t in ["alpha beta", "beta gamma"])
        assert compute_global_df(["beta"], texts) == {"beta": 2}

    def test_uses_given_tokenizer(self):
        """Stopwords of the configured tokenizer never reach the map"""
        tokenizer = partial(tokenize, stopwords=build_stopwords("beta"))
        assert compute_global_df(["beta"], ["alpha beta"], tokenizer=tokenizer) == {}

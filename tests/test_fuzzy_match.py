"""
Tests for utils/fuzzy_match.py

Covers the ranked suggestions used for manual overrides. The normalization
and similarity rules themselves are covered in test_column_mapper.py.
"""

from utils.fuzzy_match import rank_candidates


class TestRankCandidates:
    def test_best_first(self):
        result = rank_candidates("sku", ["Title", "SKU", "Product SKU"])
        assert [name for name, _ in result] == ["SKU", "Product SKU"]
        assert result[0][1] == 1.0

    def test_ties_keep_column_order(self):
        result = rank_candidates("sku", ["Product SKU", "sku_code"])
        assert result == [("Product SKU", 0.85), ("sku_code", 0.85)]

    def test_zero_scores_dropped(self):
        """'title' shares nothing with 'sku' and scores 0."""
        result = rank_candidates("sku", ["Title"])
        assert result == []

    def test_limit(self):
        result = rank_candidates("sku", ["SKU", "Product SKU", "sku_code"], limit=1)
        assert result == [("SKU", 1.0)]

    def test_threshold(self):
        result = rank_candidates(
            "Processing Method",
            ["Procesing Method", "Packaging Type"],
            threshold=0.7,
        )
        assert [name for name, _ in result] == ["Procesing Method"]

    def test_empty_inputs(self):
        assert rank_candidates("", ["SKU"]) == []
        assert rank_candidates("sku", []) == []
        assert rank_candidates("sku", ["SKU"], limit=0) == []

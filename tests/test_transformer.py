"""
Tests for processing/transformer.py

Covers: renaming to attribute names, template column order, empty columns
for unmapped attributes, dropped seller columns, and missing mapped columns.
"""

import pandas as pd

from processing.file_reader import MarketplaceAttribute
from processing.transformer import apply_mapping


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_seller_df() -> pd.DataFrame:
    return pd.DataFrame({
        "Product Title": ["Red Shirt", "Blue Shirt"],
        "SKU": ["A1", "A2"],
        "Internal Notes": ["x", "y"],
    })


def _make_attributes() -> list[MarketplaceAttribute]:
    return [
        MarketplaceAttribute(name="sku", required=True),
        MarketplaceAttribute(name="title", required=True),
        MarketplaceAttribute(name="brand"),
    ]


# ═══════════════════════════════════════════════════════════════════════════
# apply_mapping
# ═══════════════════════════════════════════════════════════════════════════

class TestApplyMapping:
    def test_columns_in_template_order(self):
        result = apply_mapping(
            _make_seller_df(),
            {"SKU": "sku", "Product Title": "title"},
            _make_attributes(),
        )
        assert list(result.columns) == ["sku", "title", "brand"]

    def test_values_carried_over(self):
        result = apply_mapping(
            _make_seller_df(),
            {"SKU": "sku", "Product Title": "title"},
            _make_attributes(),
        )
        assert result["sku"].tolist() == ["A1", "A2"]
        assert result["title"].tolist() == ["Red Shirt", "Blue Shirt"]

    def test_unmapped_attribute_empty(self):
        result = apply_mapping(_make_seller_df(), {"SKU": "sku"}, _make_attributes())
        assert result["brand"].tolist() == ["", ""]
        assert result["title"].tolist() == ["", ""]

    def test_unmapped_seller_columns_dropped(self):
        result = apply_mapping(_make_seller_df(), {"SKU": "sku"}, _make_attributes())
        assert "Internal Notes" not in result.columns
        assert "SKU" not in result.columns

    def test_missing_seller_column_gives_empty(self):
        result = apply_mapping(
            _make_seller_df(), {"Brand Name": "brand"}, _make_attributes()
        )
        assert result["brand"].tolist() == ["", ""]

    def test_input_not_modified(self):
        seller_df = _make_seller_df()
        apply_mapping(seller_df, {"SKU": "sku"}, _make_attributes())
        assert list(seller_df.columns) == ["Product Title", "SKU", "Internal Notes"]

    def test_empty_dataframe(self):
        result = apply_mapping(
            pd.DataFrame(columns=["SKU"]), {"SKU": "sku"}, _make_attributes()
        )
        assert len(result) == 0
        assert list(result.columns) == ["sku", "title", "brand"]

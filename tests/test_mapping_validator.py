"""
Tests for processing/mapping_validator.py

Covers: mapping counts, required gating, optional confirmation, shared
seller columns, and conversion to/from the persisted mapping form.
"""

import pytest

from processing.column_mapper import TargetField
from processing.file_reader import MarketplaceAttribute
from processing.mapping_validator import (
    MappingSummary,
    MappingValidation,
    from_persisted_mapping,
    summarize_mapping,
    to_persisted_mapping,
    validate_mapping,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_attributes() -> list[MarketplaceAttribute]:
    """Template with two required and two optional attributes."""
    return [
        MarketplaceAttribute(name="sku", required=True),
        MarketplaceAttribute(name="title", required=True, max_length=80),
        MarketplaceAttribute(name="brand"),
        MarketplaceAttribute(name="color", type="enum", enum_values=["Red"]),
    ]


# ═══════════════════════════════════════════════════════════════════════════
# Counts
# ═══════════════════════════════════════════════════════════════════════════

class TestSummarizeMapping:
    def test_counts(self):
        summary = summarize_mapping(
            _make_attributes(), {"sku": "SKU", "brand": "Maker"}
        )
        assert summary == MappingSummary(
            total=4, mapped=2, required_total=2, required_mapped=1
        )
        assert not summary.all_required_mapped

    def test_empty_value_not_counted(self):
        summary = summarize_mapping(_make_attributes(), {"sku": "", "title": "Name"})
        assert summary.mapped == 1
        assert summary.required_mapped == 1

    def test_unknown_names_ignored(self):
        summary = summarize_mapping(_make_attributes(), {"weight": "Weight"})
        assert summary.mapped == 0

    def test_all_required_mapped(self):
        summary = summarize_mapping(
            _make_attributes(), {"sku": "SKU", "title": "Name"}
        )
        assert summary.all_required_mapped

    def test_accepts_target_fields(self):
        summary = summarize_mapping(
            [TargetField("sku", required=True), TargetField("brand")],
            {"sku": "SKU"},
        )
        assert summary.required_mapped == 1
        assert summary.total == 2


# ═══════════════════════════════════════════════════════════════════════════
# Validation
# ═══════════════════════════════════════════════════════════════════════════

class TestValidateMapping:
    def test_missing_required_blocks_save(self):
        validation = validate_mapping(_make_attributes(), {"sku": "SKU"})
        assert isinstance(validation, MappingValidation)
        assert validation.missing_required == ["title"]
        assert not validation.can_save

    def test_unmapped_optional_needs_confirmation(self):
        validation = validate_mapping(
            _make_attributes(), {"sku": "SKU", "title": "Name"}
        )
        assert validation.can_save
        assert validation.needs_confirmation
        assert validation.unmapped_optional == ["brand", "color"]

    def test_fully_mapped(self):
        validation = validate_mapping(
            _make_attributes(),
            {"sku": "SKU", "title": "Name", "brand": "Maker", "color": "Colour"},
        )
        assert validation.can_save
        assert not validation.needs_confirmation
        assert validation.shared_columns == {}
        assert validation.summary.mapped == 4

    def test_shared_column_reported(self):
        validation = validate_mapping(
            _make_attributes(),
            {"sku": "SKU", "title": "Name", "brand": "Name"},
        )
        assert validation.shared_columns == {"Name": ["title", "brand"]}
        assert not validation.can_save

    def test_shared_column_between_required_fields_blocks_save(self):
        """Both required fields look mapped, but only one survives inversion."""
        validation = validate_mapping(
            [TargetField("sku", required=True), TargetField("title", required=True)],
            {"sku": "A", "title": "A"},
        )
        assert validation.missing_required == []
        assert validation.summary.all_required_mapped
        assert validation.shared_columns == {"A": ["sku", "title"]}
        assert not validation.can_save
        assert to_persisted_mapping({"sku": "A", "title": "A"}) == {"A": "title"}


# ═══════════════════════════════════════════════════════════════════════════
# Persisted form
# ═══════════════════════════════════════════════════════════════════════════

class TestPersistedMapping:
    def test_inverted_and_empty_dropped(self):
        persisted = to_persisted_mapping(
            {"sku": "SKU", "title": "Product Title", "brand": ""}
        )
        assert persisted == {"SKU": "sku", "Product Title": "title"}

    def test_shared_column_later_wins(self):
        persisted = to_persisted_mapping({"title": "Name", "brand": "Name"})
        assert persisted == {"Name": "brand"}

    def test_round_trip(self):
        assignment = {"sku": "SKU", "title": "Product Title"}
        assert from_persisted_mapping(to_persisted_mapping(assignment)) == assignment

    def test_from_persisted_skips_empty(self):
        assert from_persisted_mapping({"SKU": "sku", "Notes": ""}) == {"sku": "SKU"}

    @pytest.mark.parametrize("mapping", [{}, {"": ""}])
    def test_empty(self, mapping):
        assert to_persisted_mapping(mapping) == {}
        assert from_persisted_mapping(mapping) == {}

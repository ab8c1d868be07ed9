"""
Quality checker — validates transformed product data against the template.

Runs five validation passes, one per kind of attribute constraint:
  1. Required: required attributes have a value in every row.
  2. Numeric: "number" attributes parse as numbers and respect min_value.
  3. Length: values are no longer than max_length.
  4. Allowed values: values of attributes with enum_values are in the set
     ("array" values are split and every element is checked).
  5. Boolean: "boolean" attributes use an accepted spelling.

Empty values are only checked by the required pass (blank = not provided).

Public API:
    check_quality(dataframe, attributes) → QualityReport
"""

import logging
import math
import re
from dataclasses import dataclass, field

import pandas as pd

from config.template_schema import BOOLEAN_VALUES, ENUM_SEPARATORS
from processing.file_reader import MarketplaceAttribute

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# Data classes
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class QualityReport:
    """Quality report for one transformed dataset.

    Every issue list holds dicts of {"row": int, "column": str, "value": str}.
    """

    total_rows: int = 0
    empty_counts: dict[str, int] = field(default_factory=dict)
    missing_required: list[dict] = field(default_factory=list)
    invalid_numerics: list[dict] = field(default_factory=list)
    below_minimum: list[dict] = field(default_factory=list)
    too_long: list[dict] = field(default_factory=list)
    invalid_values: list[dict] = field(default_factory=list)
    invalid_booleans: list[dict] = field(default_factory=list)
    is_clean: bool = True


# ═══════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════

def check_quality(
    dataframe: pd.DataFrame,
    attributes: list[MarketplaceAttribute],
) -> QualityReport:
    """
    Validate transformed data against template attribute metadata.

    Attributes without a column in *dataframe* are skipped.

    Args:
        dataframe: Output of transformer.apply_mapping().
        attributes: Template attributes.

    Returns:
        QualityReport with per-cell issues and empty counts per attribute.
    """
    report = QualityReport(total_rows=len(dataframe))

    for attribute in attributes:
        if attribute.name not in dataframe.columns:
            continue

        values = dataframe[attribute.name].fillna("").astype(str).str.strip()
        report.empty_counts[attribute.name] = int((values == "").sum())

        for idx, value in values.items():
            issue = {"row": idx, "column": attribute.name, "value": value}

            if not value:
                if attribute.required:
                    report.missing_required.append(issue)
                continue

            _check_value(attribute, value, issue, report)

    has_errors = any([
        report.missing_required,
        report.invalid_numerics,
        report.below_minimum,
        report.too_long,
        report.invalid_values,
        report.invalid_booleans,
    ])
    report.is_clean = not has_errors

    logger.info(
        f"Quality check complete: {report.total_rows} rows, "
        f"clean={report.is_clean}, "
        f"{len(report.missing_required)} missing required, "
        f"{len(report.invalid_numerics)} invalid numerics, "
        f"{len(report.too_long)} too long, "
        f"{len(report.invalid_values)} invalid values"
    )

    return report


# ═══════════════════════════════════════════════════════════════════════════
# Internal helpers
# ═══════════════════════════════════════════════════════════════════════════

def _check_value(
    attribute: MarketplaceAttribute,
    value: str,
    issue: dict,
    report: QualityReport,
) -> None:
    """Run the type, length and allowed-value checks for one non-empty cell."""
    if attribute.type == "number":
        number = _parse_number(value)
        if number is None:
            report.invalid_numerics.append(issue)
        elif attribute.min_value is not None and number < attribute.min_value:
            report.below_minimum.append(issue)

    if attribute.type == "boolean" and value.lower() not in BOOLEAN_VALUES:
        report.invalid_booleans.append(issue)

    if attribute.max_length is not None and len(value) > attribute.max_length:
        report.too_long.append(issue)

    if attribute.enum_values:
        if attribute.type == "array":
            elements = [
                element.strip()
                for element in re.split(ENUM_SEPARATORS, value)
                if element.strip()
            ]
        else:
            elements = [value]
        if any(element not in attribute.enum_values for element in elements):
            report.invalid_values.append(issue)


def _parse_number(value: str) -> float | None:
    """
    Parse a numeric cell, allowing thousands separators.

    Returns None if invalid, including the non-finite "nan" and "inf"
    spellings.
    """
    try:
        number = float(value.replace(",", ""))
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number

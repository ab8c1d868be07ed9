"""
CSV file reader for seller product files and marketplace templates.

Seller files: the first non-blank row is the header, every following row is
product data. Produces one SourceColumn per header (with a few non-empty
sample values for display) plus the full data as a string DataFrame.

Marketplace templates: one row per attribute. Template columns are located
by header keywords (config/template_schema.py), so "attribute_name",
"Name" or "Attribute" all identify the name column.

Duplicate names are rejected here, at the boundary, so that the column
mapper can assume unique names on both sides.

Public API:
    validate_upload(filename, size_bytes) → str | None
    format_file_size(size_bytes) → str
    read_seller_file(source) → SellerFileResult
    read_template_file(source) → TemplateReadResult
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO

import pandas as pd

from config.settings import ALLOWED_EXTENSIONS, MAX_FILE_SIZE_BYTES, MAX_SAMPLE_ROWS
from config.template_schema import (
    ATTRIBUTE_TYPES,
    ENUM_SEPARATORS,
    HEADER_KEYWORDS,
    TYPE_ALIASES,
)
from processing.column_mapper import SourceColumn, TargetField

logger = logging.getLogger(__name__)

CsvSource = Path | str | IO

_MIN_VALUE_PATTERN = re.compile(r">=\s*(\d+)")

# Errors raised by pandas / the OS for files we cannot parse at all.
_READ_ERRORS = (
    pd.errors.EmptyDataError,
    pd.errors.ParserError,
    UnicodeDecodeError,
    OSError,
)


# ═══════════════════════════════════════════════════════════════════════════
# Data classes
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class MarketplaceAttribute:
    """One attribute row of a marketplace template."""

    name: str
    type: str = "string"
    required: bool = False
    max_length: int | None = None
    min_value: int | None = None
    enum_values: list[str] = field(default_factory=list)
    description: str | None = None
    validation_rules: str | None = None

    def as_target_field(self) -> TargetField:
        """Return the matcher's view of this attribute."""
        return TargetField(name=self.name, required=self.required)


@dataclass
class SellerFileResult:
    """Complete result of reading one seller CSV file."""

    filename: str = ""
    columns: list[SourceColumn] = field(default_factory=list)
    dataframe: pd.DataFrame = field(default_factory=pd.DataFrame)
    row_count: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass
class TemplateReadResult:
    """Complete result of reading one marketplace template CSV."""

    filename: str = ""
    attributes: list[MarketplaceAttribute] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


# ═══════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════

def validate_upload(filename: str, size_bytes: int) -> str | None:
    """
    Check an uploaded file against the size and extension constraints.

    Returns:
        An error message, or None if the file is acceptable.
    """
    if size_bytes > MAX_FILE_SIZE_BYTES:
        return (
            f"File size should not exceed "
            f"{MAX_FILE_SIZE_BYTES // (1024 * 1024)}MB"
        )

    if Path(filename).suffix.lower() not in ALLOWED_EXTENSIONS:
        return "Please upload a CSV file"

    return None


def format_file_size(size_bytes: int) -> str:
    """Format a byte count for display, e.g. 1536 → "1.5 KB"."""
    if size_bytes <= 0:
        return "0 Bytes"

    units = ["Bytes", "KB", "MB", "GB"]
    exponent = 0
    while size_bytes >= 1024 ** (exponent + 1) and exponent < len(units) - 1:
        exponent += 1
    value = round(size_bytes / 1024 ** exponent, 2)
    return f"{value:g} {units[exponent]}"


def read_seller_file(source: CsvSource) -> SellerFileResult:
    """
    Read a seller product CSV into columns, samples and data.

    Header cells are stripped; columns with an empty header are skipped.
    A file with duplicate header names is rejected (no columns returned)
    because the same name could not be mapped unambiguously.

    Args:
        source: Path, path string, or file-like object (e.g. an upload).

    Returns:
        SellerFileResult with the columns in file order, up to
        MAX_SAMPLE_ROWS non-empty sample values per column, the data rows
        as a string DataFrame, and any errors encountered.
    """
    result = SellerFileResult(filename=_display_name(source))

    raw, error_message = _read_raw_csv(source, result.filename)
    if error_message:
        result.errors.append(error_message)
        return result

    if len(raw) < 2:
        _add_error(
            result,
            f"'{result.filename}' must have a header row and at least one data row",
        )
        return result

    header = raw.iloc[0].tolist()
    keep_positions = [pos for pos, name in enumerate(header) if name]

    if not keep_positions:
        _add_error(result, f"No valid column headers found in '{result.filename}'")
        return result

    skipped = len(header) - len(keep_positions)
    if skipped:
        logger.warning(
            f"Skipping {skipped} column(s) with an empty header in '{result.filename}'"
        )

    column_names = [header[pos] for pos in keep_positions]
    duplicates = _find_duplicates(column_names)
    if duplicates:
        _add_error(
            result,
            f"Duplicate column names in '{result.filename}': {', '.join(duplicates)}",
        )
        return result

    data = raw.iloc[1:, keep_positions].reset_index(drop=True)
    data.columns = column_names

    sample_rows = data.head(MAX_SAMPLE_ROWS)
    result.columns = [
        SourceColumn(
            name=name,
            sample_values=tuple(value for value in sample_rows[name] if value),
        )
        for name in column_names
    ]
    result.dataframe = data
    result.row_count = len(data)

    logger.info(
        f"Finished reading '{result.filename}': {len(result.columns)} columns, "
        f"{result.row_count} data rows"
    )
    return result


def read_template_file(source: CsvSource) -> TemplateReadResult:
    """
    Read a marketplace template CSV into attribute records.

    The header row must contain a name column and a type column (matched by
    keyword); required, max length, allowed values and validation rule
    columns are optional. Rows missing a name or a type are skipped.

    Args:
        source: Path, path string, or file-like object (e.g. an upload).

    Returns:
        TemplateReadResult with attributes in template order and any errors.
    """
    result = TemplateReadResult(filename=_display_name(source))

    raw, error_message = _read_raw_csv(source, result.filename)
    if error_message:
        result.errors.append(error_message)
        return result

    if len(raw) < 2:
        _add_error(
            result,
            f"'{result.filename}' must have a header row and at least one attribute",
        )
        return result

    headers = [str(value).lower() for value in raw.iloc[0].tolist()]
    positions = _locate_template_columns(headers)

    if positions["name"] is None or positions["type"] is None:
        _add_error(
            result,
            f"'{result.filename}' must have \"attribute_name\" and \"data_type\" columns",
        )
        return result

    for row_number, row in enumerate(raw.iloc[1:].itertuples(index=False), start=2):
        attribute = _parse_attribute_row(list(row), positions)
        if attribute is None:
            logger.debug(f"Skipping template row {row_number}: missing name or type")
            continue
        result.attributes.append(attribute)

    if not result.attributes:
        _add_error(result, f"No valid attributes found in '{result.filename}'")
        return result

    duplicates = _find_duplicates([attr.name for attr in result.attributes])
    if duplicates:
        result.attributes = []
        _add_error(
            result,
            f"Duplicate attribute names in '{result.filename}': {', '.join(duplicates)}",
        )
        return result

    required_count = sum(1 for attr in result.attributes if attr.required)
    logger.info(
        f"Finished reading template '{result.filename}': "
        f"{len(result.attributes)} attributes, {required_count} required"
    )
    return result


# ═══════════════════════════════════════════════════════════════════════════
# Internal helpers
# ═══════════════════════════════════════════════════════════════════════════

def _display_name(source: CsvSource) -> str:
    """Return a short name for the source, for messages and logs."""
    if isinstance(source, (str, Path)):
        return Path(source).name
    return getattr(source, "name", "uploaded file")


def _add_error(result: SellerFileResult | TemplateReadResult, message: str) -> None:
    """Log an error and record it on the result."""
    logger.error(message)
    result.errors.append(message)


def _read_raw_csv(source: CsvSource, filename: str) -> tuple[pd.DataFrame, str | None]:
    """
    Read every non-blank row of a CSV as stripped strings, header included.

    The header row fixes the width: short rows are padded with "" and
    extra cells on longer rows (e.g. a trailing comma) are dropped.
    Nothing is interpreted as NaN, so values like "NA" or "null" survive
    as text.

    Returns:
        (raw DataFrame, None) on success, or (empty DataFrame, error message).
    """
    read_options = {
        "header": None,
        "dtype": str,
        "keep_default_na": False,
        "skip_blank_lines": True,
        "engine": "python",
    }

    try:
        _rewind(source)
        width = pd.read_csv(source, nrows=1, **read_options).shape[1]

        _rewind(source)
        raw = pd.read_csv(
            source,
            names=range(width),
            on_bad_lines=lambda fields: fields[:width],
            **read_options,
        )
    except _READ_ERRORS as exc:
        error_message = f"Failed to parse '{filename}': {exc}"
        logger.error(error_message)
        return pd.DataFrame(), error_message

    raw = raw.fillna("")
    for column in raw.columns:
        raw[column] = raw[column].str.strip()

    return raw, None


def _rewind(source: CsvSource) -> None:
    """Move a file-like source back to the start; uploads are re-read on every UI rerun."""
    if hasattr(source, "seek"):
        source.seek(0)


def _find_duplicates(names: list[str]) -> list[str]:
    """Return names occurring more than once, in first-seen order."""
    seen: set[str] = set()
    duplicates: list[str] = []
    for name in names:
        if name in seen and name not in duplicates:
            duplicates.append(name)
        seen.add(name)
    return duplicates


def _locate_template_columns(headers: list[str]) -> dict[str, int | None]:
    """
    Find the position of each template column role in the header row.

    Args:
        headers: Lowercased header cells.

    Returns:
        Dict of role → column position, or None if no header matches.
    """
    positions: dict[str, int | None] = {}
    for role, keywords in HEADER_KEYWORDS.items():
        positions[role] = next(
            (
                pos
                for pos, header in enumerate(headers)
                if any(keyword in header for keyword in keywords)
            ),
            None,
        )
    return positions


def _cell(row: list[str], position: int | None) -> str:
    """Return the cell at *position*, or "" when absent."""
    if position is None or position >= len(row):
        return ""
    return row[position]


def _parse_attribute_row(
    row: list[str],
    positions: dict[str, int | None],
) -> MarketplaceAttribute | None:
    """
    Build a MarketplaceAttribute from one template row.

    Returns:
        The attribute, or None if the row has no name or no type.
    """
    name = _cell(row, positions["name"])
    raw_type = _cell(row, positions["type"]).lower()
    if not name or not raw_type:
        return None

    attribute_type = TYPE_ALIASES.get(raw_type, raw_type)
    if attribute_type not in ATTRIBUTE_TYPES:
        logger.warning(f"Unknown type '{raw_type}' for attribute '{name}'")

    attribute = MarketplaceAttribute(
        name=name,
        type=attribute_type,
        required=_cell(row, positions["required"]).upper() == "TRUE",
    )

    max_length = _cell(row, positions["max_length"])
    if max_length:
        try:
            attribute.max_length = int(max_length)
        except ValueError:
            logger.debug(f"Could not parse max length '{max_length}' for '{name}'")

    allowed_values = _cell(row, positions["allowed_values"])
    if allowed_values:
        attribute.enum_values = [
            value.strip()
            for value in re.split(ENUM_SEPARATORS, allowed_values)
            if value.strip()
        ]

    validation_rule = _cell(row, positions["validation"])
    if validation_rule:
        attribute.validation_rules = validation_rule
        attribute.description = validation_rule
        min_match = _MIN_VALUE_PATTERN.search(validation_rule)
        if min_match:
            attribute.min_value = int(min_match.group(1))

    return attribute

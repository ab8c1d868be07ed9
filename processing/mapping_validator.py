"""
Mapping validator — checks a (possibly user-edited) assignment before save.

Runs on top of the column mapper's output:
  1. Counts: total / mapped / required-total / required-mapped, for the UI.
  2. Required gating: required attributes without a column block the save.
  3. Optional check: unmapped optional attributes need user confirmation.
  4. Shared columns: one seller column chosen for several attributes also
     blocks the save.

Also converts between the UI-side assignment (attribute → seller column)
and the persisted form (seller column → attribute).

Public API:
    summarize_mapping(attributes, assignment) → MappingSummary
    validate_mapping(attributes, assignment) → MappingValidation
    to_persisted_mapping(assignment) → dict[str, str]
    from_persisted_mapping(persisted) → dict[str, str]
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from processing.column_mapper import TargetField
from processing.file_reader import MarketplaceAttribute

logger = logging.getLogger(__name__)

Attribute = MarketplaceAttribute | TargetField


# ═══════════════════════════════════════════════════════════════════════════
# Data classes
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class MappingSummary:
    """Mapping progress counts shown next to the selectors."""

    total: int = 0
    mapped: int = 0
    required_total: int = 0
    required_mapped: int = 0

    @property
    def all_required_mapped(self) -> bool:
        return self.required_mapped == self.required_total


@dataclass
class MappingValidation:
    """Outcome of validating an assignment for save."""

    summary: MappingSummary = field(default_factory=MappingSummary)
    missing_required: list[str] = field(default_factory=list)
    unmapped_optional: list[str] = field(default_factory=list)
    shared_columns: dict[str, list[str]] = field(default_factory=dict)
    """seller column → attributes that all selected it."""

    @property
    def can_save(self) -> bool:
        """
        Saving is blocked while any required attribute is unmapped, or while
        one seller column is selected for several attributes (the stored
        {seller column: attribute} form can hold only one of them).
        """
        return not self.missing_required and not self.shared_columns

    @property
    def needs_confirmation(self) -> bool:
        """Optional attributes left unmapped should be confirmed by the user."""
        return bool(self.unmapped_optional)


# ═══════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════

def summarize_mapping(
    attributes: Sequence[Attribute],
    assignment: Mapping[str, str],
) -> MappingSummary:
    """
    Count mapped attributes.

    An attribute counts as mapped only if its current value is non-empty.
    Entries for names that are not template attributes are ignored.
    """
    summary = MappingSummary(total=len(attributes))

    for attribute in attributes:
        is_mapped = bool(assignment.get(attribute.name))
        if is_mapped:
            summary.mapped += 1
        if attribute.required:
            summary.required_total += 1
            if is_mapped:
                summary.required_mapped += 1

    return summary


def validate_mapping(
    attributes: Sequence[Attribute],
    assignment: Mapping[str, str],
) -> MappingValidation:
    """
    Validate an assignment before it is persisted.

    Args:
        attributes: Template attributes in template order.
        assignment: Attribute name → seller column name ("" = unmapped).

    Returns:
        MappingValidation with counts, missing required attributes,
        unmapped optional attributes and shared seller columns.
    """
    validation = MappingValidation(summary=summarize_mapping(attributes, assignment))

    column_users: dict[str, list[str]] = {}
    for attribute in attributes:
        column = assignment.get(attribute.name)
        if not column:
            if attribute.required:
                validation.missing_required.append(attribute.name)
            else:
                validation.unmapped_optional.append(attribute.name)
            continue
        column_users.setdefault(column, []).append(attribute.name)

    validation.shared_columns = {
        column: names for column, names in column_users.items() if len(names) > 1
    }

    logger.info(
        f"Mapping validation: {validation.summary.mapped} of "
        f"{validation.summary.total} mapped, "
        f"{len(validation.missing_required)} required missing, "
        f"{len(validation.unmapped_optional)} optional unmapped, "
        f"{len(validation.shared_columns)} shared columns"
    )

    return validation


def to_persisted_mapping(assignment: Mapping[str, str]) -> dict[str, str]:
    """
    Invert an assignment into the stored {seller column: attribute} form.

    Empty entries are dropped. If two attributes share a seller column the
    later one wins and a warning is logged.
    """
    persisted: dict[str, str] = {}

    for attribute_name, column in assignment.items():
        if not column:
            continue
        if column in persisted:
            logger.warning(
                f"Column '{column}' mapped to both '{persisted[column]}' and "
                f"'{attribute_name}'; keeping '{attribute_name}'"
            )
        persisted[column] = attribute_name

    return persisted


def from_persisted_mapping(persisted: Mapping[str, str]) -> dict[str, str]:
    """Rebuild an {attribute: seller column} assignment from a stored mapping."""
    assignment: dict[str, str] = {}

    for column, attribute_name in persisted.items():
        if not attribute_name:
            continue
        if attribute_name in assignment:
            logger.warning(
                f"Attribute '{attribute_name}' stored for both "
                f"'{assignment[attribute_name]}' and '{column}'; keeping '{column}'"
            )
        assignment[attribute_name] = column

    return assignment

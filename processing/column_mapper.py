"""
Column mapper — proposes a default seller-column assignment for each
marketplace template attribute.

Uses a two-pass cascade over the template attributes (in template order):
  1. Exact match on normalized names (lowercase, alphanumerics only)
  2. Similarity match against the still-unused seller columns
     (substring → 0.85, otherwise Levenshtein ratio), threshold 0.7

A seller column is assigned to at most one attribute. Attributes that find
no candidate are left out of the result for manual selection.

Everything here is pure: no I/O, no state between calls. The caller owns the
current (possibly user-edited) assignment and merges defaults into it with
merge_with_existing().

Name normalization and the similarity score live in utils/fuzzy_match.py and
are re-exported here.

Public API:
    normalize_name(name) → str
    similarity(a, b) → float
    compute_default_mapping(target_fields, source_columns) → dict[str, str]
    merge_with_existing(existing, defaults) → dict[str, str]
    auto_map(target_fields, source_columns, existing) → dict[str, str]
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from config.settings import MATCH_THRESHOLD
from utils.fuzzy_match import normalize_name, similarity

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# Data classes
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TargetField:
    """A marketplace template attribute to be populated."""

    name: str
    required: bool = False


@dataclass(frozen=True)
class SourceColumn:
    """A column header found in a seller product file."""

    name: str
    sample_values: tuple[str, ...] = ()


# ═══════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════

def compute_default_mapping(
    target_fields: Sequence[TargetField | str],
    source_columns: Sequence[SourceColumn | str],
) -> dict[str, str]:
    """
    Propose a seller column for each template attribute.

    Two passes over target_fields, each in the given order:
      1. Exact: the first unused source column whose normalized name equals
         the target's normalized name.
      2. Similarity: among unused source columns, the highest similarity()
         score, earliest column winning ties. Accepted only if the score is
         at least MATCH_THRESHOLD.

    Each assigned source column is marked used and never offered again, so
    no two targets share a column in the result.

    Args:
        target_fields: Template attributes (or their names) in template order.
        source_columns: Seller columns (or their names) in file order.

    Returns:
        Dict of target name → source column name, containing only the
        targets that received a match.
    """
    target_names = [_name_of(target) for target in target_fields]
    source_names = [_name_of(source) for source in source_columns]
    normalized_sources = {name: normalize_name(name) for name in source_names}

    assignment: dict[str, str] = {}
    used: set[str] = set()

    # Pass 1: exact match on normalized names
    for target_name in target_names:
        if target_name in assignment:
            continue

        normalized_target = normalize_name(target_name)
        for source_name in source_names:
            if source_name in used:
                continue
            if normalized_sources[source_name] == normalized_target:
                assignment[target_name] = source_name
                used.add(source_name)
                logger.debug(f"Exact match '{target_name}' → '{source_name}'")
                break

    exact_count = len(assignment)

    # Pass 2: best similarity among the remaining columns
    for target_name in target_names:
        if target_name in assignment:
            continue

        best_source, best_score = _best_candidate(target_name, source_names, used)

        if best_source is not None and best_score >= MATCH_THRESHOLD:
            assignment[target_name] = best_source
            used.add(best_source)
            logger.debug(
                f"Fuzzy match '{target_name}' → '{best_source}' "
                f"(score={best_score:.3f})"
            )
        else:
            logger.debug(
                f"No default for '{target_name}' "
                f"(best was '{best_source}' at {best_score:.3f})"
            )

    logger.info(
        f"Default mapping complete: {len(assignment)} of {len(target_names)} "
        f"attributes mapped ({exact_count} exact, "
        f"{len(assignment) - exact_count} fuzzy)"
    )

    return assignment


def merge_with_existing(
    existing: Mapping[str, str] | None,
    defaults: Mapping[str, str],
) -> dict[str, str]:
    """
    Fill the empty entries of an existing assignment from fresh defaults.

    Non-empty existing entries are kept unconditionally, so manual choices
    survive a re-run of the default pass. The existing mapping is not
    modified; a new dict is returned for the caller to swap in.

    Args:
        existing: Current target → source assignment, possibly user-edited.
        defaults: Output of compute_default_mapping().

    Returns:
        The merged assignment.
    """
    merged = dict(existing or {})

    filled = 0
    for target_name, source_name in defaults.items():
        if merged.get(target_name):
            continue
        merged[target_name] = source_name
        filled += 1

    logger.debug(f"Merged defaults: {filled} empty entries filled")
    return merged


def auto_map(
    target_fields: Sequence[TargetField | str],
    source_columns: Sequence[SourceColumn | str],
    existing: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """
    Compute defaults and merge them into *existing*.

    Passing no existing assignment starts from a clean selection, which is
    what the caller wants after switching to a different seller file.
    """
    defaults = compute_default_mapping(target_fields, source_columns)
    return merge_with_existing(existing, defaults)


# ═══════════════════════════════════════════════════════════════════════════
# Internal helpers
# ═══════════════════════════════════════════════════════════════════════════

def _name_of(item: TargetField | SourceColumn | str) -> str:
    """Return the name of a field/column, accepting bare strings."""
    return item if isinstance(item, str) else item.name


def _best_candidate(
    target_name: str,
    source_names: list[str],
    used: set[str],
) -> tuple[str | None, float]:
    """
    Find the unused source column most similar to *target_name*.

    Strict ">" keeps the earliest column on ties.

    Returns:
        (source_name, score), or (None, 0.0) if no column scores above 0.
    """
    best_source: str | None = None
    best_score = 0.0

    for source_name in source_names:
        if source_name in used:
            continue
        score = similarity(target_name, source_name)
        if score > best_score:
            best_score = score
            best_source = source_name

    return best_source, best_score

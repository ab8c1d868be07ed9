"""
Fuzzy string matching utilities.

Name normalization and the similarity score used by column_mapper for
default assignments, plus a ranked-candidates helper used by the UI to
suggest seller columns when the user overrides a default by hand.
"""

import logging
import re

from rapidfuzz.distance import Levenshtein

from config.settings import DEFAULT_SUGGESTION_LIMIT, SUBSTRING_SCORE

logger = logging.getLogger(__name__)

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]+")


def normalize_name(name: str) -> str:
    """
    Reduce a column or attribute name to its comparable form.

    Lowercases and drops every character outside [a-z0-9], so the
    alphanumeric fragments are concatenated: "SKU_ID" → "skuid",
    "Product Name" → "productname".
    """
    return _NON_ALPHANUMERIC.sub("", name.lower())


def similarity(a: str, b: str) -> float:
    """
    Score how alike two raw names are.

    First applicable rule wins:
      1. Either normalized name empty → 0.0
      2. Normalized names equal → 1.0
      3. One normalized name contains the other → SUBSTRING_SCORE (0.85)
      4. 1 - levenshtein / max(len(a), len(b))

    The score is symmetric. Rule 4 is not clamped, so callers should not
    assume a floor of 0; such scores are far below any useful threshold.

    Args:
        a: First raw name.
        b: Second raw name.

    Returns:
        Similarity score, 1.0 for identical normalized names.
    """
    norm_a = normalize_name(a)
    norm_b = normalize_name(b)

    if not norm_a or not norm_b:
        return 0.0
    if norm_a == norm_b:
        return 1.0
    if norm_a in norm_b or norm_b in norm_a:
        return SUBSTRING_SCORE

    distance = Levenshtein.distance(norm_a, norm_b)
    return 1 - distance / max(len(norm_a), len(norm_b))


def rank_candidates(
    value: str,
    candidates: list[str],
    limit: int = DEFAULT_SUGGESTION_LIMIT,
    threshold: float = 0.0,
) -> list[tuple[str, float]]:
    """
    Rank *candidates* by similarity to *value*, best first.

    Candidates scoring at or below *threshold* are dropped. Ties keep the
    candidates' original order.

    Args:
        value: The attribute name to find columns for.
        candidates: Seller column names, in file order.
        limit: Maximum number of suggestions returned.
        threshold: Scores must be strictly above this to be suggested.

    Returns:
        List of (candidate, score) pairs, highest score first.
    """
    if not value or not candidates or limit <= 0:
        return []

    scored = [
        (candidate, similarity(value, candidate))
        for candidate in candidates
    ]
    ranked = sorted(
        (pair for pair in scored if pair[1] > threshold),
        key=lambda pair: pair[1],
        reverse=True,
    )

    logger.debug(
        f"Ranked {len(ranked)} of {len(candidates)} columns for '{value}'"
    )
    return ranked[:limit]

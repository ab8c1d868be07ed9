"""
Matching and upload settings.

Thresholds used by the column mapper and the constraints applied to uploaded
files before they are read.
"""

# ---------------------------------------------------------------------------
# Column matching
# ---------------------------------------------------------------------------

# Minimum similarity (0-1) for a fuzzy match to be accepted as a default.
MATCH_THRESHOLD: float = 0.7

# Score given when one normalized name contains the other
# (e.g. "sku" inside "productsku").
SUBSTRING_SCORE: float = 0.85

# Number of ranked candidates offered for a manual override.
DEFAULT_SUGGESTION_LIMIT: int = 5

# ---------------------------------------------------------------------------
# Uploads
# ---------------------------------------------------------------------------

MAX_FILE_SIZE_BYTES: int = 100 * 1024 * 1024  # 100 MB

ALLOWED_EXTENSIONS: set[str] = {".csv"}

# Data rows kept per seller column for display next to the selectors.
MAX_SAMPLE_ROWS: int = 3

"""Application-wide constants.

This module centralizes magic numbers used by the learning core. For
environment-specific configuration, see config.py.
"""

# =============================================================================
# Lesson completion
# =============================================================================

# A lesson counts as watched once this share of its duration is reached
COMPLETION_THRESHOLD_RATIO: float = 0.9

# ...or once playback enters the final window of this many seconds
COMPLETION_TAIL_SECONDS: int = 30

# =============================================================================
# Progress reporting
# =============================================================================

# Percentages are reported with this many decimal places
PERCENT_DECIMAL_PLACES: int = 2

# Reported for courses and modules without published lessons
EMPTY_CONTENT_PERCENT: float = 100.0

# =============================================================================
# Roles & access
# =============================================================================

ADMIN_ROLE: str = "admin"

# Entitlement product that unlocks the whole catalog
ALL_ACCESS_PRODUCT: str = "ALL_ACCESS"

# =============================================================================
# Video delivery
# =============================================================================

# Poster frame query used for lesson thumbnails
MUX_POSTER_QUERY: str = "width=640&height=360&fit_mode=smartcrop"

"""
Configuration constants for the training analytics engines.

All adjustable parameters are centralized here for easy tuning.
User-facing settings (weekly target, rest timer, week start) can be
overridden through settings.yaml; see core/engine/config_loader.py.
"""

from typing import Final

# =============================================================================
# COVERAGE
# =============================================================================

TARGET_SCORE_PER_REGION: Final[float] = 4.0  # Equivalent of 4 primary working sets = 100%
COVERED_THRESHOLD: Final[float] = 0.75       # Progress at which a region counts as covered
ROLE_WEIGHTS: Final[dict[str, float]] = {
    "primary": 1.0,
    "secondary": 0.5,
}

# =============================================================================
# WEEKLY GOAL
# =============================================================================

DEFAULT_WEEKLY_TARGET: Final[int] = 4  # Sessions per calendar week
DEFAULT_FIRST_WEEKDAY: Final[int] = 0  # 0 = Monday ... 6 = Sunday

# =============================================================================
# INSIGHTS
# =============================================================================

RECENT_VOLUME_WINDOW: Final[int] = 4  # Sessions averaged for the volume tip

# =============================================================================
# PROGRESSIVE OVERLOAD
# =============================================================================

REP_GOAL: Final[int] = 10
WEIGHT_INCREMENT: Final[float] = 5.0
LARGE_WEIGHT_INCREMENT: Final[float] = 10.0
LARGE_INCREMENT_CATEGORIES: Final[tuple[str, ...]] = ("legs", "back")
RECOMMENDATION_REPS: Final[tuple[int, ...]] = (5, 8, 10)
ROUNDING_STEP: Final[float] = 5.0
RESTART_REP_RANGE: Final[str] = "6-8"
WORKING_SET_HISTORY_LIMIT: Final[int] = 20

# =============================================================================
# EPLEY
# =============================================================================

EPLEY_DIVISOR: Final[float] = 30.0  # 1RM = w * (1 + reps / 30)

# =============================================================================
# DASHBOARD
# =============================================================================

SPLIT_DISTRIBUTION_LIMIT: Final[int] = 6
STRENGTH_TREND_LIMIT: Final[int] = 8
STRENGTH_DELTA_TREND_LIMIT: Final[int] = 20
PROGRESS_RANGES_DAYS: Final[dict[str, int]] = {
    "1M": 30,
    "3M": 90,
    "6M": 180,
    "1Y": 365,
}

# =============================================================================
# REST TIMER
# =============================================================================

REST_SECONDS_DEFAULT: Final[float] = 90.0
REST_SECONDS_MIN: Final[float] = 30.0
REST_SECONDS_MAX: Final[float] = 300.0

# =============================================================================
# EXPORT
# =============================================================================

EXPORT_SCHEMA_VERSION: Final[int] = 1


def clamp_rest_seconds(value: float) -> float:
    """Clamp a rest timer value into [REST_SECONDS_MIN, REST_SECONDS_MAX]."""
    return min(REST_SECONDS_MAX, max(REST_SECONDS_MIN, value))

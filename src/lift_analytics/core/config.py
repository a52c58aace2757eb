"""
Configuration constants for the analytics engine.

All domain thresholds are centralized here so that the aggregator, the trend
fitter and the grid builder stay consistent with each other.
"""

from datetime import date
from typing import Final

# =============================================================================
# STRENGTH ESTIMATION
# =============================================================================

EPLEY_REP_DIVISOR: Final[float] = 30.0  # 1RM = w * (1 + reps / 30)
MAX_REPS_FOR_1RM: Final[int] = 15  # Epley is unreliable beyond this
MIN_REPS_FOR_1RM: Final[int] = 1

# =============================================================================
# PROGRESSION / TREND CLASSIFICATION
# =============================================================================

# Shared by weekly volume progression and the trend fitter.
PROGRESSION_THRESHOLD_PCT: Final[float] = 2.5
MIN_TREND_POINTS: Final[int] = 3

# Volume change reported when the previous week had zero volume
CHANGE_FROM_ZERO_PCT: Final[float] = 100.0

# =============================================================================
# PERIODS
# =============================================================================

# Stand-in for "negative infinity" on all-time ranges
ALL_TIME_START: Final[date] = date(1970, 1, 1)
DEFAULT_ROLLING_DAYS: Final[int] = 30
DEFAULT_PERIOD_ID: Final[str] = "last_30_days"

# =============================================================================
# CONTRIBUTION GRID
# =============================================================================

GRID_MAX_DAYS: Final[int] = 365
GRID_ROWS: Final[int] = 7  # Mon..Sun
GRID_LEVELS: Final[int] = 3  # intensity levels above zero

# =============================================================================
# FORECASTING
# =============================================================================

PACE_WINDOW_POINTS: Final[int] = 4  # points used for current pace
DAYS_PER_WEEK: Final[float] = 7.0

# Goal status bands (percentage points)
GOAL_STATUS_MARGIN_PCT: Final[float] = 10.0
GOAL_AT_RISK_DAYS: Final[int] = 14
GOAL_AT_RISK_PROGRESS_PCT: Final[float] = 80.0

"""
Trend fitting over progress series.

Ordinary least squares on (session index, value).  The x axis is the session
index rather than the calendar date: training cadence is irregular, and an
index-based fit keeps a long break from dominating the slope.
"""

from typing import Sequence

from .config import MIN_TREND_POINTS, PROGRESSION_THRESHOLD_PCT
from .models import ProgressPoint, TrendClassification, TrendResult


def linear_regression(
    xs: Sequence[float],
    ys: Sequence[float],
) -> tuple[float, float, float]:
    """
    Least-squares line y = intercept + slope * x.

    Args:
        xs: x values
        ys: y values (same length)

    Returns:
        Tuple (slope, intercept, r_squared).  Degenerate inputs (fewer than
        2 points, all x equal) give slope 0 through the mean.
    """
    n = len(xs)
    if n == 0:
        return (0.0, 0.0, 0.0)

    sum_x = sum(xs)
    sum_y = sum(ys)
    sum_xy = sum(x * y for x, y in zip(xs, ys))
    sum_x2 = sum(x * x for x in xs)

    denominator = n * sum_x2 - sum_x**2
    if n < 2 or abs(denominator) < 1e-10:
        return (0.0, sum_y / n, 0.0)

    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n

    y_mean = sum_y / n
    ss_total = sum((y - y_mean) ** 2 for y in ys)
    ss_residual = sum((y - (intercept + slope * x)) ** 2 for x, y in zip(xs, ys))
    r_squared = 1.0 if ss_total == 0 else 1 - ss_residual / ss_total

    return (slope, intercept, r_squared)


def classify_change(change_percent: float | None) -> TrendClassification:
    """Map a fitted percent change onto up / down / flat."""
    if change_percent is None:
        return "flat"
    if change_percent > PROGRESSION_THRESHOLD_PCT:
        return "up"
    if change_percent < -PROGRESSION_THRESHOLD_PCT:
        return "down"
    return "flat"


def fit_trend(points: Sequence[ProgressPoint]) -> TrendResult:
    """
    Fit a line to a progress series and classify its direction.

    change_percent = (fitted_last - fitted_first) / fitted_first * 100

    Using the fitted endpoints instead of the raw first/last samples keeps a
    single outlier session from flipping the classification.

    Args:
        points: Progress points; sorted by date before fitting

    Returns:
        TrendResult; "insufficient_data" with fewer than 3 points
    """
    if len(points) < MIN_TREND_POINTS:
        return TrendResult(
            slope=0.0,
            intercept=0.0,
            classification="insufficient_data",
            change_percent=None,
            r_squared=0.0,
        )

    ordered = sorted(points, key=lambda p: p.date)
    xs = [float(i) for i in range(len(ordered))]
    ys = [p.value for p in ordered]
    slope, intercept, r_squared = linear_regression(xs, ys)

    first_fitted = intercept
    last_fitted = intercept + slope * (len(ordered) - 1)
    if first_fitted == 0:
        change_percent = None
    else:
        change_percent = (last_fitted - first_fitted) / first_fitted * 100

    return TrendResult(
        slope=slope,
        intercept=intercept,
        classification=classify_change(change_percent),
        change_percent=change_percent,
        r_squared=r_squared,
    )

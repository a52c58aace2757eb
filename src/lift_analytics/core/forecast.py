"""
Goal forecasting and goal progress.

Extrapolates the fitted trend to a target value and compares the pace the
user is on with the pace the deadline requires.  Volume, frequency and
streak goals are measured directly from the log.  Sparse data is an
expected state: these functions return None or a neutral value instead of
raising.
"""

import math
from datetime import date, timedelta
from typing import Iterable, Literal, Sequence

from .aggregation import MuscleGroupLookup, filter_workouts
from .config import (
    DAYS_PER_WEEK,
    GOAL_AT_RISK_DAYS,
    GOAL_AT_RISK_PROGRESS_PCT,
    GOAL_STATUS_MARGIN_PCT,
    MIN_TREND_POINTS,
    PACE_WINDOW_POINTS,
)
from .models import DateRange, GoalForecast, GoalProgress, ProgressPoint, WorkoutLog
from .streaks import current_streak, current_weekly_streak, longest_streak, longest_weekly_streak
from .strength import exercise_volume, set_volume
from .trend import fit_trend

GoalStatus = Literal["completed", "at-risk", "ahead", "behind", "on-track"]
StreakType = Literal["daily", "weekly"]


def _average_interval_days(ordered: Sequence[ProgressPoint]) -> float:
    """Mean number of days between consecutive sessions."""
    if len(ordered) < 2:
        return 0.0
    return (ordered[-1].date - ordered[0].date).days / (len(ordered) - 1)


def predict_completion(
    points: Sequence[ProgressPoint],
    target_value: float,
) -> date | None:
    """
    Predict when the fitted trend reaches ``target_value``.

    The trend is fitted on the session index; the number of sessions still
    needed is converted to days with the average interval between the
    observed sessions.

    Args:
        points: Progress series
        target_value: Value to reach

    Returns:
        Predicted date, or None with fewer than 3 points, a flat trend, a
        trend moving away from the target, or no calendar spread to
        extrapolate from
    """
    if len(points) < MIN_TREND_POINTS:
        return None

    ordered = sorted(points, key=lambda p: p.date)
    trend = fit_trend(ordered)
    if trend.slope == 0:
        return None

    last_index = len(ordered) - 1
    last_fitted = trend.intercept + trend.slope * last_index
    remaining = target_value - last_fitted
    if remaining == 0:
        return ordered[-1].date
    if remaining * trend.slope < 0:
        return None

    interval = _average_interval_days(ordered)
    if interval <= 0:
        return None

    sessions_needed = remaining / trend.slope
    return ordered[-1].date + timedelta(days=math.ceil(sessions_needed * interval))


def required_pace_per_week(
    current_value: float,
    target_value: float,
    days_remaining: int,
) -> float | None:
    """
    Weekly change needed to hit the target by the deadline.

    pace = (target - current) / (days_remaining / 7)

    A negative pace means the target is already exceeded (ahead of schedule).

    Returns:
        Pace per week, or None when the deadline is today or has passed
    """
    if days_remaining <= 0:
        return None
    return (target_value - current_value) / (days_remaining / DAYS_PER_WEEK)


def current_pace_per_week(points: Sequence[ProgressPoint]) -> float:
    """
    Recent weekly rate of change.

    Uses the last up-to-4 points and the real number of days between the
    first and the last of them.

    Returns:
        Change per week; 0.0 with fewer than 2 points or no elapsed days
    """
    ordered = sorted(points, key=lambda p: p.date)[-PACE_WINDOW_POINTS:]
    if len(ordered) < 2:
        return 0.0
    elapsed = (ordered[-1].date - ordered[0].date).days
    if elapsed <= 0:
        return 0.0
    return (ordered[-1].value - ordered[0].value) / elapsed * DAYS_PER_WEEK


def forecast_goal(
    points: Sequence[ProgressPoint],
    target_value: float,
    deadline: date | None,
    today: date,
) -> GoalForecast:
    """
    Combine prediction and paces into one forecast.

    The current value is the best value recorded so far (the personal
    record), matching how strength goals measure progress.

    Args:
        points: Progress series
        target_value: Goal value
        deadline: Goal deadline, or None for open-ended goals
        today: Reference date

    Returns:
        GoalForecast
    """
    predicted = predict_completion(points, target_value)
    pace = current_pace_per_week(points)
    current = max((p.value for p in points), default=0.0)

    required: float | None = None
    if deadline is not None:
        required = required_pace_per_week(current, target_value, (deadline - today).days)

    on_track: bool | None
    if points and current >= target_value:
        on_track = True
    elif deadline is None or required is None or len(points) < MIN_TREND_POINTS:
        on_track = None
    else:
        on_track = predicted is not None and predicted <= deadline

    return GoalForecast(
        predicted_completion_date=predicted,
        current_pace_per_week=pace,
        required_pace_per_week=required,
        on_track=on_track,
    )


def goal_progress_percent(current_value: float, target_value: float) -> float:
    """Achieved share of the goal, capped at 100; 0 for a non-positive target."""
    if target_value <= 0:
        return 0.0
    return min(current_value / target_value * 100, 100.0)


def _targets_muscle(
    exercise_id: str,
    muscle_group: str,
    muscle_group_of: MuscleGroupLookup | None,
) -> bool:
    if muscle_group_of is None:
        raise ValueError("muscle_group_of is required for muscle-group goals")
    return muscle_group in muscle_group_of(exercise_id)


def volume_goal_progress(
    workouts: Iterable[WorkoutLog],
    date_range: DateRange,
    target_volume: float,
    exercise_id: str | None = None,
    muscle_group: str | None = None,
    muscle_group_of: MuscleGroupLookup | None = None,
) -> GoalProgress:
    """
    Progress of a volume goal over a goal period.

    Counts the total set volume of the period, or only the volume of one
    exercise (``exercise_id``) or of the exercises that target one muscle
    group (``muscle_group``, resolved with ``muscle_group_of``).

    Raises:
        ValueError: If ``muscle_group`` is given without ``muscle_group_of``
    """
    in_range = filter_workouts(workouts, date_range)

    if exercise_id is not None:
        current = sum(
            exercise_volume(e) for w in in_range for e in w.exercises if e.exercise_id == exercise_id
        )
    elif muscle_group is not None:
        current = sum(
            exercise_volume(e)
            for w in in_range
            for e in w.exercises
            if _targets_muscle(e.exercise_id, muscle_group, muscle_group_of)
        )
    else:
        current = sum(set_volume(w) for w in in_range)

    return GoalProgress(
        current=current,
        target=target_volume,
        progress_percent=goal_progress_percent(current, target_volume),
    )


def frequency_goal_progress(
    workouts: Iterable[WorkoutLog],
    date_range: DateRange,
    target_count: int,
    muscle_group: str | None = None,
    muscle_group_of: MuscleGroupLookup | None = None,
) -> GoalProgress:
    """
    Progress of a workout-count goal over a goal period.

    With ``muscle_group`` only workouts that hit that group are counted.
    """
    in_range = filter_workouts(workouts, date_range)
    if muscle_group is not None:
        in_range = [
            w for w in in_range
            if any(_targets_muscle(e.exercise_id, muscle_group, muscle_group_of) for e in w.exercises)
        ]

    current = float(len(in_range))
    return GoalProgress(
        current=current,
        target=float(target_count),
        progress_percent=goal_progress_percent(current, target_count),
    )


def streak_goal_progress(
    workouts: Iterable[WorkoutLog],
    today: date,
    target: int,
    streak_type: StreakType = "daily",
) -> GoalProgress:
    """
    Progress of a streak goal: ``target`` consecutive days or weeks.

    Returns:
        GoalProgress with the current and the longest streak
    """
    history = list(workouts)
    if streak_type == "weekly":
        current = current_weekly_streak(history, today)
        longest = longest_weekly_streak(history)
    else:
        current = current_streak(history, today)
        longest = longest_streak(history)

    return GoalProgress(
        current=float(current),
        target=float(target),
        progress_percent=goal_progress_percent(current, target),
        longest=float(longest),
    )


def expected_progress(start: date, deadline: date, today: date) -> float:
    """
    Share of the goal's time window already elapsed, 0-100.

    Returns 0 for an empty or inverted window.
    """
    total_days = (deadline - start).days
    if total_days <= 0:
        return 0.0
    elapsed = (today - start).days
    return min(max(elapsed / total_days * 100, 0.0), 100.0)


def goal_status(
    current_progress: float,
    expected: float,
    days_remaining: int,
) -> GoalStatus:
    """
    Classify a goal by comparing actual and time-expected progress.

    Args:
        current_progress: Achieved share of the goal, 0-100
        expected: Time-expected share, 0-100
        days_remaining: Days until the deadline

    Returns:
        "completed", "at-risk", "ahead", "behind" or "on-track"
    """
    if current_progress >= 100:
        return "completed"
    if days_remaining < GOAL_AT_RISK_DAYS and current_progress < GOAL_AT_RISK_PROGRESS_PCT:
        return "at-risk"
    if current_progress > expected + GOAL_STATUS_MARGIN_PCT:
        return "ahead"
    if current_progress < expected - GOAL_STATUS_MARGIN_PCT:
        return "behind"
    return "on-track"

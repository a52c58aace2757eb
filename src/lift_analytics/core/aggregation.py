"""
Time-series aggregation of workout logs.

All functions are pure: they filter the logs to a resolved ``DateRange`` and
bucket them by *local* calendar day or by Monday-based week.
"""

from datetime import date, timedelta
from typing import Callable, Iterable, Sequence

from .config import ALL_TIME_START, CHANGE_FROM_ZERO_PCT, PROGRESSION_THRESHOLD_PCT
from .dates import local_day, monday_on_or_before
from .models import DateRange, ProgressionStatus, WeeklyMuscleVolume, WeeklyVolumePoint, WorkoutLog
from .strength import exercise_volume, set_volume

MuscleGroupLookup = Callable[[str], Sequence[str]]


def filter_workouts(workouts: Iterable[WorkoutLog], date_range: DateRange) -> list[WorkoutLog]:
    """Workouts whose local date falls inside ``date_range``, sorted by date."""
    selected = [w for w in workouts if local_day(w.date) in date_range]
    selected.sort(key=lambda w: local_day(w.date))
    return selected


def build_daily_volume_map(
    workouts: Iterable[WorkoutLog],
    date_range: DateRange,
) -> dict[str, float]:
    """
    Sum set volume per local calendar day.

    Volume is always Σ(weight × reps) over the logged sets.  Keys are ISO
    local dates; days without volume are absent.

    Args:
        workouts: Workout logs in any order
        date_range: Resolved period

    Returns:
        Mapping ISO date -> volume
    """
    daily: dict[str, float] = {}
    for workout in filter_workouts(workouts, date_range):
        volume = set_volume(workout)
        if volume <= 0:
            continue
        key = local_day(workout.date).isoformat()
        daily[key] = daily.get(key, 0.0) + volume
    return daily


def build_daily_workout_counts(
    workouts: Iterable[WorkoutLog],
    date_range: DateRange,
) -> dict[str, int]:
    """Number of logged sessions per local calendar day inside the range."""
    counts: dict[str, int] = {}
    for workout in filter_workouts(workouts, date_range):
        key = local_day(workout.date).isoformat()
        counts[key] = counts.get(key, 0) + 1
    return counts


def _week_axis(in_range: Sequence[WorkoutLog], date_range: DateRange) -> list[date]:
    """
    Mondays covering the range.

    All-time ranges start at the first workout instead of the sentinel date.
    """
    start = date_range.start
    if start <= ALL_TIME_START:
        if not in_range:
            return []
        start = local_day(in_range[0].date)

    first = monday_on_or_before(start)
    last = monday_on_or_before(date_range.end)
    weeks: list[date] = []
    week = first
    while week <= last:
        weeks.append(week)
        week += timedelta(days=7)
    return weeks


def build_weekly_muscle_volume(
    workouts: Iterable[WorkoutLog],
    date_range: DateRange,
    muscle_group_of: MuscleGroupLookup,
) -> list[WeeklyMuscleVolume]:
    """
    Volume per muscle group per Monday-based week.

    Each exercise's full volume is attributed to *every* muscle group it
    targets (primary and secondary) with no fractional split.  Summing a
    week across muscles therefore double-counts compound lifts; dashboards
    rely on this definition, so it is kept as is.

    Weeks without workouts still appear, zero-filled for every muscle seen in
    the range, so charts get a continuous axis.

    Args:
        workouts: Workout logs in any order
        date_range: Resolved period
        muscle_group_of: exercise_id -> muscle groups

    Returns:
        One entry per week, oldest first
    """
    in_range = filter_workouts(workouts, date_range)
    weeks = _week_axis(in_range, date_range)

    per_week: dict[date, dict[str, float]] = {w: {} for w in weeks}
    muscles: list[str] = []

    for workout in in_range:
        week = monday_on_or_before(local_day(workout.date))
        bucket = per_week.setdefault(week, {})
        for entry in workout.exercises:
            volume = exercise_volume(entry)
            for muscle in muscle_group_of(entry.exercise_id):
                if muscle not in muscles:
                    muscles.append(muscle)
                bucket[muscle] = bucket.get(muscle, 0.0) + volume

    return [
        WeeklyMuscleVolume(
            week=week.isoformat(),
            volumes={m: per_week[week].get(m, 0.0) for m in muscles},
        )
        for week in sorted(per_week)
    ]


def progression_status(change: float) -> ProgressionStatus:
    """Classify a week-over-week percent change against the ±2.5 % band."""
    if change >= PROGRESSION_THRESHOLD_PCT:
        return "progressing"
    if change <= -PROGRESSION_THRESHOLD_PCT:
        return "regressing"
    return "maintaining"


def build_weekly_volume_progression(
    workouts: Iterable[WorkoutLog],
    date_range: DateRange,
) -> list[WeeklyVolumePoint]:
    """
    Weekly volume with percent change against the previous week.

    change = (volume - prev) / prev * 100

    The first week has change 0 and status "maintaining".  A previous week
    with zero volume gives change 0 when the current week is also empty and
    +100 otherwise.

    Args:
        workouts: Workout logs in any order
        date_range: Resolved period

    Returns:
        One entry per week, oldest first
    """
    in_range = filter_workouts(workouts, date_range)
    weekly: dict[date, float] = {w: 0.0 for w in _week_axis(in_range, date_range)}

    for workout in in_range:
        week = monday_on_or_before(local_day(workout.date))
        weekly[week] = weekly.get(week, 0.0) + set_volume(workout)

    result: list[WeeklyVolumePoint] = []
    prev: float | None = None
    for week in sorted(weekly):
        volume = weekly[week]
        if prev is None:
            change = 0.0
        elif prev == 0:
            change = 0.0 if volume == 0 else CHANGE_FROM_ZERO_PCT
        else:
            change = (volume - prev) / prev * 100
        status: ProgressionStatus = "maintaining" if prev is None else progression_status(change)
        result.append(WeeklyVolumePoint(week=week.isoformat(), volume=volume, change=change, status=status))
        prev = volume

    return result


def build_muscle_distribution(
    workouts: Iterable[WorkoutLog],
    date_range: DateRange,
    muscle_group_of: MuscleGroupLookup,
) -> dict[str, dict[str, float]]:
    """
    Set count and volume per muscle group over the whole range.

    Same attribution rule as ``build_weekly_muscle_volume``.

    Returns:
        {muscle: {"sets": n, "volume": v}}
    """
    distribution: dict[str, dict[str, float]] = {}
    for workout in filter_workouts(workouts, date_range):
        for entry in workout.exercises:
            volume = exercise_volume(entry)
            for muscle in muscle_group_of(entry.exercise_id):
                row = distribution.setdefault(muscle, {"sets": 0, "volume": 0.0})
                row["sets"] += len(entry.sets)
                row["volume"] += volume
    return distribution

"""
Analytics report assembly.

Runs the whole engine for one (log snapshot, period) pair and bundles the
outputs chart consumers need.

Reports are shared between consumers through ``AnalyticsCache``, so every
mapping in a report is a read-only ``MappingProxyType``.
"""

from dataclasses import dataclass
from datetime import date
from types import MappingProxyType
from typing import Mapping, Sequence

from .aggregation import (
    MuscleGroupLookup,
    build_daily_volume_map,
    build_daily_workout_counts,
    build_muscle_distribution,
    build_weekly_muscle_volume,
    build_weekly_volume_progression,
    filter_workouts,
)
from .grid import build_contribution_grid
from .models import (
    ContributionGrid,
    DateRange,
    Period,
    PersonalRecord,
    WeekComparison,
    WeeklyMuscleVolume,
    WeeklyVolumePoint,
    WorkoutLog,
)
from .periods import comparison_range, resolve_period
from .streaks import current_streak, longest_streak, rest_days
from .strength import personal_records, set_volume


@dataclass(frozen=True)
class AnalyticsReport:
    """
    All period-scoped analytics for one log snapshot.

    Every volume figure is Σ(weight × reps) over the logged sets, so
    ``total_volume`` equals the sum of ``daily_volume``.
    """

    period: Period
    range: DateRange
    total_workouts: int
    total_volume: float
    total_sets: int
    avg_volume_per_workout: float
    volume_change_percent: float | None  # vs the preceding equally long range
    daily_volume: Mapping[str, float]
    daily_counts: Mapping[str, int]
    grid: ContributionGrid
    weekly_muscle_volume: tuple[WeeklyMuscleVolume, ...]
    weekly_progression: tuple[WeeklyVolumePoint, ...]
    muscle_distribution: Mapping[str, Mapping[str, float]]
    current_streak: int
    longest_streak: int
    rest_days: int | None
    personal_records: tuple[PersonalRecord, ...] = ()  # set inside the range
    best_workout: WorkoutLog | None = None
    week_comparison: WeekComparison | None = None

    @property
    def pr_count(self) -> int:
        return len(self.personal_records)


def find_best_workout(workouts: Sequence[WorkoutLog]) -> WorkoutLog | None:
    """Workout with the highest set volume (earliest on ties), or None without volume."""
    best: WorkoutLog | None = None
    for workout in workouts:
        volume = set_volume(workout)
        if volume > 0 and (best is None or volume > set_volume(best)):
            best = workout
    return best


def build_week_comparison(workouts: Sequence[WorkoutLog], today: date) -> WeekComparison:
    """
    Compare the last 7 days (today included) with the 7 days before them.

    Independent of the selected period.
    """
    current_range = resolve_period(Period("rolling", 7), today)
    current = filter_workouts(workouts, current_range)
    previous = filter_workouts(workouts, comparison_range(current_range))

    current_volume = sum(set_volume(w) for w in current)
    previous_volume = sum(set_volume(w) for w in previous)

    return WeekComparison(
        current_workouts=len(current),
        current_volume=current_volume,
        previous_workouts=len(previous),
        previous_volume=previous_volume,
        volume_change_percent=(
            (current_volume - previous_volume) / previous_volume * 100
            if previous_volume > 0 else None
        ),
    )


def build_report(
    workouts: Sequence[WorkoutLog],
    period: Period,
    today: date,
    muscle_group_of: MuscleGroupLookup,
) -> AnalyticsReport:
    """
    Compute every analytics aggregate for a period.

    Args:
        workouts: Immutable log snapshot
        period: Selected period
        today: Reference date
        muscle_group_of: exercise_id -> muscle groups

    Returns:
        AnalyticsReport

    Raises:
        InvalidPeriod: If the period cannot be resolved
    """
    date_range = resolve_period(period, today)
    in_range = filter_workouts(workouts, date_range)

    total_volume = sum(set_volume(w) for w in in_range)
    total_sets = sum(len(e.sets) for w in in_range for e in w.exercises)

    volume_change: float | None = None
    if period.kind != "allTime":
        previous = filter_workouts(workouts, comparison_range(date_range))
        previous_volume = sum(set_volume(w) for w in previous)
        if previous_volume > 0:
            volume_change = (total_volume - previous_volume) / previous_volume * 100

    daily_volume = build_daily_volume_map(in_range, date_range)
    distribution = build_muscle_distribution(in_range, date_range, muscle_group_of)

    # Records need the full history so earlier sessions count as the bar to beat
    records = tuple(r for r in personal_records(workouts) if r.date in date_range)

    return AnalyticsReport(
        period=period,
        range=date_range,
        total_workouts=len(in_range),
        total_volume=total_volume,
        total_sets=total_sets,
        avg_volume_per_workout=total_volume / len(in_range) if in_range else 0.0,
        volume_change_percent=volume_change,
        daily_volume=MappingProxyType(daily_volume),
        daily_counts=MappingProxyType(build_daily_workout_counts(in_range, date_range)),
        grid=build_contribution_grid(daily_volume, date_range, today=today),
        weekly_muscle_volume=tuple(build_weekly_muscle_volume(in_range, date_range, muscle_group_of)),
        weekly_progression=tuple(build_weekly_volume_progression(in_range, date_range)),
        muscle_distribution=MappingProxyType(
            {muscle: MappingProxyType(row) for muscle, row in distribution.items()}
        ),
        current_streak=current_streak(workouts, today),
        longest_streak=longest_streak(workouts),
        rest_days=rest_days(workouts, today),
        personal_records=records,
        best_workout=find_best_workout(in_range),
        week_comparison=build_week_comparison(workouts, today),
    )

"""
Data models for lift-analytics.

Workout logs are the append-only input of the engine and every derived value
is recomputed from them, so all models are frozen dataclasses and hold tuples
rather than lists.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from types import MappingProxyType
from typing import Literal, Mapping

PeriodKind = Literal[
    "rolling",
    "calendarMonth",
    "previousCalendarMonth",
    "calendarYear",
    "allTime",
]
TrendClassification = Literal["up", "down", "flat", "insufficient_data"]
ProgressionStatus = Literal["progressing", "maintaining", "regressing"]


@dataclass(frozen=True)
class SetEntry:
    """A single completed set."""

    weight: float
    reps: int
    rpe: float | None = None

    def __post_init__(self) -> None:
        """Validate set data."""
        if self.weight < 0:
            raise ValueError("weight must be non-negative")
        if self.reps < 1:
            raise ValueError("reps must be at least 1")
        if self.rpe is not None and not 0 <= self.rpe <= 10:
            raise ValueError("rpe must be between 0 and 10")

    @property
    def volume(self) -> float:
        """Tonnage of this set (weight × reps)."""
        return self.weight * self.reps


@dataclass(frozen=True)
class ExerciseEntry:
    """One exercise performed inside a workout, with its sets."""

    exercise_id: str
    exercise_name: str
    sets: tuple[SetEntry, ...] = ()

    def __post_init__(self) -> None:
        if not self.exercise_id:
            raise ValueError("exercise_id must be non-empty")
        # Accept any iterable of sets but always store a tuple
        object.__setattr__(self, "sets", tuple(self.sets))


@dataclass(frozen=True)
class WorkoutLog:
    """
    A logged workout session.

    ``date`` may be a ``date`` or a ``datetime``.  Naive datetimes are local
    wall-clock time; aware datetimes are converted to the local timezone
    before any day bucketing.
    """

    id: str
    date: date | datetime
    exercises: tuple[ExerciseEntry, ...] = ()
    total_volume: float | None = None
    duration: int | None = None  # seconds

    def __post_init__(self) -> None:
        object.__setattr__(self, "exercises", tuple(self.exercises))
        if self.total_volume is not None and self.total_volume < 0:
            raise ValueError("total_volume must be non-negative")
        if self.duration is not None and self.duration < 0:
            raise ValueError("duration must be non-negative")


@dataclass(frozen=True)
class Period:
    """
    A named period selector.

    ``days`` is only meaningful for ``rolling`` periods; validation of the
    window length happens in ``resolve_period``.
    """

    kind: PeriodKind
    days: int | None = None

    @property
    def period_id(self) -> str:
        """Stable identifier used as a cache key."""
        if self.kind == "rolling":
            return f"rolling:{self.days}"
        return self.kind


@dataclass(frozen=True)
class DateRange:
    """Inclusive local-calendar date range."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"DateRange start {self.start} is after end {self.end}")

    @property
    def days(self) -> int:
        """Number of calendar days covered, both ends included."""
        return (self.end - self.start).days + 1

    def __contains__(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class ProgressPoint:
    """One scalar per session (e.g. best-set estimated 1RM)."""

    date: date
    value: float


@dataclass(frozen=True)
class TrendResult:
    """Least-squares fit over a progress series."""

    slope: float
    intercept: float
    classification: TrendClassification
    change_percent: float | None
    r_squared: float = 0.0  # fit confidence, 0-1


@dataclass(frozen=True)
class GoalForecast:
    """Goal completion prediction and paces."""

    predicted_completion_date: date | None
    current_pace_per_week: float
    required_pace_per_week: float | None
    on_track: bool | None


@dataclass(frozen=True)
class WeeklyMuscleVolume:
    """Volume per muscle group for one Monday-based week."""

    week: str  # ISO date of the Monday
    volumes: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Reports are shared through the cache, so nested mappings are read-only
        object.__setattr__(self, "volumes", MappingProxyType(dict(self.volumes)))

    def to_dict(self) -> dict[str, float | str]:
        """Flatten to ``{"week": ..., <muscle>: volume, ...}`` for chart consumers."""
        row: dict[str, float | str] = {"week": self.week}
        row.update(self.volumes)
        return row


@dataclass(frozen=True)
class WeeklyVolumePoint:
    """Week-over-week volume progression entry."""

    week: str
    volume: float
    change: float
    status: ProgressionStatus


@dataclass(frozen=True)
class GridCell:
    """A single day in the contribution grid."""

    date: date
    is_today: bool
    is_in_period: bool
    volume: float = 0.0
    level: int = 0  # 0-3 colour intensity


@dataclass(frozen=True)
class ContributionGrid:
    """
    Calendar heatmap layout.

    ``weeks`` is column-major: each inner tuple is one week of 7 cells,
    Monday first.
    """

    weeks: tuple[tuple[GridCell, ...], ...]
    is_capped_to_year: bool
    range: DateRange

    @property
    def total_weeks(self) -> int:
        return len(self.weeks)

    @property
    def is_empty(self) -> bool:
        """True when no in-period day has any volume."""
        return not any(c.volume > 0 for week in self.weeks for c in week if c.is_in_period)


@dataclass(frozen=True)
class PersonalRecord:
    """A session whose best-set 1RM beat every earlier session of the exercise."""

    exercise_id: str
    date: date
    value: float
    previous: float


@dataclass(frozen=True)
class WeekComparison:
    """Last 7 days against the 7 days before them."""

    current_workouts: int
    current_volume: float
    previous_workouts: int
    previous_volume: float
    volume_change_percent: float | None  # None when the previous week is empty


@dataclass(frozen=True)
class GoalProgress:
    """Current value of a volume, frequency or streak goal and its completion."""

    current: float
    target: float
    progress_percent: float
    longest: float | None = None  # streak goals only

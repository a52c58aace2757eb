"""
Strength estimation.

Epley one-rep-max estimation, best-set selection and the per-session
progress series that feeds the trend fitter.
"""

from typing import Iterable, Sequence

from .config import EPLEY_REP_DIVISOR, MAX_REPS_FOR_1RM, MIN_REPS_FOR_1RM
from .dates import local_day
from .models import ExerciseEntry, PersonalRecord, ProgressPoint, SetEntry, WorkoutLog


def estimate_1rm(weight: float, reps: int) -> float | None:
    """
    Estimate 1RM using the Epley formula.

    1RM = weight * (1 + reps/30)

    A single rep is its own max.  No rounding is applied; callers round for
    display.

    Args:
        weight: Load lifted (kg)
        reps: Reps performed

    Returns:
        Estimated 1RM, or None when weight <= 0, reps < 1 or reps > 15
    """
    if weight is None or reps is None:
        return None
    if weight <= 0 or reps < MIN_REPS_FOR_1RM or reps > MAX_REPS_FOR_1RM:
        return None
    if reps == 1:
        return float(weight)
    return weight * (1 + reps / EPLEY_REP_DIVISOR)


def find_best_set(sets: Sequence[SetEntry]) -> SetEntry | None:
    """
    Select the set with the highest estimated 1RM.

    Ties are broken by the higher weight, then by first occurrence.

    Args:
        sets: Sets of one exercise

    Returns:
        Best set, or None when no set yields a valid estimate
    """
    best: SetEntry | None = None
    best_key: tuple[float, float] | None = None

    for s in sets:
        est = estimate_1rm(s.weight, s.reps)
        if est is None:
            continue
        key = (est, s.weight)
        # Strict comparison keeps the first occurrence on a full tie
        if best_key is None or key > best_key:
            best, best_key = s, key

    return best


def exercise_volume(exercise: ExerciseEntry) -> float:
    """Total tonnage of an exercise: sum of weight × reps over its sets."""
    return sum(s.weight * s.reps for s in exercise.sets)


def set_volume(workout: WorkoutLog) -> float:
    """Tonnage of a workout recomputed from its sets, ignoring any stored total."""
    return sum(exercise_volume(e) for e in workout.exercises)


def workout_volume(workout: WorkoutLog) -> float:
    """
    Total tonnage of a workout as recorded.

    A positive precomputed ``total_volume`` on the log wins over the sum of
    its sets.  Period analytics use ``set_volume`` so that every aggregate of
    one report agrees.
    """
    if workout.total_volume is not None and workout.total_volume > 0:
        return workout.total_volume
    return set_volume(workout)


def exercise_progress_points(
    workouts: Iterable[WorkoutLog],
    exercise_id: str,
) -> list[ProgressPoint]:
    """
    Build the best-set 1RM series for one exercise.

    One point per session that contains the exercise and at least one valid
    set.  When an exercise appears twice in the same session, the better of
    the two best sets is used.

    Args:
        workouts: Workout logs in any order
        exercise_id: Exercise to extract

    Returns:
        Chronologically sorted progress points
    """
    points: list[ProgressPoint] = []

    for workout in workouts:
        best_value: float | None = None
        for entry in workout.exercises:
            if entry.exercise_id != exercise_id:
                continue
            best = find_best_set(entry.sets)
            if best is None:
                continue
            value = estimate_1rm(best.weight, best.reps)
            if value is not None and (best_value is None or value > best_value):
                best_value = value

        if best_value is not None:
            points.append(ProgressPoint(date=local_day(workout.date), value=best_value))

    # Stable sort keeps log order for same-day sessions
    points.sort(key=lambda p: p.date)
    return points


def find_best_pr(points: Sequence[ProgressPoint]) -> ProgressPoint | None:
    """Return the highest-valued point (earliest on ties), or None if empty."""
    best: ProgressPoint | None = None
    for p in points:
        if best is None or p.value > best.value:
            best = p
    return best


def personal_records(workouts: Iterable[WorkoutLog]) -> list[PersonalRecord]:
    """
    Sessions that set a new best-set 1RM for their exercise.

    The first session of an exercise has nothing to beat and is not a
    record; a later session must strictly exceed every earlier one.

    Args:
        workouts: Workout logs in any order

    Returns:
        Records sorted by date, then exercise id
    """
    history = list(workouts)
    exercise_ids = sorted({e.exercise_id for w in history for e in w.exercises})

    records: list[PersonalRecord] = []
    for exercise_id in exercise_ids:
        best: float | None = None
        for point in exercise_progress_points(history, exercise_id):
            if best is not None and point.value > best:
                records.append(PersonalRecord(exercise_id, point.date, point.value, best))
            if best is None or point.value > best:
                best = point.value

    records.sort(key=lambda r: (r.date, r.exercise_id))
    return records

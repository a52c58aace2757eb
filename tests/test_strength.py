"""
Unit tests for 1RM estimation, best-set selection and progress series.

Values are hand-computed from the Epley formula 1RM = w × (1 + reps/30).
"""

from datetime import date, datetime

import pytest

from lift_analytics.core.models import ExerciseEntry, PersonalRecord, ProgressPoint, SetEntry, WorkoutLog
from lift_analytics.core.strength import (
    estimate_1rm,
    exercise_progress_points,
    exercise_volume,
    find_best_pr,
    find_best_set,
    personal_records,
    set_volume,
    workout_volume,
)

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _set(weight: float, reps: int) -> SetEntry:
    return SetEntry(weight=weight, reps=reps)


def _workout(
    workout_id: str,
    day: date | datetime,
    exercise_id: str,
    sets: list[tuple[float, int]],
    total_volume: float | None = None,
) -> WorkoutLog:
    entry = ExerciseEntry(
        exercise_id=exercise_id,
        exercise_name=exercise_id,
        sets=tuple(_set(w, r) for w, r in sets),
    )
    return WorkoutLog(id=workout_id, date=day, exercises=(entry,), total_volume=total_volume)


# ---------------------------------------------------------------------------
# estimate_1rm
# ---------------------------------------------------------------------------

class TestEstimate1RM:
    def test_epley_ten_reps(self):
        """100 kg × 10 → 100 × (1 + 10/30) = 133.33…"""
        assert estimate_1rm(100, 10) == pytest.approx(133.3333, abs=1e-3)

    def test_too_many_reps_is_none(self):
        assert estimate_1rm(50, 20) is None
        assert estimate_1rm(50, 16) is None

    def test_fifteen_reps_still_valid(self):
        assert estimate_1rm(60, 15) == pytest.approx(90.0)

    def test_single_rep_is_weight(self):
        assert estimate_1rm(140, 1) == pytest.approx(140.0)

    def test_invalid_inputs_are_none(self):
        assert estimate_1rm(0, 5) is None
        assert estimate_1rm(-10, 5) is None
        assert estimate_1rm(100, 0) is None

    @pytest.mark.parametrize("reps", range(1, 16))
    @pytest.mark.parametrize("weight", [2.5, 20.0, 100.0, 312.5])
    def test_estimate_never_below_weight(self, weight, reps):
        assert estimate_1rm(weight, reps) >= weight


# ---------------------------------------------------------------------------
# find_best_set
# ---------------------------------------------------------------------------

class TestFindBestSet:
    def test_highest_estimate_wins(self):
        sets = [_set(100, 5), _set(90, 10), _set(110, 2)]
        # 116.67, 120.0, 117.33
        assert find_best_set(sets) == _set(90, 10)

    def test_tie_broken_by_weight(self):
        # 80 × (1 + 15/30) = 120 and a 120 kg single
        best = find_best_set([_set(80, 15), _set(120, 1)])
        assert best == _set(120, 1)

    def test_invalid_sets_skipped(self):
        assert find_best_set([_set(0, 5), _set(40, 20)]) is None
        assert find_best_set([_set(40, 20), _set(60, 5)]) == _set(60, 5)

    def test_empty(self):
        assert find_best_set([]) is None


# ---------------------------------------------------------------------------
# Volume
# ---------------------------------------------------------------------------

class TestVolume:
    def test_exercise_volume(self):
        w = _workout("a", date(2024, 1, 1), "squat", [(100, 5), (100, 5), (80, 8)])
        assert exercise_volume(w.exercises[0]) == pytest.approx(1640.0)

    def test_workout_volume_prefers_positive_total(self):
        w = _workout("a", date(2024, 1, 1), "squat", [(100, 5)], total_volume=900.0)
        assert workout_volume(w) == pytest.approx(900.0)

    def test_workout_volume_zero_total_falls_back_to_sets(self):
        w = _workout("a", date(2024, 1, 1), "squat", [(100, 5)], total_volume=0.0)
        assert workout_volume(w) == pytest.approx(500.0)

    def test_set_volume_ignores_stored_total(self):
        w = _workout("a", date(2024, 1, 1), "squat", [(100, 5), (80, 5)], total_volume=9999.0)
        assert set_volume(w) == pytest.approx(900.0)


# ---------------------------------------------------------------------------
# Progress series
# ---------------------------------------------------------------------------

class TestProgressPoints:
    def test_one_point_per_session_sorted(self):
        workouts = [
            _workout("b", date(2024, 1, 8), "bench_press", [(80, 5)]),
            _workout("a", date(2024, 1, 1), "bench_press", [(75, 5)]),
            _workout("c", date(2024, 1, 3), "squat", [(120, 5)]),
        ]
        points = exercise_progress_points(workouts, "bench_press")
        assert [p.date for p in points] == [date(2024, 1, 1), date(2024, 1, 8)]
        assert points[0].value == pytest.approx(87.5)
        assert points[1].value == pytest.approx(93.3333, abs=1e-3)

    def test_session_without_valid_set_skipped(self):
        workouts = [_workout("a", date(2024, 1, 1), "bench_press", [(20, 25)])]
        assert exercise_progress_points(workouts, "bench_press") == []

    def test_duplicate_exercise_uses_better_best_set(self):
        first = ExerciseEntry("bench_press", "Bench", (_set(80, 5),))
        second = ExerciseEntry("bench_press", "Bench", (_set(90, 3),))
        w = WorkoutLog(id="a", date=date(2024, 1, 1), exercises=(first, second))
        points = exercise_progress_points([w], "bench_press")
        assert len(points) == 1
        assert points[0].value == pytest.approx(99.0)

    def test_datetime_reduced_to_day(self):
        w = _workout("a", datetime(2024, 1, 1, 18, 30), "squat", [(100, 1)])
        assert exercise_progress_points([w], "squat")[0].date == date(2024, 1, 1)


class TestFindBestPR:
    def test_highest_earliest(self):
        points = [
            ProgressPoint(date(2024, 1, 1), 100.0),
            ProgressPoint(date(2024, 1, 5), 110.0),
            ProgressPoint(date(2024, 1, 9), 110.0),
        ]
        assert find_best_pr(points) == ProgressPoint(date(2024, 1, 5), 110.0)

    def test_empty(self):
        assert find_best_pr([]) is None


class TestPersonalRecords:
    def test_only_sessions_beating_every_earlier_one(self):
        workouts = [
            _workout("a", date(2024, 1, 1), "bench_press", [(100, 1)]),
            _workout("b", date(2024, 1, 8), "bench_press", [(95, 1)]),
            _workout("c", date(2024, 1, 15), "bench_press", [(105, 1)]),
            _workout("d", date(2024, 1, 22), "bench_press", [(105, 1)]),
            _workout("e", date(2024, 1, 3), "squat", [(140, 1)]),
        ]
        assert personal_records(workouts) == [
            PersonalRecord("bench_press", date(2024, 1, 15), 105.0, 100.0),
        ]

    def test_sorted_by_date_across_exercises(self):
        workouts = [
            _workout("a", date(2024, 1, 1), "squat", [(100, 1)]),
            _workout("b", date(2024, 1, 2), "bench_press", [(80, 1)]),
            _workout("c", date(2024, 1, 9), "bench_press", [(85, 1)]),
            _workout("d", date(2024, 1, 5), "squat", [(110, 1)]),
        ]
        assert [(r.exercise_id, r.date) for r in personal_records(workouts)] == [
            ("squat", date(2024, 1, 5)),
            ("bench_press", date(2024, 1, 9)),
        ]

    def test_empty(self):
        assert personal_records([]) == []

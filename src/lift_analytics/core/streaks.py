"""Workout streaks (daily and weekly) and rest days, counted on local calendar days."""

from datetime import date, timedelta
from typing import Iterable

from .dates import days_between, local_day, monday_on_or_before
from .models import WorkoutLog


def _workout_days(workouts: Iterable[WorkoutLog]) -> set[date]:
    return {local_day(w.date) for w in workouts}


def current_streak(workouts: Iterable[WorkoutLog], today: date) -> int:
    """
    Consecutive days with a workout, ending today.

    Several workouts on one day count once.  No workout today means 0.
    """
    days = _workout_days(workouts)
    streak = 0
    day = today
    while day in days:
        streak += 1
        day -= timedelta(days=1)
    return streak


def longest_streak(workouts: Iterable[WorkoutLog]) -> int:
    """Longest run of consecutive workout days in the whole history."""
    days = sorted(_workout_days(workouts))
    longest = 0
    run = 0
    prev: date | None = None
    for day in days:
        run = run + 1 if prev is not None and (day - prev).days == 1 else 1
        longest = max(longest, run)
        prev = day
    return longest


def rest_days(workouts: Iterable[WorkoutLog], today: date) -> int | None:
    """
    Days since the most recent workout on or before today.

    Returns:
        0 when trained today, None when there is no workout yet
    """
    past = [d for d in _workout_days(workouts) if d <= today]
    if not past:
        return None
    return days_between(max(past), today)


def _workout_weeks(workouts: Iterable[WorkoutLog]) -> set[date]:
    return {monday_on_or_before(day) for day in _workout_days(workouts)}


def current_weekly_streak(workouts: Iterable[WorkoutLog], today: date) -> int:
    """
    Consecutive Monday-based weeks with a workout, ending with this week.

    The week in progress does not break the streak: without a workout so far
    this week, counting starts from last week.
    """
    weeks = _workout_weeks(workouts)
    week = monday_on_or_before(today)
    if week not in weeks:
        week -= timedelta(days=7)
    streak = 0
    while week in weeks:
        streak += 1
        week -= timedelta(days=7)
    return streak


def longest_weekly_streak(workouts: Iterable[WorkoutLog]) -> int:
    """Longest run of consecutive Monday-based weeks with a workout."""
    longest = 0
    run = 0
    prev: date | None = None
    for week in sorted(_workout_weeks(workouts)):
        run = run + 1 if prev is not None and (week - prev).days == 7 else 1
        longest = max(longest, run)
        prev = week
    return longest

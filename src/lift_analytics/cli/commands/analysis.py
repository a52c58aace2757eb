"""Analysis commands: status, volume, heatmap, muscles, progression, trend, forecast, goal, streak."""

import json
import warnings
from dataclasses import asdict
from datetime import date
from pathlib import Path
from typing import Annotated, Optional

import typer

from ...core.dashboard import AnalyticsReport, build_report
from ...core.dates import to_local_date_string
from ...core.forecast import (
    expected_progress,
    forecast_goal,
    frequency_goal_progress,
    goal_progress_percent,
    goal_status,
    streak_goal_progress,
    volume_goal_progress,
)
from ...core.memo import AnalyticsCache, fingerprint
from ...core.models import Period, ProgressPoint, WorkoutLog
from ...core.periods import InvalidPeriod, resolve_period
from ...core.strength import exercise_progress_points, find_best_pr, set_volume
from ...core.trend import fit_trend
from .. import views
from ..app import (
    JsonOption,
    LogPathOption,
    PeriodOption,
    TodayOption,
    app,
    get_muscle_group_lookup,
    load_snapshot,
    parse_day,
    select_period,
)

ExerciseOption = Annotated[
    str,
    typer.Option("--exercise", "-e", help="Exercise ID, e.g. bench_press"),
]

_report_cache: AnalyticsCache[AnalyticsReport] = AnalyticsCache()


def _select_period(period_selector: str | None) -> Period:
    """Resolve the period selector, showing fallback warnings on the console."""
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        period = select_period(period_selector)
    for w in caught:
        views.print_warning(str(w.message))
    return period


def _load_report(
    log_path: Path | None,
    period_selector: str | None,
    today_str: str | None,
) -> AnalyticsReport:
    """
    Load the snapshot and build (or reuse) the report for the selected period.

    Unknown period selectors are reported as warnings and replaced by the
    default period.
    """
    workouts = load_snapshot(log_path)
    today = parse_day(today_str)
    period = _select_period(period_selector)
    muscle_group_of = get_muscle_group_lookup()

    try:
        return _report_cache.get_or_compute(
            fingerprint(workouts),
            period.period_id,
            today,
            lambda: build_report(workouts, period, today, muscle_group_of),
        )
    except InvalidPeriod as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def _progress_points(workouts: tuple[WorkoutLog, ...], exercise_id: str) -> list[ProgressPoint]:
    points = exercise_progress_points(workouts, exercise_id)
    if not points:
        views.print_error(f"No sets with 1-15 reps logged for {exercise_id!r}")
        raise typer.Exit(1)
    return points


@app.command()
def status(
    log_path: LogPathOption = None,
    period: PeriodOption = None,
    today: TodayOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the dashboard for a period: totals, heatmap, weekly volume, muscles.
    """
    report = _load_report(log_path, period, today)

    if json_out:
        print(json.dumps({
            "period": report.period.period_id,
            "start": report.range.start.isoformat(),
            "end": report.range.end.isoformat(),
            "total_workouts": report.total_workouts,
            "total_sets": report.total_sets,
            "total_volume": round(report.total_volume, 2),
            "avg_volume_per_workout": round(report.avg_volume_per_workout, 2),
            "volume_change_percent": (
                round(report.volume_change_percent, 2)
                if report.volume_change_percent is not None else None
            ),
            "current_streak": report.current_streak,
            "longest_streak": report.longest_streak,
            "rest_days": report.rest_days,
            "pr_count": report.pr_count,
            "personal_records": [
                {"exercise_id": r.exercise_id, "date": r.date.isoformat(), "value": round(r.value, 2)}
                for r in report.personal_records
            ],
            "best_workout": (
                {
                    "id": report.best_workout.id,
                    "date": to_local_date_string(report.best_workout.date),
                    "volume": round(set_volume(report.best_workout), 2),
                }
                if report.best_workout is not None else None
            ),
            "week_comparison": asdict(report.week_comparison) if report.week_comparison is not None else None,
        }, indent=2))
        return

    views.print_report(report)


@app.command()
def volume(
    log_path: LogPathOption = None,
    period: PeriodOption = None,
    today: TodayOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show total volume per day for the selected period.
    """
    report = _load_report(log_path, period, today)

    if json_out:
        print(json.dumps({
            "daily_volume": dict(report.daily_volume),
            "daily_workouts": dict(report.daily_counts),
        }, indent=2))
        return

    if not report.daily_volume:
        views.print_info("No volume logged in this period.")
        return

    views.print_daily_volume_chart(report.daily_volume)


@app.command()
def heatmap(
    log_path: LogPathOption = None,
    period: PeriodOption = None,
    today: TodayOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the contribution heatmap (weeks as columns, Monday first).
    """
    report = _load_report(log_path, period, today)
    grid = report.grid

    if json_out:
        print(json.dumps({
            "range": {"start": grid.range.start.isoformat(), "end": grid.range.end.isoformat()},
            "is_capped_to_year": grid.is_capped_to_year,
            "weeks": [
                [
                    {
                        "date": c.date.isoformat(),
                        "volume": c.volume,
                        "level": c.level,
                        "is_in_period": c.is_in_period,
                        "is_today": c.is_today,
                    }
                    for c in week
                ]
                for week in grid.weeks
            ],
        }, indent=2))
        return

    views.print_heatmap(grid)


@app.command()
def muscles(
    log_path: LogPathOption = None,
    period: PeriodOption = None,
    today: TodayOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show weekly volume per muscle group and the period distribution.
    """
    report = _load_report(log_path, period, today)

    if json_out:
        print(json.dumps({
            "weekly": [w.to_dict() for w in report.weekly_muscle_volume],
            "distribution": {m: dict(row) for m, row in report.muscle_distribution.items()},
        }, indent=2))
        return

    if not report.weekly_muscle_volume:
        views.print_info("No workouts in this period.")
        return

    views.console.print(views.format_muscle_volume_table(list(report.weekly_muscle_volume)))
    views.console.print(views.format_distribution_table(report.muscle_distribution))


@app.command()
def progression(
    log_path: LogPathOption = None,
    period: PeriodOption = None,
    today: TodayOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show weekly volume with week-over-week change and status.
    """
    report = _load_report(log_path, period, today)

    if json_out:
        print(json.dumps([asdict(p) for p in report.weekly_progression], indent=2))
        return

    if not report.weekly_progression:
        views.print_info("No workouts in this period.")
        return

    views.console.print(views.format_weekly_progression_table(list(report.weekly_progression)))
    views.print_volume_chart(list(report.weekly_progression))


@app.command()
def trend(
    exercise_id: ExerciseOption,
    log_path: LogPathOption = None,
    plot: Annotated[
        bool,
        typer.Option("--plot/--no-plot", help="Draw the 1RM series and fitted line"),
    ] = True,
    json_out: JsonOption = False,
) -> None:
    """
    Fit a linear trend to the estimated 1RM series of an exercise.
    """
    workouts = load_snapshot(log_path)
    points = _progress_points(workouts, exercise_id)
    result = fit_trend(points)

    if json_out:
        print(json.dumps({
            "exercise_id": exercise_id,
            "points": [{"date": p.date.isoformat(), "value": round(p.value, 2)} for p in points],
            "slope": round(result.slope, 4),
            "intercept": round(result.intercept, 4),
            "r_squared": round(result.r_squared, 4),
            "classification": result.classification,
            "change_percent": (
                round(result.change_percent, 2) if result.change_percent is not None else None
            ),
        }, indent=2))
        return

    views.console.print()
    views.console.print(views.format_trend_display(exercise_id, points, result))
    if plot:
        views.console.print()
        views.print_progress_plot(points, trend=result, title=f"Estimated 1RM: {exercise_id}")
    views.console.print()


@app.command()
def forecast(
    exercise_id: ExerciseOption,
    target: Annotated[
        float,
        typer.Option("--target", "-t", help="Target 1RM in kg"),
    ],
    deadline: Annotated[
        Optional[str],
        typer.Option("--deadline", help="Goal deadline YYYY-MM-DD"),
    ] = None,
    start: Annotated[
        Optional[str],
        typer.Option("--start", help="Goal start date YYYY-MM-DD (default: first session)"),
    ] = None,
    log_path: LogPathOption = None,
    today: TodayOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Forecast when an exercise reaches a target 1RM.
    """
    if target <= 0:
        views.print_error("Target must be positive")
        raise typer.Exit(1)

    workouts = load_snapshot(log_path)
    points = exercise_progress_points(workouts, exercise_id)
    ref_day = parse_day(today)
    deadline_day = parse_day(deadline, "--deadline") if deadline is not None else None

    result = forecast_goal(points, target, deadline_day, ref_day)
    best = find_best_pr(points)
    current = best.value if best is not None else None

    status_label: str | None = None
    if deadline_day is not None:
        start_day: date = (
            parse_day(start, "--start") if start is not None
            else (points[0].date if points else ref_day)
        )
        status_label = goal_status(
            goal_progress_percent(current or 0.0, target),
            expected_progress(start_day, deadline_day, ref_day),
            (deadline_day - ref_day).days,
        )

    if json_out:
        print(json.dumps({
            "exercise_id": exercise_id,
            "target": target,
            "current": current,
            "predicted_completion_date": (
                result.predicted_completion_date.isoformat()
                if result.predicted_completion_date is not None else None
            ),
            "current_pace_per_week": round(result.current_pace_per_week, 4),
            "required_pace_per_week": (
                round(result.required_pace_per_week, 4)
                if result.required_pace_per_week is not None else None
            ),
            "on_track": result.on_track,
            "status": status_label,
        }, indent=2))
        return

    views.console.print()
    views.console.print(views.format_forecast_display(target, current, result, status_label))
    if points:
        views.console.print()
        views.print_progress_plot(
            points,
            trend=fit_trend(points),
            target=target,
            title=f"Estimated 1RM: {exercise_id}",
        )
    views.console.print()


GOAL_KINDS = ("volume", "frequency", "streak")


@app.command()
def goal(
    kind: Annotated[
        str,
        typer.Argument(help="Goal type: volume, frequency or streak"),
    ],
    target: Annotated[
        float,
        typer.Option("--target", "-t", help="Target volume (kg), workout count or streak length"),
    ],
    exercise_id: Annotated[
        Optional[str],
        typer.Option("--exercise", "-e", help="Volume goals: count one exercise only"),
    ] = None,
    muscle: Annotated[
        Optional[str],
        typer.Option("--muscle", "-m", help="Volume and frequency goals: count one muscle group only"),
    ] = None,
    weekly: Annotated[
        bool,
        typer.Option("--weekly", help="Streak goals: count consecutive weeks instead of days"),
    ] = False,
    log_path: LogPathOption = None,
    period: PeriodOption = None,
    today: TodayOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show progress towards a volume, frequency or streak goal.

    Volume and frequency goals are measured over the selected period;
    streak goals over the whole log.
    """
    if kind not in GOAL_KINDS:
        views.print_error(f"Unknown goal type {kind!r}. Use one of: {', '.join(GOAL_KINDS)}")
        raise typer.Exit(1)
    if target <= 0:
        views.print_error("Target must be positive")
        raise typer.Exit(1)

    workouts = load_snapshot(log_path)
    ref_day = parse_day(today)

    if kind == "streak":
        unit = "week(s)" if weekly else "day(s)"
        progress = streak_goal_progress(workouts, ref_day, int(target), "weekly" if weekly else "daily")
    else:
        try:
            date_range = resolve_period(_select_period(period), ref_day)
        except InvalidPeriod as e:
            views.print_error(str(e))
            raise typer.Exit(1)
        lookup = get_muscle_group_lookup() if muscle is not None else None
        if kind == "volume":
            unit = "kg"
            progress = volume_goal_progress(
                workouts, date_range, target,
                exercise_id=exercise_id, muscle_group=muscle, muscle_group_of=lookup,
            )
        else:
            unit = "workout(s)"
            progress = frequency_goal_progress(
                workouts, date_range, int(target), muscle_group=muscle, muscle_group_of=lookup,
            )

    if json_out:
        print(json.dumps({"kind": kind, **asdict(progress)}, indent=2))
        return

    views.console.print(views.format_goal_progress(kind, progress, unit))


@app.command()
def streak(
    log_path: LogPathOption = None,
    today: TodayOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show current and longest workout-day streaks.
    """
    report = _load_report(log_path, "all_time", today)

    if json_out:
        print(json.dumps({
            "current_streak": report.current_streak,
            "longest_streak": report.longest_streak,
            "rest_days": report.rest_days,
        }, indent=2))
        return

    views.console.print(f"Current streak: [bold]{report.current_streak}[/bold] day(s)")
    views.console.print(f"Longest streak: [bold]{report.longest_streak}[/bold] day(s)")
    if report.rest_days is not None:
        views.console.print(f"Days since last workout: {report.rest_days}")

"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of workout logs and analytics.
"""

from typing import Mapping

from rich.console import Console
from rich.table import Table

from ..core.ascii_plot import create_heatmap, create_progress_plot, create_simple_bar_chart
from ..core.dashboard import AnalyticsReport
from ..core.dates import to_local_date_string
from ..core.models import (
    ContributionGrid,
    GoalForecast,
    GoalProgress,
    ProgressPoint,
    TrendResult,
    WeeklyMuscleVolume,
    WeeklyVolumePoint,
    WorkoutLog,
)
from ..core.strength import set_volume, workout_volume

console = Console()

STATUS_STYLES = {
    "progressing": "green",
    "maintaining": "yellow",
    "regressing": "red",
    "up": "green",
    "flat": "yellow",
    "down": "red",
    "insufficient_data": "dim",
}


def _styled(value: str) -> str:
    style = STATUS_STYLES.get(value)
    return f"[{style}]{value}[/{style}]" if style else value


def format_history_table(workouts: list[WorkoutLog]) -> Table:
    """
    Create a Rich table displaying workout history.

    Args:
        workouts: Workouts to display

    Returns:
        Rich Table object
    """
    table = Table(title="Workout History")

    table.add_column("ID", style="dim")
    table.add_column("Date", style="cyan")
    table.add_column("Exercises", style="magenta")
    table.add_column("Sets", justify="right")
    table.add_column("Volume(kg)", justify="right", style="bold")
    table.add_column("Duration", justify="right")

    for workout in workouts:
        table.add_row(
            workout.id,
            to_local_date_string(workout.date),
            ", ".join(e.exercise_name for e in workout.exercises) or "-",
            str(sum(len(e.sets) for e in workout.exercises)),
            f"{workout_volume(workout):.0f}",
            f"{workout.duration // 60} min" if workout.duration else "-",
        )

    return table


def print_history(workouts: list[WorkoutLog]) -> None:
    """Print workout history to console."""
    if not workouts:
        console.print("[yellow]No workouts recorded yet.[/yellow]")
        return

    console.print(format_history_table(workouts))


def format_report_summary(report: AnalyticsReport) -> str:
    """
    Format the period summary as a text block.

    Args:
        report: AnalyticsReport to display

    Returns:
        Formatted string
    """
    lines = [f"Summary ({report.period.period_id}: {report.range.start} → {report.range.end})"]
    lines.append(f"- Workouts: {report.total_workouts}")
    lines.append(f"- Sets: {report.total_sets}")
    lines.append(f"- Volume: {report.total_volume:.0f} kg")
    lines.append(f"- Avg volume/workout: {report.avg_volume_per_workout:.0f} kg")

    if report.volume_change_percent is not None:
        lines.append(f"- vs previous period: {report.volume_change_percent:+.1f}%")

    lines.append(f"- Personal records: {report.pr_count}")
    if report.best_workout is not None:
        best = report.best_workout
        lines.append(
            f"- Best workout: {best.id} on {to_local_date_string(best.date)} "
            f"({set_volume(best):.0f} kg)"
        )

    lines.append(f"- Current streak: {report.current_streak} day(s)")
    lines.append(f"- Longest streak: {report.longest_streak} day(s)")
    if report.rest_days is not None:
        lines.append(f"- Days since last workout: {report.rest_days}")

    week = report.week_comparison
    if week is not None:
        change = f" ({week.volume_change_percent:+.1f}%)" if week.volume_change_percent is not None else ""
        lines.append(
            f"- Last 7 days: {week.current_workouts} workout(s), {week.current_volume:.0f} kg"
            f" vs {week.previous_workouts}, {week.previous_volume:.0f} kg{change}"
        )

    return "\n".join(lines)


def format_weekly_progression_table(points: list[WeeklyVolumePoint]) -> Table:
    """Rich table of weekly volume with week-over-week change."""
    table = Table(title="Weekly Volume")

    table.add_column("Week of", style="cyan")
    table.add_column("Volume(kg)", justify="right", style="bold")
    table.add_column("Change", justify="right")
    table.add_column("Status")

    for p in points:
        table.add_row(p.week, f"{p.volume:.0f}", f"{p.change:+.1f}%", _styled(p.status))

    return table


def format_muscle_volume_table(weeks: list[WeeklyMuscleVolume]) -> Table:
    """Rich table with one row per week and one column per muscle group."""
    muscles = sorted({m for w in weeks for m in w.volumes})

    table = Table(title="Weekly Volume by Muscle Group")
    table.add_column("Week of", style="cyan")
    for muscle in muscles:
        table.add_column(muscle, justify="right")

    for w in weeks:
        table.add_row(w.week, *(f"{w.volumes.get(m, 0.0):.0f}" for m in muscles))

    return table


def format_distribution_table(distribution: Mapping[str, Mapping[str, float]]) -> Table:
    """Rich table of sets and volume per muscle group, largest volume first."""
    table = Table(title="Muscle Group Distribution")

    table.add_column("Muscle", style="magenta")
    table.add_column("Sets", justify="right")
    table.add_column("Volume(kg)", justify="right", style="bold")

    rows = sorted(distribution.items(), key=lambda kv: kv[1]["volume"], reverse=True)
    for muscle, row in rows:
        table.add_row(muscle, f"{row['sets']:.0f}", f"{row['volume']:.0f}")

    return table


def print_report(report: AnalyticsReport) -> None:
    """Print the full period dashboard."""
    console.print()
    console.print(format_report_summary(report))
    console.print()
    print_heatmap(report.grid)
    console.print()
    if report.weekly_progression:
        console.print(format_weekly_progression_table(list(report.weekly_progression)))
    if report.muscle_distribution:
        console.print(format_distribution_table(report.muscle_distribution))
    console.print()


def print_heatmap(grid: ContributionGrid) -> None:
    """Print the contribution grid."""
    if grid.is_empty:
        console.print("[yellow]No days to display.[/yellow]")
        return
    console.print(create_heatmap(grid))


def print_volume_chart(points: list[WeeklyVolumePoint]) -> None:
    """Print weekly volume as a horizontal bar chart."""
    chart = create_simple_bar_chart(
        [p.week for p in points],
        [p.volume for p in points],
        title="Weekly Volume (kg)",
    )
    console.print(chart)


def print_daily_volume_chart(daily_volume: Mapping[str, float]) -> None:
    """Print per-day volume as a horizontal bar chart, oldest day first."""
    days = sorted(daily_volume)
    chart = create_simple_bar_chart(
        days,
        [daily_volume[d] for d in days],
        title="Daily Volume (kg)",
    )
    console.print(chart)


def format_trend_display(exercise_id: str, points: list[ProgressPoint], trend: TrendResult) -> str:
    """Format a trend fit as a text block."""
    lines = [f"Strength trend: {exercise_id}"]
    lines.append(f"- Sessions: {len(points)}")
    if points:
        lines.append(f"- Latest 1RM: {points[-1].value:.1f} kg ({points[-1].date})")
        best = max(points, key=lambda p: p.value)
        lines.append(f"- Best 1RM: {best.value:.1f} kg ({best.date})")
    lines.append(f"- Trend: {_styled(trend.classification)}")
    if trend.classification != "insufficient_data":
        lines.append(f"- Slope: {trend.slope:+.2f} kg/session")
        lines.append(f"- R²: {trend.r_squared:.2f}")
    if trend.change_percent is not None:
        lines.append(f"- Change over fit: {trend.change_percent:+.1f}%")
    return "\n".join(lines)


def print_progress_plot(
    points: list[ProgressPoint],
    trend: TrendResult | None = None,
    target: float | None = None,
    title: str = "Estimated 1RM",
) -> None:
    """Print ASCII plot of a 1RM progress series."""
    console.print(create_progress_plot(points, trend=trend, target=target, title=title))


def format_forecast_display(
    target: float,
    current: float | None,
    forecast: GoalForecast,
    status: str | None = None,
) -> str:
    """
    Format a goal forecast as a text block.

    Args:
        target: Goal value
        current: Best value so far, or None without data
        forecast: GoalForecast to display
        status: Goal status label when the goal has a deadline

    Returns:
        Formatted string
    """
    lines = [f"Goal: {target:.1f} kg"]
    lines.append(f"- Current best: {current:.1f} kg" if current is not None else "- Current best: -")

    if forecast.predicted_completion_date is not None:
        lines.append(f"- Predicted completion: {forecast.predicted_completion_date}")
    else:
        lines.append("- Predicted completion: not enough trend data")

    lines.append(f"- Current pace: {forecast.current_pace_per_week:+.2f} kg/week")
    if forecast.required_pace_per_week is not None:
        lines.append(f"- Required pace: {forecast.required_pace_per_week:+.2f} kg/week")

    if forecast.on_track is True:
        lines.append("- On track: [green]yes[/green]")
    elif forecast.on_track is False:
        lines.append("- On track: [red]no[/red]")

    if status is not None:
        lines.append(f"- Status: {status}")

    return "\n".join(lines)


def format_goal_progress(kind: str, progress: GoalProgress, unit: str) -> str:
    """Format volume, frequency or streak goal progress as a text block."""
    lines = [f"{kind.capitalize()} goal: {progress.target:.0f} {unit}"]
    lines.append(f"- Current: {progress.current:.0f} {unit}")
    lines.append(f"- Progress: {progress.progress_percent:.1f}%")
    if progress.longest is not None:
        lines.append(f"- Longest: {progress.longest:.0f} {unit}")
    if progress.progress_percent >= 100:
        lines.append("- [green]Completed[/green]")
    return "\n".join(lines)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")

"""Shared Typer app object, shared option types, and store utilities."""

from datetime import date, datetime
from pathlib import Path
from typing import Annotated, Optional

import typer

from ..config_loader import default_period_id, load_config, muscle_group_lookup
from ..core.aggregation import MuscleGroupLookup
from ..core.models import Period, WorkoutLog
from ..core.periods import parse_period_id
from ..io.log_store import WorkoutLogStore, get_default_log_path
from ..io.serializers import ValidationError
from . import views

# Shared option types used across commands
LogPathOption = Annotated[
    Optional[Path],
    typer.Option("--log-path", "-p", help="Path to workout log JSONL file"),
]

PeriodOption = Annotated[
    Optional[str],
    typer.Option(
        "--period",
        help="last_7_days, last_30_days, last_90_days, this_month, last_month, "
        "this_year, all_time or rolling:<days>",
    ),
]

JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

TodayOption = Annotated[
    Optional[str],
    typer.Option("--today", help="Reference date YYYY-MM-DD (default: today)"),
]

app = typer.Typer(
    name="lift-analytics",
    help="Workout analytics: volume, heatmaps, strength trends and goal forecasts.",
    no_args_is_help=True,
)


def get_store(log_path: Path | None) -> WorkoutLogStore:
    """Get workout log store from path or default location."""
    if log_path is None:
        log_path = get_default_log_path()
    return WorkoutLogStore(log_path)


def load_snapshot(log_path: Path | None) -> tuple[WorkoutLog, ...]:
    """
    Load the log snapshot or exit with an error message.

    Raises:
        typer.Exit: If the log is missing or malformed
    """
    store = get_store(log_path)

    if not store.exists():
        views.print_error(f"Workout log not found: {store.log_path}")
        views.print_info("Run 'log-workout' first to create the log.")
        raise typer.Exit(1)

    try:
        return store.load_workouts()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def parse_day(value: str | None, option: str = "--today") -> date:
    """Parse a YYYY-MM-DD option, defaulting to the local date."""
    if value is None:
        return datetime.now().date()
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        views.print_error(f"{option} must be YYYY-MM-DD, got {value!r}")
        raise typer.Exit(1)


def select_period(selector: str | None) -> Period:
    """Period from the option, else the stored default from the config."""
    if selector is None:
        selector = default_period_id(load_config())
    return parse_period_id(selector)


def get_muscle_group_lookup() -> MuscleGroupLookup:
    """exercise_id -> muscle groups, from the merged YAML config."""
    return muscle_group_lookup(load_config().get("exercises", {}))

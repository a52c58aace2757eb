"""Workout log commands: log-workout, history, delete-workout."""

import json
import uuid
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.models import ExerciseEntry, WorkoutLog
from ...io.serializers import ValidationError, parse_sets_string, validate_date, workout_log_to_dict
from .. import views
from ..app import JsonOption, LogPathOption, app, get_store, load_snapshot


@app.command("log-workout")
def log_workout(
    exercise_id: Annotated[
        str,
        typer.Option("--exercise", "-e", help="Exercise ID, e.g. bench_press"),
    ],
    sets: Annotated[
        str,
        typer.Option("--sets", "-s", help="Sets: 100x5,100x5@8 or compact 5x5 @ 100kg"),
    ],
    date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="Workout date (YYYY-MM-DD or ISO datetime, default: today)"),
    ] = None,
    name: Annotated[
        Optional[str],
        typer.Option("--name", "-n", help="Display name (default: derived from the ID)"),
    ] = None,
    workout_id: Annotated[
        Optional[str],
        typer.Option("--id", help="Workout ID; an existing ID gets the exercise added"),
    ] = None,
    duration: Annotated[
        Optional[int],
        typer.Option("--duration", help="Workout duration in seconds"),
    ] = None,
    log_path: LogPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Log an exercise for a workout.

    Creates the log file on first use.  Repeat with the same --id to add
    more exercises to one workout:

      lift-analytics log-workout --id w1 -e squat -s "5x5 @ 100kg"
      lift-analytics log-workout --id w1 -e bench_press -s "80x8,80x7,80x6@9"
    """
    store = get_store(log_path)
    store.init()

    try:
        parsed_sets = parse_sets_string(sets)
        workout_date = validate_date(date) if date is not None else datetime.now().date()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if duration is not None and duration < 0:
        views.print_error("Duration must be non-negative")
        raise typer.Exit(1)

    entry = ExerciseEntry(
        exercise_id=exercise_id,
        exercise_name=name or exercise_id.replace("_", " ").title(),
        sets=tuple(parsed_sets),
    )

    try:
        workouts = store.load_workouts()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    existing = next((w for w in workouts if workout_id is not None and w.id == workout_id), None)
    if existing is not None:
        if date is not None and workout_date != existing.date:
            views.print_warning(
                f"Workout {existing.id} is dated {existing.date.isoformat()}; ignoring --date {date}"
            )
        workout = WorkoutLog(
            id=existing.id,
            date=existing.date,
            exercises=existing.exercises + (entry,),
            total_volume=existing.total_volume,
            duration=duration if duration is not None else existing.duration,
        )
    else:
        workout = WorkoutLog(
            id=workout_id or uuid.uuid4().hex[:8],
            date=workout_date,
            exercises=(entry,),
            duration=duration,
        )

    store.append_workout(workout)

    if json_out:
        print(json.dumps(workout_log_to_dict(workout), indent=2))
        return

    volume = sum(s.volume for s in parsed_sets)
    views.print_success(f"Logged {entry.exercise_name} in workout {workout.id}")
    views.print_info(f"Sets: {len(parsed_sets)}  Volume: {volume:.0f} kg")


@app.command("history")
def history(
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-l", help="Limit number of workouts to show"),
    ] = None,
    log_path: LogPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Display workout history as a table.
    """
    workouts = list(load_snapshot(log_path))

    if limit is not None:
        workouts = workouts[-limit:]

    if json_out:
        print(json.dumps([workout_log_to_dict(w) for w in workouts], indent=2))
        return

    views.print_history(workouts)


@app.command("delete-workout")
def delete_workout(
    workout_id: Annotated[
        str,
        typer.Argument(help="Workout ID to delete (see ID column in history)"),
    ],
    log_path: LogPathOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation prompt"),
    ] = False,
) -> None:
    """
    Remove a workout by its ID.
    """
    store = get_store(log_path)
    workouts = load_snapshot(log_path)

    target = next((w for w in workouts if w.id == workout_id), None)
    if target is None:
        views.print_error(f"No workout with ID {workout_id!r}")
        raise typer.Exit(1)

    views.console.print(f"Workout to delete: [bold]{target.id}[/bold] ({target.date})")

    if not force and not views.confirm_action("Delete this workout?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    store.delete_workout(workout_id)
    views.print_success(f"Deleted workout {workout_id}")

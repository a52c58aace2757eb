"""
JSON serialization for workout log models.

Handles conversion between dataclasses and JSON-compatible dicts, plus the
sets shorthand accepted by the CLI.
"""

import json
import re
from datetime import date, datetime
from typing import Any

from ..core.models import ExerciseEntry, SetEntry, WorkoutLog


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_date(value: str) -> date | datetime:
    """
    Parse a stored date.

    Plain ``YYYY-MM-DD`` strings become dates; anything with a time part is
    parsed as an ISO datetime (offsets are kept, so the engine can convert
    to local time later).

    Args:
        value: ISO date or datetime string

    Returns:
        date or datetime

    Raises:
        ValidationError: If the string is not ISO formatted
    """
    if not isinstance(value, str):
        raise ValidationError(f"Invalid date: {value!r}")

    if re.match(r"^\d{4}-\d{2}-\d{2}$", value):
        try:
            return date.fromisoformat(value)
        except ValueError as e:
            raise ValidationError(f"Invalid date: {value}") from e

    try:
        return datetime.fromisoformat(value)
    except ValueError as e:
        raise ValidationError(
            f"Invalid date format: {value}. Expected YYYY-MM-DD or ISO datetime"
        ) from e


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is non-negative.

    Raises:
        ValidationError: If value is negative
    """
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def _list_field(data: dict[str, Any], key: str) -> list[Any]:
    """Return ``data[key]`` (default empty), which must be a JSON array."""
    value = data.get(key, [])
    if not isinstance(value, list):
        raise ValidationError(f"'{key}' must be a list, got {value!r}")
    return value


def set_entry_to_dict(s: SetEntry) -> dict[str, Any]:
    """Convert SetEntry to a JSON-compatible dict (rpe omitted when unset)."""
    data: dict[str, Any] = {"weight": s.weight, "reps": s.reps}
    if s.rpe is not None:
        data["rpe"] = s.rpe
    return data


def dict_to_set_entry(data: dict[str, Any]) -> SetEntry:
    """
    Convert dict to SetEntry.

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Invalid set: expected an object, got {data!r}")

    try:
        weight = float(data.get("weight", 0.0))
        reps = int(data["reps"])
        rpe = float(data["rpe"]) if data.get("rpe") is not None else None
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid set: {data!r}") from e

    validate_non_negative(weight, "weight")
    if reps < 1:
        raise ValidationError(f"reps must be at least 1, got {reps}")

    try:
        return SetEntry(weight=weight, reps=reps, rpe=rpe)
    except ValueError as e:
        raise ValidationError(str(e)) from e


def exercise_entry_to_dict(entry: ExerciseEntry) -> dict[str, Any]:
    """Convert ExerciseEntry to a JSON-compatible dict."""
    return {
        "exercise_id": entry.exercise_id,
        "exercise_name": entry.exercise_name,
        "sets": [set_entry_to_dict(s) for s in entry.sets],
    }


def dict_to_exercise_entry(data: dict[str, Any]) -> ExerciseEntry:
    """
    Convert dict to ExerciseEntry.

    ``exercise_name`` defaults to the id.

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Invalid exercise: expected an object, got {data!r}")

    exercise_id = data.get("exercise_id")
    if not isinstance(exercise_id, str) or not exercise_id.strip():
        raise ValidationError(f"Invalid exercise_id: {exercise_id!r}")

    return ExerciseEntry(
        exercise_id=exercise_id,
        exercise_name=str(data.get("exercise_name") or exercise_id),
        sets=tuple(dict_to_set_entry(s) for s in _list_field(data, "sets")),
    )


def workout_log_to_dict(workout: WorkoutLog) -> dict[str, Any]:
    """Convert WorkoutLog to a JSON-compatible dict."""
    data: dict[str, Any] = {
        "id": workout.id,
        "date": workout.date.isoformat(),
        "exercises": [exercise_entry_to_dict(e) for e in workout.exercises],
    }
    if workout.total_volume is not None:
        data["total_volume"] = workout.total_volume
    if workout.duration is not None:
        data["duration"] = workout.duration
    return data


def dict_to_workout_log(data: dict[str, Any]) -> WorkoutLog:
    """
    Convert dict to WorkoutLog.

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError("Workout record must be a JSON object")
    if "id" not in data:
        raise ValidationError("Workout record is missing 'id'")
    if "date" not in data:
        raise ValidationError("Workout record is missing 'date'")

    try:
        total_volume = float(data["total_volume"]) if data.get("total_volume") is not None else None
        duration = int(data["duration"]) if data.get("duration") is not None else None
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid total_volume or duration: {e}") from e

    if total_volume is not None:
        validate_non_negative(total_volume, "total_volume")
    if duration is not None:
        validate_non_negative(duration, "duration")

    return WorkoutLog(
        id=str(data["id"]),
        date=validate_date(data["date"]),
        exercises=tuple(dict_to_exercise_entry(e) for e in _list_field(data, "exercises")),
        total_volume=total_volume,
        duration=duration,
    )


def workout_to_json_line(workout: WorkoutLog) -> str:
    """
    Serialize a workout to a single JSON line.

    Returns:
        JSON string (single line, no trailing newline)
    """
    return json.dumps(workout_log_to_dict(workout), separators=(",", ":"))


def json_line_to_workout(line: str) -> WorkoutLog:
    """
    Deserialize a JSON line to a WorkoutLog.

    Raises:
        ValidationError: If JSON is invalid or data validation fails
    """
    try:
        data = json.loads(line.strip())
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ValidationError("Workout record must be a JSON object")

    return dict_to_workout_log(data)


def parse_compact_sets(s: str) -> list[SetEntry] | None:
    """
    Try to parse a compact "same load for every set" string.

    Format: RxS @ Wkg
      R reps × S sets at W kg (any x/X/× accepted); the "kg" suffix is
      required so per-set strings are never mistaken for it.

    Examples:
        "5x5 @ 100kg"   → 5 sets of 5 reps at 100 kg
        "8x3@60.5kg"    → 3 sets of 8 reps at 60.5 kg

    Returns list of SetEntry, or None if format not recognised.
    """
    m = re.fullmatch(
        r"\s*(\d+)\s*[xX×]\s*(\d+)\s*@\s*([0-9]+(?:\.[0-9]+)?)\s*kg\s*",
        s,
        re.IGNORECASE,
    )
    if not m:
        return None
    reps, n_sets, weight = int(m.group(1)), int(m.group(2)), float(m.group(3))
    if reps < 1 or n_sets < 1:
        return None
    return [SetEntry(weight=weight, reps=reps) for _ in range(n_sets)]


def parse_sets_string(sets_str: str) -> list[SetEntry]:
    """
    Parse a sets string.

    Compact format (tried first):
        RxS @ Wkg        e.g. "5x5 @ 100kg"

    Per-set format (comma-separated):
        WxR              e.g. "100x5"      100 kg for 5 reps
        WxR@RPE          e.g. "100x5@8.5"  with RPE

    Args:
        sets_str: Sets string to parse

    Returns:
        List of SetEntry

    Raises:
        ValidationError: If format is invalid
    """
    if not sets_str or not sets_str.strip():
        raise ValidationError("Sets string cannot be empty")

    compact = parse_compact_sets(sets_str)
    if compact is not None:
        return compact

    sets: list[SetEntry] = []
    parts = [p.strip() for p in sets_str.split(",") if p.strip()]

    for part in parts:
        m = re.fullmatch(
            r"(\d+(?:\.\d+)?)\s*[xX×]\s*(\d+)(?:\s*@\s*(\d+(?:\.\d+)?))?",
            part,
        )
        if not m:
            raise ValidationError(
                f"Invalid set format: '{part}'.\n"
                f"Use: weightxreps (e.g. 100x5), weightxreps@rpe (e.g. 100x5@8),\n"
                f"     or compact: repsxsets @ weightkg (e.g. 5x5 @ 100kg)."
            )

        weight = float(m.group(1))
        reps = int(m.group(2))
        rpe = float(m.group(3)) if m.group(3) is not None else None

        if reps < 1:
            raise ValidationError(f"Reps must be at least 1: {reps}")
        if rpe is not None and rpe > 10:
            raise ValidationError(f"RPE must be between 0 and 10: {rpe}")

        sets.append(SetEntry(weight=weight, reps=reps, rpe=rpe))

    if not sets:
        raise ValidationError("No valid sets found in sets string")

    return sets

"""
JSONL-based workout log storage.

Handles reading the log as an immutable snapshot and appending new workouts.
"""

import json
from pathlib import Path

from ..core.dates import local_day
from ..core.memo import fingerprint
from ..core.models import WorkoutLog
from .serializers import ValidationError, dict_to_workout_log, workout_to_json_line


class WorkoutLogStore:
    """
    Manages workout logs stored in JSONL format.

    The log file contains one JSON workout object per line.  Readers always
    get a full tuple snapshot; the engine never sees a half-written file
    because the store rewrites the file only through ``append_workout`` /
    ``delete_workout``.
    """

    def __init__(self, log_path: str | Path):
        """
        Initialize the store.

        Args:
            log_path: Path to the JSONL log file
        """
        self.log_path = Path(log_path)

    def exists(self) -> bool:
        """Check if the log file exists."""
        return self.log_path.exists()

    def init(self) -> None:
        """
        Create an empty log file if it doesn't exist.

        Creates parent directories if needed.
        """
        self.log_path.parent.mkdir(parents=True, exist_ok=True)

        if not self.log_path.exists():
            self.log_path.touch()

    def load_workouts(self) -> tuple[WorkoutLog, ...]:
        """
        Load all workouts as an immutable snapshot.

        Returns:
            Workouts sorted by local date (file order kept within a day)

        Raises:
            FileNotFoundError: If the log file doesn't exist
            ValidationError: If a line cannot be parsed
        """
        if not self.log_path.exists():
            raise FileNotFoundError(
                f"Workout log not found: {self.log_path}. Log a workout first."
            )

        workouts: list[WorkoutLog] = []

        with open(self.log_path, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue

                try:
                    data = json.loads(line)
                    if not isinstance(data, dict):
                        raise ValidationError("record must be a JSON object")
                    workouts.append(dict_to_workout_log(data))
                except (json.JSONDecodeError, ValidationError, ValueError) as e:
                    raise ValidationError(
                        f"Error parsing line {line_num} in {self.log_path}: {e}"
                    ) from e

        workouts.sort(key=lambda w: local_day(w.date))
        return tuple(workouts)

    def version(self) -> str:
        """
        Content fingerprint of the current snapshot.

        Changes whenever a workout is added, removed or edited.
        """
        return fingerprint(self.load_workouts())

    def append_workout(self, workout: WorkoutLog) -> None:
        """
        Add a workout, replacing any existing workout with the same id.

        Raises:
            FileNotFoundError: If the log file doesn't exist
        """
        workouts = [w for w in self.load_workouts() if w.id != workout.id]
        workouts.append(workout)
        workouts.sort(key=lambda w: local_day(w.date))
        self._write_workouts(workouts)

    def delete_workout(self, workout_id: str) -> WorkoutLog:
        """
        Delete a workout by id.

        Returns:
            The deleted workout

        Raises:
            KeyError: If no workout has that id
        """
        workouts = list(self.load_workouts())
        for i, w in enumerate(workouts):
            if w.id == workout_id:
                del workouts[i]
                self._write_workouts(workouts)
                return w
        raise KeyError(f"No workout with id {workout_id!r}")

    def _write_workouts(self, workouts: list[WorkoutLog]) -> None:
        """Rewrite the log via a temporary file so readers never see a partial file."""
        tmp_path = self.log_path.with_suffix(self.log_path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            for workout in workouts:
                f.write(workout_to_json_line(workout) + "\n")
        tmp_path.replace(self.log_path)


def get_default_log_path() -> Path:
    """Default workout log location: ~/.lift-analytics/workouts.jsonl."""
    return Path.home() / ".lift-analytics" / "workouts.jsonl"

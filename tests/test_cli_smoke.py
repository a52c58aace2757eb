"""
Smoke tests for the lift-analytics CLI.

Tests basic functionality:
- App runs without errors
- Workouts can be logged, listed and deleted
- Analytics commands render and emit JSON
"""

import json
import tempfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from lift_analytics.cli.main import app


runner = CliRunner()


@pytest.fixture
def temp_log_dir(monkeypatch):
    """Temporary directory for the log; HOME points there so no user config is read."""
    with tempfile.TemporaryDirectory() as tmpdir:
        monkeypatch.setenv("HOME", tmpdir)
        yield Path(tmpdir)


def _log(log_path: Path, date: str, sets: str, exercise: str = "bench_press", *extra: str):
    return runner.invoke(app, [
        "log-workout",
        "--log-path", str(log_path),
        "--date", date,
        "--exercise", exercise,
        "--sets", sets,
        *extra,
    ])


def _seed(log_path: Path) -> None:
    """Three weekly bench sessions with 1RM 100 → 105 → 110."""
    for date, sets in (("2024-01-01", "100x1"), ("2024-01-08", "105x1"), ("2024-01-15", "110x1")):
        assert _log(log_path, date, sets).exit_code == 0


class TestCLISmoke:
    """Basic smoke tests for CLI commands."""

    def test_app_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "log-workout" in result.output
        assert "forecast" in result.output

    def test_log_workout_creates_log(self, temp_log_dir):
        log_path = temp_log_dir / "workouts.jsonl"

        result = _log(log_path, "2024-01-15", "5x5 @ 100kg", "squat", "--id", "w1")

        assert result.exit_code == 0
        assert "Logged" in result.output
        record = json.loads(log_path.read_text().strip())
        assert record["id"] == "w1"
        assert record["exercises"][0]["exercise_name"] == "Squat"
        assert len(record["exercises"][0]["sets"]) == 5

    def test_same_id_adds_exercise(self, temp_log_dir):
        log_path = temp_log_dir / "workouts.jsonl"

        _log(log_path, "2024-01-15", "5x5 @ 100kg", "squat", "--id", "w1")
        result = _log(log_path, "2024-01-15", "80x8,80x6@9", "bench_press", "--id", "w1", "--json")

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [e["exercise_id"] for e in data["exercises"]] == ["squat", "bench_press"]
        assert len(log_path.read_text().strip().splitlines()) == 1

    def test_existing_id_keeps_date_and_warns(self, temp_log_dir):
        log_path = temp_log_dir / "workouts.jsonl"

        _log(log_path, "2024-01-15", "100x5", "squat", "--id", "w1")
        result = _log(log_path, "2024-01-16", "60x10", "bench_press", "--id", "w1")

        assert result.exit_code == 0
        assert "ignoring --date" in result.output
        assert json.loads(log_path.read_text().strip())["date"] == "2024-01-15"

    def test_duration_stored_in_seconds(self, temp_log_dir):
        log_path = temp_log_dir / "workouts.jsonl"
        _log(log_path, "2024-01-15", "100x5", "squat", "--id", "w1", "--duration", "3600")

        data = json.loads(runner.invoke(app, ["history", "--log-path", str(log_path), "--json"]).output)
        assert data[0]["duration"] == 3600

        result = runner.invoke(app, ["history", "--log-path", str(log_path)])
        assert "60 min" in result.output

    def test_invalid_sets_rejected(self, temp_log_dir):
        result = _log(temp_log_dir / "workouts.jsonl", "2024-01-15", "heavy")
        assert result.exit_code == 1
        assert "Invalid set format" in result.output

    def test_history_lists_workouts(self, temp_log_dir):
        log_path = temp_log_dir / "workouts.jsonl"
        _log(log_path, "2024-01-15", "100x5", "squat", "--id", "leg-day")

        result = runner.invoke(app, ["history", "--log-path", str(log_path), "--json"])

        assert result.exit_code == 0
        assert json.loads(result.output)[0]["id"] == "leg-day"

    def test_missing_log_is_an_error(self, temp_log_dir):
        result = runner.invoke(app, ["history", "--log-path", str(temp_log_dir / "nope.jsonl")])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_delete_workout(self, temp_log_dir):
        log_path = temp_log_dir / "workouts.jsonl"
        _log(log_path, "2024-01-15", "100x5", "squat", "--id", "w1")

        result = runner.invoke(app, ["delete-workout", "w1", "--log-path", str(log_path), "--force"])

        assert result.exit_code == 0
        assert log_path.read_text().strip() == ""

        result = runner.invoke(app, ["delete-workout", "w1", "--log-path", str(log_path), "--force"])
        assert result.exit_code == 1


class TestAnalysisCommands:
    def test_status_json(self, temp_log_dir):
        log_path = temp_log_dir / "workouts.jsonl"
        _seed(log_path)

        result = runner.invoke(app, [
            "status", "--log-path", str(log_path),
            "--period", "all_time", "--today", "2024-01-15", "--json",
        ])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["total_workouts"] == 3
        assert data["total_volume"] == pytest.approx(315.0)
        assert data["rest_days"] == 0
        assert data["pr_count"] == 2
        assert data["best_workout"]["date"] == "2024-01-15"
        assert data["week_comparison"]["current_volume"] == pytest.approx(110.0)
        assert data["week_comparison"]["previous_volume"] == pytest.approx(105.0)

    def test_status_renders(self, temp_log_dir):
        log_path = temp_log_dir / "workouts.jsonl"
        _seed(log_path)

        result = runner.invoke(app, ["status", "--log-path", str(log_path), "--today", "2024-01-15"])

        assert result.exit_code == 0
        assert "Summary" in result.output

    def test_unknown_period_falls_back(self, temp_log_dir):
        log_path = temp_log_dir / "workouts.jsonl"
        _seed(log_path)

        result = runner.invoke(app, [
            "volume", "--log-path", str(log_path), "--period", "forever", "--today", "2024-01-15",
        ])

        assert result.exit_code == 0
        assert "Unknown period" in result.output

    def test_bad_today_is_an_error(self, temp_log_dir):
        log_path = temp_log_dir / "workouts.jsonl"
        _seed(log_path)

        result = runner.invoke(app, ["status", "--log-path", str(log_path), "--today", "15/01/2024"])
        assert result.exit_code == 1

    @pytest.mark.parametrize("command", ["volume", "heatmap", "muscles", "progression", "streak"])
    def test_views_run(self, temp_log_dir, command):
        log_path = temp_log_dir / "workouts.jsonl"
        _seed(log_path)

        result = runner.invoke(app, [command, "--log-path", str(log_path), "--today", "2024-01-15"])
        assert result.exit_code == 0

    def test_heatmap_json_weeks(self, temp_log_dir):
        log_path = temp_log_dir / "workouts.jsonl"
        _seed(log_path)

        result = runner.invoke(app, [
            "heatmap", "--log-path", str(log_path),
            "--period", "last_7_days", "--today", "2024-01-15", "--json",
        ])

        data = json.loads(result.output)
        assert data["range"] == {"start": "2024-01-09", "end": "2024-01-15"}
        assert all(len(week) == 7 for week in data["weeks"])

    def test_muscles_json(self, temp_log_dir):
        log_path = temp_log_dir / "workouts.jsonl"
        _seed(log_path)

        result = runner.invoke(app, [
            "muscles", "--log-path", str(log_path),
            "--period", "all_time", "--today", "2024-01-15", "--json",
        ])

        data = json.loads(result.output)
        assert data["distribution"]["chest"] == {"sets": 3, "volume": 315.0}
        assert data["distribution"]["triceps"]["volume"] == 315.0

    def test_trend_json(self, temp_log_dir):
        log_path = temp_log_dir / "workouts.jsonl"
        _seed(log_path)

        result = runner.invoke(app, ["trend", "-e", "bench_press", "--log-path", str(log_path), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["classification"] == "up"
        assert data["change_percent"] == pytest.approx(10.0)

    def test_trend_plot(self, temp_log_dir):
        log_path = temp_log_dir / "workouts.jsonl"
        _seed(log_path)

        result = runner.invoke(app, ["trend", "-e", "bench_press", "--log-path", str(log_path)])

        assert result.exit_code == 0
        assert "●" in result.output

    def test_trend_unknown_exercise(self, temp_log_dir):
        log_path = temp_log_dir / "workouts.jsonl"
        _seed(log_path)

        result = runner.invoke(app, ["trend", "-e", "squat", "--log-path", str(log_path)])
        assert result.exit_code == 1

    def test_forecast_json(self, temp_log_dir):
        log_path = temp_log_dir / "workouts.jsonl"
        _seed(log_path)

        result = runner.invoke(app, [
            "forecast", "-e", "bench_press", "--target", "120",
            "--deadline", "2024-02-15", "--today", "2024-01-15",
            "--log-path", str(log_path), "--json",
        ])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["predicted_completion_date"] == "2024-01-29"
        assert data["current"] == pytest.approx(110.0)
        assert data["on_track"] is True
        assert data["status"] in ("on-track", "ahead", "behind", "at-risk")

    def test_forecast_renders(self, temp_log_dir):
        log_path = temp_log_dir / "workouts.jsonl"
        _seed(log_path)

        result = runner.invoke(app, [
            "forecast", "-e", "bench_press", "--target", "120", "--log-path", str(log_path),
        ])

        assert result.exit_code == 0
        assert "Predicted completion" in result.output

    def test_volume_goal_json(self, temp_log_dir):
        log_path = temp_log_dir / "workouts.jsonl"
        _seed(log_path)

        result = runner.invoke(app, [
            "goal", "volume", "--target", "630", "--period", "all_time",
            "--today", "2024-01-15", "--log-path", str(log_path), "--json",
        ])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["current"] == pytest.approx(315.0)
        assert data["progress_percent"] == pytest.approx(50.0)

    def test_frequency_goal_by_muscle(self, temp_log_dir):
        log_path = temp_log_dir / "workouts.jsonl"
        _seed(log_path)

        result = runner.invoke(app, [
            "goal", "frequency", "--target", "6", "--muscle", "chest", "--period", "all_time",
            "--today", "2024-01-15", "--log-path", str(log_path), "--json",
        ])

        assert result.exit_code == 0
        assert json.loads(result.output)["current"] == 3

    def test_weekly_streak_goal_renders(self, temp_log_dir):
        log_path = temp_log_dir / "workouts.jsonl"
        _seed(log_path)

        result = runner.invoke(app, [
            "goal", "streak", "--target", "3", "--weekly",
            "--today", "2024-01-15", "--log-path", str(log_path),
        ])

        assert result.exit_code == 0
        assert "Completed" in result.output

    def test_unknown_goal_type(self, temp_log_dir):
        log_path = temp_log_dir / "workouts.jsonl"
        _seed(log_path)

        result = runner.invoke(app, ["goal", "distance", "--target", "5", "--log-path", str(log_path)])
        assert result.exit_code == 1

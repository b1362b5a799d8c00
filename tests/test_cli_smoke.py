"""
Smoke tests for the lift-log CLI.

Tests basic functionality:
- App runs without errors
- Sessions can be logged (one-liner and interactive)
- History can be shown, edited and deleted
- Previous values, plot and volume are shown
"""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from lift_log.cli.main import app


runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep the default data directory inside the test's tmp dir."""
    monkeypatch.setenv("LIFT_LOG_HOME", str(tmp_path / "home"))


@pytest.fixture
def history_path(tmp_path) -> Path:
    return tmp_path / "history.json"


def _log(history_path: Path, *args: str):
    return runner.invoke(app, ["log-session", "--history-path", str(history_path), *args])


def _stored(history_path: Path) -> dict:
    return json.loads(history_path.read_text())["userWorkoutData"]


class TestCLISmoke:
    """Basic smoke tests for CLI commands."""

    def test_app_help(self):
        """Test that app runs and shows help."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "log-session" in result.output

    def test_menu_quit(self):
        result = runner.invoke(app, [], input="0\n")
        assert result.exit_code == 0
        assert "lift-log" in result.output

    def test_log_session_one_liner(self, history_path):
        """Test log-session writes a record and the best weight."""
        result = _log(
            history_path,
            "--exercise", "bench press",
            "--date", "2026-03-01T18:00",
            "--sets", "8@60,8@62.5,6@65",
        )

        assert result.exit_code == 0, result.output
        data = _stored(history_path)
        assert data["Bench Press"]["best_weight"] == 65
        record = data["Bench Press"]["records"][0]
        assert record["category"] == "push"
        assert record["equipment"] == "barbell"
        assert record["set_reps"] == [8, 8, 6]
        assert record["max_weight_set_count"] == 1

    def test_log_session_json_reports_trend(self, history_path):
        _log(history_path, "-e", "Bench Press", "-d", "2026-03-01", "-s", "8@60")
        result = _log(history_path, "-e", "Bench Press", "-d", "2026-03-08", "-s", "8@60,6@65", "--json")

        assert result.exit_code == 0, result.output
        out = json.loads(result.output)
        saved = out["saved"][0]
        assert saved["exercise"] == "Bench Press"
        assert saved["trend"] == "up"
        assert saved["delta_last"] == 5
        assert out["totals"] == {"exercises": 1, "sets": 2, "volume": 870.0}

    def test_log_session_unilateral(self, history_path):
        result = _log(
            history_path,
            "-e", "Bulgarian Split Squat",
            "--movement", "unilateral",
            "--left", "10@20,10@22",
            "--right", "10@20,9@22",
            "--date", "2026-03-02",
        )

        assert result.exit_code == 0, result.output
        record = _stored(history_path)["Bulgarian Split Squat"]["records"][0]
        assert record["movement_type"] == "unilateral"
        assert record["set_reps_r"] == [10, 9]
        assert record["max_weight_set_count"] == 2

    def test_unilateral_side_mismatch_rejected(self, history_path):
        result = _log(
            history_path,
            "-e", "Bulgarian Split Squat", "-M", "unilateral",
            "-L", "10@20,10@20", "-R", "10@20",
        )
        assert result.exit_code == 1
        assert not history_path.exists()

    def test_invalid_sets_rejected(self, history_path):
        result = _log(history_path, "-e", "Bench Press", "-s", "eight@sixty")
        assert result.exit_code == 1
        assert not history_path.exists()

    def test_unknown_exercise_needs_category(self, history_path):
        result = _log(history_path, "-e", "Zercher Squat", "-s", "5@80")
        assert result.exit_code == 1

        result = _log(history_path, "-e", "Zercher Squat", "-c", "legs", "-q", "Barbell", "-s", "5@80")
        assert result.exit_code == 0, result.output
        record = _stored(history_path)["Zercher Squat"]["records"][0]
        assert record["category"] == "lower body"

    def test_log_session_interactive(self, history_path):
        answers = "\n".join([
            "2026-03-05T07:30",  # date
            "push",              # category
            "Bench Press",       # exercise
            "",                  # equipment: first option
            "",                  # movement: bilateral
            "2",                 # number of sets
            "8@60",
            "6@65",
            "s",                 # review & save
            "y",                 # confirm
        ]) + "\n"

        result = runner.invoke(app, ["log-session", "-p", str(history_path)], input=answers)

        assert result.exit_code == 0, result.output
        assert "Session summary" in result.output
        assert "Workout saved" in result.output
        assert _stored(history_path)["Bench Press"]["best_weight"] == 65

    def test_interactive_quit_discards(self, history_path):
        answers = "\n".join(["", "push", "Bench Press", "", "", "1", "8@60", "q"]) + "\n"
        result = runner.invoke(app, ["log-session", "-p", str(history_path)], input=answers)
        assert result.exit_code == 0
        assert not history_path.exists()


class TestHistoryCommands:
    """show-history, edit-record and delete-record."""

    def _seed(self, history_path: Path) -> None:
        _log(history_path, "-e", "Back Squat", "-d", "2026-03-01", "-s", "5@100")
        _log(history_path, "-e", "Back Squat", "-d", "2026-03-04", "-s", "5@110")
        _log(history_path, "-e", "Bench Press", "-d", "2026-03-02", "-s", "8@60")

    def test_show_history_lists_exercises(self, history_path):
        self._seed(history_path)
        result = runner.invoke(app, ["show-history", "-p", str(history_path), "--json"])
        assert result.exit_code == 0
        out = {row["exercise"]: row for row in json.loads(result.output)}
        assert out["Back Squat"]["records"] == 2
        assert out["Back Squat"]["best_weight"] == 110

    def test_show_history_one_exercise(self, history_path):
        self._seed(history_path)
        result = runner.invoke(app, ["show-history", "back squat", "-p", str(history_path)])
        assert result.exit_code == 0
        assert "Best Weight: 110kg" in result.output

    def test_show_history_unknown(self, history_path):
        result = runner.invoke(app, ["show-history", "Deadlift", "-p", str(history_path)])
        assert result.exit_code == 1

    def test_delete_record_by_position(self, history_path):
        self._seed(history_path)
        result = runner.invoke(app, [
            "delete-record", "Back Squat", "2", "-p", str(history_path), "--force",
        ])
        assert result.exit_code == 0, result.output
        assert _stored(history_path)["Back Squat"]["best_weight"] == 100

    def test_deleting_last_record_removes_exercise(self, history_path):
        self._seed(history_path)
        record_id = _stored(history_path)["Bench Press"]["records"][0]["id"]
        result = runner.invoke(app, [
            "delete-record", "Bench Press", record_id, "-p", str(history_path), "-f",
        ])
        assert result.exit_code == 0, result.output
        assert "Bench Press" not in _stored(history_path)

    def test_delete_cancelled(self, history_path):
        self._seed(history_path)
        result = runner.invoke(
            app, ["delete-record", "Back Squat", "1", "-p", str(history_path)], input="n\n"
        )
        assert result.exit_code == 0
        assert len(_stored(history_path)["Back Squat"]["records"]) == 2

    def test_edit_record_lowers_best(self, history_path):
        self._seed(history_path)
        record_id = _stored(history_path)["Back Squat"]["records"][1]["id"]

        result = runner.invoke(app, [
            "edit-record", "Back Squat", record_id,
            "--sets", "5@95,5@95",
            "-p", str(history_path), "--json",
        ])

        assert result.exit_code == 0, result.output
        out = json.loads(result.output)
        assert out["id"] == record_id
        assert out["max_weight"] == 95
        assert out["max_weight_set_count"] == 2
        assert _stored(history_path)["Back Squat"]["best_weight"] == 100

    def test_edit_record_needs_a_change(self, history_path):
        self._seed(history_path)
        result = runner.invoke(app, ["edit-record", "Back Squat", "1", "-p", str(history_path)])
        assert result.exit_code == 1


class TestAnalysisCommands:
    """previous, plot, volume and exercises."""

    def test_previous_mirrors_bilateral(self, history_path):
        _log(history_path, "-e", "Bulgarian Split Squat", "-d", "2026-03-01", "-s", "8@40,8@42")
        result = runner.invoke(app, [
            "previous", "Bulgarian Split Squat", "-M", "unilateral", "-n", "2",
            "-p", str(history_path), "--json",
        ])
        assert result.exit_code == 0, result.output
        out = json.loads(result.output)
        expected = [{"weight": 40, "reps": 8}, {"weight": 42, "reps": 8}]
        assert out["previous"]["left"] == expected
        assert out["previous"]["right"] == expected
        assert out["best"]["weight"] == 42

    def test_previous_without_history(self, history_path):
        result = runner.invoke(app, ["previous", "Bench Press", "-p", str(history_path)])
        assert result.exit_code == 0
        assert "Prev: —" in result.output

    def test_plot_runs(self, history_path):
        _log(history_path, "-e", "Bench Press", "-d", "2026-03-01", "-s", "8@60")
        _log(history_path, "-e", "Bench Press", "-d", "2026-03-15", "-s", "6@65")
        result = runner.invoke(app, ["plot", "Bench Press", "-p", str(history_path)])
        assert result.exit_code == 0
        assert "Heaviest Lift" in result.output

    def test_plot_json(self, history_path):
        _log(history_path, "-e", "Bench Press", "-d", "2026-03-01", "-s", "8@60")
        result = runner.invoke(app, ["plot", "Bench Press", "-p", str(history_path), "-j"])
        out = json.loads(result.output)
        assert out["points"] == [{"date": "2026-03-01T00:00", "weight": 60}]

    def test_volume_json(self, history_path):
        _log(history_path, "-e", "Bench Press", "-s", "8@60")
        result = runner.invoke(app, ["volume", "-p", str(history_path), "--json", "-w", "2"])
        assert result.exit_code == 0, result.output
        weeks = json.loads(result.output)["weeks"]
        assert len(weeks) == 2
        assert weeks[0]["volume"] == 480

    def test_exercises_filter(self):
        result = runner.invoke(app, ["exercises", "--category", "specific muscle", "--muscle", "Biceps", "--json"])
        assert result.exit_code == 0
        names = {ex["name"] for ex in json.loads(result.output)}
        assert names == {"Biceps Curl", "Hammer Curl"}

    def test_exercises_specific_muscle_needs_muscle(self):
        result = runner.invoke(app, ["exercises", "-c", "specific muscle"])
        assert result.exit_code == 1

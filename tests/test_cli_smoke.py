"""
Minimal smoke tests for wod-runner CLI.

Tests basic functionality:
- App runs without errors
- Catalog lists and briefings show
- Results can be logged without the timer
- History reads them back
- The live runner can be cancelled and quit
"""

import json
import tempfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from wod_runner.cli.main import app
from wod_runner.core.workouts import reload_catalog
from wod_runner.io.result_store import ResultStore


runner = CliRunner()


@pytest.fixture
def temp_home(monkeypatch):
    """Run every command against an empty temporary home directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        monkeypatch.setenv("HOME", tmpdir)
        reload_catalog()
        yield Path(tmpdir)
    reload_catalog()


@pytest.fixture
def results_path(temp_home):
    return temp_home / "results.jsonl"


class TestCLISmoke:
    """Basic smoke tests for CLI commands."""

    def test_app_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "wod-runner" in result.output or "workout" in result.output.lower()

    def test_list(self, temp_home):
        result = runner.invoke(app, ["list"])
        assert result.exit_code == 0
        assert "Fran" in result.output
        assert "Cindy" in result.output

    def test_list_filter_scheme(self, temp_home):
        result = runner.invoke(app, ["list", "--scheme", "amrap"])
        assert result.exit_code == 0
        assert "Cindy" in result.output
        assert "Fran" not in result.output

    def test_show(self, temp_home):
        result = runner.invoke(app, ["show", "fran", "--tier", "beginner"])
        assert result.exit_code == 0
        assert "Thrusters" in result.output
        assert "Ring Rows" in result.output

    def test_show_unknown(self, temp_home):
        result = runner.invoke(app, ["show", "nope"])
        assert result.exit_code == 1

    def test_verbose_flag(self, temp_home):
        result = runner.invoke(app, ["--verbose", "list"])
        assert result.exit_code == 0


class TestLogCommand:
    """Logging results without the timer."""

    def test_log_time(self, results_path):
        result = runner.invoke(app, [
            "log", "fran",
            "--venue", "v1",
            "--minutes", "5",
            "--seconds", "3",
            "--results-path", str(results_path),
        ])
        assert result.exit_code == 0, result.output
        assert "5:03" in result.output

        records = ResultStore(results_path).load_results()
        assert len(records) == 1
        assert records[0].score_display == "5:03"
        assert records[0].total_time_seconds == 303
        assert records[0].location == "HDB AeroGym (Tampines)"
        assert records[0].verification_status == "unverified"

    def test_log_amrap_rounds(self, results_path):
        result = runner.invoke(app, [
            "log", "cindy",
            "--venue", "v3",
            "--venue-detail", "Level 2",
            "--rounds", "5",
            "--extra-reps", "3",
            "--witness", "coach_1",
            "--results-path", str(results_path),
        ])
        assert result.exit_code == 0, result.output
        record = ResultStore(results_path).load_results()[0]
        assert record.score_display == "5 rounds + 3 reps"
        assert record.total_time_seconds == 1
        assert record.location == "Jurong West ActiveSG: Level 2"
        assert record.verification_status == "pending"

    def test_log_weight(self, results_path):
        result = runner.invoke(app, [
            "log", "street_deadlift",
            "--venue", "v4",
            "--weight", "140",
            "--unit", "lbs",
            "--tier", "advanced",
            "--results-path", str(results_path),
        ])
        assert result.exit_code == 0, result.output
        record = ResultStore(results_path).load_results()[0]
        assert record.score_display == "140lbs"
        assert record.difficulty_tier == "Advanced"

    def test_log_missing_reps_fails(self, results_path):
        result = runner.invoke(app, [
            "log", "max_pullups",
            "--venue", "v1",
            "--results-path", str(results_path),
        ])
        assert result.exit_code == 1
        assert not results_path.exists()

    def test_log_zero_time_fails(self, results_path):
        result = runner.invoke(app, [
            "log", "fran",
            "--venue", "v1",
            "--minutes", "0",
            "--seconds", "0",
            "--results-path", str(results_path),
        ])
        assert result.exit_code == 1
        assert not results_path.exists()

    def test_log_requires_venue(self, results_path):
        result = runner.invoke(app, [
            "log", "fran", "--minutes", "5", "--results-path", str(results_path),
        ])
        assert result.exit_code == 1

    def test_log_unknown_venue(self, results_path):
        result = runner.invoke(app, [
            "log", "fran", "--venue", "v99", "--minutes", "5", "--results-path", str(results_path),
        ])
        assert result.exit_code == 1

    def test_log_bad_tier(self, results_path):
        result = runner.invoke(app, [
            "log", "fran", "--venue", "v1", "--minutes", "5", "--tier", "elite",
            "--results-path", str(results_path),
        ])
        assert result.exit_code == 1

    def test_log_bad_unit(self, results_path):
        result = runner.invoke(app, [
            "log", "street_deadlift", "--venue", "v1", "--weight", "100", "--unit", "stone",
            "--results-path", str(results_path),
        ])
        assert result.exit_code == 1

    def test_log_from_file(self, temp_home, results_path):
        wod = temp_home / "ladder.json"
        wod.write_text(json.dumps({
            "name": "Ladder",
            "scheme": "FOR_TIME",
            "movements": [{"exercise": "burpee", "target": "10 Burpees"}],
        }))
        result = runner.invoke(app, [
            "log", "--file", str(wod),
            "--venue", "v2",
            "--seconds", "95",
            "--results-path", str(results_path),
        ])
        assert result.exit_code == 0, result.output
        record = ResultStore(results_path).load_results()[0]
        assert record.workout_id == "ladder"
        assert record.score_display == "1:35"


class TestHistoryCommand:
    def _log(self, results_path, workout_id: str, *extra: str):
        result = runner.invoke(app, [
            "log", workout_id, "--venue", "v1", "--results-path", str(results_path), *extra,
        ])
        assert result.exit_code == 0, result.output

    def test_empty(self, results_path):
        result = runner.invoke(app, ["history", "--results-path", str(results_path)])
        assert result.exit_code == 0
        assert "No results" in result.output

    def test_empty_json(self, results_path):
        result = runner.invoke(app, ["history", "--json", "--results-path", str(results_path)])
        assert result.exit_code == 0
        assert json.loads(result.output) == []

    def test_table(self, results_path):
        self._log(results_path, "fran", "--minutes", "4")
        result = runner.invoke(app, ["history", "--results-path", str(results_path)])
        assert result.exit_code == 0
        assert "Fran" in result.output
        assert "4:00" in result.output

    def test_json_filter(self, results_path):
        self._log(results_path, "fran", "--minutes", "4")
        self._log(results_path, "max_pullups", "--reps", "12")
        result = runner.invoke(app, [
            "history", "--workout", "max_pullups", "--json", "--results-path", str(results_path),
        ])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert len(data) == 1
        assert data[0]["score_display"] == "12 reps"

    def test_corrupt_file(self, results_path):
        results_path.write_text("{broken\n")
        result = runner.invoke(app, ["history", "--results-path", str(results_path)])
        assert result.exit_code == 1


class TestRunCommand:
    """The live runner, driven through stdin."""

    def test_cancel_at_briefing(self, results_path):
        result = runner.invoke(
            app,
            ["run", "fran", "--venue", "v1", "--mute", "--results-path", str(results_path)],
            input="q\n",
        )
        assert result.exit_code == 0, result.output
        assert "Cancelled" in result.output
        assert not results_path.exists()

    def test_quit_running_session(self, results_path):
        result = runner.invoke(
            app,
            ["run", "fran", "--venue", "v1", "--mute", "--results-path", str(results_path)],
            input="\nq\ny\n",
        )
        assert result.exit_code == 0, result.output
        assert "Nothing was saved" in result.output
        assert not results_path.exists()

    def test_log_without_timer_from_briefing(self, results_path):
        result = runner.invoke(
            app,
            ["run", "fran", "--venue", "v1", "--mute", "--results-path", str(results_path)],
            input="l\n5\n3\n\n",
        )
        assert result.exit_code == 0, result.output
        record = ResultStore(results_path).load_results()[0]
        assert record.score_display == "5:03"

    def test_discard_after_finish(self, results_path):
        result = runner.invoke(
            app,
            ["run", "max_pullups", "--venue", "v1", "--mute", "--reps", "15",
             "--results-path", str(results_path)],
            input="\n\nn\n",
        )
        assert result.exit_code == 0, result.output
        assert "discarded" in result.output
        assert not results_path.exists()

    def test_finish_and_save(self, results_path):
        result = runner.invoke(
            app,
            ["run", "max_pullups", "--venue", "v1", "--mute", "--results-path", str(results_path)],
            input="\n\n21\ny\n",
        )
        assert result.exit_code == 0, result.output
        record = ResultStore(results_path).load_results()[0]
        assert record.score_display == "21 reps"
        assert record.total_time_seconds == 1

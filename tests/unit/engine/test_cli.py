"""Tests for cadence/cli.py

The CLI is an operator tool: every command prints one JSON document.
State lives in a temporary SQLite database so consecutive invocations
see each other's writes.
"""

import json
from unittest.mock import patch

import pytest

from cadence import cli
from cadence.engine import SchedulingEngine
from cadence.storage.base import StorageUnavailableError


@pytest.fixture(autouse=True)
def quiet_logging():
    with patch("cadence.cli.setup_logging") as setup:
        yield setup


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    """scheduling.yaml pointing at a temporary database."""
    for name in ("CADENCE_TIMEZONE", "CADENCE_KEY_PREFIX", "CADENCE_STORAGE", "CADENCE_REDIS_URL"):
        monkeypatch.delenv(name, raising=False)

    path = tmp_path / "scheduling.yaml"
    path.write_text(
        "scheduling:\n"
        "  storage:\n"
        "    backend: sqlite\n"
        f"    sqlite_path: {tmp_path / 'scheduling.db'}\n"
    )
    return path


@pytest.fixture
def run(config_file, capsys):
    """Run the CLI and return (exit code, parsed JSON output)."""

    def _run(*argv):
        code = cli.main(["--config", str(config_file), *argv])
        out = capsys.readouterr().out
        return code, json.loads(out) if out.strip() else None

    return _run


class TestCommands:
    """Tests for each subcommand."""

    def test_init_blocks_and_list(self, run):
        code, data = run("init-blocks", "--user", "alice")
        assert code == 0
        assert len(data["blocks"]) == 6

        code, data = run("blocks", "--user", "alice")
        assert code == 0
        assert data["success"] is True
        assert [b["name"] for b in data["blocks"]][:2] == ["Morning Routine", "Focus Time"]

    def test_log_energy_and_pattern(self, run):
        code, data = run("log-energy", "--user", "alice", "--level", "4", "--context", "coffee")
        assert code == 0
        assert data["log"]["level"] == 4
        assert data["log"]["context"] == "coffee"

        code, data = run("pattern", "--user", "alice")
        assert data["pattern"]["data_points"] == 1
        assert len(data["today"]) == 1

    def test_observe(self, run):
        code, data = run(
            "observe",
            "--user",
            "alice",
            "--energy",
            "low",
            "--time-of-day",
            "afternoon",
            "--pattern",
        )
        assert code == 0
        assert set(data["pattern"]["hourly_averages"]) == {"14", "15", "16", "17"}

    def test_insights_still_learning(self, run):
        code, data = run("insights", "--user", "alice")
        assert code == 0
        assert data["insights"] is None

    def test_insights_after_enough_data(self, run):
        for level in ("3", "4", "5"):
            run("log-energy", "--user", "alice", "--level", level)

        code, data = run("insights", "--user", "alice")
        assert data["insights"]["data_points"] == 3

    def test_suggest(self, run):
        run("init-blocks", "--user", "alice")

        code, data = run(
            "suggest",
            "--user",
            "alice",
            "--task",
            "Write report",
            "--energy",
            "high",
            "--tag",
            "@work",
            "--max",
            "2",
        )

        assert code == 0
        assert 0 < len(data["suggestions"]) <= 2
        assert {"block_name", "date", "score", "reasons"} <= set(data["suggestions"][0])


class TestErrors:
    """Tests for exit codes."""

    def test_no_command_prints_help(self, config_file, capsys):
        assert cli.main(["--config", str(config_file)]) == 1
        assert "init-blocks" in capsys.readouterr().out

    def test_user_is_required(self, config_file):
        with pytest.raises(SystemExit):
            cli.main(["--config", str(config_file), "blocks"])

    def test_storage_outage_exit_code(self, run):
        with patch.object(
            SchedulingEngine,
            "list_active_blocks",
            side_effect=StorageUnavailableError("sqlite", "get"),
        ):
            code, data = run("blocks", "--user", "alice")

        assert code == 2
        assert data["success"] is False
        assert "sqlite store unavailable" in data["error"]

    def test_log_level_passed_to_logging(self, run, quiet_logging):
        run("--log-level", "DEBUG", "pattern", "--user", "alice")
        quiet_logging.assert_called_once_with(level="DEBUG")

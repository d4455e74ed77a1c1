"""
Unit tests for the 'build' command.
"""

import json

import pytest
from click.testing import CliRunner

from replaygraph.cli.commands.build import build
from replaygraph.core.demo import DemoManager


class TestBuildCommand:
    @pytest.fixture
    def runner(self):
        return CliRunner()

    @pytest.fixture
    def log_file(self, tmp_path):
        return str(DemoManager(tmp_path).provision())

    def test_human_output(self, runner, log_file):
        result = runner.invoke(build, [log_file])

        assert result.exit_code == 0
        assert "Built 15 nodes and 17 edges from 14 events" in result.output
        assert "Triggered" in result.output

    def test_json_output(self, runner, log_file):
        result = runner.invoke(build, [log_file, "--json"])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["meta"]["command"] == "build"
        assert payload["meta"]["status"] == "success"
        data = payload["data"]
        assert data["nodes_by_kind"] == {"domain": 2, "endpoint": 7, "event": 6}
        assert data["causal_labels"] == {"Triggered": 3, "Related": 2}
        assert data["dropped_events"] == 1
        assert len(data["markers"]) == 5

    def test_missing_file_json(self, runner, tmp_path):
        result = runner.invoke(build, [str(tmp_path / "missing.json"), "--json"])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["meta"]["status"] == "error"
        assert payload["error"]["type"] == "LogFileNotFoundError"

    def test_missing_file_human(self, runner, tmp_path):
        result = runner.invoke(build, [str(tmp_path / "missing.json")])

        assert result.exit_code == 0
        assert "Log file not found" in result.output

    def test_empty_log(self, runner, tmp_path):
        f = tmp_path / "telemetry.json"
        f.write_text("[]")
        result = runner.invoke(build, [str(f)])

        assert result.exit_code == 0
        assert "No events produced graph nodes" in result.output

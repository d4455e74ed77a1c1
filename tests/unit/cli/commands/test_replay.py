"""
Unit tests for the 'replay' command.
"""

import json

import pytest
from click.testing import CliRunner

from replaygraph.cli.commands.replay import replay, run_replay
from replaygraph.core.demo import DemoManager


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def log_file(tmp_path):
    return str(DemoManager(tmp_path).provision())


class TestRunReplay:
    def test_seek(self):
        frame, ticks = run_replay(DemoManager.SAMPLE_LOGS, 50, (), False, 1)
        assert ticks == 0
        assert frame.counts.visible == 9
        assert frame.playback.position == 50

    def test_play_to_end(self):
        frame, ticks = run_replay(DemoManager.SAMPLE_LOGS, 0, (), True, 4)
        assert ticks == 50
        assert frame.playback.position == 100
        assert frame.playback.speed == 4
        assert not frame.playback.is_playing

    def test_type_filter(self):
        frame, _ = run_replay(DemoManager.SAMPLE_LOGS, 100, ("keydown",), False, 1)
        assert frame.counts.visible == 1
        assert frame.filtered_types == ["keydown"]


class TestReplayCommand:
    def test_human_output(self, runner, log_file):
        result = runner.invoke(replay, [log_file, "--position", "50"])

        assert result.exit_code == 0
        assert "9/13 events visible" in result.output
        assert "error-8" in result.output
        assert "network-request-12" not in result.output

    def test_json_output(self, runner, log_file):
        result = runner.invoke(replay, [log_file, "-p", "100", "-t", "click", "--json"])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        data = payload["data"]
        assert payload["meta"]["command"] == "replay"
        assert data["counts"] == {"total": 13, "visible": 3}
        visible = [n["id"] for n in data["nodes"] if n["visible"] and n["kind"] != "domain"]
        assert visible == ["click-0", "click-6", "click-11"]

    def test_play(self, runner, log_file):
        result = runner.invoke(replay, [log_file, "--play", "--speed", "2"])

        assert result.exit_code == 0
        assert "Played 100 ticks at 2x" in result.output
        assert "13/13 events visible" in result.output

    def test_position_out_of_range(self, runner, log_file):
        result = runner.invoke(replay, [log_file, "--position", "150"])
        assert result.exit_code != 0

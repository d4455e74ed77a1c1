"""Unit tests for CLI utilities."""

import json

import pytest

from replaygraph.cli.utils import load_events, read_events, resolve_log_path, resolve_node_id
from replaygraph.core.builder import GraphBuilder
from replaygraph.core.demo import DemoManager
from replaygraph.core.exceptions import LogFileNotFoundError, ReplayGraphError


class TestReadEvents:
    def test_list_file(self, tmp_path):
        f = tmp_path / "logs.json"
        f.write_text(json.dumps([{"type": "click", "timestamp": 0}]))
        assert read_events(str(f)) == [{"type": "click", "timestamp": 0}]

    def test_wrapped_in_logs_key(self, tmp_path):
        f = tmp_path / "logs.json"
        f.write_text(json.dumps({"logs": [{"type": "click", "timestamp": 0}]}))
        assert len(read_events(str(f))) == 1

    def test_directory_uses_default_name(self, tmp_path):
        (tmp_path / "telemetry.json").write_text("[]")
        assert resolve_log_path(str(tmp_path)) == tmp_path / "telemetry.json"

    def test_missing_file(self, tmp_path):
        with pytest.raises(LogFileNotFoundError):
            read_events(str(tmp_path / "missing.json"))
        with pytest.raises(LogFileNotFoundError):
            read_events(str(tmp_path))

    @pytest.mark.parametrize("content", ["{not json", '{"events": []}', '"text"'])
    def test_invalid_content(self, tmp_path, content):
        f = tmp_path / "logs.json"
        f.write_text(content)
        with pytest.raises(ReplayGraphError):
            read_events(str(f))

    def test_load_events_reports_missing(self, tmp_path, capsys):
        assert load_events(str(tmp_path / "missing.json")) is None
        captured = capsys.readouterr()
        assert "Log file not found" in captured.err
        assert "init --demo" in captured.out


class TestResolveNodeId:
    @pytest.fixture
    def graph(self):
        return GraphBuilder().build(DemoManager.SAMPLE_LOGS).graph

    def test_exact(self, graph):
        assert resolve_node_id(graph, "click-6") == "click-6"

    def test_unique_substring(self, graph):
        assert resolve_node_id(graph, "scroll") == "scroll-13"
        assert resolve_node_id(graph, "cdn") == "domain:cdn.example.com"

    def test_index_suffix_disambiguates(self, graph):
        # "2" appears in several ids; only one ends with "-2"
        assert resolve_node_id(graph, "2") == "network-request-2"

    def test_no_match(self, graph):
        assert resolve_node_id(graph, "ghost") is None

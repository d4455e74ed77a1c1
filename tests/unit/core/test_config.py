"""Unit tests for engine configuration loading."""

import yaml

from replaygraph.config import (
    CAUSAL_WINDOW_MS,
    ENV_CAUSAL_WINDOW_MS,
    ENV_TICK_INTERVAL_MS,
    EngineConfig,
    load_config,
)


class TestLoadConfig:
    def test_defaults_when_missing(self, tmp_path):
        config = load_config(tmp_path / "missing.yaml")
        assert config == EngineConfig()
        assert config.causal_window_ms == CAUSAL_WINDOW_MS
        assert config.speeds == (1, 2, 4)

    def test_reads_engine_section(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"engine": {"causal_window_ms": 500, "marker_count": 3}}))

        config = load_config(path)
        assert config.causal_window_ms == 500
        assert config.marker_count == 3

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"engine": {"causal_window_ms": 500}}))
        monkeypatch.setenv(ENV_CAUSAL_WINDOW_MS, "750")
        monkeypatch.setenv(ENV_TICK_INTERVAL_MS, "20")

        config = load_config(path)
        assert config.causal_window_ms == 750
        assert config.tick_interval_ms == 20

    def test_invalid_values_fall_back(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"engine": {"marker_count": 1}}))
        assert load_config(path) == EngineConfig()

    def test_broken_yaml_falls_back(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("engine: [unclosed")
        assert load_config(path) == EngineConfig()

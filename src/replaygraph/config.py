"""
Global Configuration and Tunable Defaults.

Centralizes the heuristics constants of the replay engine and loads
overrides from ``.replaygraph/config.yaml`` and the environment.
"""

import logging
import os
from pathlib import Path
from typing import Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

# --- Heuristics ---
# Adjacent events closer than this are linked (2-second attention window)
CAUSAL_WINDOW_MS = 2000

# Number of evenly spaced timeline markers
MARKER_COUNT = 5

# --- Playback ---
TICK_INTERVAL_MS = 50
TICK_STEP = 0.5
PLAYBACK_SPEEDS: Tuple[int, ...] = (1, 2, 4)

POSITION_MIN = 0.0
POSITION_MAX = 100.0

DEFAULT_CONFIG_PATH = Path(".replaygraph/config.yaml")

ENV_CAUSAL_WINDOW_MS = "REPLAYGRAPH_CAUSAL_WINDOW_MS"
ENV_TICK_INTERVAL_MS = "REPLAYGRAPH_TICK_INTERVAL_MS"


class EngineConfig(BaseModel):
    """Runtime configuration for the graph builder, timeline and playback."""
    causal_window_ms: float = Field(default=CAUSAL_WINDOW_MS, gt=0)
    marker_count: int = Field(default=MARKER_COUNT, ge=2)
    tick_interval_ms: float = Field(default=TICK_INTERVAL_MS, gt=0)
    tick_step: float = Field(default=TICK_STEP, gt=0)
    speeds: Tuple[int, ...] = PLAYBACK_SPEEDS

    model_config = ConfigDict(frozen=True, extra="ignore")


def load_config(path: Path | None = None) -> EngineConfig:
    """
    Load engine configuration.

    Values come from the ``engine:`` section of the YAML file, then from
    environment overrides. A missing or unreadable file yields defaults.
    """
    config_path = path or DEFAULT_CONFIG_PATH
    values = {}

    if config_path.exists():
        try:
            with open(config_path, "r") as f:
                data = yaml.safe_load(f) or {}
            values.update(data.get("engine", {}) or {})
        except (OSError, yaml.YAMLError, AttributeError) as e:
            logger.warning(f"Failed to read config {config_path}: {e}")

    for env_name, key in (
        (ENV_CAUSAL_WINDOW_MS, "causal_window_ms"),
        (ENV_TICK_INTERVAL_MS, "tick_interval_ms"),
    ):
        raw = os.getenv(env_name)
        if raw:
            values[key] = raw

    try:
        return EngineConfig(**values)
    except ValidationError as e:
        logger.warning(f"Invalid engine config, using defaults: {e}")
        return EngineConfig()

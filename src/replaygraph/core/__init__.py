"""
Core modules for replaygraph.

This package contains the engine building blocks:
- types: Data structures (LogEvent, GraphNode, GraphEdge, payloads)
- normalizer: Timestamp parsing and classification of raw events
- builder / linking: Graph construction and causal inference
- timeline / visibility / playback: Time-scrubbing projection
- session: Atomic per-batch state and renderer output
"""

from .types import (
    EdgeKind, EventType, GraphEdge, GraphNode, LogEvent,
    NodeKind, NormalizedEvent,
)
from .exceptions import (
    EmptyGraph, EventError, MalformedTimestamp, MalformedURL,
    NodeNotFoundError, ReplayGraphError,
)
from .graph import EventGraph
from .normalizer import EventNormalizer, NormalizationReport
from .builder import BuildResult, GraphBuilder
from .timeline import TimelineIndex
from .visibility import VisibilityProjector, VisibilityState
from .playback import PlaybackController, PlaybackState, PlaybackTicker
from .session import ReplaySession, ReplaySnapshot

__all__ = [
    # Types
    "EdgeKind", "EventType", "GraphEdge", "GraphNode", "LogEvent",
    "NodeKind", "NormalizedEvent",
    # Errors
    "EmptyGraph", "EventError", "MalformedTimestamp", "MalformedURL",
    "NodeNotFoundError", "ReplayGraphError",
    # Engine
    "EventGraph", "EventNormalizer", "NormalizationReport",
    "BuildResult", "GraphBuilder", "TimelineIndex",
    "VisibilityProjector", "VisibilityState",
    "PlaybackController", "PlaybackState", "PlaybackTicker",
    "ReplaySession", "ReplaySnapshot",
]

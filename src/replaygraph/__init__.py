"""
replaygraph - Causal replay engine for client telemetry.

replaygraph turns a flat, time-ordered log of client events (network
requests, clicks, key presses, errors) into a typed graph of domains,
endpoints and events, infers which adjacent events are causally related,
and projects what is visible at any point of a timeline for playback.

Key Components:
- core: Data types, graph building, timeline, visibility and playback
- analysis: Related-event queries and log search
- cli: Command line interface over JSON log files

Usage:
    from replaygraph import ReplaySession

    session = ReplaySession()
    session.load(events)
    session.seek(50)
    frame = session.snapshot()
"""

__version__ = "0.1.0"

from .core.types import (
    EdgeKind, EventType, GraphEdge, GraphNode, LogEvent, NodeKind,
)
from .core.builder import GraphBuilder
from .core.session import ReplaySession, ReplaySnapshot

__all__ = [
    "__version__",
    "EdgeKind",
    "EventType",
    "GraphEdge",
    "GraphNode",
    "LogEvent",
    "NodeKind",
    "GraphBuilder",
    "ReplaySession",
    "ReplaySnapshot",
]

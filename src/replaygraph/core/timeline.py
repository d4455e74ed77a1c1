"""
Timeline Index.

Derives the global time range of a built graph, evenly spaced markers,
and the mapping between playback position (0-100) and cutoff instant.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List

from ..config import MARKER_COUNT, POSITION_MAX, POSITION_MIN
from .exceptions import EmptyGraph
from .graph import EventGraph


def clamp_position(position: float) -> float:
    return max(POSITION_MIN, min(POSITION_MAX, float(position)))


@dataclass(frozen=True)
class TimelineIndex:
    """Time range and markers over all non-domain nodes of one graph."""

    min_time: datetime | None = None
    max_time: datetime | None = None
    markers: List[datetime] = field(default_factory=list)

    @classmethod
    def from_graph(cls, graph: EventGraph, marker_count: int = MARKER_COUNT) -> "TimelineIndex":
        timestamps = [
            node.timestamp for node in graph.iter_nodes()
            if not node.is_domain and node.timestamp is not None
        ]
        if not timestamps:
            return cls()

        min_time = min(timestamps)
        max_time = max(timestamps)
        span = max_time - min_time
        steps = marker_count - 1
        markers = [min_time + span * k / steps for k in range(marker_count)]
        return cls(min_time=min_time, max_time=max_time, markers=markers)

    @property
    def is_empty(self) -> bool:
        return self.min_time is None

    @property
    def span(self) -> timedelta:
        if self.is_empty:
            return timedelta(0)
        return self.max_time - self.min_time

    def require_range(self) -> tuple:
        """Return (min_time, max_time), raising EmptyGraph when there is none."""
        if self.is_empty:
            raise EmptyGraph()
        return self.min_time, self.max_time

    def cutoff_time(self, position: float) -> datetime | None:
        """Instant for a playback position. None for an empty timeline."""
        if self.is_empty:
            return None
        return self.min_time + self.span * (clamp_position(position) / POSITION_MAX)

    def position_for(self, instant: datetime) -> float:
        """Smallest position whose cutoff includes instant."""
        if self.is_empty or self.span == timedelta(0):
            return POSITION_MIN if self.is_empty or instant <= self.min_time else POSITION_MAX
        ratio = (instant - self.min_time) / self.span
        return clamp_position(ratio * POSITION_MAX)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "min_time": self.min_time.isoformat() if self.min_time else None,
            "max_time": self.max_time.isoformat() if self.max_time else None,
            "markers": [m.isoformat() for m in self.markers],
        }

"""
Visibility Projector.

Computes which nodes and edges are visible at a playback position, given
an optional event-type filter. Each projection is a full, side-effect free
recomputation, so re-running it with the same inputs yields identical
output.
"""

from datetime import datetime
from typing import Dict, Iterable, Set, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .graph import EventGraph
from .timeline import TimelineIndex, clamp_position
from .types import GraphNode

EdgeKey = Tuple[str, str, str]


class Visibility(BaseModel):
    visible: bool
    opacity: float

    model_config = ConfigDict(frozen=True)


class VisibilityCounts(BaseModel):
    """Visible/total counts over non-domain nodes."""
    total: int = 0
    visible: int = 0

    model_config = ConfigDict(frozen=True)


class VisibilityState(BaseModel):
    position: float = 0.0
    cutoff: datetime | None = None
    filtered_types: Tuple[str, ...] = ()
    nodes: Dict[str, Visibility] = Field(default_factory=dict)
    edges: Dict[EdgeKey, Visibility] = Field(default_factory=dict)
    counts: VisibilityCounts = Field(default_factory=VisibilityCounts)

    model_config = ConfigDict(frozen=True)

    def is_visible(self, node_id: str) -> bool:
        state = self.nodes.get(node_id)
        return bool(state and state.visible)

    def visible_node_ids(self) -> Set[str]:
        return {node_id for node_id, state in self.nodes.items() if state.visible}

    def visible_edge_keys(self) -> Set[EdgeKey]:
        return {key for key, state in self.edges.items() if state.visible}


_SHOWN = Visibility(visible=True, opacity=1.0)
_HIDDEN = Visibility(visible=False, opacity=0.0)


class VisibilityProjector:
    """
    Owns the event-type filter and the last projected state for one graph.
    """

    def __init__(self, graph: EventGraph, timeline: TimelineIndex | None = None):
        self.graph = graph
        self.timeline = timeline or TimelineIndex.from_graph(graph)
        self._filtered_types: Set[str] = set()
        self.state = VisibilityState()

    @property
    def filtered_types(self) -> Set[str]:
        return set(self._filtered_types)

    def toggle_type(self, event_type: str) -> Set[str]:
        """Add the type to the filter, or remove it if already present."""
        if event_type in self._filtered_types:
            self._filtered_types.discard(event_type)
        else:
            self._filtered_types.add(event_type)
        return self.filtered_types

    def set_filter(self, event_types: Iterable[str]) -> None:
        self._filtered_types = set(event_types)

    def clear_filter(self) -> None:
        self._filtered_types.clear()

    def is_node_visible(self, node: GraphNode, cutoff: datetime | None) -> bool:
        if node.is_domain:
            return True
        if cutoff is None or node.timestamp is None or node.timestamp > cutoff:
            return False
        return not self._filtered_types or node.event_type in self._filtered_types

    def project(self, position: float) -> VisibilityState:
        """Recompute visibility for the given position and the current filter."""
        position = clamp_position(position)
        cutoff = self.timeline.cutoff_time(position)

        nodes: Dict[str, Visibility] = {}
        total = 0
        visible = 0
        for node in self.graph.iter_nodes():
            shown = self.is_node_visible(node, cutoff)
            nodes[node.id] = _SHOWN if shown else _HIDDEN
            if not node.is_domain:
                total += 1
                if shown:
                    visible += 1

        edges: Dict[EdgeKey, Visibility] = {}
        for edge in self.graph.iter_edges():
            shown = nodes[edge.source].visible and nodes[edge.target].visible
            edges[edge.key] = _SHOWN if shown else _HIDDEN

        self.state = VisibilityState(
            position=position,
            cutoff=cutoff,
            filtered_types=tuple(sorted(self._filtered_types)),
            nodes=nodes,
            edges=edges,
            counts=VisibilityCounts(total=total, visible=visible),
        )
        return self.state

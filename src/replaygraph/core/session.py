"""
Replay Session.

Bundles everything derived from one log batch (graph, timeline, projector)
with the playback controller, and exposes the output interface consumed by
a rendering layer.

Loading a new batch builds the complete bundle first and then swaps it in
under the session lock, so readers never observe a graph from one batch
combined with visibility computed against another.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Mapping, Set

from pydantic import BaseModel, Field

from ..config import EngineConfig
from .builder import BuildResult, GraphBuilder
from .playback import PlaybackController, PlaybackState
from .timeline import TimelineIndex
from .types import LogEvent
from .visibility import VisibilityCounts, VisibilityProjector, VisibilityState

if TYPE_CHECKING:
    from ..analysis.related import RelationQuery

logger = logging.getLogger(__name__)


class NodeView(BaseModel):
    """A node as delivered to the renderer, with its current visibility."""
    id: str
    kind: str
    event_type: str | None = None
    timestamp: datetime | None = None
    label: str = ""
    attributes: Dict[str, Any] = Field(default_factory=dict)
    visible: bool = False
    opacity: float = 0.0


class EdgeView(BaseModel):
    source: str
    target: str
    kind: str
    weight: float
    timestamp: datetime
    label: str = ""
    visible: bool = False
    opacity: float = 0.0


class ReplaySnapshot(BaseModel):
    """Everything a renderer needs for one frame."""
    nodes: List[NodeView] = Field(default_factory=list)
    edges: List[EdgeView] = Field(default_factory=list)
    markers: List[datetime] = Field(default_factory=list)
    counts: VisibilityCounts = Field(default_factory=VisibilityCounts)
    cutoff: datetime | None = None
    playback: PlaybackState = Field(default_factory=PlaybackState)
    filtered_types: List[str] = Field(default_factory=list)
    event_types: List[str] = Field(default_factory=list)
    dropped_count: int = 0
    rejected_count: int = 0


@dataclass(frozen=True)
class _Bundle:
    build: BuildResult
    timeline: TimelineIndex
    projector: VisibilityProjector
    relations: "RelationQuery"


class ReplaySession:
    """
    Owns the current log batch and its playback.

    Every position or filter change re-runs the projection.
    """

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or EngineConfig()
        self.lock = threading.RLock()
        self.builder = GraphBuilder(self.config)
        self.playback = PlaybackController(self.config, lock=self.lock)
        self.playback.subscribe(self._on_playback_change)
        self._bundle = self._make_bundle(self.builder.build([]))

    def _make_bundle(self, build: BuildResult) -> _Bundle:
        from ..analysis.related import RelationQuery

        timeline = TimelineIndex.from_graph(build.graph, self.config.marker_count)
        projector = VisibilityProjector(build.graph, timeline)
        projector.project(0.0)
        return _Bundle(
            build=build,
            timeline=timeline,
            projector=projector,
            relations=RelationQuery(build.graph),
        )

    def _on_playback_change(self, state: PlaybackState) -> None:
        self._bundle.projector.project(state.position)

    # =========================================================================
    # Input
    # =========================================================================

    def load(self, events: Iterable[LogEvent | Mapping[str, Any]]) -> BuildResult:
        """Replace the current batch. Playback and filters are reset."""
        bundle = self._make_bundle(self.builder.build(events))
        with self.lock:
            self._bundle = bundle
            self.playback.restart()
        logger.info(
            f"Loaded {bundle.build.graph.node_count} nodes, "
            f"{bundle.build.graph.edge_count} edges"
        )
        return bundle.build

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def build_result(self) -> BuildResult:
        return self._bundle.build

    @property
    def timeline(self) -> TimelineIndex:
        return self._bundle.timeline

    @property
    def visibility(self) -> VisibilityState:
        return self._bundle.projector.state

    def related_nodes(self, node_id: str) -> Set[str]:
        return self._bundle.relations.related_nodes(node_id)

    # =========================================================================
    # Controls
    # =========================================================================

    def play(self) -> PlaybackState:
        return self.playback.play()

    def pause(self) -> PlaybackState:
        return self.playback.pause()

    def seek(self, position: float) -> PlaybackState:
        return self.playback.seek(position)

    def reset(self) -> PlaybackState:
        return self.playback.reset()

    def jump_to_end(self) -> PlaybackState:
        return self.playback.jump_to_end()

    def cycle_speed(self) -> PlaybackState:
        return self.playback.cycle_speed()

    def tick(self) -> bool:
        return self.playback.tick()

    def toggle_type(self, event_type: str) -> Set[str]:
        with self.lock:
            projector = self._bundle.projector
            types = projector.toggle_type(event_type)
            projector.project(self.playback.state.position)
            return types

    def set_filter(self, event_types: Iterable[str]) -> None:
        with self.lock:
            projector = self._bundle.projector
            projector.set_filter(event_types)
            projector.project(self.playback.state.position)

    # =========================================================================
    # Output
    # =========================================================================

    def snapshot(self) -> ReplaySnapshot:
        with self.lock:
            bundle = self._bundle
            state = bundle.projector.state
            playback = self.playback.state

        graph = bundle.build.graph
        nodes = []
        for node in graph.iter_nodes():
            vis = state.nodes.get(node.id)
            nodes.append(NodeView(
                id=node.id,
                kind=node.kind.value,
                event_type=node.event_type,
                timestamp=node.timestamp,
                label=node.label,
                attributes=node.attributes,
                visible=bool(vis and vis.visible),
                opacity=vis.opacity if vis else 0.0,
            ))

        edges = []
        for edge in graph.iter_edges():
            vis = state.edges.get(edge.key)
            edges.append(EdgeView(
                source=edge.source,
                target=edge.target,
                kind=edge.kind.value,
                weight=edge.weight,
                timestamp=edge.timestamp,
                label=edge.label,
                visible=bool(vis and vis.visible),
                opacity=vis.opacity if vis else 0.0,
            ))

        return ReplaySnapshot(
            nodes=nodes,
            edges=edges,
            markers=list(bundle.timeline.markers),
            counts=state.counts,
            cutoff=state.cutoff,
            playback=playback,
            filtered_types=list(state.filtered_types),
            event_types=bundle.build.event_types,
            dropped_count=bundle.build.dropped_count,
            rejected_count=bundle.build.rejected_count,
        )

"""
Graph Builder.

Constructs the node/edge set from a normalized event sequence in three
passes:

1. Domain pass: one Domain node per hostname seen among network requests.
2. Node pass: one Endpoint or Event node per surviving event, plus a
   DomainEndpoint edge for each endpoint.
3. Sequential-link pass: causal or temporal edges between adjacent events
   that are both represented in the graph.

A malformed event only suppresses its own node and edges. The builder
never raises for individual events.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from ..config import EngineConfig
from .exceptions import EventError, MalformedURL
from .graph import EventGraph
from .linking import SequentialLinker
from .normalizer import EventNormalizer, NormalizationReport
from .types import (
    ClickData,
    EdgeKind,
    ErrorData,
    EventType,
    GenericData,
    GraphEdge,
    GraphNode,
    KeydownData,
    LogEvent,
    NetworkRequestData,
    NodeKind,
    NormalizedEvent,
)


@dataclass
class BuildResult:
    """Output of one graph build, owned exclusively by its log batch."""

    graph: EventGraph
    normalization: NormalizationReport
    dropped: List[EventError] = field(default_factory=list)

    @property
    def nodes(self) -> List[GraphNode]:
        return list(self.graph.iter_nodes())

    @property
    def edges(self) -> List[GraphEdge]:
        return list(self.graph.iter_edges())

    @property
    def dropped_count(self) -> int:
        return len(self.dropped)

    @property
    def rejected_count(self) -> int:
        return self.normalization.rejected_count

    @property
    def event_types(self) -> List[str]:
        return self.normalization.event_types


DOMAIN_PREFIX = "domain:"


def domain_node_id(host: str) -> str:
    """Id of the Domain node for a hostname, kept apart from event ids."""
    return f"{DOMAIN_PREFIX}{host}"


def _endpoint_host(event: NormalizedEvent) -> str:
    """Hostname of a network request. Raises MalformedURL when unusable."""
    payload = event.payload
    if not isinstance(payload, NetworkRequestData):
        raise MalformedURL(event.source.data.get("url"))
    return payload.hostname()


class GraphBuilder:
    """
    Builds an EventGraph from a log batch.

    Building is a pure function of the input: the same events always give
    the same node ids, edges and counts.
    """

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or EngineConfig()
        self.normalizer = EventNormalizer()
        self.linker = SequentialLinker(self.config)
        self._logger = logging.getLogger(f"{__name__}.GraphBuilder")

    def build(self, events: Iterable[NormalizedEvent | LogEvent | Mapping[str, Any]]) -> BuildResult:
        items = list(events)
        if items and all(isinstance(e, NormalizedEvent) for e in items):
            report = NormalizationReport(events=sorted(items, key=lambda e: e.timestamp))
        else:
            report = self.normalizer.normalize(items)

        graph = EventGraph()
        dropped: List[EventError] = []

        hosts = self._domain_pass(report.events, graph, dropped)
        represented = self._node_pass(report.events, graph, hosts, dropped)
        self._link_pass(report.events, graph, represented)

        self._logger.debug(
            f"Built graph: {graph.node_count} nodes, {graph.edge_count} edges, "
            f"{len(dropped)} dropped, {report.rejected_count} rejected"
        )
        return BuildResult(graph=graph, normalization=report, dropped=dropped)

    # =========================================================================
    # Passes
    # =========================================================================

    def _domain_pass(self, events: Sequence[NormalizedEvent], graph: EventGraph,
                     dropped: List[EventError]) -> Dict[int, str]:
        """Create Domain nodes. Returns event index -> hostname for parseable requests."""
        hosts: Dict[int, str] = {}
        endpoints: Dict[str, List[str]] = {}

        for event in events:
            if not event.is_type(EventType.NETWORK_REQUEST):
                continue
            try:
                host = _endpoint_host(event)
            except MalformedURL as e:
                self._logger.debug(f"Dropping {event.node_id}: {e}")
                dropped.append(EventError(
                    index=event.index,
                    message=str(e),
                    error_type="malformed_url",
                    event_type=event.event_type,
                ))
                continue

            hosts[event.index] = host
            if host not in endpoints:
                endpoints[host] = []
                graph.add_node(GraphNode(id=domain_node_id(host), kind=NodeKind.DOMAIN, label=host))
            endpoints[host].append(event.node_id)

        for host, endpoint_ids in endpoints.items():
            domain = graph.get_node(domain_node_id(host))
            domain.attributes = {
                "endpoints": endpoint_ids,
                "endpoint_count": len(endpoint_ids),
            }
        return hosts

    def _node_pass(self, events: Sequence[NormalizedEvent], graph: EventGraph,
                   hosts: Dict[int, str], dropped: List[EventError]) -> set:
        """Create one node per representable event. Returns the represented indices."""
        represented = set()

        for event in events:
            if event.is_type(EventType.NETWORK_REQUEST):
                host = hosts.get(event.index)
                if host is None:
                    continue
                node = self._endpoint_node(event, host)
            else:
                node = self._event_node(event)

            if not graph.add_node(node):
                self._logger.warning(f"Dropping {event.node_id}: id already used by another node kind")
                dropped.append(EventError(
                    index=event.index,
                    message=f"Node id already in use: {event.node_id}",
                    error_type="id_conflict",
                    event_type=event.event_type,
                ))
                continue

            if node.kind == NodeKind.ENDPOINT:
                graph.add_edge(GraphEdge(
                    source=domain_node_id(host),
                    target=event.node_id,
                    kind=EdgeKind.DOMAIN_ENDPOINT,
                    weight=1.0,
                    timestamp=event.timestamp,
                ))
            represented.add(event.index)

        return represented

    def _link_pass(self, events: Sequence[NormalizedEvent], graph: EventGraph,
                   represented: set) -> None:
        pairs = [
            (current, following)
            for current, following in zip(events, events[1:])
            if current.index in represented and following.index in represented
        ]
        for edge in self.linker.link(pairs):
            graph.add_edge(edge)

    # =========================================================================
    # Node factories
    # =========================================================================

    def _endpoint_node(self, event: NormalizedEvent, host: str) -> GraphNode:
        payload: NetworkRequestData = event.payload
        path = payload.path()
        return GraphNode(
            id=event.node_id,
            kind=NodeKind.ENDPOINT,
            event_type=event.event_type,
            timestamp=event.timestamp,
            label=path,
            attributes={
                "method": payload.method,
                "status": payload.status,
                "status_class": payload.status_class(),
                "path": path,
                "full_url": payload.url,
                "domain": host,
                "duration_ms": payload.time,
            },
            source_event=event.source,
        )

    def _event_node(self, event: NormalizedEvent) -> GraphNode:
        label, attributes = self._describe(event)
        return GraphNode(
            id=event.node_id,
            kind=NodeKind.EVENT,
            event_type=event.event_type,
            timestamp=event.timestamp,
            label=label,
            attributes=attributes,
            source_event=event.source,
        )

    @staticmethod
    def _describe(event: NormalizedEvent) -> tuple:
        """Display label and attributes for a non-network event."""
        payload = event.payload
        if isinstance(payload, ClickData):
            target = f" #{payload.element_id}" if payload.element_id else ""
            label = f"Click: {payload.tag or ''}{target}".rstrip()
            return label, {
                "tag": payload.tag,
                "id": payload.element_id,
                "class": payload.class_name,
                "text": payload.text,
            }
        if isinstance(payload, KeydownData):
            return f"Key: {payload.key}", {"key": payload.key, "target": payload.target}
        if isinstance(payload, ErrorData):
            return f"Error: {payload.message}", {
                "message": payload.message,
                "source": payload.source,
                "stack": payload.stack,
            }
        if isinstance(payload, GenericData):
            return f"{event.event_type} event", dict(payload.raw)
        return f"{event.event_type} event", dict(event.source.data)

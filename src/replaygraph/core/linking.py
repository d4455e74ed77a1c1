"""
Sequential link inference.

Connects temporally adjacent events with either a causal or a temporal
edge. Rules are deterministic heuristics evaluated in priority order; the
first rule that matches a pair decides the edge.

- A click or key press followed by a request: the input triggered it.
- Two requests to the same host: the requests are related.
- Anything else inside the attention window: merely sequential.
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Tuple

from ..config import EngineConfig
from .exceptions import MalformedURL
from .types import EdgeKind, EventType, GraphEdge, NetworkRequestData, NormalizedEvent

logger = logging.getLogger(__name__)

CAUSAL_WEIGHT = 2.0
TEMPORAL_WEIGHT = 1.0

TRIGGERED_LABEL = "Triggered"
RELATED_LABEL = "Related"


def elapsed_ms(first: NormalizedEvent, second: NormalizedEvent) -> float:
    return (second.timestamp - first.timestamp).total_seconds() * 1000.0


class LinkRule(ABC):
    """Abstract base class for sequential link rules."""

    @abstractmethod
    def apply(self, current: NormalizedEvent, following: NormalizedEvent) -> Optional[GraphEdge]:
        """Return an edge for the pair, or None if the rule does not match."""

    @abstractmethod
    def get_name(self) -> str:
        pass

    def _edge(self, current: NormalizedEvent, following: NormalizedEvent,
              kind: EdgeKind, weight: float, label: str = "") -> GraphEdge:
        return GraphEdge(
            source=current.node_id,
            target=following.node_id,
            kind=kind,
            weight=weight,
            timestamp=current.timestamp,
            label=label,
        )


class TriggeredRule(LinkRule):
    """
    User input followed by a network request.

    Direction: click/keydown -> network-request
    """

    def get_name(self) -> str:
        return "TriggeredRule"

    def apply(self, current, following):
        if current.is_type(EventType.CLICK, EventType.KEYDOWN) and following.is_type(EventType.NETWORK_REQUEST):
            return self._edge(current, following, EdgeKind.CAUSAL, CAUSAL_WEIGHT, TRIGGERED_LABEL)
        return None


class RelatedRule(LinkRule):
    """Two network requests to the same hostname."""

    def get_name(self) -> str:
        return "RelatedRule"

    def apply(self, current, following):
        if not (current.is_type(EventType.NETWORK_REQUEST) and following.is_type(EventType.NETWORK_REQUEST)):
            return None
        if not isinstance(current.payload, NetworkRequestData) or not isinstance(following.payload, NetworkRequestData):
            return None
        try:
            same_host = current.payload.hostname() == following.payload.hostname()
        except MalformedURL:
            return None
        if same_host:
            return self._edge(current, following, EdgeKind.CAUSAL, CAUSAL_WEIGHT, RELATED_LABEL)
        return None


class TemporalRule(LinkRule):
    """Fallback: the events are close in time but not causally related."""

    def get_name(self) -> str:
        return "TemporalRule"

    def apply(self, current, following):
        return self._edge(current, following, EdgeKind.TEMPORAL, TEMPORAL_WEIGHT)


class SequentialLinker:
    """Orchestrator for link rules over adjacent event pairs."""

    def __init__(self, config: EngineConfig | None = None, rules: List[LinkRule] | None = None):
        self.config = config or EngineConfig()
        self.rules = rules if rules is not None else [
            TriggeredRule(),
            RelatedRule(),
            TemporalRule(),
        ]

    def link_pair(self, current: NormalizedEvent, following: NormalizedEvent) -> Optional[GraphEdge]:
        """Return the edge for one adjacent pair, or None outside the window."""
        if elapsed_ms(current, following) >= self.config.causal_window_ms:
            return None

        for rule in self.rules:
            try:
                edge = rule.apply(current, following)
            except Exception as e:
                logger.warning(f"Rule {rule.get_name()} failed on {current.node_id}: {e}")
                continue
            if edge is not None:
                return edge
        return None

    def link(self, pairs: Iterable[Tuple[NormalizedEvent, NormalizedEvent]]) -> List[GraphEdge]:
        edges = []
        for current, following in pairs:
            edge = self.link_pair(current, following)
            if edge is not None:
                edges.append(edge)
        return edges

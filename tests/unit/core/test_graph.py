"""Unit tests for the rustworkx-backed EventGraph."""

from datetime import datetime, timezone

import pytest

from replaygraph.core.graph import EventGraph
from replaygraph.core.types import EdgeKind, GraphEdge, GraphNode, NodeKind

T0 = datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def graph():
    g = EventGraph()
    g.add_node(GraphNode(id="domain:a.com", kind=NodeKind.DOMAIN, label="a.com"))
    g.add_node(GraphNode(id="network-request-1", kind=NodeKind.ENDPOINT, timestamp=T0, event_type="network-request"))
    g.add_node(GraphNode(id="click-0", kind=NodeKind.EVENT, timestamp=T0, event_type="click"))
    g.add_node(GraphNode(id="error-2", kind=NodeKind.EVENT, timestamp=T0, event_type="error"))
    g.add_edge(GraphEdge(source="domain:a.com", target="network-request-1", kind=EdgeKind.DOMAIN_ENDPOINT, timestamp=T0))
    g.add_edge(GraphEdge(source="click-0", target="network-request-1", kind=EdgeKind.CAUSAL,
                         weight=2.0, timestamp=T0, label="Triggered"))
    return g


class TestEventGraph:
    def test_counts(self, graph):
        assert graph.node_count == 4
        assert graph.edge_count == 2
        assert not graph.is_empty

    def test_add_node_updates_existing(self, graph):
        graph.add_node(GraphNode(id="click-0", kind=NodeKind.EVENT, label="updated"))
        assert graph.node_count == 4
        assert graph.get_node("click-0").label == "updated"

    def test_add_node_refuses_kind_change(self, graph):
        assert graph.add_node(GraphNode(id="click-0", kind=NodeKind.DOMAIN, label="click-0")) is False
        assert graph.get_node("click-0").kind == NodeKind.EVENT
        assert graph.node_count == 4

    def test_add_edge_requires_both_ends(self, graph):
        edge = GraphEdge(source="click-0", target="ghost", kind=EdgeKind.TEMPORAL, timestamp=T0)
        assert graph.add_edge(edge) is False
        assert graph.edge_count == 2

    def test_get_missing_node(self, graph):
        assert graph.get_node("ghost") is None
        assert not graph.has_node("ghost")

    def test_has_edge_is_directed(self, graph):
        assert graph.has_edge("click-0", "network-request-1")
        assert not graph.has_edge("network-request-1", "click-0")

    def test_edges_between(self, graph):
        edges = graph.get_edges_between("click-0", "network-request-1")
        assert len(edges) == 1
        assert edges[0].label == "Triggered"
        assert graph.get_edges_between("error-2", "click-0") == []

    def test_neighbors_ignore_direction(self, graph):
        assert graph.neighbors("network-request-1") == {"domain:a.com", "click-0"}
        assert graph.neighbors("click-0") == {"network-request-1"}
        assert graph.neighbors("error-2") == set()
        assert graph.neighbors("ghost") == set()

    def test_by_kind(self, graph):
        assert [n.id for n in graph.get_nodes_by_kind(NodeKind.EVENT)] == ["click-0", "error-2"]
        assert len(graph.get_edges_by_kind(EdgeKind.CAUSAL)) == 1
        assert graph.get_nodes_by_kind(NodeKind.DOMAIN)[0].id == "domain:a.com"

    def test_iteration_order_is_insertion_order(self, graph):
        ids = [n.id for n in graph.iter_nodes()]
        assert ids == ["domain:a.com", "network-request-1", "click-0", "error-2"]

    def test_stats(self, graph):
        stats = graph.get_stats()
        assert stats["total_nodes"] == 4
        assert stats["nodes_by_kind"] == {"domain": 1, "endpoint": 1, "event": 2}
        assert stats["edges_by_kind"] == {"domain-endpoint": 1, "causal": 1}
        assert stats["orphans"] == 1
        assert stats["backend"] == "rustworkx"

    def test_to_dict(self, graph):
        data = graph.to_dict()
        assert len(data["nodes"]) == 4
        assert data["edges"][1]["kind"] == "causal"

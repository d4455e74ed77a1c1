"""Unit tests for relation queries."""

import pytest

from replaygraph.analysis.related import RelationQuery
from replaygraph.core.builder import GraphBuilder
from replaygraph.core.demo import DemoManager
from replaygraph.core.exceptions import NodeNotFoundError


@pytest.fixture
def query():
    return RelationQuery(GraphBuilder().build(DemoManager.SAMPLE_LOGS).graph)


class TestRelationQuery:
    def test_includes_self_and_both_directions(self, query):
        related = query.related_nodes("network-request-3")
        assert related == {
            "network-request-3",
            "domain:api.example.com",
            "network-request-2",
            "network-request-4",
        }

    def test_domain_relates_to_its_endpoints(self, query):
        related = query.related_nodes("domain:cdn.example.com")
        assert related == {"domain:cdn.example.com", "network-request-5"}

    def test_isolated_node_is_singleton(self, query):
        assert query.related_nodes("scroll-13") == {"scroll-13"}

    def test_unknown_node(self, query):
        with pytest.raises(NodeNotFoundError):
            query.related_nodes("click-99")

    def test_breakdown(self, query):
        breakdown = query.breakdown("network-request-7")
        assert breakdown == {
            "domain": ["domain:api.example.com"],
            "endpoint": [],
            "event": ["click-6", "error-8"],
        }

    def test_symmetry(self, query):
        for node in query.graph.iter_nodes():
            for other in query.related_nodes(node.id) - {node.id}:
                assert node.id in query.related_nodes(other)

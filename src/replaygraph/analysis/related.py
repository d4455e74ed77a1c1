"""
Relation Query.

Finds the events directly connected to a node, independent of current
visibility. Used for highlighting and "related events" listings.
"""

from typing import Dict, List, Set

from ..core.exceptions import NodeNotFoundError
from ..core.graph import EventGraph


class RelationQuery:
    """
    Answers adjacency questions against one built graph.
    """

    def __init__(self, graph: EventGraph):
        self.graph = graph

    def related_nodes(self, node_id: str) -> Set[str]:
        """
        Return node_id plus every node sharing an edge with it.

        A node without edges yields a singleton set.

        Raises:
            NodeNotFoundError: If node_id is not in the graph.
        """
        if not self.graph.has_node(node_id):
            raise NodeNotFoundError(node_id)
        related = self.graph.neighbors(node_id)
        related.add(node_id)
        return related

    def breakdown(self, node_id: str) -> Dict[str, List[str]]:
        """Related node ids (excluding node_id) grouped by node kind."""
        breakdown: Dict[str, List[str]] = {
            "domain": [],
            "endpoint": [],
            "event": [],
        }
        for related_id in sorted(self.related_nodes(node_id) - {node_id}):
            node = self.graph.get_node(related_id)
            breakdown[node.kind.value].append(related_id)
        return breakdown

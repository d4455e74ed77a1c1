"""
Event Graph implementation backed by rustworkx.

It manages:
- The bimap between string node ids and rustworkx integer indices.
- Type-safe GraphNode and GraphEdge storage, in creation order.
- Per-kind node lookups.
- Undirected neighbour queries used for "related events" lookups.
"""

from collections import defaultdict
from typing import Any, Dict, Iterator, List, Optional, Set

import rustworkx as rx

from .types import EdgeKind, GraphEdge, GraphNode, NodeKind


class EventGraph:
    """
    Node/edge store for one log batch.

    Node and edge iteration follows insertion order, which the builder
    keeps deterministic for a given input.
    """

    def __init__(self):
        self._graph = rx.PyDiGraph(multigraph=True)
        self._id_to_idx: Dict[str, int] = {}
        self._idx_to_id: Dict[int, str] = {}
        self._nodes_by_kind: Dict[NodeKind, List[str]] = defaultdict(list)
        self._edges: List[GraphEdge] = []

    def add_node(self, node: GraphNode) -> bool:
        """
        Add or update a node in the graph.

        An existing node is only replaced by a node of the same kind.
        Returns False (and stores nothing) if the id belongs to another kind.
        """
        if node.id in self._id_to_idx:
            idx = self._id_to_idx[node.id]
            if self._graph[idx].kind != node.kind:
                return False
            self._graph[idx] = node
            return True

        idx = self._graph.add_node(node)
        self._id_to_idx[node.id] = idx
        self._idx_to_id[idx] = node.id
        self._nodes_by_kind[node.kind].append(node.id)
        return True

    def add_edge(self, edge: GraphEdge) -> bool:
        """
        Add a directed edge between two existing nodes.

        Returns False (and stores nothing) if either end is missing.
        """
        if edge.source not in self._id_to_idx or edge.target not in self._id_to_idx:
            return False

        u_idx = self._id_to_idx[edge.source]
        v_idx = self._id_to_idx[edge.target]
        self._graph.add_edge(u_idx, v_idx, edge)
        self._edges.append(edge)
        return True

    def get_node(self, node_id: str) -> Optional[GraphNode]:
        """Retrieve a node by id."""
        idx = self._id_to_idx.get(node_id)
        if idx is None:
            return None
        return self._graph[idx]

    def has_node(self, node_id: str) -> bool:
        return node_id in self._id_to_idx

    def has_edge(self, source_id: str, target_id: str) -> bool:
        """Check if an edge exists from source to target."""
        if source_id not in self._id_to_idx or target_id not in self._id_to_idx:
            return False
        return self._graph.has_edge(self._id_to_idx[source_id], self._id_to_idx[target_id])

    def get_edges_between(self, source_id: str, target_id: str) -> List[GraphEdge]:
        if not self.has_edge(source_id, target_id):
            return []
        return list(self._graph.get_all_edge_data(
            self._id_to_idx[source_id], self._id_to_idx[target_id]
        ))

    def get_nodes_by_kind(self, kind: NodeKind) -> List[GraphNode]:
        """Get all nodes of a specific kind, in insertion order."""
        return [self.get_node(node_id) for node_id in self._nodes_by_kind.get(kind, [])]

    def get_edges_by_kind(self, kind: EdgeKind) -> List[GraphEdge]:
        return [e for e in self._edges if e.kind == kind]

    def neighbors(self, node_id: str) -> Set[str]:
        """Ids of all nodes sharing an edge with node_id, in either direction."""
        idx = self._id_to_idx.get(node_id)
        if idx is None:
            return set()
        neighbor_indices = set(self._graph.successor_indices(idx))
        neighbor_indices.update(self._graph.predecessor_indices(idx))
        return {self._idx_to_id[i] for i in neighbor_indices}

    def iter_nodes(self) -> Iterator[GraphNode]:
        for idx in sorted(self._idx_to_id):
            yield self._graph[idx]

    def iter_edges(self) -> Iterator[GraphEdge]:
        return iter(self._edges)

    @property
    def node_count(self) -> int:
        return self._graph.num_nodes()

    @property
    def edge_count(self) -> int:
        return self._graph.num_edges()

    @property
    def is_empty(self) -> bool:
        return self.node_count == 0

    def get_stats(self) -> Dict[str, Any]:
        node_counts = {
            kind.value: len(ids)
            for kind, ids in self._nodes_by_kind.items()
        }
        edge_counts: Dict[str, int] = defaultdict(int)
        for edge in self._edges:
            edge_counts[edge.kind.value] += 1

        orphans = len([
            n for n in self._graph.node_indices()
            if self._graph.in_degree(n) == 0 and self._graph.out_degree(n) == 0
        ])

        return {
            "total_nodes": self.node_count,
            "total_edges": self.edge_count,
            "nodes_by_kind": node_counts,
            "edges_by_kind": dict(edge_counts),
            "backend": "rustworkx",
            "orphans": orphans,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [node.model_dump(mode="json") for node in self.iter_nodes()],
            "edges": [edge.model_dump(mode="json") for edge in self.iter_edges()],
            "stats": self.get_stats(),
        }

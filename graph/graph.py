"""
graph.py - Graph Container
==========================
Single source of truth for the graph.  Generators build it, manual edits
mutate it, step generators only read it.

Responsibilities:
  1. CRUD on nodes & edges that can never break an invariant
  2. Adjacency queries                      (neighbours, directed_edges, ...)
  3. Reachability                           (BFS from a source)
  4. Serialisation round-trip               (to_dict / from_dict)

Invariants (enforced here, raised as GraphEditError):
  - node ids are unique, edge ids are unique ("<source>-<target>")
  - an undirected edge never coexists with its reverse
  - every edge endpoint is a node of this graph

Design decisions:
  - Nodes & edges stored in insertion-ordered dicts keyed by id.  Edge
    order matters: Bellman-Ford relaxes edges in exactly this order.
  - A separate adjacency dict `_adj[node_id] -> [edge_id, ...]` is kept
    incrementally so neighbour queries are O(degree), not O(E).
  - An undirected edge is indexed under both endpoints.
"""

from collections import deque
from typing import Dict, Iterator, List, Optional, Set, Tuple

from graph.edge import Edge, edge_id
from graph.errors import GraphEditError
from graph.node import Node


class Graph:
    """
    Attributes:
        nodes    : {node_id: Node}
        edges    : {edge_id: Edge}
        directed : bool - graph-level flag used by generation and manual edits
        _adj     : {node_id: [edge_id, ...]}
    """

    def __init__(self, directed: bool = True):
        self.nodes:    Dict[int, Node] = {}
        self.edges:    Dict[str, Edge] = {}
        self.directed: bool            = directed
        self._adj:     Dict[int, List[str]] = {}

    # ==================================================================
    # NODE CRUD
    # ==================================================================
    def add_node(self, node: Node) -> Node:
        if node.id in self.nodes:
            raise GraphEditError(f"Node {node.label} already exists.")
        self.nodes[node.id] = node
        self._adj.setdefault(node.id, [])
        return node

    def create_node(self, x: float, y: float, node_id: Optional[int] = None) -> Node:
        """Convenience: create + add in one call.  Picks the next free id by default."""
        if node_id is None:
            node_id = self.next_node_id()
        return self.add_node(Node(node_id, x, y))

    def next_node_id(self) -> int:
        return max(self.nodes, default=-1) + 1

    def move_node(self, node_id: int, x: float, y: float) -> Node:
        node = self.require_node(node_id)
        node.move_to(x, y)
        return node

    def remove_node(self, node_id: int) -> List[Edge]:
        """Delete a node together with every incident edge.  Returns the removed edges."""
        self.require_node(node_id)
        removed = [e for e in self.edges.values() if e.touches(node_id)]
        for e in removed:
            self.remove_edge(e.id)
        del self.nodes[node_id]
        self._adj.pop(node_id, None)
        return removed

    def require_node(self, node_id: int) -> Node:
        node = self.nodes.get(node_id)
        if node is None:
            raise GraphEditError(f"Node {node_id} does not exist.")
        return node

    # ==================================================================
    # EDGE CRUD
    # ==================================================================
    def add_edge(self, edge: Edge) -> Edge:
        self.require_node(edge.source)
        self.require_node(edge.target)
        if edge.id in self.edges:
            raise GraphEditError(f"Edge {self._describe(edge)} already exists.")
        reverse = self.edges.get(edge_id(edge.target, edge.source))
        if reverse is not None and (reverse.is_undirected or edge.is_undirected):
            raise GraphEditError(
                f"Edge {self._describe(edge)} would duplicate undirected edge {self._describe(reverse)}."
            )
        self.edges[edge.id] = edge
        self._adj[edge.source].append(edge.id)
        if edge.is_undirected and edge.target != edge.source:
            self._adj[edge.target].append(edge.id)
        return edge

    def create_edge(self, source: int, target: int, weight: float = 1) -> Edge:
        """Create an edge honouring the graph-level directed flag."""
        return self.add_edge(Edge(source, target, weight, is_undirected=not self.directed))

    def set_weight(self, eid: str, weight: float) -> Edge:
        edge = self.require_edge(eid)
        edge.weight = weight
        return edge

    def remove_edge(self, eid: str) -> Edge:
        edge = self.require_edge(eid)
        self._adj[edge.source].remove(eid)
        if edge.is_undirected and edge.target != edge.source:
            self._adj[edge.target].remove(eid)
        del self.edges[eid]
        return edge

    def get_edge(self, eid: str) -> Optional[Edge]:
        return self.edges.get(eid)

    def require_edge(self, eid: str) -> Edge:
        edge = self.edges.get(eid)
        if edge is None:
            raise GraphEditError(f"Edge {eid} does not exist.")
        return edge

    def get_edge_between(self, a: int, b: int) -> Optional[Edge]:
        """Edge that can be walked from a to b, if any."""
        direct = self.edges.get(edge_id(a, b))
        if direct is not None:
            return direct
        reverse = self.edges.get(edge_id(b, a))
        if reverse is not None and reverse.is_undirected:
            return reverse
        return None

    # ==================================================================
    # ADJACENCY QUERIES
    # ==================================================================
    def neighbours(self, node_id: int) -> List[Tuple[int, Edge]]:
        """Return [(neighbour_id, edge)] for every edge walkable out of node_id."""
        result = []
        for eid in self._adj.get(node_id, []):
            edge = self.edges[eid]
            result.append((edge.other_end(node_id), edge))
        return result

    def directed_edges(self) -> Iterator[Tuple[int, int, Edge]]:
        """Yield (u, v, edge) for each traversal direction, in edge order."""
        for edge in self.edges.values():
            yield edge.source, edge.target, edge
            if edge.is_undirected and edge.source != edge.target:
                yield edge.target, edge.source, edge

    def reachable_from(self, source: int) -> Set[int]:
        """Breadth-first search over walkable edges."""
        if source not in self.nodes:
            return set()
        seen = {source}
        queue = deque([source])
        while queue:
            current = queue.popleft()
            for nbr, _ in self.neighbours(current):
                if nbr not in seen:
                    seen.add(nbr)
                    queue.append(nbr)
        return seen

    # ==================================================================
    # RESET
    # ==================================================================
    def clear(self) -> None:
        self.nodes.clear()
        self.edges.clear()
        self._adj.clear()

    # ==================================================================
    # SERIALISATION
    # ==================================================================
    def to_dict(self) -> dict:
        return {
            "directed": self.directed,
            "nodes":    [n.to_dict() for n in self.nodes.values()],
            "edges":    [e.to_dict() for e in self.edges.values()],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Graph":
        g = cls(directed=data.get("directed", True))
        for nd in data.get("nodes", []):
            g.add_node(Node.from_dict(nd))
        for ed in data.get("edges", []):
            g.add_edge(Edge.from_dict(ed))
        return g

    def copy(self) -> "Graph":
        """Deep copy - step generation runs on a snapshot the caller can't mutate."""
        g = Graph(directed=self.directed)
        for node in self.nodes.values():
            g.add_node(node.copy())
        for edge in self.edges.values():
            g.add_edge(edge.copy())
        return g

    # ==================================================================
    # UTILITY
    # ==================================================================
    def node_count(self) -> int:
        return len(self.nodes)

    def edge_count(self) -> int:
        return len(self.edges)

    def has_negative_edges(self) -> bool:
        return any(e.is_negative for e in self.edges.values())

    def node_ids(self) -> List[int]:
        return list(self.nodes.keys())

    def label(self, node_id: int) -> str:
        node = self.nodes.get(node_id)
        return node.label if node else str(node_id)

    def _describe(self, edge: Edge) -> str:
        return f"{self.label(edge.source)}->{self.label(edge.target)}"

    def __repr__(self) -> str:
        return f"Graph(nodes={self.node_count()}, edges={self.edge_count()}, directed={self.directed})"

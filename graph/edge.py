"""
edge.py - Graph Edge
====================
A weighted connection between two node ids.

Design decisions:
  - `source` and `target` are node ids, NOT Node references.
    This keeps edges serialisable and avoids circular references.
  - The id is always "<source>-<target>", so a graph can never hold two
    edges for the same ordered pair.
  - `is_undirected` marks an edge that may be traversed from either end.
    Only one direction is ever stored.
  - `status` is presentation state for the renderer.  The core never
    writes it: the runner publishes a separate overlay keyed by edge id.
"""

from enum import Enum
from typing import Optional


# ---------------------------------------------------------------------------
# Edge status - visual encoding consumed by the renderer
# ---------------------------------------------------------------------------
class EdgeStatus(str, Enum):
    UNVISITED      = "unvisited"       # neutral
    CANDIDATE      = "candidate"       # being checked right now
    INCLUDED       = "included"        # relaxed / on a shortest path
    EXCLUDED       = "excluded"        # rejected (negative for Dijkstra, no improvement, unreachable)
    NEGATIVE_CYCLE = "negativecycle"   # proves a negative cycle


def edge_id(source: int, target: int) -> str:
    return f"{source}-{target}"


class Edge:
    """
    Attributes:
        id                : "<source>-<target>".
        source            : Id of the tail node.
        target            : Id of the head node.
        weight            : Signed numeric cost.
        is_undirected     : If True, traversal works in both directions.
        in_negative_cycle : Set by the negative-cycle injector.
        status            : EdgeStatus for the renderer's own copy.
    """

    __slots__ = ("source", "target", "weight", "is_undirected", "in_negative_cycle", "status")

    def __init__(
        self,
        source: int,
        target: int,
        weight: float = 1,
        is_undirected: bool = False,
        in_negative_cycle: bool = False,
    ):
        self.source:            int        = source
        self.target:            int        = target
        self.weight:            float      = weight
        self.is_undirected:     bool       = is_undirected
        self.in_negative_cycle: bool       = in_negative_cycle
        self.status:            EdgeStatus = EdgeStatus.UNVISITED

    @property
    def id(self) -> str:
        return edge_id(self.source, self.target)

    @property
    def is_negative(self) -> bool:
        return self.weight < 0

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def connects(self, node_a: int, node_b: int) -> bool:
        """True if this edge can be walked from node_a to node_b."""
        if self.source == node_a and self.target == node_b:
            return True
        return self.is_undirected and self.source == node_b and self.target == node_a

    def other_end(self, node_id: int) -> Optional[int]:
        """Given one endpoint, return the reachable other end (None if not traversable)."""
        if node_id == self.source:
            return self.target
        if node_id == self.target and self.is_undirected:
            return self.source
        return None

    def touches(self, node_id: int) -> bool:
        return node_id in (self.source, self.target)

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "id":              self.id,
            "source":          self.source,
            "target":          self.target,
            "weight":          self.weight,
            "isUndirected":    self.is_undirected,
            "isNegative":      self.is_negative,
            "inNegativeCycle": self.in_negative_cycle,
            "status":          self.status.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Edge":
        edge = cls(
            source=int(data["source"]),
            target=int(data["target"]),
            weight=data.get("weight", 1),
            is_undirected=data.get("isUndirected", False),
            in_negative_cycle=data.get("inNegativeCycle", False),
        )
        if "status" in data:
            edge.status = EdgeStatus(data["status"])
        return edge

    def copy(self) -> "Edge":
        return Edge(self.source, self.target, self.weight, self.is_undirected, self.in_negative_cycle)

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        arrow = " <-> " if self.is_undirected else " -> "
        return f"Edge({self.source}{arrow}{self.target}, w={self.weight})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Edge) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

"""
node.py - Graph Node
====================
A positioned vertex.  Identity is a small integer assigned at creation
and stable for the lifetime of the graph; position is the only thing a
manual edit (drag) is allowed to change.

Design decisions:
  - Ids are ints (0..N-1 for generated graphs).  Deleting a node does NOT
    renumber the others, so ids may become sparse after manual edits.
  - The label is derived from the id ('A' + id) unless the caller supplies one.
  - No algorithm state lives here.  Distances, visited flags and so on are
    recorded in Step snapshots, never on the node itself.
"""

import math
from typing import Optional


def node_label(node_id: int) -> str:
    """'A' for 0, 'B' for 1, ...; 'N26', 'N27', ... past the alphabet."""
    if 0 <= node_id < 26:
        return chr(ord("A") + node_id)
    return f"N{node_id}"


class Node:
    """
    Attributes:
        id    : Integer identifier, unique within a graph.
        label : Human-readable name shown on the canvas.
        x, y  : Canvas coordinates in pixels.
    """

    __slots__ = ("id", "label", "x", "y")

    def __init__(self, node_id: int, x: float = 0.0, y: float = 0.0, label: Optional[str] = None):
        self.id:    int   = node_id
        self.label: str   = label or node_label(node_id)
        self.x:     float = float(x)
        self.y:     float = float(y)

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    def distance_to(self, other: "Node") -> float:
        """Euclidean distance between the two node centres."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def move_to(self, x: float, y: float) -> None:
        self.x = float(x)
        self.y = float(y)

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "id":    self.id,
            "label": self.label,
            "x":     self.x,
            "y":     self.y,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Node":
        return cls(node_id=int(data["id"]), x=data["x"], y=data["y"], label=data.get("label"))

    def copy(self) -> "Node":
        return Node(self.id, self.x, self.y, self.label)

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        return f"Node(id={self.id}, label={self.label}, pos=({self.x:.1f},{self.y:.1f}))"

    def __eq__(self, other) -> bool:
        return isinstance(other, Node) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

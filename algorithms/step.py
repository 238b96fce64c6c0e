"""
step.py - Algorithm Step Snapshot
=================================
Every algorithm is a generator that yields Step objects.
A Step is a frozen-in-time record of ONE atomic action:

    - which edge was looked at and what happened to it
    - which edges were newly confirmed on a shortest path
    - the distance array after the action
    - the visited set (Dijkstra) or pass number (Bellman-Ford)
    - the priority list contents (Dijkstra)
    - a plain-English explanation and the pseudocode label it belongs to

Design decisions:
  - Steps are frozen dataclasses.  `visited_nodes` is a frozenset and
    `distance_array` a read-only mapping, so replaying to index k is a
    pure function of the step log.
  - `DijkstraStep` and `BellmanFordStep` share one base and are told apart
    by the `algorithm` class tag, instead of optional fields that are
    only sometimes meaningful.
  - All per-run scratch state (dist, prev, visited, step counter) lives in
    a StepBuilder constructed fresh for every run.  Nothing is module-level.
"""

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import ClassVar, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple, Type

from graph import BELLMAN_FORD, DIJKSTRA, EdgeStatus, Graph

INF = math.inf


def _encode_distance(value: float) -> Optional[float]:
    """JSON has no Infinity; unreachable is sent as None."""
    return None if math.isinf(value) else value


def format_distance(value: float) -> str:
    if math.isinf(value):
        return "∞" if value > 0 else "-∞"
    return f"{value:g}"


# ---------------------------------------------------------------------------
# Small records
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class EdgeUpdate:
    id:     str
    status: EdgeStatus

    def to_dict(self) -> dict:
        return {"id": self.id, "status": self.status.value}


@dataclass(frozen=True)
class HeapEntry:
    id:   int
    dist: float

    def to_dict(self) -> dict:
        return {"id": self.id, "dist": _encode_distance(self.dist)}


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Step:
    """
    Attributes:
        step_number             : 0-based index of this step in the run.
        explanation             : Human-readable "what just happened".
        algorithm_step          : Pseudocode label the step belongs to.
        visited_nodes           : Nodes finalised so far (always empty for Bellman-Ford).
        distance_array          : {node_id: distance}, INF when unknown.
        edge_updates            : Status changes for this step only.
        path_edge_updates       : Edge ids newly confirmed on some shortest path.
        updated_distances       : Nodes whose distance changed in this step.
        current_edge            : Edge being relaxed right now (or None).
        negative_cycle_detected : True only on the step that proves a cycle.
    """

    algorithm: ClassVar[str] = ""

    step_number:             int
    explanation:             str
    algorithm_step:          str
    visited_nodes:           FrozenSet[int]           = frozenset()
    distance_array:          Mapping[int, float]      = field(default_factory=lambda: MappingProxyType({}))
    edge_updates:            Tuple[EdgeUpdate, ...]   = ()
    path_edge_updates:       Tuple[str, ...]          = ()
    updated_distances:       Tuple[int, ...]          = ()
    current_edge:            Optional[str]            = None
    negative_cycle_detected: bool                     = False

    def to_dict(self) -> dict:
        return {
            "algorithm":             self.algorithm,
            "stepNumber":            self.step_number,
            "explanation":           self.explanation,
            "algorithmStep":         self.algorithm_step,
            "visitedNodes":          sorted(self.visited_nodes),
            "distanceArray":         {str(k): _encode_distance(v) for k, v in self.distance_array.items()},
            "edgeUpdates":           [u.to_dict() for u in self.edge_updates],
            "pathEdgeUpdates":       list(self.path_edge_updates),
            "updatedDistances":      list(self.updated_distances),
            "currentEdgeBeingRelaxed": self.current_edge,
            "negativeCycleDetected": self.negative_cycle_detected,
        }


@dataclass(frozen=True)
class DijkstraStep(Step):
    algorithm: ClassVar[str] = DIJKSTRA

    min_heap: Tuple[HeapEntry, ...] = ()

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["minHeap"] = [h.to_dict() for h in self.min_heap]
        return data


@dataclass(frozen=True)
class BellmanFordStep(Step):
    algorithm: ClassVar[str] = BELLMAN_FORD

    iteration_count: int = 0

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["iterationCount"] = self.iteration_count
        return data


# ---------------------------------------------------------------------------
# Final answer
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class ShortestPathResult:
    """
    `paths[x]` runs source -> x and exists only for reachable x other than
    the source.  With a negative cycle `paths` is empty and `distances`
    must not be trusted.
    """

    distances:          Mapping[int, float]
    paths:              Mapping[int, Tuple[int, ...]]
    has_negative_cycle: bool = False

    def path_to(self, node_id: int) -> Tuple[int, ...]:
        return self.paths.get(node_id, ())

    @property
    def reachable_count(self) -> int:
        return sum(1 for d in self.distances.values() if not math.isinf(d))

    def path_edges(self, graph: Graph, destination: Optional[int] = None) -> List[str]:
        """Edge ids along the shortest paths (all of them, or only to `destination`)."""
        targets = [destination] if destination is not None else list(self.paths)
        ids: List[str] = []
        for target in targets:
            path = self.path_to(target)
            for a, b in zip(path, path[1:]):
                edge = graph.get_edge_between(a, b)
                if edge is not None and edge.id not in ids:
                    ids.append(edge.id)
        return ids

    def to_dict(self) -> dict:
        return {
            "distances":        {str(k): _encode_distance(v) for k, v in self.distances.items()},
            "paths":            {str(k): list(v) for k, v in self.paths.items()},
            "hasNegativeCycle": self.has_negative_cycle,
        }


# ---------------------------------------------------------------------------
# Per-run scratch-pad
# ---------------------------------------------------------------------------
class StepBuilder:
    """
    Mutable state for ONE run plus a factory for its Steps.

    Usage inside an algorithm generator:
        sb = StepBuilder(graph, source, DijkstraStep)
        sb.dist[3] = 4
        yield sb.emit("Relaxed edge ...", LABEL, updated=(3,), min_heap=...)
    """

    def __init__(self, graph: Graph, source: int, step_cls: Type[Step]):
        self.graph:    Graph                    = graph
        self.source:   int                      = source
        self.step_cls: Type[Step]               = step_cls
        self.dist:     Dict[int, float]         = {nid: INF for nid in graph.nodes}
        self.prev:     Dict[int, Optional[int]] = {nid: None for nid in graph.nodes}
        self.visited:  set                      = set()
        self.count:    int                      = 0

        self.dist[source] = 0

    def label(self, node_id: int) -> str:
        return self.graph.label(node_id)

    def arrow(self, u: int, v: int) -> str:
        return f"{self.label(u)}→{self.label(v)}"

    def emit(
        self,
        explanation: str,
        algorithm_step: str,
        edge: Optional[str] = None,
        status: Optional[EdgeStatus] = None,
        confirmed: bool = False,
        updated: Iterable[int] = (),
        negative_cycle: bool = False,
        **extra,
    ) -> Step:
        """Snapshot the current state into the next Step."""
        step = self.step_cls(
            step_number=self.count,
            explanation=explanation,
            algorithm_step=algorithm_step,
            visited_nodes=frozenset(self.visited),
            distance_array=MappingProxyType(dict(self.dist)),
            edge_updates=(EdgeUpdate(edge, status),) if edge is not None and status is not None else (),
            path_edge_updates=(edge,) if confirmed and edge is not None else (),
            updated_distances=tuple(updated),
            current_edge=edge,
            negative_cycle_detected=negative_cycle,
            **extra,
        )
        self.count += 1
        return step

    def build_paths(self) -> Dict[int, Tuple[int, ...]]:
        """Walk `prev` back to the source for every reachable node."""
        paths = {}
        for nid, d in self.dist.items():
            if nid == self.source or math.isinf(d):
                continue
            path: List[int] = []
            cur: Optional[int] = nid
            while cur is not None:
                path.append(cur)
                cur = self.prev[cur]
            paths[nid] = tuple(reversed(path))
        return paths

    def result(self, has_negative_cycle: bool = False) -> ShortestPathResult:
        paths = {} if has_negative_cycle else self.build_paths()
        return ShortestPathResult(
            distances=MappingProxyType(dict(self.dist)),
            paths=MappingProxyType(paths),
            has_negative_cycle=has_negative_cycle,
        )

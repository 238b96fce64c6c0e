"""
recorder.py - Run Recorder & Analytics
======================================
Records a complete algorithm run (all Steps plus the final result), then
computes the metrics the analytics card and comparison view need.

Usage:
    rec = Recorder()
    rec.start("dijkstra", graph, source=0, destination=4)
    metrics = rec.run_to_completion()
    rec.export()                     # serialisable snapshot

Comparison:
    Run one Recorder per algorithm on the SAME graph, then
    compare(rec1, rec2) -> ComparisonResult.
"""

import math
import sys
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from algorithms import AlgoInfo, generate_steps, get_algorithm
from algorithms.step import ShortestPathResult, Step
from graph import EdgeStatus, Graph


# ---------------------------------------------------------------------------
# Metrics dataclass - what the analytics card renders
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    algo_key:        str   = ""
    algo_label:      str   = ""
    source:          str   = ""
    destination:     str   = ""
    nodes_visited:   int   = 0          # Dijkstra extractions; reachable nodes for Bellman-Ford
    edges_checked:   int   = 0          # candidate steps
    edges_relaxed:   int   = 0          # successful relaxations
    edges_skipped:   int   = 0          # negative / unreachable / no improvement
    reachable_nodes: int   = 0
    path_length:     int   = 0          # edges on the path to `destination`
    path_cost:       Optional[float] = None
    total_steps:     int   = 0
    wall_time_ms:    float = 0.0
    memory_bytes:    int   = 0          # approx size of the step buffer
    negative_cycle:  bool  = False


# ---------------------------------------------------------------------------
# ComparisonResult - side-by-side analytics
# ---------------------------------------------------------------------------
@dataclass
class ComparisonResult:
    left:  RunMetrics = field(default_factory=RunMetrics)
    right: RunMetrics = field(default_factory=RunMetrics)
    # derived
    winner_checks:   str  = ""   # fewer edges looked at
    winner_relaxed:  str  = ""   # fewer distance updates
    winner_steps:    str  = ""   # shorter step log
    distances_agree: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    """
    Attributes:
        steps   : Full list of Steps from the run.
        result  : The run's ShortestPathResult.
        metrics : Computed RunMetrics (available after run_to_completion).
    """

    def __init__(self):
        self.steps:   List[Step]                   = []
        self.result:  Optional[ShortestPathResult] = None
        self.metrics: Optional[RunMetrics]         = None

        self._algo_info:   Optional[AlgoInfo] = None
        self._graph:       Optional[Graph]    = None
        self._source:      Optional[int]      = None
        self._destination: Optional[int]      = None

    # ------------------------------------------------------------------
    # Setup & run
    # ------------------------------------------------------------------
    def start(
        self,
        algo_key: str,
        graph: Graph,
        source: int,
        destination: Optional[int] = None,
    ) -> None:
        info = get_algorithm(algo_key)
        if info is None:
            raise ValueError(f"Unknown algorithm: {algo_key}")
        graph.require_node(source)

        self._algo_info   = info
        self._graph       = graph.copy()
        self._source      = source
        self._destination = destination
        self.steps        = []
        self.result       = None
        self.metrics      = None

    def run_to_completion(self) -> RunMetrics:
        """Generate every step, then compute metrics."""
        if self._algo_info is None:
            raise RuntimeError("Call start() first.")

        started = time.monotonic()
        self.steps, self.result = generate_steps(self._algo_info.key, self._graph, self._source)
        wall_ms = (time.monotonic() - started) * 1000

        self.metrics = self._compute_metrics(wall_ms)
        return self.metrics

    def get_metrics(self) -> Optional[RunMetrics]:
        return self.metrics

    # ------------------------------------------------------------------
    # Export (serialisable snapshot)
    # ------------------------------------------------------------------
    def export(self) -> Dict[str, Any]:
        return {
            "algo_key":    self._algo_info.key if self._algo_info else "",
            "source":      self._source,
            "destination": self._destination,
            "graph":       self._graph.to_dict() if self._graph else {},
            "metrics":     asdict(self.metrics) if self.metrics else {},
            "result":      self.result.to_dict() if self.result else None,
            "steps":       [s.to_dict() for s in self.steps],
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _compute_metrics(self, wall_ms: float) -> RunMetrics:
        info   = self._algo_info
        graph  = self._graph
        result = self.result
        last   = self.steps[-1] if self.steps else None

        checked = relaxed = skipped = 0
        for s in self.steps:
            for update in s.edge_updates:
                if update.status == EdgeStatus.CANDIDATE:
                    checked += 1
                elif update.status == EdgeStatus.INCLUDED:
                    relaxed += 1
                elif update.status == EdgeStatus.EXCLUDED:
                    skipped += 1

        reachable = result.reachable_count if result else 0
        visited   = len(last.visited_nodes) if last and last.visited_nodes else reachable

        path_length, path_cost = 0, None
        if result and self._destination is not None:
            path = result.path_to(self._destination)
            if path:
                path_length = len(path) - 1
                path_cost = result.distances[self._destination]
            elif self._destination == self._source and not result.has_negative_cycle:
                path_cost = 0

        # approximate memory: sizeof the steps buffer
        mem = sys.getsizeof(self.steps)
        for s in self.steps:
            mem += sys.getsizeof(s)

        return RunMetrics(
            algo_key=info.key,
            algo_label=info.label,
            source=graph.label(self._source),
            destination=graph.label(self._destination) if self._destination is not None else "",
            nodes_visited=visited,
            edges_checked=checked,
            edges_relaxed=relaxed,
            edges_skipped=skipped,
            reachable_nodes=reachable,
            path_length=path_length,
            path_cost=path_cost,
            total_steps=len(self.steps),
            wall_time_ms=round(wall_ms, 2),
            memory_bytes=mem,
            negative_cycle=bool(result and result.has_negative_cycle),
        )


# ---------------------------------------------------------------------------
# Comparison helper
# ---------------------------------------------------------------------------
def _same_distances(left: Recorder, right: Recorder) -> bool:
    if left.result is None or right.result is None:
        return False
    a, b = left.result.distances, right.result.distances
    if a.keys() != b.keys():
        return False
    return all(
        (math.isinf(a[k]) and math.isinf(b[k])) or math.isclose(a[k], b[k])
        for k in a
    )


def compare(left: Recorder, right: Recorder) -> ComparisonResult:
    """Given two completed Recorders, produce a ComparisonResult."""
    l = left.metrics  or RunMetrics()
    r = right.metrics or RunMetrics()

    def winner(l_val, r_val, l_key, r_key, lower_is_better=True):
        if l_val == r_val:
            return "tie"
        if lower_is_better:
            return l_key if l_val < r_val else r_key
        return l_key if l_val > r_val else r_key

    return ComparisonResult(
        left=l,
        right=r,
        winner_checks =winner(l.edges_checked, r.edges_checked, l.algo_label, r.algo_label),
        winner_relaxed=winner(l.edges_relaxed, r.edges_relaxed, l.algo_label, r.algo_label),
        winner_steps  =winner(l.total_steps, r.total_steps, l.algo_label, r.algo_label),
        distances_agree=_same_distances(left, right),
    )

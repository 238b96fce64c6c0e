"""
algorithms/__init__.py - Algorithm Registry
===========================================
Single source of truth for every algorithm the stepper knows about.

    from algorithms import REGISTRY, get_algorithm, generate_steps

REGISTRY is a dict:
    {
        "dijkstra":     AlgoInfo(key, label, fn, pseudocode, ...),
        "bellman_ford": AlgoInfo(...),
    }

Every `fn` is a generator function `fn(graph, source, on_result=None)`
that yields Steps and returns a ShortestPathResult.  `generate_steps`
drains one into a list: steps are always produced in full before
playback begins.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from graph import BELLMAN_FORD, DIJKSTRA, Graph
from algorithms.bellman_ford import bellman_ford as _bf,       PSEUDOCODE as _bf_pc
from algorithms.dijkstra     import dijkstra     as _dijkstra, PSEUDOCODE as _dij_pc
from algorithms.step import (
    BellmanFordStep, DijkstraStep, EdgeUpdate, HeapEntry, ShortestPathResult, Step,
)

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# AlgoInfo - metadata card for each algorithm
# ---------------------------------------------------------------------------
@dataclass
class AlgoInfo:
    key:               str                    # registry key, e.g. "dijkstra"
    label:             str                    # human label
    fn:                Callable               # the generator function
    pseudocode:        List[str]              # labels used as Step.algorithm_step
    tags:              List[str] = field(default_factory=list)
    supports_negative: bool     = False       # relaxes negative edges?
    complexity_time:   str      = ""
    complexity_space:  str      = ""
    description:       str      = ""


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
REGISTRY: Dict[str, AlgoInfo] = {

    DIJKSTRA: AlgoInfo(
        key=DIJKSTRA, label="Dijkstra's Algorithm", fn=_dijkstra, pseudocode=_dij_pc,
        tags=["weighted", "shortest-path"],
        complexity_time="O(V² + E)", complexity_space="O(V)",
        description="Greedily extracts the closest unvisited node. Skips negative edges.",
    ),

    BELLMAN_FORD: AlgoInfo(
        key=BELLMAN_FORD, label="Bellman-Ford", fn=_bf, pseudocode=_bf_pc,
        tags=["weighted", "shortest-path", "negative-edges"],
        supports_negative=True,
        complexity_time="O(V · E)", complexity_space="O(V)",
        description="Relaxes every edge |V|-1 times. Handles negative edges and detects negative cycles.",
    ),
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_algorithm(key: str) -> Optional[AlgoInfo]:
    """Return AlgoInfo by key, or None."""
    return REGISTRY.get(key)


def list_algorithms() -> List[AlgoInfo]:
    """Return all registered algorithms in insertion order."""
    return list(REGISTRY.values())


def generate_steps(
    algorithm: str,
    graph: Graph,
    source: int,
    on_result: Optional[Callable[[ShortestPathResult], None]] = None,
) -> Tuple[List[Step], ShortestPathResult]:
    """Run `algorithm` to completion.  `on_result` fires exactly once, at the end."""
    info = get_algorithm(algorithm)
    if info is None:
        raise ValueError(f"Unknown algorithm: {algorithm}")

    gen = info.fn(graph, source, on_result)
    steps: List[Step] = []
    while True:
        try:
            steps.append(next(gen))
        except StopIteration as stop:
            result = stop.value
            break

    log.debug("%s from %s: %d steps", info.key, graph.label(source), len(steps))
    return steps, result


__all__ = [
    "AlgoInfo",
    "REGISTRY",
    "get_algorithm",
    "list_algorithms",
    "generate_steps",
    "Step",
    "DijkstraStep",
    "BellmanFordStep",
    "EdgeUpdate",
    "HeapEntry",
    "ShortestPathResult",
]

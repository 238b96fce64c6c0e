"""
replay.py - Derived State for a Step Log
========================================
Everything the runner shows is a pure function of (steps, count), where
`count` is the number of steps applied so far:

    count = 0           nothing applied yet
    count = k           steps[0 .. k-1] applied, steps[k-1] on screen
    count = len(steps)  run finished

Edge overlay for count k:
  1. every edge starts `unvisited`
  2. the last applied step's `edge_updates` are written on top
  3. every confirmed path edge (union of `path_edge_updates` over the
     applied steps) is re-written as `included`; a `negativecycle` mark
     from the current step is kept, it is the one thing worth seeing

Seeking backwards therefore never "undoes" anything: it just replays a
shorter prefix.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Optional, Sequence, Tuple

from graph import EdgeStatus
from algorithms.step import BellmanFordStep, DijkstraStep, HeapEntry, Step


@dataclass(frozen=True)
class ReplayState:
    current_step:            int                      = 0
    total_steps:             int                      = 0
    explanation:             str                      = ""
    algorithm_step:          str                      = ""
    visited_nodes:           FrozenSet[int]           = frozenset()
    distance_array:          Dict[int, float]         = field(default_factory=dict)
    min_heap:                Tuple[HeapEntry, ...]    = ()
    iteration_count:         int                      = 0
    negative_cycle_detected: bool                     = False
    current_edge:            Optional[str]            = None
    updated_distances:       Tuple[int, ...]          = ()
    confirmed_edges:         FrozenSet[str]           = frozenset()
    edge_overlay:            Dict[str, EdgeStatus]    = field(default_factory=dict)

    @property
    def at_end(self) -> bool:
        return self.current_step >= self.total_steps


def clamp(count: int, total: int) -> int:
    return max(0, min(count, total))


def confirmed_path_edges(steps: Sequence[Step], count: int) -> FrozenSet[str]:
    """Union of `path_edge_updates` over steps[0 .. count-1], rebuilt from scratch."""
    confirmed = set()
    for step in steps[:clamp(count, len(steps))]:
        confirmed.update(step.path_edge_updates)
    return frozenset(confirmed)


def edge_overlay(
    edge_ids: Iterable[str],
    step: Optional[Step],
    confirmed: FrozenSet[str],
) -> Dict[str, EdgeStatus]:
    overlay = {eid: EdgeStatus.UNVISITED for eid in edge_ids}
    pinned = set()
    if step is not None:
        for update in step.edge_updates:
            if update.id in overlay:
                overlay[update.id] = update.status
                if update.status == EdgeStatus.NEGATIVE_CYCLE:
                    pinned.add(update.id)
    for eid in confirmed:
        if eid in overlay and eid not in pinned:
            overlay[eid] = EdgeStatus.INCLUDED
    return overlay


def replay(steps: Sequence[Step], count: int, edge_ids: Iterable[str]) -> ReplayState:
    """State after applying steps[0 .. count-1].  `count` is clamped."""
    total = len(steps)
    count = clamp(count, total)
    confirmed = confirmed_path_edges(steps, count)

    if count == 0:
        return ReplayState(
            total_steps=total,
            confirmed_edges=confirmed,
            edge_overlay=edge_overlay(edge_ids, None, confirmed),
        )

    step = steps[count - 1]
    return ReplayState(
        current_step=count,
        total_steps=total,
        explanation=step.explanation,
        algorithm_step=step.algorithm_step,
        visited_nodes=step.visited_nodes,
        distance_array=dict(step.distance_array),
        min_heap=step.min_heap if isinstance(step, DijkstraStep) else (),
        iteration_count=step.iteration_count if isinstance(step, BellmanFordStep) else 0,
        negative_cycle_detected=any(s.negative_cycle_detected for s in steps[:count]),
        current_edge=step.current_edge,
        updated_distances=step.updated_distances,
        confirmed_edges=confirmed,
        edge_overlay=edge_overlay(edge_ids, step, confirmed),
    )


def next_significant(steps: Sequence[Step], count: int, visited_now: int) -> Optional[int]:
    """
    Index of the first step at or after `count` that confirms a path edge,
    grows the visited set beyond `visited_now`, or proves a negative cycle.
    None if there is no such step.
    """
    for idx in range(clamp(count, len(steps)), len(steps)):
        step = steps[idx]
        if (step.path_edge_updates
                or len(step.visited_nodes) > visited_now
                or step.negative_cycle_detected):
            return idx
    return None


def state_to_dict(state: ReplayState) -> dict:
    def encode(v: float) -> Optional[float]:
        return None if v in (float("inf"), float("-inf")) else v

    return {
        "currentStep":             state.current_step,
        "totalSteps":              state.total_steps,
        "explanation":             state.explanation,
        "currentAlgorithmStep":    state.algorithm_step,
        "visitedNodes":            sorted(state.visited_nodes),
        "distanceArray":           {str(k): encode(v) for k, v in state.distance_array.items()},
        "minHeap":                 [h.to_dict() for h in state.min_heap],
        "iterationCount":          state.iteration_count,
        "negativeCycleDetected":   state.negative_cycle_detected,
        "currentEdgeBeingRelaxed": state.current_edge,
        "updatedDistances":        list(state.updated_distances),
        "confirmedPathEdges":      sorted(state.confirmed_edges),
        "edgeUpdates":             [{"id": eid, "status": s.value} for eid, s in state.edge_overlay.items()],
    }

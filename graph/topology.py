"""
topology.py - Edge Selection
============================
Decides WHICH edges a generated graph gets; weights are assigned later.

Pipeline:
  1. candidate_edges      - every ordered pair, scored by an "adjusted
                            distance" (Euclidean distance inflated by how
                            far apart the two nodes sit around the circle)
  2. spanning_tree        - greedy BFS-style growth from the source so every
                            node is reachable from it
  3. effective_density    - how many edges the picture can take
  4. select_edges         - tree first, then the best-looking extras

Greedy heuristics throughout; nothing here is optimal, it only has to
look legible.
"""

import logging
import math
import random
from collections import deque
from dataclasses import dataclass
from typing import List, Sequence, Set, Tuple

from graph.config import DENSITY, EDGE_PREFERENCES, DensityConfig, EdgePreferences
from graph.node import Node

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class EdgeCandidate:
    source:            int
    target:            int
    distance:          float
    adjusted_distance: float
    circle_distance:   int

    @property
    def key(self) -> Tuple[int, int]:
        return self.source, self.target

    @property
    def reverse_key(self) -> Tuple[int, int]:
        return self.target, self.source


# ---------------------------------------------------------------------------
# 1. Candidates
# ---------------------------------------------------------------------------
def circle_distance(i: int, j: int, count: int) -> int:
    """Hops between two slots around a circle of `count` slots (0 .. count // 2)."""
    gap = abs(i - j)
    return min(gap, count - gap)


def candidate_edges(
    nodes: Sequence[Node],
    algorithm: str,
    prefs: EdgePreferences = EDGE_PREFERENCES,
) -> List[EdgeCandidate]:
    """All ordered pairs (no self-loops), sorted by adjusted distance."""
    count = len(nodes)
    factor = prefs.circle_distance_factor[algorithm]
    candidates = []
    for i, a in enumerate(nodes):
        for j, b in enumerate(nodes):
            if i == j:
                continue
            dist = a.distance_to(b)
            hops = circle_distance(i, j, count)
            candidates.append(EdgeCandidate(a.id, b.id, dist, dist * (1 + hops * factor), hops))
    candidates.sort(key=lambda c: c.adjusted_distance)
    return candidates


# ---------------------------------------------------------------------------
# 2. Connectivity
# ---------------------------------------------------------------------------
def spanning_tree(
    node_ids: Sequence[int],
    source: int,
    candidates: Sequence[EdgeCandidate],
    rng: random.Random,
) -> Tuple[List[EdgeCandidate], Set[int]]:
    """
    Grow a tree out of `source`.  Each dequeued node adopts its best-scoring
    unconnected target; new nodes join the queue.  When the queue runs dry
    a random connected node is requeued, so the loop always finishes as
    long as the candidate set is complete.
    """
    all_ids = set(node_ids)
    connected = {source}
    tree: List[EdgeCandidate] = []
    if len(all_ids) <= 1:
        return tree, connected

    # best-first per source, so the first unconnected hit wins
    by_source = {nid: [] for nid in all_ids}
    for cand in sorted(candidates, key=lambda c: c.adjusted_distance):
        by_source.setdefault(cand.source, []).append(cand)

    queue = deque([source])
    while len(connected) < len(all_ids):
        if not queue:
            if not any(c.target not in connected for nid in connected for c in by_source.get(nid, [])):
                raise ValueError("candidate edges cannot connect every node to the source")
            queue.append(rng.choice(sorted(connected)))
        current = queue.popleft()
        best = next((c for c in by_source.get(current, []) if c.target not in connected), None)
        if best is None:
            continue
        tree.append(best)
        connected.add(best.target)
        queue.append(best.target)

    return tree, connected


# ---------------------------------------------------------------------------
# 3. Density
# ---------------------------------------------------------------------------
def effective_density(
    density: float,
    count: int,
    algorithm: str,
    cfg: DensityConfig = DENSITY,
) -> Tuple[float, int, int]:
    """Returns (effective_density, target_edge_count, max_possible_edges)."""
    max_possible = count * (count - 1)
    max_density = min(cfg.max_cap, cfg.base - count * cfg.scale_per_node)
    effective = max(0.0, min(density * cfg.multiplier[algorithm], max_density))
    return effective, math.ceil(max_possible * effective), max_possible


# ---------------------------------------------------------------------------
# 4. Selection
# ---------------------------------------------------------------------------
def is_visually_pleasing(
    cand: EdgeCandidate,
    existing: Set[Tuple[int, int]],
    count: int,
    algorithm: str,
    rng: random.Random,
    prefs: EdgePreferences = EDGE_PREFERENCES,
) -> bool:
    if cand.reverse_key in existing and rng.random() < prefs.bidirectional_skip_chance:
        return False
    ratio = cand.circle_distance / (count / 2)
    if ratio > prefs.center_cross_threshold and rng.random() < prefs.center_cross_skip_chance[algorithm]:
        return False
    return True


def select_edges(
    tree: Sequence[EdgeCandidate],
    candidates: Sequence[EdgeCandidate],
    target_count: int,
    count: int,
    algorithm: str,
    rng: random.Random,
    directed: bool = True,
    prefs: EdgePreferences = EDGE_PREFERENCES,
) -> List[EdgeCandidate]:
    """
    Tree edges always survive.  Extras are filtered for looks, shuffled
    slightly by jitter on the sort key and taken until the target is met.
    Undirected graphs never receive both directions of a pair.
    """
    chosen: List[EdgeCandidate] = []
    existing: Set[Tuple[int, int]] = set()

    def add(cand: EdgeCandidate) -> None:
        if cand.key in existing:
            return
        if cand.reverse_key in existing and (not directed or rng.random() < prefs.bidirectional_skip_chance):
            return
        existing.add(cand.key)
        chosen.append(cand)

    for cand in tree:
        add(cand)
    remaining = max(0, target_count - len(tree))

    tree_keys = {c.key for c in tree}
    pool = [c for c in candidates
            if c.key not in tree_keys and is_visually_pleasing(c, existing, count, algorithm, rng, prefs)]
    pool.sort(key=lambda c: c.adjusted_distance + rng.random() * prefs.sort_random_factor)

    for cand in pool[:remaining]:
        add(cand)

    log.debug("selected %d edges (%d tree, target %d)", len(chosen), len(tree), target_count)
    return chosen

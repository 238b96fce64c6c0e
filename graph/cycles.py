"""
cycles.py - Negative Cycle Injection
====================================
Bellman-Ford demos are more interesting when some graphs contain a cycle
it has to catch.  `inject_negative_cycle` rewires a short ring of
consecutive node ids so the ring's total weight is strictly negative.
"""

import logging
import random

from graph.config import NEGATIVE_CYCLE, NegativeCycleConfig
from graph.edge import Edge, edge_id
from graph.graph import Graph

log = logging.getLogger(__name__)


def inject_negative_cycle(
    graph: Graph,
    rng: random.Random,
    cfg: NegativeCycleConfig = NEGATIVE_CYCLE,
) -> bool:
    """
    Ring size is min(max_size, n // 2).  Each ring edge gets a small positive
    weight, then the last one is overwritten with -(sum + extra).  Reverse
    edges along the ring are removed so it reads as one directed loop.

    Returns False (and leaves the graph alone) if the ring would be empty.
    """
    ids = sorted(graph.nodes)
    count = len(ids)
    size = min(cfg.max_size, count // 2)
    if size < 1:
        return False

    start = rng.randrange(count)
    ring = [ids[(start + i) % count] for i in range(size)]

    pairs = [(ring[i], ring[(i + 1) % size]) for i in range(size)]

    total = 0
    ring_edges = []
    for source, target in pairs:
        if source != target:
            reverse = graph.get_edge(edge_id(target, source))
            # a two-node ring is its own reverse; keep that pair
            if reverse is not None and (reverse.is_undirected or (target, source) not in pairs):
                graph.remove_edge(reverse.id)

        weight = rng.randrange(cfg.edge_weight_range) + cfg.edge_weight_min
        total += weight

        existing = graph.get_edge(edge_id(source, target))
        if existing is not None and existing.is_undirected:
            # the ring must only run one way round
            graph.remove_edge(existing.id)
            existing = None
        if existing is None:
            existing = graph.add_edge(Edge(source, target, weight))
        existing.weight = weight
        existing.in_negative_cycle = True
        ring_edges.append(existing)

    extra = rng.randrange(cfg.extra_negative_range) + cfg.extra_negative_min
    ring_edges[-1].weight = -(total + extra)

    log.info("injected negative cycle %s (total %d)",
             "->".join(graph.label(n) for n in ring + ring[:1]),
             sum(e.weight for e in ring_edges))
    return True

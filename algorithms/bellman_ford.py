"""
bellman_ford.py - Bellman-Ford Algorithm
========================================
Single-source shortest paths that tolerates NEGATIVE edge weights and
reports negative cycles reachable from the source.

Structure:
  - up to |V|-1 passes relaxing every edge in graph order
  - a pass that relaxes nothing stops early (distances have converged)
  - one detector pass; the FIRST violating edge proves a negative cycle

Yields a Step for:
  1. Initialisation
  2. Each pass header
  3. Each edge: unreachable skip, or candidate followed by relaxed /
     no improvement
  4. Early stop
  5. Negative-cycle check header and, if found, the proving edge
  6. Done (only when no cycle was found)

Undirected edges are relaxed in both directions, one after the other,
exactly as Dijkstra walks them from either endpoint.
"""

import math
from typing import Callable, Generator, List, Optional

from graph import EdgeStatus, Graph
from algorithms.step import BellmanFordStep, ShortestPathResult, StepBuilder, format_distance


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "1. Initialize distances (source=0, others=∞)",
    "2. For i=1 to |V|-1: Relax all edges",
    "3. Check for negative cycles by a final pass",
]
DONE = "Done"


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def bellman_ford(
    graph: Graph,
    source: int,
    on_result: Optional[Callable[[ShortestPathResult], None]] = None,
) -> Generator[BellmanFordStep, None, ShortestPathResult]:

    graph.require_node(source)
    sb = StepBuilder(graph, source, BellmanFordStep)
    dist = sb.dist
    passes = graph.node_count() - 1
    edges = list(graph.directed_edges())

    yield sb.emit(
        f"Distances init. Source {sb.label(source)}=0, others=∞",
        PSEUDOCODE[0], updated=(source,), iteration_count=0,
    )

    for i in range(1, passes + 1):
        relaxed_any = False
        yield sb.emit(f"Iteration {i} of {passes}", PSEUDOCODE[1], iteration_count=i)

        for u, v, edge in edges:
            if math.isinf(dist[u]):
                yield sb.emit(
                    f"Edge {sb.arrow(u, v)} skip (unreachable)",
                    PSEUDOCODE[1], edge=edge.id, status=EdgeStatus.EXCLUDED, iteration_count=i,
                )
                continue

            yield sb.emit(
                f"Check edge {sb.arrow(u, v)} (w={edge.weight})",
                PSEUDOCODE[1], edge=edge.id, status=EdgeStatus.CANDIDATE, iteration_count=i,
            )

            new_dist = dist[u] + edge.weight
            if new_dist < dist[v]:
                old_dist = dist[v]
                dist[v] = new_dist
                sb.prev[v] = u
                relaxed_any = True
                yield sb.emit(
                    f"Relaxed edge. Dist to {sb.label(v)} from {format_distance(old_dist)} → "
                    f"{format_distance(new_dist)}",
                    PSEUDOCODE[1], edge=edge.id, status=EdgeStatus.INCLUDED,
                    confirmed=True, updated=(v,), iteration_count=i,
                )
            else:
                yield sb.emit(
                    f"No improvement for {sb.label(v)}. Dist remains {format_distance(dist[v])}",
                    PSEUDOCODE[1], edge=edge.id, status=EdgeStatus.EXCLUDED, iteration_count=i,
                )

        if not relaxed_any:
            yield sb.emit(f"No edges relaxed in iteration {i}. Early stop.", PSEUDOCODE[1], iteration_count=i)
            break

    final_pass = graph.node_count()
    yield sb.emit("Check for negative cycles", PSEUDOCODE[2], iteration_count=final_pass)

    has_negative_cycle = False
    for u, v, edge in edges:
        if not math.isinf(dist[u]) and dist[u] + edge.weight < dist[v]:
            has_negative_cycle = True
            yield sb.emit(
                f"Negative cycle found via edge {sb.arrow(u, v)}",
                PSEUDOCODE[2], edge=edge.id, status=EdgeStatus.NEGATIVE_CYCLE,
                negative_cycle=True, iteration_count=final_pass,
            )
            break

    if not has_negative_cycle:
        yield sb.emit("Bellman-Ford complete. No negative cycle.", DONE, iteration_count=final_pass)

    result = sb.result(has_negative_cycle)
    if on_result is not None:
        on_result(result)
    return result


def cycle_violations(graph: Graph, result: ShortestPathResult) -> List[str]:
    """Edge ids that still relax under `result`'s distances (dist[u] + w < dist[v])."""
    ids: List[str] = []
    for u, v, edge in graph.directed_edges():
        du, dv = result.distances.get(u, math.inf), result.distances.get(v, math.inf)
        if not math.isinf(du) and du + edge.weight < dv and edge.id not in ids:
            ids.append(edge.id)
    return ids

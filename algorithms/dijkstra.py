"""
dijkstra.py - Dijkstra's Shortest-Path Algorithm
================================================
Generator-based Dijkstra over every node reachable from the source.

Yields a Step at:
  1. Initialise distances
  2. Push source into the priority list
  3. Each pop  ->  "already visited, skip"  or  "extracted, mark visited"
  4. Each outgoing edge  ->  negative (excluded), or candidate followed by
     relaxed (included, confirmed) / no improvement (excluded)
  5. Done

The priority list is a plain list re-sorted before every pop, not a heap.
Graphs here have at most a handful of nodes, and the list reads better in
the min-heap panel than heapq's internal order.

Negative weights are never relaxed: they show up as excluded steps and the
run carries on.
"""

from typing import Callable, Generator, List, Optional

from graph import EdgeStatus, Graph
from algorithms.step import DijkstraStep, HeapEntry, ShortestPathResult, StepBuilder, format_distance


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "1. Initialize distances (source=0, others=∞)",
    "2. Push source into priority queue",
    "3. While queue not empty, pop min-dist node, mark visited",
    "4. Relax all outgoing edges if it improves distance",
]
DONE = "Done"


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def dijkstra(
    graph: Graph,
    source: int,
    on_result: Optional[Callable[[ShortestPathResult], None]] = None,
) -> Generator[DijkstraStep, None, ShortestPathResult]:

    graph.require_node(source)
    sb = StepBuilder(graph, source, DijkstraStep)
    dist = sb.dist
    pq: List[HeapEntry] = []

    def heap():
        return tuple(pq)

    yield sb.emit(
        f"Distances initialized. Source {sb.label(source)} = 0, rest = ∞",
        PSEUDOCODE[0], updated=(source,), min_heap=(),
    )

    pq.append(HeapEntry(source, 0))
    yield sb.emit(
        f"Source {sb.label(source)} added to priority queue.",
        PSEUDOCODE[1], min_heap=heap(),
    )

    while pq:
        # stable sort: ties keep insertion order
        pq.sort(key=lambda h: h.dist)
        current = pq.pop(0).id

        if current in sb.visited:
            yield sb.emit(
                f"Node {sb.label(current)} already visited, skipping.",
                PSEUDOCODE[2], min_heap=heap(),
            )
            continue

        sb.visited.add(current)
        yield sb.emit(
            f"Extracted node {sb.label(current)}, distance={format_distance(dist[current])}. Mark visited.",
            PSEUDOCODE[2], min_heap=heap(),
        )

        for target, edge in graph.neighbours(current):
            weight = edge.weight
            if weight < 0:
                yield sb.emit(
                    f"Edge {sb.arrow(current, target)} is negative. Skipping.",
                    PSEUDOCODE[3], edge=edge.id, status=EdgeStatus.EXCLUDED, min_heap=heap(),
                )
                continue

            yield sb.emit(
                f"Check edge {sb.arrow(current, target)}, weight={weight}.",
                PSEUDOCODE[3], edge=edge.id, status=EdgeStatus.CANDIDATE, min_heap=heap(),
            )

            new_dist = dist[current] + weight
            if new_dist < dist[target]:
                old_dist = dist[target]
                dist[target] = new_dist
                sb.prev[target] = current

                idx = next((i for i, h in enumerate(pq) if h.id == target), None)
                if idx is None:
                    pq.append(HeapEntry(target, new_dist))
                else:
                    pq[idx] = HeapEntry(target, new_dist)

                yield sb.emit(
                    f"Relaxed edge. Distance to {sb.label(target)} updated from "
                    f"{format_distance(old_dist)} to {format_distance(new_dist)}.",
                    PSEUDOCODE[3], edge=edge.id, status=EdgeStatus.INCLUDED,
                    confirmed=True, updated=(target,), min_heap=heap(),
                )
            else:
                yield sb.emit(
                    f"No improvement. Dist to {sb.label(target)} remains {format_distance(dist[target])}.",
                    PSEUDOCODE[3], edge=edge.id, status=EdgeStatus.EXCLUDED, min_heap=heap(),
                )

    yield sb.emit("Dijkstra complete. Distances finalized.", DONE, min_heap=())

    result = sb.result()
    if on_result is not None:
        on_result(result)
    return result

"""
weights.py - Edge Weight Assignment
===================================
Per-algorithm weight distributions.

  Dijkstra      tiered: mostly small/medium, a few large, never negative
  Bellman-Ford  mostly uniform, some near the top, optional negatives
  spatial       weight follows the physical distance between the nodes
"""

import math
import random
from dataclasses import replace
from typing import TYPE_CHECKING

from graph.config import (
    BELLMAN_FORD, DENSITY, DIJKSTRA, NEGATIVE_EDGES, WEIGHTS,
    NegativeEdgeConfig, WeightConfig,
)
from graph.node import Node

if TYPE_CHECKING:
    from graph.generator import GraphParams


def algorithm_config(algorithm: str, params: "GraphParams") -> "GraphParams":
    """
    Adjust caller parameters to what reads best for each algorithm:
    Dijkstra gets a fixed, narrow weight range and a slightly denser
    graph; Bellman-Ford gets floors on its range so negatives stand out.
    """
    if algorithm == DIJKSTRA:
        return replace(
            params,
            min_weight=WEIGHTS.dijkstra_min,
            max_weight=WEIGHTS.dijkstra_max,
            density=min(params.density * DENSITY.dijkstra_boost, DENSITY.dijkstra_cap),
        )
    if algorithm == BELLMAN_FORD:
        return replace(
            params,
            min_weight=max(params.min_weight, WEIGHTS.bellman_ford_min_floor),
            max_weight=max(params.max_weight, WEIGHTS.bellman_ford_max_floor),
        )
    return params


def random_weight(
    algorithm: str,
    min_weight: int,
    max_weight: int,
    allow_negative: bool,
    rng: random.Random,
    cfg: WeightConfig = WEIGHTS,
    neg: NegativeEdgeConfig = NEGATIVE_EDGES,
) -> int:
    if algorithm == DIJKSTRA:
        if rng.random() < cfg.small_weight_chance:
            w = rng.randrange(cfg.small_range) + min_weight
        elif rng.random() < cfg.medium_weight_chance:
            w = rng.randrange(cfg.medium_range) + min_weight + cfg.medium_offset
        else:
            w = rng.randrange(cfg.large_range) + max_weight - cfg.large_offset_from_max
        # Dijkstra never sees a negative weight, whatever it was asked for
        return max(max(min_weight, 0), min(max_weight, w))

    if algorithm == BELLMAN_FORD:
        if rng.random() < cfg.standard_weight_chance:
            w = rng.randint(min_weight, max_weight)
        else:
            w = rng.randrange(cfg.bf_large_weight_range) + max_weight - cfg.bf_large_offset_from_max
            w = max(min_weight, min(max_weight, w))
        if allow_negative and rng.random() < neg.creation_chance:
            w = -rng.randint(neg.weight_min, neg.weight_range)
        return w

    return rng.randint(min_weight, max_weight)


def euclidean_weight(
    a: Node,
    b: Node,
    width: float,
    height: float,
    min_weight: int,
    max_weight: int,
    cfg: WeightConfig = WEIGHTS,
) -> int:
    """
    Map the distance between two nodes linearly onto [min_weight, max_weight].
    Distances beyond `euclidean_diagonal_share` of the viewport diagonal saturate.
    """
    reference = math.hypot(width, height) * cfg.euclidean_diagonal_share
    ratio = min(1.0, a.distance_to(b) / reference) if reference > 0 else 0.0
    return int(round(min_weight + ratio * (max_weight - min_weight)))

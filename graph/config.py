"""
config.py - Generation Tuning
=============================
Every magic number the generator uses, grouped by concern.  Each group is
a plain class of class attributes with a module-level instance, so callers
can pass a tweaked copy (tests do) without touching the defaults.
"""

from typing import Dict

DIJKSTRA     = "dijkstra"
BELLMAN_FORD = "bellman_ford"


# ---------------------------------------------------------------------------
# Layout - circle radius and jitter
# ---------------------------------------------------------------------------
class LayoutConfig:
    radius_divisor:      float = 3.2     # radius = min(w, h) / divisor
    min_radius:          float = 150.0
    scale_node_threshold: int  = 8       # grow the circle past this many nodes
    scale_per_node:      float = 0.03
    angle_base_divisor:  float = 180.0   # angular jitter = pi / (divisor * max(1, n / node_divisor))
    angle_node_divisor:  float = 4.0

    # spatial (scattered) layout
    spatial_margin:      float = 60.0
    min_separation:      float = 70.0
    placement_attempts:  int   = 60
    relax_iterations:    int   = 80


LAYOUT = LayoutConfig()


# ---------------------------------------------------------------------------
# Node placement variance (px) - more nodes, less jitter
# ---------------------------------------------------------------------------
class NodeVarianceConfig:
    few_nodes_threshold:    int = 5
    medium_nodes_threshold: int = 8
    many_nodes_threshold:   int = 12

    few_nodes:     float = 20.0
    medium_nodes:  float = 15.0
    many_nodes:    float = 10.0
    lots_of_nodes: float = 6.0


NODE_VARIANCE = NodeVarianceConfig()


# ---------------------------------------------------------------------------
# Edge preferences - keep the picture legible
# ---------------------------------------------------------------------------
class EdgePreferences:
    circle_distance_factor: Dict[str, float] = {
        DIJKSTRA:     0.15,   # less penalty, more diverse paths
        BELLMAN_FORD: 0.2,
    }
    bidirectional_skip_chance: float = 0.8
    center_cross_threshold:    float = 0.8
    center_cross_skip_chance: Dict[str, float] = {
        DIJKSTRA:     0.4,
        BELLMAN_FORD: 0.5,
    }
    sort_random_factor: float = 20.0


EDGE_PREFERENCES = EdgePreferences()


# ---------------------------------------------------------------------------
# Density
# ---------------------------------------------------------------------------
class DensityConfig:
    max_cap:        float = 0.5
    base:           float = 0.8
    scale_per_node: float = 0.04
    multiplier: Dict[str, float] = {
        DIJKSTRA:     1.05,
        BELLMAN_FORD: 1.0,
    }
    dijkstra_boost: float = 1.15
    dijkstra_cap:   float = 0.5


DENSITY = DensityConfig()


# ---------------------------------------------------------------------------
# Weights
# ---------------------------------------------------------------------------
class WeightConfig:
    # Dijkstra: fixed range, tiered distribution
    dijkstra_min:          int   = 1
    dijkstra_max:          int   = 15
    small_weight_chance:   float = 0.3
    medium_weight_chance:  float = 0.4   # of the remainder after "small"
    small_range:           int   = 5
    medium_range:          int   = 7
    medium_offset:         int   = 4
    large_range:           int   = 5
    large_offset_from_max: int   = 4

    # Bellman-Ford: floors on the caller's range, mostly uniform
    bellman_ford_min_floor:       int   = 2
    bellman_ford_max_floor:       int   = 25
    standard_weight_chance:       float = 0.7
    bf_large_weight_range:        int   = 10
    bf_large_offset_from_max:     int   = 9

    # spatial graphs: distance normalised by this share of the diagonal
    euclidean_diagonal_share: float = 0.7


WEIGHTS = WeightConfig()


class NegativeEdgeConfig:
    creation_chance: float = 0.25
    weight_range:    int   = 12
    weight_min:      int   = 1


NEGATIVE_EDGES = NegativeEdgeConfig()


class NegativeCycleConfig:
    creation_chance:      float = 0.4
    max_size:             int   = 3
    edge_weight_range:    int   = 10
    edge_weight_min:      int   = 1
    extra_negative_range: int   = 3
    extra_negative_min:   int   = 1


NEGATIVE_CYCLE = NegativeCycleConfig()


ALGORITHMS = (DIJKSTRA, BELLMAN_FORD)


def check_algorithm(algorithm: str) -> str:
    if algorithm not in ALGORITHMS:
        raise ValueError(f"Unknown algorithm: {algorithm}")
    return algorithm

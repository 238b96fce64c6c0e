"""
generator.py - Procedural Graph Generator
=========================================
Orchestrates layout -> topology -> weights -> (optional) negative cycle
into one GeneratedGraph.

Usage:
    params = GraphParams(node_count=8, density=0.3)
    result = generate_graph(params, "dijkstra", seed=42)
    result.graph, result.source_node, result.has_negative_cycle

Guarantees:
  - every node is reachable from `source_node`
  - Dijkstra graphs never contain a negative weight
  - undirected graphs only carry negatives from an injected cycle, so
    `has_negative_cycle` matches what Bellman-Ford finds
  - spatial graphs carry weights derived from node distances

Randomness:
  Every call draws from a single `random.Random`.  Pass `rng` to share
  one, or `seed` for a fresh deterministic one; neither means unseeded.
"""

import logging
import random
from dataclasses import asdict, dataclass
from typing import List, Optional

from graph.config import BELLMAN_FORD, NEGATIVE_CYCLE, check_algorithm
from graph.cycles import inject_negative_cycle
from graph.edge import Edge
from graph.graph import Graph
from graph.layout import circular_layout, relax_layout, spatial_layout
from graph.node import Node
from graph.topology import candidate_edges, effective_density, select_edges, spanning_tree
from graph.weights import algorithm_config, euclidean_weight, random_weight

log = logging.getLogger(__name__)

CIRCULAR = "circular"
SPATIAL  = "spatial"
GRAPH_TYPES = (CIRCULAR, SPATIAL)

MIN_NODES = 3
MAX_NODES = 15


@dataclass
class GraphParams:
    node_count:           int   = 8
    density:              float = 0.3
    min_weight:           int   = 1
    max_weight:           int   = 20
    allow_negative_edges: bool  = False
    is_directed:          bool  = True
    graph_type:           str   = CIRCULAR
    viewport_width:       int   = 800
    viewport_height:      int   = 600

    def validate(self) -> "GraphParams":
        if not MIN_NODES <= self.node_count <= MAX_NODES:
            raise ValueError(f"node_count must be between {MIN_NODES} and {MAX_NODES}, got {self.node_count}")
        if not 0.0 <= self.density <= 1.0:
            raise ValueError(f"density must be within [0, 1], got {self.density}")
        if self.min_weight > self.max_weight:
            raise ValueError(f"min_weight {self.min_weight} exceeds max_weight {self.max_weight}")
        if self.graph_type not in GRAPH_TYPES:
            raise ValueError(f"Unknown graph type: {self.graph_type}")
        if self.viewport_width <= 0 or self.viewport_height <= 0:
            raise ValueError("viewport dimensions must be positive")
        return self

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "GraphParams":
        known = {k: data[k] for k in cls.__dataclass_fields__ if k in data}
        return cls(**known)


@dataclass
class GeneratedGraph:
    graph:              Graph
    source_node:        int
    has_negative_cycle: bool
    algorithm:          str
    params:             GraphParams

    @property
    def nodes(self) -> List[Node]:
        return list(self.graph.nodes.values())

    @property
    def edges(self) -> List[Edge]:
        return list(self.graph.edges.values())

    def to_dict(self) -> dict:
        data = self.graph.to_dict()
        data["params"] = dict(
            self.params.to_dict(),
            sourceNode=self.source_node,
            hasNegativeCycle=self.has_negative_cycle,
            algorithm=self.algorithm,
        )
        return data


def generate_graph(
    params: GraphParams,
    algorithm: str,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
    force_negative_cycle: Optional[bool] = None,
) -> GeneratedGraph:
    """
    Build a fresh graph.  `force_negative_cycle` overrides the dice roll
    for Bellman-Ford (True/False); it has no effect for Dijkstra or when
    negative edges are not allowed.
    """
    check_algorithm(algorithm)
    params.validate()
    rng = rng or random.Random(seed)
    config = algorithm_config(algorithm, params)

    count = config.node_count
    width, height = config.viewport_width, config.viewport_height
    source = rng.randrange(count)

    # 1. geometry
    if config.graph_type == SPATIAL:
        nodes = spatial_layout(count, width, height, rng)
    else:
        nodes = circular_layout(count, width, height, rng)

    # 2. topology
    candidates = candidate_edges(nodes, algorithm)
    tree, _ = spanning_tree([n.id for n in nodes], source, candidates, rng)
    _, target_count, max_possible = effective_density(config.density, count, algorithm)
    chosen = select_edges(tree, candidates, target_count, count, algorithm, rng,
                          directed=config.is_directed)

    graph = Graph(directed=config.is_directed)
    for node in nodes:
        graph.add_node(node)

    # 3. weights
    # a negative undirected edge is already a negative two-cycle
    random_negatives = config.allow_negative_edges and config.is_directed
    for cand in chosen:
        weight = random_weight(algorithm, config.min_weight, config.max_weight,
                               random_negatives, rng)
        graph.create_edge(cand.source, cand.target, weight)

    if config.graph_type == SPATIAL:
        relax_layout(nodes, graph.edges.values(), width, height)
        for edge in graph.edges.values():
            edge.weight = euclidean_weight(graph.nodes[edge.source], graph.nodes[edge.target],
                                           width, height, config.min_weight, config.max_weight)

    # 4. negative cycle
    has_negative_cycle = False
    if algorithm == BELLMAN_FORD and config.allow_negative_edges:
        roll = rng.random() < NEGATIVE_CYCLE.creation_chance
        if force_negative_cycle is not None:
            roll = force_negative_cycle
        if roll:
            has_negative_cycle = inject_negative_cycle(graph, rng)

    log.debug("generated %s graph: %d nodes, %d/%d edges, source %s, negative cycle %s",
              config.graph_type, count, graph.edge_count(), max_possible,
              graph.label(source), has_negative_cycle)
    return GeneratedGraph(graph, source, has_negative_cycle, algorithm, config)

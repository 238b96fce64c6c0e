"""
workspace.py - Graph Workspace & Manual Edits
=============================================
One user's editing session: the graph, the parameters it was generated
with, the chosen source / destination, the algorithm and the Runner that
replays it.

Every mutation goes through here so that two rules always hold:
  1. any change to the graph, the source, the destination or the
     algorithm resets the Runner (its step log described the old graph)
  2. a rejected edit leaves the graph untouched, sets `feedback` and
     returns False; it never raises

Spatial graphs:
  Weights start out as functions of node distance (`distance_weights`).
  Moving a node or resizing the viewport recomputes them.  A manual
  weight that disagrees with the distance switches `distance_weights`
  off and says so; `restore_distance_weights()` switches it back on.
"""

import logging
import random
from dataclasses import replace
from typing import Optional, Tuple

from engine.runner import Runner, RunnerMode
from graph import (
    DIJKSTRA, SPATIAL, Graph, GraphEditError, GraphParams, GeneratedGraph,
    check_algorithm, generate_graph,
)
from graph.edge import Edge
from graph.weights import algorithm_config, euclidean_weight

log = logging.getLogger(__name__)

ALGORITHM_NAMES = {DIJKSTRA: "Dijkstra's"}


def _weight_range(algorithm: str, params: GraphParams) -> Tuple[int, int]:
    """The range generation actually draws from once per-algorithm floors apply."""
    cfg = algorithm_config(algorithm, params)
    return cfg.min_weight, cfg.max_weight


class Workspace:
    """
    Attributes:
        graph              : The live Graph.
        params             : GraphParams the graph was generated with.
        algorithm          : Registry key of the selected algorithm.
        source             : Source node id, or None.
        destination        : Destination node id, or None.
        has_negative_cycle : True if generation injected a negative cycle.
        distance_weights   : Spatial weights still equal node distances.
        feedback           : Last user-visible message.
        runner             : The Runner bound to `graph` and `source`.
    """

    def __init__(
        self,
        params: Optional[GraphParams] = None,
        algorithm: str = DIJKSTRA,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        runner: Optional[Runner] = None,
    ):
        self.params:             GraphParams    = (params or GraphParams()).validate()
        self.algorithm:          str            = check_algorithm(algorithm)
        self.graph:              Graph          = Graph(directed=self.params.is_directed)
        self.source:             Optional[int]  = None
        self.destination:        Optional[int]  = None
        self.has_negative_cycle: bool           = False
        self.distance_weights:   bool           = False
        self.weight_range:       Tuple[int, int] = _weight_range(self.algorithm, self.params)
        self.feedback:           str            = ""
        self.runner:             Runner         = runner or Runner(algorithm=self.algorithm)

        self._rng = rng or random.Random(seed)
        self.runner.set_algorithm(self.algorithm)
        self.runner.bind(self.graph, None)

    # ==================================================================
    # GENERATION
    # ==================================================================
    def generate(
        self,
        params: Optional[GraphParams] = None,
        force_negative_cycle: Optional[bool] = None,
    ) -> GeneratedGraph:
        """Replace the graph with a freshly generated one.  Bad params raise ValueError."""
        params = (params or self.params).validate()
        generated = generate_graph(params, self.algorithm, rng=self._rng,
                                   force_negative_cycle=force_negative_cycle)

        self.params             = params
        self.graph              = generated.graph
        self.source             = generated.source_node
        self.destination        = None
        self.has_negative_cycle = generated.has_negative_cycle
        self.distance_weights   = params.graph_type == SPATIAL and not generated.has_negative_cycle
        self.weight_range       = (generated.params.min_weight, generated.params.max_weight)

        self.runner.set_mode(RunnerMode.EXPLORE)
        self.runner.destination = None
        self.runner.bind(self.graph, self.source)
        self.feedback = 'Random graph generated. Select an algorithm and press "Start" to begin.'
        log.info("generated %d-node %s graph for %s", self.graph.node_count(),
                 params.graph_type, self.algorithm)
        return generated

    def reseed(self, seed: int) -> None:
        """Restart the generator's RNG so the next generate() is reproducible."""
        self._rng = random.Random(seed)

    def clear_graph(self) -> None:
        self.graph              = Graph(directed=self.params.is_directed)
        self.source             = None
        self.destination        = None
        self.has_negative_cycle = False
        self.distance_weights   = False
        self.weight_range       = _weight_range(self.algorithm, self.params)

        self.runner.set_mode(RunnerMode.EXPLORE)
        self.runner.destination = None
        self.runner.bind(self.graph, None)
        self.feedback = "Graph cleared."

    # ==================================================================
    # CONFIGURATION
    # ==================================================================
    def set_algorithm(self, algorithm: str) -> None:
        self.algorithm = check_algorithm(algorithm)
        self.feedback = 'Graph reset. Select an algorithm and press "Start" to begin.'
        if algorithm == DIJKSTRA and self.params.allow_negative_edges:
            self.params = replace(self.params, allow_negative_edges=False)
            self.feedback = "Switched to Dijkstra. Negative edges disabled as Dijkstra's doesn't support them."
        self.runner.set_mode(RunnerMode.EXPLORE)
        self.runner.set_algorithm(algorithm)

    def set_source(self, node_id: int) -> bool:
        if node_id not in self.graph.nodes:
            return self._reject(f"Node {node_id} does not exist.")
        self.source = node_id
        self.runner.set_mode(RunnerMode.EXPLORE)
        self.runner.set_source(node_id)
        self.feedback = f"Set node {self.graph.label(node_id)} as the source node."
        return True

    def set_destination(self, node_id: Optional[int]) -> bool:
        if node_id is not None and node_id not in self.graph.nodes:
            return self._reject(f"Node {node_id} does not exist.")
        self.destination = node_id
        self.runner.set_destination(node_id)
        if node_id is None:
            self.feedback = "Destination cleared."
        else:
            self.feedback = f"Set node {self.graph.label(node_id)} as the destination node."
        return True

    # ==================================================================
    # NODE EDITS
    # ==================================================================
    def add_node(self, x: float, y: float) -> Optional[int]:
        node = self.graph.create_node(x, y)
        self._invalidate()
        self.feedback = f"Added node {node.label}."
        return node.id

    def move_node(self, node_id: int, x: float, y: float) -> bool:
        try:
            self.graph.move_node(node_id, x, y)
        except GraphEditError as exc:
            return self._reject(str(exc))
        if self._spatial_sync():
            for edge in self.graph.edges.values():
                if edge.touches(node_id):
                    edge.weight = self._distance_weight(edge)
        self._invalidate()
        return True

    def delete_node(self, node_id: int) -> bool:
        try:
            removed = self.graph.remove_node(node_id)
        except GraphEditError as exc:
            return self._reject(str(exc))
        if self.source == node_id:
            self.source = None
        if self.destination == node_id:
            self.destination = None
            self.runner.destination = None
        self._invalidate()
        self.feedback = f"Deleted node {node_id} and {len(removed)} edge(s)."
        return True

    def resize(self, width: int, height: int) -> None:
        """Scale node positions into a new viewport.  Non-positive sizes raise ValueError."""
        if width <= 0 or height <= 0:
            raise ValueError("viewport dimensions must be positive")
        sx = width / self.params.viewport_width
        sy = height / self.params.viewport_height
        for node in self.graph.nodes.values():
            node.move_to(node.x * sx, node.y * sy)
        self.params = replace(self.params, viewport_width=width, viewport_height=height)
        if self._spatial_sync():
            for edge in self.graph.edges.values():
                edge.weight = self._distance_weight(edge)
        self._invalidate()

    # ==================================================================
    # EDGE EDITS
    # ==================================================================
    def add_edge(self, source: int, target: int, weight: Optional[float] = None) -> bool:
        """
        Add source -> target.  With no weight a spatial graph uses the node
        distance; any other graph needs an explicit weight.
        """
        if source == target:
            return self._reject("An edge needs two different nodes.")
        if source not in self.graph.nodes or target not in self.graph.nodes:
            return self._reject("Both edge endpoints must exist.")
        if weight is None:
            if not self._spatial_sync():
                return self._reject("Enter a weight for the new edge.")
            weight = self._distance_weight(Edge(source, target))
        if self.algorithm == DIJKSTRA and weight < 0:
            return self._reject("Dijkstra doesn't support negative edges.")

        try:
            edge = self.graph.create_edge(source, target, weight)
        except GraphEditError as exc:
            return self._reject(str(exc))
        self._check_distance_weight(edge)
        self._invalidate()
        return True

    def reweight_edge(self, eid: str, weight: float) -> bool:
        if self.algorithm == DIJKSTRA and weight < 0:
            return self._reject("Dijkstra doesn't support negative edges.")
        try:
            edge = self.graph.set_weight(eid, weight)
        except GraphEditError as exc:
            return self._reject(str(exc))
        self.feedback = f"Edge {eid} weight set to {weight}."
        self._check_distance_weight(edge)
        self._invalidate()
        return True

    def delete_edge(self, eid: str) -> bool:
        try:
            self.graph.remove_edge(eid)
        except GraphEditError as exc:
            return self._reject(str(exc))
        self._invalidate()
        self.feedback = f"Deleted edge {eid}."
        return True

    def restore_distance_weights(self) -> bool:
        """Recompute every weight from node distances (spatial graphs only)."""
        if self.params.graph_type != SPATIAL:
            return self._reject("Only spatial graphs derive weights from distance.")
        self.distance_weights = True
        for edge in self.graph.edges.values():
            edge.weight = self._distance_weight(edge)
        self._invalidate()
        self.feedback = "Edge weights recomputed from node distances."
        return True

    # ==================================================================
    # ANSWER
    # ==================================================================
    def show_answer(self) -> bool:
        if self.source is None:
            return self._reject("Select a source node first.")
        self.runner.set_mode(RunnerMode.VIEW)
        name = ALGORITHM_NAMES.get(self.algorithm, "Bellman-Ford")
        if self.runner.result is not None and self.runner.result.has_negative_cycle:
            self.feedback = f"{name} detected a negative cycle. No shortest paths exist."
        else:
            self.feedback = f"{name} complete. Shortest distances from {self.graph.label(self.source)} shown."
        return True

    def explore(self) -> None:
        self.runner.set_mode(RunnerMode.EXPLORE)

    # ==================================================================
    # SERIALISATION
    # ==================================================================
    def to_dict(self) -> dict:
        return {
            "graph":            self.graph.to_dict(),
            "params":           dict(
                self.params.to_dict(),
                sourceNode=self.source,
                hasNegativeCycle=self.has_negative_cycle,
                algorithm=self.algorithm,
            ),
            "destination":      self.destination,
            "distanceWeights":  self.distance_weights,
            "feedback":         self.feedback,
            "runner":           self.runner.to_dict(),
        }

    # ==================================================================
    # Internal
    # ==================================================================
    def _invalidate(self) -> None:
        self.runner.bind(self.graph, self.source)

    def _reject(self, message: str) -> bool:
        log.info("rejected edit: %s", message)
        self.feedback = message
        return False

    def _spatial_sync(self) -> bool:
        return self.params.graph_type == SPATIAL and self.distance_weights

    def _distance_weight(self, edge: Edge) -> int:
        p = self.params
        low, high = self.weight_range
        return euclidean_weight(self.graph.nodes[edge.source], self.graph.nodes[edge.target],
                                p.viewport_width, p.viewport_height, low, high)

    def _check_distance_weight(self, edge: Edge) -> None:
        if self._spatial_sync() and edge.weight != self._distance_weight(edge):
            self.distance_weights = False
            self.feedback = ("Edge weight no longer matches node distance; "
                             "spatial weights stay as edited until restored.")

"""
graph/
-----
Core data layer and procedural generation.  Public API:

    from graph import Graph, Node, Edge, EdgeStatus
    from graph import GraphParams, generate_graph
"""

from graph.node      import Node, node_label
from graph.edge      import Edge, EdgeStatus, edge_id
from graph.errors    import GraphEditError
from graph.graph     import Graph
from graph.config    import DIJKSTRA, BELLMAN_FORD, ALGORITHMS, check_algorithm
from graph.generator import GraphParams, GeneratedGraph, generate_graph, CIRCULAR, SPATIAL

__all__ = [
    "Node",   "node_label",
    "Edge",   "EdgeStatus", "edge_id",
    "Graph",  "GraphEditError",
    "DIJKSTRA", "BELLMAN_FORD", "ALGORITHMS", "check_algorithm",
    "GraphParams", "GeneratedGraph", "generate_graph",
    "CIRCULAR", "SPATIAL",
]

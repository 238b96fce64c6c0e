"""Shared fixtures: small hand-built graphs with known answers."""

import math
import random

import pytest

from graph import Graph


def make_graph(node_count, edges, directed=True):
    """Nodes 0..node_count-1 spaced along a line, then (source, target, weight) edges."""
    graph = Graph(directed=directed)
    for i in range(node_count):
        graph.create_node(100 + 100 * i, 300)
    for source, target, weight in edges:
        graph.create_edge(source, target, weight)
    return graph


def reference_distances(graph, source):
    """Relax every walkable edge |V| times; good enough for tiny graphs."""
    dist = {nid: math.inf for nid in graph.nodes}
    dist[source] = 0
    for _ in range(graph.node_count()):
        for u, v, edge in graph.directed_edges():
            if dist[u] + edge.weight < dist[v]:
                dist[v] = dist[u] + edge.weight
    return dist


@pytest.fixture
def example_graph():
    """A->B (1), B->C (2), A->C (10), C->D (1).  From A: A=0, B=1, C=3, D=4."""
    return make_graph(4, [(0, 1, 1), (1, 2, 2), (0, 2, 10), (2, 3, 1)])


@pytest.fixture
def ring_graph():
    """A->B (2), B->C (2), C->A (-10): a negative cycle reachable from A."""
    return make_graph(3, [(0, 1, 2), (1, 2, 2), (2, 0, -10)])


@pytest.fixture
def undirected_graph():
    """A-B (4), B-C (1), A-C (7), undirected.  From C: C=0, B=1, A=5."""
    return make_graph(3, [(0, 1, 4), (1, 2, 1), (0, 2, 7)], directed=False)


@pytest.fixture
def rng():
    return random.Random(1234)

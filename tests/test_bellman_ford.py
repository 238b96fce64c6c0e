"""
Tests for the Bellman-Ford step generator.
"""

import math

import pytest

from algorithms import generate_steps
from algorithms.bellman_ford import DONE, PSEUDOCODE, bellman_ford, cycle_violations
from algorithms.step import BellmanFordStep
from graph import BELLMAN_FORD, EdgeStatus, GraphParams, generate_graph

from conftest import make_graph, reference_distances


class TestBellmanFordExample:
    """Same four-node graph Dijkstra uses."""

    def test_final_distances(self, example_graph):
        _, result = generate_steps(BELLMAN_FORD, example_graph, 0)
        assert dict(result.distances) == {0: 0, 1: 1, 2: 3, 3: 4}
        assert result.path_to(3) == (0, 1, 2, 3)

    def test_step_sequence(self, example_graph):
        steps, _ = generate_steps(BELLMAN_FORD, example_graph, 0)
        assert len(steps) == 22
        assert all(isinstance(s, BellmanFordStep) for s in steps)
        assert steps[0].algorithm_step == PSEUDOCODE[0]
        assert steps[1].explanation == "Iteration 1 of 3"
        assert steps[-2].algorithm_step == PSEUDOCODE[2]
        assert steps[-1].algorithm_step == DONE
        assert steps[-1].explanation == "Bellman-Ford complete. No negative cycle."

    def test_early_stop(self, example_graph):
        steps, _ = generate_steps(BELLMAN_FORD, example_graph, 0)
        early = [s for s in steps if "Early stop" in s.explanation]
        assert len(early) == 1
        assert early[0].iteration_count == 2
        assert not any(s.explanation == "Iteration 3 of 3" for s in steps)

    def test_iteration_counts(self, example_graph):
        steps, _ = generate_steps(BELLMAN_FORD, example_graph, 0)
        counts = [s.iteration_count for s in steps]
        assert counts == sorted(counts)
        assert counts[-1] == 4

    def test_never_visits(self, example_graph):
        steps, _ = generate_steps(BELLMAN_FORD, example_graph, 0)
        assert all(not s.visited_nodes for s in steps)

    def test_relaxed_edges_confirmed(self, example_graph):
        steps, _ = generate_steps(BELLMAN_FORD, example_graph, 0)
        confirmed = [s.current_edge for s in steps if s.path_edge_updates]
        assert confirmed == ["0-1", "1-2", "2-3"]


class TestBellmanFordNegatives:
    """Negative weights and cycles."""

    def test_negative_edge_without_cycle(self):
        graph = make_graph(3, [(0, 1, 4), (0, 2, 5), (2, 1, -3)])
        _, result = generate_steps(BELLMAN_FORD, graph, 0)
        assert dict(result.distances) == {0: 0, 1: 2, 2: 5}
        assert result.path_to(1) == (0, 2, 1)
        assert not result.has_negative_cycle

    def test_ring_cycle_detected(self, ring_graph):
        steps, result = generate_steps(BELLMAN_FORD, ring_graph, 0)
        assert result.has_negative_cycle
        assert result.paths == {}
        last = steps[-1]
        assert last.negative_cycle_detected
        assert last.current_edge == "0-1"
        assert last.edge_updates[0].status == EdgeStatus.NEGATIVE_CYCLE
        assert not any(s.algorithm_step == DONE for s in steps)

    def test_only_one_step_proves_the_cycle(self, ring_graph):
        steps, _ = generate_steps(BELLMAN_FORD, ring_graph, 0)
        assert sum(1 for s in steps if s.negative_cycle_detected) == 1

    def test_cycle_violations(self, ring_graph):
        _, result = generate_steps(BELLMAN_FORD, ring_graph, 0)
        assert cycle_violations(ring_graph, result) == ["0-1"]

    def test_unreachable_cycle_ignored(self):
        graph = make_graph(4, [(0, 1, 3), (2, 3, 1), (3, 2, -5)])
        steps, result = generate_steps(BELLMAN_FORD, graph, 0)
        assert not result.has_negative_cycle
        assert math.isinf(result.distances[2])
        skips = [s for s in steps if "unreachable" in s.explanation]
        assert skips
        assert all(s.edge_updates[0].status == EdgeStatus.EXCLUDED for s in skips)

    def test_negative_self_loop(self):
        graph = make_graph(2, [(0, 1, 1), (1, 1, -1)])
        _, result = generate_steps(BELLMAN_FORD, graph, 0)
        assert result.has_negative_cycle


class TestBellmanFordUndirected:
    """Undirected edges relax both ways."""

    def test_undirected(self, undirected_graph):
        _, result = generate_steps(BELLMAN_FORD, undirected_graph, 2)
        assert dict(result.distances) == {0: 5, 1: 1, 2: 0}

    def test_each_direction_checked(self, undirected_graph):
        steps, _ = generate_steps(BELLMAN_FORD, undirected_graph, 2)
        checks = [s.explanation for s in steps if s.explanation.startswith("Check edge")]
        assert "Check edge C→B (w=1)" in checks
        assert "Check edge B→C (w=1)" in checks


class TestBellmanFordAgainstReference:
    """Generated graphs without a cycle agree with repeated relaxation."""

    @pytest.mark.parametrize("seed", range(15))
    def test_matches_reference(self, seed):
        params = GraphParams(node_count=4 + seed % 10, allow_negative_edges=True)
        generated = generate_graph(params, BELLMAN_FORD, seed=seed, force_negative_cycle=False)
        graph = generated.graph
        _, result = generate_steps(BELLMAN_FORD, graph, generated.source_node)
        if result.has_negative_cycle:
            assert cycle_violations(graph, result)
            assert result.paths == {}
            return
        expected = reference_distances(graph, generated.source_node)
        assert dict(result.distances) == expected

    def test_on_result_and_return_value_agree(self, example_graph):
        seen = []
        gen = bellman_ford(example_graph, 0, seen.append)
        try:
            while True:
                next(gen)
        except StopIteration as stop:
            returned = stop.value
        assert seen == [returned]

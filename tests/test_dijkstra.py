"""
Tests for the Dijkstra step generator.
"""

import math

import pytest

from algorithms import generate_steps
from algorithms.dijkstra import DONE, PSEUDOCODE, dijkstra
from algorithms.step import DijkstraStep
from graph import DIJKSTRA, EdgeStatus, GraphEditError, GraphParams, generate_graph

from conftest import make_graph, reference_distances


class TestDijkstraExample:
    """A->B (1), B->C (2), A->C (10), C->D (1) from A."""

    def test_final_distances(self, example_graph):
        _, result = generate_steps(DIJKSTRA, example_graph, 0)
        assert dict(result.distances) == {0: 0, 1: 1, 2: 3, 3: 4}
        assert not result.has_negative_cycle

    def test_paths(self, example_graph):
        _, result = generate_steps(DIJKSTRA, example_graph, 0)
        assert result.path_to(3) == (0, 1, 2, 3)
        assert result.path_to(0) == ()
        assert result.path_edges(example_graph, 3) == ["0-1", "1-2", "2-3"]

    def test_step_sequence(self, example_graph):
        steps, _ = generate_steps(DIJKSTRA, example_graph, 0)
        assert len(steps) == 15
        assert [s.step_number for s in steps] == list(range(15))
        assert all(isinstance(s, DijkstraStep) for s in steps)
        assert steps[0].algorithm_step == PSEUDOCODE[0]
        assert steps[0].updated_distances == (0,)
        assert steps[1].min_heap[0].id == 0
        assert steps[-1].algorithm_step == DONE
        assert steps[-1].explanation == "Dijkstra complete. Distances finalized."

    def test_extraction_order(self, example_graph):
        steps, _ = generate_steps(DIJKSTRA, example_graph, 0)
        grown = []
        for prev, step in zip(steps, steps[1:]):
            new = step.visited_nodes - prev.visited_nodes
            grown.extend(new)
        assert grown == [0, 1, 2, 3]

    def test_relaxation_is_confirmed(self, example_graph):
        steps, _ = generate_steps(DIJKSTRA, example_graph, 0)
        relaxed = [s for s in steps if s.path_edge_updates]
        assert [s.current_edge for s in relaxed] == ["0-1", "0-2", "1-2", "2-3"]
        for s in relaxed:
            assert s.edge_updates[0].status == EdgeStatus.INCLUDED
            assert len(s.updated_distances) == 1

    def test_candidate_precedes_outcome(self, example_graph):
        steps, _ = generate_steps(DIJKSTRA, example_graph, 0)
        for prev, step in zip(steps, steps[1:]):
            if step.edge_updates and step.edge_updates[0].status == EdgeStatus.INCLUDED:
                assert prev.edge_updates[0].status == EdgeStatus.CANDIDATE
                assert prev.current_edge == step.current_edge

    def test_on_result_called_once(self, example_graph):
        calls = []
        generate_steps(DIJKSTRA, example_graph, 0, calls.append)
        assert len(calls) == 1

    def test_graph_not_mutated(self, example_graph):
        before = example_graph.to_dict()
        list(dijkstra(example_graph, 0))
        assert example_graph.to_dict() == before


class TestDijkstraEdgeCases:
    """Negative weights, unreachable nodes, undirected graphs."""

    def test_negative_edge_excluded(self):
        graph = make_graph(3, [(0, 1, -3), (0, 2, 1)])
        steps, result = generate_steps(DIJKSTRA, graph, 0)
        skipped = [s for s in steps if s.current_edge == "0-1"]
        assert len(skipped) == 1
        assert skipped[0].edge_updates[0].status == EdgeStatus.EXCLUDED
        assert "negative" in skipped[0].explanation
        assert math.isinf(result.distances[1])
        assert result.distances[2] == 1

    def test_unreachable_stays_infinite(self):
        graph = make_graph(3, [(0, 1, 2)])
        _, result = generate_steps(DIJKSTRA, graph, 0)
        assert math.isinf(result.distances[2])
        assert set(result.paths) == {1}
        assert result.reachable_count == 2

    def test_single_node(self):
        graph = make_graph(1, [])
        steps, result = generate_steps(DIJKSTRA, graph, 0)
        assert dict(result.distances) == {0: 0}
        assert result.paths == {}
        assert steps[-1].algorithm_step == DONE

    def test_undirected(self, undirected_graph):
        _, result = generate_steps(DIJKSTRA, undirected_graph, 2)
        assert dict(result.distances) == {0: 5, 1: 1, 2: 0}
        assert result.path_to(0) == (2, 1, 0)

    def test_no_improvement_is_excluded(self):
        graph = make_graph(3, [(0, 1, 1), (0, 2, 5), (1, 2, 10)])
        steps, _ = generate_steps(DIJKSTRA, graph, 0)
        outcome = [s for s in steps if s.current_edge == "1-2"][-1]
        assert outcome.edge_updates[0].status == EdgeStatus.EXCLUDED
        assert outcome.explanation.startswith("No improvement")

    def test_queue_entry_updated_in_place(self):
        graph = make_graph(3, [(0, 2, 10), (0, 1, 1), (1, 2, 1)])
        steps, result = generate_steps(DIJKSTRA, graph, 0)
        assert result.distances[2] == 2
        improved = [s for s in steps if s.current_edge == "1-2" and s.path_edge_updates][0]
        assert [(h.id, h.dist) for h in improved.min_heap] == [(2, 2)]
        assert sum(1 for s in steps if "Extracted node C" in s.explanation) == 1

    def test_missing_source(self, example_graph):
        with pytest.raises(GraphEditError):
            generate_steps(DIJKSTRA, example_graph, 9)

    def test_unknown_algorithm(self, example_graph):
        with pytest.raises(ValueError):
            generate_steps("astar", example_graph, 0)


def cheapest_simple_paths(graph, source):
    """Enumerate every simple path out of `source`; keep the cheapest per target."""
    best = {source: (0, (source,))}

    def walk(node, cost, path):
        for nbr, edge in graph.neighbours(node):
            if nbr in path:
                continue
            total = cost + edge.weight
            if nbr not in best or total < best[nbr][0]:
                best[nbr] = (total, path + (nbr,))
            walk(nbr, total, path + (nbr,))

    walk(source, 0, (source,))
    return best


class TestDijkstraAgainstReference:
    """Generated graphs agree with plain repeated relaxation."""

    @pytest.mark.parametrize("fixture", ["example_graph", "undirected_graph"])
    def test_matches_path_enumeration(self, fixture, request):
        graph = request.getfixturevalue(fixture)
        for source in graph.nodes:
            _, result = generate_steps(DIJKSTRA, graph, source)
            best = cheapest_simple_paths(graph, source)
            for target, dist in result.distances.items():
                if target in best:
                    assert dist == best[target][0]
                    if target != source:
                        assert result.path_to(target) == best[target][1]
                else:
                    assert math.isinf(dist)

    @pytest.mark.parametrize("seed", range(20))
    def test_matches_reference(self, seed):
        params = GraphParams(node_count=4 + seed % 10, is_directed=seed % 2 == 0, density=0.4)
        generated = generate_graph(params, DIJKSTRA, seed=seed)
        _, result = generate_steps(DIJKSTRA, generated.graph, generated.source_node)
        expected = reference_distances(generated.graph, generated.source_node)
        assert dict(result.distances) == expected

    @pytest.mark.parametrize("seed", range(5))
    def test_paths_sum_to_distances(self, seed):
        generated = generate_graph(GraphParams(node_count=9), DIJKSTRA, seed=seed)
        graph = generated.graph
        _, result = generate_steps(DIJKSTRA, graph, generated.source_node)
        for target, path in result.paths.items():
            cost = sum(graph.get_edge_between(a, b).weight for a, b in zip(path, path[1:]))
            assert cost == result.distances[target]

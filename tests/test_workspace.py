"""
Tests for the editing session: generation, manual edits and the answer view.
"""

import pytest

from engine import RunnerMode, Workspace
from graph import BELLMAN_FORD, DIJKSTRA, SPATIAL, GraphParams
from graph.weights import euclidean_weight


def distance_weight(ws, edge):
    low, high = ws.weight_range
    return euclidean_weight(ws.graph.nodes[edge.source], ws.graph.nodes[edge.target],
                            ws.params.viewport_width, ws.params.viewport_height, low, high)


def free_pair(ws):
    for a in ws.graph.nodes:
        for b in ws.graph.nodes:
            if a != b and ws.graph.get_edge(f"{a}-{b}") is None and ws.graph.get_edge(f"{b}-{a}") is None:
                return a, b
    raise AssertionError("graph is complete")


@pytest.fixture
def ws():
    w = Workspace(seed=11)
    w.generate()
    return w


@pytest.fixture
def spatial_ws():
    w = Workspace(GraphParams(graph_type=SPATIAL), seed=3)
    w.generate()
    return w


class TestGeneration:
    """Fresh graphs."""

    def test_generate_binds_runner(self, ws):
        assert ws.source is not None
        assert ws.runner.graph is ws.graph
        assert ws.runner.source == ws.source
        assert ws.feedback.startswith("Random graph generated.")

    def test_reseed_is_reproducible(self, ws):
        ws.reseed(5)
        first = ws.generate().graph.to_dict()
        ws.reseed(5)
        assert ws.generate().graph.to_dict() == first

    def test_bad_params_raise(self, ws):
        with pytest.raises(ValueError):
            ws.generate(GraphParams(node_count=40))

    def test_clear(self, ws):
        ws.clear_graph()
        assert ws.graph.node_count() == 0
        assert ws.source is None
        assert not ws.show_answer()

    def test_forced_negative_cycle(self):
        w = Workspace(GraphParams(allow_negative_edges=True), algorithm=BELLMAN_FORD, seed=1)
        w.generate(force_negative_cycle=True)
        assert w.has_negative_cycle
        assert w.show_answer()
        assert "negative cycle" in w.feedback

    def test_to_dict(self, ws):
        data = ws.to_dict()
        assert set(data) == {"graph", "params", "destination", "distanceWeights", "feedback", "runner"}
        assert data["params"]["sourceNode"] == ws.source


class TestConfiguration:
    """Algorithm, source and destination."""

    def test_switch_to_dijkstra_disables_negatives(self):
        w = Workspace(GraphParams(allow_negative_edges=True), algorithm=BELLMAN_FORD, seed=2)
        w.generate()
        graph = w.graph
        w.set_algorithm(DIJKSTRA)
        assert not w.params.allow_negative_edges
        assert "Negative edges disabled" in w.feedback
        assert w.graph is graph
        assert w.runner.algorithm == DIJKSTRA

    def test_set_source(self, ws):
        target = next(n for n in ws.graph.nodes if n != ws.source)
        assert ws.set_source(target)
        assert ws.runner.source == target

    def test_set_missing_source(self, ws):
        source = ws.source
        assert not ws.set_source(99)
        assert ws.source == source
        assert "does not exist" in ws.feedback

    def test_destination(self, ws):
        assert ws.set_destination(ws.source)
        assert ws.runner.destination == ws.source
        assert ws.set_destination(None)
        assert ws.destination is None


class TestManualEdits:
    """Edits reset the runner; rejections leave the graph alone."""

    @pytest.mark.parametrize("edit", [
        lambda w: w.add_node(20, 20),
        lambda w: w.move_node(w.source, 50, 50),
        lambda w: w.delete_node(next(n for n in w.graph.nodes if n != w.source)),
        lambda w: w.add_edge(*free_pair(w), 5),
        lambda w: w.reweight_edge(next(iter(w.graph.edges)), 7),
        lambda w: w.delete_edge(next(iter(w.graph.edges))),
        lambda w: w.set_source(next(n for n in w.graph.nodes if n != w.source)),
        lambda w: w.set_destination(w.source),
        lambda w: w.set_algorithm(BELLMAN_FORD),
        lambda w: w.resize(400, 300),
    ], ids=["add_node", "move_node", "delete_node", "add_edge", "reweight_edge",
            "delete_edge", "set_source", "set_destination", "set_algorithm", "resize"])
    def test_edit_resets_runner(self, ws, edit):
        ws.runner.seek(4)
        assert ws.runner.steps
        assert edit(ws) is not False
        assert ws.runner.current_step == 0
        assert ws.runner.steps == []
        assert ws.runner.state.value == "idle"

    def test_self_loop_rejected(self, ws):
        before = ws.graph.to_dict()
        assert not ws.add_edge(0, 0, 3)
        assert ws.graph.to_dict() == before

    def test_missing_weight_rejected(self, ws):
        a, b = free_pair(ws)
        assert not ws.add_edge(a, b)
        assert ws.feedback == "Enter a weight for the new edge."

    def test_negative_weight_rejected_for_dijkstra(self, ws):
        a, b = free_pair(ws)
        assert not ws.add_edge(a, b, -2)
        eid = next(iter(ws.graph.edges))
        assert not ws.reweight_edge(eid, -1)

    def test_duplicate_edge_rejected(self, ws):
        edge = next(iter(ws.graph.edges.values()))
        assert not ws.add_edge(edge.source, edge.target, 4)
        assert "already exists" in ws.feedback

    def test_add_and_delete_edge(self, ws):
        a, b = free_pair(ws)
        assert ws.add_edge(a, b, 6)
        assert ws.graph.edges[f"{a}-{b}"].weight == 6
        assert ws.delete_edge(f"{a}-{b}")
        assert not ws.delete_edge(f"{a}-{b}")

    def test_delete_source_node(self, ws):
        source = ws.source
        assert ws.delete_node(source)
        assert ws.source is None
        assert source not in ws.graph.nodes

    def test_move_missing_node(self, ws):
        assert not ws.move_node(42, 0, 0)

    def test_resize_scales_positions(self, ws):
        before = {n.id: (n.x, n.y) for n in ws.graph.nodes.values()}
        ws.resize(400, 300)
        for node in ws.graph.nodes.values():
            x, y = before[node.id]
            assert node.x == pytest.approx(x / 2)
            assert node.y == pytest.approx(y / 2)
        assert (ws.params.viewport_width, ws.params.viewport_height) == (400, 300)

    def test_resize_rejects_empty_viewport(self, ws):
        with pytest.raises(ValueError):
            ws.resize(0, 300)


class TestSpatialWeights:
    """Weights that follow node distance until edited by hand."""

    def test_generated_weights_follow_distance(self, spatial_ws):
        assert spatial_ws.distance_weights
        for edge in spatial_ws.graph.edges.values():
            assert edge.weight == distance_weight(spatial_ws, edge)

    def test_move_updates_incident_weights(self, spatial_ws):
        edge = next(iter(spatial_ws.graph.edges.values()))
        spatial_ws.move_node(edge.source, 700, 500)
        for e in spatial_ws.graph.edges.values():
            assert e.weight == distance_weight(spatial_ws, e)

    def test_resize_updates_weights(self, spatial_ws):
        spatial_ws.resize(1600, 1200)
        for e in spatial_ws.graph.edges.values():
            assert e.weight == distance_weight(spatial_ws, e)

    def test_new_edge_defaults_to_distance(self, spatial_ws):
        a, b = free_pair(spatial_ws)
        assert spatial_ws.add_edge(a, b)
        edge = spatial_ws.graph.edges[f"{a}-{b}"]
        assert edge.weight == distance_weight(spatial_ws, edge)
        assert spatial_ws.distance_weights

    def test_manual_weight_breaks_sync(self, spatial_ws):
        edge = next(iter(spatial_ws.graph.edges.values()))
        spatial_ws.runner.seek(3)
        assert spatial_ws.reweight_edge(edge.id, edge.weight + 1000)
        assert not spatial_ws.distance_weights
        assert spatial_ws.runner.steps == []
        assert spatial_ws.runner.current_step == 0
        spatial_ws.move_node(edge.source, 100, 100)
        assert edge.weight > 1000

    def test_restore(self, spatial_ws):
        edge = next(iter(spatial_ws.graph.edges.values()))
        spatial_ws.reweight_edge(edge.id, 999)
        assert spatial_ws.restore_distance_weights()
        assert spatial_ws.distance_weights
        assert edge.weight == distance_weight(spatial_ws, edge)

    def test_restore_needs_spatial(self, ws):
        assert not ws.restore_distance_weights()


class TestAnswerView:
    """Show answer / explore."""

    def test_show_answer(self, ws):
        assert ws.show_answer()
        assert ws.runner.mode == RunnerMode.VIEW
        assert ws.runner.is_completed
        assert ws.feedback.startswith("Dijkstra's complete.")

    def test_explore(self, ws):
        ws.show_answer()
        ws.explore()
        assert ws.runner.mode == RunnerMode.EXPLORE
        assert ws.runner.current_step == 0

    def test_source_change_leaves_view(self, ws):
        ws.show_answer()
        target = next(n for n in ws.graph.nodes if n != ws.source)
        ws.set_source(target)
        assert ws.runner.mode == RunnerMode.EXPLORE

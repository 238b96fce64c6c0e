"""
Tests for the Flask JSON API.
"""

import pytest

import main
from engine.runner import VIEW_MODE_MESSAGE


@pytest.fixture
def client():
    main.app.config["TESTING"] = True
    main.WORKSPACES.clear()
    with main.app.test_client() as c:
        yield c
    main.WORKSPACES.clear()


def generate(client, **params):
    params.setdefault("seed", 7)
    resp = client.post("/api/graph/generate", json=params)
    assert resp.status_code == 200
    return resp.get_json()


class TestRead:
    """GET endpoints."""

    def test_algorithms(self, client):
        data = client.get("/api/algorithms").get_json()
        assert [a["key"] for a in data] == ["dijkstra", "bellman_ford"]
        assert data[1]["supportsNegative"]

    def test_state_creates_workspace(self, client):
        data = client.get("/api/state").get_json()
        assert len(data["graph"]["nodes"]) == 8
        assert data["runner"]["state"] == "idle"
        assert len(main.WORKSPACES) == 1

    def test_session_reuses_workspace(self, client):
        client.get("/api/state")
        client.get("/api/state")
        assert len(main.WORKSPACES) == 1

    def test_steps(self, client):
        generate(client)
        client.post("/api/step/next")
        data = client.get("/api/steps").get_json()
        assert data["steps"][0]["stepNumber"] == 0
        assert data["steps"][-1]["algorithmStep"] == "Done"


class TestGraphRoutes:
    """Generation and edits."""

    def test_generate_with_params(self, client):
        data = generate(client, nodeCount=5, isDirected=False)
        assert len(data["graph"]["nodes"]) == 5
        assert data["graph"]["directed"] is False

    def test_generate_same_seed(self, client):
        assert generate(client, seed=3)["graph"] == generate(client, seed=3)["graph"]

    def test_generate_bad_params(self, client):
        resp = client.post("/api/graph/generate", json={"nodeCount": 50})
        assert resp.status_code == 400
        assert "node_count" in resp.get_json()["error"]

    def test_force_cycle_must_be_boolean(self, client):
        resp = client.post("/api/graph/generate", json={"forceNegativeCycle": "false"})
        assert resp.status_code == 400
        assert "forceNegativeCycle" in resp.get_json()["error"]

    def test_force_cycle(self, client):
        data = generate(client, forceNegativeCycle=True, allowNegativeEdges=True)
        assert data["params"]["hasNegativeCycle"] is False
        client.post("/api/config/algo", json={"algorithm": "bellman_ford"})
        data = generate(client, forceNegativeCycle=True, allowNegativeEdges=True)
        assert data["params"]["hasNegativeCycle"] is True

    def test_clear(self, client):
        client.post("/api/graph/clear")
        data = client.get("/api/state").get_json()
        assert data["graph"]["nodes"] == []

    def test_add_node_and_edge(self, client):
        client.post("/api/graph/clear")
        client.post("/api/node/add", json={"x": 100, "y": 100})
        client.post("/api/node/add", json={"x": 300, "y": 100})
        resp = client.post("/api/edge/add", json={"source": 0, "target": 1, "weight": 4})
        assert resp.status_code == 200
        assert resp.get_json()["graph"]["edges"][0]["id"] == "0-1"

    def test_rejected_edit(self, client):
        generate(client)
        resp = client.post("/api/edge/add", json={"source": 0, "target": 0, "weight": 1})
        assert resp.status_code == 400
        body = resp.get_json()
        assert body["ok"] is False
        assert body["error"] == body["feedback"]

    def test_missing_field(self, client):
        resp = client.post("/api/node/move", json={"id": 0, "x": 10})
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Missing field: y"

    def test_bad_number(self, client):
        resp = client.post("/api/node/add", json={"x": "left", "y": 1})
        assert resp.status_code == 400

    def test_resize(self, client):
        data = client.post("/api/graph/resize", json={"width": 1000, "height": 700}).get_json()
        assert data["params"]["viewport_width"] == 1000

    def test_edge_weight_and_delete(self, client):
        eid = generate(client)["graph"]["edges"][0]["id"]
        assert client.post("/api/edge/weight", json={"id": eid, "weight": 9}).status_code == 200
        assert client.post("/api/edge/delete", json={"id": eid}).status_code == 200
        assert client.post("/api/edge/delete", json={"id": eid}).status_code == 400


class TestPlaybackRoutes:
    """Stepping through the log."""

    def test_next_and_prev(self, client):
        generate(client)
        data = client.post("/api/step/next").get_json()
        assert data["runner"]["currentStep"] == 1
        assert data["runner"]["state"] == "paused"
        data = client.post("/api/step/prev").get_json()
        assert data["runner"]["currentStep"] == 0

    def test_goto_clamps(self, client):
        generate(client)
        runner = client.post("/api/step/goto", json={"index": 10000}).get_json()["runner"]
        assert runner["currentStep"] == runner["totalSteps"]
        assert runner["state"] == "completed"

    def test_play_pause(self, client):
        generate(client)
        assert client.post("/api/step/play").get_json()["runner"]["state"] == "running"
        assert client.post("/api/step/pause").get_json()["runner"]["state"] == "paused"
        assert client.post("/api/step/resume").get_json()["runner"]["state"] == "running"

    def test_tick_before_deadline(self, client):
        generate(client)
        client.post("/api/step/play")
        data = client.post("/api/step/tick").get_json()
        assert data["advanced"] is False

    def test_reset(self, client):
        generate(client)
        client.post("/api/step/forward")
        data = client.post("/api/step/reset").get_json()
        assert data["runner"]["currentStep"] == 0
        assert data["runner"]["state"] == "idle"


class TestConfigRoutes:
    """Algorithm, speed, mode, source."""

    def test_unknown_algorithm(self, client):
        assert client.post("/api/config/algo", json={"algorithm": "astar"}).status_code == 400

    def test_switch_algorithm(self, client):
        data = client.post("/api/config/algo", json={"algorithm": "bellman_ford"}).get_json()
        assert data["runner"]["algorithm"] == "bellman_ford"

    def test_speed(self, client):
        assert client.post("/api/config/speed", json={"speed": "turbo"}).get_json()["speed"] == 0.2
        assert client.post("/api/config/speed", json={"speed": 0.7}).get_json()["speed"] == 0.7
        assert client.post("/api/config/speed", json={"speed": "warp"}).status_code == 400

    def test_view_mode_refuses_stepping(self, client):
        generate(client)
        data = client.post("/api/config/mode", json={"mode": "view"}).get_json()
        assert data["runner"]["mode"] == "view"
        assert data["runner"]["state"] == "completed"
        data = client.post("/api/step/next").get_json()
        assert data["runner"]["explanation"] == VIEW_MODE_MESSAGE

    def test_unknown_mode(self, client):
        assert client.post("/api/config/mode", json={"mode": "zen"}).status_code == 400

    def test_source_and_destination(self, client):
        generate(client)
        data = client.post("/api/config/source", json={"node": 1}).get_json()
        assert data["runner"]["source"] == 1
        data = client.post("/api/config/destination", json={"node": 2}).get_json()
        assert data["destination"] == 2
        data = client.post("/api/config/destination", json={}).get_json()
        assert data["destination"] is None

    def test_answer(self, client):
        generate(client)
        data = client.post("/api/answer").get_json()
        assert data["runner"]["result"] is not None


class TestCompareRoute:
    """Side-by-side run."""

    def test_compare(self, client):
        generate(client)
        data = client.post("/api/compare").get_json()
        assert data["left"]["algo_key"] == "dijkstra"
        assert data["right"]["algo_key"] == "bellman_ford"
        assert data["distances_agree"] is True

    def test_compare_without_source(self, client):
        client.post("/api/graph/clear")
        assert client.post("/api/compare").status_code == 400

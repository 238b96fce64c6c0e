"""
main.py - Shortest-Path Stepper Flask App
=========================================
JSON API over the generator, the step generators and the runner.  The
renderer lives elsewhere: it polls /api/state and paints the graph with
the `edgeUpdates` overlay it gets back.

Routes:
  GET  /api/algorithms             - registry cards
  GET  /api/state                  - graph + runner observables + result
  GET  /api/steps                  - the full step log
  POST /api/graph/generate         - generate a new graph
  POST /api/graph/clear            - empty the canvas
  POST /api/graph/resize           - new viewport size
  POST /api/graph/restore_weights  - spatial weights back to node distances
  POST /api/node/add | move | delete
  POST /api/edge/add | weight | delete
  POST /api/config/algo | source | destination | speed | mode
  POST /api/step/play | pause | resume | next | prev | forward | goto | reset | tick
  POST /api/answer                 - jump to the final answer (view mode)
  POST /api/compare                - run both algorithms on the current graph

State management:
  Each browser session carries a random token; the Workspace for that
  token lives in process memory (WORKSPACES).  Nothing is persisted.

Configuration (env vars prefixed STEPPER_, e.g. STEPPER_DEFAULT_SPEED=0.5):
  DEFAULT_SPEED, VIEWPORT_WIDTH, VIEWPORT_HEIGHT, LOG_LEVEL, SECRET_KEY
"""

import logging
import secrets
from dataclasses import asdict
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request, session

from algorithms import list_algorithms
from engine import Recorder, Workspace, compare
from graph import ALGORITHMS, GraphParams


app = Flask(__name__)
app.config.update(
    SECRET_KEY=secrets.token_hex(32),
    DEFAULT_SPEED=1.0,
    VIEWPORT_WIDTH=800,
    VIEWPORT_HEIGHT=600,
    LOG_LEVEL="INFO",
)
app.config.from_prefixed_env("STEPPER")

WORKSPACES: Dict[str, Workspace] = {}

# request keys -> GraphParams fields
PARAM_KEYS = {
    "nodeCount":          "node_count",
    "density":            "density",
    "minWeight":          "min_weight",
    "maxWeight":          "max_weight",
    "allowNegativeEdges": "allow_negative_edges",
    "isDirected":         "is_directed",
    "graphType":          "graph_type",
    "viewportWidth":      "viewport_width",
    "viewportHeight":     "viewport_height",
}


# ---------------------------------------------------------------------------
# Session State Helpers
# ---------------------------------------------------------------------------
def get_workspace() -> Workspace:
    """Workspace for this session, created (with a first graph) on demand."""
    sid = session.get("sid")
    if sid is None or sid not in WORKSPACES:
        sid = secrets.token_hex(16)
        session["sid"] = sid
        params = GraphParams(
            viewport_width=app.config["VIEWPORT_WIDTH"],
            viewport_height=app.config["VIEWPORT_HEIGHT"],
        )
        ws = Workspace(params)
        ws.runner.set_speed(float(app.config["DEFAULT_SPEED"]))
        ws.generate()
        WORKSPACES[sid] = ws
    return WORKSPACES[sid]


def payload() -> Dict[str, Any]:
    return request.get_json(silent=True) or {}


def require(data: Dict[str, Any], key: str) -> Any:
    if key not in data:
        raise ValueError(f"Missing field: {key}")
    return data[key]


def as_int(value: Any, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an integer") from None


def as_float(value: Any, name: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number") from None


def optional_node(data: Dict[str, Any], key: str) -> Optional[int]:
    value = data.get(key)
    return None if value is None else as_int(value, key)


def state_response(ws: Workspace):
    return jsonify(ws.to_dict())


def edit_response(ws: Workspace, ok: bool):
    """Rejected edits are a 400 carrying the feedback; the graph is untouched."""
    body = ws.to_dict()
    body["ok"] = ok
    if not ok:
        body["error"] = ws.feedback
        return jsonify(body), 400
    return jsonify(body)


@app.errorhandler(ValueError)
def handle_value_error(exc: ValueError):
    app.logger.info("bad request to %s: %s", request.path, exc)
    return jsonify({"error": str(exc)}), 400


# ---------------------------------------------------------------------------
# API: Read
# ---------------------------------------------------------------------------
@app.route("/api/algorithms")
def api_algorithms():
    return jsonify([
        {
            "key":              a.key,
            "label":            a.label,
            "pseudocode":       a.pseudocode,
            "tags":             a.tags,
            "supportsNegative": a.supports_negative,
            "complexityTime":   a.complexity_time,
            "complexitySpace":  a.complexity_space,
            "description":      a.description,
        }
        for a in list_algorithms()
    ])


@app.route("/api/state")
def api_state():
    return state_response(get_workspace())


@app.route("/api/steps")
def api_steps():
    ws = get_workspace()
    return jsonify({"steps": [s.to_dict() for s in ws.runner.steps]})


# ---------------------------------------------------------------------------
# API: Graph
# ---------------------------------------------------------------------------
@app.route("/api/graph/generate", methods=["POST"])
def api_graph_generate():
    ws = get_workspace()
    data = payload()

    fields = {PARAM_KEYS[k]: v for k, v in data.items() if k in PARAM_KEYS}
    try:
        params = GraphParams(**dict(asdict(ws.params), **fields)).validate()
    except TypeError as exc:
        raise ValueError(str(exc)) from None

    force = data.get("forceNegativeCycle")
    if force is not None and not isinstance(force, bool):
        raise ValueError("forceNegativeCycle must be true, false or null")

    if "seed" in data and data["seed"] is not None:
        ws.reseed(as_int(data["seed"], "seed"))
    ws.generate(params, force_negative_cycle=force)
    return state_response(ws)


@app.route("/api/graph/clear", methods=["POST"])
def api_graph_clear():
    ws = get_workspace()
    ws.clear_graph()
    return state_response(ws)


@app.route("/api/graph/resize", methods=["POST"])
def api_graph_resize():
    ws = get_workspace()
    data = payload()
    ws.resize(as_int(require(data, "width"), "width"), as_int(require(data, "height"), "height"))
    return state_response(ws)


@app.route("/api/graph/restore_weights", methods=["POST"])
def api_graph_restore_weights():
    ws = get_workspace()
    return edit_response(ws, ws.restore_distance_weights())


# ---------------------------------------------------------------------------
# API: Nodes & Edges
# ---------------------------------------------------------------------------
@app.route("/api/node/add", methods=["POST"])
def api_node_add():
    ws = get_workspace()
    data = payload()
    ws.add_node(as_float(require(data, "x"), "x"), as_float(require(data, "y"), "y"))
    return edit_response(ws, True)


@app.route("/api/node/move", methods=["POST"])
def api_node_move():
    ws = get_workspace()
    data = payload()
    ok = ws.move_node(as_int(require(data, "id"), "id"),
                      as_float(require(data, "x"), "x"),
                      as_float(require(data, "y"), "y"))
    return edit_response(ws, ok)


@app.route("/api/node/delete", methods=["POST"])
def api_node_delete():
    ws = get_workspace()
    return edit_response(ws, ws.delete_node(as_int(require(payload(), "id"), "id")))


@app.route("/api/edge/add", methods=["POST"])
def api_edge_add():
    ws = get_workspace()
    data = payload()
    weight = data.get("weight")
    ok = ws.add_edge(as_int(require(data, "source"), "source"),
                     as_int(require(data, "target"), "target"),
                     None if weight is None else as_float(weight, "weight"))
    return edit_response(ws, ok)


@app.route("/api/edge/weight", methods=["POST"])
def api_edge_weight():
    ws = get_workspace()
    data = payload()
    ok = ws.reweight_edge(str(require(data, "id")), as_float(require(data, "weight"), "weight"))
    return edit_response(ws, ok)


@app.route("/api/edge/delete", methods=["POST"])
def api_edge_delete():
    ws = get_workspace()
    return edit_response(ws, ws.delete_edge(str(require(payload(), "id"))))


# ---------------------------------------------------------------------------
# API: Config Changes
# ---------------------------------------------------------------------------
@app.route("/api/config/algo", methods=["POST"])
def api_config_algo():
    ws = get_workspace()
    algorithm = require(payload(), "algorithm")
    if algorithm not in ALGORITHMS:
        raise ValueError(f"Unknown algorithm: {algorithm}")
    ws.set_algorithm(algorithm)
    return state_response(ws)


@app.route("/api/config/source", methods=["POST"])
def api_config_source():
    ws = get_workspace()
    return edit_response(ws, ws.set_source(as_int(require(payload(), "node"), "node")))


@app.route("/api/config/destination", methods=["POST"])
def api_config_destination():
    ws = get_workspace()
    return edit_response(ws, ws.set_destination(optional_node(payload(), "node")))


@app.route("/api/config/speed", methods=["POST"])
def api_config_speed():
    ws = get_workspace()
    speed = require(payload(), "speed")
    ws.runner.set_speed(speed if isinstance(speed, str) else as_float(speed, "speed"))
    return jsonify({"speed": ws.runner.speed})


@app.route("/api/config/mode", methods=["POST"])
def api_config_mode():
    ws = get_workspace()
    mode = require(payload(), "mode")
    if mode == "view":
        return edit_response(ws, ws.show_answer())
    if mode != "explore":
        raise ValueError(f"Unknown mode: {mode}")
    ws.explore()
    return state_response(ws)


# ---------------------------------------------------------------------------
# API: Playback
# ---------------------------------------------------------------------------
@app.route("/api/step/play", methods=["POST"])
def api_step_play():
    ws = get_workspace()
    ws.runner.play()
    return state_response(ws)


@app.route("/api/step/pause", methods=["POST"])
def api_step_pause():
    ws = get_workspace()
    ws.runner.pause()
    return state_response(ws)


@app.route("/api/step/resume", methods=["POST"])
def api_step_resume():
    ws = get_workspace()
    ws.runner.resume()
    return state_response(ws)


@app.route("/api/step/next", methods=["POST"])
def api_step_next():
    ws = get_workspace()
    ws.runner.step()
    return state_response(ws)


@app.route("/api/step/prev", methods=["POST"])
def api_step_prev():
    ws = get_workspace()
    ws.runner.back_step()
    return state_response(ws)


@app.route("/api/step/forward", methods=["POST"])
def api_step_forward():
    ws = get_workspace()
    ws.runner.forward_step()
    return state_response(ws)


@app.route("/api/step/goto", methods=["POST"])
def api_step_goto():
    ws = get_workspace()
    ws.runner.seek(as_int(require(payload(), "index"), "index"))
    return state_response(ws)


@app.route("/api/step/reset", methods=["POST"])
def api_step_reset():
    ws = get_workspace()
    ws.runner.reset()
    return state_response(ws)


@app.route("/api/step/tick", methods=["POST"])
def api_step_tick():
    ws = get_workspace()
    advanced = ws.runner.tick()
    body = ws.to_dict()
    body["advanced"] = advanced
    return jsonify(body)


@app.route("/api/answer", methods=["POST"])
def api_answer():
    ws = get_workspace()
    return edit_response(ws, ws.show_answer())


# ---------------------------------------------------------------------------
# API: Comparison
# ---------------------------------------------------------------------------
@app.route("/api/compare", methods=["POST"])
def api_compare():
    ws = get_workspace()
    if ws.source is None:
        raise ValueError("Select a source node first.")

    recorders = []
    for key in ALGORITHMS:
        rec = Recorder()
        rec.start(key, ws.graph, ws.source, ws.destination)
        rec.run_to_completion()
        recorders.append(rec)
    return jsonify(compare(*recorders).to_dict())


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    print("=" * 60)
    print("  Shortest-Path Stepper API")
    print("  Listening on http://localhost:5000/api/state")
    print("=" * 60)
    app.run(debug=True, host="0.0.0.0", port=5000)

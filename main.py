"""
main.py — Floyd Stepper Flask App
==================================
JSON API that lets a front-end drive a stepped Floyd–Warshall run one
cell at a time and ask for the paths it should draw.

Routes:
  POST /api/graph/import       – load an adjacency matrix (text or JSON rows)
  POST /api/graph/example      – load the built-in 4-vertex example
  POST /api/graph/file         – load the matrix file named by INPUT_FILE
  POST /api/step/next          – advance one step
  POST /api/step/play          – toggle play/pause
  POST /api/step/tick          – let the stepper advance if its dwell time elapsed
  POST /api/run                – run to completion, return analytics
  POST /api/path               – path + weight for (start, finish, before?)
  GET  /api/state              – indices, phase, both distance generations
  POST /api/config/speed       – playback speed preset

State management:
  Steppers are kept in an in-memory OrderedDict keyed by a random id stored
  in the Flask session, guarded by a lock.  Once it holds MAX_SESSIONS
  steppers the least recently used one is evicted.

Configuration (app.config, overridable with FLOYD_* env vars):
  MAX_VERTICES   – largest matrix accepted by /api/graph/import
  DEFAULT_SPEED  – speed preset for new steppers
  MAX_SESSIONS   – steppers kept in memory at once
  INPUT_FILE     – matrix file read by /api/graph/file
"""

import logging
import secrets
import threading
from collections import OrderedDict
from typing import Any, Dict, List, Optional

from flask import Flask, jsonify, request, session

from graph import (
    NO_EDGE,
    FloydError,
    InvalidDimension,
    example_matrix,
    format_weight,
    load_adjacency_matrix,
    parse_adjacency_matrix,
)
from algorithms import PSEUDOCODE, path_weight
from engine import SPEED_PRESETS, Recorder, Stepper

logger = logging.getLogger(__name__)


app = Flask(__name__)
app.secret_key = secrets.token_hex(32)
app.config.from_mapping(
    MAX_VERTICES=64,
    DEFAULT_SPEED="medium",
    MAX_SESSIONS=256,
    INPUT_FILE="input.txt",
)
app.config.from_prefixed_env("FLOYD")

_STEPPERS: "OrderedDict[str, Stepper]" = OrderedDict()
_STEPPERS_LOCK = threading.Lock()


# ---------------------------------------------------------------------------
# Session State Helpers
# ---------------------------------------------------------------------------
class NoGraphLoaded(FloydError):
    pass


def get_stepper() -> Stepper:
    sid = session.get("sid")
    stepper = None
    if sid:
        with _STEPPERS_LOCK:
            stepper = _STEPPERS.get(sid)
            if stepper is not None:
                _STEPPERS.move_to_end(sid)
    if stepper is None:
        raise NoGraphLoaded("Load a graph first")
    return stepper


def store_stepper(sid: str, stepper: Stepper) -> None:
    """Remember `stepper` for `sid`, evicting least recently used sessions past MAX_SESSIONS."""
    with _STEPPERS_LOCK:
        _STEPPERS[sid] = stepper
        _STEPPERS.move_to_end(sid)
        while len(_STEPPERS) > max(1, app.config["MAX_SESSIONS"]):
            evicted, _ = _STEPPERS.popitem(last=False)
            logger.info("session %s: evicted", evicted[:8])


def install_stepper(adjacency: List[List[Any]]) -> Stepper:
    n = len(adjacency)
    if n > app.config["MAX_VERTICES"]:
        raise InvalidDimension(f"At most {app.config['MAX_VERTICES']} vertices are supported, got {n}.")

    stepper = Stepper()
    stepper.start(adjacency)
    stepper.set_speed(app.config["DEFAULT_SPEED"])

    sid = session.get("sid") or secrets.token_hex(16)
    session["sid"] = sid
    store_stepper(sid, stepper)
    logger.info("session %s: loaded %d-vertex graph", sid[:8], n)
    return stepper


def _jsonable(value: float) -> Any:
    return "∞" if value == NO_EDGE else value


def _rows(rows: List[List[float]]) -> List[List[Any]]:
    return [[_jsonable(v) for v in row] for row in rows]


def describe(stepper: Stepper) -> Dict[str, Any]:
    cursor = stepper.cursor
    k, i, j = cursor.indices
    return {
        "vertex_count": cursor.vertex_count,
        "k": k, "i": i, "j": j,
        "phase":        cursor.phase.value,
        "last_outcome": cursor.last_outcome.value if cursor.last_outcome else None,
        "state":        stepper.state.value,
        "total_steps":  stepper.total_steps,
        "adjacency":    _rows(cursor.adjacency_rows()),
        "before":       _rows(cursor.distance_rows(use_before=True)),
        "after":        _rows(cursor.distance_rows()),
    }


@app.errorhandler(FloydError)
def handle_floyd_error(e: FloydError):
    return jsonify({"error": str(e)}), 400


# ---------------------------------------------------------------------------
# API: Graph Loading
# ---------------------------------------------------------------------------
@app.route("/api/graph/import", methods=["POST"])
def api_graph_import():
    data = request.get_json(silent=True) or {}

    if "matrix" in data:
        adjacency = data["matrix"]
        if not isinstance(adjacency, list) or not all(isinstance(r, list) for r in adjacency):
            return jsonify({"error": "matrix must be a list of rows"}), 400
    elif "text" in data:
        adjacency = parse_adjacency_matrix(data["text"])
    else:
        return jsonify({"error": "Send either 'text' or 'matrix'"}), 400

    stepper = install_stepper(adjacency)
    return jsonify(describe(stepper))


@app.route("/api/graph/example", methods=["POST"])
def api_graph_example():
    stepper = install_stepper(example_matrix())
    return jsonify(describe(stepper))


@app.route("/api/graph/file", methods=["POST"])
def api_graph_file():
    path = app.config["INPUT_FILE"]
    try:
        adjacency = load_adjacency_matrix(path)
    except (OSError, UnicodeDecodeError):
        logger.warning("could not read matrix file %s", path)
        return jsonify({"error": f"The file {path} couldn't be loaded"}), 400

    stepper = install_stepper(adjacency)
    return jsonify(describe(stepper))


# ---------------------------------------------------------------------------
# API: Stepping
# ---------------------------------------------------------------------------
def _step_payload(stepper: Stepper) -> Dict[str, Any]:
    step = stepper.current_step
    return {
        "step":      step.to_dict() if step else None,
        "highlight": stepper.highlight().to_dict(),
        "dwell":     stepper.current_dwell,
        "state":     stepper.state.value,
    }


@app.route("/api/step/next", methods=["POST"])
def api_step_next():
    stepper = get_stepper()
    stepper.next_step()
    return jsonify(_step_payload(stepper))


@app.route("/api/step/play", methods=["POST"])
def api_step_play():
    stepper = get_stepper()
    stepper.toggle_play()
    return jsonify({"is_playing": stepper.is_playing, "state": stepper.state.value})


@app.route("/api/step/tick", methods=["POST"])
def api_step_tick():
    stepper = get_stepper()
    advanced = stepper.tick()
    payload = _step_payload(stepper)
    payload["advanced"] = advanced
    return jsonify(payload)


@app.route("/api/run", methods=["POST"])
def api_run():
    stepper = get_stepper()

    rec = Recorder()
    rec.start(stepper.cursor.adjacency_rows())
    rec.run_to_completion()

    # the finished run becomes the session's stepper
    store_stepper(session["sid"], rec.stepper)
    result = rec.export()
    result["pseudocode"] = PSEUDOCODE
    return jsonify(result)


# ---------------------------------------------------------------------------
# API: Queries
# ---------------------------------------------------------------------------
@app.route("/api/path", methods=["POST"])
def api_path():
    stepper = get_stepper()
    data = request.get_json(silent=True) or {}

    start, finish = data.get("start"), data.get("finish")
    if not isinstance(start, int) or not isinstance(finish, int):
        return jsonify({"error": "start and finish must be integers"}), 400

    path = stepper.cursor.path(start, finish, use_before=bool(data.get("before", False)))
    weight: Optional[str] = None
    if path:
        weight = format_weight(path_weight(stepper.cursor.adjacency_rows(), path))
    return jsonify({"path": path, "weight": weight})


@app.route("/api/state", methods=["GET"])
def api_state():
    return jsonify(describe(get_stepper()))


# ---------------------------------------------------------------------------
# API: Config Changes
# ---------------------------------------------------------------------------
@app.route("/api/config/speed", methods=["POST"])
def api_config_speed():
    stepper = get_stepper()
    speed = (request.get_json(silent=True) or {}).get("speed", "medium")
    if speed not in SPEED_PRESETS:
        return jsonify({"error": f"Unknown speed preset: {speed}"}), 400
    stepper.set_speed(speed)
    return jsonify({"speed": speed, "factor": stepper.speed})


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    print("=" * 60)
    print("  Floyd-Warshall Stepper")
    print("  Starting Flask server...")
    print("  API at http://localhost:5000/api/state")
    print("=" * 60)
    app.run(debug=True, host="0.0.0.0", port=5000)

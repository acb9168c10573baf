"""Flask web server for the regret-matching trainer."""

import json
import logging
import time
import queue
import threading
from flask import Flask, request, jsonify, Response

from .engine import (
    build_players,
    train,
    DEFAULT_ITERATIONS,
    DEFAULT_P1_WEIGHTS,
    DEFAULT_P2_WEIGHTS,
)
from .moves import MOVES
from .stats import exploitability, distance_from_equilibrium, expected_utility

MAX_WEB_ITERATIONS = 1_000_000

logger = logging.getLogger(__name__)

app = Flask(__name__)


def _parse_training_params(data) -> dict:
    """Validate request parameters; raises ValueError on bad input."""
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")

    iterations = data.get("iterations", DEFAULT_ITERATIONS)
    if isinstance(iterations, bool) or not isinstance(iterations, int):
        raise ValueError("'iterations' must be an integer")
    if iterations > MAX_WEB_ITERATIONS:
        raise ValueError(f"'iterations' must be at most {MAX_WEB_ITERATIONS}")

    seed = data.get("seed", None)
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        raise ValueError("'seed' must be an integer")

    snapshot_every = data.get("snapshot_every", 0)
    if isinstance(snapshot_every, bool) or not isinstance(snapshot_every, int):
        raise ValueError("'snapshot_every' must be an integer")

    p1 = data.get("p1", list(DEFAULT_P1_WEIGHTS))
    p2 = data.get("p2", list(DEFAULT_P2_WEIGHTS))
    for key, weights in (("p1", p1), ("p2", p2)):
        if not isinstance(weights, list) or len(weights) != len(MOVES):
            raise ValueError(f"'{key}' must be a list of {len(MOVES)} weights")
        if any(isinstance(w, bool) or not isinstance(w, (int, float)) for w in weights):
            raise ValueError(f"'{key}' weights must be numbers")

    return {"iterations": iterations, "seed": seed,
            "snapshot_every": snapshot_every, "p1": p1, "p2": p2}


def _result_payload(result, player_one, player_two) -> dict:
    payload = result.to_dict()
    payload["p1_exploitability"] = round(exploitability(result.p1_end), 4)
    payload["p2_exploitability"] = round(exploitability(result.p2_end), 4)
    payload["p1_distance"] = round(distance_from_equilibrium(result.p1_end), 4)
    payload["p2_distance"] = round(distance_from_equilibrium(result.p2_end), 4)
    payload["p1_expected_utility"] = round(expected_utility(result.p1_end, result.p2_end), 4)
    payload["p1_strategy"] = player_one.strategy.to_dict()
    payload["p2_strategy"] = player_two.strategy.to_dict()
    return payload


@app.errorhandler(ValueError)
def handle_value_error(e):
    return jsonify({"error": str(e)}), 400


@app.route("/")
def index():
    return jsonify({
        "service": "rps_regret",
        "endpoints": ["/api/moves", "/api/train", "/api/train/stream"],
    })


@app.route("/api/moves")
def api_moves():
    return jsonify([m.value for m in MOVES])


@app.route("/api/train", methods=["POST"])
def api_train():
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    params = _parse_training_params(data)
    player_one, player_two = build_players(params["p1"], params["p2"])

    result = train(
        player_one, player_two,
        iterations=params["iterations"],
        seed=params["seed"],
        snapshot_every=params["snapshot_every"],
    )
    return jsonify(_result_payload(result, player_one, player_two))


# ---------------------------------------------------------------------------
# SSE streaming endpoint for live progress tracking
# ---------------------------------------------------------------------------

def _sse_event(data: dict, event: str = "message") -> str:
    """Format a Server-Sent Event string."""
    payload = json.dumps(data)
    return f"event: {event}\ndata: {payload}\n\n"


def _int_arg(name: str):
    """Read an optional integer from the query string."""
    raw = request.args.get(name)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"'{name}' must be an integer, got '{raw}'")


def _weights_arg(name: str, default: tuple) -> list:
    """Parse a comma-separated weight triple from the query string."""
    raw = request.args.get(name)
    if raw is None:
        return list(default)
    try:
        return [float(v) for v in raw.split(",")]
    except ValueError:
        raise ValueError(f"'{name}' must be comma-separated numbers, got '{raw}'")


@app.route("/api/train/stream")
def api_train_stream():
    """SSE endpoint that streams training progress."""
    query = {
        "seed": _int_arg("seed"),
        "p1": _weights_arg("p1", DEFAULT_P1_WEIGHTS),
        "p2": _weights_arg("p2", DEFAULT_P2_WEIGHTS),
    }
    for key in ("iterations", "snapshot_every"):
        value = _int_arg(key)
        if value is not None:
            query[key] = value
    params = _parse_training_params(query)
    iterations = params["iterations"]
    snapshot_every = params["snapshot_every"] or max(iterations // 50, 1)
    # Build players before streaming so bad weights still produce a 400
    player_one, player_two = build_players(params["p1"], params["p2"])

    def generate():
        progress_queue = queue.Queue()
        start_time = time.time()
        final_result = [None]  # mutable container for thread result

        def on_progress(completed, total):
            elapsed = time.time() - start_time
            eta = (elapsed / completed) * (total - completed) if completed else 0
            progress_queue.put({
                "completed": completed,
                "total": total,
                "elapsed": round(elapsed, 1),
                "eta": round(eta, 1),
                "pct": round(completed / total * 100, 1),
                "p1_average": {m.value: pct for m, pct in
                               player_one.strategy.average_strategy_percentages().items()},
                "p2_average": {m.value: pct for m, pct in
                               player_two.strategy.average_strategy_percentages().items()},
            })

        def run_training():
            try:
                final_result[0] = train(
                    player_one, player_two,
                    iterations=iterations,
                    seed=params["seed"],
                    snapshot_every=snapshot_every,
                    on_progress=on_progress,
                )
            except Exception as e:
                logger.exception("Streamed training failed")
                progress_queue.put(("ERROR", str(e)))
            finally:
                progress_queue.put("DONE")

        thread = threading.Thread(target=run_training, daemon=True)
        thread.start()

        while True:
            try:
                item = progress_queue.get(timeout=60)
            except queue.Empty:
                # Send a keepalive
                yield ": keepalive\n\n"
                continue

            if item == "DONE":
                if final_result[0] is not None:
                    payload = _result_payload(final_result[0], player_one, player_two)
                    payload["elapsed"] = round(time.time() - start_time, 1)
                    yield _sse_event(payload, event="done")
                break
            elif isinstance(item, tuple):
                yield _sse_event({"error": item[1]}, event="error")
            else:
                yield _sse_event(item, event="progress")

    return Response(
        generate(),
        mimetype="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
            "Connection": "keep-alive",
        },
    )


def main():
    print("\n🎮 RPS Regret Matching Web API")
    print("  → http://localhost:5000\n")
    app.run(debug=True, port=5000)


if __name__ == "__main__":
    main()

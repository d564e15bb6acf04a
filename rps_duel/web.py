"""Flask web server for the Rock-Paper-Scissors game."""

import json
import logging
import queue
from typing import Optional

from flask import Flask, Response, jsonify, render_template, request

from .config import GameConfig
from .engine import InvalidMoveError, ManualPlayDisabledError
from .session import GameSession

logger = logging.getLogger(__name__)

KEEPALIVE_SECONDS = 30


def _sse_event(data: dict, event: str = "message") -> str:
    """Format a Server-Sent Event string."""
    payload = json.dumps(data)
    return f"event: {event}\ndata: {payload}\n\n"


def _json_object() -> dict:
    """Request body as a dict; a missing or unparsable body counts as empty."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("request body must be a JSON object")
    return data


def create_app(session: Optional[GameSession] = None,
               config: Optional[GameConfig] = None) -> Flask:
    """Build the app around one GameSession (created from config if absent)."""
    if config is None:
        config = GameConfig.from_env()
    if session is None:
        session = GameSession.from_config(config)

    app = Flask(__name__)
    app.extensions["rps_session"] = session

    @app.errorhandler(InvalidMoveError)
    def handle_invalid_move(exc):
        logger.info("rejected move: %r", exc.value)
        return jsonify({"error": str(exc)}), 400

    @app.errorhandler(ManualPlayDisabledError)
    def handle_manual_disabled(exc):
        return jsonify({"error": str(exc)}), 409

    @app.errorhandler(ValueError)
    def handle_bad_value(exc):
        return jsonify({"error": str(exc)}), 400

    @app.route("/")
    def index():
        return render_template(
            "index.html",
            history_size=session.history_size,
            auto_play_ms=session.auto_play_ms,
        )

    @app.route("/api/state")
    def api_state():
        return jsonify(session.to_dict())

    @app.route("/api/play", methods=["POST"])
    def api_play():
        data = _json_object()
        move = data.get("move")
        if move is None or move == "random":
            result = session.play_random_round()
        else:
            result = session.play_round(move)
        return jsonify({"round": result.to_dict(), "state": session.to_dict()})

    @app.route("/api/reset", methods=["POST"])
    def api_reset():
        session.reset()
        return jsonify(session.to_dict())

    @app.route("/api/autoplay/start", methods=["POST"])
    def api_autoplay_start():
        data = _json_object()
        period_ms = data.get("period_ms")
        if period_ms is not None and (isinstance(period_ms, bool)
                                      or not isinstance(period_ms, int)):
            raise ValueError(f"period_ms must be an integer, got {period_ms!r}")
        session.start_auto_play(period_ms)
        return jsonify(session.to_dict())

    @app.route("/api/autoplay/stop", methods=["POST"])
    def api_autoplay_stop():
        session.stop_auto_play()
        return jsonify(session.to_dict())

    @app.route("/api/rounds/stream")
    def api_rounds_stream():
        """SSE endpoint that streams every completed round."""
        rounds_queue = queue.Queue()
        # Subscribe before the first read so rounds played meanwhile are queued.
        session.add_listener(rounds_queue.put)

        def generate():
            yield ": connected\n\n"
            while True:
                try:
                    result = rounds_queue.get(timeout=KEEPALIVE_SECONDS)
                except queue.Empty:
                    yield ": keepalive\n\n"
                    continue
                yield _sse_event({
                    "round": result.to_dict(),
                    "auto_playing": session.is_auto_playing(),
                }, event="round")

        response = Response(
            generate(),
            mimetype="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "X-Accel-Buffering": "no",
                "Connection": "keep-alive",
            },
        )
        response.call_on_close(lambda: session.remove_listener(rounds_queue.put))
        return response

    return app


def main(config: Optional[GameConfig] = None, debug: bool = False):
    if config is None:
        config = GameConfig.from_env()
    app = create_app(config=config)
    print("\n🎮 Rock Paper Scissors Web UI")
    print(f"  → http://{config.host}:{config.port}\n")
    app.run(host=config.host, port=config.port, debug=debug,
            use_reloader=False, threaded=True)


if __name__ == "__main__":
    main()

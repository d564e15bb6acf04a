"""Tests for the Flask app in rps_duel.web"""
import random

import pytest

from rps_duel.config import GameConfig
from rps_duel.engine import Move
from rps_duel.session import GameSession
from rps_duel.web import _sse_event, create_app

from conftest import AlwaysRockRng, ScriptedRng


@pytest.fixture
def session():
    return GameSession(rng=random.Random(3))


@pytest.fixture
def client(session):
    app = create_app(session=session, config=GameConfig())
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client
    session.stop_auto_play()


def test_index_page(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert b"Rock Paper Scissors" in resp.data
    assert b'data-move="scissors"' in resp.data


def test_initial_state(client):
    data = client.get("/api/state").get_json()
    assert data["score"] == {"wins": 0, "losses": 0, "ties": 0, "total": 0, "win_rate": 0}
    assert data["streak"] == {"kind": None, "length": 0}
    assert data["history"] == []
    assert data["auto_playing"] is False


def test_play_round():
    session = GameSession(rng=ScriptedRng(Move.SCISSORS))
    client = create_app(session=session, config=GameConfig()).test_client()
    resp = client.post("/api/play", json={"move": "Rock"})
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["round"]["player_move"] == "rock"
    assert data["round"]["opponent_move"] == "scissors"
    assert data["round"]["outcome"] == "win"
    assert data["state"]["score"]["wins"] == 1
    assert len(data["state"]["history"]) == 1


def test_play_random(client):
    resp = client.post("/api/play", json={"move": "random"})
    assert resp.status_code == 200
    assert resp.get_json()["round"]["player_move"] in ("rock", "paper", "scissors")
    resp = client.post("/api/play", json={})
    assert resp.status_code == 200
    assert client.get("/api/state").get_json()["total"] == 2


def test_invalid_move_is_400_and_changes_nothing(client):
    resp = client.post("/api/play", json={"move": "lizard"})
    assert resp.status_code == 400
    assert "lizard" in resp.get_json()["error"]
    resp = client.post("/api/play", json={"move": 3})
    assert resp.status_code == 400
    assert client.get("/api/state").get_json()["total"] == 0


def test_reset(client):
    for move in ("rock", "paper", "scissors"):
        client.post("/api/play", json={"move": move})
    data = client.post("/api/reset").get_json()
    assert data["total"] == 0
    assert data["history"] == []
    assert data["streak"] == {"kind": None, "length": 0}


def test_autoplay_start_stop():
    session = GameSession(rng=AlwaysRockRng())
    client = create_app(session=session, config=GameConfig()).test_client()
    try:
        data = client.post("/api/autoplay/start", json={"period_ms": 1000}).get_json()
        assert data["auto_playing"] is True

        resp = client.post("/api/play", json={"move": "rock"})
        assert resp.status_code == 409
        assert "auto-play" in resp.get_json()["error"]

        data = client.post("/api/autoplay/stop").get_json()
        assert data["auto_playing"] is False
    finally:
        session.stop_auto_play()
    assert client.post("/api/play", json={"move": "rock"}).status_code == 200


def test_autoplay_rejects_bad_period(client):
    assert client.post("/api/autoplay/start", json={"period_ms": 0}).status_code == 400
    assert client.post("/api/autoplay/start", json={"period_ms": "fast"}).status_code == 400
    assert client.get("/api/state").get_json()["auto_playing"] is False


def test_reset_stops_autoplay(session, client):
    client.post("/api/autoplay/start", json={"period_ms": 1000})
    data = client.post("/api/reset").get_json()
    assert data["auto_playing"] is False
    assert not session.is_auto_playing()


def test_sse_event_format():
    assert _sse_event({"a": 1}, event="round") == 'event: round\ndata: {"a": 1}\n\n'


@pytest.mark.parametrize("path", ["/api/play", "/api/autoplay/start"])
@pytest.mark.parametrize("body", [["rock"], "rock", 7])
def test_non_object_body_is_400(client, path, body):
    resp = client.post(path, json=body)
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "request body must be a JSON object"
    state = client.get("/api/state").get_json()
    assert state["total"] == 0
    assert state["auto_playing"] is False


def test_rounds_stream_delivers_rounds_and_unsubscribes():
    session = GameSession(rng=ScriptedRng(Move.SCISSORS))
    client = create_app(session=session, config=GameConfig()).test_client()
    resp = client.get("/api/rounds/stream", buffered=False)
    assert resp.status_code == 200
    assert resp.mimetype == "text/event-stream"
    assert len(session._listeners) == 1

    client.post("/api/play", json={"move": "rock"})
    chunks = iter(resp.response)
    chunk = ""
    for _ in range(3):
        chunk = next(chunks)
        if isinstance(chunk, bytes):
            chunk = chunk.decode()
        if not chunk.startswith(":"):
            break
    assert chunk.startswith("event: round\n")
    assert '"player_move": "rock"' in chunk
    assert '"outcome": "win"' in chunk

    resp.close()
    assert session._listeners == []


def test_index_shows_session_history_size():
    session = GameSession(history_size=4)
    client = create_app(session=session, config=GameConfig()).test_client()
    assert b"Last 4 rounds kept" in client.get("/").data

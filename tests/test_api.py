from __future__ import annotations

import pytest

fastapi = pytest.importorskip("fastapi")

from fastapi.testclient import TestClient

from tictactoe.ai.agent import Strategy
from tictactoe.api import create_app
from tictactoe.config import Settings
from tictactoe.session import GameMode


def make_client(**overrides) -> TestClient:
    # A long delay keeps the deferred computer move out of the way; tests use /computer-move.
    settings = Settings(computer_delay=60.0).with_overrides(**overrides)
    return TestClient(create_app(settings))


@pytest.fixture()
def client():
    with make_client() as test_client:
        yield test_client


@pytest.fixture()
def multi_client():
    with make_client(mode=GameMode.MULTI) as test_client:
        yield test_client


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_initial_game_snapshot(client: TestClient) -> None:
    res = client.get("/game")
    assert res.status_code == 200
    body = res.json()
    assert body["board"] == [None] * 9
    assert body["turn"] == "X"
    assert body["outcome"] == "in_progress"
    assert body["mode"] == "single"
    assert body["difficulty"] == "random"
    assert body["scores"] == {"X": 0, "O": 0}
    assert body["status"] == "Current Player: X"


def test_human_move_schedules_computer_reply(client: TestClient) -> None:
    res = client.post("/game/move", json={"index": 4})
    assert res.status_code == 200
    body = res.json()
    assert body["board"][4] == "X"
    assert body["turn"] == "O"
    assert body["computer_pending"] is True

    # Human cannot play while the computer is on turn.
    assert client.post("/game/move", json={"index": 0}).status_code == 409

    res = client.post("/game/computer-move")
    assert res.status_code == 200
    body = res.json()
    assert body["board"].count("O") == 1
    assert body["turn"] == "X"
    assert body["computer_pending"] is False


def test_rejected_moves_return_409(multi_client: TestClient) -> None:
    assert multi_client.post("/game/move", json={"index": 4}).status_code == 200
    res = multi_client.post("/game/move", json={"index": 4})
    assert res.status_code == 409
    assert multi_client.post("/game/move", json={"index": 9}).status_code == 409
    assert multi_client.get("/game").json()["history"] == [{"index": 4, "mark": "X"}]


def test_computer_move_rejected_in_two_player_mode(multi_client: TestClient) -> None:
    assert multi_client.post("/game/computer-move").status_code == 409


def test_two_player_win_updates_scores_and_reset_keeps_them(multi_client: TestClient) -> None:
    for idx in (0, 3, 1, 4, 2):
        assert multi_client.post("/game/move", json={"index": idx}).status_code == 200
    body = multi_client.get("/game").json()
    assert body["winner"] == "X"
    assert body["winning_line"] == [0, 1, 2]
    assert body["scores"] == {"X": 1, "O": 0}
    assert body["status"] == "Winner: X"

    assert multi_client.post("/game/move", json={"index": 8}).status_code == 409

    body = multi_client.post("/game/reset").json()
    assert body["board"] == [None] * 9
    assert body["outcome"] == "in_progress"
    assert body["scores"] == {"X": 1, "O": 0}


def test_mode_and_difficulty_changes_reset_board(client: TestClient) -> None:
    client.post("/game/move", json={"index": 0})
    body = client.post("/game/mode", json={"mode": "multi"}).json()
    assert body["mode"] == "multi"
    assert body["board"] == [None] * 9
    assert body["computer_pending"] is False

    client.post("/game/move", json={"index": 0})
    body = client.post("/game/difficulty", json={"difficulty": "optimal"}).json()
    assert body["difficulty"] == "optimal"
    assert body["board"] == [None] * 9


def test_invalid_configuration_is_422(client: TestClient) -> None:
    assert client.post("/game/mode", json={"mode": "online"}).status_code == 422
    assert client.post("/game/difficulty", json={"difficulty": "hard"}).status_code == 422


def test_hint_uses_configured_strategy() -> None:
    with make_client(mode=GameMode.MULTI, difficulty=Strategy.OPTIMAL) as client:
        for idx in (0, 3, 1, 4):
            client.post("/game/move", json={"index": idx})
        assert client.get("/game/hint").json() == {"index": 2}
        client.post("/game/move", json={"index": 2})
        assert client.get("/game/hint").json() == {"index": None}


def test_feedback_toggle(client: TestClient) -> None:
    body = client.post("/game/feedback", json={"enabled": False}).json()
    assert body["feedback_enabled"] is False
    assert body["board"] == [None] * 9


def test_websocket_receives_state_and_move_events(multi_client: TestClient) -> None:
    with multi_client.websocket_connect("/ws") as ws:
        first = ws.receive_json()
        assert first["event"] == "state"
        assert first["game"]["board"] == [None] * 9

        multi_client.post("/game/move", json={"index": 4})
        event = ws.receive_json()
        assert event["event"] == "move"
        assert event["move"] == {"index": 4, "mark": "X"}
        assert event["feedback"] is True
        assert event["game"]["board"][4] == "X"

        multi_client.post("/game/feedback", json={"enabled": False})
        multi_client.post("/game/move", json={"index": 0})
        event = ws.receive_json()
        assert event["event"] == "move"
        assert event["feedback"] is False

"""WebSocket integration tests for server-driven games."""

from __future__ import annotations

import json
import time

import pytest
from starlette.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from wrapsnake.leaderboard import InMemoryLeaderboardStore
from wrapsnake.server.app import create_app
from wrapsnake.server.settings import ServerSettings


@pytest.fixture()
def tc():
    """Starlette sync TestClient sharing one event loop for REST and WS."""
    application = create_app(ServerSettings(), store=InMemoryLeaderboardStore())
    return TestClient(application)


def _wait_for(predicate, timeout: float = 1.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return False


class TestPlayWebSocket:
    def test_connect_and_receive_initial_state(self, tc):
        with tc.websocket_connect("/play") as ws:
            state = json.loads(ws.receive_text())
            assert state["tick"] == 0
            assert state["score"] == 0
            assert state["grid"] == {"rows": 15, "cols": 15}
            assert state["difficulty"] == "normal"
            assert len(state["segments"]) == 1

    def test_custom_grid_and_difficulty(self, tc):
        with tc.websocket_connect("/play?difficulty=hard&rows=10") as ws:
            state = json.loads(ws.receive_text())
            assert state["grid"] == {"rows": 10, "cols": 10}
            assert state["interval_ms"] == 70

    def test_ticks_are_pushed(self, tc):
        with tc.websocket_connect("/play?difficulty=hard") as ws:
            ws.receive_text()
            state = json.loads(ws.receive_text())
            assert state["tick"] == 1

    def test_send_direction(self, tc):
        with tc.websocket_connect("/play?difficulty=hard&seed=1") as ws:
            ws.receive_text()
            ws.send_text(json.dumps({"direction": "up"}))
            directions = [
                json.loads(ws.receive_text())["snake"]["direction"]
                for _ in range(3)
            ]
            assert "up" in directions

    def test_invalid_messages_ignored(self, tc):
        with tc.websocket_connect("/play?difficulty=hard") as ws:
            ws.receive_text()
            ws.send_text("not json")
            ws.send_text(json.dumps(["up"]))
            ws.send_text(json.dumps({"direction": "sideways"}))
            state = json.loads(ws.receive_text())
            assert not state["game_over"]

    def test_pause_listed_in_sessions(self, tc):
        with tc.websocket_connect("/play") as ws:
            ws.receive_text()
            ws.send_text(json.dumps({"action": "pause"}))

            def paused():
                sessions = tc.get("/api/sessions").json()
                return len(sessions) == 1 and sessions[0]["paused"]

            assert _wait_for(paused)

    def test_session_removed_on_disconnect(self, tc):
        with tc.websocket_connect("/play") as ws:
            ws.receive_text()
            assert len(tc.get("/api/sessions").json()) == 1
        assert _wait_for(lambda: tc.get("/api/sessions").json() == [])

    def test_invalid_difficulty_rejected(self, tc):
        with pytest.raises(WebSocketDisconnect), tc.websocket_connect(
            "/play?difficulty=impossible",
        ):
            pass

    def test_invalid_grid_rejected(self, tc):
        with pytest.raises(WebSocketDisconnect), tc.websocket_connect(
            "/play?rows=0",
        ):
            pass

    def test_session_limit(self):
        app = create_app(
            ServerSettings(max_sessions=1), store=InMemoryLeaderboardStore(),
        )
        client = TestClient(app)
        with client.websocket_connect("/play") as ws:
            ws.receive_text()
            with pytest.raises(WebSocketDisconnect), client.websocket_connect(
                "/play",
            ):
                pass

    def test_resize_action(self, tc):
        with tc.websocket_connect("/play?difficulty=hard") as ws:
            ws.receive_text()
            ws.send_text(json.dumps({"action": "resize", "rows": 10, "cols": 12}))
            grids = [json.loads(ws.receive_text())["grid"] for _ in range(10)]
            assert {"rows": 10, "cols": 12} in grids
            assert grids[-1] == {"rows": 10, "cols": 12}

    def test_pause_then_resume(self, tc):
        with tc.websocket_connect("/play?difficulty=hard") as ws:
            ws.receive_text()
            ws.send_text(json.dumps({"action": "pause"}))

            def summary():
                return tc.get("/api/sessions").json()[0]

            assert _wait_for(lambda: summary()["paused"])
            paused_tick = summary()["tick"]

            ws.send_text(json.dumps({"action": "resume"}))
            ticks = [json.loads(ws.receive_text())["tick"] for _ in range(30)]
            assert max(ticks) > paused_tick
            assert not summary()["paused"]

    def test_game_over_closes_socket(self, tc):
        # One row of two cells fills up after two meals.
        with tc.websocket_connect("/play?difficulty=hard&rows=1&cols=2") as ws:
            ws.receive_text()
            ws.send_text(json.dumps({"direction": "right"}))
            states = []
            with pytest.raises(WebSocketDisconnect) as exc_info:
                for _ in range(50):
                    states.append(json.loads(ws.receive_text()))
            assert exc_info.value.code == 1000
            assert states[-1]["game_over"]
            assert states[-1]["board_full"]

    def test_sessions_released_after_reconnects(self):
        app = create_app(
            ServerSettings(max_sessions=2), store=InMemoryLeaderboardStore(),
        )
        client = TestClient(app)
        manager = app.state.session_manager
        for _ in range(5):
            with client.websocket_connect("/play?difficulty=hard") as ws:
                ws.receive_text()
                ws.receive_text()
                ws.receive_text()
            assert _wait_for(lambda: len(manager) == 0)
        assert len(manager) == 0

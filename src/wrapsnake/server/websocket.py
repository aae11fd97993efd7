"""WebSocket handler for server-driven single-player games."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from wrapsnake.config import GameConfig
from wrapsnake.server.sessions import PlaySession, SessionManager
from wrapsnake.snake import Direction

logger = logging.getLogger(__name__)

ws_router = APIRouter()


def _get_manager(ws: WebSocket) -> SessionManager:
    return ws.app.state.session_manager


def _dumps(state: dict) -> str:
    return json.dumps(state, separators=(",", ":"))


def _handle_message(play: PlaySession, raw: str) -> None:
    """Apply one client message; anything malformed is ignored."""
    try:
        msg = json.loads(raw)
    except json.JSONDecodeError:
        return
    if not isinstance(msg, dict):
        return

    direction_str = msg.get("direction")
    if isinstance(direction_str, str):
        direction = Direction.parse(direction_str)
        if direction is not None and not play.loop.paused:
            play.game.set_direction(direction)
        return

    action = msg.get("action")
    if action == "pause":
        play.loop.pause()
    elif action == "resume":
        play.loop.resume()
    elif action == "resize":
        rows, cols = msg.get("rows"), msg.get("cols")
        if isinstance(rows, int) and isinstance(cols, int):
            try:
                play.game.resize(rows, cols)
            except ValueError:
                return


@ws_router.websocket("/play")
async def play(
    websocket: WebSocket,
    difficulty: str = "normal",
    rows: int | None = None,
    cols: int | None = None,
    policy: str = "post_move",
    seed: int | None = None,
) -> None:
    """Player WebSocket: send directions, receive game state each tick."""
    manager = _get_manager(websocket)
    try:
        defaults = GameConfig()
        config = GameConfig(
            rows=rows if rows is not None else defaults.rows,
            cols=cols if cols is not None else (rows or defaults.cols),
            difficulty=difficulty,
            collision_policy=policy,
        )
    except ValueError as exc:
        await websocket.close(code=4022, reason=str(exc))
        return

    async def send_state(state: dict) -> None:
        if websocket.client_state != WebSocketState.CONNECTED:
            return
        try:
            await websocket.send_text(_dumps(state))
            if state["game_over"]:
                await websocket.close(code=1000, reason="Game over.")
        except Exception:
            logger.warning("Failed sending state to session %s.", session.session_id)

    try:
        session = manager.create_session(config, on_tick=send_state, seed=seed)
    except ValueError as exc:
        await websocket.close(code=4029, reason=str(exc))
        return

    try:
        await websocket.accept()
        await websocket.send_text(_dumps(session.game.get_state()))
        session.loop.start()
        while True:
            _handle_message(session, await websocket.receive_text())
    except WebSocketDisconnect:
        logger.info("Player disconnected from session %s.", session.session_id)
    finally:
        await manager.close_session(session.session_id)

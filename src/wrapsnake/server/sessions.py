"""In-memory registry of live play sessions and their tick loops."""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field

from wrapsnake.config import GameConfig
from wrapsnake.engine import GameSession
from wrapsnake.loop import TickCallback, TickLoop

logger = logging.getLogger(__name__)

_MAX_SESSIONS = 100


@dataclass
class PlaySession:
    """A game being played over one connection."""

    session_id: str
    game: GameSession
    loop: TickLoop
    created_at: float = field(default_factory=time.monotonic)

    def to_summary(self) -> dict:
        return {
            "session_id": self.session_id,
            "difficulty": self.game.difficulty.value,
            "score": self.game.score,
            "tick": self.game.tick,
            "paused": self.loop.paused,
            "game_over": self.game.game_over,
        }


class SessionManager:
    """Central registry managing all live sessions."""

    def __init__(self, max_sessions: int = _MAX_SESSIONS) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1.")
        self._sessions: dict[str, PlaySession] = {}
        self._max_sessions = max_sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def create_session(
        self,
        config: GameConfig,
        on_tick: TickCallback | None = None,
        seed: int | None = None,
    ) -> PlaySession:
        """Create a session and its (not yet started) tick loop."""
        if len(self._sessions) >= self._max_sessions:
            raise ValueError("Too many active sessions. Try again later.")
        session_id = uuid.uuid4().hex[:12]
        game = GameSession(config, seed=seed)
        play = PlaySession(
            session_id=session_id,
            game=game,
            loop=TickLoop(game, on_tick, name=session_id),
        )
        self._sessions[session_id] = play
        logger.info(
            "Session %s created (%s, %dx%d).",
            session_id, config.difficulty.value, config.rows, config.cols,
        )
        return play

    def get_session(self, session_id: str) -> PlaySession | None:
        return self._sessions.get(session_id)

    def list_sessions(self) -> list[dict]:
        return [s.to_summary() for s in self._sessions.values()]

    async def close_session(self, session_id: str) -> None:
        """Forget a session and stop its loop.

        The session is unregistered and its timer cancelled before the
        first await, so a cancelled caller still releases the slot.
        """
        play = self._sessions.pop(session_id, None)
        if play is None:
            return
        logger.info(
            "Session %s closed with score %d.", session_id, play.game.score,
        )
        await play.loop.stop()

    async def cleanup(self) -> None:
        """Stop every running tick loop."""
        sessions = list(self._sessions.values())
        self._sessions.clear()
        if sessions:
            await asyncio.gather(
                *(s.loop.stop() for s in sessions), return_exceptions=True,
            )
        logger.info("SessionManager cleanup complete.")

"""Asyncio tick loop driving a :class:`GameSession` on a timer."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from wrapsnake.engine import GameSession

logger = logging.getLogger(__name__)

TickCallback = Callable[[dict], Awaitable[None]]


class TickLoop:
    """Runs one session tick per interval on a single asyncio task.

    A tick (step plus callback) always completes before the next sleep
    starts. When the session's interval changes the current timer task
    is replaced by a new one instead of running two timers side by side.
    """

    def __init__(
        self,
        session: GameSession,
        on_tick: TickCallback | None = None,
        name: str = "game",
    ) -> None:
        self.session = session
        self.on_tick = on_tick
        self.name = name
        self.restarts = 0
        self._task: asyncio.Task | None = None
        self._interval_ms = session.interval_ms
        self._paused = False
        self._finished = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    def start(self) -> None:
        """Start ticking; a no-op if already running or finished."""
        if self.running or self._finished.is_set():
            return
        self._paused = False
        self._schedule()
        logger.info(
            "Tick loop %s started at %d ms.", self.name, self._interval_ms,
        )

    def pause(self) -> None:
        """Stop the timer without ending the game."""
        if not self.running:
            return
        self._paused = True
        self._cancel()
        logger.info("Tick loop %s paused.", self.name)

    def resume(self) -> None:
        """Restart the timer after :meth:`pause`."""
        if not self._paused or self._finished.is_set():
            return
        self._paused = False
        self._schedule()
        logger.info("Tick loop %s resumed.", self.name)

    async def stop(self) -> None:
        """Cancel the timer task and wait for it to exit."""
        task = self._task
        self._cancel()
        self._finished.set()
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)

    async def wait_finished(self) -> None:
        await self._finished.wait()

    def _schedule(self) -> None:
        self._interval_ms = self.session.interval_ms
        self._task = asyncio.create_task(self._run(self._interval_ms / 1000.0))

    def _cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run(self, interval: float) -> None:
        try:
            while True:
                await asyncio.sleep(interval)
                state = self.session.step()
                if self.on_tick is not None:
                    await self.on_tick(state)
                if self.session.game_over:
                    self._finished.set()
                    self._task = None
                    return
                if self.session.interval_ms != self._interval_ms:
                    self._reschedule()
                    return
        except asyncio.CancelledError:
            logger.debug("Tick loop %s cancelled.", self.name)
            raise
        except Exception:
            logger.exception("Tick loop error in %s.", self.name)
            self._finished.set()
            self._task = None

    def _reschedule(self) -> None:
        """Replace the timer task with one at the session's new interval."""
        previous = self._interval_ms
        self.restarts += 1
        self._schedule()
        logger.info(
            "Tick loop %s interval %d -> %d ms.",
            self.name, previous, self._interval_ms,
        )

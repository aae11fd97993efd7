"""Step-based game session composing grid, snake, food and scoring."""

from __future__ import annotations

import logging

import numpy as np

from wrapsnake.config import CollisionPolicy, Difficulty, GameConfig
from wrapsnake.food import FoodSpawner
from wrapsnake.grid import Grid
from wrapsnake.orientation import describe_body
from wrapsnake.snake import Direction, Segment, Snake

logger = logging.getLogger(__name__)

# Event names reported in ``state["events"]`` for the last tick.
EVENT_TURN = "turn"
EVENT_ATE = "ate"
EVENT_COLLISION = "collision"
EVENT_BOARD_FULL = "board_full"
EVENT_SPEEDUP = "speedup"


class GameSession:
    """Single-snake, step-based game session.

    The session owns the grid, snake, food and score for one game; a new
    game gets a new session. Each call to :meth:`step` advances the game
    by one tick and returns the updated state dictionary.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        seed: int | None = None,
        start: tuple[int, int] | None = None,
        direction: Direction | None = None,
    ) -> None:
        self.config = config if config is not None else GameConfig()
        self.grid = Grid(self.config.rows, self.config.cols)
        self.rng = np.random.default_rng(seed)

        start_row, start_col = start if start is not None else self.grid.center
        if not self.grid.contains(start_row, start_col):
            raise ValueError(
                f"Start cell ({start_row}, {start_col}) is outside {self.grid!r}."
            )
        self.snake = Snake(start_row, start_col, direction)

        self.spawner = FoodSpawner(
            self.rng, max_attempts=self.config.food_sample_attempts,
        )
        self.food: Segment | None = self.spawner.pick(self.grid, self.snake.body)

        self.score = 0
        self.tick = 0
        self.game_over = False
        self.board_full = self.food is None
        self.interval_ms = self.config.base_interval_ms
        self.events: list[str] = []
        self._pending_events: list[str] = []

    @property
    def difficulty(self) -> Difficulty:
        return self.config.difficulty

    def set_direction(self, direction: Direction) -> bool:
        """Queue a turn for upcoming ticks; see :meth:`Snake.set_direction`."""
        if self.game_over:
            return False
        accepted = self.snake.set_direction(direction)
        if accepted:
            self._pending_events.append(EVENT_TURN)
        return accepted

    def step(self) -> dict:
        """Advance the game by one tick.

        Returns the full game state as a serializable dict.
        """
        if self.game_over:
            return self.get_state()

        self.events = self._pending_events
        self._pending_events = []
        rows, cols = self.grid.rows, self.grid.cols

        if (
            self.config.collision_policy == CollisionPolicy.PREDICTIVE
            and self.snake.would_collide(rows, cols)
        ):
            self._end_game(EVENT_COLLISION)
            return self.get_state()

        self.snake.move(rows, cols)

        if self.snake.has_self_collision():
            self._end_game(EVENT_COLLISION)
            return self.get_state()

        if self.food is not None and self.snake.head == self.food:
            self._eat()
            if self.game_over:
                return self.get_state()

        self.tick += 1
        return self.get_state()

    def resize(self, rows: int, cols: int | None = None) -> None:
        """Replace the grid between ticks, folding the game into new bounds."""
        grid = Grid(rows, cols)
        if grid == self.grid:
            return
        self.grid = grid
        for i, (row, col) in enumerate(self.snake.body):
            self.snake.body[i] = grid.wrap(row, col)
        if self.food is not None:
            food = grid.wrap(*self.food)
            if food in self.snake.body:
                food = self.spawner.pick(grid, self.snake.body)
            self.food = food
        logger.info("Session resized to %r.", grid)
        if self.food is None and not (self.board_full or self.game_over):
            self.board_full = True
            self._end_game(EVENT_BOARD_FULL)

    def _eat(self) -> None:
        self.snake.grow()
        self.score += 1
        self.events.append(EVENT_ATE)

        # The pending segment is not on the board yet, so the tail cell
        # still counts as occupied for the next tick.
        self.food = self.spawner.pick(self.grid, self.snake.body)
        if self.food is None:
            self.board_full = True
            self._end_game(EVENT_BOARD_FULL)
            return

        if self.config.speedup_ms:
            faster = max(
                self.config.min_interval_ms,
                self.interval_ms - self.config.speedup_ms,
            )
            if faster != self.interval_ms:
                self.interval_ms = faster
                self.events.append(EVENT_SPEEDUP)

    def _end_game(self, event: str) -> None:
        """Mark the snake as finished and end the game."""
        if event == EVENT_COLLISION:
            self.snake.alive = False
        self.game_over = True
        self.tick += 1
        self.events.append(event)
        logger.info(
            "Game over (%s) at tick %d with score %d.",
            event, self.tick, self.score,
        )

    def get_state(self) -> dict:
        """Return the full, serializable game state."""
        hints = describe_body(
            self.snake.body, self.snake.direction, self.grid.rows, self.grid.cols,
        )
        return {
            "tick": self.tick,
            "score": self.score,
            "game_over": self.game_over,
            "board_full": self.board_full,
            "difficulty": self.config.difficulty.value,
            "interval_ms": self.interval_ms,
            "grid": self.grid.to_dict(),
            "snake": self.snake.to_dict(),
            "food": list(self.food) if self.food is not None else None,
            "segments": [h.to_dict() for h in hints],
            "events": list(self.events),
        }

"""Snake representation and movement logic."""

from __future__ import annotations

import enum
from collections import deque
from typing import NamedTuple

# Turns waiting to be applied, one per tick.
MAX_QUEUED_TURNS = 2


class Direction(enum.Enum):
    """Cardinal movement directions with (row_delta, col_delta) values.

    Rows grow downwards, so ``UP`` decreases the row index.
    """

    UP = (-1, 0)
    DOWN = (1, 0)
    LEFT = (0, -1)
    RIGHT = (0, 1)

    @property
    def label(self) -> str:
        """Lower-case name used on the wire (``"up"``, ``"left"``...)."""
        return self.name.lower()

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]

    @property
    def is_horizontal(self) -> bool:
        return self in (Direction.LEFT, Direction.RIGHT)

    @classmethod
    def parse(cls, value: str) -> Direction | None:
        """Map ``"up"``/``"UP"``/... to a direction, or ``None``."""
        return _BY_LABEL.get(value.strip().lower())


# Pairs that would cause an instant 180° reversal.
_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

_BY_LABEL: dict[str, Direction] = {d.label: d for d in Direction}


class Segment(NamedTuple):
    """A 1-based ``(row, col)`` grid cell."""

    row: int
    col: int


def step(
    segment: tuple[int, int],
    direction: Direction,
    grid_rows: int,
    grid_cols: int,
) -> Segment:
    """Move one cell in *direction*, wrapping at the grid edges."""
    dr, dc = direction.value
    row = (segment[0] - 1 + dr) % grid_rows + 1
    col = (segment[1] - 1 + dc) % grid_cols + 1
    return Segment(row, col)


class Snake:
    """A snake represented as an ordered deque of 1-based body segments.

    The head is ``body[0]``; the tail is ``body[-1]``. Turns go through a
    small queue so that two quick key presses between ticks are both
    honoured, one tick apart, and each is validated against the turn
    before it.
    """

    def __init__(
        self,
        start_row: int,
        start_col: int,
        direction: Direction | None = None,
    ) -> None:
        self.body: deque[Segment] = deque([Segment(start_row, start_col)])
        self.direction = direction
        self.direction_queue: deque[Direction] = deque()
        self.alive = True
        self._grow_pending = 0

    @property
    def head(self) -> Segment:
        """Return the head coordinate."""
        return self.body[0]

    @property
    def tail(self) -> Segment:
        return self.body[-1]

    @property
    def length(self) -> int:
        return len(self.body)

    @property
    def grow_pending(self) -> int:
        return self._grow_pending

    @property
    def heading(self) -> Direction | None:
        """The most recently accepted direction, queued or current."""
        if self.direction_queue:
            return self.direction_queue[-1]
        return self.direction

    def set_direction(self, new_direction: Direction) -> bool:
        """Queue a turn, ignoring duplicates and 180° reversals.

        Returns whether the turn was accepted.
        """
        last = self.heading
        if new_direction == last:
            return False
        if last is not None and new_direction == last.opposite:
            return False

        if len(self.direction_queue) < MAX_QUEUED_TURNS:
            self.direction_queue.append(new_direction)
        else:
            self.direction_queue[-1] = new_direction
        return True

    def _upcoming_direction(self) -> Direction | None:
        if self.direction_queue:
            return self.direction_queue[0]
        return self.direction

    def predict_head(self, grid_rows: int, grid_cols: int) -> Segment | None:
        """Compute the head position the next :meth:`move` would produce.

        Returns ``None`` when the snake has no direction yet.
        """
        direction = self._upcoming_direction()
        if direction is None:
            return None
        return step(self.head, direction, grid_rows, grid_cols)

    def would_collide(self, grid_rows: int, grid_cols: int) -> bool:
        """Check whether the next move would run the head into the body."""
        next_head = self.predict_head(grid_rows, grid_cols)
        if next_head is None:
            return False
        remaining = list(self.body)
        if self._grow_pending == 0:
            remaining.pop()  # tail moves away
        return next_head in remaining

    def move(self, grid_rows: int, grid_cols: int) -> Segment | None:
        """Move the snake one step forward on a wrapping grid.

        Returns the vacated tail cell, or ``None`` if the snake grew or
        has not started moving.
        """
        if self.direction_queue:
            self.direction = self.direction_queue.popleft()
        if self.direction is None:
            return None

        new_head = step(self.head, self.direction, grid_rows, grid_cols)
        self.body.appendleft(new_head)
        if self._grow_pending > 0:
            self._grow_pending -= 1
            return None
        return self.body.pop()

    def grow(self, segments: int = 1) -> None:
        """Queue growth for the next *segments* moves."""
        self._grow_pending += segments

    def occupies(self, row: int, col: int) -> bool:
        """Check whether the snake occupies a given cell."""
        return (row, col) in self.body

    def has_self_collision(self) -> bool:
        """Check whether the head overlaps the body or the body crosses itself.

        A tail sitting on the cell of the segment in front of it is the
        one overlap that is not a collision.
        """
        head, *rest = self.body
        if head in rest:
            return True
        if len(rest) >= 2 and rest[-1] == rest[-2]:
            rest.pop()
        return len(set(rest)) != len(rest)

    def to_dict(self) -> dict:
        """Serialize snake state to a dictionary."""
        return {
            "body": [list(seg) for seg in self.body],
            "direction": self.direction.label if self.direction else None,
            "queue": [d.label for d in self.direction_queue],
            "grow_pending": self._grow_pending,
            "alive": self.alive,
        }

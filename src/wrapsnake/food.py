"""Food placement logic."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

import numpy as np

from wrapsnake.snake import Segment

if TYPE_CHECKING:
    from wrapsnake.grid import Grid

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_ATTEMPTS = 64


class FoodSpawner:
    """Picks a uniformly random unoccupied cell for the next food item.

    Random sampling is tried first, which is fast while the board is
    sparse; once it misses *max_attempts* times in a row the free cells
    are enumerated and one is chosen among them. Uses a seeded NumPy RNG
    for deterministic, reproducible placement.
    """

    def __init__(
        self,
        rng: np.random.Generator | None = None,
        max_attempts: int = DEFAULT_SAMPLE_ATTEMPTS,
    ) -> None:
        if max_attempts < 0:
            raise ValueError("max_attempts must be >= 0.")
        self.rng = rng if rng is not None else np.random.default_rng()
        self.max_attempts = max_attempts

    def pick(
        self, grid: Grid, occupied: Iterable[tuple[int, int]],
    ) -> Segment | None:
        """Return a free cell, or ``None`` when the board is full."""
        taken = {(row, col) for row, col in occupied}

        for _ in range(self.max_attempts):
            row = int(self.rng.integers(1, grid.rows + 1))
            col = int(self.rng.integers(1, grid.cols + 1))
            if (row, col) not in taken:
                return Segment(row, col)

        free = grid.free_cells(taken)
        if not free:
            logger.warning("No empty cells available for food on %r.", grid)
            return None
        return free[int(self.rng.integers(len(free)))]

"""Grid representation for the snake game."""

from __future__ import annotations

import enum
from collections.abc import Iterable

import numpy as np

from wrapsnake.snake import Direction, Segment, step

# Viewport sizing defaults: one cell per 20 px, between 10 and 15 cells.
MIN_CELLS = 10
MAX_CELLS = 15
CELL_SIZE_PX = 20


class CellType(enum.IntEnum):
    """Integer codes used when painting the grid into an array."""

    EMPTY = 0
    SNAKE = 1
    FOOD = 2


def grid_size_for_viewport(
    width: int,
    height: int,
    min_cells: int = MIN_CELLS,
    max_cells: int = MAX_CELLS,
    cell_size: int = CELL_SIZE_PX,
) -> int:
    """Number of cells per side that fits a *width* × *height* viewport."""
    if cell_size < 1:
        raise ValueError("cell_size must be at least 1.")
    if min_cells < 1 or max_cells < min_cells:
        raise ValueError("Need 1 <= min_cells <= max_cells.")
    cells = min(width, height) // cell_size
    return max(min_cells, min(max_cells, cells))


class Grid:
    """Toroidal game grid with 1-based ``(row, col)`` coordinates.

    Stepping off any edge re-enters on the opposite edge, so the only
    obstacle on the grid is the snake itself. Occupancy masks are NumPy
    arrays indexed ``[row - 1, col - 1]``.
    """

    def __init__(self, rows: int = MAX_CELLS, cols: int | None = None) -> None:
        cols = rows if cols is None else cols
        if rows < 1 or cols < 1:
            raise ValueError("Grid dimensions must be positive.")
        self.rows = rows
        self.cols = cols

    @classmethod
    def for_viewport(cls, width: int, height: int, **kwargs: int) -> Grid:
        """Build a square grid sized for a viewport in pixels."""
        cells = grid_size_for_viewport(width, height, **kwargs)
        return cls(cells, cells)

    @property
    def cell_count(self) -> int:
        return self.rows * self.cols

    @property
    def center(self) -> Segment:
        """Default start cell for a new snake."""
        return Segment(max(1, self.rows // 2), max(1, self.cols // 2))

    def contains(self, row: int, col: int) -> bool:
        """Check whether a coordinate lies within the grid."""
        return 1 <= row <= self.rows and 1 <= col <= self.cols

    def wrap(self, row: int, col: int) -> Segment:
        """Fold any coordinate back into ``[1, rows] × [1, cols]``."""
        return Segment((row - 1) % self.rows + 1, (col - 1) % self.cols + 1)

    def step(self, segment: tuple[int, int], direction: Direction) -> Segment:
        """Move one cell from *segment*, wrapping at the edges."""
        return step(segment, direction, self.rows, self.cols)

    def occupancy(self, cells: Iterable[tuple[int, int]]) -> np.ndarray:
        """Boolean ``(rows, cols)`` mask with *cells* marked ``True``."""
        mask = np.zeros((self.rows, self.cols), dtype=bool)
        for row, col in cells:
            if self.contains(row, col):
                mask[row - 1, col - 1] = True
        return mask

    def free_cells(self, cells: Iterable[tuple[int, int]]) -> list[Segment]:
        """Return every cell not covered by *cells*, row-major."""
        rows, cols = np.where(~self.occupancy(cells))
        return [
            Segment(r + 1, c + 1)
            for r, c in zip(rows.tolist(), cols.tolist(), strict=True)
        ]

    def paint(
        self,
        snake: Iterable[tuple[int, int]],
        food: tuple[int, int] | None = None,
    ) -> np.ndarray:
        """Render snake and food into an ``int8`` array of :class:`CellType`."""
        cells = np.zeros((self.rows, self.cols), dtype=np.int8)
        cells[self.occupancy(snake)] = CellType.SNAKE
        if food is not None and self.contains(*food):
            cells[food[0] - 1, food[1] - 1] = CellType.FOOD
        return cells

    def to_dict(self) -> dict:
        """Serialize grid dimensions to a dictionary."""
        return {"rows": self.rows, "cols": self.cols}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return (self.rows, self.cols) == (other.rows, other.cols)

    def __hash__(self) -> int:
        return hash((self.rows, self.cols))

    def __repr__(self) -> str:
        return f"Grid(rows={self.rows}, cols={self.cols})"

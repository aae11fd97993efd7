"""Segment orientation inference for directional snake sprites.

Every function here is a pure read of the body and the grid size. Grid
dimensions are always passed in explicitly so that wrap-around pairs
(a segment on row 1 next to one on the last row) are recognised.
"""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass

from wrapsnake.snake import Direction

# Sprite rotation (degrees) for a head or tail facing a direction.
_END_ROTATIONS: dict[Direction, int] = {
    Direction.UP: 180,
    Direction.DOWN: 0,
    Direction.LEFT: 90,
    Direction.RIGHT: -90,
}

# Corner sprite rotation keyed by (incoming, outgoing) direction.
_CORNER_ROTATIONS: dict[tuple[Direction, Direction], int] = {
    (Direction.UP, Direction.RIGHT): 180,
    (Direction.RIGHT, Direction.UP): 0,
    (Direction.UP, Direction.LEFT): -90,
    (Direction.RIGHT, Direction.DOWN): -90,
    (Direction.LEFT, Direction.UP): 90,
    (Direction.LEFT, Direction.DOWN): 180,
    (Direction.DOWN, Direction.RIGHT): 90,
    (Direction.DOWN, Direction.LEFT): 0,
}


class SegmentRole(str, enum.Enum):
    HEAD = "head"
    TAIL = "tail"
    BODY = "body"


class SegmentShape(str, enum.Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    CORNER = "corner"


def get_direction(
    from_seg: tuple[int, int] | None,
    to_seg: tuple[int, int] | None,
    grid_rows: int,
    grid_cols: int,
) -> Direction | None:
    """Return the direction a mover took to go from *from_seg* to *to_seg*.

    Steps across a grid edge count as adjacent. Returns ``None`` for
    missing, coincident, diagonal or otherwise non-adjacent segments.
    """
    if from_seg is None or to_seg is None:
        return None
    from_row, from_col = from_seg
    to_row, to_col = to_seg
    if (from_row, from_col) == (to_row, to_col):
        return None

    if from_col == to_col:
        dy = to_row - from_row
        if dy == -1 or dy == grid_rows - 1:
            return Direction.UP
        if dy == 1 or dy == -(grid_rows - 1):
            return Direction.DOWN
    elif from_row == to_row:
        dx = to_col - from_col
        if dx == -1 or dx == grid_cols - 1:
            return Direction.LEFT
        if dx == 1 or dx == -(grid_cols - 1):
            return Direction.RIGHT
    return None


def end_rotation(direction: Direction | None) -> int | None:
    """Rotation for a head or tail sprite, ``None`` without a direction."""
    if direction is None:
        return None
    return _END_ROTATIONS[direction]


def corner_rotation(incoming: Direction, outgoing: Direction) -> int | None:
    """Rotation for a corner sprite, ``None`` for anything but a 90° turn."""
    return _CORNER_ROTATIONS.get((incoming, outgoing))


@dataclass(frozen=True)
class SegmentHint:
    """Render hint for one body segment."""

    role: SegmentRole
    direction: Direction | None = None
    incoming: Direction | None = None
    outgoing: Direction | None = None
    shape: SegmentShape | None = None
    rotation: int | None = None

    @property
    def css_class(self) -> str:
        parts = ["snakecase"]
        if self.role is not SegmentRole.BODY:
            parts.append(self.role.value)
        elif self.shape is not None:
            parts.extend(["body", self.shape.value])
        return " ".join(parts)

    def to_dict(self) -> dict:
        return {
            "role": self.role.value,
            "direction": self.direction.label if self.direction else None,
            "shape": self.shape.value if self.shape else None,
            "rotation": self.rotation,
            "class": self.css_class,
        }


def head_direction(
    body: Sequence[tuple[int, int]],
    current: Direction | None,
    grid_rows: int,
    grid_cols: int,
) -> Direction | None:
    """Direction the head travelled into its cell.

    Falls back to *current* for a single-segment snake.
    """
    neck = body[1] if len(body) > 1 else None
    return get_direction(neck, body[0], grid_rows, grid_cols) or current


def tail_direction(
    body: Sequence[tuple[int, int]],
    current: Direction | None,
    grid_rows: int,
    grid_cols: int,
) -> Direction | None:
    """Direction the tail is travelling.

    Right after growth the tail may sit on the same cell as the segment
    in front of it; the pair one step further up is used then.
    """
    if len(body) < 2:
        return current
    last, before_last = body[-1], body[-2]
    if last == before_last:
        if len(body) < 3:
            return current
        return (
            get_direction(before_last, body[-3], grid_rows, grid_cols)
            or current
        )
    return get_direction(last, before_last, grid_rows, grid_cols) or current


def _body_hint(
    body: Sequence[tuple[int, int]],
    index: int,
    grid_rows: int,
    grid_cols: int,
) -> SegmentHint:
    segment = body[index]
    incoming = get_direction(body[index + 1], segment, grid_rows, grid_cols)
    outgoing = get_direction(segment, body[index - 1], grid_rows, grid_cols)
    if incoming is None or outgoing is None:
        return SegmentHint(SegmentRole.BODY, incoming=incoming, outgoing=outgoing)

    if incoming == outgoing:
        shape = (
            SegmentShape.HORIZONTAL if incoming.is_horizontal
            else SegmentShape.VERTICAL
        )
        return SegmentHint(
            SegmentRole.BODY,
            direction=incoming,
            incoming=incoming,
            outgoing=outgoing,
            shape=shape,
        )

    rotation = corner_rotation(incoming, outgoing)
    if rotation is None:
        return SegmentHint(SegmentRole.BODY, incoming=incoming, outgoing=outgoing)
    return SegmentHint(
        SegmentRole.BODY,
        incoming=incoming,
        outgoing=outgoing,
        shape=SegmentShape.CORNER,
        rotation=rotation,
    )


def describe_body(
    body: Sequence[tuple[int, int]],
    current: Direction | None,
    grid_rows: int,
    grid_cols: int,
) -> list[SegmentHint]:
    """Return one :class:`SegmentHint` per segment, head first."""
    hints: list[SegmentHint] = []
    last = len(body) - 1
    for i in range(len(body)):
        if i == 0:
            direction = head_direction(body, current, grid_rows, grid_cols)
            hints.append(
                SegmentHint(
                    SegmentRole.HEAD,
                    direction=direction,
                    rotation=end_rotation(direction),
                )
            )
        elif i == last:
            direction = tail_direction(body, current, grid_rows, grid_cols)
            hints.append(
                SegmentHint(
                    SegmentRole.TAIL,
                    direction=direction,
                    rotation=end_rotation(direction),
                )
            )
        else:
            hints.append(_body_hint(body, i, grid_rows, grid_cols))
    return hints

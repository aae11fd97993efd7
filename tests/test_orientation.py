"""Tests for segment orientation inference."""

import pytest

from wrapsnake.orientation import (
    SegmentRole,
    SegmentShape,
    corner_rotation,
    describe_body,
    end_rotation,
    get_direction,
    head_direction,
    tail_direction,
)
from wrapsnake.snake import Direction, Snake


class TestGetDirection:
    def test_up(self):
        assert get_direction((5, 5), (4, 5), 10, 10) == Direction.UP

    def test_down(self):
        assert get_direction((5, 5), (6, 5), 10, 10) == Direction.DOWN

    def test_left(self):
        assert get_direction((5, 5), (5, 4), 10, 10) == Direction.LEFT

    def test_right(self):
        assert get_direction((5, 5), (5, 6), 10, 10) == Direction.RIGHT

    def test_wrap_up(self):
        assert get_direction((1, 5), (10, 5), 10, 10) == Direction.UP

    def test_wrap_down(self):
        assert get_direction((10, 5), (1, 5), 10, 10) == Direction.DOWN

    def test_wrap_left(self):
        assert get_direction((5, 1), (5, 10), 10, 10) == Direction.LEFT

    def test_wrap_right(self):
        assert get_direction((5, 10), (5, 1), 10, 10) == Direction.RIGHT

    def test_wrap_uses_matching_axis(self):
        # 8 rows, 12 columns: wrapping depends on each axis' own size.
        assert get_direction((1, 3), (8, 3), 8, 12) == Direction.UP
        assert get_direction((4, 12), (4, 1), 8, 12) == Direction.RIGHT
        assert get_direction((1, 3), (12, 3), 8, 12) is None

    def test_coincident(self):
        assert get_direction((5, 5), (5, 5), 10, 10) is None

    def test_diagonal(self):
        assert get_direction((5, 5), (6, 6), 10, 10) is None

    def test_not_adjacent(self):
        assert get_direction((5, 5), (5, 8), 10, 10) is None
        assert get_direction((2, 5), (7, 5), 10, 10) is None

    def test_missing_input(self):
        assert get_direction(None, (5, 5), 10, 10) is None
        assert get_direction((5, 5), None, 10, 10) is None

    def test_matches_snake_motion(self):
        for direction in Direction:
            snake = Snake(1, 1, direction)
            before = snake.head
            snake.move(6, 6)
            assert get_direction(before, snake.head, 6, 6) == direction


class TestRotations:
    @pytest.mark.parametrize(
        ("direction", "degrees"),
        [
            (Direction.UP, 180),
            (Direction.DOWN, 0),
            (Direction.LEFT, 90),
            (Direction.RIGHT, -90),
        ],
    )
    def test_end_rotation(self, direction, degrees):
        assert end_rotation(direction) == degrees

    def test_end_rotation_without_direction(self):
        assert end_rotation(None) is None

    def test_eight_corners(self):
        corners = [
            (a, b) for a in Direction for b in Direction
            if corner_rotation(a, b) is not None
        ]
        assert len(corners) == 8
        for a, b in corners:
            assert a.is_horizontal != b.is_horizontal

    def test_reversal_is_not_a_corner(self):
        assert corner_rotation(Direction.UP, Direction.DOWN) is None
        assert corner_rotation(Direction.LEFT, Direction.RIGHT) is None


class TestHeadAndTail:
    def test_head_from_neck(self):
        body = [(5, 6), (5, 5)]
        assert head_direction(body, Direction.UP, 10, 10) == Direction.RIGHT

    def test_head_single_segment_falls_back(self):
        assert head_direction([(5, 5)], Direction.DOWN, 10, 10) == Direction.DOWN
        assert head_direction([(5, 5)], None, 10, 10) is None

    def test_head_across_edge(self):
        body = [(10, 3), (1, 3)]
        assert head_direction(body, None, 10, 10) == Direction.UP

    def test_tail_travel_direction(self):
        body = [(5, 7), (5, 6), (5, 5)]
        assert tail_direction(body, None, 10, 10) == Direction.RIGHT

    def test_tail_around_corner(self):
        body = [(4, 6), (5, 6), (5, 5)]
        assert tail_direction(body, None, 10, 10) == Direction.RIGHT

    def test_tail_overlap_looks_further_up(self):
        body = [(4, 6), (5, 6), (5, 6)]
        assert tail_direction(body, Direction.LEFT, 10, 10) == Direction.UP

    def test_tail_overlap_short_body_falls_back(self):
        body = [(5, 6), (5, 6)]
        assert tail_direction(body, Direction.RIGHT, 10, 10) == Direction.RIGHT

    def test_tail_single_segment(self):
        assert tail_direction([(5, 5)], Direction.LEFT, 10, 10) == Direction.LEFT


class TestDescribeBody:
    def test_single_segment_is_head(self):
        hints = describe_body([(5, 5)], Direction.RIGHT, 10, 10)
        assert len(hints) == 1
        assert hints[0].role == SegmentRole.HEAD
        assert hints[0].direction == Direction.RIGHT
        assert hints[0].rotation == -90
        assert hints[0].css_class == "snakecase head"

    def test_straight_horizontal(self):
        body = [(5, 7), (5, 6), (5, 5)]
        head, middle, tail = describe_body(body, Direction.RIGHT, 10, 10)
        assert head.role == SegmentRole.HEAD
        assert tail.role == SegmentRole.TAIL
        assert middle.shape == SegmentShape.HORIZONTAL
        assert middle.css_class == "snakecase body horizontal"
        assert middle.rotation is None

    def test_straight_vertical_across_edge(self):
        body = [(2, 3), (1, 3), (10, 3)]
        _, middle, tail = describe_body(body, Direction.DOWN, 10, 10)
        assert middle.shape == SegmentShape.VERTICAL
        assert tail.direction == Direction.DOWN

    def test_corner(self):
        # Travelling right, then turning up.
        body = [(4, 6), (5, 6), (5, 5)]
        _, corner, _ = describe_body(body, Direction.UP, 10, 10)
        assert corner.shape == SegmentShape.CORNER
        assert corner.incoming == Direction.RIGHT
        assert corner.outgoing == Direction.UP
        assert corner.rotation == 0
        assert corner.css_class == "snakecase body corner"

    def test_corner_from_live_snake(self):
        snake = Snake(5, 5, Direction.LEFT)
        snake.grow(2)
        snake.move(10, 10)
        snake.set_direction(Direction.DOWN)
        snake.move(10, 10)
        hints = describe_body(snake.body, snake.direction, 10, 10)
        assert hints[0].direction == Direction.DOWN
        assert hints[1].shape == SegmentShape.CORNER
        assert (hints[1].incoming, hints[1].outgoing) == (
            Direction.LEFT, Direction.DOWN,
        )
        assert hints[1].rotation == 180
        assert hints[2].direction == Direction.LEFT

    def test_unrelated_neighbours_have_no_hint(self):
        body = [(5, 5), (5, 6), (7, 7), (7, 8)]
        hints = describe_body(body, Direction.LEFT, 10, 10)
        assert hints[1].shape is None
        assert hints[1].css_class == "snakecase"

    def test_to_dict(self):
        hints = describe_body([(5, 6), (5, 5)], Direction.RIGHT, 10, 10)
        assert hints[0].to_dict() == {
            "role": "head",
            "direction": "right",
            "shape": None,
            "rotation": -90,
            "class": "snakecase head",
        }
        assert hints[1].to_dict()["class"] == "snakecase tail"

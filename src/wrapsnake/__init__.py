"""wrap-around snake engine and leaderboard service."""

from wrapsnake.config import CollisionPolicy, DeviceType, Difficulty, GameConfig
from wrapsnake.engine import GameSession
from wrapsnake.food import FoodSpawner
from wrapsnake.grid import Grid, grid_size_for_viewport
from wrapsnake.orientation import SegmentHint, describe_body, get_direction
from wrapsnake.snake import Direction, Segment, Snake

__all__ = [
    "CollisionPolicy",
    "DeviceType",
    "Difficulty",
    "Direction",
    "FoodSpawner",
    "GameConfig",
    "GameSession",
    "Grid",
    "Segment",
    "SegmentHint",
    "Snake",
    "describe_body",
    "get_direction",
    "grid_size_for_viewport",
]

"""Game configuration: difficulty levels, policies and the session config."""

from __future__ import annotations

import enum
import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

from wrapsnake.food import DEFAULT_SAMPLE_ATTEMPTS
from wrapsnake.grid import MAX_CELLS

logger = logging.getLogger(__name__)


class Difficulty(str, enum.Enum):
    """Difficulty levels; each maps to a base tick interval."""

    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"

    @property
    def interval_ms(self) -> int:
        return TICK_INTERVALS_MS[self]


TICK_INTERVALS_MS: dict[Difficulty, int] = {
    Difficulty.EASY: 150,
    Difficulty.NORMAL: 100,
    Difficulty.HARD: 70,
}


class DeviceType(str, enum.Enum):
    """Device category; leaderboards are kept per device."""

    DESKTOP = "desktop"
    MOBILE = "mobile"


class CollisionPolicy(str, enum.Enum):
    """When self-collision is checked relative to the move.

    ``POST_MOVE`` moves first and then looks for an overlap, so the final
    frame shows the head inside the body. ``PREDICTIVE`` checks the next
    head position before moving and ends the game without committing the
    illegal frame.
    """

    POST_MOVE = "post_move"
    PREDICTIVE = "predictive"


@dataclass(frozen=True)
class GameConfig:
    """Configuration for a single-player session.

    Supports JSON serialization for reproducibility.
    """

    rows: int = MAX_CELLS
    cols: int = MAX_CELLS
    difficulty: Difficulty = Difficulty.NORMAL
    collision_policy: CollisionPolicy = CollisionPolicy.POST_MOVE

    # Progressive speed-up: shave this many ms off the interval per food.
    speedup_ms: int = 0
    min_interval_ms: int = 50

    food_sample_attempts: int = DEFAULT_SAMPLE_ATTEMPTS

    def __post_init__(self) -> None:
        if self.rows < 1 or self.cols < 1:
            raise ValueError("rows and cols must be positive.")
        if self.speedup_ms < 0:
            raise ValueError("speedup_ms must be >= 0.")
        if self.min_interval_ms < 1:
            raise ValueError("min_interval_ms must be at least 1.")
        if self.food_sample_attempts < 0:
            raise ValueError("food_sample_attempts must be >= 0.")
        # Accept plain strings from JSON or the CLI.
        object.__setattr__(self, "difficulty", Difficulty(self.difficulty))
        object.__setattr__(
            self, "collision_policy", CollisionPolicy(self.collision_policy),
        )

    @property
    def base_interval_ms(self) -> int:
        return max(self.min_interval_ms, self.difficulty.interval_ms)

    def to_dict(self) -> dict:
        """Serialize to a plain dict (enums become their values)."""
        d = asdict(self)
        d["difficulty"] = self.difficulty.value
        d["collision_policy"] = self.collision_policy.value
        return d

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> GameConfig:
        """Load config from a JSON file."""
        raw = json.loads(Path(path).read_text())
        return cls(**raw)

"""Score sink for finished games."""

from wrapsnake.leaderboard.store import (
    ANONYMOUS,
    DEFAULT_BOARD_SIZE,
    FallbackLeaderboardStore,
    InMemoryLeaderboardStore,
    LeaderboardEntry,
    LeaderboardError,
    LeaderboardStore,
    SqliteLeaderboardStore,
    open_store,
)

__all__ = [
    "ANONYMOUS",
    "DEFAULT_BOARD_SIZE",
    "FallbackLeaderboardStore",
    "InMemoryLeaderboardStore",
    "LeaderboardEntry",
    "LeaderboardError",
    "LeaderboardStore",
    "SqliteLeaderboardStore",
    "open_store",
]

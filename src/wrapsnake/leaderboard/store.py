"""Leaderboard stores: ranked top-N score lists per difficulty and device."""

from __future__ import annotations

import logging
import sqlite3
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from wrapsnake.config import DeviceType, Difficulty

logger = logging.getLogger(__name__)

DEFAULT_BOARD_SIZE = 5
ANONYMOUS = "Anonymous"


class LeaderboardError(Exception):
    """Raised when a store cannot read or write scores."""


@dataclass(frozen=True)
class LeaderboardEntry:
    """One ranked score."""

    id: int
    name: str
    score: int
    difficulty: Difficulty
    device_type: DeviceType
    created_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "score": self.score,
            "created_at": self.created_at.isoformat(),
        }


def _rank_key(entry: LeaderboardEntry) -> tuple[int, datetime, int]:
    # Higher score first; on ties the earlier submission wins.
    return (-entry.score, entry.created_at, entry.id)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LeaderboardStore:
    """Base interface for score sinks.

    Each ``(difficulty, device_type)`` board keeps only its best
    *board_size* entries.
    """

    def __init__(self, board_size: int = DEFAULT_BOARD_SIZE) -> None:
        if board_size < 1:
            raise ValueError("board_size must be at least 1.")
        self.board_size = board_size

    def top(
        self,
        difficulty: Difficulty,
        device_type: DeviceType = DeviceType.DESKTOP,
        limit: int | None = None,
    ) -> list[LeaderboardEntry]:
        """Return the best entries, highest score first."""
        raise NotImplementedError

    def submit(
        self,
        name: str,
        score: int,
        difficulty: Difficulty,
        device_type: DeviceType = DeviceType.DESKTOP,
    ) -> bool:
        """Record a score. Returns whether the store accepted it."""
        raise NotImplementedError

    def close(self) -> None:
        """Release any held resources."""

    def _limit(self, limit: int | None) -> int:
        if limit is None:
            return self.board_size
        return max(0, min(limit, self.board_size))


class InMemoryLeaderboardStore(LeaderboardStore):
    """Process-local store; contents are lost on restart."""

    def __init__(self, board_size: int = DEFAULT_BOARD_SIZE) -> None:
        super().__init__(board_size)
        self._boards: dict[tuple[Difficulty, DeviceType], list[LeaderboardEntry]] = {}
        self._next_id = 1

    def top(
        self,
        difficulty: Difficulty,
        device_type: DeviceType = DeviceType.DESKTOP,
        limit: int | None = None,
    ) -> list[LeaderboardEntry]:
        board = self._boards.get((Difficulty(difficulty), DeviceType(device_type)), [])
        return list(board[: self._limit(limit)])

    def submit(
        self,
        name: str,
        score: int,
        difficulty: Difficulty,
        device_type: DeviceType = DeviceType.DESKTOP,
    ) -> bool:
        key = (Difficulty(difficulty), DeviceType(device_type))
        entry = LeaderboardEntry(
            id=self._next_id,
            name=name or ANONYMOUS,
            score=int(score),
            difficulty=key[0],
            device_type=key[1],
            created_at=_utcnow(),
        )
        self._next_id += 1
        board = self._boards.setdefault(key, [])
        board.append(entry)
        board.sort(key=_rank_key)
        del board[self.board_size:]
        return True


_SCHEMA = """
CREATE TABLE IF NOT EXISTS leaderboard (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    player_name TEXT NOT NULL,
    score INTEGER NOT NULL,
    difficulty TEXT NOT NULL,
    device_type TEXT NOT NULL,
    created_at TEXT NOT NULL
)
"""

_INDEX = """
CREATE INDEX IF NOT EXISTS idx_leaderboard_board
    ON leaderboard (difficulty, device_type, score DESC, created_at ASC)
"""


class SqliteLeaderboardStore(LeaderboardStore):
    """SQLite-backed store.

    Rows outside a board's top *board_size* are deleted after every
    insert, so the table never grows beyond ``boards × board_size``.
    """

    def __init__(
        self,
        path: str | Path = ":memory:",
        board_size: int = DEFAULT_BOARD_SIZE,
    ) -> None:
        super().__init__(board_size)
        self.path = str(path)
        if self.path != ":memory:":
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        try:
            self._conn = sqlite3.connect(self.path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            with self._conn:
                self._conn.execute(_SCHEMA)
                self._conn.execute(_INDEX)
        except sqlite3.Error as exc:
            raise LeaderboardError(f"Cannot open leaderboard at {self.path}: {exc}") from exc
        logger.info("Leaderboard database ready at %s", self.path)

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            try:
                with self._conn:
                    yield self._conn
            except sqlite3.Error as exc:
                raise LeaderboardError(str(exc)) from exc

    def top(
        self,
        difficulty: Difficulty,
        device_type: DeviceType = DeviceType.DESKTOP,
        limit: int | None = None,
    ) -> list[LeaderboardEntry]:
        difficulty = Difficulty(difficulty)
        device_type = DeviceType(device_type)
        with self._transaction() as conn:
            rows = conn.execute(
                """
                SELECT id, player_name, score, created_at
                FROM leaderboard
                WHERE difficulty = ? AND device_type = ?
                ORDER BY score DESC, created_at ASC, id ASC
                LIMIT ?
                """,
                (difficulty.value, device_type.value, self._limit(limit)),
            ).fetchall()
        return [
            LeaderboardEntry(
                id=row["id"],
                name=row["player_name"],
                score=row["score"],
                difficulty=difficulty,
                device_type=device_type,
                created_at=datetime.fromisoformat(row["created_at"]),
            )
            for row in rows
        ]

    def submit(
        self,
        name: str,
        score: int,
        difficulty: Difficulty,
        device_type: DeviceType = DeviceType.DESKTOP,
    ) -> bool:
        board = (Difficulty(difficulty).value, DeviceType(device_type).value)
        with self._transaction() as conn:
            conn.execute(
                """
                INSERT INTO leaderboard
                    (player_name, score, difficulty, device_type, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (name or ANONYMOUS, int(score), *board, _utcnow().isoformat()),
            )
            conn.execute(
                """
                DELETE FROM leaderboard
                WHERE difficulty = ? AND device_type = ?
                AND id NOT IN (
                    SELECT id FROM leaderboard
                    WHERE difficulty = ? AND device_type = ?
                    ORDER BY score DESC, created_at ASC, id ASC
                    LIMIT ?
                )
                """,
                (*board, *board, self.board_size),
            )
        return True

    def close(self) -> None:
        with self._lock:
            self._conn.close()


class FallbackLeaderboardStore(LeaderboardStore):
    """Serves from *primary*, switching to *fallback* when it fails.

    Failures are logged and never propagated; a submit that fails on both
    stores returns ``False``.
    """

    def __init__(
        self,
        primary: LeaderboardStore,
        fallback: LeaderboardStore | None = None,
    ) -> None:
        super().__init__(primary.board_size)
        self.primary = primary
        self.fallback = (
            fallback if fallback is not None
            else InMemoryLeaderboardStore(primary.board_size)
        )

    def top(
        self,
        difficulty: Difficulty,
        device_type: DeviceType = DeviceType.DESKTOP,
        limit: int | None = None,
    ) -> list[LeaderboardEntry]:
        try:
            return self.primary.top(difficulty, device_type, limit)
        except LeaderboardError as exc:
            logger.warning("Leaderboard read failed (%s); using fallback.", exc)
        try:
            return self.fallback.top(difficulty, device_type, limit)
        except LeaderboardError:
            logger.exception("Fallback leaderboard read failed.")
            return []

    def submit(
        self,
        name: str,
        score: int,
        difficulty: Difficulty,
        device_type: DeviceType = DeviceType.DESKTOP,
    ) -> bool:
        try:
            return self.primary.submit(name, score, difficulty, device_type)
        except LeaderboardError as exc:
            logger.warning("Leaderboard write failed (%s); using fallback.", exc)
        try:
            return self.fallback.submit(name, score, difficulty, device_type)
        except LeaderboardError:
            logger.exception("Fallback leaderboard write failed.")
            return False

    def close(self) -> None:
        self.primary.close()
        self.fallback.close()


def open_store(
    database: str | Path | None = None,
    board_size: int = DEFAULT_BOARD_SIZE,
) -> LeaderboardStore:
    """Build the store used by the server and CLI.

    Without *database* scores live in memory. With one, SQLite is used,
    falling back to memory if the file cannot be opened or later fails.
    """
    if database is None:
        return InMemoryLeaderboardStore(board_size)
    try:
        primary: LeaderboardStore = SqliteLeaderboardStore(database, board_size)
    except LeaderboardError as exc:
        logger.warning("%s; scores will be kept in memory.", exc)
        return InMemoryLeaderboardStore(board_size)
    return FallbackLeaderboardStore(primary)

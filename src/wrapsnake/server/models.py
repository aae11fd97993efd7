"""Pydantic models for API request/response schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from wrapsnake.config import DeviceType, Difficulty
from wrapsnake.leaderboard import ANONYMOUS, LeaderboardEntry


class ScoreEntry(BaseModel):
    """One leaderboard row."""

    id: int
    name: str
    score: int
    created_at: datetime

    @classmethod
    def from_entry(cls, entry: LeaderboardEntry) -> ScoreEntry:
        return cls(
            id=entry.id,
            name=entry.name,
            score=entry.score,
            created_at=entry.created_at,
        )


class LeaderboardResponse(BaseModel):
    """Response for GET /api/highscore/{difficulty}."""

    model_config = ConfigDict(populate_by_name=True)

    difficulty: Difficulty
    device_type: DeviceType = Field(alias="deviceType")
    leaderboard: list[ScoreEntry]


class SubmitScoreRequest(BaseModel):
    """Request body for POST /api/highscore/{difficulty}."""

    model_config = ConfigDict(populate_by_name=True)

    score: int = Field(ge=0)
    name: str | None = Field(default=None, max_length=32)
    device_type: DeviceType | None = Field(default=None, alias="deviceType")

    @property
    def display_name(self) -> str:
        name = (self.name or "").strip()
        return name or ANONYMOUS


class SubmitScoreResponse(BaseModel):
    """Response for a successful score submission."""

    success: bool
    leaderboard: list[ScoreEntry]


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    detail: str

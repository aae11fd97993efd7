"""Server settings read from ``WRAPSNAKE_*`` environment variables."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from wrapsnake.leaderboard import DEFAULT_BOARD_SIZE


class ServerSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="WRAPSNAKE_")

    host: str = "127.0.0.1"
    port: int = Field(default=3000, ge=1, le=65535)
    database: str | None = None
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    request_timeout_s: float = Field(default=5.0, gt=0)
    leaderboard_size: int = Field(default=DEFAULT_BOARD_SIZE, ge=1)
    max_sessions: int = Field(default=100, ge=1)
    log_level: str = "INFO"

"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from wrapsnake.leaderboard import LeaderboardStore, open_store
from wrapsnake.server.routes import router
from wrapsnake.server.sessions import SessionManager
from wrapsnake.server.settings import ServerSettings
from wrapsnake.server.websocket import ws_router


def create_app(
    settings: ServerSettings | None = None,
    store: LeaderboardStore | None = None,
) -> FastAPI:
    """Build and return the FastAPI application."""
    settings = settings if settings is not None else ServerSettings()

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        yield
        await app.state.session_manager.cleanup()
        app.state.leaderboard.close()

    app = FastAPI(
        title="wrapsnake API", version="0.1.0", lifespan=_lifespan,
    )
    app.state.settings = settings
    app.state.leaderboard = (
        store if store is not None
        else open_store(settings.database, settings.leaderboard_size)
    )
    app.state.session_manager = SessionManager(settings.max_sessions)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    app.include_router(router)
    app.include_router(ws_router)

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    return app

"""REST API route handlers for the leaderboard."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TypeVar

from fastapi import APIRouter, HTTPException, Query, Request
from starlette.concurrency import run_in_threadpool

from wrapsnake.config import DeviceType, Difficulty
from wrapsnake.leaderboard import LeaderboardStore
from wrapsnake.server.models import (
    LeaderboardResponse,
    ScoreEntry,
    SubmitScoreRequest,
    SubmitScoreResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["leaderboard"])

T = TypeVar("T")


def _get_store(request: Request) -> LeaderboardStore:
    return request.app.state.leaderboard


async def _call_store(request: Request, fn: Callable[..., T], *args) -> T:
    """Run a blocking store call, bounded by the configured timeout."""
    timeout = request.app.state.settings.request_timeout_s
    try:
        return await asyncio.wait_for(run_in_threadpool(fn, *args), timeout)
    except asyncio.TimeoutError as exc:
        logger.warning("Leaderboard call timed out after %.1fs.", timeout)
        raise HTTPException(
            status_code=408, detail="Database request timeout",
        ) from exc


@router.get("/highscore/{difficulty}")
async def get_leaderboard(
    difficulty: Difficulty,
    request: Request,
    device_type: DeviceType = Query(DeviceType.DESKTOP, alias="deviceType"),
) -> LeaderboardResponse:
    """Top scores for a difficulty and device category."""
    store = _get_store(request)
    entries = await _call_store(request, store.top, difficulty, device_type)
    return LeaderboardResponse(
        difficulty=difficulty,
        device_type=device_type,
        leaderboard=[ScoreEntry.from_entry(e) for e in entries],
    )


@router.post("/highscore/{difficulty}")
async def submit_score(
    difficulty: Difficulty,
    body: SubmitScoreRequest,
    request: Request,
    device_type: DeviceType = Query(DeviceType.DESKTOP, alias="deviceType"),
) -> SubmitScoreResponse:
    """Submit a final score and return the refreshed leaderboard."""
    store = _get_store(request)
    target_device = body.device_type or device_type
    accepted = await _call_store(
        request, store.submit,
        body.display_name, body.score, difficulty, target_device,
    )
    if not accepted:
        raise HTTPException(status_code=500, detail="Failed to submit score")

    logger.info(
        "Score %d submitted by '%s' (%s/%s).",
        body.score, body.display_name, difficulty.value, target_device.value,
    )
    entries = await _call_store(request, store.top, difficulty, target_device)
    return SubmitScoreResponse(
        success=True,
        leaderboard=[ScoreEntry.from_entry(e) for e in entries],
    )


@router.get("/sessions")
async def list_sessions(request: Request) -> list[dict]:
    """List live play sessions."""
    return request.app.state.session_manager.list_sessions()

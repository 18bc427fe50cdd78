"""Leaderboard endpoint."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hamchallenges.callsigns import same_callsign
from hamchallenges.challenges.service import require_challenge
from hamchallenges.config import Settings, get_settings
from hamchallenges.database import get_session
from hamchallenges.leaderboard import service
from hamchallenges.leaderboard.schemas import LeaderboardEntry, LeaderboardResponse
from hamchallenges.leaderboard.service import RankedEntry
from hamchallenges.time_utils import utcnow

router = APIRouter(prefix="/v1", tags=["Leaderboard"])


def _entry(ranked: RankedEntry) -> LeaderboardEntry:
    return LeaderboardEntry(
        rank=ranked.rank,
        callsign=ranked.callsign,
        score=ranked.score,
        current_tier=ranked.current_tier,
        completed_at=ranked.completed_at,
    )


@router.get("/challenges/{challenge_id}/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(
    challenge_id: uuid.UUID,
    limit: int = Query(service.MAX_PAGE_SIZE, ge=1),
    offset: int = Query(0, ge=0),
    around: str | None = Query(None, min_length=1),
    db: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> LeaderboardResponse:
    """Ranked leaderboard page, or a window around ``around`` (pagination is then ignored)."""
    await require_challenge(db, challenge_id)

    user_position = None
    if around is not None:
        ranked = await service.get_leaderboard_around(
            db, challenge_id, around, settings.leaderboard_around_window
        )
        total = await service.count_entries(db, challenge_id)
        entries = [_entry(r) for r in ranked]
        user_position = next((e for e in entries if same_callsign(e.callsign, around)), None)
    else:
        ranked, total = await service.get_leaderboard_page(db, challenge_id, limit, offset)
        entries = [_entry(r) for r in ranked]

    return LeaderboardResponse(
        leaderboard=entries,
        total=total,
        user_position=user_position,
        last_updated=utcnow(),
    )

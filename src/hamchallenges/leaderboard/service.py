"""Leaderboard ranker.

Rankings are computed by the database on every read with RANK() over
score descending: tied scores share a rank and the following rank skips
(100, 100, 50 -> 1, 1, 3). Within a tie, earlier updates are listed first.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hamchallenges.callsigns import normalize_callsign
from hamchallenges.db.models import Progress
from hamchallenges.time_utils import as_utc

MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class RankedEntry:
    rank: int
    callsign: str
    score: int
    current_tier: str | None
    updated_at: datetime

    @property
    def completed_at(self) -> datetime | None:
        """Time the entry was last updated, for entries that have scored at all."""
        return self.updated_at if self.score > 0 else None


def _ranked(challenge_id: uuid.UUID) -> Select:
    return select(
        Progress.callsign,
        Progress.score,
        Progress.current_tier,
        Progress.updated_at,
        func.rank().over(order_by=Progress.score.desc()).label("rank"),
    ).where(Progress.challenge_id == challenge_id)


def _to_entries(rows: list) -> list[RankedEntry]:
    return [
        RankedEntry(
            rank=int(row.rank),
            callsign=row.callsign,
            score=row.score,
            current_tier=row.current_tier,
            updated_at=as_utc(row.updated_at),
        )
        for row in rows
    ]


async def count_entries(db: AsyncSession, challenge_id: uuid.UUID) -> int:
    """Number of progress rows (ranked participants) in a challenge."""
    result = await db.execute(
        select(func.count()).select_from(Progress).where(Progress.challenge_id == challenge_id)
    )
    return result.scalar_one()


async def get_leaderboard_page(
    db: AsyncSession,
    challenge_id: uuid.UUID,
    limit: int = MAX_PAGE_SIZE,
    offset: int = 0,
) -> tuple[list[RankedEntry], int]:
    """Return one page of ranked entries plus the unpaginated total."""
    limit = max(0, min(limit, MAX_PAGE_SIZE))
    offset = max(0, offset)

    ranked = _ranked(challenge_id).subquery()
    result = await db.execute(
        select(ranked)
        .order_by(ranked.c.score.desc(), ranked.c.updated_at.asc(), ranked.c.callsign.asc())
        .limit(limit)
        .offset(offset)
    )
    entries = _to_entries(list(result.all()))
    total = await count_entries(db, challenge_id)
    return entries, total


async def get_leaderboard_around(
    db: AsyncSession,
    challenge_id: uuid.UUID,
    callsign: str,
    window: int = 5,
) -> list[RankedEntry]:
    """Entries whose rank lies within ``window`` of the callsign's rank.

    A callsign without progress has no rank, so the window is empty.
    """
    window = max(0, window)
    ranked = _ranked(challenge_id).cte("ranked")
    target_rank = (
        select(ranked.c.rank)
        .where(ranked.c.callsign == normalize_callsign(callsign))
        .scalar_subquery()
    )
    result = await db.execute(
        select(ranked)
        .where(ranked.c.rank.between(target_rank - window, target_rank + window))
        .order_by(ranked.c.rank.asc(), ranked.c.updated_at.asc(), ranked.c.callsign.asc())
    )
    return _to_entries(list(result.all()))

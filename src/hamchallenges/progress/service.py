"""Progress store: one row per (challenge, callsign), last write wins.

Every report fully replaces the stored goals, value, score and tier.
Scores are derived from the challenge configuration at write time, so a
later configuration edit only shows up once the participant reports again.
Nothing here commits; the caller owns the transaction.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from datetime import datetime

import structlog
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hamchallenges.callsigns import normalize_callsign
from hamchallenges.db.dialect import insert_for
from hamchallenges.db.models import Challenge, Progress
from hamchallenges.scoring import ScoreResult, evaluate
from hamchallenges.time_utils import utcnow

logger = structlog.get_logger()


async def upsert_progress(
    db: AsyncSession,
    challenge_id: uuid.UUID,
    callsign: str,
    completed_goals: Sequence[str],
    current_value: int,
    score: int,
    tier: str | None,
    last_qso_date: datetime | None = None,
) -> Progress:
    """Insert or fully replace the progress row for (challenge_id, callsign)."""
    callsign = normalize_callsign(callsign)
    now = utcnow()
    goals = list(completed_goals)

    stmt = insert_for(db, Progress).values(
        id=uuid.uuid4(),
        challenge_id=challenge_id,
        callsign=callsign,
        completed_goals=goals,
        current_value=current_value,
        score=score,
        current_tier=tier,
        last_qso_date=last_qso_date,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["challenge_id", "callsign"],
        set_={
            "completed_goals": stmt.excluded.completed_goals,
            "current_value": stmt.excluded.current_value,
            "score": stmt.excluded.score,
            "current_tier": stmt.excluded.current_tier,
            "last_qso_date": stmt.excluded.last_qso_date,
            "updated_at": stmt.excluded.updated_at,
        },
    ).returning(Progress)

    result = await db.scalars(stmt, execution_options={"populate_existing": True})
    return result.one()


async def get_progress(db: AsyncSession, challenge_id: uuid.UUID, callsign: str) -> Progress | None:
    """Fetch the progress row for a callsign, case-insensitively."""
    result = await db.execute(
        select(Progress).where(
            Progress.challenge_id == challenge_id,
            Progress.callsign == normalize_callsign(callsign),
        )
    )
    return result.scalar_one_or_none()


async def get_rank(db: AsyncSession, challenge_id: uuid.UUID, callsign: str) -> int | None:
    """Standard competition rank of a callsign within a challenge, or None without progress.

    Equal scores share a rank; the next distinct score skips ahead.
    """
    ranked = (
        select(
            Progress.callsign,
            func.rank().over(order_by=Progress.score.desc()).label("rank"),
        )
        .where(Progress.challenge_id == challenge_id)
        .subquery()
    )
    result = await db.execute(
        select(ranked.c.rank).where(ranked.c.callsign == normalize_callsign(callsign))
    )
    return result.scalar_one_or_none()


async def delete_progress(db: AsyncSession, challenge_id: uuid.UUID, callsign: str) -> None:
    """Remove a callsign's progress for one challenge (used when leaving)."""
    await db.execute(
        delete(Progress).where(
            Progress.challenge_id == challenge_id,
            Progress.callsign == normalize_callsign(callsign),
        )
    )


async def record_progress(
    db: AsyncSession,
    challenge: Challenge,
    callsign: str,
    completed_goals: Sequence[str],
    current_value: int,
    last_qso_date: datetime | None = None,
) -> tuple[Progress, ScoreResult]:
    """Score a progress report against the challenge configuration and store it."""
    result = evaluate(challenge.configuration, completed_goals, current_value)
    progress = await upsert_progress(
        db,
        challenge.id,
        callsign,
        completed_goals,
        current_value,
        result.score,
        result.tier,
        last_qso_date,
    )
    logger.info(
        "progress_recorded",
        challenge_id=str(challenge.id),
        callsign=progress.callsign,
        score=result.score,
        tier=result.tier,
    )
    return progress, result

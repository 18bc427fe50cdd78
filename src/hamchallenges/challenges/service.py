"""Challenge CRUD and lookup."""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy import Select, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hamchallenges.challenges.schemas import ChallengeRequest
from hamchallenges.db.models import Challenge, ChallengeParticipant
from hamchallenges.errors import ChallengeNotFound
from hamchallenges.time_utils import utcnow

logger = structlog.get_logger()

DEFAULT_LIST_LIMIT = 50
MAX_LIST_LIMIT = 100


def _filtered(
    stmt: Select,
    category: str | None,
    challenge_type: str | None,
    active: bool | None,
) -> Select:
    if category is not None:
        stmt = stmt.where(Challenge.category == category)
    if challenge_type is not None:
        stmt = stmt.where(Challenge.challenge_type == challenge_type)
    if active is not None:
        stmt = stmt.where(Challenge.is_active.is_(active))
    return stmt


async def list_challenges(
    db: AsyncSession,
    category: str | None = None,
    challenge_type: str | None = None,
    active: bool | None = None,
    limit: int = DEFAULT_LIST_LIMIT,
    offset: int = 0,
) -> tuple[list[tuple[Challenge, int]], int]:
    """List challenges newest first with their active participant counts."""
    counts = (
        select(
            ChallengeParticipant.challenge_id,
            func.count().label("participant_count"),
        )
        .where(ChallengeParticipant.status == "active")
        .group_by(ChallengeParticipant.challenge_id)
        .subquery()
    )
    stmt = select(Challenge, func.coalesce(counts.c.participant_count, 0)).outerjoin(
        counts, counts.c.challenge_id == Challenge.id
    )
    stmt = _filtered(stmt, category, challenge_type, active)
    result = await db.execute(
        stmt.order_by(Challenge.created_at.desc(), Challenge.id).limit(limit).offset(offset)
    )
    items = [(challenge, int(count)) for challenge, count in result.all()]

    total_stmt = _filtered(select(func.count()).select_from(Challenge), category, challenge_type, active)
    total = (await db.execute(total_stmt)).scalar_one()
    return items, total


async def get_challenge(db: AsyncSession, challenge_id: uuid.UUID) -> Challenge | None:
    return await db.get(Challenge, challenge_id)


async def require_challenge(db: AsyncSession, challenge_id: uuid.UUID) -> Challenge:
    """Fetch a challenge or raise ChallengeNotFound."""
    challenge = await get_challenge(db, challenge_id)
    if challenge is None:
        raise ChallengeNotFound(challenge_id)
    return challenge


def _apply(challenge: Challenge, data: ChallengeRequest) -> None:
    challenge.name = data.name
    challenge.description = data.description
    challenge.author = data.author
    challenge.category = data.category
    challenge.challenge_type = data.challenge_type
    challenge.configuration = data.configuration
    challenge.invite_config = data.invite_config
    challenge.hamalert_config = data.hamalert_config
    challenge.is_active = data.is_active


async def create_challenge(db: AsyncSession, data: ChallengeRequest) -> Challenge:
    now = utcnow()
    challenge = Challenge(id=uuid.uuid4(), version=1, created_at=now, updated_at=now)
    _apply(challenge, data)
    db.add(challenge)
    await db.flush()
    logger.info("challenge_created", challenge_id=str(challenge.id), name=challenge.name)
    return challenge


async def update_challenge(db: AsyncSession, challenge_id: uuid.UUID, data: ChallengeRequest) -> Challenge:
    """Fully replace a challenge's editable fields and bump its version.

    Stored progress keeps the score computed under the previous
    configuration until the participant reports again.
    """
    challenge = await require_challenge(db, challenge_id)
    _apply(challenge, data)
    challenge.version = challenge.version + 1
    challenge.updated_at = utcnow()
    await db.flush()
    logger.info("challenge_updated", challenge_id=str(challenge.id), version=challenge.version)
    return challenge


async def delete_challenge(db: AsyncSession, challenge_id: uuid.UUID) -> None:
    """Delete a challenge; participations, progress, invites and badges cascade."""
    result = await db.execute(
        delete(Challenge)
        .where(Challenge.id == challenge_id)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise ChallengeNotFound(challenge_id)
    logger.info("challenge_deleted", challenge_id=str(challenge_id))

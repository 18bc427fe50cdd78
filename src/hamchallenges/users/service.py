"""Social user records keyed by callsign."""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hamchallenges.callsigns import normalize_callsign
from hamchallenges.db.models import User
from hamchallenges.time_utils import utcnow

logger = structlog.get_logger()

MIN_SEARCH_LENGTH = 2
MAX_SEARCH_RESULTS = 20


async def get_user(db: AsyncSession, user_id: uuid.UUID) -> User | None:
    return await db.get(User, user_id)


async def get_user_by_callsign(db: AsyncSession, callsign: str) -> User | None:
    result = await db.execute(select(User).where(User.callsign == normalize_callsign(callsign)))
    return result.scalar_one_or_none()


async def get_or_create_user(db: AsyncSession, callsign: str) -> User:
    """Return the user row for a callsign, creating it on first use."""
    user = await get_user_by_callsign(db, callsign)
    if user is not None:
        return user
    user = User(id=uuid.uuid4(), callsign=normalize_callsign(callsign), created_at=utcnow())
    db.add(user)
    await db.flush()
    logger.info("user_created", callsign=user.callsign)
    return user


async def search_users(db: AsyncSession, query: str, limit: int = MAX_SEARCH_RESULTS) -> list[User]:
    """Case-insensitive callsign substring search. Queries under 2 characters match nothing."""
    if len(query) < MIN_SEARCH_LENGTH:
        return []
    result = await db.execute(
        select(User)
        .where(User.callsign.contains(normalize_callsign(query), autoescape=True))
        .order_by(User.callsign)
        .limit(limit)
    )
    return list(result.scalars().all())

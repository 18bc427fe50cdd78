"""Challenge badge images: validate, store, list, serve and delete."""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from hamchallenges.db.models import Badge
from hamchallenges.errors import BadgeNotFound, ValidationFailed
from hamchallenges.time_utils import utcnow

logger = structlog.get_logger()

MAX_BADGE_SIZE = 1024 * 1024
ALLOWED_CONTENT_TYPES = frozenset({"image/png", "image/svg+xml", "image/jpeg"})
IMAGE_CACHE_CONTROL = "public, max-age=86400"


def badge_image_url(base_url: str, badge_id: uuid.UUID) -> str:
    """Public URL serving a badge's image bytes."""
    return f"{base_url.rstrip('/')}/v1/badges/{badge_id}/image"


def validate_image(content_type: str | None, data: bytes) -> str:
    """Check an uploaded image and return its content type."""
    content_type = content_type or ""
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise ValidationFailed(f"Invalid content type '{content_type}'. Allowed: PNG, JPEG, SVG")
    if len(data) > MAX_BADGE_SIZE:
        raise ValidationFailed(f"Image too large. Maximum size is {MAX_BADGE_SIZE} bytes")
    return content_type


async def create_badge(
    db: AsyncSession,
    challenge_id: uuid.UUID,
    name: str,
    tier_id: str | None,
    image_data: bytes,
    content_type: str,
) -> Badge:
    badge = Badge(
        id=uuid.uuid4(),
        challenge_id=challenge_id,
        name=name,
        tier_id=tier_id or None,
        image_data=image_data,
        content_type=content_type,
        created_at=utcnow(),
    )
    db.add(badge)
    await db.flush()
    logger.info(
        "badge_created",
        challenge_id=str(challenge_id),
        badge_id=str(badge.id),
        content_type=content_type,
        size=len(image_data),
    )
    return badge


async def list_badges(db: AsyncSession, challenge_id: uuid.UUID) -> list[Badge]:
    result = await db.execute(
        select(Badge).where(Badge.challenge_id == challenge_id).order_by(Badge.created_at.asc())
    )
    return list(result.scalars().all())


async def get_badge(db: AsyncSession, badge_id: uuid.UUID) -> Badge:
    badge = await db.get(Badge, badge_id)
    if badge is None:
        raise BadgeNotFound(badge_id)
    return badge


async def delete_badge(db: AsyncSession, badge_id: uuid.UUID) -> None:
    result = await db.execute(
        delete(Badge).where(Badge.id == badge_id).execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise BadgeNotFound(badge_id)
    logger.info("badge_deleted", badge_id=str(badge_id))

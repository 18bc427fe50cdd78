"""Challenge invite tokens: issue, list, revoke and redeem."""

from __future__ import annotations

import uuid
from datetime import datetime

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from hamchallenges.auth.tokens import generate_challenge_invite_token
from hamchallenges.db.models import InviteToken
from hamchallenges.errors import InviteExhausted, InviteExpired, InviteNotFound
from hamchallenges.time_utils import as_utc, utcnow

logger = structlog.get_logger()


def invite_url(base_url: str, token: str) -> str:
    """Shareable join link for an invite token."""
    return f"{base_url.rstrip('/')}/join/{token}"


async def create_invite(
    db: AsyncSession,
    challenge_id: uuid.UUID,
    max_uses: int | None = None,
    expires_at: datetime | None = None,
) -> InviteToken:
    invite = InviteToken(
        token=generate_challenge_invite_token(),
        challenge_id=challenge_id,
        max_uses=max_uses,
        use_count=0,
        expires_at=expires_at,
        created_at=utcnow(),
    )
    db.add(invite)
    await db.flush()
    logger.info("invite_created", challenge_id=str(challenge_id), max_uses=max_uses)
    return invite


async def list_invites(db: AsyncSession, challenge_id: uuid.UUID) -> list[InviteToken]:
    result = await db.execute(
        select(InviteToken)
        .where(InviteToken.challenge_id == challenge_id)
        .order_by(InviteToken.created_at.desc())
    )
    return list(result.scalars().all())


async def revoke_invite(db: AsyncSession, token: str) -> None:
    result = await db.execute(
        delete(InviteToken)
        .where(InviteToken.token == token)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise InviteNotFound(token)
    logger.info("invite_revoked", token=token)


async def redeem_invite(db: AsyncSession, challenge_id: uuid.UUID, token: str) -> InviteToken:
    """Validate an invite for a challenge and count one use against it.

    Tokens issued for a different challenge are reported as not found.
    """
    invite = await db.get(InviteToken, token, with_for_update=True)
    if invite is None or invite.challenge_id != challenge_id:
        raise InviteNotFound(token)
    if invite.expires_at is not None and as_utc(invite.expires_at) <= utcnow():
        raise InviteExpired(details={"token": token})
    if invite.max_uses is not None and invite.use_count >= invite.max_uses:
        raise InviteExhausted(details={"token": token})
    invite.use_count = invite.use_count + 1
    return invite

"""FastAPI authentication dependencies.

Participants authenticate with ``Authorization: Bearer <device token>``;
administrators with ``Authorization: Bearer <admin token>``.
"""

from __future__ import annotations

import secrets

from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hamchallenges.auth.tokens import is_valid_device_token_format
from hamchallenges.config import Settings, get_settings
from hamchallenges.database import get_session
from hamchallenges.db.models import Participant
from hamchallenges.errors import InvalidToken
from hamchallenges.time_utils import utcnow

_bearer = HTTPBearer(auto_error=False)


async def _authenticate(db: AsyncSession, token: str) -> Participant | None:
    """Look up a device token, bumping last_seen_at on success."""
    if not is_valid_device_token_format(token):
        return None
    result = await db.execute(select(Participant).where(Participant.device_token == token))
    participant = result.scalar_one_or_none()
    if participant is not None:
        participant.last_seen_at = utcnow()
        await db.commit()
    return participant


async def get_current_participant(
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer),
    db: AsyncSession = Depends(get_session),
) -> Participant:
    """Return the participant owning the bearer device token, or raise 401."""
    if credentials is None:
        raise InvalidToken()
    participant = await _authenticate(db, credentials.credentials)
    if participant is None:
        raise InvalidToken()
    return participant


async def get_optional_participant(
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer),
    db: AsyncSession = Depends(get_session),
) -> Participant | None:
    """Same as get_current_participant, but anonymous and unknown tokens yield None."""
    if credentials is None:
        return None
    return await _authenticate(db, credentials.credentials)


async def require_admin(
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer),
    settings: Settings = Depends(get_settings),
) -> None:
    """Reject the request unless it carries the configured admin token."""
    admin_token = settings.admin_token
    if credentials is None or not admin_token:
        raise InvalidToken()
    if not secrets.compare_digest(credentials.credentials.encode(), admin_token.encode()):
        raise InvalidToken()

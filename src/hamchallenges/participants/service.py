"""Participants, device tokens and challenge membership."""

from __future__ import annotations

import uuid
from typing import Any

import structlog
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hamchallenges.auth.tokens import generate_device_token
from hamchallenges.callsigns import normalize_callsign
from hamchallenges.db.models import Challenge, ChallengeParticipant, Participant, Progress, User
from hamchallenges.errors import (
    AlreadyJoined,
    ChallengeEnded,
    InviteRequired,
    MaxParticipants,
    NotParticipating,
)
from hamchallenges.invites.service import redeem_invite
from hamchallenges.progress.service import delete_progress
from hamchallenges.time_utils import utcnow

logger = structlog.get_logger()

STATUS_ACTIVE = "active"
STATUS_LEFT = "left"


def _invite_setting(challenge: Challenge, key: str) -> Any:  # noqa: ANN401
    config = challenge.invite_config
    return config.get(key) if isinstance(config, dict) else None


def _max_participants(challenge: Challenge) -> int | None:
    value = _invite_setting(challenge, "maxParticipants")
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


async def get_or_create_participant(
    db: AsyncSession,
    callsign: str,
    device_name: str | None = None,
) -> tuple[Participant, bool]:
    """Return the participant for a callsign, issuing a device token on first sight."""
    callsign = normalize_callsign(callsign)
    result = await db.execute(select(Participant).where(Participant.callsign == callsign))
    participant = result.scalar_one_or_none()
    if participant is not None:
        return participant, False

    now = utcnow()
    participant = Participant(
        id=uuid.uuid4(),
        callsign=callsign,
        device_token=generate_device_token(),
        device_name=device_name,
        created_at=now,
        last_seen_at=now,
    )
    db.add(participant)
    await db.flush()
    logger.info("participant_created", callsign=callsign)
    return participant, True


async def get_participation(
    db: AsyncSession, challenge_id: uuid.UUID, callsign: str
) -> ChallengeParticipant | None:
    result = await db.execute(
        select(ChallengeParticipant).where(
            ChallengeParticipant.challenge_id == challenge_id,
            ChallengeParticipant.callsign == normalize_callsign(callsign),
        )
    )
    return result.scalar_one_or_none()


async def require_active_participation(
    db: AsyncSession, challenge_id: uuid.UUID, callsign: str
) -> ChallengeParticipant:
    """Fetch the caller's participation or raise NotParticipating."""
    participation = await get_participation(db, challenge_id, callsign)
    if participation is None or participation.status != STATUS_ACTIVE:
        raise NotParticipating()
    return participation


async def count_active_participants(db: AsyncSession, challenge_id: uuid.UUID) -> int:
    result = await db.execute(
        select(func.count())
        .select_from(ChallengeParticipant)
        .where(
            ChallengeParticipant.challenge_id == challenge_id,
            ChallengeParticipant.status == STATUS_ACTIVE,
        )
    )
    return result.scalar_one()


async def join_challenge(
    db: AsyncSession,
    challenge: Challenge,
    callsign: str,
    device_name: str | None = None,
    invite_token: str | None = None,
) -> tuple[Participant, ChallengeParticipant]:
    """Join a challenge, enforcing invite gating and the participant cap.

    A participant who previously left is reactivated rather than duplicated.
    """
    if not challenge.is_active:
        raise ChallengeEnded()
    if _invite_setting(challenge, "requiresToken") is True and not invite_token:
        raise InviteRequired()
    if invite_token:
        await redeem_invite(db, challenge.id, invite_token)

    callsign = normalize_callsign(callsign)
    participation = await get_participation(db, challenge.id, callsign)
    if participation is not None and participation.status == STATUS_ACTIVE:
        raise AlreadyJoined()

    cap = _max_participants(challenge)
    if cap is not None and await count_active_participants(db, challenge.id) >= cap:
        raise MaxParticipants()

    participant, _created = await get_or_create_participant(db, callsign, device_name)

    now = utcnow()
    if participation is None:
        participation = ChallengeParticipant(
            id=uuid.uuid4(),
            challenge_id=challenge.id,
            callsign=callsign,
            invite_token=invite_token,
            joined_at=now,
            status=STATUS_ACTIVE,
        )
        db.add(participation)
    else:
        participation.status = STATUS_ACTIVE
        participation.joined_at = now
        participation.invite_token = invite_token
    await db.flush()

    logger.info("challenge_joined", challenge_id=str(challenge.id), callsign=callsign)
    return participant, participation


async def leave_challenge(db: AsyncSession, challenge_id: uuid.UUID, callsign: str) -> None:
    """Drop the caller's progress and mark their participation as left."""
    participation = await require_active_participation(db, challenge_id, callsign)
    await delete_progress(db, challenge_id, callsign)
    participation.status = STATUS_LEFT
    await db.flush()
    logger.info("challenge_left", challenge_id=str(challenge_id), callsign=participation.callsign)


async def list_participations(db: AsyncSession, callsign: str) -> list[tuple[ChallengeParticipant, str]]:
    """Active participations for a callsign with their challenge names, newest first."""
    result = await db.execute(
        select(ChallengeParticipant, Challenge.name)
        .join(Challenge, Challenge.id == ChallengeParticipant.challenge_id)
        .where(
            ChallengeParticipant.callsign == normalize_callsign(callsign),
            ChallengeParticipant.status == STATUS_ACTIVE,
        )
        .order_by(ChallengeParticipant.joined_at.desc())
    )
    return [(participation, name) for participation, name in result.all()]


async def delete_account(db: AsyncSession, callsign: str) -> None:
    """Remove everything held for a callsign: device token, memberships, progress, social user."""
    callsign = normalize_callsign(callsign)
    for model in (Progress, ChallengeParticipant, Participant, User):
        await db.execute(
            delete(model)
            .where(model.callsign == callsign)
            .execution_options(synchronize_session=False)
        )
    logger.info("account_deleted", callsign=callsign)

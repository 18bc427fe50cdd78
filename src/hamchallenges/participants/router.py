"""Join/leave, participation status and account deletion."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from hamchallenges.auth.dependencies import get_current_participant
from hamchallenges.callsigns import same_callsign
from hamchallenges.challenges.service import require_challenge
from hamchallenges.database import get_session
from hamchallenges.db.models import Participant
from hamchallenges.errors import Forbidden, NotParticipating
from hamchallenges.participants import service
from hamchallenges.participants.schemas import (
    ChallengeParticipationItem,
    JoinChallengeRequest,
    JoinChallengeResponse,
    ParticipationResponse,
)
from hamchallenges.scoring import historical_qsos_allowed

router = APIRouter(prefix="/v1", tags=["Participants"])


@router.post("/challenges/{challenge_id}/join", response_model=JoinChallengeResponse, status_code=201)
async def join_challenge(
    challenge_id: uuid.UUID,
    body: JoinChallengeRequest,
    db: AsyncSession = Depends(get_session),
) -> JoinChallengeResponse:
    """Join a challenge and receive the device token used for later calls."""
    challenge = await require_challenge(db, challenge_id)
    participant, participation = await service.join_challenge(
        db, challenge, body.callsign, body.device_name, body.invite_token
    )
    await db.commit()
    return JoinChallengeResponse(
        participation_id=participation.id,
        device_token=participant.device_token,
        joined_at=participation.joined_at,
        status=participation.status,
        historical_allowed=historical_qsos_allowed(challenge.configuration),
    )


@router.delete("/challenges/{challenge_id}/leave", status_code=204)
async def leave_challenge(
    challenge_id: uuid.UUID,
    participant: Participant = Depends(get_current_participant),
    db: AsyncSession = Depends(get_session),
) -> Response:
    await service.leave_challenge(db, challenge_id, participant.callsign)
    await db.commit()
    return Response(status_code=204)


@router.get("/challenges/{challenge_id}/participants/{callsign}", response_model=ParticipationResponse)
async def get_participation_status(
    challenge_id: uuid.UUID,
    callsign: str,
    participant: Participant = Depends(get_current_participant),
    db: AsyncSession = Depends(get_session),
) -> ParticipationResponse:
    """Participation status for the caller's own callsign."""
    if not same_callsign(participant.callsign, callsign):
        raise Forbidden()
    participation = await service.get_participation(db, challenge_id, callsign)
    if participation is None:
        raise NotParticipating()
    return ParticipationResponse(
        participation_id=participation.id,
        challenge_id=participation.challenge_id,
        joined_at=participation.joined_at,
        status=participation.status,
    )


@router.get("/participants/{callsign}/challenges", response_model=list[ChallengeParticipationItem])
async def list_participations(
    callsign: str,
    participant: Participant = Depends(get_current_participant),
    db: AsyncSession = Depends(get_session),
) -> list[ChallengeParticipationItem]:
    if not same_callsign(participant.callsign, callsign):
        raise Forbidden()
    rows = await service.list_participations(db, callsign)
    return [
        ChallengeParticipationItem(
            participation_id=p.id,
            challenge_id=p.challenge_id,
            challenge_name=name,
            joined_at=p.joined_at,
            status=p.status,
        )
        for p, name in rows
    ]


@router.delete("/account", status_code=204)
async def delete_account(
    participant: Participant = Depends(get_current_participant),
    db: AsyncSession = Depends(get_session),
) -> Response:
    """Delete the caller's account and everything attached to the callsign."""
    await service.delete_account(db, participant.callsign)
    await db.commit()
    return Response(status_code=204)

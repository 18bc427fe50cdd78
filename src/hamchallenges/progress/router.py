"""Progress reporting endpoints."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hamchallenges.auth.dependencies import get_current_participant
from hamchallenges.challenges.service import require_challenge
from hamchallenges.database import get_session
from hamchallenges.db.models import Participant
from hamchallenges.errors import NotParticipating
from hamchallenges.participants.service import require_active_participation
from hamchallenges.progress import service
from hamchallenges.progress.schemas import ProgressResponse, ReportProgressRequest, ReportProgressResponse
from hamchallenges.scoring import calculate_percentage, interpret

router = APIRouter(prefix="/v1", tags=["Progress"])


@router.post("/challenges/{challenge_id}/progress", response_model=ReportProgressResponse)
async def report_progress(
    challenge_id: uuid.UUID,
    body: ReportProgressRequest,
    participant: Participant = Depends(get_current_participant),
    db: AsyncSession = Depends(get_session),
) -> ReportProgressResponse:
    """Score a progress report, store it and return the caller's standing."""
    challenge = await require_challenge(db, challenge_id)
    await require_active_participation(db, challenge_id, participant.callsign)

    progress, result = await service.record_progress(
        db,
        challenge,
        participant.callsign,
        body.completed_goals,
        body.current_value,
        body.last_qso_date,
    )
    await db.commit()
    rank = await service.get_rank(db, challenge_id, progress.callsign)

    return ReportProgressResponse(
        accepted=True,
        server_progress=ProgressResponse(
            completed_goals=body.completed_goals,
            current_value=body.current_value,
            percentage=result.percentage,
            score=result.score,
            rank=rank or 0,
            current_tier=result.tier,
        ),
        new_badges=[],
    )


@router.get("/challenges/{challenge_id}/progress", response_model=ProgressResponse)
async def get_progress(
    challenge_id: uuid.UUID,
    participant: Participant = Depends(get_current_participant),
    db: AsyncSession = Depends(get_session),
) -> ProgressResponse:
    """The caller's stored progress with a freshly computed rank and percentage."""
    challenge = await require_challenge(db, challenge_id)
    progress = await service.get_progress(db, challenge_id, participant.callsign)
    if progress is None:
        raise NotParticipating()

    rank = await service.get_rank(db, challenge_id, participant.callsign)
    goals = progress.completed_goals if isinstance(progress.completed_goals, list) else []
    percentage = calculate_percentage(interpret(challenge.configuration), goals, progress.current_value)

    return ProgressResponse(
        completed_goals=goals,
        current_value=progress.current_value,
        percentage=percentage,
        score=progress.score,
        rank=rank or 0,
        current_tier=progress.current_tier,
    )

"""Challenge endpoints: public catalogue and admin CRUD."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from hamchallenges.auth.dependencies import require_admin
from hamchallenges.challenges import service
from hamchallenges.challenges.schemas import (
    ChallengeListItem,
    ChallengeListResponse,
    ChallengeRequest,
    ChallengeResponse,
)
from hamchallenges.database import get_session
from hamchallenges.time_utils import as_utc

router = APIRouter(prefix="/v1", tags=["Challenges"])
admin_router = APIRouter(prefix="/v1/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


@router.get("/challenges", response_model=ChallengeListResponse)
async def list_challenges(
    category: str | None = Query(None),
    challenge_type: str | None = Query(None, alias="type"),
    active: bool | None = Query(None),
    limit: int = Query(service.DEFAULT_LIST_LIMIT, ge=1),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_session),
) -> ChallengeListResponse:
    """List challenges, newest first, with active participant counts."""
    limit = min(limit, service.MAX_LIST_LIMIT)
    items, total = await service.list_challenges(db, category, challenge_type, active, limit, offset)
    return ChallengeListResponse(
        challenges=[
            ChallengeListItem(
                id=c.id,
                name=c.name,
                description=c.description,
                category=c.category,
                challenge_type=c.challenge_type,
                participant_count=count,
                is_active=c.is_active,
            )
            for c, count in items
        ],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/challenges/{challenge_id}", response_model=ChallengeResponse)
async def get_challenge(
    challenge_id: uuid.UUID,
    response: Response,
    db: AsyncSession = Depends(get_session),
) -> ChallengeResponse:
    """Get one challenge; X-Challenge-Version and ETag let clients detect edits."""
    challenge = await service.require_challenge(db, challenge_id)
    updated_epoch = int(as_utc(challenge.updated_at).timestamp())
    response.headers["X-Challenge-Version"] = str(challenge.version)
    response.headers["ETag"] = f'"{challenge.version}:{updated_epoch}"'
    return ChallengeResponse.model_validate(challenge)


# ── Admin ──


@admin_router.post("/challenges", response_model=ChallengeResponse, status_code=201)
async def create_challenge(
    body: ChallengeRequest,
    db: AsyncSession = Depends(get_session),
) -> ChallengeResponse:
    challenge = await service.create_challenge(db, body)
    await db.commit()
    return ChallengeResponse.model_validate(challenge)


@admin_router.put("/challenges/{challenge_id}", response_model=ChallengeResponse)
async def update_challenge(
    challenge_id: uuid.UUID,
    body: ChallengeRequest,
    db: AsyncSession = Depends(get_session),
) -> ChallengeResponse:
    challenge = await service.update_challenge(db, challenge_id, body)
    await db.commit()
    return ChallengeResponse.model_validate(challenge)


@admin_router.delete("/challenges/{challenge_id}", status_code=204)
async def delete_challenge(
    challenge_id: uuid.UUID,
    db: AsyncSession = Depends(get_session),
) -> Response:
    await service.delete_challenge(db, challenge_id)
    await db.commit()
    return Response(status_code=204)

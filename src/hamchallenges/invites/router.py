"""Admin endpoints for challenge invite tokens."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from hamchallenges.auth.dependencies import require_admin
from hamchallenges.challenges.service import require_challenge
from hamchallenges.config import Settings, get_settings
from hamchallenges.database import get_session
from hamchallenges.db.models import InviteToken
from hamchallenges.invites import service
from hamchallenges.invites.schemas import CreateInviteRequest, InviteListResponse, InviteResponse

router = APIRouter(prefix="/v1/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


def _to_response(invite: InviteToken, base_url: str) -> InviteResponse:
    return InviteResponse(
        token=invite.token,
        url=service.invite_url(base_url, invite.token),
        challenge_id=invite.challenge_id,
        max_uses=invite.max_uses,
        use_count=invite.use_count,
        expires_at=invite.expires_at,
        created_at=invite.created_at,
    )


@router.post("/challenges/{challenge_id}/invites", response_model=InviteResponse, status_code=201)
async def create_invite(
    challenge_id: uuid.UUID,
    body: CreateInviteRequest,
    db: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> InviteResponse:
    await require_challenge(db, challenge_id)
    invite = await service.create_invite(db, challenge_id, body.max_uses, body.expires_at)
    await db.commit()
    return _to_response(invite, settings.base_url)


@router.get("/challenges/{challenge_id}/invites", response_model=InviteListResponse)
async def list_invites(
    challenge_id: uuid.UUID,
    db: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> InviteListResponse:
    await require_challenge(db, challenge_id)
    invites = await service.list_invites(db, challenge_id)
    return InviteListResponse(invites=[_to_response(i, settings.base_url) for i in invites])


@router.delete("/invites/{token}", status_code=204)
async def revoke_invite(
    token: str,
    db: AsyncSession = Depends(get_session),
) -> Response:
    await service.revoke_invite(db, token)
    await db.commit()
    return Response(status_code=204)

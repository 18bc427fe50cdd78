"""Badge endpoints: admin upload/list/delete and the public image route."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from hamchallenges.auth.dependencies import require_admin
from hamchallenges.badges import service
from hamchallenges.badges.schemas import BadgeListResponse, BadgeResponse
from hamchallenges.challenges.service import require_challenge
from hamchallenges.config import Settings, get_settings
from hamchallenges.database import get_session
from hamchallenges.db.models import Badge
from hamchallenges.errors import ValidationFailed

router = APIRouter(prefix="/v1", tags=["Badges"])
admin_router = APIRouter(prefix="/v1/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


def _to_response(badge: Badge, base_url: str) -> BadgeResponse:
    return BadgeResponse(
        id=badge.id,
        name=badge.name,
        tier_id=badge.tier_id,
        image_url=service.badge_image_url(base_url, badge.id),
        content_type=badge.content_type,
        created_at=badge.created_at,
    )


@admin_router.post("/challenges/{challenge_id}/badges", response_model=BadgeResponse, status_code=201)
async def upload_badge(
    challenge_id: uuid.UUID,
    name: str | None = Form(None),
    tier_id: str | None = Form(None, alias="tierId"),
    image: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> BadgeResponse:
    """Upload a badge image (PNG, JPEG or SVG, at most 1 MiB) for a challenge."""
    await require_challenge(db, challenge_id)

    content_type = image_data = None
    if image is not None:
        image_data = await image.read()
        content_type = service.validate_image(image.content_type, image_data)
    if name is None:
        raise ValidationFailed("Missing required field: name")
    if image_data is None:
        raise ValidationFailed("Missing required field: image")

    badge = await service.create_badge(db, challenge_id, name, tier_id, image_data, content_type)
    await db.commit()
    return _to_response(badge, settings.base_url)


@admin_router.get("/challenges/{challenge_id}/badges", response_model=BadgeListResponse)
async def list_badges(
    challenge_id: uuid.UUID,
    db: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> BadgeListResponse:
    await require_challenge(db, challenge_id)
    badges = await service.list_badges(db, challenge_id)
    return BadgeListResponse(badges=[_to_response(b, settings.base_url) for b in badges])


@admin_router.delete("/badges/{badge_id}", status_code=204)
async def delete_badge(
    badge_id: uuid.UUID,
    db: AsyncSession = Depends(get_session),
) -> Response:
    await service.delete_badge(db, badge_id)
    await db.commit()
    return Response(status_code=204)


@router.get("/badges/{badge_id}/image")
async def get_badge_image(
    badge_id: uuid.UUID,
    db: AsyncSession = Depends(get_session),
) -> Response:
    """Serve a badge's stored image bytes."""
    badge = await service.get_badge(db, badge_id)
    return Response(
        content=badge.image_data,
        media_type=badge.content_type,
        headers={"Cache-Control": service.IMAGE_CACHE_CONTROL},
    )

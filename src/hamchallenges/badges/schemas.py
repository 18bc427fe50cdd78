"""Response models for challenge badges."""

from __future__ import annotations

import uuid

from hamchallenges.schemas import CamelModel, UtcDateTime


class BadgeResponse(CamelModel):
    id: uuid.UUID
    name: str
    tier_id: str | None = None
    image_url: str
    content_type: str
    created_at: UtcDateTime


class BadgeListResponse(CamelModel):
    badges: list[BadgeResponse]

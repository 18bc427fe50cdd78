"""Request/response models for challenge invite tokens."""

from __future__ import annotations

import uuid

from pydantic import Field

from hamchallenges.schemas import CamelModel, UtcDateTime


class CreateInviteRequest(CamelModel):
    max_uses: int | None = Field(default=None, ge=1)
    expires_at: UtcDateTime | None = None


class InviteResponse(CamelModel):
    token: str
    url: str
    challenge_id: uuid.UUID
    max_uses: int | None = None
    use_count: int
    expires_at: UtcDateTime | None = None
    created_at: UtcDateTime


class InviteListResponse(CamelModel):
    invites: list[InviteResponse]

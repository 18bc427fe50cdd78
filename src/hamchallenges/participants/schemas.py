"""Request/response models for joining, leaving and participation status."""

from __future__ import annotations

import uuid

from pydantic import Field

from hamchallenges.schemas import CamelModel, UtcDateTime


class JoinChallengeRequest(CamelModel):
    callsign: str = Field(min_length=1, max_length=20)
    device_name: str | None = Field(default=None, max_length=100)
    invite_token: str | None = None


class JoinChallengeResponse(CamelModel):
    participation_id: uuid.UUID
    device_token: str
    joined_at: UtcDateTime
    status: str
    historical_allowed: bool


class ParticipationResponse(CamelModel):
    participation_id: uuid.UUID
    challenge_id: uuid.UUID
    joined_at: UtcDateTime
    status: str


class ChallengeParticipationItem(CamelModel):
    participation_id: uuid.UUID
    challenge_id: uuid.UUID
    challenge_name: str
    joined_at: UtcDateTime
    status: str

"""Request/response models for challenge endpoints."""

from __future__ import annotations

import uuid
from typing import Any

from pydantic import Field

from hamchallenges.schemas import CamelModel, UtcDateTime


class ChallengeRequest(CamelModel):
    """Body for creating or fully replacing a challenge."""

    name: str = Field(min_length=1, max_length=200)
    description: str = ""
    author: str | None = Field(default=None, max_length=100)
    category: str = Field(min_length=1, max_length=50)
    challenge_type: str = Field(alias="type", min_length=1, max_length=50)
    configuration: dict[str, Any] = Field(default_factory=dict)
    invite_config: dict[str, Any] | None = None
    hamalert_config: dict[str, Any] | None = None
    is_active: bool = True


class ChallengeResponse(CamelModel):
    id: uuid.UUID
    version: int
    name: str
    description: str
    author: str | None = None
    category: str
    challenge_type: str = Field(alias="type")
    configuration: dict[str, Any]
    invite_config: dict[str, Any] | None = None
    hamalert_config: dict[str, Any] | None = None
    is_active: bool
    created_at: UtcDateTime
    updated_at: UtcDateTime


class ChallengeListItem(CamelModel):
    id: uuid.UUID
    name: str
    description: str
    category: str
    challenge_type: str = Field(alias="type")
    participant_count: int
    is_active: bool


class ChallengeListResponse(CamelModel):
    challenges: list[ChallengeListItem]
    total: int
    limit: int
    offset: int

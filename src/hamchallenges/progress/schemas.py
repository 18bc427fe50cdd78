"""Request/response models for progress reporting."""

from __future__ import annotations

import uuid

from pydantic import Field

from hamchallenges.schemas import CamelModel, UtcDateTime


class ReportProgressRequest(CamelModel):
    completed_goals: list[str]
    current_value: int
    qualifying_qso_count: int
    last_qso_date: UtcDateTime | None = None


class ProgressResponse(CamelModel):
    completed_goals: list[str]
    current_value: int
    percentage: float
    score: int
    rank: int
    current_tier: str | None = None


class ReportProgressResponse(CamelModel):
    accepted: bool = True
    server_progress: ProgressResponse
    new_badges: list[uuid.UUID] = Field(default_factory=list)

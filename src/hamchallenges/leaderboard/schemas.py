"""Response models for leaderboards."""

from __future__ import annotations

from hamchallenges.schemas import CamelModel, UtcDateTime


class LeaderboardEntry(CamelModel):
    rank: int
    callsign: str
    score: int
    current_tier: str | None = None
    completed_at: UtcDateTime | None = None


class LeaderboardResponse(CamelModel):
    leaderboard: list[LeaderboardEntry]
    total: int
    user_position: LeaderboardEntry | None = None
    last_updated: UtcDateTime

"""Progress scoring: configuration interpreter, score calculator, tier resolver."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from hamchallenges.scoring.calculator import calculate_percentage, calculate_score, score
from hamchallenges.scoring.policy import ScoringPolicy, Tier, historical_qsos_allowed, interpret
from hamchallenges.scoring.tiers import resolve_tier

__all__ = [
    "ScoreResult",
    "ScoringPolicy",
    "Tier",
    "calculate_percentage",
    "calculate_score",
    "evaluate",
    "historical_qsos_allowed",
    "interpret",
    "resolve_tier",
    "score",
]


@dataclass(frozen=True)
class ScoreResult:
    score: int
    percentage: float
    tier: str | None


def evaluate(configuration: Any, completed_goals: Sequence[str], current_value: int) -> ScoreResult:  # noqa: ANN401
    """Interpret a configuration and score a progress report against it."""
    policy = interpret(configuration)
    points, percentage = score(policy, completed_goals, current_value)
    return ScoreResult(score=points, percentage=percentage, tier=resolve_tier(policy, points))

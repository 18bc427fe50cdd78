"""Score and percentage computation.

Score and percentage read different parts of the policy: score follows
``scoring.method``, percentage follows ``goals.type``. A ``points`` challenge
with ``collection`` goals therefore reports a points score next to a
goal-count percentage.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from hamchallenges.scoring.policy import ScoringPolicy


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def calculate_score(policy: ScoringPolicy, completed_goals: Sequence[str], current_value: int) -> int:
    """Compute the integer score for a progress report.

    Duplicate goal ids are counted as reported.
    """
    completed = len(completed_goals)

    if policy.method == "percentage":
        if policy.total_goals <= 0:
            return 0
        return _round_half_up(100 * completed / policy.total_goals)
    if policy.method == "points":
        return current_value
    # "count" and any unrecognised method
    return completed


def calculate_percentage(policy: ScoringPolicy, completed_goals: Sequence[str], current_value: int) -> float:
    """Compute percentage complete from the goal type."""
    if policy.goal_type == "collection":
        if policy.total_goals <= 0:
            return 0.0
        return 100.0 * len(completed_goals) / policy.total_goals
    if policy.goal_type == "cumulative":
        if policy.target_value <= 0:
            return 0.0
        return 100.0 * current_value / policy.target_value
    return 0.0


def score(policy: ScoringPolicy, completed_goals: Sequence[str], current_value: int) -> tuple[int, float]:
    """Return ``(score, percentage)`` for a progress report."""
    return (
        calculate_score(policy, completed_goals, current_value),
        calculate_percentage(policy, completed_goals, current_value),
    )

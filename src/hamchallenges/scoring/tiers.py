"""Tier resolution."""

from __future__ import annotations

from hamchallenges.scoring.policy import ScoringPolicy


def resolve_tier(policy: ScoringPolicy, score: int) -> str | None:
    """Return the id of the last tier, in configured order, whose threshold <= score.

    Tiers are NOT sorted: a configuration listing gold(100) before
    bronze(0) resolves a score of 150 to bronze. Authors list tiers in
    ascending threshold order to get "highest qualifying tier". A last
    qualifying entry that carries no id resolves to None.
    """
    current: str | None = None
    for tier in policy.tiers:
        if score >= tier.threshold:
            current = tier.id
    return current

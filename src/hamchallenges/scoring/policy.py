"""Challenge configuration interpreter.

A challenge's ``configuration`` is a free-form, admin-authored JSON
document. interpret() turns it into a ScoringPolicy and never raises:
every missing or malformed field degrades to a default.

Defaults:
    scoring.method     -> "count"
    goals.type         -> "collection"
    goals.items        -> total goals = 0
    goals.targetValue  -> 100
    tiers              -> no tiers; one entry without an integer
                          threshold voids the whole list
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

DEFAULT_METHOD = "count"
DEFAULT_GOAL_TYPE = "collection"
DEFAULT_TARGET_VALUE = 100


@dataclass(frozen=True)
class Tier:
    """One tier entry. ``id`` is None when the entry has no string id."""

    threshold: int
    id: str | None


@dataclass(frozen=True)
class ScoringPolicy:
    """Interpreted scoring rules for one challenge.

    Recomputed from the stored configuration on every request; never
    cached or persisted. ``tiers`` keeps the order the author wrote them in.
    """

    method: str = DEFAULT_METHOD
    goal_type: str = DEFAULT_GOAL_TYPE
    total_goals: int = 0
    target_value: int = DEFAULT_TARGET_VALUE
    tiers: tuple[Tier, ...] = ()


def _as_int(value: Any) -> int | None:  # noqa: ANN401
    # JSON booleans are ints in Python; they are not valid thresholds/targets
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _section(configuration: Any, key: str) -> dict[str, Any]:  # noqa: ANN401
    if not isinstance(configuration, dict):
        return {}
    value = configuration.get(key)
    return value if isinstance(value, dict) else {}


def _parse_tiers(raw: Any) -> tuple[Tier, ...]:  # noqa: ANN401
    """Parse the tier list; any entry without an integer threshold voids the whole list."""
    if not isinstance(raw, list):
        return ()
    tiers = []
    for entry in raw:
        threshold = _as_int(entry.get("threshold")) if isinstance(entry, dict) else None
        if threshold is None:
            return ()
        tier_id = entry.get("id")
        tiers.append(Tier(threshold=threshold, id=tier_id if isinstance(tier_id, str) else None))
    return tuple(tiers)


def interpret(configuration: Any) -> ScoringPolicy:  # noqa: ANN401
    """Interpret a raw challenge configuration document into a ScoringPolicy."""
    scoring = _section(configuration, "scoring")
    goals = _section(configuration, "goals")

    method = scoring.get("method")
    if not isinstance(method, str):
        method = DEFAULT_METHOD

    goal_type = goals.get("type")
    if not isinstance(goal_type, str):
        goal_type = DEFAULT_GOAL_TYPE

    items = goals.get("items")
    total_goals = len(items) if isinstance(items, list) else 0

    target_value = _as_int(goals.get("targetValue"))
    if target_value is None:
        target_value = DEFAULT_TARGET_VALUE

    raw_tiers = configuration.get("tiers") if isinstance(configuration, dict) else None

    return ScoringPolicy(
        method=method,
        goal_type=goal_type,
        total_goals=total_goals,
        target_value=target_value,
        tiers=_parse_tiers(raw_tiers),
    )


def historical_qsos_allowed(configuration: Any) -> bool:  # noqa: ANN401
    """Whether QSOs logged before joining count towards the challenge (default True)."""
    if not isinstance(configuration, dict):
        return True
    value = configuration.get("historicalQsosAllowed")
    return value if isinstance(value, bool) else True

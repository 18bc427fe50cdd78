"""Integration tests for the leaderboard endpoint."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

from hamchallenges.db.models import Challenge

pytestmark = pytest.mark.asyncio


async def _report(client: AsyncClient, challenge: Challenge, headers: dict[str, str], goals: int) -> None:
    resp = await client.post(
        f"/v1/challenges/{challenge.id}/progress",
        json={
            "completedGoals": [f"G{i}" for i in range(1, goals + 1)],
            "currentValue": 0,
            "qualifyingQsoCount": goals,
        },
        headers=headers,
    )
    assert resp.status_code == 200, resp.text


async def _seed(client: AsyncClient, challenge: Challenge, join, goals_by_call: list[tuple[str, int]]) -> None:
    for callsign, goals in goals_by_call:
        headers = await join(str(challenge.id), callsign)
        await _report(client, challenge, headers, goals)


class TestLeaderboardAPI:
    async def test_empty_leaderboard(self, client: AsyncClient, challenge: Challenge):
        resp = await client.get(f"/v1/challenges/{challenge.id}/leaderboard")
        assert resp.status_code == 200
        data = resp.json()
        assert data["leaderboard"] == []
        assert data["total"] == 0
        assert data["userPosition"] is None
        assert data["lastUpdated"]

    async def test_ties_share_rank(self, client: AsyncClient, challenge: Challenge, join):
        await _seed(client, challenge, join, [("K1AAA", 5), ("K2BBB", 5), ("K3CCC", 1)])

        data = (await client.get(f"/v1/challenges/{challenge.id}/leaderboard")).json()
        assert data["total"] == 3
        assert [(e["rank"], e["callsign"], e["score"]) for e in data["leaderboard"]] == [
            (1, "K1AAA", 100),
            (1, "K2BBB", 100),
            (3, "K3CCC", 20),
        ]
        assert data["leaderboard"][0]["currentTier"] == "gold"
        assert data["leaderboard"][0]["completedAt"] is not None

    async def test_pagination(self, client: AsyncClient, challenge: Challenge, join):
        await _seed(client, challenge, join, [("K1AAA", 5), ("K2BBB", 4), ("K3CCC", 3), ("K4DDD", 2)])

        data = (await client.get(f"/v1/challenges/{challenge.id}/leaderboard?limit=2&offset=1")).json()
        assert data["total"] == 4
        assert [e["callsign"] for e in data["leaderboard"]] == ["K2BBB", "K3CCC"]
        assert [e["rank"] for e in data["leaderboard"]] == [2, 3]

    async def test_around_sets_user_position(self, client: AsyncClient, challenge: Challenge, join):
        await _seed(client, challenge, join, [("K1AAA", 5), ("K2BBB", 3)])

        data = (await client.get(f"/v1/challenges/{challenge.id}/leaderboard?around=k2bbb")).json()
        assert [e["callsign"] for e in data["leaderboard"]] == ["K1AAA", "K2BBB"]
        assert data["userPosition"]["callsign"] == "K2BBB"
        assert data["userPosition"]["rank"] == 2
        assert data["total"] == 2

    async def test_around_unknown_callsign(self, client: AsyncClient, challenge: Challenge, join):
        await _seed(client, challenge, join, [("K1AAA", 5)])

        data = (await client.get(f"/v1/challenges/{challenge.id}/leaderboard?around=N0NE")).json()
        assert data["leaderboard"] == []
        assert data["userPosition"] is None
        assert data["total"] == 1

    async def test_leaving_removes_entry(self, client: AsyncClient, challenge: Challenge, join):
        headers = await join(str(challenge.id), "K1AAA")
        await _report(client, challenge, headers, 2)
        await client.delete(f"/v1/challenges/{challenge.id}/leave", headers=headers)

        data = (await client.get(f"/v1/challenges/{challenge.id}/leaderboard")).json()
        assert data["leaderboard"] == []

    async def test_unknown_challenge(self, client: AsyncClient):
        resp = await client.get("/v1/challenges/00000000-0000-0000-0000-000000000000/leaderboard")
        assert resp.status_code == 404
        assert resp.json()["code"] == "CHALLENGE_NOT_FOUND"

    async def test_invalid_limit(self, client: AsyncClient, challenge: Challenge):
        resp = await client.get(f"/v1/challenges/{challenge.id}/leaderboard?limit=0")
        assert resp.status_code == 422

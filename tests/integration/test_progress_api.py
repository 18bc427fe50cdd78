"""Integration tests for progress reporting endpoints."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

from hamchallenges.db.models import Challenge

pytestmark = pytest.mark.asyncio


def _report(goals: list[str], value: int = 0) -> dict:
    return {"completedGoals": goals, "currentValue": value, "qualifyingQsoCount": len(goals)}


class TestReportProgress:
    async def test_report_scores_and_ranks(self, client: AsyncClient, challenge: Challenge, join):
        headers = await join(str(challenge.id), "k1abc")

        resp = await client.post(
            f"/v1/challenges/{challenge.id}/progress", json=_report(["G1", "G2", "G3"]), headers=headers
        )
        assert resp.status_code == 200, resp.text
        data = resp.json()
        assert data["accepted"] is True
        assert data["newBadges"] == []
        server = data["serverProgress"]
        assert server["completedGoals"] == ["G1", "G2", "G3"]
        assert server["score"] == 60
        assert server["percentage"] == 60.0
        assert server["currentTier"] == "silver"
        assert server["rank"] == 1

    async def test_rank_reflects_other_participants(self, client: AsyncClient, challenge: Challenge, join):
        leader = await join(str(challenge.id), "W1AAA")
        runner_up = await join(str(challenge.id), "W2BBB")
        await client.post(
            f"/v1/challenges/{challenge.id}/progress", json=_report(["G1", "G2", "G3", "G4", "G5"]), headers=leader
        )

        resp = await client.post(
            f"/v1/challenges/{challenge.id}/progress", json=_report(["G1"]), headers=runner_up
        )
        server = resp.json()["serverProgress"]
        assert server["score"] == 20
        assert server["currentTier"] == "bronze"
        assert server["rank"] == 2

    async def test_requires_device_token(self, client: AsyncClient, challenge: Challenge):
        resp = await client.post(f"/v1/challenges/{challenge.id}/progress", json=_report(["G1"]))
        assert resp.status_code == 401
        assert resp.json()["code"] == "INVALID_TOKEN"

    async def test_unknown_device_token(self, client: AsyncClient, challenge: Challenge):
        resp = await client.post(
            f"/v1/challenges/{challenge.id}/progress",
            json=_report(["G1"]),
            headers={"Authorization": "Bearer fd_" + "0" * 32},
        )
        assert resp.status_code == 401

    async def test_not_joined_is_forbidden(self, client: AsyncClient, challenge: Challenge, make_challenge, join):
        other = await make_challenge(name="Other")
        headers = await join(other["id"], "K1ABC")

        resp = await client.post(f"/v1/challenges/{challenge.id}/progress", json=_report(["G1"]), headers=headers)
        assert resp.status_code == 403
        assert resp.json()["code"] == "NOT_PARTICIPATING"

    async def test_unknown_challenge(self, client: AsyncClient, challenge: Challenge, join):
        headers = await join(str(challenge.id), "K1ABC")
        resp = await client.post(
            "/v1/challenges/00000000-0000-0000-0000-000000000000/progress",
            json=_report(["G1"]),
            headers=headers,
        )
        assert resp.status_code == 404
        assert resp.json()["code"] == "CHALLENGE_NOT_FOUND"

    async def test_missing_fields_rejected(self, client: AsyncClient, challenge: Challenge, join):
        headers = await join(str(challenge.id), "K1ABC")
        resp = await client.post(
            f"/v1/challenges/{challenge.id}/progress", json={"completedGoals": ["G1"]}, headers=headers
        )
        assert resp.status_code == 422
        assert resp.json()["code"] == "VALIDATION_ERROR"


class TestGetProgress:
    async def test_returns_stored_progress(self, client: AsyncClient, challenge: Challenge, join):
        headers = await join(str(challenge.id), "K1ABC")
        await client.post(
            f"/v1/challenges/{challenge.id}/progress", json=_report(["G1", "G2"], 7), headers=headers
        )

        resp = await client.get(f"/v1/challenges/{challenge.id}/progress", headers=headers)
        assert resp.status_code == 200
        data = resp.json()
        assert data["completedGoals"] == ["G1", "G2"]
        assert data["currentValue"] == 7
        assert data["score"] == 40
        assert data["percentage"] == 40.0
        assert data["rank"] == 1
        assert data["currentTier"] == "bronze"

    async def test_latest_report_wins(self, client: AsyncClient, challenge: Challenge, join):
        headers = await join(str(challenge.id), "K1ABC")
        url = f"/v1/challenges/{challenge.id}/progress"
        await client.post(url, json=_report(["G1", "G2", "G3", "G4"]), headers=headers)
        await client.post(url, json=_report(["G5"]), headers=headers)

        data = (await client.get(url, headers=headers)).json()
        assert data["completedGoals"] == ["G5"]
        assert data["score"] == 20

    async def test_joined_without_report_is_forbidden(self, client: AsyncClient, challenge: Challenge, join):
        headers = await join(str(challenge.id), "K1ABC")
        resp = await client.get(f"/v1/challenges/{challenge.id}/progress", headers=headers)
        assert resp.status_code == 403
        assert resp.json()["code"] == "NOT_PARTICIPATING"

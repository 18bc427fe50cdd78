"""Integration tests for friend invites, requests, friendships and user search."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

from hamchallenges.db.models import Challenge

pytestmark = pytest.mark.asyncio


@pytest.fixture
def pair(challenge: Challenge, join):
    async def _pair() -> tuple[dict[str, str], dict[str, str]]:
        alice = await join(str(challenge.id), "K1AAA")
        bob = await join(str(challenge.id), "K2BBB")
        return alice, bob

    return _pair


async def _request_via_link(client: AsyncClient, sender: dict[str, str], owner: dict[str, str]) -> dict:
    token = (await client.get("/v1/friends/invite-link", headers=owner)).json()["token"]
    resp = await client.post("/v1/friends/requests", json={"inviteToken": token}, headers=sender)
    assert resp.status_code == 201, resp.text
    return resp.json()


async def _own_link_request(client: AsyncClient, headers: dict[str, str]):
    token = (await client.get("/v1/friends/invite-link", headers=headers)).json()["token"]
    return await client.post("/v1/friends/requests", json={"inviteToken": token}, headers=headers)


class TestInviteLink:
    async def test_invite_link(self, client: AsyncClient, challenge: Challenge, join):
        headers = await join(str(challenge.id), "K1AAA")
        resp = await client.get("/v1/friends/invite-link", headers=headers)
        assert resp.status_code == 200
        data = resp.json()
        assert data["token"].startswith("inv_")
        assert data["url"] == f"https://activities.test/invite/{data['token']}"
        assert data["expiresAt"]

    async def test_requires_auth(self, client: AsyncClient):
        assert (await client.get("/v1/friends/invite-link")).status_code == 401


class TestFriendRequests:
    async def test_request_via_invite_link(self, client: AsyncClient, pair):
        alice, bob = await pair()
        request = await _request_via_link(client, bob, alice)
        assert request["fromCallsign"] == "K2BBB"
        assert request["toCallsign"] == "K1AAA"
        assert request["status"] == "pending"

        alice_view = (await client.get("/v1/friends/requests", headers=alice)).json()
        assert [r["id"] for r in alice_view["incoming"]] == [request["id"]]
        assert alice_view["outgoing"] == []
        bob_view = (await client.get("/v1/friends/requests", headers=bob)).json()
        assert [r["id"] for r in bob_view["outgoing"]] == [request["id"]]

    async def test_invite_link_is_single_use(self, client: AsyncClient, challenge: Challenge, pair, join):
        alice, bob = await pair()
        carol = await join(str(challenge.id), "K3CCC")
        token = (await client.get("/v1/friends/invite-link", headers=alice)).json()["token"]
        await client.post("/v1/friends/requests", json={"inviteToken": token}, headers=bob)

        resp = await client.post("/v1/friends/requests", json={"inviteToken": token}, headers=carol)
        assert resp.status_code == 404
        assert resp.json()["code"] == "FRIEND_INVITE_NOT_FOUND"

    async def test_request_by_user_id(self, client: AsyncClient, pair):
        alice, bob = await pair()
        request = await _request_via_link(client, bob, alice)

        resp = await client.post("/v1/friends/requests", json={"toUserId": request["fromUserId"]}, headers=alice)
        assert resp.status_code == 409
        assert resp.json()["code"] == "FRIEND_REQUEST_EXISTS"

    async def test_exactly_one_target(self, client: AsyncClient, pair):
        alice, _ = await pair()
        resp = await client.post("/v1/friends/requests", json={}, headers=alice)
        assert resp.status_code == 400
        assert resp.json()["code"] == "VALIDATION_ERROR"

    async def test_unknown_user(self, client: AsyncClient, pair):
        alice, _ = await pair()
        resp = await client.post(
            "/v1/friends/requests",
            json={"toUserId": "00000000-0000-0000-0000-000000000000"},
            headers=alice,
        )
        assert resp.status_code == 404
        assert resp.json()["code"] == "USER_NOT_FOUND"

    async def test_cannot_friend_self(self, client: AsyncClient, pair):
        alice, _ = await pair()
        resp = await _own_link_request(client, alice)
        assert resp.status_code == 400
        assert resp.json()["code"] == "CANNOT_FRIEND_SELF"


class TestRespond:
    async def test_accept_creates_friendship_both_ways(self, client: AsyncClient, pair):
        alice, bob = await pair()
        request = await _request_via_link(client, bob, alice)

        resp = await client.post(f"/v1/friends/requests/{request['id']}/accept", headers=alice)
        assert resp.status_code == 200
        assert resp.json()["status"] == "accepted"
        assert resp.json()["respondedAt"] is not None

        alice_friends = (await client.get("/v1/friends", headers=alice)).json()
        bob_friends = (await client.get("/v1/friends", headers=bob)).json()
        assert [f["callsign"] for f in alice_friends] == ["K2BBB"]
        assert [f["callsign"] for f in bob_friends] == ["K1AAA"]

        pending = (await client.get("/v1/friends/requests", headers=alice)).json()
        assert pending["incoming"] == []

    async def test_already_friends(self, client: AsyncClient, pair):
        alice, bob = await pair()
        request = await _request_via_link(client, bob, alice)
        await client.post(f"/v1/friends/requests/{request['id']}/accept", headers=alice)

        resp = await client.post("/v1/friends/requests", json={"toUserId": request["toUserId"]}, headers=bob)
        assert resp.status_code == 409
        assert resp.json()["code"] == "ALREADY_FRIENDS"

    async def test_only_recipient_may_accept(self, client: AsyncClient, pair):
        alice, bob = await pair()
        request = await _request_via_link(client, bob, alice)

        resp = await client.post(f"/v1/friends/requests/{request['id']}/accept", headers=bob)
        assert resp.status_code == 403
        assert (await client.get("/v1/friends", headers=bob)).json() == []

    async def test_decline(self, client: AsyncClient, pair):
        alice, bob = await pair()
        request = await _request_via_link(client, bob, alice)

        resp = await client.post(f"/v1/friends/requests/{request['id']}/decline", headers=alice)
        assert resp.status_code == 200
        assert resp.json()["status"] == "declined"
        assert (await client.get("/v1/friends", headers=alice)).json() == []

        again = await client.post(f"/v1/friends/requests/{request['id']}/accept", headers=alice)
        assert again.status_code == 404
        assert again.json()["code"] == "FRIEND_REQUEST_NOT_FOUND"


class TestSuggestionsAndSearch:
    async def test_suggestions_exclude_self_friends_and_unknown(self, client: AsyncClient, challenge: Challenge, pair, join):
        alice, bob = await pair()
        carol = await join(str(challenge.id), "K3CCC")
        await client.get("/v1/friends", headers=carol)
        request = await _request_via_link(client, bob, alice)
        await client.post(f"/v1/friends/requests/{request['id']}/accept", headers=alice)

        resp = await client.post(
            "/v1/friends/suggestions",
            json={"callsigns": ["k1aaa", "K2BBB", "k3ccc", "N0NE"]},
            headers=alice,
        )
        assert resp.status_code == 200
        assert [s["callsign"] for s in resp.json()] == ["K3CCC"]

    async def test_search(self, client: AsyncClient, pair):
        alice, bob = await pair()
        await client.get("/v1/friends", headers=alice)
        await client.get("/v1/friends", headers=bob)

        found = (await client.get("/v1/users/search?q=k2b")).json()
        assert [u["callsign"] for u in found] == ["K2BBB"]

        both = (await client.get("/v1/users/search?q=BB")).json()
        assert [u["callsign"] for u in both] == ["K2BBB"]

        assert (await client.get("/v1/users/search?q=K")).json() == []
        assert (await client.get("/v1/users/search?q=%25%25")).json() == []

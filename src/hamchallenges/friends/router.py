"""Friend endpoints: invite links, requests, friend list and suggestions."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hamchallenges.auth.dependencies import get_current_participant
from hamchallenges.config import Settings, get_settings
from hamchallenges.database import get_session
from hamchallenges.db.models import FriendRequest, Participant, User
from hamchallenges.friends import service
from hamchallenges.friends.schemas import (
    CreateFriendRequestBody,
    FriendInviteResponse,
    FriendRequestResponse,
    FriendResponse,
    FriendSuggestionResponse,
    FriendSuggestionsBody,
    PendingRequestsResponse,
)
from hamchallenges.friends.service import FriendRequestView
from hamchallenges.users.service import get_or_create_user, get_user

router = APIRouter(prefix="/v1/friends", tags=["Friends"])


async def _current_user(
    participant: Participant = Depends(get_current_participant),
    db: AsyncSession = Depends(get_session),
) -> User:
    """Social user for the authenticated callsign, created on first use."""
    user = await get_or_create_user(db, participant.callsign)
    await db.commit()
    return user


def _request_response(view: FriendRequestView) -> FriendRequestResponse:
    r = view.request
    return FriendRequestResponse(
        id=r.id,
        from_user_id=r.from_user_id,
        from_callsign=view.from_callsign,
        to_user_id=r.to_user_id,
        to_callsign=view.to_callsign,
        status=r.status,
        requested_at=r.requested_at,
        responded_at=r.responded_at,
    )


async def _view(db: AsyncSession, request: FriendRequest) -> FriendRequestView:
    sender = await get_user(db, request.from_user_id)
    recipient = await get_user(db, request.to_user_id)
    return FriendRequestView(
        request=request,
        from_callsign=sender.callsign if sender else "",
        to_callsign=recipient.callsign if recipient else "",
    )


@router.get("/invite-link", response_model=FriendInviteResponse)
async def get_invite_link(
    user: User = Depends(_current_user),
    db: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> FriendInviteResponse:
    """Issue a new single-use friend invite link."""
    invite = await service.create_friend_invite(db, user, settings.invite_expiry_days)
    await db.commit()
    return FriendInviteResponse(
        token=invite.token,
        url=service.friend_invite_url(settings.invite_base_url, invite.token),
        expires_at=invite.expires_at,
    )


@router.post("/requests", response_model=FriendRequestResponse, status_code=201)
async def create_friend_request(
    body: CreateFriendRequestBody,
    user: User = Depends(_current_user),
    db: AsyncSession = Depends(get_session),
) -> FriendRequestResponse:
    view = await service.create_friend_request(db, user, body.to_user_id, body.invite_token)
    await db.commit()
    return _request_response(view)


@router.get("/requests", response_model=PendingRequestsResponse)
async def list_pending_requests(
    user: User = Depends(_current_user),
    db: AsyncSession = Depends(get_session),
) -> PendingRequestsResponse:
    incoming, outgoing = await service.list_pending_requests(db, user)
    return PendingRequestsResponse(
        incoming=[_request_response(v) for v in incoming],
        outgoing=[_request_response(v) for v in outgoing],
    )


@router.post("/requests/{request_id}/accept", response_model=FriendRequestResponse)
async def accept_friend_request(
    request_id: uuid.UUID,
    user: User = Depends(_current_user),
    db: AsyncSession = Depends(get_session),
) -> FriendRequestResponse:
    """Accept a pending request; only its recipient may do so."""
    request = await service.accept_friend_request(db, request_id, user)
    await db.commit()
    return _request_response(await _view(db, request))


@router.post("/requests/{request_id}/decline", response_model=FriendRequestResponse)
async def decline_friend_request(
    request_id: uuid.UUID,
    user: User = Depends(_current_user),
    db: AsyncSession = Depends(get_session),
) -> FriendRequestResponse:
    request = await service.decline_friend_request(db, request_id, user)
    await db.commit()
    return _request_response(await _view(db, request))


@router.get("", response_model=list[FriendResponse])
async def list_friends(
    user: User = Depends(_current_user),
    db: AsyncSession = Depends(get_session),
) -> list[FriendResponse]:
    rows = await service.list_friends(db, user)
    return [
        FriendResponse(
            friendship_id=friendship.id,
            user_id=friend.id,
            callsign=friend.callsign,
            accepted_at=friendship.created_at,
        )
        for friendship, friend in rows
    ]


@router.post("/suggestions", response_model=list[FriendSuggestionResponse])
async def suggest_friends(
    body: FriendSuggestionsBody,
    user: User = Depends(_current_user),
    db: AsyncSession = Depends(get_session),
) -> list[FriendSuggestionResponse]:
    """Which of the given callsigns (e.g. from a contact log) are registered and not yet friends."""
    users = await service.suggest_friends(db, user, body.callsigns)
    return [FriendSuggestionResponse(user_id=u.id, callsign=u.callsign) for u in users]

"""Request/response models for friend invites, requests and friendships."""

from __future__ import annotations

import uuid

from hamchallenges.schemas import CamelModel, UtcDateTime


class FriendInviteResponse(CamelModel):
    token: str
    url: str
    expires_at: UtcDateTime


class CreateFriendRequestBody(CamelModel):
    """Exactly one of ``toUserId`` / ``inviteToken``."""

    to_user_id: uuid.UUID | None = None
    invite_token: str | None = None


class FriendRequestResponse(CamelModel):
    id: uuid.UUID
    from_user_id: uuid.UUID
    from_callsign: str
    to_user_id: uuid.UUID
    to_callsign: str
    status: str
    requested_at: UtcDateTime
    responded_at: UtcDateTime | None = None


class PendingRequestsResponse(CamelModel):
    incoming: list[FriendRequestResponse]
    outgoing: list[FriendRequestResponse]


class FriendResponse(CamelModel):
    friendship_id: uuid.UUID
    user_id: uuid.UUID
    callsign: str
    accepted_at: UtcDateTime


class FriendSuggestionsBody(CamelModel):
    callsigns: list[str]


class FriendSuggestionResponse(CamelModel):
    user_id: uuid.UUID
    callsign: str

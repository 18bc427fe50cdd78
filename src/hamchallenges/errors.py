"""Domain errors rendered as consistent JSON by the global error handler.

Each error carries an HTTP status, a stable machine-readable code and an
optional ``details`` payload identifying the missing/offending resource.
"""

from __future__ import annotations

import uuid
from typing import Any


class AppError(Exception):
    """Base class for errors that map directly onto an HTTP response."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    message: str = "Internal server error"

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None) -> None:
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)


# --- 404 ---


class ChallengeNotFound(AppError):
    status_code = 404
    code = "CHALLENGE_NOT_FOUND"
    message = "Challenge not found"

    def __init__(self, challenge_id: uuid.UUID) -> None:
        super().__init__(details={"challengeId": str(challenge_id)})


class InviteNotFound(AppError):
    status_code = 404
    code = "INVITE_NOT_FOUND"
    message = "Invite not found"

    def __init__(self, token: str) -> None:
        super().__init__(details={"token": token})


class UserNotFound(AppError):
    status_code = 404
    code = "USER_NOT_FOUND"
    message = "User not found"

    def __init__(self, user_id: uuid.UUID) -> None:
        super().__init__(details={"userId": str(user_id)})


class FriendInviteNotFound(AppError):
    status_code = 404
    code = "FRIEND_INVITE_NOT_FOUND"
    message = "Friend invite not found or no longer valid"

    def __init__(self, token: str) -> None:
        super().__init__(details={"token": token})


class FriendRequestNotFound(AppError):
    status_code = 404
    code = "FRIEND_REQUEST_NOT_FOUND"
    message = "Friend request not found"

    def __init__(self, request_id: uuid.UUID) -> None:
        super().__init__(details={"requestId": str(request_id)})


class BadgeNotFound(AppError):
    status_code = 404
    code = "BADGE_NOT_FOUND"
    message = "Badge not found"

    def __init__(self, badge_id: uuid.UUID) -> None:
        super().__init__(details={"badgeId": str(badge_id)})


# --- 400 / 401 / 403 / 409 ---


class ValidationFailed(AppError):
    status_code = 400
    code = "VALIDATION_ERROR"
    message = "Validation error"


class ChallengeEnded(AppError):
    status_code = 400
    code = "CHALLENGE_ENDED"
    message = "Challenge has ended"


class CannotFriendSelf(AppError):
    status_code = 400
    code = "CANNOT_FRIEND_SELF"
    message = "Cannot send a friend request to yourself"


class InvalidToken(AppError):
    status_code = 401
    code = "INVALID_TOKEN"
    message = "Invalid or revoked token"


class Forbidden(AppError):
    status_code = 403
    code = "FORBIDDEN"
    message = "Forbidden"


class NotParticipating(AppError):
    status_code = 403
    code = "NOT_PARTICIPATING"
    message = "Not participating in this challenge"


class InviteRequired(AppError):
    status_code = 403
    code = "INVITE_REQUIRED"
    message = "Invite token required"


class InviteExpired(AppError):
    status_code = 403
    code = "INVITE_EXPIRED"
    message = "Invite token expired"


class InviteExhausted(AppError):
    status_code = 403
    code = "INVITE_EXHAUSTED"
    message = "Invite token exhausted"


class MaxParticipants(AppError):
    status_code = 403
    code = "MAX_PARTICIPANTS"
    message = "Challenge at maximum participants"


class AlreadyJoined(AppError):
    status_code = 409
    code = "ALREADY_JOINED"
    message = "Already joined this challenge"


class AlreadyFriends(AppError):
    status_code = 409
    code = "ALREADY_FRIENDS"
    message = "Already friends"


class FriendRequestExists(AppError):
    status_code = 409
    code = "FRIEND_REQUEST_EXISTS"
    message = "A pending friend request already exists"

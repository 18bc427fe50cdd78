"""Friend invite links, friend requests and friendships.

Friendships are stored as two directed rows; accepting a request writes
both rows and the status change in the caller's single transaction.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import timedelta

import structlog
from sqlalchemy import and_, delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from hamchallenges.auth.tokens import generate_friend_invite_token
from hamchallenges.callsigns import normalize_callsign
from hamchallenges.db.dialect import insert_for
from hamchallenges.db.models import FriendInvite, FriendRequest, Friendship, User
from hamchallenges.errors import (
    AlreadyFriends,
    CannotFriendSelf,
    Forbidden,
    FriendInviteNotFound,
    FriendRequestExists,
    FriendRequestNotFound,
    UserNotFound,
    ValidationFailed,
)
from hamchallenges.time_utils import as_utc, utcnow

logger = structlog.get_logger()

STATUS_PENDING = "pending"
STATUS_ACCEPTED = "accepted"
STATUS_DECLINED = "declined"


@dataclass(frozen=True)
class FriendRequestView:
    request: FriendRequest
    from_callsign: str
    to_callsign: str


def friend_invite_url(invite_base_url: str, token: str) -> str:
    return f"{invite_base_url.rstrip('/')}/invite/{token}"


# ── Invite links ──


async def create_friend_invite(db: AsyncSession, user: User, expiry_days: int) -> FriendInvite:
    now = utcnow()
    invite = FriendInvite(
        id=uuid.uuid4(),
        token=generate_friend_invite_token(),
        user_id=user.id,
        created_at=now,
        expires_at=now + timedelta(days=expiry_days),
    )
    db.add(invite)
    await db.flush()
    logger.info("friend_invite_created", user_id=str(user.id))
    return invite


async def _consume_friend_invite(db: AsyncSession, token: str, used_by: User) -> FriendInvite:
    """Mark a valid (unexpired, unused) invite as used by ``used_by``."""
    result = await db.execute(select(FriendInvite).where(FriendInvite.token == token))
    invite = result.scalar_one_or_none()
    if invite is None or invite.used_at is not None or as_utc(invite.expires_at) <= utcnow():
        raise FriendInviteNotFound(token)
    invite.used_at = utcnow()
    invite.used_by_user_id = used_by.id
    return invite


async def prune_friend_invites(db: AsyncSession, retention_days: int) -> int:
    """Delete invites that expired or were used more than ``retention_days`` ago."""
    cutoff = utcnow() - timedelta(days=retention_days)
    result = await db.execute(
        delete(FriendInvite)
        .where(or_(FriendInvite.expires_at < cutoff, FriendInvite.used_at < cutoff))
        .execution_options(synchronize_session=False)
    )
    return result.rowcount or 0


# ── Requests ──


async def are_friends(db: AsyncSession, user_id: uuid.UUID, other_id: uuid.UUID) -> bool:
    result = await db.execute(
        select(Friendship.id).where(Friendship.user_id == user_id, Friendship.friend_id == other_id)
    )
    return result.first() is not None


async def get_pending_request_between(
    db: AsyncSession, user_id: uuid.UUID, other_id: uuid.UUID
) -> FriendRequest | None:
    """A pending request in either direction between two users."""
    result = await db.execute(
        select(FriendRequest).where(
            FriendRequest.status == STATUS_PENDING,
            or_(
                and_(FriendRequest.from_user_id == user_id, FriendRequest.to_user_id == other_id),
                and_(FriendRequest.from_user_id == other_id, FriendRequest.to_user_id == user_id),
            ),
        )
    )
    return result.scalars().first()


async def create_friend_request(
    db: AsyncSession,
    sender: User,
    to_user_id: uuid.UUID | None = None,
    invite_token: str | None = None,
) -> FriendRequestView:
    """Send a friend request to a user id, or to the owner of an invite link."""
    if (to_user_id is None) == (invite_token is None):
        raise ValidationFailed("Provide exactly one of toUserId or inviteToken")

    if to_user_id is not None:
        target = await db.get(User, to_user_id)
        if target is None:
            raise UserNotFound(to_user_id)
    else:
        invite = await _consume_friend_invite(db, invite_token, sender)
        target = await db.get(User, invite.user_id)
        if target is None:
            raise FriendInviteNotFound(invite_token)

    if target.id == sender.id:
        raise CannotFriendSelf()
    if await are_friends(db, sender.id, target.id):
        raise AlreadyFriends()
    if await get_pending_request_between(db, sender.id, target.id) is not None:
        raise FriendRequestExists()

    request = FriendRequest(
        id=uuid.uuid4(),
        from_user_id=sender.id,
        to_user_id=target.id,
        status=STATUS_PENDING,
        requested_at=utcnow(),
    )
    db.add(request)
    await db.flush()
    logger.info("friend_request_created", from_callsign=sender.callsign, to_callsign=target.callsign)
    return FriendRequestView(request=request, from_callsign=sender.callsign, to_callsign=target.callsign)


async def list_pending_requests(
    db: AsyncSession, user: User
) -> tuple[list[FriendRequestView], list[FriendRequestView]]:
    """Pending requests addressed to ``user`` (incoming) and sent by them (outgoing)."""
    sender = aliased(User)
    recipient = aliased(User)
    stmt = (
        select(FriendRequest, sender.callsign, recipient.callsign)
        .join(sender, sender.id == FriendRequest.from_user_id)
        .join(recipient, recipient.id == FriendRequest.to_user_id)
        .where(
            FriendRequest.status == STATUS_PENDING,
            or_(FriendRequest.to_user_id == user.id, FriendRequest.from_user_id == user.id),
        )
        .order_by(FriendRequest.requested_at.desc())
    )
    incoming: list[FriendRequestView] = []
    outgoing: list[FriendRequestView] = []
    for request, from_callsign, to_callsign in (await db.execute(stmt)).all():
        view = FriendRequestView(request=request, from_callsign=from_callsign, to_callsign=to_callsign)
        (incoming if request.to_user_id == user.id else outgoing).append(view)
    return incoming, outgoing


async def _pending_request_for_recipient(
    db: AsyncSession, request_id: uuid.UUID, user: User
) -> FriendRequest:
    request = await db.get(FriendRequest, request_id, with_for_update=True)
    if request is None or request.status != STATUS_PENDING:
        raise FriendRequestNotFound(request_id)
    if request.to_user_id != user.id:
        raise Forbidden("Only the recipient can respond to a friend request")
    return request


async def accept_friend_request(db: AsyncSession, request_id: uuid.UUID, user: User) -> FriendRequest:
    """Accept a pending request and create the friendship in both directions.

    Nothing is committed here: the status change and both friendship rows
    land together when the caller commits, or not at all.
    """
    request = await _pending_request_for_recipient(db, request_id, user)
    now = utcnow()
    request.status = STATUS_ACCEPTED
    request.responded_at = now

    stmt = insert_for(db, Friendship).values(
        [
            {"id": uuid.uuid4(), "user_id": request.from_user_id, "friend_id": request.to_user_id, "created_at": now},
            {"id": uuid.uuid4(), "user_id": request.to_user_id, "friend_id": request.from_user_id, "created_at": now},
        ]
    )
    await db.execute(stmt.on_conflict_do_nothing(index_elements=["user_id", "friend_id"]))
    await db.flush()
    logger.info("friend_request_accepted", request_id=str(request_id))
    return request


async def decline_friend_request(db: AsyncSession, request_id: uuid.UUID, user: User) -> FriendRequest:
    request = await _pending_request_for_recipient(db, request_id, user)
    request.status = STATUS_DECLINED
    request.responded_at = utcnow()
    await db.flush()
    logger.info("friend_request_declined", request_id=str(request_id))
    return request


# ── Friendships ──


async def list_friends(db: AsyncSession, user: User) -> list[tuple[Friendship, User]]:
    result = await db.execute(
        select(Friendship, User)
        .join(User, User.id == Friendship.friend_id)
        .where(Friendship.user_id == user.id)
        .order_by(Friendship.created_at.desc(), User.callsign)
    )
    return [(friendship, friend) for friendship, friend in result.all()]


async def suggest_friends(db: AsyncSession, user: User, callsigns: list[str]) -> list[User]:
    """Registered users among ``callsigns`` who are not the user, a friend, or in a pending request."""
    wanted = {normalize_callsign(c) for c in callsigns if c}
    if not wanted:
        return []

    friends = select(Friendship.friend_id).where(Friendship.user_id == user.id)
    pending_out = select(FriendRequest.to_user_id).where(
        FriendRequest.from_user_id == user.id, FriendRequest.status == STATUS_PENDING
    )
    pending_in = select(FriendRequest.from_user_id).where(
        FriendRequest.to_user_id == user.id, FriendRequest.status == STATUS_PENDING
    )
    result = await db.execute(
        select(User)
        .where(
            User.callsign.in_(wanted),
            User.id != user.id,
            User.id.not_in(friends),
            User.id.not_in(pending_out),
            User.id.not_in(pending_in),
        )
        .order_by(User.callsign)
    )
    return list(result.scalars().all())

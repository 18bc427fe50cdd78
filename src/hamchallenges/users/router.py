"""User search endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hamchallenges.database import get_session
from hamchallenges.users import service
from hamchallenges.users.schemas import UserResponse

router = APIRouter(prefix="/v1/users", tags=["Users"])


@router.get("/search", response_model=list[UserResponse])
async def search_users(
    q: str = Query(""),
    db: AsyncSession = Depends(get_session),
) -> list[UserResponse]:
    """Search registered users by callsign (public)."""
    users = await service.search_users(db, q)
    return [UserResponse(id=u.id, callsign=u.callsign) for u in users]

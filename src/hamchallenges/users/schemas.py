"""User response models."""

from __future__ import annotations

import uuid

from hamchallenges.schemas import CamelModel


class UserResponse(CamelModel):
    id: uuid.UUID
    callsign: str

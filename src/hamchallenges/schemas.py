"""Shared pydantic base model for the camelCase JSON wire format."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from hamchallenges.time_utils import as_utc


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys; snake_case names work on input too."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# SQLite hands back naive datetimes; everything on the wire is UTC.
UtcDateTime = Annotated[datetime, AfterValidator(as_utc)]

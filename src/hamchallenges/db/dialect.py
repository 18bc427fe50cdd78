"""Dialect-specific INSERT ... ON CONFLICT constructs."""

from __future__ import annotations

from typing import Any

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession


def insert_for(session: AsyncSession, model: Any) -> Any:  # noqa: ANN401
    """Return an insert() for ``model`` supporting on_conflict_do_* on the session's backend."""
    if session.bind.dialect.name == "sqlite":
        return sqlite_insert(model)
    return pg_insert(model)

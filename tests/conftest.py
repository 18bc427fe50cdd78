"""Shared test fixtures.

Each test gets its own SQLite database file built from the ORM metadata,
so tests need neither PostgreSQL nor Redis. The ASGI transport does not
run the app lifespan, which leaves Redis uninitialised and the rate
limiter inactive.
"""

from __future__ import annotations

import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from hamchallenges.config import get_settings
from hamchallenges.database import close_db, get_engine, init_db
from hamchallenges.db import models  # noqa: F401
from hamchallenges.db.base import Base
from hamchallenges.db.models import Challenge
from hamchallenges.main import create_app
from hamchallenges.time_utils import utcnow

ADMIN_TOKEN = "test-admin-token"

COLLECTION_CONFIG: dict[str, Any] = {
    "scoring": {"method": "percentage"},
    "goals": {"type": "collection", "items": [{"id": f"G{i}"} for i in range(1, 6)]},
    "tiers": [
        {"threshold": 0, "id": "bronze"},
        {"threshold": 50, "id": "silver"},
        {"threshold": 100, "id": "gold"},
    ],
}


@pytest.fixture(autouse=True)
def _test_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Pin settings the tests rely on and drop the cached Settings around each test."""
    monkeypatch.setenv("HAMCH_ADMIN_TOKEN", ADMIN_TOKEN)
    monkeypatch.setenv("HAMCH_BASE_URL", "https://challenges.test")
    monkeypatch.setenv("HAMCH_INVITE_BASE_URL", "https://activities.test")
    monkeypatch.setenv("HAMCH_LOG_FORMAT", "console")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def database(tmp_path: Path) -> AsyncGenerator[None, None]:
    """Fresh SQLite database with the full schema."""
    await init_db(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await close_db()


@pytest_asyncio.fixture
async def db_session(database: None) -> AsyncGenerator[AsyncSession, None]:
    """Direct database session for service-level tests and assertions."""
    async with AsyncSession(get_engine(), expire_on_commit=False) as session:
        yield session


@pytest_asyncio.fixture
async def client(database: None) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against a freshly created app."""
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest_asyncio.fixture
async def challenge(db_session: AsyncSession) -> Challenge:
    """A committed, active collection challenge: 5 goals, percentage scoring, bronze/silver/gold."""
    now = utcnow()
    row = Challenge(
        id=uuid.uuid4(),
        version=1,
        name="Worked All Continents",
        description="Work a station on every continent",
        author="W1AW",
        category="award",
        challenge_type="collection",
        configuration=COLLECTION_CONFIG,
        is_active=True,
        created_at=now,
        updated_at=now,
    )
    db_session.add(row)
    await db_session.commit()
    return row


@pytest.fixture
def make_challenge(
    client: AsyncClient, admin_headers: dict[str, str]
) -> Callable[..., Awaitable[dict[str, Any]]]:
    """Create a challenge through the admin API; keyword overrides are merged into the body."""

    async def _make(**overrides: Any) -> dict[str, Any]:  # noqa: ANN401
        body: dict[str, Any] = {
            "name": "Worked All Continents",
            "description": "Work a station on every continent",
            "category": "award",
            "type": "collection",
            "configuration": COLLECTION_CONFIG,
        }
        body.update(overrides)
        resp = await client.post("/v1/admin/challenges", json=body, headers=admin_headers)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make


@pytest.fixture
def join(client: AsyncClient) -> Callable[..., Awaitable[dict[str, str]]]:
    """Join a challenge and return bearer headers for the new participant."""

    async def _join(challenge_id: str, callsign: str, **extra: Any) -> dict[str, str]:  # noqa: ANN401
        resp = await client.post(f"/v1/challenges/{challenge_id}/join", json={"callsign": callsign, **extra})
        assert resp.status_code == 201, resp.text
        return {"Authorization": f"Bearer {resp.json()['deviceToken']}"}

    return _join

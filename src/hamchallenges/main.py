"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from hamchallenges.badges.router import admin_router as admin_badges_router
from hamchallenges.badges.router import router as badges_router
from hamchallenges.challenges.router import admin_router as admin_challenges_router
from hamchallenges.challenges.router import router as challenges_router
from hamchallenges.config import get_settings
from hamchallenges.database import close_db, init_db
from hamchallenges.friends.router import router as friends_router
from hamchallenges.health.router import router as health_router
from hamchallenges.invites.router import router as invites_router
from hamchallenges.leaderboard.router import router as leaderboard_router
from hamchallenges.middleware import setup_middleware
from hamchallenges.participants.router import router as participants_router
from hamchallenges.progress.router import router as progress_router
from hamchallenges.redis_client import close_redis, init_redis
from hamchallenges.users.router import router as users_router

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)
    await init_redis(settings.redis_url)
    logger.info("app_started", environment=settings.environment, version=settings.app_version)

    yield

    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Ham Radio Challenges API",
        description="Backend API for amateur radio challenges: progress scoring, leaderboards and friends",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(challenges_router)
    app.include_router(participants_router)
    app.include_router(progress_router)
    app.include_router(leaderboard_router)
    app.include_router(users_router)
    app.include_router(friends_router)
    app.include_router(admin_challenges_router)
    app.include_router(invites_router)
    app.include_router(badges_router)
    app.include_router(admin_badges_router)

    return app


app = create_app()

"""arq worker for periodic housekeeping.

Import path for arq CLI: arq hamchallenges.workers.settings.WorkerSettings
"""

from __future__ import annotations

import logging

from arq import cron
from arq.connections import RedisSettings

from hamchallenges.config import get_settings
from hamchallenges.database import close_db, get_session, init_db
from hamchallenges.friends.service import prune_friend_invites

logger = logging.getLogger(__name__)


async def startup(ctx: dict) -> None:  # type: ignore[type-arg]
    """Open the database engine for job functions."""
    settings = get_settings()
    await init_db(settings.database_url)
    ctx["settings"] = settings
    logger.info("Housekeeping worker started")


async def shutdown(ctx: dict) -> None:  # type: ignore[type-arg]
    await close_db()
    logger.info("Housekeeping worker shut down")


async def prune_stale_friend_invites(ctx: dict) -> int:  # type: ignore[type-arg]
    """Daily task deleting friend invites expired or used beyond the retention window."""
    settings = ctx.get("settings") or get_settings()
    deleted = 0
    async for session in get_session():
        deleted = await prune_friend_invites(session, settings.friend_invite_retention_days)
        await session.commit()
        break
    if deleted:
        logger.info("Pruned %d stale friend invites", deleted)
    return deleted


class WorkerSettings:
    """arq worker settings for housekeeping jobs."""

    functions = [prune_stale_friend_invites]
    cron_jobs = [
        cron(prune_stale_friend_invites, hour={3}, minute={15}, run_at_startup=False),
    ]
    on_startup = startup
    on_shutdown = shutdown
    max_jobs = 2
    job_timeout = 300
    redis_settings = RedisSettings.from_dsn(get_settings().arq_redis_url)

"""Purge read notifications older than NOTIFICATION_RETENTION_DAYS.

Usage:
    python -m scripts.purge_read_notifications [days]
If days is omitted, settings.notification_retention_days (default 30) is used.
Meant to be run daily by an external scheduler (cron, k8s CronJob).
"""

import asyncio
import sys

import lms.infrastructure.persistence.database as database
from lms.application.use_cases import NotificationService
from lms.core.config import get_settings
from lms.infrastructure.persistence.repositories import NotificationRepository
from lms.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork
from lms.shared.telemetry.logging import setup_logging


async def main() -> None:
    """Delete old read notifications and invalidate cached notification lists."""
    settings = get_settings()
    setup_logging()
    days = int(sys.argv[1]) if len(sys.argv) > 1 else settings.notification_retention_days

    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        print("AsyncSessionLocal not configured", file=sys.stderr)
        sys.exit(1)

    cache = None
    if settings.redis_enabled:
        from lms.infrastructure.cache.redis_cache import CacheService

        cache = CacheService()
        await cache.connect()

    try:
        async with database.AsyncSessionLocal() as session:
            service = NotificationService(
                NotificationRepository(session), SqlAlchemyUnitOfWork(session), cache
            )
            removed = await service.purge_read(days)
        print(f"Done. Deleted {removed} read notification(s) older than {days} day(s)")
    finally:
        if cache is not None:
            await cache.disconnect()
        await database.dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())

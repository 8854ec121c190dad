"""Admin notification use cases."""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Any

from lms.application.services.cache_keys import all_notifications_key
from lms.application.services.cache_policy import (
    CacheInvalidator,
    Mutation,
    read_through,
)
from lms.domain.exceptions import ResourceNotFoundException, ValidationException
from lms.shared.telemetry.logging import get_logger
from lms.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from lms.application.interfaces.repositories import INotificationRepository
    from lms.application.interfaces.services import ICacheService, IUnitOfWork

logger = get_logger(__name__)


class NotificationService:
    def __init__(
        self,
        notification_repo: INotificationRepository,
        uow: IUnitOfWork,
        cache: ICacheService | None,
    ) -> None:
        self.notification_repo = notification_repo
        self.uow = uow
        self.cache = cache
        self.invalidator = CacheInvalidator(cache)

    async def list_all(self) -> list[dict[str, Any]]:
        """All notifications, newest first (``notification:all``)."""
        return await read_through(
            self.cache, all_notifications_key(), self.notification_repo.list_all
        )

    async def update_status(self, notification_id: str) -> list[dict[str, Any]]:
        """Mark one notification read and return the refreshed list."""
        async with self.uow:
            if await self.notification_repo.mark_read(notification_id) is None:
                raise ResourceNotFoundException("notification", notification_id)
        await self.invalidator.invalidate(Mutation.NOTIFICATION_UPDATED)
        return await self.list_all()

    async def purge_read(self, older_than_days: int) -> int:
        """Delete read notifications created more than older_than_days ago."""
        if older_than_days < 0:
            raise ValidationException("older_than_days must be >= 0", "older_than_days")
        cutoff = utc_now() - timedelta(days=older_than_days)
        async with self.uow:
            removed = await self.notification_repo.delete_read_before(cutoff)
        await self.invalidator.invalidate(Mutation.NOTIFICATIONS_PURGED)
        logger.info("Purged %s read notifications older than %s", removed, cutoff)
        return removed

"""Notification repository. Interface methods return application DTOs."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from lms.application.dtos.notification import NotificationResult
from lms.domain.enums import NotificationStatus
from lms.infrastructure.persistence.models.notification import Notification
from lms.infrastructure.persistence.repositories.base import BaseRepository


def _notification_to_result(n: Notification) -> NotificationResult:
    return NotificationResult(
        id=n.id,
        user_id=n.user_id,
        title=n.title,
        message=n.message,
        status=NotificationStatus(n.status),
        created_at=n.created_at,
        updated_at=n.updated_at,
    )


class NotificationRepository(BaseRepository[Notification]):
    """Notification repository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Notification)

    async def create(self, user_id: str, title: str, message: str) -> NotificationResult:
        notification = Notification(
            user_id=user_id,
            title=title,
            message=message,
            status=NotificationStatus.UNREAD.value,
        )
        return _notification_to_result(await self._add(notification))

    async def get_by_id(self, notification_id: str) -> NotificationResult | None:
        notification = await self._get(notification_id)
        return _notification_to_result(notification) if notification else None

    async def list_all(self) -> list[NotificationResult]:
        return [_notification_to_result(n) for n in await self._list_newest_first()]

    async def mark_read(self, notification_id: str) -> NotificationResult | None:
        notification = await self._get(notification_id)
        if notification is None:
            return None
        notification.status = NotificationStatus.READ.value
        await self.db.flush()
        await self.db.refresh(notification)
        return _notification_to_result(notification)

    async def delete_by_user(self, user_id: str) -> int:
        result = await self.db.execute(
            delete(Notification).where(Notification.user_id == user_id)
        )
        return int(result.rowcount or 0)

    async def delete_read_before(self, cutoff: datetime) -> int:
        result = await self.db.execute(
            delete(Notification).where(
                Notification.status == NotificationStatus.READ.value,
                Notification.created_at < cutoff,
            )
        )
        return int(result.rowcount or 0)

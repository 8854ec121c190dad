"""DTOs for notification use cases."""

from dataclasses import dataclass
from datetime import datetime

from lms.domain.enums import NotificationStatus


@dataclass(frozen=True)
class NotificationResult:
    """Admin notification."""

    id: str
    user_id: str
    title: str
    message: str
    status: NotificationStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None

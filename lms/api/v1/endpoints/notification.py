"""Notification API (admin)."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request

from lms.api.v1.dependencies import AdminUser, get_notification_service
from lms.application.use_cases import NotificationService
from lms.core.limiter import limit_writes
from lms.schemas.common import ApiResponse, envelope

router = APIRouter()

Notifications = Annotated[NotificationService, Depends(get_notification_service)]


@router.get("/get-notifications", response_model=ApiResponse[list[dict[str, Any]]])
async def get_notifications(admin: AdminUser, notifications: Notifications):
    """All notifications, newest first."""
    return envelope(
        "Notifications retrieved successfully", await notifications.list_all()
    )


@router.put(
    "/update-status/{notification_id}", response_model=ApiResponse[list[dict[str, Any]]]
)
@limit_writes
async def update_status(
    request: Request,
    notification_id: str,
    admin: AdminUser,
    notifications: Notifications,
):
    """Mark a notification read; returns the refreshed list."""
    refreshed = await notifications.update_status(notification_id)
    return envelope("Notification status updated", refreshed)

"""Repositories: SQLAlchemy implementations of the application repository protocols."""

from lms.infrastructure.persistence.repositories.course_repo import CourseRepository
from lms.infrastructure.persistence.repositories.layout_repo import LayoutRepository
from lms.infrastructure.persistence.repositories.notification_repo import (
    NotificationRepository,
)
from lms.infrastructure.persistence.repositories.order_repo import OrderRepository
from lms.infrastructure.persistence.repositories.user_repo import UserRepository

__all__ = [
    "CourseRepository",
    "LayoutRepository",
    "NotificationRepository",
    "OrderRepository",
    "UserRepository",
]

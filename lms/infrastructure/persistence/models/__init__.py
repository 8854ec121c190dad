"""Persistence models: ORM entities and mixins."""

from lms.infrastructure.persistence.models.course import Course
from lms.infrastructure.persistence.models.layout import Layout
from lms.infrastructure.persistence.models.mixins import (
    CuidMixin,
    Document,
    TimestampMixin,
)
from lms.infrastructure.persistence.models.notification import Notification
from lms.infrastructure.persistence.models.order import Order
from lms.infrastructure.persistence.models.user import User

__all__ = [
    "Course",
    "CuidMixin",
    "Document",
    "Layout",
    "Notification",
    "Order",
    "TimestampMixin",
    "User",
]

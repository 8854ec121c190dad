"""Notification ORM model (admin feed)."""

from sqlalchemy import CheckConstraint, ForeignKey, String, text
from sqlalchemy.orm import Mapped, mapped_column

from lms.infrastructure.persistence.database import Base
from lms.infrastructure.persistence.models.mixins import Document


class Notification(Document, Base):
    """Notification model. Table: notification. status is 'read' or 'unread'."""

    __tablename__ = "notification"

    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("lms_user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String, nullable=False)
    message: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(
        String, nullable=False, server_default=text("'unread'"), index=True
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('read', 'unread')", name="notification_status_check"
        ),
    )

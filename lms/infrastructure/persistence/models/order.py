"""Order ORM model (course purchase)."""

from typing import Any

from sqlalchemy import JSON, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from lms.infrastructure.persistence.database import Base
from lms.infrastructure.persistence.models.mixins import Document


class Order(Document, Base):
    """Order model. Table: course_order.

    course_id is not a foreign key: order history outlives deleted courses.
    """

    __tablename__ = "course_order"

    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("lms_user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    course_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    payment_info: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict
    )

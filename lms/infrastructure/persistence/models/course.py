"""Course ORM model. Nested content lives in JSON columns."""

from typing import Any

from sqlalchemy import JSON, Float, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from lms.infrastructure.persistence.database import Base
from lms.infrastructure.persistence.models.mixins import Document


class Course(Document, Base):
    """Course model. Table: course.

    course_data is the lesson list (each with links and a questions thread);
    reviews embed author snapshots and admin replies. JSON columns are
    replaced whole on update.
    """

    __tablename__ = "course"

    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    estimated_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    thumbnail: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    tags: Mapped[str] = mapped_column(String, nullable=False)
    level: Mapped[str] = mapped_column(String, nullable=False)
    demo_url: Mapped[str] = mapped_column(String, nullable=False)
    benefits: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )
    prerequisites: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )
    course_data: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )
    reviews: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )
    rating: Mapped[float] = mapped_column(
        Float, nullable=False, server_default=text("0")
    )
    purchased: Mapped[int] = mapped_column(
        Integer, nullable=False, server_default=text("0")
    )

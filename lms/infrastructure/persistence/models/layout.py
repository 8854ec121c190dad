"""Layout ORM model (banner, FAQ and categories documents)."""

from typing import Any

from sqlalchemy import JSON, CheckConstraint, String
from sqlalchemy.orm import Mapped, mapped_column

from lms.infrastructure.persistence.database import Base
from lms.infrastructure.persistence.models.mixins import Document


class Layout(Document, Base):
    """Layout model. Table: layout. One row per type."""

    __tablename__ = "layout"

    type: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    faq: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )
    categories: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )
    banner: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "type IN ('banner', 'faq', 'categories')", name="layout_type_check"
        ),
    )

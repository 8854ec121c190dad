"""User ORM model (local and OAuth accounts)."""

from typing import Any

from sqlalchemy import JSON, Boolean, String, text
from sqlalchemy.orm import Mapped, mapped_column

from lms.infrastructure.persistence.database import Base
from lms.infrastructure.persistence.models.mixins import Document


class User(Document, Base):
    """User model. Table: lms_user. E-mail is unique (stored lower-case).

    courses holds purchased course ids; avatar is {"public_id", "url"}.
    hashed_password is null for OAuth accounts until create-password.
    """

    __tablename__ = "lms_user"

    name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str] = mapped_column(String, nullable=False, unique=True, index=True)
    hashed_password: Mapped[str | None] = mapped_column(String, nullable=True)
    role: Mapped[str] = mapped_column(
        String, nullable=False, server_default=text("'user'")
    )
    is_verified: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )
    provider: Mapped[str] = mapped_column(
        String, nullable=False, server_default=text("'local'")
    )
    avatar: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    courses: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

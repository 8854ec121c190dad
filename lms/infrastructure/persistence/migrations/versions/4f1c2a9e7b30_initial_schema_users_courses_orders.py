"""Initial schema: users, courses, orders, notifications, layouts

Revision ID: 4f1c2a9e7b30
Revises:
Create Date: 2026-10-19 09:12:40.118204

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4f1c2a9e7b30"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Create initial schema."""
    # Create user table
    op.create_table(
        "lms_user",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("hashed_password", sa.String(), nullable=True),
        sa.Column("role", sa.String(), server_default=sa.text("'user'"), nullable=False),
        sa.Column(
            "is_verified", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        sa.Column(
            "provider", sa.String(), server_default=sa.text("'local'"), nullable=False
        ),
        sa.Column("avatar", sa.JSON(), nullable=True),
        sa.Column("courses", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_lms_user_email"), "lms_user", ["email"], unique=True)
    op.create_index(
        op.f("ix_lms_user_created_at"), "lms_user", ["created_at"], unique=False
    )

    # Create course table
    op.create_table(
        "course",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("estimated_price", sa.Float(), nullable=True),
        sa.Column("thumbnail", sa.JSON(), nullable=True),
        sa.Column("tags", sa.String(), nullable=False),
        sa.Column("level", sa.String(), nullable=False),
        sa.Column("demo_url", sa.String(), nullable=False),
        sa.Column("benefits", sa.JSON(), nullable=False),
        sa.Column("prerequisites", sa.JSON(), nullable=False),
        sa.Column("course_data", sa.JSON(), nullable=False),
        sa.Column("reviews", sa.JSON(), nullable=False),
        sa.Column("rating", sa.Float(), server_default=sa.text("0"), nullable=False),
        sa.Column("purchased", sa.Integer(), server_default=sa.text("0"), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_course_created_at"), "course", ["created_at"], unique=False)

    # Create order table
    op.create_table(
        "course_order",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("course_id", sa.String(), nullable=False),
        sa.Column("payment_info", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["lms_user.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_course_order_user_id"), "course_order", ["user_id"], unique=False
    )
    op.create_index(
        op.f("ix_course_order_course_id"), "course_order", ["course_id"], unique=False
    )
    op.create_index(
        op.f("ix_course_order_created_at"), "course_order", ["created_at"], unique=False
    )

    # Create notification table
    op.create_table(
        "notification",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("message", sa.String(), nullable=False),
        sa.Column(
            "status", sa.String(), server_default=sa.text("'unread'"), nullable=False
        ),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('read', 'unread')", name="notification_status_check"
        ),
        sa.ForeignKeyConstraint(["user_id"], ["lms_user.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_notification_user_id"), "notification", ["user_id"], unique=False
    )
    op.create_index(
        op.f("ix_notification_status"), "notification", ["status"], unique=False
    )
    op.create_index(
        op.f("ix_notification_created_at"), "notification", ["created_at"], unique=False
    )

    # Create layout table
    op.create_table(
        "layout",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("faq", sa.JSON(), nullable=False),
        sa.Column("categories", sa.JSON(), nullable=False),
        sa.Column("banner", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "type IN ('banner', 'faq', 'categories')", name="layout_type_check"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("type"),
    )
    op.create_index(op.f("ix_layout_created_at"), "layout", ["created_at"], unique=False)


def downgrade() -> None:
    """Drop initial schema."""
    op.drop_index(op.f("ix_layout_created_at"), table_name="layout")
    op.drop_table("layout")
    op.drop_index(op.f("ix_notification_created_at"), table_name="notification")
    op.drop_index(op.f("ix_notification_status"), table_name="notification")
    op.drop_index(op.f("ix_notification_user_id"), table_name="notification")
    op.drop_table("notification")
    op.drop_index(op.f("ix_course_order_created_at"), table_name="course_order")
    op.drop_index(op.f("ix_course_order_course_id"), table_name="course_order")
    op.drop_index(op.f("ix_course_order_user_id"), table_name="course_order")
    op.drop_table("course_order")
    op.drop_index(op.f("ix_course_created_at"), table_name="course")
    op.drop_table("course")
    op.drop_index(op.f("ix_lms_user_created_at"), table_name="lms_user")
    op.drop_index(op.f("ix_lms_user_email"), table_name="lms_user")
    op.drop_table("lms_user")

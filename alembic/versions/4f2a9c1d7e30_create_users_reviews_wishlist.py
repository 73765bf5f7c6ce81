"""Create users, reviews and wishlist tables

Revision ID: 4f2a9c1d7e30
Revises:
Create Date: 2026-10-19 10:12:44.118203

"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4f2a9c1d7e30"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

# Created once up front, shared by both tables
content_type = postgresql.ENUM("movie", "tv", "anime", name="content_type", create_type=False)


def upgrade() -> None:
    content_type.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("username", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_username"), "users", ["username"], unique=True)

    op.create_table(
        "reviews",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("content_id", sa.Integer(), nullable=False),
        sa.Column("content_type", content_type, nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=False),
        sa.Column("content_details", sa.JSON(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_reviews_id"), "reviews", ["id"], unique=False)
    op.create_index(
        "ix_reviews_user_content", "reviews", ["user_id", "content_id", "content_type"]
    )
    op.create_index("ix_reviews_content", "reviews", ["content_id", "content_type"])
    op.create_index("ix_reviews_created_at", "reviews", ["created_at"])

    op.create_table(
        "wishlist_entries",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("content_id", sa.Integer(), nullable=False),
        sa.Column("content_type", content_type, nullable=False),
        sa.Column("content_details", sa.JSON(), nullable=False),
        sa.Column(
            "added_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_id", "content_id", "content_type", name="uq_wishlist_user_content"
        ),
    )
    op.create_index(op.f("ix_wishlist_entries_id"), "wishlist_entries", ["id"], unique=False)
    op.create_index(
        op.f("ix_wishlist_entries_user_id"), "wishlist_entries", ["user_id"], unique=False
    )
    op.create_index(
        op.f("ix_wishlist_entries_added_at"), "wishlist_entries", ["added_at"], unique=False
    )


def downgrade() -> None:
    op.drop_table("wishlist_entries")
    op.drop_table("reviews")
    op.drop_table("users")
    content_type.drop(op.get_bind(), checkfirst=True)

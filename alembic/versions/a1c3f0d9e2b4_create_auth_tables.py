"""create_auth_tables

Revision ID: a1c3f0d9e2b4
Revises:
Create Date: 2026-10-17 09:12:31.208113

"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "a1c3f0d9e2b4"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), nullable=False, comment="User ID (UUID)"),
        sa.Column("email", sa.String(length=255), nullable=False, comment="Lower-cased email address"),
        sa.Column("username", sa.String(length=50), nullable=False, comment="Unique username"),
        sa.Column("password_hash", sa.String(length=255), nullable=False, comment="Argon2 password hash"),
        sa.Column("name", sa.String(length=100), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("avatar", sa.String(length=255), nullable=True),
        sa.Column("role", sa.String(length=10), nullable=False, comment="USER or ADMIN"),
        sa.Column("verified", sa.Boolean(), nullable=False, comment="Whether the email address is verified"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "refresh_tokens",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("token_hash", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_refresh_tokens_token_hash", "refresh_tokens", ["token_hash"], unique=True)
    op.create_index("ix_refresh_tokens_user_id", "refresh_tokens", ["user_id"])
    op.create_index("ix_refresh_tokens_expires_at", "refresh_tokens", ["expires_at"])

    op.create_table(
        "password_reset_tokens",
        sa.Column("id", sa.String(length=36), nullable=False, comment="Token ID (UUID)"),
        sa.Column("email", sa.String(length=255), nullable=False, comment="Email address for reset"),
        sa.Column("token_hash", sa.String(length=64), nullable=False, comment="SHA-256 hash of the reset token"),
        sa.Column("used", sa.Boolean(), nullable=False, comment="Whether the token has been redeemed"),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False, comment="Timestamp when the token expires"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, comment="Timestamp when the token was created"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_password_reset_tokens_email", "password_reset_tokens", ["email"])
    op.create_index(
        "ix_password_reset_tokens_token_hash", "password_reset_tokens", ["token_hash"], unique=True
    )
    op.create_index("ix_password_reset_tokens_expires_at", "password_reset_tokens", ["expires_at"])

    op.create_table(
        "email_verification_tokens",
        sa.Column("id", sa.String(length=36), nullable=False, comment="Token ID (UUID)"),
        sa.Column("email", sa.String(length=255), nullable=False, comment="Email address to be verified"),
        sa.Column("token_hash", sa.String(length=64), nullable=False, comment="SHA-256 hash of the verification token"),
        sa.Column("used", sa.Boolean(), nullable=False, comment="Whether the token has been redeemed"),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False, comment="Timestamp when the token expires"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, comment="Timestamp when the token was issued"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index(
        "ix_email_verification_tokens_token_hash",
        "email_verification_tokens",
        ["token_hash"],
        unique=True,
    )
    op.create_index(
        "ix_email_verification_tokens_expires_at", "email_verification_tokens", ["expires_at"]
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("email_verification_tokens")
    op.drop_table("password_reset_tokens")
    op.drop_table("refresh_tokens")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")

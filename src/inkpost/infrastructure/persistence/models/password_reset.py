"""SQLAlchemy model for password reset tokens.

Stores hashes of password reset tokens sent to users. Several historical rows
may exist for the same email.
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from inkpost.core.timeutil import utcnow
from inkpost.infrastructure.persistence.database import Base


class PasswordResetTokenModel(Base):
    """SQLAlchemy model for the password_reset_tokens table.

    Attributes:
        id: Primary key (UUID string).
        email: Email address for which the password is being reset.
        token_hash: SHA-256 hash of the reset token.
        used: Whether the token has been redeemed.
        expires_at: Timestamp when the token expires.
        created_at: Timestamp when the token was created.
    """

    __tablename__ = "password_reset_tokens"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        comment="Token ID (UUID)",
    )
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Email address for reset",
    )
    token_hash: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        index=True,
        comment="SHA-256 hash of the reset token",
    )
    used: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Whether the token has been redeemed",
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
        comment="Timestamp when the token expires",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        comment="Timestamp when the token was created",
    )

    def __repr__(self) -> str:
        return f"<PasswordResetToken(id={self.id}, email={self.email}, used={self.used})>"

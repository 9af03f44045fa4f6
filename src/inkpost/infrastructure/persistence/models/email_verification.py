"""SQLAlchemy model for email verification tokens.

One row per email address; issuing a new token overwrites the previous one.
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from inkpost.core.timeutil import utcnow
from inkpost.infrastructure.persistence.database import Base


class EmailVerificationTokenModel(Base):
    """SQLAlchemy model for the email_verification_tokens table.

    Attributes:
        id: Primary key (UUID string).
        email: Email address to be verified (unique).
        token_hash: SHA-256 hash of the verification token.
        used: Whether the token has been redeemed.
        expires_at: Timestamp when the token expires.
        created_at: Timestamp when the token was (re)issued.
    """

    __tablename__ = "email_verification_tokens"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        comment="Token ID (UUID)",
    )
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Email address to be verified",
    )
    token_hash: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        index=True,
        comment="SHA-256 hash of the verification token",
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
        comment="Timestamp when the token was issued",
    )

    def __repr__(self) -> str:
        return f"<EmailVerificationToken(id={self.id}, email={self.email}, used={self.used})>"

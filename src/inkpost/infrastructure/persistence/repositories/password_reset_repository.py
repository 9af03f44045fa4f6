"""Repository for password reset token operations.

Provides database operations for creating, redeeming and purging reset tokens.
"""

from datetime import datetime, timedelta

from sqlalchemy import and_, delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.core.timeutil import utcnow
from inkpost.infrastructure.persistence.models import PasswordResetTokenModel
from inkpost.infrastructure.persistence.repositories.token_hashing import FETCH_SYNC, hash_token


class PasswordResetRepository:
    """Repository for password reset token database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self._session = session

    async def create(
        self, email: str, token: str, expires_at: datetime
    ) -> PasswordResetTokenModel:
        """Store a new password reset token.

        Earlier tokens for the same email are kept; each stays redeemable
        until it expires or is used.

        Args:
            email: Email address of the account.
            token: The raw opaque token.
            expires_at: Expiry timestamp.

        Returns:
            The stored model.
        """
        model = PasswordResetTokenModel(
            email=email.lower(),
            token_hash=hash_token(token),
            expires_at=expires_at,
            used=False,
        )
        self._session.add(model)
        await self._session.flush()
        return model

    async def get_usable_by_token(self, token: str) -> PasswordResetTokenModel | None:
        """Look up an unused, unexpired reset token by its plain text value.

        Args:
            token: The raw token string.

        Returns:
            The model if the token exists and can still be redeemed, None otherwise.
        """
        stmt = select(PasswordResetTokenModel).where(
            PasswordResetTokenModel.token_hash == hash_token(token),
            PasswordResetTokenModel.used == False,  # noqa: E712
            PasswordResetTokenModel.expires_at > utcnow(),
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def mark_as_used(self, token_id: str) -> bool:
        """Mark a reset token as used if nobody else has.

        Args:
            token_id: The token's UUID.

        Returns:
            True if this call flipped the flag, False if the token was already
            used or does not exist.
        """
        stmt = (
            update(PasswordResetTokenModel)
            .where(
                PasswordResetTokenModel.id == token_id,
                PasswordResetTokenModel.used == False,  # noqa: E712
            )
            .values(used=True)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def delete_stale(self, retention: timedelta) -> int:
        """Delete expired tokens and used tokens older than ``retention``.

        Returns:
            Number of tokens deleted.
        """
        now = utcnow()
        stmt = delete(PasswordResetTokenModel).where(
            or_(
                PasswordResetTokenModel.expires_at < now,
                and_(
                    PasswordResetTokenModel.used == True,  # noqa: E712
                    PasswordResetTokenModel.created_at < now - retention,
                ),
            )
        )
        result = await self._session.execute(stmt, execution_options=FETCH_SYNC)
        return result.rowcount

    async def delete_for_email(self, email: str) -> int:
        stmt = delete(PasswordResetTokenModel).where(
            PasswordResetTokenModel.email == email.lower()
        )
        result = await self._session.execute(stmt)
        return result.rowcount

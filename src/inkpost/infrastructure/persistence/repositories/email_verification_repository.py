"""Repository for email verification token operations.

There is at most one verification row per email; issuing a new token
overwrites it.
"""

from datetime import datetime, timedelta

from sqlalchemy import and_, delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.core.timeutil import utcnow
from inkpost.infrastructure.persistence.models import EmailVerificationTokenModel
from inkpost.infrastructure.persistence.repositories.token_hashing import FETCH_SYNC, hash_token


class EmailVerificationRepository:
    """Repository for email verification token database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self._session = session

    async def get_by_email(self, email: str) -> EmailVerificationTokenModel | None:
        result = await self._session.execute(
            select(EmailVerificationTokenModel).where(
                EmailVerificationTokenModel.email == email.lower()
            )
        )
        return result.scalar_one_or_none()

    async def upsert(
        self, email: str, token: str, expires_at: datetime
    ) -> EmailVerificationTokenModel:
        """Create or replace the verification token for an email.

        Replacing resets ``used`` to False, so any previously mailed token
        stops working.

        Args:
            email: Email address to verify.
            token: The raw opaque token.
            expires_at: Expiry timestamp.

        Returns:
            The stored model.
        """
        model = await self.get_by_email(email)
        if model is None:
            model = EmailVerificationTokenModel(email=email.lower())
            self._session.add(model)

        model.token_hash = hash_token(token)
        model.expires_at = expires_at
        model.used = False
        model.created_at = utcnow()
        await self._session.flush()
        return model

    async def get_usable_by_token(self, token: str) -> EmailVerificationTokenModel | None:
        """Look up an unused, unexpired verification token by its plain text value.

        Args:
            token: The raw token string.

        Returns:
            The model if the token can still be redeemed, None otherwise.
        """
        stmt = select(EmailVerificationTokenModel).where(
            EmailVerificationTokenModel.token_hash == hash_token(token),
            EmailVerificationTokenModel.used == False,  # noqa: E712
            EmailVerificationTokenModel.expires_at > utcnow(),
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def mark_as_used(self, token_id: str) -> bool:
        """Mark a verification token as used if it is still unused.

        Returns:
            True if this call flipped the flag, False otherwise.
        """
        stmt = (
            update(EmailVerificationTokenModel)
            .where(
                EmailVerificationTokenModel.id == token_id,
                EmailVerificationTokenModel.used == False,  # noqa: E712
            )
            .values(used=True)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def delete_stale(self, retention: timedelta) -> int:
        """Delete expired tokens and used tokens older than ``retention``."""
        now = utcnow()
        stmt = delete(EmailVerificationTokenModel).where(
            or_(
                EmailVerificationTokenModel.expires_at < now,
                and_(
                    EmailVerificationTokenModel.used == True,  # noqa: E712
                    EmailVerificationTokenModel.created_at < now - retention,
                ),
            )
        )
        result = await self._session.execute(stmt, execution_options=FETCH_SYNC)
        return result.rowcount

    async def delete_for_email(self, email: str) -> int:
        result = await self._session.execute(
            delete(EmailVerificationTokenModel).where(
                EmailVerificationTokenModel.email == email.lower()
            )
        )
        return result.rowcount

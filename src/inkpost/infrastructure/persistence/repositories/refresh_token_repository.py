"""Repository for refresh token operations.

Provides database operations for storing and revoking refresh tokens. Tokens
are looked up by the SHA-256 hash of the presented value.
"""

from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from inkpost.core.timeutil import utcnow
from inkpost.infrastructure.persistence.models import RefreshTokenModel
from inkpost.infrastructure.persistence.repositories.token_hashing import FETCH_SYNC, hash_token


class RefreshTokenRepository:
    """Repository for refresh token database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self._session = session

    async def create(self, token: str, user_id: str, expires_at: datetime) -> RefreshTokenModel:
        """Store a new refresh token.

        Args:
            token: The raw JWT refresh token.
            user_id: Owner of the token.
            expires_at: When the stored record stops being accepted.

        Returns:
            The stored model.
        """
        model = RefreshTokenModel(
            token_hash=hash_token(token),
            user_id=user_id,
            expires_at=expires_at,
        )
        self._session.add(model)
        await self._session.flush()
        return model

    async def get_by_token(self, token: str) -> RefreshTokenModel | None:
        """Look up a refresh token with its owner eagerly loaded.

        Args:
            token: The raw JWT refresh token.

        Returns:
            The RefreshTokenModel if found, None otherwise.
        """
        stmt = (
            select(RefreshTokenModel)
            .where(RefreshTokenModel.token_hash == hash_token(token))
            .options(selectinload(RefreshTokenModel.user))
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def delete_by_token(self, token: str, user_id: str | None = None) -> int:
        """Delete the record for a raw token value.

        Args:
            token: The raw JWT refresh token.
            user_id: If given, only delete the record when it belongs to this user.

        Returns:
            Number of tokens deleted (0 if there was none).
        """
        stmt = delete(RefreshTokenModel).where(
            RefreshTokenModel.token_hash == hash_token(token)
        )
        if user_id is not None:
            stmt = stmt.where(RefreshTokenModel.user_id == user_id)
        result = await self._session.execute(stmt)
        return result.rowcount

    async def delete_by_id(self, token_id: str) -> bool:
        result = await self._session.execute(
            delete(RefreshTokenModel).where(RefreshTokenModel.id == token_id)
        )
        return result.rowcount > 0

    async def delete_all_for_user(self, user_id: str) -> int:
        """Revoke every refresh token of a user.

        Args:
            user_id: The user's UUID.

        Returns:
            Number of tokens deleted.
        """
        result = await self._session.execute(
            delete(RefreshTokenModel).where(RefreshTokenModel.user_id == user_id)
        )
        return result.rowcount

    async def delete_expired(self) -> int:
        """Delete all refresh tokens past their stored expiry.

        Returns:
            Number of tokens deleted.
        """
        result = await self._session.execute(
            delete(RefreshTokenModel).where(RefreshTokenModel.expires_at < utcnow()),
            execution_options=FETCH_SYNC,
        )
        return result.rowcount

"""Ephemeral token store.

Groups the refresh, password-reset and email-verification repositories that
share one session, and purges records that can no longer be redeemed.
"""

from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.core.logging import get_logger
from inkpost.infrastructure.persistence.repositories.email_verification_repository import (
    EmailVerificationRepository,
)
from inkpost.infrastructure.persistence.repositories.password_reset_repository import (
    PasswordResetRepository,
)
from inkpost.infrastructure.persistence.repositories.refresh_token_repository import (
    RefreshTokenRepository,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class PurgeResult:
    """Number of rows removed by a purge, per token kind."""

    refresh_tokens: int = 0
    password_reset_tokens: int = 0
    email_verification_tokens: int = 0

    @property
    def total(self) -> int:
        return self.refresh_tokens + self.password_reset_tokens + self.email_verification_tokens


class TokenStore:
    """Access to every kind of stored token through a single session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.refresh_tokens = RefreshTokenRepository(session)
        self.password_resets = PasswordResetRepository(session)
        self.email_verifications = EmailVerificationRepository(session)

    async def purge_expired(self, used_retention: timedelta = timedelta(days=7)) -> PurgeResult:
        """Delete tokens that can no longer be redeemed.

        Refresh tokens are removed once past their stored expiry. Reset and
        verification tokens are removed when expired, or when used and
        created before ``used_retention`` ago. The caller commits.

        Args:
            used_retention: How long used reset/verification tokens are kept.

        Returns:
            Counts of deleted rows.
        """
        result = PurgeResult(
            refresh_tokens=await self.refresh_tokens.delete_expired(),
            password_reset_tokens=await self.password_resets.delete_stale(used_retention),
            email_verification_tokens=await self.email_verifications.delete_stale(used_retention),
        )
        logger.debug(
            "Purged stale tokens",
            refresh_tokens=result.refresh_tokens,
            password_reset_tokens=result.password_reset_tokens,
            email_verification_tokens=result.email_verification_tokens,
        )
        return result

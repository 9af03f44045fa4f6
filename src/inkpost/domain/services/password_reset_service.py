"""Service for password reset logic.

Handles token generation, sending reset emails, and resetting passwords.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.core.config import Settings
from inkpost.core.logging import get_logger
from inkpost.core.timeutil import utcnow
from inkpost.domain.exceptions import InvalidOrExpiredTokenError, WeakPasswordError
from inkpost.domain.services.password_validator import (
    PasswordValidator,
    default_password_validator,
)
from inkpost.infrastructure.auth.password_hasher import PasswordHasher, generate_opaque_token
from inkpost.infrastructure.persistence.models import UserModel
from inkpost.infrastructure.persistence.repositories.token_store import TokenStore
from inkpost.infrastructure.persistence.repositories.user_repository import UserRepository
from inkpost.infrastructure.services.email_service import EmailService

logger = get_logger(__name__)

INVALID_RESET_TOKEN = "Invalid or expired reset token"


class PasswordResetService:
    """Service for handling password reset business logic."""

    def __init__(
        self,
        session: AsyncSession,
        user_repo: UserRepository,
        token_store: TokenStore,
        hasher: PasswordHasher,
        email_service: EmailService,
        settings: Settings,
        password_validator: PasswordValidator = default_password_validator,
    ) -> None:
        """Initialize the password reset service.

        Args:
            session: SQLAlchemy async session.
            user_repo: Repository for user operations.
            token_store: Reset and refresh token repositories.
            hasher: Password hasher.
            email_service: Service for sending emails.
            settings: Application settings (token lifetime, frontend URL).
            password_validator: Strength policy for the new password.
        """
        self.session = session
        self.user_repo = user_repo
        self.token_store = token_store
        self.hasher = hasher
        self.email_service = email_service
        self.settings = settings
        self.password_validator = password_validator

    def build_reset_url(self, token: str) -> str:
        return f"{self.settings.frontend_url.rstrip('/')}/reset-password?token={token}"

    async def request_reset(self, email: str) -> None:
        """Issue a reset token and mail it, if the account exists.

        Always returns None so callers cannot tell whether the email is
        registered.

        Args:
            email: Email address the reset was requested for.
        """
        user = await self.user_repo.get_by_email(email)
        if user is None:
            logger.info("Password reset requested for unknown email")
            return

        raw_token = generate_opaque_token()
        await self.token_store.password_resets.create(
            email=user.email,
            token=raw_token,
            expires_at=utcnow() + self.settings.password_reset_lifetime,
        )
        await self.session.commit()

        logger.info("Sending password reset email", user_id=user.id)
        sent = await self.email_service.send_password_reset_email(
            user.email, user.name or user.username, self.build_reset_url(raw_token)
        )
        if not sent:
            logger.error("Failed to send password reset email", user_id=user.id)

    async def reset_password(self, token_plain: str, new_password: str) -> UserModel:
        """Reset a user's password using a valid token.

        The password update, the token redemption and the revocation of every
        refresh token of the user commit together or not at all.

        Args:
            token_plain: The raw token string sent to the user.
            new_password: The new password to set.

        Returns:
            The user whose password was reset.

        Raises:
            InvalidOrExpiredTokenError: If the token is unknown, expired, used,
                or is redeemed concurrently by another request.
            WeakPasswordError: If the new password fails the strength policy.
        """
        token = await self.token_store.password_resets.get_usable_by_token(token_plain)
        if token is None:
            logger.info("Password reset failed: token invalid or expired")
            raise InvalidOrExpiredTokenError(INVALID_RESET_TOKEN)

        strength = self.password_validator.validate(new_password)
        if not strength.valid:
            raise WeakPasswordError(strength.errors)

        user = await self.user_repo.get_by_email(token.email)
        if user is None:
            logger.warning("Password reset failed: account no longer exists", token_id=token.id)
            raise InvalidOrExpiredTokenError(INVALID_RESET_TOKEN)

        password_hash = self.hasher.hash(new_password)
        try:
            await self.user_repo.update_password(user.id, password_hash)
            if not await self.token_store.password_resets.mark_as_used(token.id):
                raise InvalidOrExpiredTokenError(INVALID_RESET_TOKEN)
            revoked_count = await self.token_store.refresh_tokens.delete_all_for_user(user.id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Password reset successfully",
            user_id=user.id,
            refresh_tokens_revoked=revoked_count,
        )
        return user

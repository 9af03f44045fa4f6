"""Service for email verification logic.

Handles token generation, sending verification emails, and verifying tokens.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.core.config import Settings
from inkpost.core.logging import get_logger
from inkpost.core.timeutil import utcnow
from inkpost.domain.exceptions import InvalidOrExpiredTokenError
from inkpost.infrastructure.auth.password_hasher import generate_opaque_token
from inkpost.infrastructure.persistence.repositories.token_store import TokenStore
from inkpost.infrastructure.persistence.repositories.user_repository import UserRepository
from inkpost.infrastructure.services.email_service import EmailService

logger = get_logger(__name__)

INVALID_VERIFICATION_TOKEN = "Invalid or expired verification token"


class EmailVerificationService:
    """Service for handling email verification business logic."""

    def __init__(
        self,
        session: AsyncSession,
        user_repo: UserRepository,
        token_store: TokenStore,
        email_service: EmailService,
        settings: Settings,
    ) -> None:
        """Initialize the email verification service.

        Args:
            session: SQLAlchemy async session.
            user_repo: Repository for user operations.
            token_store: Verification token repository access.
            email_service: Service for sending emails.
            settings: Application settings (token lifetime, frontend URL).
        """
        self.session = session
        self.user_repo = user_repo
        self.token_store = token_store
        self.email_service = email_service
        self.settings = settings

    def build_verification_url(self, token: str) -> str:
        return f"{self.settings.frontend_url.rstrip('/')}/verify-email?token={token}"

    async def send_verification_email(self, user_id: str, email: str, name: str) -> bool:
        """Generate a verification token and send the verification email.

        Any previously issued token for the email stops working.

        Args:
            user_id: ID of the user to verify (for logging).
            email: Email address to send the verification link to.
            name: Name used in the greeting.

        Returns:
            True if email was sent successfully, False otherwise.
        """
        raw_token = generate_opaque_token()
        await self.token_store.email_verifications.upsert(
            email=email,
            token=raw_token,
            expires_at=utcnow() + self.settings.email_verification_lifetime,
        )
        await self.session.commit()

        logger.info("Sending verification email", user_id=user_id)
        success = await self.email_service.send_verification_email(
            email, name, self.build_verification_url(raw_token)
        )
        if not success:
            logger.error("Failed to send verification email", user_id=user_id)
        return success

    async def verify_email(self, token_plain: str) -> str:
        """Verify an email address using a token.

        Args:
            token_plain: The raw token string.

        Returns:
            The verified email address.

        Raises:
            InvalidOrExpiredTokenError: If the token is unknown, expired or used.
        """
        token = await self.token_store.email_verifications.get_usable_by_token(token_plain)
        if token is None:
            logger.info("Email verification failed: token invalid or expired")
            raise InvalidOrExpiredTokenError(INVALID_VERIFICATION_TOKEN)

        email = token.email
        try:
            await self.user_repo.mark_verified(email)
            if not await self.token_store.email_verifications.mark_as_used(token.id):
                raise InvalidOrExpiredTokenError(INVALID_VERIFICATION_TOKEN)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Email verified successfully", token_id=token.id)
        return email

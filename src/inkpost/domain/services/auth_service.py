"""Session and authentication service.

Owns the whole session lifecycle: registration, login, access token
refresh, logout, password change and reset, email verification and account
deletion. It is the only component that mints or revokes tokens.

Every method raises an ``AuthServiceError`` subclass for expected failures.
Emails are sent after the database commit and their failures are only
logged.
"""

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.core.config import Settings
from inkpost.core.logging import get_logger
from inkpost.core.timeutil import as_utc, utcnow
from inkpost.domain.exceptions import (
    DuplicateIdentityError,
    EmailAlreadyVerifiedError,
    InvalidCredentialsError,
    InvalidCurrentPasswordError,
    InvalidTokenError,
    PasswordReuseError,
    TokenExpiredError,
    UserNotFoundError,
    WeakPasswordError,
)
from inkpost.domain.roles import UserRole
from inkpost.domain.services.email_verification_service import EmailVerificationService
from inkpost.domain.services.password_reset_service import PasswordResetService
from inkpost.domain.services.password_validator import (
    PasswordValidator,
    default_password_validator,
)
from inkpost.infrastructure.auth.jwt_service import JWTService
from inkpost.infrastructure.auth.password_hasher import PasswordHasher
from inkpost.infrastructure.auth.token_types import TokenClaims
from inkpost.infrastructure.persistence.models import UserModel
from inkpost.infrastructure.persistence.repositories.token_store import PurgeResult, TokenStore
from inkpost.infrastructure.persistence.repositories.user_repository import UserRepository
from inkpost.infrastructure.services.email_service import EmailService

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a successful registration or login."""

    user: UserModel
    access_token: str
    refresh_token: str
    expires_in: int


def claims_for(user: UserModel) -> TokenClaims:
    return TokenClaims(user_id=user.id, email=user.email, role=user.role)


def display_name(user: UserModel) -> str:
    return user.name or user.username


class AuthService:
    """Service for session and credential lifecycle operations."""

    def __init__(
        self,
        session: AsyncSession,
        user_repo: UserRepository,
        token_store: TokenStore,
        hasher: PasswordHasher,
        jwt_service: JWTService,
        email_service: EmailService,
        settings: Settings,
        password_validator: PasswordValidator = default_password_validator,
    ) -> None:
        """Initialize the auth service.

        Args:
            session: SQLAlchemy async session shared by the repositories.
            user_repo: Repository for user operations.
            token_store: Refresh, reset and verification token repositories.
            hasher: Password hasher.
            jwt_service: Access and refresh token codec.
            email_service: Service for sending emails.
            settings: Application settings.
            password_validator: Strength policy for new passwords.
        """
        self.session = session
        self.user_repo = user_repo
        self.token_store = token_store
        self.hasher = hasher
        self.jwt_service = jwt_service
        self.email_service = email_service
        self.settings = settings
        self.password_validator = password_validator

        self.password_resets = PasswordResetService(
            session=session,
            user_repo=user_repo,
            token_store=token_store,
            hasher=hasher,
            email_service=email_service,
            settings=settings,
            password_validator=password_validator,
        )
        self.email_verifications = EmailVerificationService(
            session=session,
            user_repo=user_repo,
            token_store=token_store,
            email_service=email_service,
            settings=settings,
        )

    def _check_strength(self, password: str) -> None:
        strength = self.password_validator.validate(password)
        if not strength.valid:
            raise WeakPasswordError(strength.errors)

    async def _issue_session(self, user: UserModel) -> AuthResult:
        """Mint a token pair and store the refresh token. The caller commits."""
        access_token, refresh_token = self.jwt_service.create_token_pair(claims_for(user))
        await self.token_store.refresh_tokens.create(
            token=refresh_token,
            user_id=user.id,
            expires_at=utcnow() + self.settings.refresh_token_store_lifetime,
        )
        return AuthResult(
            user=user,
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=self.jwt_service.get_expires_in(),
        )

    async def register(
        self,
        email: str,
        username: str,
        password: str,
        name: str | None = None,
    ) -> AuthResult:
        """Create an unverified account and sign it in.

        Args:
            email: Email address (compared case-insensitively).
            username: Unique username.
            password: Plaintext password.
            name: Optional display name.

        Returns:
            The new user with a fresh token pair.

        Raises:
            DuplicateIdentityError: If the email or username is taken.
            WeakPasswordError: If the password fails the strength policy.
        """
        if await self.user_repo.email_exists(email):
            raise DuplicateIdentityError("email")
        if await self.user_repo.username_exists(username):
            raise DuplicateIdentityError("username")
        self._check_strength(password)

        user = UserModel(
            email=email.lower(),
            username=username,
            password_hash=self.hasher.hash(password),
            name=name,
            role=UserRole.USER.value,
            verified=False,
        )
        try:
            await self.user_repo.create(user)
            result = await self._issue_session(user)
            await self.session.commit()
        except IntegrityError as e:
            # Lost a race with a concurrent registration
            await self.session.rollback()
            field = "email" if await self.user_repo.email_exists(email) else "username"
            raise DuplicateIdentityError(field) from e

        logger.info("User registered", user_id=user.id)

        await self.email_service.send_welcome_email(user.email, display_name(user))
        try:
            await self.email_verifications.send_verification_email(
                user.id, user.email, display_name(user)
            )
        except Exception as e:
            # The account is already committed; the user can ask for a new link.
            # Detach it first so the rollback does not expire the returned user.
            self.session.expunge(user)
            await self.session.rollback()
            logger.error(
                "Failed to issue verification email",
                user_id=user.id,
                error=str(e),
                exc_info=True,
            )
        return result

    async def login(self, email: str, password: str) -> AuthResult:
        """Authenticate with email and password.

        Other sessions of the user stay valid.

        Raises:
            InvalidCredentialsError: If the email is unknown or the password is wrong.
        """
        user = await self.user_repo.get_by_email(email)
        if user is None:
            self.hasher.dummy_verify(password)
            logger.info("Login failed: unknown email")
            raise InvalidCredentialsError()

        if not self.hasher.verify(password, user.password_hash):
            logger.info("Login failed: wrong password", user_id=user.id)
            raise InvalidCredentialsError()

        if self.hasher.needs_rehash(user.password_hash):
            await self.user_repo.update_password(user.id, self.hasher.hash(password))
            logger.info("Password hash upgraded", user_id=user.id)

        result = await self._issue_session(user)
        await self.session.commit()
        logger.info("User logged in", user_id=user.id)
        return result

    async def refresh(self, refresh_token: str) -> str:
        """Exchange a stored refresh token for a new access token.

        The refresh token itself is not rotated.

        Raises:
            TokenExpiredError: If the token or its stored record has expired.
            InvalidTokenError: If the token is forged, malformed or revoked.
        """
        self.jwt_service.verify_refresh_token(refresh_token)

        record = await self.token_store.refresh_tokens.get_by_token(refresh_token)
        if record is None:
            raise InvalidTokenError("Invalid refresh token")

        if as_utc(record.expires_at) < utcnow():
            await self.token_store.refresh_tokens.delete_by_id(record.id)
            await self.session.commit()
            raise TokenExpiredError("Refresh token expired")

        # Claims come from the current row, not the token, so role changes apply
        user = await self.user_repo.get_by_id(record.user_id)
        if user is None:
            raise InvalidTokenError("Invalid refresh token")
        return self.jwt_service.create_access_token(claims_for(user))

    async def logout(self, refresh_token: str, user_id: str | None = None) -> None:
        """Revoke one refresh token. Unknown tokens are ignored.

        Args:
            refresh_token: The raw refresh token to revoke.
            user_id: When given, only a token owned by this user is revoked.
        """
        deleted = await self.token_store.refresh_tokens.delete_by_token(refresh_token, user_id)
        await self.session.commit()
        logger.info("User logged out", user_id=user_id, revoked=deleted)

    async def logout_all(self, user_id: str) -> int:
        """Revoke every refresh token of a user.

        Returns:
            Number of sessions revoked.
        """
        count = await self.token_store.refresh_tokens.delete_all_for_user(user_id)
        await self.session.commit()
        logger.info("User logged out from all devices", user_id=user_id, revoked=count)
        return count

    async def get_current_user(self, user_id: str) -> UserModel:
        """Load a user by ID.

        Raises:
            UserNotFoundError: If the user does not exist.
        """
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError()
        return user

    async def update_profile(self, user_id: str, **changes: str | None) -> UserModel:
        """Update name, bio and avatar. Keys not passed are left unchanged."""
        user = await self.get_current_user(user_id)
        await self.user_repo.update_profile(user, **changes)
        await self.session.commit()
        logger.info("Profile updated", user_id=user_id, fields=sorted(changes))
        return user

    async def change_password(
        self, user_id: str, current_password: str, new_password: str
    ) -> None:
        """Change a password and sign the user out everywhere.

        Raises:
            UserNotFoundError: If the user does not exist.
            InvalidCurrentPasswordError: If ``current_password`` is wrong.
            WeakPasswordError: If the new password fails the strength policy.
            PasswordReuseError: If the new password equals the current one.
        """
        user = await self.get_current_user(user_id)

        if not self.hasher.verify(current_password, user.password_hash):
            raise InvalidCurrentPasswordError()
        self._check_strength(new_password)
        if self.hasher.verify(new_password, user.password_hash):
            raise PasswordReuseError()

        await self.user_repo.update_password(user.id, self.hasher.hash(new_password))
        revoked = await self.token_store.refresh_tokens.delete_all_for_user(user.id)
        await self.session.commit()
        logger.info("Password changed", user_id=user.id, refresh_tokens_revoked=revoked)

        await self.email_service.send_password_changed_email(user.email, display_name(user))

    async def forgot_password(self, email: str) -> None:
        """Start a password reset. Silent for unknown emails."""
        await self.password_resets.request_reset(email)

    async def reset_password(self, token: str, new_password: str) -> None:
        """Redeem a reset token. See ``PasswordResetService.reset_password``."""
        await self.password_resets.reset_password(token, new_password)

    async def send_verification_email(self, user_id: str, email: str, name: str) -> bool:
        return await self.email_verifications.send_verification_email(user_id, email, name)

    async def resend_verification_email(self, user_id: str) -> bool:
        """Issue a new verification email for a signed-in user.

        Raises:
            UserNotFoundError: If the user does not exist.
            EmailAlreadyVerifiedError: If the email is already verified.
        """
        user = await self.get_current_user(user_id)
        if user.verified:
            raise EmailAlreadyVerifiedError()
        return await self.send_verification_email(user.id, user.email, display_name(user))

    async def verify_email(self, token: str) -> str:
        """Redeem a verification token and return the verified email."""
        return await self.email_verifications.verify_email(token)

    async def delete_account(self, user_id: str) -> None:
        """Hard-delete an account with its sessions and pending tokens.

        Raises:
            UserNotFoundError: If the user does not exist.
        """
        user = await self.get_current_user(user_id)
        email = user.email
        try:
            await self.token_store.password_resets.delete_for_email(email)
            await self.token_store.email_verifications.delete_for_email(email)
            await self.user_repo.delete(user.id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("Account deleted", user_id=user_id)

    async def cleanup_expired_tokens(self) -> PurgeResult:
        """Purge tokens that can no longer be redeemed."""
        result = await self.token_store.purge_expired(self.settings.used_token_retention)
        await self.session.commit()
        logger.info("Expired tokens cleaned up", deleted=result.total)
        return result

    async def is_email_available(self, email: str) -> bool:
        return not await self.user_repo.email_exists(email)

    async def is_username_available(self, username: str) -> bool:
        return not await self.user_repo.username_exists(username)

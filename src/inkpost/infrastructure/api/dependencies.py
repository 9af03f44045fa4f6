"""FastAPI dependencies for authentication and authorization.

Provides dependencies for extracting and validating bearer tokens from
requests and for building the auth service from the components created at
startup and stored on ``app.state``.
"""

from typing import Annotated

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.core.config import Settings
from inkpost.core.logging import get_logger
from inkpost.domain.exceptions import (
    AuthenticationRequiredError,
    AuthServiceError,
    InvalidTokenError,
    TokenExpiredError,
    UnauthorizedError,
)
from inkpost.domain.services.auth_service import AuthService
from inkpost.infrastructure.auth.jwt_service import JWTService
from inkpost.infrastructure.auth.password_hasher import PasswordHasher
from inkpost.infrastructure.persistence.database import get_db_session
from inkpost.infrastructure.persistence.models import UserModel
from inkpost.infrastructure.persistence.repositories import TokenStore, UserRepository
from inkpost.infrastructure.services.email_service import EmailService

logger = get_logger(__name__)

INVALID_AUTH_TOKEN = "Invalid authentication token"


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_jwt_service(request: Request) -> JWTService:
    return request.app.state.jwt_service


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_email_service(request: Request) -> EmailService:
    return request.app.state.email_service


def get_auth_service(
    request: Request,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> AuthService:
    """Build the auth service for one request, bound to its session."""
    return AuthService(
        session=session,
        user_repo=UserRepository(session),
        token_store=TokenStore(session),
        hasher=get_password_hasher(request),
        jwt_service=get_jwt_service(request),
        email_service=get_email_service(request),
        settings=get_app_settings(request),
    )


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token of a ``Bearer <token>`` header, or None."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def _authenticate(
    request: Request, authorization: str | None, session: AsyncSession
) -> UserModel:
    token = extract_bearer_token(authorization)
    if token is None:
        raise AuthenticationRequiredError()

    try:
        claims = get_jwt_service(request).verify_access_token(token)
    except TokenExpiredError as e:
        logger.info("Authentication failed: token expired")
        raise TokenExpiredError("Authentication token expired") from e
    except InvalidTokenError as e:
        logger.info("Authentication failed: invalid token", error=e.message)
        raise InvalidTokenError(INVALID_AUTH_TOKEN) from e

    # Always re-read the user so deleted accounts and role changes take effect
    user = await UserRepository(session).get_by_id(claims.user_id)
    if user is None:
        logger.info("Authentication failed: user no longer exists", user_id=claims.user_id)
        raise InvalidTokenError(INVALID_AUTH_TOKEN)
    return user


async def get_current_user(
    request: Request,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    authorization: Annotated[str | None, Header()] = None,
) -> UserModel:
    """Extract and validate the current user from the Authorization header.

    Args:
        request: Incoming request.
        session: Database session for loading the user.
        authorization: The Authorization header value ("Bearer <token>").

    Returns:
        The authenticated user, freshly loaded from the database.

    Raises:
        AuthenticationRequiredError: 401 if no bearer token was sent.
        TokenExpiredError: 401 if the access token has expired.
        InvalidTokenError: 401 for any other token failure or a deleted user.
    """
    return await _authenticate(request, authorization, session)


async def get_optional_user(
    request: Request,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    authorization: Annotated[str | None, Header()] = None,
) -> UserModel | None:
    """Like ``get_current_user`` but returns None instead of failing."""
    try:
        return await _authenticate(request, authorization, session)
    except AuthServiceError:
        return None


# Type aliases for dependency injection
CurrentUser = Annotated[UserModel, Depends(get_current_user)]
OptionalUser = Annotated[UserModel | None, Depends(get_optional_user)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


async def require_admin(current_user: CurrentUser) -> UserModel:
    """Ensure the current user is an admin.

    Raises:
        UnauthorizedError: 403 if the user is not an admin.
    """
    if not current_user.is_admin:
        logger.info("Admin access denied", user_id=current_user.id)
        raise UnauthorizedError("Admin access required")
    return current_user


async def require_verified_email(current_user: CurrentUser) -> UserModel:
    """Ensure the current user has verified their email address.

    Raises:
        UnauthorizedError: 403 if the email is not verified.
    """
    if not current_user.verified:
        raise UnauthorizedError("Email verification required")
    return current_user


AdminUser = Annotated[UserModel, Depends(require_admin)]
VerifiedUser = Annotated[UserModel, Depends(require_verified_email)]

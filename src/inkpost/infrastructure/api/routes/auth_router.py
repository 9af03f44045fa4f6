"""Authentication API routes.

Provides endpoints for registration, login, token management, password
management, email verification and account lifecycle. Expected failures are
raised as ``AuthServiceError`` subclasses and rendered by the application's
exception handler.
"""

from typing import Annotated

from fastapi import APIRouter, Header, status
from pydantic import EmailStr

from inkpost.core.logging import get_logger
from inkpost.infrastructure.api.dependencies import (
    AdminUser,
    AuthServiceDep,
    CurrentUser,
    OptionalUser,
)
from inkpost.infrastructure.api.schemas import (
    AuthResponse,
    AuthStatusResponse,
    AvailabilityResponse,
    ChangePasswordRequest,
    ErrorResponse,
    ForgotPasswordRequest,
    LoginRequest,
    LogoutAllResponse,
    MessageResponse,
    RefreshRequest,
    RefreshResponse,
    RegisterRequest,
    ResetPasswordRequest,
    TokenCleanupResponse,
    UpdateProfileRequest,
    UserResponse,
    VerifyEmailRequest,
)

logger = get_logger(__name__)

router = APIRouter()

UNAUTHORIZED = {401: {"model": ErrorResponse, "description": "Missing, invalid or expired token"}}


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=AuthResponse,
    responses={
        409: {"model": ErrorResponse, "description": "Email or username already exists"},
        422: {"model": ErrorResponse, "description": "Weak password or invalid body"},
    },
)
async def register(request: RegisterRequest, auth_service: AuthServiceDep) -> AuthResponse:
    """Register a new user and return a token pair.

    The account starts unverified; a welcome email and a verification email
    are sent after the account is created.
    """
    result = await auth_service.register(
        email=request.email,
        username=request.username,
        password=request.password,
        name=request.name,
    )
    return AuthResponse(
        user=UserResponse.model_validate(result.user),
        access_token=result.access_token,
        refresh_token=result.refresh_token,
        expires_in=result.expires_in,
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={401: {"model": ErrorResponse, "description": "Invalid credentials"}},
)
async def login(request: LoginRequest, auth_service: AuthServiceDep) -> AuthResponse:
    """Authenticate with email and password."""
    result = await auth_service.login(request.email, request.password)
    return AuthResponse(
        user=UserResponse.model_validate(result.user),
        access_token=result.access_token,
        refresh_token=result.refresh_token,
        expires_in=result.expires_in,
    )


@router.post("/refresh", response_model=RefreshResponse, responses=UNAUTHORIZED)
async def refresh(request: RefreshRequest, auth_service: AuthServiceDep) -> RefreshResponse:
    """Exchange a refresh token for a new access token."""
    access_token = await auth_service.refresh(request.refresh_token)
    return RefreshResponse(
        access_token=access_token,
        expires_in=auth_service.jwt_service.get_expires_in(),
    )


@router.post("/logout", response_model=MessageResponse, responses=UNAUTHORIZED)
async def logout(
    current_user: CurrentUser,
    auth_service: AuthServiceDep,
    x_refresh_token: Annotated[str | None, Header()] = None,
) -> MessageResponse:
    """Revoke the refresh token sent in the ``X-Refresh-Token`` header."""
    if x_refresh_token:
        await auth_service.logout(x_refresh_token, user_id=current_user.id)
    return MessageResponse(message="Logout successful")


@router.post("/logout-all", response_model=LogoutAllResponse, responses=UNAUTHORIZED)
async def logout_all(current_user: CurrentUser, auth_service: AuthServiceDep) -> LogoutAllResponse:
    """Revoke every refresh token of the current user."""
    revoked = await auth_service.logout_all(current_user.id)
    return LogoutAllResponse(message="Logged out from all devices", revoked_sessions=revoked)


@router.get("/me", response_model=UserResponse, responses=UNAUTHORIZED)
async def me(current_user: CurrentUser) -> UserResponse:
    return UserResponse.model_validate(current_user)


@router.put("/profile", response_model=UserResponse, responses=UNAUTHORIZED)
async def update_profile(
    request: UpdateProfileRequest,
    current_user: CurrentUser,
    auth_service: AuthServiceDep,
) -> UserResponse:
    """Update name, bio or avatar. Only fields present in the body change."""
    user = await auth_service.update_profile(
        current_user.id, **request.model_dump(exclude_unset=True)
    )
    return UserResponse.model_validate(user)


@router.post(
    "/change-password",
    response_model=MessageResponse,
    responses={
        **UNAUTHORIZED,
        400: {"model": ErrorResponse, "description": "Wrong current password or reuse"},
        422: {"model": ErrorResponse, "description": "Weak password"},
    },
)
async def change_password(
    request: ChangePasswordRequest,
    current_user: CurrentUser,
    auth_service: AuthServiceDep,
) -> MessageResponse:
    """Change the password and sign out every session."""
    await auth_service.change_password(
        current_user.id, request.current_password, request.new_password
    )
    return MessageResponse(message="Password changed successfully")


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    request: ForgotPasswordRequest, auth_service: AuthServiceDep
) -> MessageResponse:
    """Request a password reset email.

    The response is identical whether or not the email is registered.
    """
    await auth_service.forgot_password(request.email)
    return MessageResponse(
        message="If an account with that email exists, a password reset link has been sent"
    )


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid or expired token"},
        422: {"model": ErrorResponse, "description": "Weak password"},
    },
)
async def reset_password(
    request: ResetPasswordRequest, auth_service: AuthServiceDep
) -> MessageResponse:
    await auth_service.reset_password(request.token, request.new_password)
    return MessageResponse(message="Password reset successfully")


@router.post(
    "/verify-email/send",
    response_model=MessageResponse,
    responses={**UNAUTHORIZED, 400: {"model": ErrorResponse, "description": "Already verified"}},
)
async def send_verification_email(
    current_user: CurrentUser, auth_service: AuthServiceDep
) -> MessageResponse:
    await auth_service.resend_verification_email(current_user.id)
    return MessageResponse(message="Verification email sent")


@router.post(
    "/verify-email",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid or expired token"}},
)
async def verify_email(request: VerifyEmailRequest, auth_service: AuthServiceDep) -> MessageResponse:
    await auth_service.verify_email(request.token)
    return MessageResponse(message="Email verified successfully")


@router.delete("/account", response_model=MessageResponse, responses=UNAUTHORIZED)
async def delete_account(current_user: CurrentUser, auth_service: AuthServiceDep) -> MessageResponse:
    """Permanently delete the current user's account."""
    await auth_service.delete_account(current_user.id)
    return MessageResponse(message="Account deleted successfully")


@router.get("/check/email/{email}", response_model=AvailabilityResponse)
async def check_email(email: EmailStr, auth_service: AuthServiceDep) -> AvailabilityResponse:
    return AvailabilityResponse(available=await auth_service.is_email_available(email))


@router.get("/check/username/{username}", response_model=AvailabilityResponse)
async def check_username(username: str, auth_service: AuthServiceDep) -> AvailabilityResponse:
    return AvailabilityResponse(available=await auth_service.is_username_available(username))


@router.get("/status", response_model=AuthStatusResponse)
async def auth_status(current_user: OptionalUser) -> AuthStatusResponse:
    """Report whether the request carries a valid access token."""
    return AuthStatusResponse(
        authenticated=current_user is not None,
        user=UserResponse.model_validate(current_user) if current_user else None,
    )


@router.post(
    "/cleanup-tokens",
    response_model=TokenCleanupResponse,
    responses={**UNAUTHORIZED, 403: {"model": ErrorResponse, "description": "Admins only"}},
)
async def cleanup_tokens(admin: AdminUser, auth_service: AuthServiceDep) -> TokenCleanupResponse:
    """Purge expired and stale tokens (admin only)."""
    result = await auth_service.cleanup_expired_tokens()
    logger.info("Token cleanup triggered", user_id=admin.id, deleted=result.total)
    return TokenCleanupResponse(
        refresh_tokens=result.refresh_tokens,
        password_reset_tokens=result.password_reset_tokens,
        email_verification_tokens=result.email_verification_tokens,
        total=result.total,
    )

"""Request and response schemas."""

from inkpost.infrastructure.api.schemas.auth_schemas import (
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

__all__ = [
    "AuthResponse",
    "AuthStatusResponse",
    "AvailabilityResponse",
    "ChangePasswordRequest",
    "ErrorResponse",
    "ForgotPasswordRequest",
    "LoginRequest",
    "LogoutAllResponse",
    "MessageResponse",
    "RefreshRequest",
    "RefreshResponse",
    "RegisterRequest",
    "ResetPasswordRequest",
    "TokenCleanupResponse",
    "UpdateProfileRequest",
    "UserResponse",
    "VerifyEmailRequest",
]

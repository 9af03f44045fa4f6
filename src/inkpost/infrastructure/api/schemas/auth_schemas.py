"""Pydantic schemas for authentication endpoints."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

USERNAME_PATTERN = r"^[a-zA-Z0-9_-]+$"


class RegisterRequest(BaseModel):
    """Request body for account registration.

    Password strength is checked by the service so that every violated rule
    is reported at once.
    """

    email: EmailStr = Field(..., max_length=255, description="User's email address")
    username: str = Field(
        ...,
        min_length=3,
        max_length=50,
        pattern=USERNAME_PATTERN,
        description="Letters, digits, underscores and hyphens only",
    )
    password: str = Field(..., min_length=1, description="User's password")
    name: str | None = Field(None, max_length=100, description="Display name")


class LoginRequest(BaseModel):
    """Request body for login."""

    email: EmailStr = Field(..., max_length=255, description="User's email address")
    password: str = Field(..., min_length=1, max_length=128, description="User's password")


class RefreshRequest(BaseModel):
    """Request body for access token refresh."""

    refresh_token: str = Field(..., min_length=1, description="Refresh token from login")


class UpdateProfileRequest(BaseModel):
    """Request body for profile updates. Omitted fields are left unchanged."""

    name: str | None = Field(None, max_length=100)
    bio: str | None = Field(None, max_length=500)
    avatar: str | None = Field(None, max_length=255, pattern=r"^https?://\S+$")


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1, max_length=128)
    new_password: str = Field(..., min_length=1)


class ForgotPasswordRequest(BaseModel):
    email: EmailStr = Field(..., max_length=255)


class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1, max_length=255, description="Token from the reset email")
    new_password: str = Field(..., min_length=1)


class VerifyEmailRequest(BaseModel):
    token: str = Field(
        ..., min_length=1, max_length=255, description="Token from the verification email"
    )


class UserResponse(BaseModel):
    """User information in auth responses."""

    id: str = Field(..., description="User ID")
    email: str = Field(..., description="User's email address")
    username: str = Field(..., description="Username")
    name: str | None = None
    bio: str | None = None
    avatar: str | None = None
    role: str = Field(..., description="USER or ADMIN")
    verified: bool = Field(..., description="Whether the email is verified")
    created_at: datetime = Field(..., description="When the user was created")
    updated_at: datetime = Field(..., description="When the user was last updated")

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    """Response for successful authentication (login/register)."""

    user: UserResponse = Field(..., description="User information")
    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")
    expires_in: int = Field(..., description="Access token expiration time in seconds")


class RefreshResponse(BaseModel):
    access_token: str = Field(..., description="New JWT access token")
    expires_in: int = Field(..., description="Access token expiration time in seconds")


class MessageResponse(BaseModel):
    message: str


class LogoutAllResponse(BaseModel):
    message: str
    revoked_sessions: int = Field(..., description="Number of refresh tokens revoked")


class AvailabilityResponse(BaseModel):
    available: bool


class AuthStatusResponse(BaseModel):
    authenticated: bool
    user: UserResponse | None = None


class TokenCleanupResponse(BaseModel):
    """Counts of purged tokens per kind."""

    refresh_tokens: int
    password_reset_tokens: int
    email_verification_tokens: int
    total: int


class ErrorResponse(BaseModel):
    """Body of every handled error response."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Human-readable error message")
    code: str = Field(..., description="Machine-readable error code")
    details: list[dict[str, str]] | None = Field(None, description="Per-rule failures")

"""Domain services."""

from inkpost.domain.services.auth_service import AuthResult, AuthService
from inkpost.domain.services.email_verification_service import EmailVerificationService
from inkpost.domain.services.password_reset_service import PasswordResetService
from inkpost.domain.services.password_validator import (
    PasswordStrength,
    PasswordValidationError,
    PasswordValidator,
    default_password_validator,
)

__all__ = [
    "AuthResult",
    "AuthService",
    "EmailVerificationService",
    "PasswordResetService",
    "PasswordStrength",
    "PasswordValidationError",
    "PasswordValidator",
    "default_password_validator",
]

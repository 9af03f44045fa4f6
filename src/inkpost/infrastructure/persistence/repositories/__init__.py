"""Repositories for database access."""

from inkpost.infrastructure.persistence.repositories.email_verification_repository import (
    EmailVerificationRepository,
)
from inkpost.infrastructure.persistence.repositories.password_reset_repository import (
    PasswordResetRepository,
)
from inkpost.infrastructure.persistence.repositories.refresh_token_repository import (
    RefreshTokenRepository,
)
from inkpost.infrastructure.persistence.repositories.token_hashing import hash_token
from inkpost.infrastructure.persistence.repositories.token_store import PurgeResult, TokenStore
from inkpost.infrastructure.persistence.repositories.user_repository import UserRepository

__all__ = [
    "EmailVerificationRepository",
    "PasswordResetRepository",
    "PurgeResult",
    "RefreshTokenRepository",
    "TokenStore",
    "UserRepository",
    "hash_token",
]

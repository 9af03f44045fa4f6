"""SQLAlchemy models for Inkpost.

Importing this package registers every table with ``Base.metadata``.
"""

from inkpost.infrastructure.persistence.models.email_verification import (
    EmailVerificationTokenModel,
)
from inkpost.infrastructure.persistence.models.password_reset import PasswordResetTokenModel
from inkpost.infrastructure.persistence.models.refresh_token import RefreshTokenModel
from inkpost.infrastructure.persistence.models.user import UserModel

__all__ = [
    "EmailVerificationTokenModel",
    "PasswordResetTokenModel",
    "RefreshTokenModel",
    "UserModel",
]

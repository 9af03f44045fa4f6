"""Authentication infrastructure components.

This module provides password hashing, opaque token generation and the JWT
token service.
"""

from inkpost.infrastructure.auth.jwt_service import JWTService
from inkpost.infrastructure.auth.password_hasher import PasswordHasher, generate_opaque_token
from inkpost.infrastructure.auth.token_types import TokenClaims, TokenType

__all__ = [
    "JWTService",
    "PasswordHasher",
    "TokenClaims",
    "TokenType",
    "generate_opaque_token",
]

"""JWT token service.

Creates and validates the two kinds of bearer tokens:

- access tokens, short-lived and never stored;
- refresh tokens, long-lived and also recorded in the token store so they
  can be revoked.

Each kind is signed with its own secret so a leaked access secret cannot be
used to mint refresh tokens and vice versa.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from pydantic import ValidationError

from inkpost.core.config import Settings
from inkpost.domain.exceptions import InvalidTokenError, TokenExpiredError
from inkpost.infrastructure.auth.token_types import TokenClaims, TokenType


class JWTService:
    """Service for creating and validating JWT tokens."""

    ALGORITHM = "HS256"

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        access_lifetime: timedelta = timedelta(hours=24),
        refresh_lifetime: timedelta = timedelta(days=30),
        issuer: str = "inkpost-api",
        audience: str = "inkpost-app",
    ) -> None:
        """Initialize the JWT service.

        Args:
            access_secret: Key for signing access tokens.
            refresh_secret: Key for signing refresh tokens.
            access_lifetime: Default access token lifetime.
            refresh_lifetime: Default refresh token lifetime.
            issuer: Value of the ``iss`` claim.
            audience: Value of the ``aud`` claim.

        Raises:
            ValueError: If both secrets are the same.
        """
        if access_secret == refresh_secret:
            raise ValueError("Access and refresh tokens must use different secrets")
        self._secrets = {
            TokenType.ACCESS: access_secret,
            TokenType.REFRESH: refresh_secret,
        }
        self._lifetimes = {
            TokenType.ACCESS: access_lifetime,
            TokenType.REFRESH: refresh_lifetime,
        }
        self.issuer = issuer
        self.audience = audience

    @classmethod
    def from_settings(cls, settings: Settings) -> "JWTService":
        return cls(
            access_secret=settings.access_token_secret,
            refresh_secret=settings.refresh_token_secret,
            access_lifetime=settings.access_token_lifetime,
            refresh_lifetime=settings.refresh_token_lifetime,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
        )

    def _encode(
        self,
        token_type: TokenType,
        claims: TokenClaims,
        expires_delta: timedelta | None,
    ) -> str:
        if expires_delta is None:
            expires_delta = self._lifetimes[token_type]

        now = datetime.now(timezone.utc)
        payload = {
            "iss": self.issuer,
            "aud": self.audience,
            "sub": claims.user_id,
            "iat": now,
            "exp": now + expires_delta,
            "user_id": claims.user_id,
            "email": claims.email,
            "role": claims.role,
            "type": token_type.value,
        }
        if token_type is TokenType.REFRESH:
            # Two refresh tokens minted in the same second must still differ
            payload["jti"] = str(uuid.uuid4())

        return jwt.encode(payload, self._secrets[token_type], algorithm=self.ALGORITHM)

    def _decode(self, token_type: TokenType, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(
                token,
                self._secrets[token_type],
                algorithms=[self.ALGORITHM],
                issuer=self.issuer,
                audience=self.audience,
                options={"require": ["exp", "iss", "aud", "sub"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError(f"{token_type.value.capitalize()} token expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid {token_type.value} token") from e

        if payload.get("type") != token_type.value:
            raise InvalidTokenError(f"Token type is not {token_type.value}")
        try:
            return TokenClaims.model_validate(payload)
        except ValidationError as e:
            raise InvalidTokenError(f"Invalid {token_type.value} token") from e

    def create_access_token(
        self, claims: TokenClaims, expires_delta: timedelta | None = None
    ) -> str:
        """Create a signed access token.

        Args:
            claims: Identity claims to embed.
            expires_delta: Custom lifetime. Defaults to the configured value.

        Returns:
            Encoded JWT access token.
        """
        return self._encode(TokenType.ACCESS, claims, expires_delta)

    def create_refresh_token(
        self, claims: TokenClaims, expires_delta: timedelta | None = None
    ) -> str:
        """Create a signed refresh token.

        Args:
            claims: Identity claims to embed.
            expires_delta: Custom lifetime. Defaults to the configured value.

        Returns:
            Encoded JWT refresh token.
        """
        return self._encode(TokenType.REFRESH, claims, expires_delta)

    def create_token_pair(self, claims: TokenClaims) -> tuple[str, str]:
        """Create an access token and a refresh token for the same identity."""
        return self.create_access_token(claims), self.create_refresh_token(claims)

    def verify_access_token(self, token: str) -> TokenClaims:
        """Verify an access token and return its claims.

        Raises:
            TokenExpiredError: If the signature is valid but the token expired.
            InvalidTokenError: For any other verification failure.
        """
        return self._decode(TokenType.ACCESS, token)

    def verify_refresh_token(self, token: str) -> TokenClaims:
        """Verify a refresh token and return its claims.

        Raises:
            TokenExpiredError: If the signature is valid but the token expired.
            InvalidTokenError: For any other verification failure.
        """
        return self._decode(TokenType.REFRESH, token)

    @staticmethod
    def decode_unverified(token: str) -> dict[str, Any] | None:
        """Read a token's payload without checking its signature.

        Only for diagnostics such as checking expiry before a round-trip.
        Never use the result for authorization decisions.
        """
        try:
            return jwt.decode(token, options={"verify_signature": False})
        except jwt.InvalidTokenError:
            return None

    def get_expiration(self, token: str) -> datetime | None:
        """Return the expiry of a token without verifying it."""
        payload = self.decode_unverified(token)
        if not payload or "exp" not in payload:
            return None
        try:
            return datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        except (TypeError, ValueError, OverflowError):
            return None

    def is_expired(self, token: str) -> bool:
        """Check expiry without verification. Undecodable tokens count as expired."""
        expiration = self.get_expiration(token)
        if expiration is None:
            return True
        return expiration < datetime.now(timezone.utc)

    def get_expires_in(self, token_type: TokenType = TokenType.ACCESS) -> int:
        """Get the default lifetime of a token kind in seconds."""
        return int(self._lifetimes[token_type].total_seconds())

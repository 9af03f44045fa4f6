"""Password hashing utility using Argon2.

Provides secure password hashing and verification using the Argon2id
algorithm, plus generation of the random opaque values used for refresh,
password-reset and email-verification tokens.
"""

import secrets

from argon2 import PasswordHasher as Argon2Hasher
from argon2.exceptions import InvalidHashError, VerifyMismatchError

from inkpost.core.config import Settings


class PasswordHasher:
    """Hash and verify passwords with a configurable work factor."""

    def __init__(
        self,
        time_cost: int = 3,
        memory_cost: int = 65536,
        parallelism: int = 4,
    ) -> None:
        """Initialize the hasher.

        Args:
            time_cost: Number of Argon2 iterations.
            memory_cost: Memory usage in KiB.
            parallelism: Number of parallel threads.
        """
        self._hasher = Argon2Hasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
        )
        self._dummy_hash: str | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "PasswordHasher":
        return cls(
            time_cost=settings.password_hash_time_cost,
            memory_cost=settings.password_hash_memory_cost,
            parallelism=settings.password_hash_parallelism,
        )

    def hash(self, password: str) -> str:
        """Hash a password using Argon2id.

        Args:
            password: The plaintext password to hash.

        Returns:
            The hashed password string.

        Example:
            >>> hasher = PasswordHasher()
            >>> hasher.hash("SecureP@ss123!").startswith("$argon2id$")
            True
        """
        return self._hasher.hash(password)

    def verify(self, password: str, hashed: str) -> bool:
        """Verify a password against a hash.

        Comparison is delegated to argon2, which is constant-time.

        Args:
            password: The plaintext password to verify.
            hashed: The hashed password to verify against.

        Returns:
            True if the password matches, False otherwise (including when the
            stored hash is malformed).

        Raises:
            argon2.exceptions.VerificationError: On any other argon2 failure.
        """
        try:
            return self._hasher.verify(hashed, password)
        except (VerifyMismatchError, InvalidHashError):
            return False

    def dummy_verify(self, password: str) -> None:
        """Spend the same time as a real verification against a throwaway hash.

        Used when the account does not exist so that response timing does not
        reveal whether an email is registered.
        """
        if self._dummy_hash is None:
            self._dummy_hash = self._hasher.hash(generate_opaque_token(16))
        self.verify(password, self._dummy_hash)

    def needs_rehash(self, hashed: str) -> bool:
        """Check if a hash was produced with outdated parameters.

        Should be called after a successful verification; if True, the
        password should be hashed again with the current parameters.
        """
        return self._hasher.check_needs_rehash(hashed)


def generate_opaque_token(byte_length: int = 32) -> str:
    """Generate a cryptographically secure random token.

    Args:
        byte_length: Number of random bytes (the result has twice as many
            hex characters).

    Returns:
        Hex-encoded random string.
    """
    return secrets.token_hex(byte_length)

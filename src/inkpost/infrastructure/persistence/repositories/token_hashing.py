"""Hashing of opaque and signed token values before they are stored."""

import hashlib


def hash_token(token: str) -> str:
    """Hash a token using SHA-256.

    Args:
        token: The raw token string.

    Returns:
        SHA-256 hex digest of the token.
    """
    return hashlib.sha256(token.encode()).hexdigest()


# For bulk deletes filtered on timestamps: SQLite loads naive datetimes that
# cannot be compared in Python against the aware cutoff.
FETCH_SYNC = {"synchronize_session": "fetch"}

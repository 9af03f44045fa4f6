"""User roles."""

from enum import Enum


class UserRole(str, Enum):
    """Role stored on each identity and carried in token claims."""

    USER = "USER"
    ADMIN = "ADMIN"

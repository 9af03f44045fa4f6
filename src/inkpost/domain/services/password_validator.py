"""Password strength validation.

Validates passwords against the account password policy:
- Between 8 and 128 characters
- At least one lowercase letter
- At least one uppercase letter
- At least one digit
- At least one special character
- Not one of a small list of very common passwords

All violated rules are reported together so clients can render a complete
checklist.
"""

import re
from dataclasses import dataclass, field


@dataclass(frozen=True)
class PasswordValidationError:
    """Represents a password validation error.

    Attributes:
        field: The field name (always 'password').
        message: Human-readable error message.
        code: Machine-readable error code.
    """

    field: str
    message: str
    code: str


@dataclass(frozen=True)
class PasswordStrength:
    """Outcome of validating a password."""

    valid: bool
    errors: list[PasswordValidationError] = field(default_factory=list)

    @property
    def messages(self) -> list[str]:
        return [error.message for error in self.errors]


COMMON_PASSWORDS = frozenset(
    {
        "password",
        "12345678",
        "qwerty123",
        "abc123456",
        "password123",
        "123456789",
        "welcome123",
    }
)


class PasswordValidator:
    """Validates password strength."""

    SPECIAL_CHARS = r"!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>\/?"

    def __init__(
        self,
        min_length: int = 8,
        max_length: int = 128,
        common_passwords: frozenset[str] = COMMON_PASSWORDS,
    ) -> None:
        """Initialize the password validator.

        Args:
            min_length: Minimum password length (default 8).
            max_length: Maximum password length (default 128).
            common_passwords: Lower-cased passwords that are always rejected.
        """
        self.min_length = min_length
        self.max_length = max_length
        self.common_passwords = common_passwords

    def validate(self, password: str) -> PasswordStrength:
        """Validate a password against the policy.

        Args:
            password: The password to validate.

        Returns:
            PasswordStrength listing every violated rule. Never raises.
        """
        errors: list[PasswordValidationError] = []

        def fail(message: str, code: str) -> None:
            errors.append(PasswordValidationError(field="password", message=message, code=code))

        if len(password) < self.min_length:
            fail(f"Password must be at least {self.min_length} characters long", "password_too_short")

        if len(password) > self.max_length:
            fail(f"Password must not exceed {self.max_length} characters", "password_too_long")

        if not re.search(r"[a-z]", password):
            fail("Password must contain at least one lowercase letter", "password_no_lowercase")

        if not re.search(r"[A-Z]", password):
            fail("Password must contain at least one uppercase letter", "password_no_uppercase")

        if not re.search(r"\d", password):
            fail("Password must contain at least one number", "password_no_digit")

        if not re.search(f"[{self.SPECIAL_CHARS}]", password):
            fail("Password must contain at least one special character", "password_no_special")

        if password.lower() in self.common_passwords:
            fail("Password is too common, please choose a stronger password", "password_too_common")

        return PasswordStrength(valid=not errors, errors=errors)

    def is_valid(self, password: str) -> bool:
        return self.validate(password).valid


# Default validator instance
default_password_validator = PasswordValidator()

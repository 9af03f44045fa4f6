"""Exceptions raised by the authentication domain services.

Each exception carries the HTTP status code and machine-readable error code
the API layer responds with, so routes never translate errors by hand.
"""


class AuthServiceError(Exception):
    """Base class for expected authentication failures."""

    status_code: int = 400
    code: str = "auth_error"
    default_message: str = "Authentication error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidCredentialsError(AuthServiceError):
    """Raised when the email is unknown or the password does not match."""

    status_code = 401
    code = "invalid_credentials"
    default_message = "Invalid credentials"


class TokenExpiredError(AuthServiceError):
    """Raised when a signed token is authentic but past its expiry."""

    status_code = 401
    code = "token_expired"
    default_message = "Token has expired"


class InvalidTokenError(AuthServiceError):
    """Raised when a signed token is malformed, forged or revoked."""

    status_code = 401
    code = "invalid_token"
    default_message = "Invalid token"


class InvalidOrExpiredTokenError(AuthServiceError):
    """Raised for unusable reset or verification tokens.

    Unknown, expired and already-used tokens share this error so the
    response does not reveal which case applies.
    """

    status_code = 400
    code = "invalid_or_expired_token"
    default_message = "Invalid or expired token"


class DuplicateIdentityError(AuthServiceError):
    """Raised when the email or username is already registered."""

    status_code = 409
    code = "duplicate_identity"

    def __init__(self, field: str) -> None:
        self.field = field
        if field == "email":
            message = "Email already registered"
        else:
            message = "Username already taken"
        super().__init__(message)


class WeakPasswordError(AuthServiceError):
    """Raised when a password fails the strength policy.

    Attributes:
        errors: Every rule the password violated.
    """

    status_code = 422
    code = "weak_password"
    default_message = "Password does not meet requirements"

    def __init__(self, errors: list, message: str | None = None) -> None:
        self.errors = errors
        super().__init__(message)

    @property
    def details(self) -> list[dict[str, str]]:
        return [
            {"field": error.field, "message": error.message, "code": error.code}
            for error in self.errors
        ]


class InvalidCurrentPasswordError(AuthServiceError):
    status_code = 400
    code = "invalid_current_password"
    default_message = "Current password is incorrect"


class PasswordReuseError(AuthServiceError):
    status_code = 400
    code = "password_reuse"
    default_message = "New password must be different from current password"


class EmailAlreadyVerifiedError(AuthServiceError):
    status_code = 400
    code = "email_already_verified"
    default_message = "Email is already verified"


class UnauthorizedError(AuthServiceError):
    """Raised when a user acts on a resource they do not own."""

    status_code = 403
    code = "forbidden"
    default_message = "You can only access your own resources"


class UserNotFoundError(AuthServiceError):
    status_code = 404
    code = "not_found"
    default_message = "User not found"


class AuthenticationRequiredError(AuthServiceError):
    """Raised when a protected route is called without a bearer token."""

    status_code = 401
    code = "authentication_required"
    default_message = "Authentication token required"

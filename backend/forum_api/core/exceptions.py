"""
Domain errors raised by services and rendered by the API error handlers.
"""


class ForumError(Exception):
    """Base forum error."""

    status_code: int = 500
    default_message: str = "Server Error"
    default_code: str = "forum_error"

    def __init__(self, message: str | None = None, code: str | None = None) -> None:
        self.message = message or self.default_message
        self.code = code or self.default_code
        super().__init__(self.message)


class ValidationError(ForumError):
    """Malformed or missing request fields."""

    status_code = 400
    default_message = "Validation failed"
    default_code = "validation_error"


class AuthError(ForumError):
    """Authentication failure."""

    status_code = 400
    default_message = "Authentication failed"
    default_code = "auth_error"


class InvalidCredentialsError(AuthError):
    """Unknown email or wrong password."""

    default_message = "Invalid credentials"
    default_code = "invalid_credentials"


class UserExistsError(AuthError):
    """Registration with an email that is already taken."""

    default_message = "User already exists"
    default_code = "user_exists"


class NotAuthenticatedError(AuthError):
    """Missing, invalid or expired bearer token."""

    status_code = 401
    default_message = "Not authorized, token failed"
    default_code = "not_authenticated"


class AuthorizationError(ForumError):
    """Mutation attempted by someone other than the owner."""

    status_code = 401
    default_message = "Not authorized"
    default_code = "not_authorized"


class NotFoundError(ForumError):
    """Requested post, comment or vote target does not exist."""

    status_code = 404
    default_message = "Not found"
    default_code = "not_found"


class ConflictError(ForumError):
    """Unique constraint lost to a concurrent write."""

    status_code = 400
    default_message = "Conflict"
    default_code = "conflict"

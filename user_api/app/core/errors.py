"""
Domain errors raised by the service layer.

Every error carries a machine readable ``code`` and the HTTP status the
transport layer answers with.  Callers only ever see these four kinds;
storage specific exceptions are wrapped in ``UnexpectedError`` with the
original exception chained as ``__cause__``.
"""


class UserServiceError(Exception):
    """Base class for all errors surfaced by ``UserService``."""

    code = "INTERNAL_ERROR"
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = "") -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class UserNotFoundError(UserServiceError):
    code = "USER_NOT_FOUND"
    status_code = 404
    default_message = "User not found"


class DuplicateEmailError(UserServiceError):
    code = "DUPLICATE_EMAIL"
    status_code = 409
    default_message = "User with this email already exists"


class InvalidInputError(UserServiceError):
    code = "INVALID_INPUT"
    status_code = 400
    default_message = "Invalid input"


class UnexpectedError(UserServiceError):
    """Any store failure that is not otherwise classified."""

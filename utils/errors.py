"""
utils/errors.py
---------------
Application exceptions. Each carries the HTTP status the web layer
responds with, so services can raise them without knowing about Flask.
"""


class AppError(Exception):
    """Base class for expected, user-facing errors."""

    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Untrusted input could not be parsed into a domain value."""

    status_code = 400

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class ConflictError(AppError):
    """A unique value (username, email) is already taken."""

    status_code = 400


class AuthError(AppError):
    status_code = 401


class ForbiddenError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class RateLimitError(AppError):
    status_code = 429

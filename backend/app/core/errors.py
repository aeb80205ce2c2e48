# app/core/errors.py
"""
Domain exceptions raised by the service layer.
Each carries the HTTP status and error code the routers answer with.
"""


class AppError(Exception):
    """Base class for expected, client-visible failures."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.code)
        self.message = message or self.code


class ValidationError(AppError):
    status_code = 400
    code = "BAD_REQUEST"


class Unauthenticated(AppError):
    status_code = 401
    code = "AUTH_REQUIRED"


class InvalidCredentialsError(AppError):
    status_code = 401
    code = "AUTH_INVALID_CREDENTIALS"


class InvalidToken(AppError):
    status_code = 403
    code = "AUTH_INVALID_TOKEN"


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"


class PostNotFoundError(NotFoundError):
    pass


class MediaNotFoundError(NotFoundError):
    pass


class DuplicateUsernameError(AppError):
    # Registration answers a taken username with 500, like a failed insert
    status_code = 500
    code = "USERNAME_EXISTS"

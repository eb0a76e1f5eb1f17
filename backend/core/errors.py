"""Application error taxonomy.

Every error carries the HTTP status it maps to and a user-facing message.
The handlers registered in ``app.create_app`` render them as
``{"message": ...}``.
"""

from __future__ import annotations

from fastapi import status


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"
    headers: dict[str, str] | None = None

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class InvalidCredentials(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid credentials"


class RegistrationFailed(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Failed to create user"


class EmailTaken(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Email is already in use"


class IdentityNotFound(AppError):
    """The token is valid but its user record is gone."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "User not found"


class AlreadyLiked(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "You have already liked this post"


class NotLiked(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "You have not liked this post"


class Unauthorized(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"
    headers = {"WWW-Authenticate": "Bearer"}


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Forbidden"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class UserNotFound(NotFound):
    message = "User not found"


class PostNotFound(NotFound):
    message = "Post not found"


class StoreFailure(AppError):
    message = "Database error"


__all__ = [
    "AppError",
    "ValidationError",
    "InvalidCredentials",
    "RegistrationFailed",
    "EmailTaken",
    "IdentityNotFound",
    "AlreadyLiked",
    "NotLiked",
    "Unauthorized",
    "Forbidden",
    "NotFound",
    "UserNotFound",
    "PostNotFound",
    "StoreFailure",
]

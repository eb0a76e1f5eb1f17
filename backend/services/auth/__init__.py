"""Authentication domain services."""

from .identity_resolution import (
    email_in_use,
    find_user_by_email,
    normalize_email,
    resolve_login_user,
)

__all__ = [
    "email_in_use",
    "find_user_by_email",
    "normalize_email",
    "resolve_login_user",
]

"""Database error helpers."""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError

UNIQUE_VIOLATION_SQLSTATE = "23505"
_UNIQUE_VIOLATION_MARKERS = (
    "duplicate key",
    "unique constraint",
)


def is_unique_violation(error: IntegrityError) -> bool:
    """Return True when the IntegrityError is a unique or primary-key conflict.

    Postgres drivers expose the SQLSTATE; SQLite only reports
    ``UNIQUE constraint failed: <table>.<column>`` in the message.
    """
    original = getattr(error, "orig", None)
    sqlstate = getattr(original, "sqlstate", None) or getattr(original, "pgcode", None)
    if sqlstate is not None:
        return sqlstate == UNIQUE_VIOLATION_SQLSTATE
    message = str(original if original is not None else error).lower()
    return any(marker in message for marker in _UNIQUE_VIOLATION_MARKERS)


__all__ = ["is_unique_violation", "UNIQUE_VIOLATION_SQLSTATE"]

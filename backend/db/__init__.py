"""Database helpers."""

from .errors import is_unique_violation
from .session import AsyncSessionMaker, async_engine, get_session, init_db

__all__ = [
    "AsyncSessionMaker",
    "async_engine",
    "get_session",
    "init_db",
    "is_unique_violation",
]

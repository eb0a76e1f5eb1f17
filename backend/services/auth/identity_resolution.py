"""Identity normalization and login-user resolution helpers."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, cast

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from core import hash_password, verify_password
from models import User


def _eq(column: Any, value: Any) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], column == value)


def normalize_email(value: str) -> str:
    return value.strip().lower()


@lru_cache
def _dummy_password_hash() -> str:
    return hash_password("not-a-real-password")


async def find_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(
        select(User).where(_eq(User.email, normalize_email(email))).limit(1)
    )
    return result.scalar_one_or_none()


async def email_in_use(
    session: AsyncSession,
    email: str,
    *,
    exclude_user_id: str | None = None,
) -> bool:
    user = await find_user_by_email(session, email)
    if user is None:
        return False
    return user.id != exclude_user_id


async def resolve_login_user(
    session: AsyncSession,
    *,
    email: str,
    password: str,
) -> User | None:
    """Return the user owning ``email`` when ``password`` matches, else None.

    Unknown emails are checked against a throwaway hash so both failure
    paths do the same bcrypt work.
    """
    user = await find_user_by_email(session, email)
    if user is None:
        verify_password(password, _dummy_password_hash())
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user

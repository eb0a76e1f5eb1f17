"""Shared FastAPI dependencies."""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from core import ACCESS_TOKEN_TYPE, decode_token
from core.errors import IdentityNotFound, Unauthorized
from db.session import get_session
from models import User

BEARER_PREFIX = "bearer "


async def get_db() -> AsyncIterator[AsyncSession]:
    async for session in get_session():
        yield session


def _extract_bearer_token(request: Request) -> str:
    authorization = request.headers.get("Authorization")
    if not authorization or not authorization.lower().startswith(BEARER_PREFIX):
        raise Unauthorized()
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise Unauthorized()
    return token


async def get_current_user_id(request: Request) -> str:
    """Verify the bearer token and return the user id it was issued for."""
    token = _extract_bearer_token(request)
    try:
        payload = decode_token(token)
    except ValueError as exc:
        raise Unauthorized() from exc

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise Unauthorized()
    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        raise Unauthorized()
    return subject


async def get_current_user(
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db),
) -> User:
    user = await session.get(User, user_id)
    if user is None:
        raise IdentityNotFound()
    return user

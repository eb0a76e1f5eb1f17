"""Like and unlike mutations for posts.

The ``post_likes`` primary key is the source of truth for "at most one like
per user". The membership row and the ``posts.likes`` counter always change
in the same transaction, and the counter is adjusted server-side, so
concurrent requests cannot desynchronize them.
"""

from __future__ import annotations

import logging
from typing import Any, cast

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from core.errors import AlreadyLiked, NotLiked, PostNotFound, StoreFailure
from db.errors import is_unique_violation
from models import Post, PostLike

logger = logging.getLogger(__name__)


def _eq(column: Any, value: Any) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], column == value)


async def _require_post(session: AsyncSession, post_id: str) -> Post:
    post = await session.get(Post, post_id)
    if post is None:
        raise PostNotFound()
    return post


async def has_liked(session: AsyncSession, *, post_id: str, user_id: str) -> bool:
    result = await session.execute(
        select(cast(Any, PostLike.user_id)).where(
            _eq(PostLike.post_id, post_id),
            _eq(PostLike.user_id, user_id),
        )
    )
    return result.first() is not None


async def _adjust_like_counter(session: AsyncSession, post_id: str, delta: int) -> None:
    likes_column = cast(Any, Post.likes)
    await session.execute(
        update(Post)
        .where(_eq(Post.id, post_id))
        .values(likes=likes_column + delta)
        .execution_options(synchronize_session=False)
    )


async def like_post(session: AsyncSession, *, post_id: str, user_id: str) -> Post:
    """Add ``user_id`` to the post's likers and bump the counter by one."""
    post = await _require_post(session, post_id)
    if await has_liked(session, post_id=post_id, user_id=user_id):
        raise AlreadyLiked()

    session.add(PostLike(post_id=post_id, user_id=user_id))
    try:
        await session.flush()
        await _adjust_like_counter(session, post_id, 1)
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        if is_unique_violation(exc):
            # Lost the race against a concurrent like by the same user.
            raise AlreadyLiked() from exc
        logger.exception("Failed to like post %s", post_id)
        raise StoreFailure("Failed to like post") from exc
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("Failed to like post %s", post_id)
        raise StoreFailure("Failed to like post") from exc

    await session.refresh(post)
    return post


async def unlike_post(session: AsyncSession, *, post_id: str, user_id: str) -> Post:
    """Remove ``user_id`` from the post's likers and lower the counter by one."""
    post = await _require_post(session, post_id)

    try:
        result = await session.execute(
            delete(PostLike).where(
                _eq(PostLike.post_id, post_id),
                _eq(PostLike.user_id, user_id),
            )
        )
        if cast(Any, result).rowcount == 0:
            await session.rollback()
            raise NotLiked()
        await _adjust_like_counter(session, post_id, -1)
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("Failed to unlike post %s", post_id)
        raise StoreFailure("Failed to unlike post") from exc

    await session.refresh(post)
    return post


__all__ = ["has_liked", "like_post", "unlike_post"]

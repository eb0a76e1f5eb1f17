"""Shared post view models and query helpers."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, cast

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from models import Post, PostLike, User

logger = logging.getLogger(__name__)


def _in(column: Any, values: Sequence[str]) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], column.in_(values))


def _asc(column: Any) -> Any:
    return cast(Any, column).asc()


class PostResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    author_id: str
    post_cid: str
    title: str
    post_image_url: str | None = None
    description: str | None = None
    likes: int = 0
    liked_by: list[str] = []

    @classmethod
    def from_post(cls, post: Post, *, liked_by: Sequence[str] = ()) -> "PostResponse":
        return cls(
            id=post.id,
            author_id=post.author_id,
            post_cid=post.post_cid,
            title=post.title,
            post_image_url=post.post_image_url,
            description=post.description,
            likes=post.likes,
            liked_by=list(liked_by),
        )


class PostWithAuthorResponse(PostResponse):
    author_name: str | None = None


PostResponse.model_rebuild()
PostWithAuthorResponse.model_rebuild()


async def collect_liked_by(
    session: AsyncSession,
    post_ids: Sequence[str],
) -> dict[str, list[str]]:
    """Return the liker ids of every post, oldest like first."""
    if not post_ids:
        return {}

    post_id_column = cast(Any, PostLike.post_id)
    user_id_column = cast(Any, PostLike.user_id)
    result = await session.execute(
        select(post_id_column, user_id_column)
        .where(_in(post_id_column, post_ids))
        .order_by(_asc(PostLike.created_at), _asc(user_id_column))
    )
    liked_by: dict[str, list[str]] = {post_id: [] for post_id in post_ids}
    for post_id, user_id in result.all():
        liked_by[post_id].append(user_id)
    return liked_by


async def collect_author_names(
    session: AsyncSession,
    author_ids: Sequence[str],
) -> dict[str, str]:
    unique_ids = sorted(set(author_ids))
    if not unique_ids:
        return {}

    user_id_column = cast(Any, User.id)
    full_name_column = cast(Any, User.full_name)
    result = await session.execute(
        select(user_id_column, full_name_column).where(_in(user_id_column, unique_ids))
    )
    return {user_id: full_name for user_id, full_name in result.all()}


async def build_post_responses(
    session: AsyncSession,
    posts: Sequence[Post],
) -> list[PostResponse]:
    liked_by = await collect_liked_by(session, [post.id for post in posts])
    return [
        PostResponse.from_post(post, liked_by=liked_by.get(post.id, []))
        for post in posts
    ]


async def build_posts_with_authors(
    session: AsyncSession,
    posts: Sequence[Post],
) -> list[PostWithAuthorResponse]:
    """Annotate posts with their author's full name.

    A post whose author no longer resolves keeps ``author_name=None``; the
    remaining posts are still returned.
    """
    liked_by = await collect_liked_by(session, [post.id for post in posts])
    author_names = await collect_author_names(session, [post.author_id for post in posts])

    responses: list[PostWithAuthorResponse] = []
    for post in posts:
        author_name = author_names.get(post.author_id)
        if author_name is None:
            logger.warning(
                "Author %s of post %s could not be resolved",
                post.author_id,
                post.id,
            )
        base = PostResponse.from_post(post, liked_by=liked_by.get(post.id, []))
        responses.append(
            PostWithAuthorResponse(**base.model_dump(), author_name=author_name)
        )
    return responses

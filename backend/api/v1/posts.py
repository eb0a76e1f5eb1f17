"""Post creation, listing and like endpoints."""

from __future__ import annotations

import logging
from typing import Any, cast

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from api.deps import get_current_user, get_current_user_id, get_db
from core.errors import Forbidden, PostNotFound, StoreFailure
from models import Post, User
from services.likes import like_post as like_post_service
from services.likes import unlike_post as unlike_post_service
from .post_views import (
    PostResponse,
    PostWithAuthorResponse,
    build_post_responses,
    build_posts_with_authors,
    collect_liked_by,
)

router = APIRouter(prefix="/posts", tags=["posts"])
logger = logging.getLogger(__name__)


def _eq(column: Any, value: Any) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], column == value)


def _asc(column: Any) -> Any:
    return cast(Any, column).asc()


class PostCreateRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # Accepted for compatibility; must match the caller when present.
    author_id: str | None = None
    title: str = Field(min_length=1, max_length=255)
    post_cid: str = Field(min_length=1, max_length=255)
    post_image_url: str | None = None
    description: str | None = None


def _require_self(caller_id: str, user_id: str) -> None:
    if caller_id != user_id:
        raise Forbidden("You can only like or unlike posts as yourself")


async def _post_response(session: AsyncSession, post: Post) -> PostResponse:
    liked_by = await collect_liked_by(session, [post.id])
    return PostResponse.from_post(post, liked_by=liked_by.get(post.id, []))


@router.post("", response_model=PostResponse)
async def create_post(
    payload: PostCreateRequest,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> PostResponse:
    author_id = current_user.id
    if payload.author_id is not None and payload.author_id != author_id:
        raise Forbidden("Posts can only be created for the authenticated user")

    post = Post(
        author_id=author_id,
        post_cid=payload.post_cid,
        title=payload.title,
        post_image_url=payload.post_image_url,
        description=payload.description,
    )
    session.add(post)
    try:
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("Failed to create post for author %s", author_id)
        raise StoreFailure("Failed to create post") from exc
    await session.refresh(post)
    return PostResponse.from_post(post)


@router.put("/{post_id}/like/{user_id}", response_model=PostResponse)
async def like_post(
    post_id: str,
    user_id: str,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> PostResponse:
    _require_self(current_user.id, user_id)
    post = await like_post_service(session, post_id=post_id, user_id=user_id)
    return await _post_response(session, post)


@router.delete("/{post_id}/like/{user_id}", response_model=PostResponse)
async def unlike_post(
    post_id: str,
    user_id: str,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> PostResponse:
    _require_self(current_user.id, user_id)
    post = await unlike_post_service(session, post_id=post_id, user_id=user_id)
    return await _post_response(session, post)


@router.get("", response_model=list[PostResponse])
async def list_posts(
    _caller_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db),
) -> list[PostResponse]:
    result = await session.execute(
        select(Post).order_by(_asc(Post.created_at), _asc(Post.id))
    )
    return await build_post_responses(session, result.scalars().all())


@router.get("/author/{author_id}", response_model=list[PostResponse])
async def list_posts_by_author(
    author_id: str,
    _caller_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db),
) -> list[PostResponse]:
    result = await session.execute(
        select(Post)
        .where(_eq(Post.author_id, author_id))
        .order_by(_asc(Post.created_at), _asc(Post.id))
    )
    return await build_post_responses(session, result.scalars().all())


@router.get("/{post_cid}", response_model=list[PostWithAuthorResponse])
async def get_posts_by_cid(
    post_cid: str,
    _caller_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db),
) -> list[PostWithAuthorResponse]:
    """Return every post sharing ``post_cid``, annotated with its author's name."""
    result = await session.execute(
        select(Post)
        .where(_eq(Post.post_cid, post_cid))
        .order_by(_asc(Post.created_at), _asc(Post.id))
    )
    posts = result.scalars().all()
    if not posts:
        raise PostNotFound("No posts found with that postCid")
    return await build_posts_with_authors(session, posts)

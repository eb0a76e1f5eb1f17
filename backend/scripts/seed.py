"""Database seed script for local development.

Usage:
    python scripts/seed.py

Creates demo users (all sharing ``DEFAULT_PASSWORD``) and a few posts, two of
which share a content identifier. Running it again leaves existing rows alone.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.append(str(ROOT_DIR))

from core import settings  # noqa: E402
from core.logging import configure_logging  # noqa: E402
from core.security import hash_password  # noqa: E402
from db.session import AsyncSessionMaker, init_db  # noqa: E402
from models import Post, User  # noqa: E402

DEFAULT_PASSWORD = "password123"
logger = logging.getLogger(__name__)


def _eq(column: Any, value: Any) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], column == value)


@dataclass(frozen=True)
class SeedUser:
    email: str
    full_name: str
    role: str | None = None


@dataclass(frozen=True)
class SeedPost:
    author_email: str
    post_cid: str
    title: str
    description: str
    post_image_url: str | None = None


SEED_USERS: Sequence[SeedUser] = [
    SeedUser(email="alice@example.com", full_name="Alice Demo", role="creator"),
    SeedUser(email="bob@example.com", full_name="Bob Demo"),
    SeedUser(email="cara@example.com", full_name="Cara Demo", role="curator"),
]

SEED_POSTS: Sequence[SeedPost] = [
    SeedPost(
        author_email="alice@example.com",
        post_cid="bafy-demo-sunrise",
        title="Sunrise",
        description="First light over the harbour.",
        post_image_url="https://example.com/images/sunrise.jpg",
    ),
    SeedPost(
        author_email="bob@example.com",
        post_cid="bafy-demo-sunrise",
        title="Sunrise, again",
        description="Same picture, reposted.",
        post_image_url="https://example.com/images/sunrise.jpg",
    ),
    SeedPost(
        author_email="cara@example.com",
        post_cid="bafy-demo-forest",
        title="Forest walk",
        description="Moss everywhere.",
    ),
]


async def get_or_create_user(session: AsyncSession, payload: SeedUser) -> User:
    result = await session.execute(select(User).where(_eq(User.email, payload.email)))
    user = result.scalar_one_or_none()
    if user:
        return user

    user = User(
        email=payload.email,
        full_name=payload.full_name,
        role=payload.role,
        password_hash=hash_password(DEFAULT_PASSWORD),
    )
    session.add(user)
    await session.flush()
    return user


async def ensure_posts(
    session: AsyncSession,
    users: dict[str, User],
    posts: Sequence[SeedPost],
) -> int:
    created = 0
    for post in posts:
        author = users[post.author_email]
        result = await session.execute(
            select(Post).where(
                _eq(Post.author_id, author.id),
                _eq(Post.post_cid, post.post_cid),
            )
        )
        if result.scalar_one_or_none():
            continue

        session.add(
            Post(
                author_id=author.id,
                post_cid=post.post_cid,
                title=post.title,
                description=post.description,
                post_image_url=post.post_image_url,
            )
        )
        created += 1
    return created


async def seed_database(
    session: AsyncSession,
    *,
    users: Sequence[SeedUser] = SEED_USERS,
    posts: Sequence[SeedPost] = SEED_POSTS,
) -> tuple[dict[str, User], int]:
    """Insert missing seed rows and commit; returns users by email and new post count."""
    users_by_email: dict[str, User] = {}
    for payload in users:
        user = await get_or_create_user(session, payload)
        users_by_email[user.email] = user

    created_posts = await ensure_posts(session, users_by_email, posts)
    await session.commit()
    return users_by_email, created_posts


async def seed() -> None:
    configure_logging(settings.log_level)
    await init_db()

    async with AsyncSessionMaker() as session:
        users, created_posts = await seed_database(session)

    logger.info(
        "Seed data inserted: users=%s posts_created=%d default_password=%s",
        ", ".join(sorted(users)),
        created_posts,
        DEFAULT_PASSWORD,
    )


if __name__ == "__main__":
    asyncio.run(seed())

"""Post domain model."""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String, Text, func, text
from sqlmodel import Field, SQLModel


class Post(SQLModel, table=True):
    """A user post grouped by an external content identifier."""

    __tablename__ = "posts"
    __table_args__ = (
        CheckConstraint("likes >= 0", name="ck_posts_likes_non_negative"),
    )

    id: str = Field(default_factory=lambda: str(uuid4()), sa_column=Column(String(36), primary_key=True))
    # Not a foreign key: posts outlive a missing author and are still listed.
    author_id: str = Field(
        sa_column=Column(String(36), nullable=False, index=True)
    )
    post_cid: str = Field(
        sa_column=Column(String(255), nullable=False, index=True)
    )
    title: str = Field(
        sa_column=Column(String(255), nullable=False)
    )
    post_image_url: str | None = Field(
        default=None, sa_column=Column(Text, nullable=True)
    )
    description: str | None = Field(
        default=None, sa_column=Column(Text, nullable=True)
    )
    likes: int = Field(
        default=0,
        sa_column=Column(
            Integer,
            nullable=False,
            server_default=text("0"),
        ),
    )
    created_at: datetime = Field(
        sa_column=Column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )
    )

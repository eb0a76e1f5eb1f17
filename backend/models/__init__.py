"""SQLModel models package."""

from .like import PostLike
from .post import Post
from .user import User

__all__ = [
    "User",
    "Post",
    "PostLike",
]

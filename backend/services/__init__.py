"""Business logic services."""

from .likes import has_liked, like_post, unlike_post

__all__ = [
    "has_liked",
    "like_post",
    "unlike_post",
]

"""
Database models.
"""

from .base import Base, StringIdMixin, TimestampMixin
from .user import User
from .category import Category
from .post import Post, PostStatus, ModerationStatus
from .site_content import SiteContent

__all__ = [
    "Base",
    "StringIdMixin",
    "TimestampMixin",
    "User",
    "Category",
    "Post",
    "PostStatus",
    "ModerationStatus",
    "SiteContent",
]

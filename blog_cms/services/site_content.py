"""
Site content service.

Serves the editable `hero` and `stats` blocks. A block that was never
saved falls back to defaults; for `stats` the default is computed from the
live posts and categories tables.
"""

import copy
import math
from typing import Any

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from blog_cms.core.errors import ValidationFailed
from blog_cms.models.category import Category
from blog_cms.models.post import Post, PostStatus
from blog_cms.models.site_content import SiteContent

logger = structlog.get_logger()

CONTENT_TYPES = ("hero", "stats")

DEFAULT_READING_TIME = 5
UPDATE_FREQUENCY = "Daily"

DEFAULT_HERO: dict[str, Any] = {
    "title": "Variety Vibes",
    "subtitle": (
        "Crafting insights and stories through daily content on various topics "
        "that matter to you"
    ),
    "description": (
        "Discover comprehensive guides, expert insights, and practical tips across "
        "multiple categories including insurance, home improvement, warranties, and more."
    ),
    "cta_button": {"text": "Explore All Posts", "href": "/blog", "variant": "primary"},
    "background_image": "/images/hero/hero-bg.jpg",
    "badges": [
        {"text": "Updated Daily", "color": "green"},
        {"text": "5+ Categories", "color": "blue"},
    ],
}


def merge_content(current: dict[str, Any], changes: dict[str, Any]) -> dict[str, Any]:
    """Recursive merge; nested objects are merged, everything else replaced."""
    merged = copy.deepcopy(current)
    for key, value in changes.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_content(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def format_count(count: int) -> str:
    return f"{count}+" if count > 0 else "0"


class SiteContentService:
    """Site content management service."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def validate_type(content_type: str | None) -> str:
        if content_type not in CONTENT_TYPES:
            raise ValidationFailed("Invalid content type")
        return content_type

    async def real_time_stats(self) -> dict[str, str]:
        """Published post count, active category count and average reading time."""
        published = Post.status == PostStatus.PUBLISHED.value

        total_posts = await self.db.scalar(select(func.count(Post.id)).where(published)) or 0
        total_categories = await self.db.scalar(
            select(func.count(Category.id)).where(Category.active.is_(True))
        ) or 0

        timed = await self.db.execute(
            select(func.sum(Post.reading_time), func.count(Post.id))
            .where(published, Post.reading_time > 0)
        )
        minutes, timed_posts = timed.one()
        avg = math.floor(minutes / timed_posts + 0.5) if timed_posts else DEFAULT_READING_TIME

        return {
            "total_posts": format_count(total_posts),
            "categories": format_count(total_categories),
            "reading_time": f"{avg} min",
            "update_frequency": UPDATE_FREQUENCY,
        }

    async def _default(self, content_type: str) -> dict[str, Any]:
        if content_type == "hero":
            return copy.deepcopy(DEFAULT_HERO)
        return await self.real_time_stats()

    async def get(self, content_type: str) -> dict[str, Any]:
        """Stored block, or its default when none was saved."""
        content_type = self.validate_type(content_type)

        record = await self.db.get(SiteContent, content_type)
        if record is None:
            return await self._default(content_type)
        return record.data

    async def get_all(self) -> dict[str, dict[str, Any]]:
        return {content_type: await self.get(content_type) for content_type in CONTENT_TYPES}

    async def update(
        self,
        content_type: str,
        data: dict[str, Any],
        updated_by: str | None = None,
    ) -> SiteContent:
        """
        Merge data into the stored block. A block saved for the first time
        starts from its default, so a partial update keeps the other fields.

        Raises:
            ValidationFailed: unknown content type
        """
        content_type = self.validate_type(content_type)

        record = await self.db.get(SiteContent, content_type)
        if record is None:
            record = SiteContent(key=content_type, data=await self._default(content_type))
            self.db.add(record)

        # Reassign so the JSON column is flagged dirty
        record.data = merge_content(record.data or {}, data)
        record.updated_by = updated_by
        await self.db.flush()

        logger.info("Site content updated", content_type=content_type, updated_by=updated_by)
        return record

"""
Post service.

Authorization is decided by the caller (see routes/posts.py); this layer
only enforces content rules and keeps the author and category counters in
step with the posts table.
"""

import math
import re
from datetime import datetime, timezone
from typing import Any

import structlog
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from blog_cms.core.errors import ConflictError, NotFoundError, ValidationFailed
from blog_cms.models.category import Category
from blog_cms.models.post import Post, PostStatus
from blog_cms.models.user import User

logger = structlog.get_logger()

WORDS_PER_MINUTE = 200
EXCERPT_LENGTH = 160


def generate_slug(text: str) -> str:
    """"Hello, World!  Again" -> "hello-world-again"."""
    slug = text.lower()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def calculate_reading_time(content: str) -> int:
    """Minutes to read at 200 words per minute, rounded up."""
    words = len(content.split())
    return math.ceil(words / WORDS_PER_MINUTE)


def default_seo(title: str, description: str, featured_image: dict | None) -> dict[str, Any]:
    return {
        "meta_title": title,
        "meta_description": description,
        "keywords": [],
        "og_image": (featured_image or {}).get("url", ""),
        "canonical_url": "",
    }


class PostService:
    """Post management service."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, post_id: str) -> Post | None:
        return await self.db.get(Post, post_id)

    async def get_or_404(self, post_id: str) -> Post:
        post = await self.get_by_id(post_id)
        if not post:
            raise NotFoundError("Post not found")
        return post

    async def list_posts(
        self,
        page: int = 1,
        limit: int = 10,
        status: str | None = None,
        category_id: str | None = None,
        author_id: str | None = None,
        search: str | None = None,
    ) -> tuple[list[Post], int]:
        """List posts, most recently updated first."""
        stmt = select(Post)

        if status:
            stmt = stmt.where(Post.status == status)
        if category_id:
            stmt = stmt.where(Post.category_id == category_id)
        if author_id:
            stmt = stmt.where(Post.author_id == author_id)
        if search:
            pattern = f"%{search.lower()}%"
            stmt = stmt.where(or_(
                func.lower(Post.title).like(pattern),
                func.lower(Post.description).like(pattern),
                func.lower(Post.content).like(pattern),
            ))

        total = await self.db.scalar(select(func.count()).select_from(stmt.subquery())) or 0

        stmt = (
            stmt.order_by(Post.updated_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all()), total

    async def _require_category(self, category_id: str) -> Category:
        category = await self.db.get(Category, category_id)
        if not category:
            raise ValidationFailed("Category not found")
        return category

    async def _require_unique_slug(self, slug: str, exclude_id: str | None = None) -> None:
        stmt = select(Post.id).where(Post.slug == slug)
        if exclude_id:
            stmt = stmt.where(Post.id != exclude_id)
        if await self.db.scalar(stmt.limit(1)):
            raise ConflictError(
                "A post with this title already exists. Please choose a different title."
            )

    async def create(
        self,
        author_id: str,
        data: dict[str, Any],
    ) -> Post:
        """
        Create a post for author_id.

        Raises:
            ValidationFailed: empty slug or unknown category
            ConflictError: slug already taken
        """
        status = data.get("status") or PostStatus.DRAFT.value

        category = await self._require_category(data["category_id"])

        slug = generate_slug(data["title"])
        if not slug:
            raise ValidationFailed("Title must contain at least one letter or digit")
        await self._require_unique_slug(slug)

        now = datetime.now(timezone.utc)
        post = Post(
            slug=slug,
            title=data["title"],
            description=data["description"],
            content=data["content"],
            excerpt=data.get("excerpt") or data["description"][:EXCERPT_LENGTH],
            status=status,
            publish_date=now if status == PostStatus.PUBLISHED.value else None,
            scheduled_for=data.get("scheduled_for") if status == PostStatus.SCHEDULED.value else None,
            author_id=author_id,
            category_id=category.id,
            featured_image=data.get("featured_image"),
            tags=list(data.get("tags") or []),
            featured=bool(data.get("featured", False)),
            reading_time=calculate_reading_time(data["content"]),
            seo=data.get("seo") or default_seo(
                data["title"], data["description"], data.get("featured_image")
            ),
            last_modified_by=author_id,
        )
        self.db.add(post)

        category.post_count += 1
        author = await self.db.get(User, author_id)
        if author:
            author.posts_count += 1
            if status == PostStatus.DRAFT.value:
                author.drafts_count += 1

        await self.db.flush()

        logger.info("Post created", post_id=post.id, author_id=author_id, status=status)
        return post

    async def update(
        self,
        post: Post,
        data: dict[str, Any],
        modified_by: str,
    ) -> Post:
        """
        Apply a partial update.

        Raises:
            ValidationFailed: unknown category
            ConflictError: new title collides with another post's slug
        """
        if data.get("title") is not None and data["title"] != post.title:
            slug = generate_slug(data["title"])
            if not slug:
                raise ValidationFailed("Title must contain at least one letter or digit")
            await self._require_unique_slug(slug, exclude_id=post.id)
            post.slug = slug
            post.title = data["title"]

        if data.get("category_id") is not None and data["category_id"] != post.category_id:
            new_category = await self._require_category(data["category_id"])
            old_category = await self.db.get(Category, post.category_id)
            if old_category:
                old_category.post_count = max(0, old_category.post_count - 1)
            new_category.post_count += 1
            post.category_id = new_category.id

        if data.get("content") is not None and data["content"] != post.content:
            post.content = data["content"]
            post.reading_time = calculate_reading_time(data["content"])

        for field in ("description", "tags", "featured", "featured_image", "seo"):
            if data.get(field) is not None:
                setattr(post, field, data[field])

        if "excerpt" in data:
            post.excerpt = data["excerpt"] or post.description[:EXCERPT_LENGTH]

        status = data.get("status")
        if status and status != post.status:
            await self._change_status(post, status, data.get("scheduled_for"))

        post.last_modified_by = modified_by
        await self.db.flush()

        logger.info("Post updated", post_id=post.id, modified_by=modified_by)
        return post

    async def _change_status(
        self,
        post: Post,
        status: str,
        scheduled_for: datetime | None,
    ) -> None:
        if PostStatus.DRAFT.value in (post.status, status):
            author = await self.db.get(User, post.author_id)
            if author:
                delta = 1 if status == PostStatus.DRAFT.value else -1
                author.drafts_count = max(0, author.drafts_count + delta)

        post.status = status
        if status == PostStatus.PUBLISHED.value and post.publish_date is None:
            post.publish_date = datetime.now(timezone.utc)

        if status == PostStatus.SCHEDULED.value:
            post.scheduled_for = scheduled_for or post.scheduled_for
        else:
            post.scheduled_for = None

    async def delete(self, post: Post) -> None:
        category = await self.db.get(Category, post.category_id)
        if category:
            category.post_count = max(0, category.post_count - 1)

        author = await self.db.get(User, post.author_id)
        if author:
            author.posts_count = max(0, author.posts_count - 1)
            if post.status == PostStatus.DRAFT.value:
                author.drafts_count = max(0, author.drafts_count - 1)

        await self.db.delete(post)
        await self.db.flush()

        logger.info("Post deleted", post_id=post.id)

"""
Public blog reads.

Only published posts and active categories are visible. Results are plain
schema objects so they can sit in the process cache independent of any
database session.
"""

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from blog_cms.core.errors import NotFoundError
from blog_cms.models.category import Category
from blog_cms.models.post import Post, PostStatus
from blog_cms.models.user import User
from blog_cms.schemas.blog import BlogAuthor, BlogCategory, BlogPost
from blog_cms.utils.caching import CacheKeys, CacheTTL, get_cached_or_fetch

logger = structlog.get_logger()


def published_posts():
    return (
        select(Post)
        .where(Post.status == PostStatus.PUBLISHED.value)
        .order_by(Post.publish_date.desc().nulls_last(), Post.created_at.desc())
    )


class BlogService:
    """Read-only, cached access to published content."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _posts(self, stmt) -> list[BlogPost]:
        result = await self.db.execute(stmt)
        return [BlogPost.model_validate(p) for p in result.scalars().all()]

    async def all_posts(self) -> list[BlogPost]:
        return await get_cached_or_fetch(
            CacheKeys.ALL_POSTS,
            lambda: self._posts(published_posts()),
            ttl=CacheTTL.medium(),
        )

    async def latest_posts(self, limit: int = 5) -> list[BlogPost]:
        return await get_cached_or_fetch(
            CacheKeys.latest_posts(limit),
            lambda: self._posts(published_posts().limit(limit)),
            ttl=CacheTTL.short(),
        )

    async def featured_posts(self) -> list[BlogPost]:
        return await get_cached_or_fetch(
            CacheKeys.FEATURED_POSTS,
            lambda: self._posts(published_posts().where(Post.featured.is_(True))),
            ttl=CacheTTL.medium(),
        )

    async def post_by_slug(self, slug: str) -> BlogPost:
        async def fetch() -> BlogPost | None:
            posts = await self._posts(published_posts().where(Post.slug == slug))
            return posts[0] if posts else None

        post = await get_cached_or_fetch(CacheKeys.post(slug), fetch, ttl=CacheTTL.long())
        if post is None:
            raise NotFoundError("Post not found")
        return post

    async def posts_by_category(self, category_slug: str) -> list[BlogPost]:
        """
        Published posts in an active category.

        Raises:
            NotFoundError: unknown or inactive category
        """
        category = await self.category_by_slug(category_slug)

        async def fetch() -> list[BlogPost]:
            return await self._posts(published_posts().where(Post.category_id == category.id))

        return await get_cached_or_fetch(
            CacheKeys.category_posts(category.slug),
            fetch,
            ttl=CacheTTL.medium(),
        )

    async def categories(self) -> list[BlogCategory]:
        """Active categories with their published post counts."""
        async def fetch() -> list[BlogCategory]:
            counts = (
                select(Post.category_id, func.count(Post.id).label("n"))
                .where(Post.status == PostStatus.PUBLISHED.value)
                .group_by(Post.category_id)
                .subquery()
            )
            stmt = (
                select(Category, func.coalesce(counts.c.n, 0))
                .outerjoin(counts, counts.c.category_id == Category.id)
                .where(Category.active.is_(True))
                .order_by(Category.sort_order.asc(), Category.name.asc())
            )
            result = await self.db.execute(stmt)
            return [
                BlogCategory.model_validate(category).model_copy(update={"post_count": n})
                for category, n in result.all()
            ]

        return await get_cached_or_fetch(CacheKeys.CATEGORIES, fetch, ttl=CacheTTL.long())

    async def category_by_slug(self, slug: str) -> BlogCategory:
        for category in await self.categories():
            if category.slug == slug:
                return category
        raise NotFoundError("Category not found")

    async def tags(self) -> list[str]:
        async def fetch() -> list[str]:
            posts = await self.all_posts()
            return sorted({tag for post in posts for tag in post.tags})

        return await get_cached_or_fetch(CacheKeys.TAGS, fetch, ttl=CacheTTL.long())

    async def search(self, query: str) -> list[BlogPost]:
        """Case-insensitive match on title, description, content and tags."""
        needle = query.strip().lower()
        if not needle:
            return []

        return [
            post for post in await self.all_posts()
            if needle in post.title.lower()
            or needle in post.description.lower()
            or needle in post.content.lower()
            or any(needle in tag.lower() for tag in post.tags)
        ]

    async def author(self, author_id: str) -> BlogAuthor:
        async def fetch() -> BlogAuthor | None:
            user = await self.db.get(User, author_id)
            if user is None or not user.active:
                return None
            return BlogAuthor.model_validate(user)

        author = await get_cached_or_fetch(
            CacheKeys.author(author_id), fetch, ttl=CacheTTL.very_long()
        )
        if author is None:
            raise NotFoundError("Author not found")
        return author

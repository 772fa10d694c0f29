"""
Category service.
"""

from typing import Any

import structlog
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from blog_cms.core.errors import ConflictError, NotFoundError, ValidationFailed
from blog_cms.models.category import Category
from blog_cms.models.post import Post
from blog_cms.services.posts import generate_slug

logger = structlog.get_logger()

SORT_ORDERS = {
    "sortOrder": Category.sort_order.asc(),
    "name": Category.name.asc(),
    "-name": Category.name.desc(),
    "posts": Category.post_count.desc(),
    "views": Category.total_views.desc(),
    "-created": Category.created_at.desc(),
}


class CategoryService:
    """Category management service."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, category_id: str) -> Category | None:
        return await self.db.get(Category, category_id)

    async def get_or_404(self, category_id: str) -> Category:
        category = await self.get_by_id(category_id)
        if not category:
            raise NotFoundError("Category not found")
        return category

    async def list_categories(
        self,
        page: int = 1,
        limit: int = 10,
        status: str | None = None,
        featured: bool | None = None,
        search: str | None = None,
        sort: str = "sortOrder",
    ) -> tuple[list[Category], int]:
        stmt = select(Category)

        if status == "active":
            stmt = stmt.where(Category.active.is_(True))
        elif status == "inactive":
            stmt = stmt.where(Category.active.is_(False))
        if featured is not None:
            stmt = stmt.where(Category.featured.is_(featured))
        if search:
            pattern = f"%{search.lower()}%"
            stmt = stmt.where(or_(
                func.lower(Category.name).like(pattern),
                func.lower(Category.description).like(pattern),
            ))

        total = await self.db.scalar(select(func.count()).select_from(stmt.subquery())) or 0

        order = SORT_ORDERS.get(sort, SORT_ORDERS["sortOrder"])
        stmt = stmt.order_by(order, Category.name.asc()).offset((page - 1) * limit).limit(limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().all()), total

    async def _unique_slug(self, name: str, exclude_id: str | None = None) -> str:
        slug = generate_slug(name)
        if not slug:
            raise ValidationFailed("Name must contain at least one letter or digit")

        stmt = select(Category.id).where(Category.slug == slug)
        if exclude_id:
            stmt = stmt.where(Category.id != exclude_id)
        if await self.db.scalar(stmt.limit(1)):
            raise ConflictError(
                "A category with this name already exists. Please choose a different name."
            )
        return slug

    async def create(self, data: dict[str, Any], created_by: str | None = None) -> Category:
        """
        Raises:
            ConflictError: name collides with an existing category's slug
        """
        name = data["name"]
        description = data["description"]
        category = Category(
            slug=await self._unique_slug(name),
            name=name,
            description=description,
            color=data.get("color") or "#3B82F6",
            icon=data.get("icon") or "📁",
            featured_image=data.get("featured_image") or "",
            featured=bool(data.get("featured", False)),
            active=bool(data.get("active", True)),
            sort_order=data.get("sort_order", 999),
            seo=data.get("seo") or {"title": name, "description": description, "keywords": []},
            hero=data.get("hero") or {"title": name, "subtitle": description, "background_image": ""},
            created_by=created_by,
        )
        self.db.add(category)
        await self.db.flush()

        logger.info("Category created", category_id=category.id, slug=category.slug)
        return category

    async def update(self, category: Category, data: dict[str, Any]) -> Category:
        if data.get("name") is not None and data["name"] != category.name:
            category.slug = await self._unique_slug(data["name"], exclude_id=category.id)
            category.name = data["name"]

        for field in (
            "description", "color", "icon", "featured_image",
            "featured", "active", "sort_order", "seo", "hero",
        ):
            if data.get(field) is not None:
                setattr(category, field, data[field])

        await self.db.flush()

        logger.info("Category updated", category_id=category.id)
        return category

    async def delete(self, category: Category) -> None:
        """
        Raises:
            ValidationFailed: posts still reference the category
        """
        in_use = await self.db.scalar(
            select(Post.id).where(Post.category_id == category.id).limit(1)
        )
        if in_use:
            raise ValidationFailed(
                "Cannot delete category with existing posts. Please move or delete posts first."
            )

        await self.db.delete(category)
        await self.db.flush()

        logger.info("Category deleted", category_id=category.id)

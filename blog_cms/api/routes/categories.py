"""
Category management routes.
"""

from typing import Literal

from fastapi import APIRouter, Depends, Query, status

from blog_cms.api.dependencies.services import Categories
from blog_cms.core.auth.dependencies import AuthorPrincipal, with_auth
from blog_cms.core.auth.interfaces import AccessRule, Principal
from blog_cms.core.auth.permissions import Role
from blog_cms.schemas.category import (
    CategoryCreate,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdate,
)
from blog_cms.schemas.common import MAX_PAGE_SIZE, MessageResponse, Pagination
from blog_cms.utils.caching import invalidate_blog_cache

router = APIRouter()


def category_rule(permission: str) -> AccessRule:
    return AccessRule.build(
        allowed_roles=[Role.ADMIN, Role.EDITOR],
        required_permissions=[permission],
    )


@router.get("", response_model=CategoryListResponse)
async def list_categories(
    categories: Categories,
    _: AuthorPrincipal,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    status_filter: Literal["active", "inactive"] | None = Query(None, alias="status"),
    featured: bool | None = None,
    search: str | None = None,
    sort: Literal["sortOrder", "name", "-name", "posts", "views", "-created"] = "sortOrder",
):
    items, total = await categories.list_categories(
        page=page,
        limit=limit,
        status=status_filter,
        featured=featured,
        search=search,
        sort=sort,
    )
    return CategoryListResponse(
        categories=[CategoryResponse.model_validate(c) for c in items],
        pagination=Pagination.create(page=page, limit=limit, total=total),
    )


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    data: CategoryCreate,
    categories: Categories,
    principal: Principal = Depends(with_auth(category_rule("categories.create"))),
):
    category = await categories.create(data.model_dump(), created_by=principal.id)
    await invalidate_blog_cache()
    return CategoryResponse.model_validate(category)


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: str, categories: Categories, _: AuthorPrincipal):
    category = await categories.get_or_404(category_id)
    return CategoryResponse.model_validate(category)


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: str,
    data: CategoryUpdate,
    categories: Categories,
    _: Principal = Depends(with_auth(category_rule("categories.edit"))),
):
    category = await categories.get_or_404(category_id)
    category = await categories.update(category, data.model_dump(exclude_unset=True))
    await invalidate_blog_cache()
    return CategoryResponse.model_validate(category)


@router.delete("/{category_id}", response_model=MessageResponse)
async def delete_category(
    category_id: str,
    categories: Categories,
    _: Principal = Depends(with_auth(category_rule("categories.delete"))),
):
    """Delete a category. Refused while posts still reference it."""
    category = await categories.get_or_404(category_id)
    await categories.delete(category)
    await invalidate_blog_cache()
    return MessageResponse(message="Category deleted successfully", id=category_id)

"""
Post management routes.

Reading or editing a single post goes through `posts.edit` with the post's
author as owner, so authors (who only hold `posts.edit.own`) are limited to
their own posts while editors and admins reach every post.
"""

from typing import Literal

from fastapi import APIRouter, Depends, Query, status

from blog_cms.api.dependencies.services import Posts
from blog_cms.core.auth.dependencies import AuthorPrincipal, Authorize, EditorPrincipal, with_auth
from blog_cms.core.auth.interfaces import AccessRule, Principal
from blog_cms.core.auth.permissions import Role
from blog_cms.schemas.common import MAX_PAGE_SIZE, MessageResponse, Pagination
from blog_cms.schemas.post import PostCreate, PostListResponse, PostResponse, PostUpdate
from blog_cms.utils.caching import invalidate_blog_cache

router = APIRouter()

CAN_CREATE = AccessRule.build(
    allowed_roles=[Role.ADMIN, Role.EDITOR, Role.AUTHOR],
    required_permissions=["posts.create"],
)


@router.get("", response_model=PostListResponse)
async def list_posts(
    posts: Posts,
    principal: AuthorPrincipal,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    status_filter: Literal["draft", "published", "scheduled", "archived"] | None = Query(
        None, alias="status"
    ),
    category: str | None = None,
    author: str | None = None,
    search: str | None = None,
):
    """List posts. Authors only see their own."""
    author_id = principal.id if principal.role == Role.AUTHOR.value else author

    items, total = await posts.list_posts(
        page=page,
        limit=limit,
        status=status_filter,
        category_id=category,
        author_id=author_id,
        search=search,
    )
    return PostListResponse(
        posts=[PostResponse.model_validate(p) for p in items],
        pagination=Pagination.create(page=page, limit=limit, total=total),
    )


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    data: PostCreate,
    posts: Posts,
    principal: Principal = Depends(with_auth(CAN_CREATE)),
):
    """Create a post owned by the caller."""
    post = await posts.create(author_id=principal.id, data=data.model_dump())
    await invalidate_blog_cache()
    return PostResponse.model_validate(post)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: str, posts: Posts, auth: Authorize, _: AuthorPrincipal):
    post = await posts.get_or_404(post_id)
    auth.require("posts.edit", owner_id=post.author_id)
    return PostResponse.model_validate(post)


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: str,
    data: PostUpdate,
    posts: Posts,
    auth: Authorize,
    principal: AuthorPrincipal,
):
    post = await posts.get_or_404(post_id)
    auth.require("posts.edit", owner_id=post.author_id)

    post = await posts.update(
        post,
        data.model_dump(exclude_unset=True),
        modified_by=principal.id,
    )
    await invalidate_blog_cache()
    return PostResponse.model_validate(post)


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: str,
    posts: Posts,
    _: EditorPrincipal,
):
    """Delete a post (admins and editors)."""
    post = await posts.get_or_404(post_id)
    await posts.delete(post)
    await invalidate_blog_cache()
    return MessageResponse(message="Post deleted successfully", id=post_id)

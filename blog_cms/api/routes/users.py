"""
User management routes.
"""

from fastapi import APIRouter, Query, status

from blog_cms.api.dependencies.services import Users
from blog_cms.core.auth.dependencies import AdminPrincipal, CurrentPrincipal
from blog_cms.core.auth.errors import AuthorizationError
from blog_cms.core.auth.interfaces import Principal
from blog_cms.core.auth.permissions import Role
from blog_cms.core.errors import ValidationFailed
from blog_cms.schemas.common import MAX_PAGE_SIZE, MessageResponse, Pagination
from blog_cms.schemas.user import UserCreate, UserListResponse, UserResponse, UserUpdate
from blog_cms.utils.caching import invalidate_blog_cache

router = APIRouter()


def require_self_or_admin(principal: Principal, user_id: str) -> None:
    if principal.id != user_id and not principal.is_admin:
        raise AuthorizationError("Insufficient permissions")


@router.get("", response_model=UserListResponse)
async def list_users(
    users: Users,
    _: AdminPrincipal,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    role: Role | None = None,
    status_filter: str | None = Query(None, alias="status", pattern="^(active|inactive)$"),
    search: str | None = None,
):
    """List users (admin only)."""
    items, total = await users.list_users(
        page=page,
        limit=limit,
        role=role.value if role else None,
        status=status_filter,
        search=search,
    )
    return UserListResponse(
        users=[UserResponse.model_validate(u) for u in items],
        pagination=Pagination.create(page=page, limit=limit, total=total),
    )


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(data: UserCreate, users: Users, _: AdminPrincipal):
    """Create a user with the catalog permissions of its role (admin only)."""
    user = await users.create_user(
        email=data.email,
        display_name=data.display_name,
        role=data.role,
        password=data.password,
        bio=data.bio,
        expertise=data.expertise,
    )
    return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, users: Users, principal: CurrentPrincipal):
    """Get user by ID (self or admin)."""
    require_self_or_admin(principal, user_id)
    user = await users.get_or_404(user_id)
    return UserResponse.model_validate(user)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    data: UserUpdate,
    users: Users,
    principal: CurrentPrincipal,
):
    """
    Update a user.

    Users may edit their own profile; only admins may change `role` or
    `active`, and doing so refreshes the stored permissions.
    """
    require_self_or_admin(principal, user_id)
    user = await users.update(
        user_id,
        data.model_dump(exclude_unset=True, exclude_none=True),
        as_admin=principal.is_admin,
    )
    await invalidate_blog_cache()
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: str, users: Users, principal: AdminPrincipal):
    """Delete a user (admin only, never yourself)."""
    if user_id == principal.id:
        raise ValidationFailed("Cannot delete your own account")

    await users.delete(user_id)
    await invalidate_blog_cache()
    return MessageResponse(message="User deleted successfully", id=user_id)


@router.post("/{user_id}/deactivate", response_model=UserResponse)
async def deactivate_user(user_id: str, users: Users, principal: AdminPrincipal):
    """Deactivate an account; its tokens stop authenticating (admin only)."""
    if user_id == principal.id:
        raise ValidationFailed("Cannot deactivate your own account")

    user = await users.deactivate_user(user_id)
    await invalidate_blog_cache()
    return UserResponse.model_validate(user)


@router.post("/{user_id}/reactivate", response_model=UserResponse)
async def reactivate_user(user_id: str, users: Users, _: AdminPrincipal):
    user = await users.reactivate_user(user_id)
    await invalidate_blog_cache()
    return UserResponse.model_validate(user)

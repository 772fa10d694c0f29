"""
User schemas.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from blog_cms.core.auth.permissions import Role

from .common import Pagination


class UserResponse(BaseModel):
    """User response schema."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: EmailStr
    display_name: str
    role: str
    permissions: list[str]
    active: bool
    avatar_url: str | None = None
    bio: str
    expertise: list[str]
    social: dict[str, Any]
    posts_count: int
    drafts_count: int
    created_at: datetime
    last_login_at: datetime | None = None


class CurrentUserResponse(BaseModel):
    """The caller's record plus what the policy engine grants them."""
    user: UserResponse
    effective_permissions: list[str]


class UserCreate(BaseModel):
    """Admin user creation request."""
    email: EmailStr
    display_name: str = Field(min_length=1, max_length=255)
    role: Role = Role.AUTHOR
    password: str | None = None
    bio: str = ""
    expertise: list[str] = Field(default_factory=list)


class UserUpdate(BaseModel):
    """
    User update request.

    `role` and `active` are ignored unless the caller is an admin.
    """
    display_name: str | None = Field(None, min_length=1, max_length=255)
    bio: str | None = None
    expertise: list[str] | None = None
    social: dict[str, str] | None = None
    avatar_url: str | None = Field(None, max_length=500)
    role: Role | None = None
    active: bool | None = None


class UserListResponse(BaseModel):
    """Paginated user list response."""
    users: list[UserResponse]
    pagination: Pagination

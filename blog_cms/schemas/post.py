"""
Post schemas.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .common import Pagination


class PostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    slug: str
    title: str
    description: str
    content: str
    excerpt: str
    status: str
    publish_date: datetime | None = None
    scheduled_for: datetime | None = None
    author_id: str
    category_id: str
    featured_image: dict[str, Any] | None = None
    tags: list[str]
    featured: bool
    reading_time: int
    seo: dict[str, Any]
    views: int
    likes: int
    shares: int
    moderation_status: str
    last_modified_by: str | None = None
    created_at: datetime
    updated_at: datetime


class PostCreate(BaseModel):
    title: str = Field(min_length=1, max_length=500)
    description: str = Field(min_length=1)
    content: str = Field(min_length=1)
    category_id: str
    excerpt: str | None = None
    tags: list[str] = Field(default_factory=list)
    featured: bool = False
    featured_image: dict[str, Any] | None = None
    seo: dict[str, Any] | None = None
    status: Literal["draft", "published", "scheduled"] = "draft"
    scheduled_for: datetime | None = None


class PostUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=500)
    description: str | None = Field(None, min_length=1)
    content: str | None = Field(None, min_length=1)
    category_id: str | None = None
    excerpt: str | None = None
    tags: list[str] | None = None
    featured: bool | None = None
    featured_image: dict[str, Any] | None = None
    seo: dict[str, Any] | None = None
    status: Literal["draft", "published", "scheduled", "archived"] | None = None
    scheduled_for: datetime | None = None


class PostListResponse(BaseModel):
    posts: list[PostResponse]
    pagination: Pagination

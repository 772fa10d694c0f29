"""
Public blog schemas.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class BlogAuthor(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    display_name: str
    avatar_url: str | None = None
    bio: str
    expertise: list[str]
    social: dict[str, Any]


class BlogCategory(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    slug: str
    name: str
    description: str
    color: str
    icon: str
    featured_image: str
    featured: bool
    sort_order: int
    post_count: int = 0


class BlogPost(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    slug: str
    title: str
    description: str
    excerpt: str
    content: str
    publish_date: datetime | None = None
    author_id: str
    category_id: str
    featured_image: dict[str, Any] | None = None
    tags: list[str]
    featured: bool
    reading_time: int
    seo: dict[str, Any]

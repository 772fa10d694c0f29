"""
Category schemas.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .common import Pagination

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    slug: str
    name: str
    description: str
    color: str
    icon: str
    featured_image: str
    featured: bool
    active: bool
    sort_order: int
    seo: dict[str, Any]
    hero: dict[str, Any]
    post_count: int
    created_at: datetime
    updated_at: datetime


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    color: str = Field("#3B82F6", pattern=HEX_COLOR)
    icon: str = Field("📁", max_length=32)
    featured_image: str = ""
    featured: bool = False
    active: bool = True
    sort_order: int = 999
    seo: dict[str, Any] | None = None
    hero: dict[str, Any] | None = None


class CategoryUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, min_length=1)
    color: str | None = Field(None, pattern=HEX_COLOR)
    icon: str | None = Field(None, max_length=32)
    featured_image: str | None = None
    featured: bool | None = None
    active: bool | None = None
    sort_order: int | None = None
    seo: dict[str, Any] | None = None
    hero: dict[str, Any] | None = None


class CategoryListResponse(BaseModel):
    categories: list[CategoryResponse]
    pagination: Pagination

"""
Site content schemas.
"""

from typing import Any

from pydantic import BaseModel, Field


class SiteContentUpdate(BaseModel):
    """Partial block update; nested objects are merged into what is stored."""
    type: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)


class SiteContentResponse(BaseModel):
    data: dict[str, Any]


class SiteContentUpdateResponse(BaseModel):
    message: str
    data: dict[str, Any]

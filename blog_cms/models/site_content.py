"""
Site content model.

Editable blocks shown on the public site, one row per block (`hero`,
`stats`). The block body is free-form JSON so the front end can grow new
fields without a schema change.
"""

from typing import Any

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class SiteContent(Base, TimestampMixin):
    """Editable site content block."""

    __tablename__ = "site_content"

    key: Mapped[str] = mapped_column(String(32), primary_key=True)
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    updated_by: Mapped[str | None] = mapped_column(String(128), nullable=True)

    def __repr__(self) -> str:
        return f"<SiteContent {self.key}>"

"""
Base model classes and mixins.

- TimestampMixin: created_at, updated_at (always use)
- StringIdMixin: opaque string primary key

Ids are strings rather than UUID columns because principals can come from
an external identity provider whose user ids are arbitrary strings.
"""

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid4().hex


class Base(DeclarativeBase):
    """Base class for all models."""

    # All datetimes are timezone-aware
    type_annotation_map = {
        datetime: DateTime(timezone=True),
    }

    def to_dict(self) -> dict[str, Any]:
        """Convert model to dictionary."""
        return {c.name: getattr(self, c.name) for c in self.__table__.columns}


class StringIdMixin:
    """
    Mixin for a string primary key (uuid4 hex by default).

    Usage:
        class MyModel(Base, StringIdMixin):
            __tablename__ = "my_table"
    """

    id: Mapped[str] = mapped_column(
        String(128),
        primary_key=True,
        default=new_id,
    )


class TimestampMixin:
    """
    Mixin for created_at and updated_at timestamps.

    Values are set on the Python side so they are available right after a
    flush without another round trip.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )

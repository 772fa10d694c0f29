"""
Shared schemas.
"""

from pydantic import BaseModel

# Upper bound for every `limit` query parameter
MAX_PAGE_SIZE = 50


class Pagination(BaseModel):
    """Offset pagination block returned next to list results."""

    page: int
    limit: int
    total: int
    pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def create(cls, page: int, limit: int, total: int) -> "Pagination":
        pages = (total + limit - 1) // limit if limit > 0 else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            pages=pages,
            has_next=page < pages,
            has_prev=page > 1,
        )


class MessageResponse(BaseModel):
    message: str
    id: str | None = None

"""API dependencies."""

from .database import DbSession, get_db
from .services import (
    get_auth_service,
    get_blog_service,
    get_category_service,
    get_post_service,
    get_site_content_service,
    get_user_service,
)

__all__ = [
    "DbSession",
    "get_db",
    "get_auth_service",
    "get_blog_service",
    "get_category_service",
    "get_post_service",
    "get_site_content_service",
    "get_user_service",
]

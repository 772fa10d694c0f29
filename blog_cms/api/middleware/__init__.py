"""Middleware package."""

from blog_cms.api.middleware.request_id import RequestIdMiddleware, get_request_id
from blog_cms.api.middleware.logging import LoggingMiddleware

__all__ = [
    "RequestIdMiddleware",
    "get_request_id",
    "LoggingMiddleware",
]

"""
API routes aggregation.
"""

from fastapi import APIRouter

from .auth import router as auth_router
from .blog import router as blog_router
from .categories import router as categories_router
from .posts import router as posts_router
from .site_content import router as site_content_router
from .users import router as users_router

router = APIRouter()

router.include_router(auth_router, prefix="/auth", tags=["auth"])
router.include_router(users_router, prefix="/admin/users", tags=["users"])
router.include_router(posts_router, prefix="/admin/posts", tags=["posts"])
router.include_router(categories_router, prefix="/admin/categories", tags=["categories"])
router.include_router(blog_router, prefix="/blog", tags=["blog"])
router.include_router(site_content_router, prefix="/site-content", tags=["site-content"])

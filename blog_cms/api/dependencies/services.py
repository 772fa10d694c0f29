"""
Service dependencies.
"""

from typing import Annotated

from fastapi import Depends

from .database import DbSession
from blog_cms.services.auth import AuthService
from blog_cms.services.blog import BlogService
from blog_cms.services.categories import CategoryService
from blog_cms.services.posts import PostService
from blog_cms.services.site_content import SiteContentService
from blog_cms.services.user import UserService


async def get_user_service(db: DbSession) -> UserService:
    """Get user service instance."""
    return UserService(db)


async def get_auth_service(db: DbSession) -> AuthService:
    return AuthService(db)


async def get_post_service(db: DbSession) -> PostService:
    return PostService(db)


async def get_category_service(db: DbSession) -> CategoryService:
    return CategoryService(db)


async def get_blog_service(db: DbSession) -> BlogService:
    return BlogService(db)


async def get_site_content_service(db: DbSession) -> SiteContentService:
    return SiteContentService(db)


Users = Annotated[UserService, Depends(get_user_service)]
Posts = Annotated[PostService, Depends(get_post_service)]
Categories = Annotated[CategoryService, Depends(get_category_service)]
Blog = Annotated[BlogService, Depends(get_blog_service)]
SiteContents = Annotated[SiteContentService, Depends(get_site_content_service)]

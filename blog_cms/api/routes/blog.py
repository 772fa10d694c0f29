"""
Public blog routes (no authentication).
"""

from fastapi import APIRouter, Query

from blog_cms.api.dependencies.services import Blog
from blog_cms.schemas.blog import BlogAuthor, BlogCategory, BlogPost

router = APIRouter()


@router.get("/posts", response_model=list[BlogPost])
async def all_posts(blog: Blog):
    return await blog.all_posts()


@router.get("/posts/latest", response_model=list[BlogPost])
async def latest_posts(blog: Blog, limit: int = Query(5, ge=1, le=50)):
    return await blog.latest_posts(limit)


@router.get("/posts/featured", response_model=list[BlogPost])
async def featured_posts(blog: Blog):
    return await blog.featured_posts()


@router.get("/posts/{slug}", response_model=BlogPost)
async def post_by_slug(slug: str, blog: Blog):
    return await blog.post_by_slug(slug)


@router.get("/categories", response_model=list[BlogCategory])
async def categories(blog: Blog):
    return await blog.categories()


@router.get("/categories/{slug}", response_model=BlogCategory)
async def category_by_slug(slug: str, blog: Blog):
    return await blog.category_by_slug(slug)


@router.get("/categories/{slug}/posts", response_model=list[BlogPost])
async def posts_by_category(slug: str, blog: Blog):
    return await blog.posts_by_category(slug)


@router.get("/tags", response_model=list[str])
async def tags(blog: Blog):
    return await blog.tags()


@router.get("/search", response_model=list[BlogPost])
async def search(blog: Blog, q: str = Query("", max_length=200)):
    return await blog.search(q)


@router.get("/authors/{author_id}", response_model=BlogAuthor)
async def author(author_id: str, blog: Blog):
    return await blog.author(author_id)

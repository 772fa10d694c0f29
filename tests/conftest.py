"""
Pytest fixtures for testing.

Provides:
- Async database session on an in-memory SQLite database
- Test client with the database dependency overridden
- Factory fixtures for users, categories and posts
- Bearer token helpers
"""

from typing import AsyncGenerator, Iterable
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from blog_cms.main import app
from blog_cms.api.dependencies.database import get_db
from blog_cms.core.auth.permissions import Role, permissions_for
from blog_cms.models.base import Base
from blog_cms.models.category import Category
from blog_cms.models.post import Post, PostStatus
from blog_cms.models.user import User
from blog_cms.services.auth import create_access_token, hash_password
from blog_cms.utils.caching import cache


# Test database URL (SQLite in-memory for speed)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Database session, rolled back after the test."""
    session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Test client with database session override."""

    async def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture(autouse=True)
async def clear_blog_cache():
    """The blog cache is process-global; start every test empty."""
    await cache.clear()
    yield
    await cache.clear()


# ============ Factory Fixtures ============


class UserFactory:
    """Factory for creating test users."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self,
        role: Role = Role.AUTHOR,
        email: str | None = None,
        password: str | None = None,
        display_name: str = "Test User",
        active: bool = True,
        permissions: Iterable[str] | None = None,
    ) -> User:
        """
        Create a user in the database.

        `permissions` overrides the catalog snapshot, e.g. to simulate a
        record written before the catalog changed.
        """
        user = User(
            email=email or f"{role.value}-{uuid4().hex[:8]}@example.com",
            password_hash=hash_password(password) if password else None,
            display_name=display_name,
            role=role.value,
            permissions=list(permissions_for(role) if permissions is None else permissions),
            active=active,
        )
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        return user


class CategoryFactory:
    """Factory for creating test categories."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self,
        name: str | None = None,
        active: bool = True,
        sort_order: int = 999,
        featured: bool = False,
    ) -> Category:
        name = name or f"Category {uuid4().hex[:6]}"
        category = Category(
            slug=name.lower().replace(" ", "-"),
            name=name,
            description=f"All about {name}",
            active=active,
            sort_order=sort_order,
            featured=featured,
        )
        self.db.add(category)
        await self.db.commit()
        await self.db.refresh(category)
        return category


class PostFactory:
    """Factory for creating test posts (bypasses the service counters)."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self,
        author: User,
        category: Category,
        title: str | None = None,
        status: PostStatus = PostStatus.PUBLISHED,
        content: str = "Some words about testing.",
        tags: list[str] | None = None,
        featured: bool = False,
    ) -> Post:
        title = title or f"Post {uuid4().hex[:6]}"
        post = Post(
            slug=title.lower().replace(" ", "-"),
            title=title,
            description=f"Description of {title}",
            content=content,
            excerpt="",
            status=status.value,
            author_id=author.id,
            category_id=category.id,
            tags=tags or [],
            featured=featured,
        )
        self.db.add(post)
        await self.db.commit()
        await self.db.refresh(post)
        return post


@pytest_asyncio.fixture
async def user_factory(db: AsyncSession) -> UserFactory:
    return UserFactory(db)


@pytest_asyncio.fixture
async def category_factory(db: AsyncSession) -> CategoryFactory:
    return CategoryFactory(db)


@pytest_asyncio.fixture
async def post_factory(db: AsyncSession) -> PostFactory:
    return PostFactory(db)


@pytest_asyncio.fixture
async def admin_user(user_factory: UserFactory) -> User:
    return await user_factory.create(role=Role.ADMIN, email="admin@example.com")


@pytest_asyncio.fixture
async def editor_user(user_factory: UserFactory) -> User:
    return await user_factory.create(role=Role.EDITOR, email="editor@example.com")


@pytest_asyncio.fixture
async def author_user(user_factory: UserFactory) -> User:
    return await user_factory.create(role=Role.AUTHOR, email="author@example.com")


@pytest_asyncio.fixture
async def category(category_factory: CategoryFactory) -> Category:
    return await category_factory.create(name="Engineering")


# ============ Auth Helpers ============


def get_auth_headers(user: User) -> dict[str, str]:
    """Bearer header for any user."""
    token = create_access_token(user.id, email=user.email, name=user.display_name)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(admin_user: User) -> dict[str, str]:
    return get_auth_headers(admin_user)


@pytest.fixture
def editor_headers(editor_user: User) -> dict[str, str]:
    return get_auth_headers(editor_user)


@pytest.fixture
def author_headers(author_user: User) -> dict[str, str]:
    return get_auth_headers(author_user)

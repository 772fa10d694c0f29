"""
Tests for the request-scoped session dependency.
"""

import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from blog_cms.api.dependencies import database
from blog_cms.core.auth.errors import AuthorizationError
from blog_cms.models.user import User


@pytest_asyncio.fixture
async def session_factory(db_engine, monkeypatch):
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    monkeypatch.setattr(database, "async_session_factory", factory)
    return factory


async def count_users(factory) -> int:
    async with factory() as session:
        return await session.scalar(select(func.count()).select_from(User))


def new_user(email: str) -> User:
    return User(email=email, display_name="Writer", role="author", permissions=[])


@pytest.mark.asyncio
async def test_session_commits_on_success(session_factory):
    sessions = database.get_db()
    session = await sessions.__anext__()
    session.add(new_user("kept@example.com"))

    with pytest.raises(StopAsyncIteration):
        await sessions.__anext__()

    assert await count_users(session_factory) == 1


@pytest.mark.asyncio
async def test_session_rolls_back_on_authorization_error(session_factory):
    sessions = database.get_db()
    session = await sessions.__anext__()
    session.add(new_user("dropped@example.com"))
    await session.flush()

    with pytest.raises(AuthorizationError):
        await sessions.athrow(AuthorizationError("Insufficient role permissions"))

    assert await count_users(session_factory) == 0

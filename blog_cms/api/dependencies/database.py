"""
Request-scoped database session.

One session per request: committed after the handler returns, rolled back
when anything raised. Authorization and validation errors roll back too, so
a 403 halfway through a write never leaves partial rows behind.
"""

from typing import Annotated, AsyncGenerator

import structlog
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from blog_cms.core.errors import AppError
from blog_cms.models.database import async_session_factory

logger = structlog.get_logger()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except AppError as e:
            await session.rollback()
            logger.debug("Transaction rolled back", status_code=e.status_code, error=e.message)
            raise
        except Exception:
            await session.rollback()
            logger.warning("Transaction rolled back after unexpected error")
            raise


DbSession = Annotated[AsyncSession, Depends(get_db)]

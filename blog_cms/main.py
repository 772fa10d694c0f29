"""
FastAPI application entry point.
"""

import asyncio
from contextlib import asynccontextmanager, suppress
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from blog_cms.core.config import settings
from blog_cms.core.errors import AppError
from blog_cms.core.logging import configure_logging
from blog_cms.api.dependencies.database import DbSession
from blog_cms.api.routes import router as api_router
from blog_cms.api.middleware.logging import LoggingMiddleware
from blog_cms.api.middleware.request_id import RequestIdMiddleware
from blog_cms.models.database import async_session_factory, close_db, init_db
from blog_cms.utils.caching import cache, run_periodic_cleanup
from blog_cms.utils.health import HealthChecker, HealthStatus, check_cache, check_database

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events."""
    # Startup
    configure_logging(settings.log_level, settings.log_format)
    await init_db()

    if settings.auth.bootstrap_admins:
        from blog_cms.services.user import UserService

        async with async_session_factory() as session:
            admins = await UserService(session).bootstrap_admin_users()
            await session.commit()
        logger.info("Admin bootstrap finished", admins=len(admins))

    cleanup_task = asyncio.create_task(run_periodic_cleanup())

    logger.info("Application started", environment=settings.environment)

    yield

    # Shutdown
    cleanup_task.cancel()
    with suppress(asyncio.CancelledError):
        await cleanup_task
    await cache.clear()
    await close_db()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    # Middleware (order matters - last added is outermost)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routes
    app.include_router(api_router, prefix="/api")

    # Exception handlers
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        """Render application errors as {"error", "code"}."""
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict(),
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler."""
        logger.exception("Unhandled error", path=request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": str(exc) if settings.debug else "An error occurred",
            },
        )

    # Health checks
    checker = HealthChecker(
        version=settings.app_version,
        environment=settings.environment,
    )

    @app.get("/health")
    async def health_check():
        """Quick health check endpoint (for load balancers)."""
        return checker.run_quick()

    @app.get("/health/detailed")
    async def health_check_detailed(db: DbSession):
        """Detailed health check with database and cache status."""
        detailed = HealthChecker(
            version=settings.app_version,
            environment=settings.environment,
        )
        detailed.add_check("database", lambda: check_database(db))
        detailed.add_check("cache", lambda: check_cache(cache))

        health = await detailed.run()
        status_code = 503 if health.status == HealthStatus.UNHEALTHY else 200
        return JSONResponse(content=health.to_dict(), status_code=status_code)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "blog_cms.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        workers=settings.workers,
    )

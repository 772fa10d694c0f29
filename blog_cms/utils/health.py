"""Health check utilities."""

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Optional

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from blog_cms.utils.caching import TTLCache

logger = structlog.get_logger()

# Database round trips slower than this report "degraded"
DB_SLOW_MS = 100


class HealthStatus(str, Enum):
    """Health status values."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class ComponentHealth:
    """Health status of a single component."""

    name: str
    status: HealthStatus
    latency_ms: Optional[float] = None
    message: Optional[str] = None
    details: dict = field(default_factory=dict)


@dataclass
class SystemHealth:
    """Overall system health status."""

    status: HealthStatus
    version: str
    environment: str
    components: list[ComponentHealth] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "version": self.version,
            "environment": self.environment,
            "components": {
                c.name: {
                    "status": c.status.value,
                    "latency_ms": c.latency_ms,
                    "message": c.message,
                    **c.details,
                }
                for c in self.components
            },
        }


async def check_database(db: AsyncSession) -> ComponentHealth:
    """Check database connectivity and latency."""
    start = time.perf_counter()
    try:
        result = await db.execute(text("SELECT 1"))
        result.scalar()
    except Exception as e:
        logger.error("Database health check failed", error=str(e))
        return ComponentHealth(
            name="database",
            status=HealthStatus.UNHEALTHY,
            message=str(e)[:100],
        )

    latency = (time.perf_counter() - start) * 1000
    slow = latency >= DB_SLOW_MS
    return ComponentHealth(
        name="database",
        status=HealthStatus.DEGRADED if slow else HealthStatus.HEALTHY,
        latency_ms=round(latency, 2),
        message="Slow response" if slow else "Connected",
    )


async def check_cache(cache: TTLCache) -> ComponentHealth:
    """Report the in-process blog cache; expired entries are purged first."""
    removed = await cache.cleanup()
    return ComponentHealth(
        name="cache",
        status=HealthStatus.HEALTHY,
        message="In-memory",
        details={"entries": len(cache), "expired_removed": removed},
    )


class HealthChecker:
    """
    Runs named health checks concurrently.

    Usage:
        checker = HealthChecker(version="0.1.0", environment="production")
        checker.add_check("database", lambda: check_database(db))

        health = await checker.run()
    """

    def __init__(self, version: str, environment: str):
        self.version = version
        self.environment = environment
        self.checks: dict[str, Callable[[], Awaitable[ComponentHealth]]] = {}

    def add_check(self, name: str, check_fn: Callable[[], Awaitable[ComponentHealth]]) -> None:
        self.checks[name] = check_fn

    async def run(self) -> SystemHealth:
        results = await asyncio.gather(
            *[check() for check in self.checks.values()],
            return_exceptions=True,
        )

        components = []
        for name, result in zip(self.checks.keys(), results):
            if isinstance(result, Exception):
                logger.error("Health check raised", check=name, error=str(result))
                components.append(ComponentHealth(
                    name=name,
                    status=HealthStatus.UNHEALTHY,
                    message=str(result)[:100],
                ))
            else:
                components.append(result)

        statuses = {c.status for c in components}
        if HealthStatus.UNHEALTHY in statuses:
            overall = HealthStatus.UNHEALTHY
        elif HealthStatus.DEGRADED in statuses:
            overall = HealthStatus.DEGRADED
        else:
            overall = HealthStatus.HEALTHY

        return SystemHealth(
            status=overall,
            version=self.version,
            environment=self.environment,
            components=components,
        )

    def run_quick(self) -> dict:
        """Status and version only (for load balancers)."""
        return {
            "status": HealthStatus.HEALTHY.value,
            "version": self.version,
            "environment": self.environment,
        }

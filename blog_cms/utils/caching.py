"""
In-process cache for public blog reads.

Usage:
    posts = await get_cached_or_fetch(
        CacheKeys.latest_posts(5),
        lambda: blog.latest_posts(5),
        ttl=CacheTTL.medium(),
    )

    # After a write
    await cache.delete_prefix("blog:")

Entries live in this process only; multi-worker deployments each hold their
own copy and rely on TTL expiry to converge.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TypeVar

import structlog

from blog_cms.core.config import settings

logger = structlog.get_logger()

T = TypeVar("T")

DEFAULT_TTL = 300


@dataclass
class CacheEntry:
    """Cache entry with value and expiration (monotonic seconds)."""
    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class TTLCache:
    """
    Dict-backed cache with per-entry time-to-live.

    Usage:
        cache = TTLCache()
        await cache.set("key", "value", ttl=60)
        value = await cache.get("key")
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._store: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._store)

    async def get(self, key: str) -> Any | None:
        """Value for key, or None when missing or expired."""
        entry = self._store.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            del self._store[key]
            return None
        return entry.value

    async def set(self, key: str, value: Any, ttl: int = DEFAULT_TTL) -> None:
        self._store[key] = CacheEntry(value=value, expires_at=self._clock() + ttl)

    async def delete(self, key: str) -> bool:
        return self._store.pop(key, None) is not None

    async def delete_prefix(self, prefix: str) -> int:
        keys = [k for k in self._store if k.startswith(prefix)]
        for key in keys:
            del self._store[key]
        return len(keys)

    async def clear(self) -> None:
        self._store.clear()

    async def cleanup(self) -> int:
        """Remove expired entries, returning how many were dropped."""
        now = self._clock()
        expired = [k for k, v in self._store.items() if v.is_expired(now)]
        for key in expired:
            del self._store[key]
        return len(expired)


# Global cache instance
cache = TTLCache()


async def run_periodic_cleanup(
    interval: float | None = None,
    backend: TTLCache | None = None,
) -> None:
    """Drop expired entries every `interval` seconds until cancelled."""
    if backend is None:
        backend = cache
    interval = interval or settings.cache.cleanup_interval

    while True:
        await asyncio.sleep(interval)
        removed = await backend.cleanup()
        if removed:
            logger.debug("Cache cleanup", removed=removed, remaining=len(backend))


async def get_cached_or_fetch(
    key: str,
    fetcher: Callable[[], Awaitable[T]],
    ttl: int = DEFAULT_TTL,
    backend: TTLCache | None = None,
) -> T:
    """
    Cache-aside read.

    On a miss the fetcher is awaited and its result stored. Fetch errors are
    logged and re-raised; nothing is cached for them.
    """
    if backend is None:
        backend = cache

    if settings.cache.enabled:
        cached = await backend.get(key)
        if cached is not None:
            return cached

    try:
        value = await fetcher()
    except Exception:
        logger.exception("Cache fetch failed", key=key)
        raise

    if settings.cache.enabled and value is not None:
        await backend.set(key, value, ttl=ttl)
    return value


class CacheKeys:
    """Key builders for the public blog cache."""

    PREFIX = "blog:"

    ALL_POSTS = "blog:posts:all"
    FEATURED_POSTS = "blog:posts:featured"
    CATEGORIES = "blog:categories:all"
    TAGS = "blog:tags:all"

    @staticmethod
    def latest_posts(limit: int) -> str:
        return f"blog:posts:latest:{limit}"

    @staticmethod
    def post(slug: str) -> str:
        return f"blog:post:{slug}"

    @staticmethod
    def category(slug: str) -> str:
        return f"blog:category:{slug}"

    @staticmethod
    def category_posts(slug: str) -> str:
        return f"blog:category:{slug}:posts"

    @staticmethod
    def author(author_id: str) -> str:
        return f"blog:author:{author_id}"


class CacheTTL:
    """TTLs in seconds, read from CACHE_* settings."""

    @staticmethod
    def short() -> int:
        return settings.cache.short

    @staticmethod
    def medium() -> int:
        return settings.cache.medium

    @staticmethod
    def long() -> int:
        return settings.cache.long

    @staticmethod
    def very_long() -> int:
        return settings.cache.very_long


async def invalidate_blog_cache() -> int:
    """Drop every public blog entry after a content write."""
    removed = await cache.delete_prefix(CacheKeys.PREFIX)
    logger.debug("Blog cache invalidated", entries=removed)
    return removed

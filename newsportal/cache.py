import json
import logging

import redis.asyncio as redis

from newsportal.config import settings

logger = logging.getLogger(__name__)


def make_key(namespace: str, *parts) -> str:
    """
    Build a cache key such as ``news:list:feed:ru:1:10``.

    ``None`` parts are written as ``-`` so that "filter absent" and
    "filter set to an empty string" never share a key.
    """
    return ":".join([namespace, *("-" if p is None else str(p) for p in parts)])


class CacheManager:
    """
    Redis cache-aside helper for localized news and category views.

    Redis is optional.  When it is unreachable (or was never connected, as
    in the test suite) reads behave as misses and writes are skipped, so the
    services always fall through to the database.
    """

    def __init__(self) -> None:
        self._redis: redis.Redis | None = None
        self._hits: int = 0
        self._misses: int = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        """Open the connection pool at application startup."""
        self._redis = redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        try:
            await self._redis.ping()
            logger.info("Redis connected: %s", settings.REDIS_URL)
        except Exception as exc:  # pragma: no cover
            logger.warning("Redis unreachable, caching disabled: %s", exc)
            self._redis = None

    async def disconnect(self) -> None:
        if self._redis:
            await self._redis.aclose()
            self._redis = None

    # ------------------------------------------------------------------
    # Reads / writes
    # ------------------------------------------------------------------

    async def get(self, key: str) -> dict | list | None:
        """Return the decoded value stored under *key*, or None on miss or error."""
        if self._redis is None:
            self._misses += 1
            return None
        try:
            raw = await self._redis.get(key)
        except Exception as exc:
            logger.debug("Cache GET failed for %r: %s", key, exc)
            raw = None
        if raw is None:
            self._misses += 1
            return None
        self._hits += 1
        return json.loads(raw)

    async def set(self, key: str, value: dict | list, ttl: int | None = None) -> None:
        """Store *value* as JSON; failures are logged and otherwise ignored."""
        if self._redis is None:
            return
        try:
            await self._redis.set(key, json.dumps(value, default=str), ex=ttl)
        except Exception as exc:
            logger.debug("Cache SET failed for %r: %s", key, exc)

    async def delete_pattern(self, pattern: str) -> None:
        """Delete every key matching *pattern* (SCAN-based, never KEYS)."""
        if self._redis is None:
            return
        try:
            keys = [key async for key in self._redis.scan_iter(match=pattern)]
            if keys:
                await self._redis.delete(*keys)
                logger.debug("Cache dropped %d key(s) for %r", len(keys), pattern)
        except Exception as exc:
            logger.debug("Cache DELETE failed for %r: %s", pattern, exc)

    # ------------------------------------------------------------------
    # Invalidation
    # ------------------------------------------------------------------

    async def invalidate_news(self, news_id: int | None = None) -> None:
        """
        Drop cached news views after a create / update / delete.

        All list views (feed, category pages, search) go because their
        totals change; with *news_id* its detail entries in both languages
        go as well.
        """
        await self.delete_pattern("news:list:*")
        if news_id is not None:
            await self.delete_pattern(f"news:detail:{news_id}:*")

    async def invalidate_categories(self) -> None:
        """
        Drop cached category views and every cached news view.

        News views embed the localized category name, and deleting a
        category cascades to its news.
        """
        await self.delete_pattern("categories:*")
        await self.delete_pattern("news:*")

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    @property
    def stats(self) -> dict:
        total = self._hits + self._misses
        return {
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total * 100, 1) if total > 0 else 0.0,
        }


# Module-level singleton shared across all request handlers.
cache = CacheManager()

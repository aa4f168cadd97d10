import json
import logging

import redis.asyncio as redis

from article_folder.config import settings

logger = logging.getLogger(__name__)

LIST_KEY_PREFIX = "articles:list"
DETAIL_KEY_PREFIX = "articles:detail"


class CacheManager:
    """
    Cache-aside store for article provider reads, backed by Redis.

    Every public method tolerates a missing or unreachable Redis: reads
    report a miss and writes are skipped.  Folder context is deliberately
    absent from anything stored here, since breadcrumbs must reflect the
    folder tree as it is at request time.
    """

    def __init__(self) -> None:
        self._redis: redis.Redis | None = None
        self._hits: int = 0
        self._misses: int = 0

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
            logger.warning("Redis ping failed, article cache disabled: %s", exc)
            self._redis = None

    async def disconnect(self) -> None:
        if self._redis:
            await self._redis.aclose()
            self._redis = None

    async def get(self, key: str) -> dict | None:
        if not self._redis:
            self._misses += 1
            return None
        try:
            data = await self._redis.get(key)
        except Exception as exc:
            logger.debug("Cache GET error for key=%r: %s", key, exc)
            self._misses += 1
            return None
        if data is None:
            self._misses += 1
            return None
        self._hits += 1
        return json.loads(data)

    async def set(self, key: str, value: dict, ttl: int | None = None) -> None:
        if not self._redis:
            return
        try:
            await self._redis.set(key, json.dumps(value, default=str), ex=ttl)
        except Exception as exc:
            logger.debug("Cache SET error for key=%r: %s", key, exc)

    async def delete_pattern(self, pattern: str) -> None:
        """Delete all keys matching *pattern* using SCAN."""
        if not self._redis:
            return
        try:
            keys = [key async for key in self._redis.scan_iter(match=pattern)]
            if keys:
                await self._redis.delete(*keys)
                logger.debug("Cache invalidated %d key(s) matching %r", len(keys), pattern)
        except Exception as exc:
            logger.debug("Cache DELETE_PATTERN error for pattern=%r: %s", pattern, exc)

    async def invalidate_articles(self, article_id: int | None = None) -> None:
        """
        Drop every cached article page, plus the detail entry of
        *article_id* when given.

        Pages are keyed by their filters, and a single move can change
        the membership of any folder-scoped page, so they all go.
        """
        await self.delete_pattern(f"{LIST_KEY_PREFIX}:*")
        if article_id is not None:
            await self.delete_pattern(f"{DETAIL_KEY_PREFIX}:{article_id}")

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

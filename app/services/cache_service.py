import json
import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

from app.config import settings
from app.database import redis_client

logger = logging.getLogger(__name__)

FEED_KEY_PREFIX = "feed:"
ACTIVE_FEED_KEY = f"{FEED_KEY_PREFIX}active"
EMERGENCY_FEED_KEY = f"{FEED_KEY_PREFIX}emergency"
FEED_KEYS = (ACTIVE_FEED_KEY, EMERGENCY_FEED_KEY)
GENERATION_KEY = f"{FEED_KEY_PREFIX}generation"


def versioned_key(key: str, generation: int) -> str:
    return f"{key}:{generation}"


class FeedCache:
    """Redis-backed snapshot of serialized active posts.

    Snapshots are stored under the feed generation current when the read
    began. Invalidation bumps the generation, so a snapshot built from rows
    read before a write lands under a key nobody reads any more.

    Every read or write failure is logged and treated as a miss so callers
    fall back to the database.
    """

    def __init__(
        self,
        redis_client_instance: redis.Redis | None,
        ttl_seconds: int = settings.FEED_CACHE_TTL_SECONDS,
        enabled: bool = settings.CACHE_ENABLED,
    ):
        self.redis = redis_client_instance
        self.ttl_seconds = ttl_seconds
        self.enabled = enabled and redis_client_instance is not None

    async def generation(self) -> int | None:
        """Current feed generation, or None when the cache is unusable."""
        if not self.enabled or self.redis is None:
            return None

        try:
            raw = await self.redis.get(GENERATION_KEY)
        except RedisError as e:
            logger.warning(f"Feed cache generation lookup failed: {e}")
            return None

        try:
            return int(raw or 0)
        except (TypeError, ValueError) as e:
            logger.warning(f"Ignoring corrupt feed generation {raw!r}: {e}")
            return None

    async def get(self, key: str, generation: int | None) -> list[dict[str, object]] | None:
        if not self.enabled or generation is None or self.redis is None:
            return None

        cache_key = versioned_key(key, generation)
        try:
            raw = await self.redis.get(cache_key)
        except RedisError as e:
            logger.warning(f"Feed cache GET failed for {cache_key}: {e}")
            return None

        if raw is None:
            return None

        try:
            return json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning(f"Discarding corrupt feed cache entry {cache_key}: {e}")
            return None

    async def set(
        self, key: str, generation: int | None, items: list[dict[str, object]]
    ) -> None:
        if not self.enabled or generation is None or self.redis is None:
            return

        cache_key = versioned_key(key, generation)
        try:
            await self.redis.setex(cache_key, self.ttl_seconds, json.dumps(items))
        except RedisError as e:
            logger.warning(f"Feed cache SET failed for {cache_key}: {e}")

    async def invalidate_feed(self) -> None:
        if not self.enabled or self.redis is None:
            return

        try:
            generation = await self.redis.incr(GENERATION_KEY)
            await self.redis.delete(
                *(versioned_key(key, generation - 1) for key in FEED_KEYS)
            )
            logger.debug(f"Feed cache invalidated (generation {generation})")
        except RedisError as e:
            logger.warning(f"Feed cache invalidation failed: {e}")


feed_cache = FeedCache(redis_client)

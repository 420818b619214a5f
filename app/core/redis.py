"""Redis-backed JSON cache for read-mostly catalog data."""
import json
from typing import Any, Optional

import redis.asyncio as redis
import structlog
from redis.exceptions import RedisError

from app.core.config import settings

logger = structlog.get_logger(__name__)

CATEGORY_TREE_KEY = "catalog:categories"


class RedisClient:
    """JSON cache over a lazily created connection pool.

    With no URL configured every read is a miss and every write is a no-op.
    Redis failures are logged and reported the same way, so callers always
    fall back to the database.
    """

    def __init__(self, url: Optional[str] = None):
        self.url = url
        self._pool: Optional[redis.ConnectionPool] = None

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    def _connection(self) -> redis.Redis:
        if self._pool is None:
            self._pool = redis.ConnectionPool.from_url(
                self.url,
                decode_responses=True,
                retry_on_timeout=True,
                socket_keepalive=True,
            )
            logger.info("Redis pool created")
        return redis.Redis(connection_pool=self._pool)

    async def get(self, key: str) -> Optional[Any]:
        if not self.enabled:
            return None
        try:
            raw = await self._connection().get(key)
            return json.loads(raw) if raw is not None else None
        except (RedisError, ValueError) as e:
            logger.warning("Cache read failed", key=key, error=str(e))
            return None

    async def set(self, key: str, value: Any, expire: Optional[int] = None) -> bool:
        if not self.enabled:
            return False
        try:
            return bool(await self._connection().set(key, json.dumps(value), ex=expire))
        except (RedisError, ValueError) as e:
            logger.warning("Cache write failed", key=key, error=str(e))
            return False

    async def delete(self, key: str) -> bool:
        if not self.enabled:
            return False
        try:
            return await self._connection().delete(key) > 0
        except (RedisError, ValueError) as e:
            logger.warning("Cache invalidation failed", key=key, error=str(e))
            return False

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.disconnect()
            self._pool = None


# Shared cache; disabled when REDIS_URL is unset
redis_client = RedisClient(settings.REDIS_URL)

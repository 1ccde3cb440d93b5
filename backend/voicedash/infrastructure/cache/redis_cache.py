"""
Redis Cache Backend
Async Redis storage for VoiceCache entries
"""
import logging
from typing import List, Optional

import redis.asyncio as redis

from voicedash.domain.interfaces.cache_backend import CacheBackend

logger = logging.getLogger(__name__)


class RedisCacheBackend(CacheBackend):
    """
    Redis-backed cache.

    Entries are written with SETEX so Redis expires them natively; the
    TTL is still re-checked at read time by VoiceCache.
    """

    SCAN_COUNT = 100

    def __init__(self, redis_client=None, redis_url: str = "redis://localhost:6379"):
        """
        Args:
            redis_client: Optional pre-configured redis.asyncio client
            redis_url: Connection URL used when no client is given
        """
        self._redis = redis_client
        self._redis_url = redis_url

    async def initialize(self) -> None:
        """Connect and verify the server is reachable."""
        if self._redis is None:
            self._redis = redis.from_url(
                self._redis_url,
                encoding="utf-8",
                decode_responses=True
            )
        await self._redis.ping()
        logger.info(f"RedisCacheBackend connected: {self._redis_url}")

    async def get(self, key: str) -> Optional[str]:
        return await self._redis.get(key)

    async def set(self, key: str, value: str, ttl: int) -> None:
        await self._redis.setex(key, ttl, value)

    async def delete(self, key: str) -> None:
        await self._redis.delete(key)

    async def list_keys(self, prefix: str) -> List[str]:
        keys: List[str] = []
        cursor = 0
        while True:
            cursor, batch = await self._redis.scan(
                cursor,
                match=f"{prefix}*",
                count=self.SCAN_COUNT
            )
            keys.extend(batch)
            if cursor == 0:
                break
        return keys

    async def close(self) -> None:
        if self._redis is not None:
            await self._redis.close()

"""
In-Memory Cache Backend
Process-local storage used when no Redis URL is configured
"""
import time
from typing import Callable, Dict, List, Optional, Tuple

from voicedash.domain.interfaces.cache_backend import CacheBackend


class MemoryCacheBackend(CacheBackend):
    """Dict-backed cache with native expiry, for development and tests"""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._store: Dict[str, Tuple[str, float]] = {}
        self._clock = clock

    def _expired(self, key: str) -> bool:
        _, expires_at = self._store[key]
        return expires_at <= self._clock()

    async def get(self, key: str) -> Optional[str]:
        if key not in self._store:
            return None
        if self._expired(key):
            del self._store[key]
            return None
        return self._store[key][0]

    async def set(self, key: str, value: str, ttl: int) -> None:
        self._store[key] = (value, self._clock() + ttl)

    async def delete(self, key: str) -> None:
        self._store.pop(key, None)

    async def list_keys(self, prefix: str) -> List[str]:
        return [key for key in list(self._store) if key.startswith(prefix) and not self._expired(key)]

    def __len__(self) -> int:
        return len(self._store)

"""
Cache Backend Interface
Raw key-value storage underneath VoiceCache
"""
from abc import ABC, abstractmethod
from typing import List, Optional


class CacheBackend(ABC):
    """String key-value store with native expiry and prefix listing"""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl: int) -> None:
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        pass

    @abstractmethod
    async def list_keys(self, prefix: str) -> List[str]:
        pass

    async def close(self) -> None:
        """Release connections"""
        pass

"""Cache backends"""
from voicedash.infrastructure.cache.memory_cache import MemoryCacheBackend
from voicedash.infrastructure.cache.redis_cache import RedisCacheBackend

__all__ = ["MemoryCacheBackend", "RedisCacheBackend"]

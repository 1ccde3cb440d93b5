"""
Voice Cache Service
TTL cache for recordings and intent analysis data, namespaced per tenant

Key layout:
- recordings:user:{tenant}:page:{page}:limit:{limit}   call listing pages
- recordings:user:{tenant}:call:{call}                 single call
- intent:user:{tenant}:analysis:{call}                 per-call analysis
- intent:user:{tenant}:summary                         tenant intent summary
- enhanced:user:{tenant}:call:{call}                   per-call add-on result
"""
import json
import logging
import time
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, Field

from voicedash.domain.interfaces.cache_backend import CacheBackend

logger = logging.getLogger(__name__)


# Default TTLs in seconds
CACHE_TTL: Dict[str, int] = {
    "recordings": 300,
    "call_details": 600,
    "intent_analysis": 600,
    "intent_summary": 300,
    "enhanced_data": 1800,
}

NAMESPACES = ("recordings", "intent", "enhanced")


class CacheEntry(BaseModel):
    """Stored envelope: value plus insertion time and TTL"""
    data: Any = None
    timestamp: int
    ttl: int
    tags: List[str] = Field(default_factory=list)


class VoiceCache:
    """
    Tenant-namespaced TTL cache.

    Expiry is checked on every read against the entry's own insertion
    timestamp, independent of the backend's native expiry. Backend errors
    are logged and treated as a miss (reads) or a no-op (writes).
    """

    def __init__(
        self,
        backend: CacheBackend,
        ttls: Optional[Dict[str, int]] = None,
        default_ttl: int = 300,
        clock: Callable[[], float] = time.time
    ):
        self._backend = backend
        self._ttls = {**CACHE_TTL, **(ttls or {})}
        self._default_ttl = default_ttl
        self._clock = clock

    # ========== Keys ==========

    @staticmethod
    def recordings_key(tenant_id: str, page: int = 1, limit: int = 50) -> str:
        return f"recordings:user:{tenant_id}:page:{page}:limit:{limit}"

    @staticmethod
    def call_key(tenant_id: str, call_id: str) -> str:
        return f"recordings:user:{tenant_id}:call:{call_id}"

    @staticmethod
    def intent_key(tenant_id: str, call_id: str) -> str:
        return f"intent:user:{tenant_id}:analysis:{call_id}"

    @staticmethod
    def intent_summary_key(tenant_id: str) -> str:
        return f"intent:user:{tenant_id}:summary"

    @staticmethod
    def enhanced_data_key(tenant_id: str, call_id: str) -> str:
        return f"enhanced:user:{tenant_id}:call:{call_id}"

    @staticmethod
    def tenant_prefixes(tenant_id: str) -> List[str]:
        return [f"{namespace}:user:{tenant_id}:" for namespace in NAMESPACES]

    def ttl_for(self, kind: str) -> int:
        return self._ttls.get(kind, self._default_ttl)

    # ========== Primitives ==========

    async def get(self, key: str) -> Optional[Any]:
        """Return cached data, or None on miss, expiry or error."""
        try:
            raw = await self._backend.get(key)
            if raw is None:
                return None

            entry = CacheEntry(**json.loads(raw))

            now = int(self._clock())
            if entry.timestamp + entry.ttl < now:
                await self._backend.delete(key)
                return None

            return entry.data
        except Exception as e:
            logger.error(f"Cache get error for {key}: {e}")
            return None

    async def set(self, key: str, data: Any, ttl: Optional[int] = None, tags: Optional[List[str]] = None) -> None:
        ttl = ttl or self._default_ttl
        entry = CacheEntry(
            data=data,
            timestamp=int(self._clock()),
            ttl=ttl,
            tags=tags or []
        )
        try:
            await self._backend.set(key, entry.model_dump_json(), ttl)
        except Exception as e:
            logger.error(f"Cache set error for {key}: {e}")

    async def delete(self, key: str) -> None:
        try:
            await self._backend.delete(key)
        except Exception as e:
            logger.error(f"Cache delete error for {key}: {e}")

    async def list_keys(self, prefix: str) -> List[str]:
        try:
            return await self._backend.list_keys(prefix)
        except Exception as e:
            logger.error(f"Cache list error for {prefix}: {e}")
            return []

    # ========== Invalidation ==========

    async def invalidate_tenant(self, tenant_id: str) -> int:
        """
        Delete every recordings/intent/enhanced entry for a tenant.

        Returns:
            Number of keys deleted
        """
        keys: List[str] = []
        for prefix in self.tenant_prefixes(tenant_id):
            keys.extend(await self.list_keys(prefix))

        for key in keys:
            await self.delete(key)

        logger.debug(f"Invalidated {len(keys)} cache keys for tenant {tenant_id}")
        return len(keys)

    async def invalidate_call(self, tenant_id: str, call_id: str) -> None:
        """Delete the single-call, analysis and enhanced entries for one call."""
        for key in (
            self.call_key(tenant_id, call_id),
            self.intent_key(tenant_id, call_id),
            self.enhanced_data_key(tenant_id, call_id),
        ):
            await self.delete(key)

    # ========== Typed helpers ==========

    async def cache_recordings(self, tenant_id: str, recordings: Any, page: int = 1, limit: int = 50) -> None:
        await self.set(self.recordings_key(tenant_id, page, limit), recordings, self.ttl_for("recordings"))

    async def get_cached_recordings(self, tenant_id: str, page: int = 1, limit: int = 50) -> Optional[Any]:
        return await self.get(self.recordings_key(tenant_id, page, limit))

    async def cache_call(self, tenant_id: str, call_id: str, call_data: Any) -> None:
        await self.set(self.call_key(tenant_id, call_id), call_data, self.ttl_for("call_details"))

    async def get_cached_call(self, tenant_id: str, call_id: str) -> Optional[Any]:
        return await self.get(self.call_key(tenant_id, call_id))

    async def cache_intent_analysis(self, tenant_id: str, call_id: str, intent_data: Any) -> None:
        await self.set(self.intent_key(tenant_id, call_id), intent_data, self.ttl_for("intent_analysis"))

    async def get_cached_intent_analysis(self, tenant_id: str, call_id: str) -> Optional[Any]:
        return await self.get(self.intent_key(tenant_id, call_id))

    async def cache_intent_summary(self, tenant_id: str, summary: Any) -> None:
        await self.set(self.intent_summary_key(tenant_id), summary, self.ttl_for("intent_summary"))

    async def get_cached_intent_summary(self, tenant_id: str) -> Optional[Any]:
        return await self.get(self.intent_summary_key(tenant_id))

    async def cache_enhanced_data(self, tenant_id: str, call_id: str, enhanced_data: Any) -> None:
        await self.set(self.enhanced_data_key(tenant_id, call_id), enhanced_data, self.ttl_for("enhanced_data"))

    async def get_cached_enhanced_data(self, tenant_id: str, call_id: str) -> Optional[Any]:
        return await self.get(self.enhanced_data_key(tenant_id, call_id))

    # ========== Stats ==========

    async def stats(self) -> Dict[str, int]:
        """Key counts per namespace"""
        counts = {
            f"{namespace}_keys": len(await self.list_keys(f"{namespace}:"))
            for namespace in NAMESPACES
        }
        counts["total_keys"] = sum(counts.values())
        return counts

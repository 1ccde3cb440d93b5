"""
Unit Tests for Voice Cache
Tests read-time TTL, tenant namespace invalidation and backend failure handling
"""
import pytest
from unittest.mock import AsyncMock

from voicedash.domain.services.cache_service import VoiceCache
from voicedash.infrastructure.cache.memory_cache import MemoryCacheBackend


class FakeClock:
    def __init__(self, now=1_700_000_000):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def backend():
    # Backend without native expiry so only the read-time check applies
    return MemoryCacheBackend(clock=lambda: 0)


@pytest.fixture
def voice_cache(backend, clock):
    return VoiceCache(backend, clock=clock)


class TestKeys:
    """Tests for key layout."""

    def test_namespaced_keys(self):
        assert VoiceCache.recordings_key("t1", 2, 25) == "recordings:user:t1:page:2:limit:25"
        assert VoiceCache.call_key("t1", "c1") == "recordings:user:t1:call:c1"
        assert VoiceCache.intent_key("t1", "c1") == "intent:user:t1:analysis:c1"
        assert VoiceCache.intent_summary_key("t1") == "intent:user:t1:summary"
        assert VoiceCache.enhanced_data_key("t1", "c1") == "enhanced:user:t1:call:c1"

    def test_default_ttls(self, voice_cache):
        assert voice_cache.ttl_for("recordings") == 300
        assert voice_cache.ttl_for("call_details") == 600
        assert voice_cache.ttl_for("enhanced_data") == 1800
        assert voice_cache.ttl_for("something-else") == 300


class TestReadTimeTTL:
    """Tests for expiry enforced by VoiceCache itself."""

    @pytest.mark.asyncio
    async def test_hit_within_ttl(self, voice_cache, clock):
        await voice_cache.set("k", {"a": 1}, ttl=60)
        clock.now += 60

        assert await voice_cache.get("k") == {"a": 1}

    @pytest.mark.asyncio
    async def test_expired_entry_is_deleted(self, voice_cache, backend, clock):
        await voice_cache.set("k", {"a": 1}, ttl=60)
        clock.now += 61

        assert await voice_cache.get("k") is None
        assert await backend.get("k") is None

    @pytest.mark.asyncio
    async def test_miss(self, voice_cache):
        assert await voice_cache.get("missing") is None


class TestInvalidation:
    """Tests for tenant and call invalidation."""

    @pytest.mark.asyncio
    async def test_invalidate_tenant_removes_all_namespaces(self, voice_cache):
        await voice_cache.cache_recordings("t1", [{"id": "c1"}])
        await voice_cache.cache_call("t1", "c1", {"id": "c1"})
        await voice_cache.cache_intent_summary("t1", {"total": 1})
        await voice_cache.cache_enhanced_data("t1", "c1", {"age": 40})
        await voice_cache.cache_recordings("t2", [{"id": "other"}])

        deleted = await voice_cache.invalidate_tenant("t1")

        assert deleted == 4
        assert await voice_cache.get_cached_recordings("t1") is None
        assert await voice_cache.get_cached_call("t1", "c1") is None
        assert await voice_cache.get_cached_intent_summary("t1") is None
        assert await voice_cache.get_cached_enhanced_data("t1", "c1") is None
        assert await voice_cache.get_cached_recordings("t2") == [{"id": "other"}]

    @pytest.mark.asyncio
    async def test_prefix_does_not_match_longer_tenant_id(self, voice_cache):
        await voice_cache.cache_recordings("t10", [1])

        await voice_cache.invalidate_tenant("t1")

        assert await voice_cache.get_cached_recordings("t10") == [1]

    @pytest.mark.asyncio
    async def test_invalidate_call(self, voice_cache):
        await voice_cache.cache_call("t1", "c1", {"id": "c1"})
        await voice_cache.cache_intent_analysis("t1", "c1", {"intent": "Support"})
        await voice_cache.cache_call("t1", "c2", {"id": "c2"})

        await voice_cache.invalidate_call("t1", "c1")

        assert await voice_cache.get_cached_call("t1", "c1") is None
        assert await voice_cache.get_cached_intent_analysis("t1", "c1") is None
        assert await voice_cache.get_cached_call("t1", "c2") == {"id": "c2"}

    @pytest.mark.asyncio
    async def test_stats(self, voice_cache):
        await voice_cache.cache_recordings("t1", [])
        await voice_cache.cache_intent_summary("t1", {})
        await voice_cache.cache_enhanced_data("t2", "c9", {})

        stats = await voice_cache.stats()

        assert stats == {
            "recordings_keys": 1,
            "intent_keys": 1,
            "enhanced_keys": 1,
            "total_keys": 3,
        }


class TestBackendFailures:
    """Backend errors degrade to a miss or a no-op."""

    @pytest.mark.asyncio
    async def test_get_error_is_miss(self):
        backend = AsyncMock()
        backend.get.side_effect = ConnectionError("redis down")

        assert await VoiceCache(backend).get("k") is None

    @pytest.mark.asyncio
    async def test_set_error_is_swallowed(self):
        backend = AsyncMock()
        backend.set.side_effect = ConnectionError("redis down")

        await VoiceCache(backend).set("k", 1)

    @pytest.mark.asyncio
    async def test_corrupt_entry_is_miss(self):
        backend = AsyncMock()
        backend.get.return_value = "not json"

        assert await VoiceCache(backend).get("k") is None

"""
Unit Tests for Active Call Tracker
Tests lifecycle transitions, caller identity and cache invalidation
"""
import pytest
from unittest.mock import AsyncMock

from voicedash.domain.models.analysis import CallerInfo
from voicedash.domain.models.webhook_event import LifecycleEvent
from voicedash.domain.services.active_call_tracker import (
    ActiveCallTracker,
    MSG_ENDED,
    MSG_RECEIVED,
    MSG_UPDATED,
)

from tests.payloads import TENANT_ID


def event(status, call_id="call-1", number="+15551234567"):
    return LifecycleEvent(external_call_id=call_id, status=status, customer_number=number)


@pytest.fixture
def lookup():
    provider = AsyncMock()
    provider.lookup.return_value = CallerInfo(
        caller_name="DANA REYES", carrier_name="Verizon", line_type="mobile"
    )
    return provider


@pytest.fixture
def tracker(gateway, cache, lookup):
    return ActiveCallTracker(gateway, cache, lookup)


class TestLiveStatuses:
    """ringing / in-progress / forwarding keep a row."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", ["ringing", "in-progress", "forwarding"])
    async def test_live_status_upserts_row(self, tracker, gateway, status):
        message = await tracker.apply(TENANT_ID, event(status))

        calls = gateway.list_active_calls(TENANT_ID)
        assert message == MSG_UPDATED
        assert len(calls) == 1
        assert calls[0].status == status

    @pytest.mark.asyncio
    async def test_status_is_replaced(self, tracker, gateway):
        await tracker.apply(TENANT_ID, event("ringing"))
        await tracker.apply(TENANT_ID, event("in-progress"))

        calls = gateway.list_active_calls(TENANT_ID)
        assert [c.status for c in calls] == ["in-progress"]

    @pytest.mark.asyncio
    async def test_caller_identity_attached_with_credentials(self, tracker, tenant_with_credentials, lookup):
        await tracker.apply(TENANT_ID, event("ringing"))

        row = tenant_with_credentials.list_active_calls(TENANT_ID)[0]
        lookup.lookup.assert_awaited_once_with("+15551234567", "AC123", "secret")
        assert row.caller_name == "DANA REYES"
        assert row.carrier_name == "Verizon"
        assert row.line_type == "mobile"

    @pytest.mark.asyncio
    async def test_no_lookup_without_credentials(self, tracker, gateway, lookup):
        await tracker.apply(TENANT_ID, event("ringing"))

        lookup.lookup.assert_not_called()
        assert gateway.list_active_calls(TENANT_ID)[0].caller_name is None

    @pytest.mark.asyncio
    async def test_lookup_failure_still_upserts(self, tracker, tenant_with_credentials, lookup):
        lookup.lookup.side_effect = RuntimeError("lookup exploded")

        message = await tracker.apply(TENANT_ID, event("ringing"))

        assert message == MSG_UPDATED
        assert len(tenant_with_credentials.list_active_calls(TENANT_ID)) == 1


class TestEnded:
    """ended removes the row regardless of prior state."""

    @pytest.mark.asyncio
    async def test_ended_deletes_row(self, tracker, gateway):
        await tracker.apply(TENANT_ID, event("in-progress"))

        message = await tracker.apply(TENANT_ID, event("ended"))

        assert message == MSG_ENDED
        assert gateway.list_active_calls(TENANT_ID) == []

    @pytest.mark.asyncio
    async def test_ended_without_row_is_noop(self, tracker, gateway):
        message = await tracker.apply(TENANT_ID, event("ended"))

        assert message == MSG_ENDED
        assert gateway.list_active_calls(TENANT_ID) == []

    @pytest.mark.asyncio
    async def test_ended_only_removes_matching_call(self, tracker, gateway):
        await tracker.apply(TENANT_ID, event("ringing", call_id="a"))
        await tracker.apply(TENANT_ID, event("ringing", call_id="b"))

        await tracker.apply(TENANT_ID, event("ended", call_id="a"))

        assert [c.external_call_id for c in gateway.list_active_calls(TENANT_ID)] == ["b"]


class TestOtherStatuses:
    """Unlisted statuses are acknowledged without side effects."""

    @pytest.mark.asyncio
    async def test_queued_is_ignored(self, tracker, gateway, cache):
        await cache.cache_recordings(TENANT_ID, [1])

        message = await tracker.apply(TENANT_ID, event("queued"))

        assert message == MSG_RECEIVED
        assert gateway.list_active_calls(TENANT_ID) == []
        assert await cache.get_cached_recordings(TENANT_ID) == [1]

    @pytest.mark.asyncio
    async def test_missing_call_id_is_ignored(self, tracker, gateway):
        message = await tracker.apply(TENANT_ID, LifecycleEvent(status="ringing"))

        assert message == MSG_RECEIVED
        assert gateway.list_active_calls(TENANT_ID) == []


class TestCacheInvalidation:
    """Every state change clears the tenant namespace."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", ["ringing", "ended"])
    async def test_invalidates_tenant(self, tracker, cache, status):
        await cache.cache_recordings(TENANT_ID, [1])

        await tracker.apply(TENANT_ID, event(status))

        assert await cache.get_cached_recordings(TENANT_ID) is None

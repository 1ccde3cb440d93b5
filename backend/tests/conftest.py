"""
Shared fixtures for pipeline tests
"""
import pytest

from voicedash.domain.models.tenant import Webhook, TenantSettings
from voicedash.domain.services.cache_service import VoiceCache
from voicedash.infrastructure.cache.memory_cache import MemoryCacheBackend
from voicedash.infrastructure.storage.memory_gateway import InMemoryGateway

from tests.payloads import TENANT_ID, WEBHOOK_ID


@pytest.fixture
def gateway():
    """In-memory gateway with one active webhook for TENANT_ID"""
    gw = InMemoryGateway()
    gw.add_webhook(Webhook(id=WEBHOOK_ID, tenant_id=TENANT_ID, name="Main line"))
    gw.add_webhook(Webhook(id="wh-disabled", tenant_id=TENANT_ID, is_active=False))
    return gw


@pytest.fixture
def cache():
    return VoiceCache(MemoryCacheBackend())


@pytest.fixture
def tenant_with_credentials(gateway):
    gateway.set_tenant_settings(TenantSettings(
        tenant_id=TENANT_ID,
        analysis_api_key="gsk-test",
        lookup_account_sid="AC123",
        lookup_auth_token="secret",
    ))
    return gateway


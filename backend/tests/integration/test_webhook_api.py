"""
Integration Tests for the Webhook and Dashboard API
Exercises the FastAPI app with an in-memory pipeline
"""
import json

import httpx
import jwt
import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock

from voicedash.core.pipeline import Pipeline
from voicedash.domain.models.analysis import AnalysisResult
from voicedash.domain.models.call import IngestionStatus
from voicedash.domain.models.scheduling_trigger import SchedulingTrigger
from voicedash.domain.services.scheduling_trigger_dispatcher import SchedulingTriggerDispatcher
from voicedash.infrastructure.cache.memory_cache import MemoryCacheBackend
from voicedash.main import app

from tests.payloads import TENANT_ID, WEBHOOK_ID, end_of_call_payload, status_update_payload


def auth_headers(tenant_id=TENANT_ID):
    token = jwt.encode({"sub": "user-1", "tenant_id": tenant_id}, "test-secret", algorithm="HS256")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def delivered():
    return []


@pytest.fixture
def analyzer():
    mock = MagicMock()
    mock.analyze = AsyncMock(return_value=AnalysisResult(
        intent="Scheduling",
        sentiment="Positive",
        outcome="Successful",
        customer_name="Jane Doe",
        appointment_date="2024-06-02",
        appointment_time="2:00 PM",
    ))
    return mock


@pytest.fixture
def pipeline(gateway, analyzer, delivered):
    def handler(request):
        delivered.append(request)
        return httpx.Response(200, text="ok")

    enhanced_client = MagicMock()
    enhanced_client.fetch = AsyncMock(return_value=None)

    return Pipeline(
        gateway=gateway,
        cache_backend=MemoryCacheBackend(),
        analyzer=analyzer,
        enhanced_data_client=enhanced_client,
        trigger_dispatcher=SchedulingTriggerDispatcher(gateway, transport=httpx.MockTransport(handler)),
    )


@pytest.fixture
def api(pipeline):
    app.state.pipeline = pipeline
    yield app
    app.state.pipeline = None


@pytest.fixture
def client(api):
    return TestClient(api)


class TestLifecycleWebhooks:
    """Scenario C and active call listing."""

    def test_ringing_then_ended_leaves_no_active_call(self, client, gateway):
        url = f"/api/v1/webhook/{WEBHOOK_ID}"

        first = client.post(url, json=status_update_payload("ringing"))
        assert first.status_code == 200
        assert first.json() == {"success": True, "message": "Call status updated"}
        assert len(client.get("/api/v1/active-calls", headers=auth_headers()).json()) == 1

        second = client.post(url, json=status_update_payload("ended"))
        assert second.status_code == 200

        assert gateway.list_active_calls(TENANT_ID) == []
        assert client.get("/api/v1/active-calls", headers=auth_headers()).json() == []

    def test_status_update_write_failure_is_500_with_log(self, client, gateway):
        gateway.upsert_active_call = MagicMock(side_effect=RuntimeError("db down"))

        response = client.post(f"/api/v1/webhook/{WEBHOOK_ID}", json=status_update_payload("ringing"))

        assert response.status_code == 500
        assert len(gateway.ingestion_logs) == 1
        assert gateway.ingestion_logs[0].status == IngestionStatus.ERROR


class TestRejectedWebhooks:
    """Scenario D and unknown webhooks."""

    def test_malformed_json_is_client_error_with_one_log(self, client, gateway):
        response = client.post(
            f"/api/v1/webhook/{WEBHOOK_ID}",
            content=b"{\"message\": ",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid JSON payload"
        assert len(gateway.ingestion_logs) == 1
        assert gateway.ingestion_logs[0].status == IngestionStatus.ERROR
        assert gateway.calls == {}

    def test_unknown_webhook_is_404(self, client, gateway):
        response = client.post("/api/v1/webhook/does-not-exist", json=end_of_call_payload())

        assert response.status_code == 404
        assert gateway.ingestion_logs == []


class TestReadEndpoints:
    """Tenant-scoped reads."""

    @pytest.mark.parametrize("path", [
        "/api/v1/calls",
        "/api/v1/calls/c1",
        "/api/v1/calls/c1/analysis",
        "/api/v1/analytics/intent-summary",
        "/api/v1/keywords",
        "/api/v1/active-calls",
    ])
    def test_requires_tenant(self, client, path):
        assert client.get(path).status_code == 401

    def test_unknown_call_is_404(self, client):
        response = client.get("/api/v1/calls/missing", headers=auth_headers())
        assert response.status_code == 404

    def test_health_reports_cache_and_tasks(self, client):
        body = client.get("/health").json()

        assert body["status"] == "healthy"
        assert body["cache"]["total_keys"] == 0
        assert body["background_tasks"]["active"] == 0


class TestTerminalWebhookFlow:
    """Terminal events through HTTP, including background enrichment (scenario A)."""

    @pytest.mark.asyncio
    async def test_scenario_a_end_to_end(self, api, pipeline, tenant_with_credentials, delivered):
        tenant_with_credentials.add_trigger(SchedulingTrigger(
            id="trg-1", tenant_id=TENANT_ID, destination_url="https://crm.example.com/hook"
        ))
        payload = end_of_call_payload()
        payload["message"]["artifact"]["transcript"] = (
            "I want to schedule a consultation tomorrow at 2pm, my name is Jane Doe"
        )

        transport = httpx.ASGITransport(app=api)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
            response = await http.post(f"/api/v1/webhook/{WEBHOOK_ID}", content=json.dumps(payload))
            assert response.status_code == 200
            call_id = response.json()["call_id"]

            assert await pipeline.runner.drain(5) is True

            analysis = await http.get(f"/api/v1/calls/{call_id}/analysis", headers=auth_headers())
            listing = await http.get("/api/v1/calls", headers=auth_headers())
            summary = await http.get("/api/v1/analytics/intent-summary", headers=auth_headers())

        body = analysis.json()
        assert body["analysis_completed"] is True
        assert body["intent"] == "Scheduling"
        assert body["appointment_time"] == "2:00 PM"

        assert [c["id"] for c in listing.json()] == [call_id]
        assert summary.json()["by_intent"] == {"Scheduling": 1}

        assert len(delivered) == 1
        assert delivered[0].headers["X-Call-ID"] == call_id
        assert len(tenant_with_credentials.trigger_logs) == 1

    @pytest.mark.asyncio
    async def test_scenario_b_stays_unanalyzed(self, api, pipeline, gateway, analyzer, delivered):
        gateway.add_trigger(SchedulingTrigger(
            id="trg-1", tenant_id=TENANT_ID, destination_url="https://crm.example.com/hook"
        ))

        transport = httpx.ASGITransport(app=api)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
            response = await http.post(f"/api/v1/webhook/{WEBHOOK_ID}", json=end_of_call_payload())
            await pipeline.runner.drain(5)

        record = gateway.calls[response.json()["call_id"]]
        assert record.analysis_completed is False
        analyzer.analyze.assert_not_called()
        assert delivered == []
        assert gateway.trigger_logs == []

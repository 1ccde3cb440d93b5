"""
Webhook Dispatcher
Entry point for inbound voice-platform webhooks

Resolves the tenant from the webhook id, classifies the event, applies
lifecycle updates or stores the terminal call record, and hands the
record to the enrichment pipeline without waiting for it.
"""
import json
import logging
from typing import Any, Dict, Optional

from voicedash.core.background import BackgroundTaskRunner
from voicedash.domain.exceptions import IngestionError, MalformedPayloadError, WebhookNotFoundError
from voicedash.domain.interfaces.caller_lookup import CallerLookupProvider
from voicedash.domain.interfaces.persistence_gateway import PersistenceGateway
from voicedash.domain.models.call import CallRecord, IngestionLog, IngestionStatus
from voicedash.domain.models.tenant import Webhook
from voicedash.domain.models.webhook_event import LifecycleEvent, TerminalEvent, parse_webhook_event
from voicedash.domain.services.active_call_tracker import ActiveCallTracker
from voicedash.domain.services.cache_service import VoiceCache
from voicedash.domain.services.caller_identity import identify_caller
from voicedash.domain.services.enrichment_orchestrator import EnrichmentOrchestrator

logger = logging.getLogger(__name__)


class WebhookDispatcher:
    """Synchronous part of webhook ingestion; enrichment runs in the background"""

    def __init__(
        self,
        gateway: PersistenceGateway,
        cache: VoiceCache,
        tracker: ActiveCallTracker,
        orchestrator: EnrichmentOrchestrator,
        runner: BackgroundTaskRunner,
        caller_lookup: Optional[CallerLookupProvider] = None
    ):
        self.gateway = gateway
        self.cache = cache
        self.tracker = tracker
        self.orchestrator = orchestrator
        self.runner = runner
        self.caller_lookup = caller_lookup

    async def handle(self, webhook_id: str, body: bytes) -> Dict[str, Any]:
        """
        Process one webhook delivery.

        Raises:
            WebhookNotFoundError: unknown or inactive webhook
            MalformedPayloadError: body is not a JSON object
            IngestionError: the webhook, call record or active call could not be read or stored
        """
        try:
            webhook = self.gateway.get_active_webhook(webhook_id)
        except Exception as e:
            logger.error(f"Failed to resolve webhook {webhook_id}: {e}", exc_info=True)
            self._log_ingestion(webhook_id, IngestionStatus.ERROR, 500, error_message=str(e))
            raise IngestionError(f"Failed to resolve webhook: {e}", webhook_id=webhook_id) from e

        if webhook is None:
            raise WebhookNotFoundError("Webhook not found or inactive", webhook_id=webhook_id)

        try:
            payload = json.loads(body)
        except (ValueError, UnicodeDecodeError):
            payload = None

        if not isinstance(payload, dict):
            self._log_ingestion(webhook_id, IngestionStatus.ERROR, 400, error_message="Invalid JSON payload")
            raise MalformedPayloadError("Invalid JSON payload", webhook_id=webhook_id)

        event = parse_webhook_event(payload)
        logger.info(f"Webhook {webhook_id}: {event.kind.value} for call {event.external_call_id}")

        if isinstance(event, LifecycleEvent):
            try:
                message = await self.tracker.apply(webhook.tenant_id, event)
            except Exception as e:
                logger.error(f"Failed to apply status update for webhook {webhook_id}: {e}", exc_info=True)
                self._log_ingestion(webhook_id, IngestionStatus.ERROR, 500, error_message=str(e))
                raise IngestionError(f"Failed to update call status: {e}", webhook_id=webhook_id) from e
            return {"success": True, "message": message}

        return await self._ingest_terminal(webhook, event, len(body))

    async def _ingest_terminal(self, webhook: Webhook, event: TerminalEvent, payload_size: int) -> Dict[str, Any]:
        caller = await identify_caller(self.gateway, self.caller_lookup, webhook.tenant_id, event.customer_number)

        record = CallRecord(
            tenant_id=webhook.tenant_id,
            webhook_id=webhook.id,
            external_call_id=event.external_call_id,
            phone_number=event.phone_number,
            customer_number=event.customer_number,
            recording_url=event.recording_url,
            ended_reason=event.ended_reason,
            summary=event.summary,
            transcript=event.transcript,
            structured_data=event.structured_data,
            raw_payload=event.raw_payload,
            duration_seconds=event.duration_seconds(),
            caller_name=caller.caller_name if caller else None,
            caller_type=caller.caller_type if caller else None,
            carrier_name=caller.carrier_name if caller else None,
            line_type=caller.line_type if caller else None,
        )

        try:
            self.gateway.create_call_record(record)
            self._log_ingestion(webhook.id, IngestionStatus.SUCCESS, 200, payload_size=payload_size, strict=True)
        except Exception as e:
            logger.error(f"Failed to store call for webhook {webhook.id}: {e}", exc_info=True)
            self._log_ingestion(webhook.id, IngestionStatus.ERROR, 500, error_message=str(e))
            raise IngestionError(f"Failed to store call: {e}", webhook_id=webhook.id) from e

        await self.cache.invalidate_tenant(webhook.tenant_id)

        self.runner.spawn(self.orchestrator.run, record, name=f"enrich-{record.id}")

        return {"received": True, "call_id": record.id}

    def _log_ingestion(
        self,
        webhook_id: str,
        status: IngestionStatus,
        http_status: int,
        payload_size: Optional[int] = None,
        error_message: Optional[str] = None,
        strict: bool = False
    ) -> None:
        log = IngestionLog(
            webhook_id=webhook_id,
            status=status,
            http_status=http_status,
            payload_size=payload_size,
            error_message=error_message,
        )
        try:
            self.gateway.insert_ingestion_log(log)
        except Exception as e:
            if strict:
                raise
            logger.error(f"Failed to write webhook log for {webhook_id}: {e}")

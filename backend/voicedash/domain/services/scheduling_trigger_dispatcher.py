"""
Scheduling Trigger Dispatcher
Delivers booked-appointment payloads to tenant-configured destinations
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from voicedash.domain.interfaces.persistence_gateway import PersistenceGateway
from voicedash.domain.models.addon import AddonType
from voicedash.domain.models.call import CallRecord
from voicedash.domain.models.scheduling_trigger import (
    DeliveryStatus,
    SchedulingTrigger,
    TriggerDeliveryLog,
)

logger = logging.getLogger(__name__)


TRIGGER_TYPE = "appointment-scheduled"
RESPONSE_BODY_LIMIT = 1000


def build_trigger_payload(call: CallRecord) -> Dict[str, Any]:
    """Base payload shared by every trigger for one call"""
    return {
        "name": call.customer_name or "Unknown",
        "email": call.customer_email or None,
        "phone": call.customer_number or call.phone_number or None,
        "phone_being_called": call.phone_number or None,
        "appointment_date": call.appointment_date,
        "appointment_time": call.appointment_time,
        "appointment_type": call.appointment_type or None,
        "appointment_notes": call.appointment_notes or None,
        "recording": call.recording_url or None,
        "call_summary": call.summary or None,
        "call_id": call.id,
        "intent": call.intent,
        "sentiment": call.sentiment,
        "outcome": call.outcome,
    }


class SchedulingTriggerDispatcher:
    """
    Single-shot delivery to every active scheduling trigger of a tenant.

    Exactly one TriggerDeliveryLog is written per trigger per dispatch.
    Failures are recorded, never retried.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        trigger_type: str = TRIGGER_TYPE,
        response_body_limit: int = RESPONSE_BODY_LIMIT,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.gateway = gateway
        self.trigger_type = trigger_type
        self.response_body_limit = response_body_limit
        self._transport = transport

    async def dispatch(self, tenant_id: str, call_id: str) -> List[TriggerDeliveryLog]:
        """
        Send the call's appointment payload to all active triggers.

        Returns:
            Delivery logs written, one per trigger
        """
        triggers = self.gateway.list_active_triggers(tenant_id)
        if not triggers:
            logger.info(f"No active scheduling triggers found for tenant {tenant_id}")
            return []

        call = self.gateway.get_call_record(tenant_id, call_id)
        if call is None:
            logger.error(f"Call not found for scheduling trigger: {call_id}")
            return []

        base_payload = build_trigger_payload(call)
        enhanced_data = self._enhanced_data(call_id)

        logs = []
        async with httpx.AsyncClient(transport=self._transport) as client:
            for trigger in triggers:
                payload = dict(base_payload)
                if trigger.send_enhanced_data and enhanced_data is not None:
                    payload["enhanced_data"] = enhanced_data

                log = await self._deliver(client, trigger, call_id, payload)
                try:
                    self.gateway.insert_trigger_log(log)
                except Exception as e:
                    logger.error(f"Failed to write trigger log for {trigger.id}: {e}")
                logs.append(log)

        return logs

    def _enhanced_data(self, call_id: str) -> Optional[Any]:
        try:
            result = self.gateway.get_addon_result(call_id, AddonType.ENHANCED_DATA.value)
        except Exception as e:
            logger.error(f"Error loading enhanced data for call {call_id}: {e}")
            return None
        return result.result_data if result else None

    async def _deliver(
        self,
        client: httpx.AsyncClient,
        trigger: SchedulingTrigger,
        call_id: str,
        payload: Dict[str, Any]
    ) -> TriggerDeliveryLog:
        try:
            response = await client.post(
                trigger.destination_url,
                json=payload,
                headers={
                    "Content-Type": "application/json",
                    "X-Trigger-Type": self.trigger_type,
                    "X-Call-ID": call_id,
                }
            )
        except Exception as e:
            logger.error(f"Error sending scheduling webhook to {trigger.destination_url}: {e}")
            return TriggerDeliveryLog(
                trigger_id=trigger.id,
                call_id=call_id,
                status=DeliveryStatus.ERROR,
                error_message=str(e) or type(e).__name__,
                payload_sent=payload,
            )

        body = response.text
        ok = response.is_success
        logger.info(f"Scheduling webhook sent to {trigger.destination_url}: {response.status_code}")

        return TriggerDeliveryLog(
            trigger_id=trigger.id,
            call_id=call_id,
            status=DeliveryStatus.SUCCESS if ok else DeliveryStatus.ERROR,
            http_status=response.status_code,
            response_body=body[:self.response_body_limit],
            error_message=None if ok else f"HTTP {response.status_code}: {body}",
            payload_sent=payload,
        )

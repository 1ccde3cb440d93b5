"""
Active Call Tracker
Maintains the per-tenant set of live calls from status-update events
"""
import logging
from typing import List, Optional

from voicedash.domain.interfaces.caller_lookup import CallerLookupProvider
from voicedash.domain.interfaces.persistence_gateway import PersistenceGateway
from voicedash.domain.models.active_call import ActiveCall, LifecycleStatus, LIVE_STATUSES
from voicedash.domain.models.webhook_event import LifecycleEvent
from voicedash.domain.services.cache_service import VoiceCache
from voicedash.domain.services.caller_identity import identify_caller
from voicedash.utils.time_utils import epoch_now

logger = logging.getLogger(__name__)


MSG_UPDATED = "Call status updated"
MSG_ENDED = "Call ended, removed from active calls"
MSG_RECEIVED = "Status update received"


class ActiveCallTracker:
    """
    Applies lifecycle events to the active_calls table.

    - ringing / in-progress / forwarding: insert or replace the row
    - ended: delete the row (absent row is a no-op)
    - anything else: acknowledged, nothing written
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        cache: VoiceCache,
        caller_lookup: Optional[CallerLookupProvider] = None
    ):
        self.gateway = gateway
        self.cache = cache
        self.caller_lookup = caller_lookup

    async def apply(self, tenant_id: str, event: LifecycleEvent) -> str:
        """
        Apply one lifecycle event.

        Returns:
            Acknowledgment message for the webhook response
        """
        status = event.status

        if not event.external_call_id:
            logger.warning(f"Status update without call id for tenant {tenant_id} (status={status})")
            return MSG_RECEIVED

        if status in LIVE_STATUSES:
            caller = await identify_caller(
                self.gateway, self.caller_lookup, tenant_id, event.customer_number
            )
            now = epoch_now()
            self.gateway.upsert_active_call(ActiveCall(
                tenant_id=tenant_id,
                external_call_id=event.external_call_id,
                status=status,
                customer_number=event.customer_number,
                caller_name=caller.caller_name if caller else None,
                carrier_name=caller.carrier_name if caller else None,
                line_type=caller.line_type if caller else None,
                started_at=now,
                updated_at=now,
            ))
            logger.info(f"Active call {event.external_call_id} -> {status}")
            await self.cache.invalidate_tenant(tenant_id)
            return MSG_UPDATED

        if status == LifecycleStatus.ENDED.value:
            removed = self.gateway.delete_active_call(tenant_id, event.external_call_id)
            logger.info(f"Active call {event.external_call_id} ended (removed={removed})")
            await self.cache.invalidate_tenant(tenant_id)
            return MSG_ENDED

        logger.debug(f"Ignoring status '{status}' for call {event.external_call_id}")
        return MSG_RECEIVED

    def list_active(self, tenant_id: str) -> List[ActiveCall]:
        return self.gateway.list_active_calls(tenant_id)

"""
Add-on Service
Runs tenant-enabled post-processing add-ons for a finished call
"""
import logging
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional

from voicedash.domain.interfaces.persistence_gateway import PersistenceGateway
from voicedash.domain.models.addon import AddonResult, AddonStatus, AddonType
from voicedash.domain.services.cache_service import VoiceCache
from voicedash.infrastructure.addons.enhanced_data import EnhancedDataClient

logger = logging.getLogger(__name__)


# (tenant_id, call_id, customer_number) -> result data, None on failure
AddonRunner = Callable[[str, str, str], Awaitable[Optional[Any]]]


class AddonService:
    """
    Executes each enabled add-on once per call and records an AddonResult.

    New add-on types register a runner in self.runners.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        cache: VoiceCache,
        enhanced_data_client: Optional[EnhancedDataClient] = None
    ):
        self.gateway = gateway
        self.cache = cache
        self.enhanced_data_client = enhanced_data_client or EnhancedDataClient()
        self.runners: Dict[str, AddonRunner] = {
            AddonType.ENHANCED_DATA.value: self._run_enhanced_data,
        }

    async def process(
        self,
        tenant_id: str,
        call_id: str,
        customer_number: Optional[str]
    ) -> List[AddonResult]:
        """
        Run all enabled add-ons for a call. Never raises.

        Returns:
            Results recorded for this call (empty when skipped)
        """
        if not customer_number:
            return []

        try:
            addons = self.gateway.list_enabled_addons(tenant_id)
        except Exception as e:
            logger.error(f"Error processing addons: {e}")
            return []

        results = []
        for addon in addons:
            result = await self._execute(addon.addon_type, tenant_id, call_id, customer_number)
            try:
                self.gateway.insert_addon_result(result)
            except Exception as e:
                logger.error(f"Failed to store {addon.addon_type} result for call {call_id}: {e}")
            results.append(result)

        return results

    async def _execute(
        self,
        addon_type: str,
        tenant_id: str,
        call_id: str,
        customer_number: str
    ) -> AddonResult:
        started = time.monotonic()
        status = AddonStatus.FAILED
        data = None
        error_message = None

        runner = self.runners.get(addon_type)
        if runner is None:
            error_message = f"Unknown addon type: {addon_type}"
        else:
            try:
                data = await runner(tenant_id, call_id, customer_number)
                if data is not None:
                    status = AddonStatus.SUCCESS
                else:
                    error_message = f"Failed to fetch {addon_type.replace('_', ' ')}"
            except Exception as e:
                error_message = str(e) or "Unknown error"
                logger.error(f"Addon {addon_type} failed for call {call_id}: {e}")

        return AddonResult(
            call_id=call_id,
            tenant_id=tenant_id,
            addon_type=addon_type,
            status=status,
            result_data=data,
            error_message=error_message,
            execution_time_ms=int((time.monotonic() - started) * 1000),
        )

    async def _run_enhanced_data(self, tenant_id: str, call_id: str, customer_number: str) -> Optional[Any]:
        cached = await self.cache.get_cached_enhanced_data(tenant_id, call_id)
        if cached:
            logger.debug(f"Cache HIT for enhanced data: call_id={call_id}")
            return cached

        logger.debug(f"Cache MISS for enhanced data: call_id={call_id}")
        data = await self.enhanced_data_client.fetch(customer_number)
        if data:
            await self.cache.cache_enhanced_data(tenant_id, call_id, data)
        return data

"""
Persistence Gateway Interface
Abstract base class for call pipeline storage backends
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from voicedash.domain.models.tenant import Webhook, TenantSettings
from voicedash.domain.models.call import CallRecord, EnrichmentUpdate, IngestionLog
from voicedash.domain.models.active_call import ActiveCall
from voicedash.domain.models.keyword import KeywordAggregate
from voicedash.domain.models.scheduling_trigger import SchedulingTrigger, TriggerDeliveryLog
from voicedash.domain.models.addon import TenantAddon, AddonResult


class PersistenceGateway(ABC):
    """
    Transactional access to the entities the pipeline reads and writes.

    Implementations raise on storage failures; callers decide whether a
    failure is surfaced (synchronous path) or logged (background path).
    """

    # Tenancy
    @abstractmethod
    def get_active_webhook(self, webhook_id: str) -> Optional[Webhook]:
        """Webhook by id, or None when unknown or inactive"""
        pass

    @abstractmethod
    def get_tenant_settings(self, tenant_id: str) -> TenantSettings:
        """Tenant credentials (empty settings when none are stored)"""
        pass

    # Call records
    @abstractmethod
    def create_call_record(self, record: CallRecord) -> CallRecord:
        pass

    @abstractmethod
    def get_call_record(self, tenant_id: str, call_id: str) -> Optional[CallRecord]:
        pass

    @abstractmethod
    def list_call_records(self, tenant_id: str, limit: int = 50, offset: int = 0) -> List[CallRecord]:
        """Newest first"""
        pass

    @abstractmethod
    def apply_enrichment(self, call_id: str, update: EnrichmentUpdate) -> None:
        """Single-row update of all enrichment fields at once"""
        pass

    @abstractmethod
    def insert_ingestion_log(self, log: IngestionLog) -> None:
        pass

    # Active calls
    @abstractmethod
    def upsert_active_call(self, call: ActiveCall) -> None:
        """Insert-or-replace keyed by (tenant_id, external_call_id)"""
        pass

    @abstractmethod
    def delete_active_call(self, tenant_id: str, external_call_id: str) -> bool:
        """Returns True when a row was removed"""
        pass

    @abstractmethod
    def list_active_calls(self, tenant_id: str) -> List[ActiveCall]:
        pass

    # Keywords
    @abstractmethod
    def get_keyword(self, tenant_id: str, keyword: str) -> Optional[KeywordAggregate]:
        pass

    @abstractmethod
    def save_keyword(self, aggregate: KeywordAggregate, is_new: bool) -> None:
        """Insert when is_new, otherwise update the existing row by id"""
        pass

    @abstractmethod
    def list_keywords(self, tenant_id: str, limit: int = 20) -> List[KeywordAggregate]:
        """Highest count first"""
        pass

    # Scheduling triggers
    @abstractmethod
    def list_active_triggers(self, tenant_id: str) -> List[SchedulingTrigger]:
        pass

    @abstractmethod
    def insert_trigger_log(self, log: TriggerDeliveryLog) -> None:
        pass

    # Add-ons
    @abstractmethod
    def list_enabled_addons(self, tenant_id: str) -> List[TenantAddon]:
        pass

    @abstractmethod
    def insert_addon_result(self, result: AddonResult) -> None:
        pass

    @abstractmethod
    def get_addon_result(self, call_id: str, addon_type: str) -> Optional[AddonResult]:
        """Most recent successful result for the call and add-on type"""
        pass

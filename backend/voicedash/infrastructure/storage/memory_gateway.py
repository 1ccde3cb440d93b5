"""
In-Memory Persistence Gateway
Process-local storage used when Supabase is not configured (local dev, tests)
"""
from typing import Dict, List, Optional, Tuple

from voicedash.domain.interfaces.persistence_gateway import PersistenceGateway
from voicedash.domain.models.tenant import Webhook, TenantSettings
from voicedash.domain.models.call import CallRecord, EnrichmentUpdate, IngestionLog
from voicedash.domain.models.active_call import ActiveCall
from voicedash.domain.models.keyword import KeywordAggregate
from voicedash.domain.models.scheduling_trigger import SchedulingTrigger, TriggerDeliveryLog
from voicedash.domain.models.addon import AddonStatus, TenantAddon, AddonResult


class InMemoryGateway(PersistenceGateway):
    """Dict-backed gateway. Models are copied in and out so callers never share rows."""

    def __init__(self) -> None:
        self.webhooks: Dict[str, Webhook] = {}
        self.settings: Dict[str, TenantSettings] = {}
        self.calls: Dict[str, CallRecord] = {}
        self.ingestion_logs: List[IngestionLog] = []
        self.active_calls: Dict[Tuple[str, str], ActiveCall] = {}
        self.keywords: Dict[Tuple[str, str], KeywordAggregate] = {}
        self.triggers: Dict[str, SchedulingTrigger] = {}
        self.trigger_logs: List[TriggerDeliveryLog] = []
        self.addons: Dict[Tuple[str, str], TenantAddon] = {}
        self.addon_results: List[AddonResult] = []

    # Seeding helpers (tenant CRUD lives outside the pipeline)
    def add_webhook(self, webhook: Webhook) -> Webhook:
        self.webhooks[webhook.id] = webhook
        return webhook

    def set_tenant_settings(self, settings: TenantSettings) -> TenantSettings:
        self.settings[settings.tenant_id] = settings
        return settings

    def add_trigger(self, trigger: SchedulingTrigger) -> SchedulingTrigger:
        self.triggers[trigger.id] = trigger
        return trigger

    def set_addon(self, addon: TenantAddon) -> TenantAddon:
        self.addons[(addon.tenant_id, addon.addon_type)] = addon
        return addon

    # Tenancy
    def get_active_webhook(self, webhook_id: str) -> Optional[Webhook]:
        webhook = self.webhooks.get(webhook_id)
        if webhook is None or not webhook.is_active:
            return None
        return webhook.model_copy()

    def get_tenant_settings(self, tenant_id: str) -> TenantSettings:
        settings = self.settings.get(tenant_id)
        return settings.model_copy() if settings else TenantSettings(tenant_id=tenant_id)

    # Call records
    def create_call_record(self, record: CallRecord) -> CallRecord:
        self.calls[record.id] = record.model_copy(deep=True)
        return record

    def get_call_record(self, tenant_id: str, call_id: str) -> Optional[CallRecord]:
        record = self.calls.get(call_id)
        if record is None or record.tenant_id != tenant_id:
            return None
        return record.model_copy(deep=True)

    def list_call_records(self, tenant_id: str, limit: int = 50, offset: int = 0) -> List[CallRecord]:
        records = [r for r in self.calls.values() if r.tenant_id == tenant_id]
        records.sort(key=lambda r: r.created_at, reverse=True)
        return [r.model_copy(deep=True) for r in records[offset:offset + limit]]

    def apply_enrichment(self, call_id: str, update: EnrichmentUpdate) -> None:
        record = self.calls.get(call_id)
        if record is None:
            raise KeyError(f"Call record not found: {call_id}")
        self.calls[call_id] = record.apply_enrichment(update)

    def insert_ingestion_log(self, log: IngestionLog) -> None:
        self.ingestion_logs.append(log.model_copy())

    # Active calls
    def upsert_active_call(self, call: ActiveCall) -> None:
        self.active_calls[call.key] = call.model_copy()

    def delete_active_call(self, tenant_id: str, external_call_id: str) -> bool:
        return self.active_calls.pop((tenant_id, external_call_id), None) is not None

    def list_active_calls(self, tenant_id: str) -> List[ActiveCall]:
        calls = [c for c in self.active_calls.values() if c.tenant_id == tenant_id]
        calls.sort(key=lambda c: c.started_at, reverse=True)
        return [c.model_copy() for c in calls]

    # Keywords
    def get_keyword(self, tenant_id: str, keyword: str) -> Optional[KeywordAggregate]:
        aggregate = self.keywords.get((tenant_id, keyword))
        return aggregate.model_copy() if aggregate else None

    def save_keyword(self, aggregate: KeywordAggregate, is_new: bool) -> None:
        self.keywords[(aggregate.tenant_id, aggregate.keyword)] = aggregate.model_copy()

    def list_keywords(self, tenant_id: str, limit: int = 20) -> List[KeywordAggregate]:
        rows = [k for k in self.keywords.values() if k.tenant_id == tenant_id]
        rows.sort(key=lambda k: k.count, reverse=True)
        return [k.model_copy() for k in rows[:limit]]

    # Scheduling triggers
    def list_active_triggers(self, tenant_id: str) -> List[SchedulingTrigger]:
        return [
            t.model_copy() for t in self.triggers.values()
            if t.tenant_id == tenant_id and t.is_active
        ]

    def insert_trigger_log(self, log: TriggerDeliveryLog) -> None:
        self.trigger_logs.append(log.model_copy(deep=True))

    # Add-ons
    def list_enabled_addons(self, tenant_id: str) -> List[TenantAddon]:
        return [
            a.model_copy() for a in self.addons.values()
            if a.tenant_id == tenant_id and a.is_enabled
        ]

    def insert_addon_result(self, result: AddonResult) -> None:
        self.addon_results.append(result.model_copy(deep=True))

    def get_addon_result(self, call_id: str, addon_type: str) -> Optional[AddonResult]:
        matches = [
            r for r in self.addon_results
            if r.call_id == call_id and r.addon_type == addon_type and r.status == AddonStatus.SUCCESS
        ]
        return matches[-1].model_copy(deep=True) if matches else None

"""
Supabase Persistence Gateway
Maps pipeline entities to Supabase PostgreSQL tables
"""
import logging
from typing import Any, Dict, List, Optional

from supabase import Client

from voicedash.domain.interfaces.persistence_gateway import PersistenceGateway
from voicedash.domain.models.tenant import Webhook, TenantSettings
from voicedash.domain.models.call import CallRecord, EnrichmentUpdate, IngestionLog
from voicedash.domain.models.active_call import ActiveCall
from voicedash.domain.models.keyword import KeywordAggregate
from voicedash.domain.models.scheduling_trigger import SchedulingTrigger, TriggerDeliveryLog
from voicedash.domain.models.addon import AddonStatus, TenantAddon, AddonResult
from voicedash.utils.tenant_filter import apply_tenant_filter

logger = logging.getLogger(__name__)


class SupabaseGateway(PersistenceGateway):
    """
    Supabase-backed gateway.

    Tables:
    - webhooks, tenant_settings
    - webhook_calls, webhook_logs
    - active_calls (unique on tenant_id, external_call_id)
    - call_keywords (unique on tenant_id, keyword)
    - scheduling_triggers, scheduling_trigger_logs
    - tenant_addons, addon_results
    """

    def __init__(self, client: Client):
        self.client = client

    @staticmethod
    def _first(response: Any) -> Optional[Dict[str, Any]]:
        data = response.data or []
        return data[0] if data else None

    # ========== Tenancy ==========

    def get_active_webhook(self, webhook_id: str) -> Optional[Webhook]:
        response = self.client.table("webhooks").select(
            "id, tenant_id, name, is_active"
        ).eq("id", webhook_id).eq("is_active", True).limit(1).execute()
        row = self._first(response)
        return Webhook(**row) if row else None

    def get_tenant_settings(self, tenant_id: str) -> TenantSettings:
        response = self.client.table("tenant_settings").select(
            "tenant_id, analysis_api_key, lookup_account_sid, lookup_auth_token"
        ).eq("tenant_id", tenant_id).limit(1).execute()
        row = self._first(response)
        return TenantSettings(**row) if row else TenantSettings(tenant_id=tenant_id)

    # ========== Call records ==========

    def create_call_record(self, record: CallRecord) -> CallRecord:
        self.client.table("webhook_calls").insert(record.model_dump()).execute()
        return record

    def get_call_record(self, tenant_id: str, call_id: str) -> Optional[CallRecord]:
        query = self.client.table("webhook_calls").select("*").eq("id", call_id)
        query = apply_tenant_filter(query, tenant_id)
        row = self._first(query.limit(1).execute())
        return CallRecord(**row) if row else None

    def list_call_records(self, tenant_id: str, limit: int = 50, offset: int = 0) -> List[CallRecord]:
        query = self.client.table("webhook_calls").select("*")
        query = apply_tenant_filter(query, tenant_id)
        response = query.order("created_at", desc=True).range(offset, offset + limit - 1).execute()
        return [CallRecord(**row) for row in (response.data or [])]

    def apply_enrichment(self, call_id: str, update: EnrichmentUpdate) -> None:
        self.client.table("webhook_calls").update(update.model_dump()).eq("id", call_id).execute()

    def insert_ingestion_log(self, log: IngestionLog) -> None:
        self.client.table("webhook_logs").insert(log.model_dump(mode="json")).execute()

    # ========== Active calls ==========

    def upsert_active_call(self, call: ActiveCall) -> None:
        self.client.table("active_calls").upsert(
            call.model_dump(),
            on_conflict="tenant_id,external_call_id"
        ).execute()

    def delete_active_call(self, tenant_id: str, external_call_id: str) -> bool:
        response = self.client.table("active_calls").delete().eq(
            "tenant_id", tenant_id
        ).eq("external_call_id", external_call_id).execute()
        return bool(response.data)

    def list_active_calls(self, tenant_id: str) -> List[ActiveCall]:
        query = self.client.table("active_calls").select("*")
        query = apply_tenant_filter(query, tenant_id)
        response = query.order("started_at", desc=True).execute()
        return [ActiveCall(**row) for row in (response.data or [])]

    # ========== Keywords ==========

    def get_keyword(self, tenant_id: str, keyword: str) -> Optional[KeywordAggregate]:
        response = self.client.table("call_keywords").select("*").eq(
            "tenant_id", tenant_id
        ).eq("keyword", keyword).limit(1).execute()
        row = self._first(response)
        return KeywordAggregate(**row) if row else None

    def save_keyword(self, aggregate: KeywordAggregate, is_new: bool) -> None:
        row = aggregate.model_dump()
        if is_new:
            self.client.table("call_keywords").insert(row).execute()
        else:
            self.client.table("call_keywords").update(row).eq("id", aggregate.id).execute()

    def list_keywords(self, tenant_id: str, limit: int = 20) -> List[KeywordAggregate]:
        query = self.client.table("call_keywords").select("*")
        query = apply_tenant_filter(query, tenant_id)
        response = query.order("count", desc=True).limit(limit).execute()
        return [KeywordAggregate(**row) for row in (response.data or [])]

    # ========== Scheduling triggers ==========

    def list_active_triggers(self, tenant_id: str) -> List[SchedulingTrigger]:
        response = self.client.table("scheduling_triggers").select("*").eq(
            "tenant_id", tenant_id
        ).eq("is_active", True).execute()
        return [SchedulingTrigger(**row) for row in (response.data or [])]

    def insert_trigger_log(self, log: TriggerDeliveryLog) -> None:
        self.client.table("scheduling_trigger_logs").insert(log.model_dump(mode="json")).execute()

    # ========== Add-ons ==========

    def list_enabled_addons(self, tenant_id: str) -> List[TenantAddon]:
        response = self.client.table("tenant_addons").select(
            "tenant_id, addon_type, is_enabled, settings"
        ).eq("tenant_id", tenant_id).eq("is_enabled", True).execute()
        return [TenantAddon(**{**row, "settings": row.get("settings") or {}}) for row in (response.data or [])]

    def insert_addon_result(self, result: AddonResult) -> None:
        self.client.table("addon_results").insert(result.model_dump(mode="json")).execute()

    def get_addon_result(self, call_id: str, addon_type: str) -> Optional[AddonResult]:
        response = self.client.table("addon_results").select("*").eq(
            "call_id", call_id
        ).eq("addon_type", addon_type).eq(
            "status", AddonStatus.SUCCESS.value
        ).order("created_at", desc=True).limit(1).execute()
        row = self._first(response)
        return AddonResult(**row) if row else None

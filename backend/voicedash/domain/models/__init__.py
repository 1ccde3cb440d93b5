"""Domain models"""

# Tenancy
from .tenant import (
    Webhook,
    TenantSettings,
)

# Call records
from .call import (
    IngestionStatus,
    CallRecord,
    EnrichmentUpdate,
    IngestionLog,
    generate_id,
)

# Inbound events
from .webhook_event import (
    EventKind,
    LifecycleEvent,
    TerminalEvent,
    WebhookEvent,
    parse_webhook_event,
)

# Live calls
from .active_call import (
    LifecycleStatus,
    LIVE_STATUSES,
    ActiveCall,
)

# Enrichment
from .analysis import (
    AnalysisResult,
    AuthoritativeFields,
    CallerInfo,
)
from .keyword import KeywordAggregate

# Outbound
from .scheduling_trigger import (
    DeliveryStatus,
    SchedulingTrigger,
    TriggerDeliveryLog,
)
from .addon import (
    AddonType,
    AddonStatus,
    TenantAddon,
    AddonResult,
)

__all__ = [
    "Webhook",
    "TenantSettings",
    "IngestionStatus",
    "CallRecord",
    "EnrichmentUpdate",
    "IngestionLog",
    "generate_id",
    "EventKind",
    "LifecycleEvent",
    "TerminalEvent",
    "WebhookEvent",
    "parse_webhook_event",
    "LifecycleStatus",
    "LIVE_STATUSES",
    "ActiveCall",
    "AnalysisResult",
    "AuthoritativeFields",
    "CallerInfo",
    "KeywordAggregate",
    "DeliveryStatus",
    "SchedulingTrigger",
    "TriggerDeliveryLog",
    "AddonType",
    "AddonStatus",
    "TenantAddon",
    "AddonResult",
]

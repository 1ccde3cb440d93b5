"""
Active Call Models
Live (non-terminal) call state per tenant
"""
from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum

from voicedash.utils.time_utils import epoch_now


class LifecycleStatus(str, Enum):
    """Call statuses reported by status-update events"""
    QUEUED = "queued"
    RINGING = "ringing"
    IN_PROGRESS = "in-progress"
    FORWARDING = "forwarding"
    ENDED = "ended"


# Statuses that keep an ActiveCall row alive
LIVE_STATUSES = frozenset({
    LifecycleStatus.RINGING.value,
    LifecycleStatus.IN_PROGRESS.value,
    LifecycleStatus.FORWARDING.value,
})


class ActiveCall(BaseModel):
    """One row per call currently ringing, in progress or forwarding"""
    tenant_id: str
    external_call_id: str
    status: str
    customer_number: Optional[str] = None
    caller_name: Optional[str] = None
    carrier_name: Optional[str] = None
    line_type: Optional[str] = None
    started_at: int = Field(default_factory=epoch_now)
    updated_at: int = Field(default_factory=epoch_now)

    @property
    def key(self) -> tuple:
        return (self.tenant_id, self.external_call_id)

"""
Scheduling Trigger Models
Tenant-configured appointment webhook destinations and their delivery log
"""
from pydantic import BaseModel, Field
from typing import Any, Dict, Optional
from enum import Enum

from voicedash.domain.models.call import generate_id
from voicedash.utils.time_utils import epoch_now


class DeliveryStatus(str, Enum):
    """Outcome of one trigger delivery attempt"""
    SUCCESS = "success"
    ERROR = "error"


class SchedulingTrigger(BaseModel):
    """Destination that receives booked-appointment payloads (read-only here)"""
    id: str
    tenant_id: str
    name: str = ""
    destination_url: str
    is_active: bool = True
    send_enhanced_data: bool = True


class TriggerDeliveryLog(BaseModel):
    """Append-only record of a single delivery attempt"""
    id: str = Field(default_factory=generate_id)
    trigger_id: str
    call_id: str
    status: DeliveryStatus
    http_status: Optional[int] = None
    response_body: Optional[str] = None
    error_message: Optional[str] = None
    payload_sent: Dict[str, Any] = Field(default_factory=dict)
    created_at: int = Field(default_factory=epoch_now)

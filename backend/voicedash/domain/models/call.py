"""
Call Domain Models
"""
from pydantic import BaseModel, Field
from typing import Any, Dict, Optional
from enum import Enum
from uuid import uuid4

from voicedash.utils.time_utils import epoch_now


def generate_id() -> str:
    """Row identifier used for every pipeline-created record"""
    return uuid4().hex


class IngestionStatus(str, Enum):
    """Outcome of a single webhook ingestion"""
    SUCCESS = "success"
    ERROR = "error"


class CallRecord(BaseModel):
    """
    One stored terminal call event.

    Immutable after creation except for the fields carried by
    EnrichmentUpdate, which are written exactly once.
    """
    id: str = Field(default_factory=generate_id)
    tenant_id: str
    webhook_id: str
    external_call_id: Optional[str] = None

    # Numbers
    phone_number: Optional[str] = Field(None, description="Agent's phone number")
    customer_number: Optional[str] = Field(None, description="Customer's phone number")

    # Platform report
    recording_url: Optional[str] = None
    ended_reason: str = "unknown"
    summary: str = ""
    transcript: str = ""
    structured_data: Dict[str, Any] = Field(default_factory=dict)
    raw_payload: Dict[str, Any] = Field(default_factory=dict)
    duration_seconds: Optional[int] = None

    # Caller identity
    caller_name: Optional[str] = None
    caller_type: Optional[str] = None
    carrier_name: Optional[str] = None
    line_type: Optional[str] = None

    # Analysis (written once by enrichment)
    intent: Optional[str] = None
    sentiment: Optional[str] = None
    outcome: Optional[str] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    appointment_date: Optional[str] = None
    appointment_time: Optional[str] = None
    appointment_datetime: Optional[int] = None
    appointment_type: Optional[str] = None
    appointment_notes: Optional[str] = None
    analysis_completed: bool = False
    analyzed_at: Optional[int] = None

    created_at: int = Field(default_factory=epoch_now)

    def apply_enrichment(self, update: "EnrichmentUpdate") -> "CallRecord":
        """Return a copy with the enrichment fields applied"""
        return self.model_copy(update=update.model_dump())


class EnrichmentUpdate(BaseModel):
    """
    The single merged write issued by the enrichment pipeline.

    Analysis fields only ever reach a CallRecord through this model, so
    they are set together with analysis_completed.
    """
    intent: str
    sentiment: str
    outcome: str
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    appointment_date: Optional[str] = None
    appointment_time: Optional[str] = None
    appointment_datetime: Optional[int] = None
    appointment_type: Optional[str] = None
    appointment_notes: Optional[str] = None
    analysis_completed: bool = True
    analyzed_at: int = Field(default_factory=epoch_now)

    @property
    def has_appointment(self) -> bool:
        return bool(self.appointment_date and self.appointment_time)


class IngestionLog(BaseModel):
    """Append-only log row for each webhook ingestion attempt"""
    id: str = Field(default_factory=generate_id)
    webhook_id: str
    status: IngestionStatus
    http_status: int
    payload_size: Optional[int] = None
    error_message: Optional[str] = None
    created_at: int = Field(default_factory=epoch_now)

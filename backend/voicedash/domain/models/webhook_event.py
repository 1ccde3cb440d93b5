"""
Webhook Event Models
Typed representation of the voice platform's event envelope

The platform sends a loosely-typed envelope with many optional, renamed or
nested fields. parse_webhook_event() resolves all of them once, with
defaults, into one of two event variants:

- LifecycleEvent: "status-update" messages (ringing, in-progress, ...)
- TerminalEvent: everything else, treated as an end-of-call report
"""
import math
from pydantic import BaseModel, Field
from typing import Any, Dict, Optional, Union
from enum import Enum

from voicedash.utils.time_utils import parse_iso_timestamp


class EventKind(str, Enum):
    """Message type discriminator values"""
    STATUS_UPDATE = "status-update"
    END_OF_CALL_REPORT = "end-of-call-report"


class LifecycleEvent(BaseModel):
    """Intermediate call state change"""
    kind: EventKind = EventKind.STATUS_UPDATE
    external_call_id: Optional[str] = None
    status: Optional[str] = None
    customer_number: Optional[str] = None


class TerminalEvent(BaseModel):
    """End-of-call report carrying summary, transcript and structured data"""
    kind: EventKind = EventKind.END_OF_CALL_REPORT
    message_type: str = EventKind.END_OF_CALL_REPORT.value
    external_call_id: Optional[str] = None
    phone_number: Optional[str] = None
    customer_number: Optional[str] = None
    recording_url: Optional[str] = None
    ended_reason: str = "unknown"
    summary: str = ""
    transcript: str = ""
    structured_data: Dict[str, Any] = Field(default_factory=dict)

    # Timing, in order of authority
    explicit_duration: Optional[float] = None
    message_started_at: Optional[str] = None
    message_ended_at: Optional[str] = None
    call_started_at: Optional[str] = None
    call_ended_at: Optional[str] = None

    raw_payload: Dict[str, Any] = Field(default_factory=dict)

    def duration_seconds(self) -> Optional[int]:
        """
        Call duration from the most authoritative source available.

        Explicit duration first, then the message-level start/end pair,
        then the call-level pair. Returns None when nothing usable exists.
        """
        if self.explicit_duration is not None:
            return int(math.floor(self.explicit_duration))

        for started, ended in (
            (self.message_started_at, self.message_ended_at),
            (self.call_started_at, self.call_ended_at),
        ):
            start_dt = parse_iso_timestamp(started)
            end_dt = parse_iso_timestamp(ended)
            if start_dt is None or end_dt is None:
                continue
            elapsed = (end_dt - start_dt).total_seconds()
            if elapsed < 0:
                continue
            return int(math.floor(elapsed))

        return None


WebhookEvent = Union[LifecycleEvent, TerminalEvent]


def _block(container: Dict[str, Any], key: str) -> Dict[str, Any]:
    """Nested object or an empty dict when absent / wrong type"""
    value = container.get(key)
    return value if isinstance(value, dict) else {}


def _text(*candidates: Any) -> Optional[str]:
    """First non-empty string among candidates"""
    for value in candidates:
        if isinstance(value, str) and value:
            return value
    return None


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)) and math.isfinite(value) and value >= 0:
        return float(value)
    if isinstance(value, str):
        try:
            parsed = float(value)
        except ValueError:
            return None
        return parsed if math.isfinite(parsed) and parsed >= 0 else None
    return None


def parse_webhook_event(payload: Dict[str, Any]) -> WebhookEvent:
    """
    Parse a decoded webhook body into a typed event.

    Args:
        payload: Decoded JSON object from the request body

    Returns:
        LifecycleEvent for "status-update" messages, TerminalEvent otherwise
        (including when the type discriminator is missing)
    """
    message = _block(payload, "message")
    call = _block(message, "call")
    customer = _block(call, "customer")

    message_type = _text(message.get("type")) or EventKind.END_OF_CALL_REPORT.value

    if message_type == EventKind.STATUS_UPDATE.value:
        return LifecycleEvent(
            external_call_id=_text(call.get("id")),
            status=_text(message.get("status")),
            customer_number=_text(customer.get("number")),
        )

    phone = _block(call, "phoneNumber")
    artifact = _block(message, "artifact")
    analysis = _block(message, "analysis")
    structured = analysis.get("structuredData")

    return TerminalEvent(
        message_type=message_type,
        external_call_id=_text(call.get("id")),
        phone_number=_text(phone.get("number")),
        customer_number=_text(customer.get("number")),
        recording_url=_text(message.get("recordingUrl"), artifact.get("recordingUrl")),
        ended_reason=_text(message.get("endedReason"), call.get("endedReason")) or "unknown",
        summary=_text(analysis.get("summary"), message.get("summary")) or "",
        transcript=_text(artifact.get("transcript")) or "",
        structured_data=structured if isinstance(structured, dict) else {},
        explicit_duration=_number(message.get("durationSeconds")),
        message_started_at=_text(message.get("startedAt")),
        message_ended_at=_text(message.get("endedAt")),
        call_started_at=_text(call.get("startedAt")),
        call_ended_at=_text(call.get("endedAt")),
        raw_payload=payload,
    )

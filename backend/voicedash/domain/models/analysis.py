"""
Analysis Models
AI classification results, caller identity and platform-supplied fields
"""
from pydantic import BaseModel, field_validator
from typing import Any, Dict, Optional


UNKNOWN = "Unknown"
NEUTRAL = "Neutral"
SCHEDULING_INTENT = "Scheduling"


def _blank_to_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class AnalysisResult(BaseModel):
    """
    Classifier output for one call.

    Missing or blank values fall back to sentinels ("Unknown"/"Neutral")
    for intent, sentiment and outcome, and to None for everything else.
    """
    intent: str = UNKNOWN
    sentiment: str = NEUTRAL
    outcome: str = UNKNOWN
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    appointment_date: Optional[str] = None
    appointment_time: Optional[str] = None
    appointment_type: Optional[str] = None
    appointment_notes: Optional[str] = None

    @field_validator("intent", "outcome", mode="before")
    @classmethod
    def _default_unknown(cls, value: Any) -> str:
        return _blank_to_none(value) or UNKNOWN

    @field_validator("sentiment", mode="before")
    @classmethod
    def _default_neutral(cls, value: Any) -> str:
        return _blank_to_none(value) or NEUTRAL

    @field_validator(
        "customer_name",
        "customer_email",
        "appointment_date",
        "appointment_time",
        "appointment_type",
        "appointment_notes",
        mode="before",
    )
    @classmethod
    def _optional_text(cls, value: Any) -> Optional[str]:
        return _blank_to_none(value)

    @classmethod
    def from_llm_json(cls, data: Dict[str, Any]) -> "AnalysisResult":
        """Build from a decoded model response, ignoring unknown keys"""
        return cls(**{k: data.get(k) for k in cls.model_fields if k in data})


class CallerInfo(BaseModel):
    """Phone number metadata from the caller identification service"""
    caller_name: Optional[str] = None
    caller_type: Optional[str] = None
    carrier_name: Optional[str] = None
    line_type: Optional[str] = None


class AuthoritativeFields(BaseModel):
    """
    Appointment/customer values the voice platform already extracted.

    These win over AI-derived values for every overlapping field.
    """
    appointment_date: Optional[str] = None
    appointment_time: Optional[str] = None
    appointment_type: Optional[str] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None

    @classmethod
    def from_structured_data(cls, data: Optional[Dict[str, Any]]) -> "AuthoritativeFields":
        data = data if isinstance(data, dict) else {}

        def pick(camel: str, snake: str) -> Optional[str]:
            return _blank_to_none(data.get(camel)) or _blank_to_none(data.get(snake))

        return cls(
            appointment_date=pick("appointmentDate", "appointment_date"),
            appointment_time=pick("appointmentTime", "appointment_time"),
            appointment_type=pick("appointmentType", "appointment_type"),
            customer_name=pick("customerName", "customer_name"),
            customer_email=pick("customerEmail", "customer_email"),
        )

    @property
    def has_appointment(self) -> bool:
        return bool(self.appointment_date and self.appointment_time)

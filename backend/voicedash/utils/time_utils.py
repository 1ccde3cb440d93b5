"""
Time Utilities
Epoch-second timestamps and tolerant ISO-8601 parsing
"""
import time
from datetime import datetime, timezone
from typing import Optional


def epoch_now() -> int:
    """Current time as integer epoch seconds."""
    return int(time.time())


def parse_iso_timestamp(value: object) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp as sent by the voice platform.

    Accepts a trailing "Z". Naive values are treated as UTC.
    Returns None for anything that is not a parseable string.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# Formats accepted for "<YYYY-MM-DD> <time>" appointment strings
_APPOINTMENT_FORMATS = (
    "%Y-%m-%d %I:%M %p",
    "%Y-%m-%d %I:%M%p",
    "%Y-%m-%d %I %p",
    "%Y-%m-%d %I%p",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %H:%M:%S",
)


def appointment_epoch(date_str: Optional[str], time_str: Optional[str]) -> Optional[int]:
    """
    Combine an appointment date and time into epoch seconds (UTC).

    Returns None when either part is missing or the pair does not parse.
    """
    if not date_str or not time_str:
        return None
    combined = f"{date_str.strip()} {time_str.strip().upper().replace('.', '')}"
    for fmt in _APPOINTMENT_FORMATS:
        try:
            parsed = datetime.strptime(combined, fmt)
        except ValueError:
            continue
        return int(parsed.replace(tzinfo=timezone.utc).timestamp())
    return None

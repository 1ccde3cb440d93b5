"""
Twilio Caller Lookup
Phone number metadata (caller name, carrier, line type) via Twilio Lookup v2
"""
import logging
import re
from typing import Optional
from urllib.parse import quote

import httpx

from voicedash.domain.interfaces.caller_lookup import CallerLookupProvider
from voicedash.domain.models.analysis import CallerInfo

logger = logging.getLogger(__name__)


class TwilioCallerLookup(CallerLookupProvider):
    """
    Twilio Lookup API client.

    Credentials are the tenant's own account SID / auth token, passed per
    call. Every failure (HTTP error, bad JSON, network) returns None.
    """

    API_BASE_URL = "https://lookups.twilio.com/v2/PhoneNumbers"
    FIELDS = "caller_name,line_type_intelligence"

    def __init__(
        self,
        base_url: Optional[str] = None,
        fields: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self._base_url = (base_url or self.API_BASE_URL).rstrip("/")
        self._fields = fields or self.FIELDS
        self._transport = transport

    @staticmethod
    def normalize_number(phone_number: str) -> str:
        """Strip everything except digits and '+' (E.164 input)."""
        return re.sub(r"[^\d+]", "", phone_number)

    async def lookup(
        self,
        phone_number: str,
        account_sid: str,
        auth_token: str
    ) -> Optional[CallerInfo]:
        number = self.normalize_number(phone_number)
        if not number:
            return None

        url = f"{self._base_url}/{quote(number, safe='')}"

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(
                    url,
                    params={"Fields": self._fields},
                    auth=(account_sid, auth_token)
                )

            if response.status_code != 200:
                logger.error(f"Twilio lookup failed: {response.status_code} {response.text[:200]}")
                return None

            data = response.json()
            if not isinstance(data, dict):
                logger.error("Twilio lookup returned a non-object body")
                return None

            caller = data.get("caller_name") or {}
            line = data.get("line_type_intelligence") or {}

            return CallerInfo(
                caller_name=caller.get("caller_name"),
                caller_type=caller.get("caller_type"),
                carrier_name=line.get("carrier_name"),
                line_type=line.get("type")
            )
        except Exception as e:
            logger.error(f"Error looking up caller with Twilio: {e}")
            return None

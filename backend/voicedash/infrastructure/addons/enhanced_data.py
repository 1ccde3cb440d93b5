"""
Enhanced Data Client
Third-party phone number enrichment used by the "enhanced_data" add-on
"""
import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)


class EnhancedDataClient:
    """Fetches enrichment data keyed by customer phone number"""

    API_BASE_URL = "https://enhance-data-production.up.railway.app"

    def __init__(
        self,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self._base_url = (base_url or self.API_BASE_URL).rstrip("/")
        self._transport = transport

    async def fetch(self, phone_number: str) -> Optional[Dict[str, Any]]:
        """
        Look up enrichment data for a phone number.

        Returns:
            Decoded JSON object, or None on any failure
        """
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(
                    f"{self._base_url}/phone",
                    params={"phone": phone_number},
                    headers={"Content-Type": "application/json"}
                )

            if response.status_code != 200:
                logger.warning(f"Enhanced data lookup returned {response.status_code}")
                return None

            data = response.json()
        except Exception as e:
            logger.error(f"Enhanced data lookup error: {e}")
            return None

        return data if data else None

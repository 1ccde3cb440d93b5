"""
Caller Identification Interface
"""
from abc import ABC, abstractmethod
from typing import Optional

from voicedash.domain.models.analysis import CallerInfo


class CallerLookupProvider(ABC):
    """Looks up carrier, line type and caller name for a phone number"""

    @abstractmethod
    async def lookup(
        self,
        phone_number: str,
        account_sid: str,
        auth_token: str
    ) -> Optional[CallerInfo]:
        """
        Look up phone number metadata.

        Returns:
            CallerInfo, or None on any failure (never raises)
        """
        pass

"""
Caller Identity
Best-effort caller lookup using the tenant's own lookup credentials
"""
import logging
from typing import Optional

from voicedash.domain.interfaces.caller_lookup import CallerLookupProvider
from voicedash.domain.interfaces.persistence_gateway import PersistenceGateway
from voicedash.domain.models.analysis import CallerInfo

logger = logging.getLogger(__name__)


async def identify_caller(
    gateway: PersistenceGateway,
    caller_lookup: Optional[CallerLookupProvider],
    tenant_id: str,
    customer_number: Optional[str]
) -> Optional[CallerInfo]:
    """
    Look up caller metadata for a customer number. Never raises.

    Returns None when there is no number, no provider, the tenant has no
    lookup credentials, or the lookup fails.
    """
    if not customer_number or caller_lookup is None:
        return None

    try:
        settings = gateway.get_tenant_settings(tenant_id)
        if not settings.has_lookup_credentials:
            return None
        return await caller_lookup.lookup(
            customer_number,
            settings.lookup_account_sid,
            settings.lookup_auth_token
        )
    except Exception as e:
        logger.error(f"Error enriching caller data: {e}")
        return None

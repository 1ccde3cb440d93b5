"""
Tenant Models
Webhook registrations and per-tenant integration credentials
"""
from pydantic import BaseModel
from typing import Optional


class Webhook(BaseModel):
    """Inbound webhook registered by a tenant"""
    id: str
    tenant_id: str
    name: str = ""
    is_active: bool = True


class TenantSettings(BaseModel):
    """Credentials the pipeline reads from a tenant's settings"""
    tenant_id: str
    analysis_api_key: Optional[str] = None
    lookup_account_sid: Optional[str] = None
    lookup_auth_token: Optional[str] = None

    @property
    def has_analysis_credentials(self) -> bool:
        return bool(self.analysis_api_key)

    @property
    def has_lookup_credentials(self) -> bool:
        return bool(self.lookup_account_sid and self.lookup_auth_token)

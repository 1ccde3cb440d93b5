"""
Add-on Models
Tenant-enabled post-processing steps and their per-call results
"""
from pydantic import BaseModel, Field
from typing import Any, Dict, Optional
from enum import Enum

from voicedash.domain.models.call import generate_id
from voicedash.utils.time_utils import epoch_now


class AddonType(str, Enum):
    """Known add-on types"""
    ENHANCED_DATA = "enhanced_data"


class AddonStatus(str, Enum):
    """Add-on execution outcome"""
    SUCCESS = "success"
    FAILED = "failed"


class TenantAddon(BaseModel):
    """Add-on configuration row for a tenant"""
    tenant_id: str
    addon_type: str
    is_enabled: bool = False
    settings: Dict[str, Any] = Field(default_factory=dict)


class AddonResult(BaseModel):
    """One result row per add-on per call"""
    id: str = Field(default_factory=generate_id)
    call_id: str
    tenant_id: str
    addon_type: str
    status: AddonStatus
    result_data: Optional[Any] = None
    error_message: Optional[str] = None
    execution_time_ms: int = 0
    created_at: int = Field(default_factory=epoch_now)

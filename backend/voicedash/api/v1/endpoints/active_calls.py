"""
Active Calls Endpoints
Calls currently ringing, in progress or forwarding
"""
from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from voicedash.api.v1.dependencies import get_pipeline, require_tenant
from voicedash.core.pipeline import Pipeline

router = APIRouter(prefix="/active-calls", tags=["active-calls"])


@router.get("")
async def list_active_calls(
    tenant_id: str = Depends(require_tenant),
    pipeline: Pipeline = Depends(get_pipeline)
) -> List[Dict[str, Any]]:
    return [call.model_dump() for call in pipeline.tracker.list_active(tenant_id)]

"""
Call History Endpoints
Cached call listing, call details and per-call analysis
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from voicedash.api.v1.dependencies import get_pipeline, require_tenant
from voicedash.core.pipeline import Pipeline
from voicedash.domain.models.addon import AddonType

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/calls", tags=["calls"])


ANALYSIS_FIELDS = (
    "intent",
    "sentiment",
    "outcome",
    "customer_name",
    "customer_email",
    "appointment_date",
    "appointment_time",
    "appointment_datetime",
    "appointment_type",
    "appointment_notes",
    "analysis_completed",
    "analyzed_at",
)


@router.get("")
async def list_calls(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(50, ge=1, le=100, description="Items per page"),
    bust: Optional[str] = Query(None, alias="_t", description="Skip the cache when set"),
    tenant_id: str = Depends(require_tenant),
    pipeline: Pipeline = Depends(get_pipeline)
) -> List[Dict[str, Any]]:
    """
    Paginated call records, newest first.

    Pages are cached per tenant until the next webhook for that tenant
    invalidates them.
    """
    if not bust:
        cached = await pipeline.cache.get_cached_recordings(tenant_id, page, limit)
        if cached is not None:
            logger.debug(f"Cache HIT for recordings: tenant={tenant_id}, page={page}, limit={limit}")
            return cached

    records = pipeline.gateway.list_call_records(tenant_id, limit=limit, offset=(page - 1) * limit)
    items = [record.model_dump(mode="json") for record in records]

    await pipeline.cache.cache_recordings(tenant_id, items, page, limit)
    return items


@router.get("/{call_id}")
async def get_call(
    call_id: str,
    tenant_id: str = Depends(require_tenant),
    pipeline: Pipeline = Depends(get_pipeline)
) -> Dict[str, Any]:
    """Single call record with its enhanced data, if any."""
    cached = await pipeline.cache.get_cached_call(tenant_id, call_id)
    if cached is not None:
        return cached

    record = pipeline.gateway.get_call_record(tenant_id, call_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Call not found")

    detail = record.model_dump(mode="json")
    enhanced = pipeline.gateway.get_addon_result(call_id, AddonType.ENHANCED_DATA.value)
    detail["enhanced_data"] = enhanced.result_data if enhanced else None

    await pipeline.cache.cache_call(tenant_id, call_id, detail)
    return detail


@router.get("/{call_id}/analysis")
async def get_call_analysis(
    call_id: str,
    tenant_id: str = Depends(require_tenant),
    pipeline: Pipeline = Depends(get_pipeline)
) -> Dict[str, Any]:
    """
    Analysis fields for one call.

    Only completed analyses are cached, so a pending call is re-read
    until enrichment finishes.
    """
    cached = await pipeline.cache.get_cached_intent_analysis(tenant_id, call_id)
    if cached is not None:
        return cached

    record = pipeline.gateway.get_call_record(tenant_id, call_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Call not found")

    analysis = {"call_id": record.id, **record.model_dump(include=set(ANALYSIS_FIELDS))}

    if record.analysis_completed:
        await pipeline.cache.cache_intent_analysis(tenant_id, call_id, analysis)
    return analysis

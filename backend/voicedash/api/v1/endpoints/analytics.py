"""
Analytics Endpoints
Tenant-level intent and sentiment breakdown of analyzed calls
"""
from collections import Counter
from typing import Any, Dict

from fastapi import APIRouter, Depends, Query

from voicedash.api.v1.dependencies import get_pipeline, require_tenant
from voicedash.core.pipeline import Pipeline

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/intent-summary")
async def get_intent_summary(
    limit: int = Query(100, ge=1, le=500, description="Most recent calls considered"),
    tenant_id: str = Depends(require_tenant),
    pipeline: Pipeline = Depends(get_pipeline)
) -> Dict[str, Any]:
    """Counts by intent, sentiment and outcome plus the analyzed calls themselves."""
    cached = await pipeline.cache.get_cached_intent_summary(tenant_id)
    if cached is not None:
        return cached

    records = [
        record for record in pipeline.gateway.list_call_records(tenant_id, limit=limit)
        if record.analysis_completed
    ]

    summary = {
        "total_analyzed": len(records),
        "by_intent": dict(Counter(r.intent for r in records)),
        "by_sentiment": dict(Counter(r.sentiment for r in records)),
        "by_outcome": dict(Counter(r.outcome for r in records)),
        "calls": [
            {
                "id": r.id,
                "customer_number": r.customer_number,
                "customer_name": r.customer_name,
                "intent": r.intent,
                "sentiment": r.sentiment,
                "outcome": r.outcome,
                "appointment_date": r.appointment_date,
                "appointment_time": r.appointment_time,
                "appointment_type": r.appointment_type,
                "created_at": r.created_at,
            }
            for r in records
        ],
    }

    await pipeline.cache.cache_intent_summary(tenant_id, summary)
    return summary

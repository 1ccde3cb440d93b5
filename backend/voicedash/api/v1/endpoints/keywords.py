"""
Keyword Endpoints
Top keyword aggregates for the tenant's heat map
"""
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Query

from voicedash.api.v1.dependencies import get_pipeline, require_tenant
from voicedash.core.pipeline import Pipeline

router = APIRouter(prefix="/keywords", tags=["keywords"])


@router.get("")
async def list_keywords(
    limit: int = Query(20, ge=1, le=100),
    tenant_id: str = Depends(require_tenant),
    pipeline: Pipeline = Depends(get_pipeline)
) -> List[Dict[str, Any]]:
    rows = pipeline.gateway.list_keywords(tenant_id, limit=limit)
    return [
        row.model_dump(include={
            "keyword",
            "count",
            "positive_count",
            "neutral_count",
            "negative_count",
            "avg_sentiment",
            "last_detected_at",
        })
        for row in rows
    ]

"""
Keyword Aggregate Model
Running per-tenant keyword counters with sentiment buckets
"""
from pydantic import BaseModel, Field
from typing import Optional

from voicedash.domain.models.call import generate_id
from voicedash.utils.time_utils import epoch_now


class KeywordAggregate(BaseModel):
    """One row per (tenant, keyword)"""
    id: str = Field(default_factory=generate_id)
    tenant_id: str
    keyword: str
    count: int = Field(default=0, ge=0)
    positive_count: int = Field(default=0, ge=0)
    neutral_count: int = Field(default=0, ge=0)
    negative_count: int = Field(default=0, ge=0)
    avg_sentiment: float = 0.0
    last_detected_at: Optional[int] = None
    created_at: int = Field(default_factory=epoch_now)

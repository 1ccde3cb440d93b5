"""
Webhooks API Endpoints
Inbound voice-platform webhooks, addressed by the tenant's webhook id
"""
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request

from voicedash.api.v1.dependencies import get_pipeline
from voicedash.core.pipeline import Pipeline
from voicedash.domain.exceptions import PipelineError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhook", tags=["webhooks"])


@router.post("/{webhook_id}")
async def receive_webhook(
    webhook_id: str,
    request: Request,
    pipeline: Pipeline = Depends(get_pipeline)
) -> Dict[str, Any]:
    """
    Receive a call event.

    Status updates maintain the tenant's active calls. Any other message
    is stored as a finished call and enriched in the background after
    this response is sent.
    """
    body = await request.body()

    try:
        return await pipeline.dispatcher.handle(webhook_id, body)
    except PipelineError as e:
        if e.status_code >= 500:
            logger.error(f"Webhook {webhook_id} failed: {e.message}")
        else:
            logger.warning(f"Webhook {webhook_id} rejected: {e.message}")
        raise HTTPException(status_code=e.status_code, detail=e.message)

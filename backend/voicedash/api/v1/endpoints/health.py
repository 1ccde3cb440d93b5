"""
Health Check Endpoint
Service status, cache key counts and background task load
"""
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Request, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check(request: Request) -> Dict[str, Any]:
    """
    Health check endpoint for Docker and monitoring systems.

    Reports "starting" until the pipeline has been created.
    """
    health: Dict[str, Any] = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": "voicedash-backend",
    }

    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        health["status"] = "starting"
        return health

    health["cache"] = await pipeline.cache.stats()
    health["background_tasks"] = pipeline.runner.stats()
    return health


@router.get("/", status_code=status.HTTP_200_OK)
async def root() -> Dict[str, str]:
    return {
        "message": "Voice Dashboard Backend",
        "version": "1.0.0",
        "docs": "/docs"
    }

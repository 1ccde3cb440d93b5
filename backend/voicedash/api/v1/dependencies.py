"""
API Dependencies
Shared dependencies for settings, the wired pipeline and tenant authorization
"""
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from fastapi import Depends, HTTPException, Request, status

from voicedash.core.config import Settings
from voicedash.core.pipeline import Pipeline
from voicedash.core.tenant_middleware import get_current_tenant

load_dotenv()


@lru_cache()
def get_settings() -> Settings:
    return Settings()


def get_pipeline(request: Request) -> Pipeline:
    """
    Pipeline created in the application lifespan.

    Raises:
        HTTPException: 503 if the application has not finished starting
    """
    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Pipeline not initialized"
        )
    return pipeline


def require_tenant(tenant_id: Optional[str] = Depends(get_current_tenant)) -> str:
    """
    Dependency for tenant-scoped read endpoints.

    Raises:
        HTTPException: 401 when no tenant could be resolved from the token
    """
    if not tenant_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return tenant_id

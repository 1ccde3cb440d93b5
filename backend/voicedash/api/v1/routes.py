"""
API Router
Combines all endpoint routers
"""
from fastapi import APIRouter
from voicedash.api.v1.endpoints import (
    webhooks,
    calls,
    analytics,
    keywords,
    active_calls,
)

api_router = APIRouter()

# Inbound (public, addressed by webhook id)
api_router.include_router(webhooks.router)

# Tenant-scoped dashboard reads
api_router.include_router(calls.router)
api_router.include_router(analytics.router)
api_router.include_router(keywords.router)
api_router.include_router(active_calls.router)

"""
FastAPI Application Entry Point
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from voicedash.api.v1.dependencies import get_settings
from voicedash.api.v1.endpoints import health
from voicedash.api.v1.routes import api_router
from voicedash.core.pipeline import create_pipeline
from voicedash.core.tenant_middleware import TenantMiddleware

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan - startup and shutdown events.

    Startup:
    - Builds the pipeline (Supabase/Redis when configured, in-memory otherwise)

    Shutdown:
    - Waits up to background_grace_seconds for in-flight enrichment
    - Closes the cache backend
    """
    logger.info(f"Starting Voice Dashboard backend ({settings.environment})...")

    if getattr(app.state, "pipeline", None) is None:
        app.state.pipeline = await create_pipeline(settings)

    logger.info("Voice Dashboard backend started successfully")

    yield

    logger.info("Shutting down Voice Dashboard backend...")

    try:
        await app.state.pipeline.shutdown(settings.background_grace_seconds)
    except Exception as e:
        logger.error(f"Error during shutdown: {e}")

    logger.info("Voice Dashboard backend shutdown complete")


app = FastAPI(
    title="Voice Dashboard",
    description="Call event ingestion, enrichment and analytics for voice agents",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# MULTI-TENANT: tenant_id from bearer token
app.add_middleware(TenantMiddleware, jwt_secret=settings.jwt_secret)

app.include_router(health.router)
app.include_router(api_router, prefix=settings.api_prefix)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

"""
Pipeline Assembly
Builds the call event pipeline from Settings and YAML configuration
"""
import logging
from typing import Optional

from supabase import create_client

from voicedash.core.background import BackgroundTaskRunner
from voicedash.core.config import ConfigManager, Settings
from voicedash.domain.interfaces.cache_backend import CacheBackend
from voicedash.domain.interfaces.call_analyzer import CallAnalyzer
from voicedash.domain.interfaces.caller_lookup import CallerLookupProvider
from voicedash.domain.interfaces.persistence_gateway import PersistenceGateway
from voicedash.domain.services.active_call_tracker import ActiveCallTracker
from voicedash.domain.services.addon_service import AddonService
from voicedash.domain.services.cache_service import VoiceCache
from voicedash.domain.services.enrichment_orchestrator import EnrichmentOrchestrator
from voicedash.domain.services.keyword_service import KeywordAggregator
from voicedash.domain.services.scheduling_trigger_dispatcher import SchedulingTriggerDispatcher
from voicedash.domain.services.webhook_dispatcher import WebhookDispatcher
from voicedash.infrastructure.addons.enhanced_data import EnhancedDataClient
from voicedash.infrastructure.cache import MemoryCacheBackend, RedisCacheBackend
from voicedash.infrastructure.llm.groq_analyzer import GroqCallAnalyzer
from voicedash.infrastructure.lookup.twilio_lookup import TwilioCallerLookup
from voicedash.infrastructure.storage.memory_gateway import InMemoryGateway
from voicedash.infrastructure.storage.supabase_gateway import SupabaseGateway

logger = logging.getLogger(__name__)


class Pipeline:
    """
    Wired pipeline components shared by every request.

    External collaborators (gateway, cache backend, analyzer, lookup,
    enhanced data client) are injectable so tests can swap them.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        cache_backend: CacheBackend,
        config: Optional[ConfigManager] = None,
        analyzer: Optional[CallAnalyzer] = None,
        caller_lookup: Optional[CallerLookupProvider] = None,
        enhanced_data_client: Optional[EnhancedDataClient] = None,
        trigger_dispatcher: Optional[SchedulingTriggerDispatcher] = None,
        runner: Optional[BackgroundTaskRunner] = None
    ):
        config = config or ConfigManager()

        self.config = config
        self.gateway = gateway
        self.cache_backend = cache_backend
        self.runner = runner or BackgroundTaskRunner()

        self.cache = VoiceCache(
            cache_backend,
            ttls=config.get_section("cache.ttl"),
            default_ttl=config.get("cache.default_ttl", 300)
        )

        self.tracker = ActiveCallTracker(gateway, self.cache, caller_lookup)

        self.trigger_dispatcher = trigger_dispatcher or SchedulingTriggerDispatcher(
            gateway,
            trigger_type=config.get("scheduling_triggers.trigger_type", "appointment-scheduled"),
            response_body_limit=config.get("scheduling_triggers.response_body_limit", 1000)
        )

        self.addon_service = AddonService(
            gateway,
            self.cache,
            enhanced_data_client or EnhancedDataClient(
                base_url=config.get("addons.enhanced_data.base_url")
            )
        )

        self.orchestrator = EnrichmentOrchestrator(
            gateway,
            self.cache,
            analyzer,
            KeywordAggregator(gateway),
            self.trigger_dispatcher,
            self.addon_service,
            max_keywords=config.get("keywords.max_keywords", 20),
            min_occurrences=config.get("keywords.min_occurrences", 2)
        )

        self.dispatcher = WebhookDispatcher(
            gateway,
            self.cache,
            self.tracker,
            self.orchestrator,
            self.runner,
            caller_lookup
        )

    async def shutdown(self, grace_seconds: float = 30) -> None:
        await self.runner.shutdown(grace_seconds)
        await self.cache_backend.close()


def create_gateway(settings: Settings) -> PersistenceGateway:
    if settings.supabase_url and settings.supabase_service_key:
        return SupabaseGateway(create_client(settings.supabase_url, settings.supabase_service_key))

    logger.warning("SUPABASE_URL/SUPABASE_SERVICE_KEY not set, using in-memory storage")
    return InMemoryGateway()


async def create_cache_backend(settings: Settings) -> CacheBackend:
    if not settings.redis_url:
        logger.info("REDIS_URL not set, using in-memory cache")
        return MemoryCacheBackend()

    backend = RedisCacheBackend(redis_url=settings.redis_url)
    await backend.initialize()
    return backend


async def create_pipeline(settings: Settings, config: Optional[ConfigManager] = None) -> Pipeline:
    """Build the production pipeline (Supabase/Redis when configured)."""
    config = config or ConfigManager(env=settings.environment)

    return Pipeline(
        gateway=create_gateway(settings),
        cache_backend=await create_cache_backend(settings),
        config=config,
        analyzer=GroqCallAnalyzer(
            model=config.get("analysis.model", "llama-3.3-70b-versatile"),
            temperature=config.get("analysis.temperature", 0.3)
        ),
        caller_lookup=TwilioCallerLookup(
            base_url=config.get("caller_lookup.base_url"),
            fields=config.get("caller_lookup.fields")
        )
    )

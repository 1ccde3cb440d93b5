"""
Enrichment Orchestrator
Background post-processing of a stored call: AI analysis, keywords,
appointment merge, scheduling triggers and add-ons
"""
import logging
from typing import Optional

from voicedash.domain.interfaces.call_analyzer import CallAnalyzer
from voicedash.domain.interfaces.persistence_gateway import PersistenceGateway
from voicedash.domain.models.analysis import (
    AnalysisResult,
    AuthoritativeFields,
    NEUTRAL,
    SCHEDULING_INTENT,
    UNKNOWN,
)
from voicedash.domain.models.call import CallRecord, EnrichmentUpdate
from voicedash.domain.services.addon_service import AddonService
from voicedash.domain.services.cache_service import VoiceCache
from voicedash.domain.services.keyword_service import (
    KeywordAggregator,
    MAX_KEYWORDS,
    MIN_OCCURRENCES,
    extract_keywords,
)
from voicedash.domain.services.scheduling_trigger_dispatcher import SchedulingTriggerDispatcher
from voicedash.utils.time_utils import appointment_epoch

logger = logging.getLogger(__name__)


def merge_enrichment(
    authoritative: AuthoritativeFields,
    analysis: Optional[AnalysisResult]
) -> EnrichmentUpdate:
    """
    Combine platform-extracted fields with the classifier result.

    Platform values win for every field both sides carry. Appointment
    notes only come from the classifier. Without a classifier result the
    call is recorded as a booked appointment with neutral sentiment.
    """
    if analysis is None:
        analysis = AnalysisResult(intent=SCHEDULING_INTENT, sentiment=NEUTRAL, outcome=UNKNOWN)

    date = authoritative.appointment_date or analysis.appointment_date
    time_ = authoritative.appointment_time or analysis.appointment_time

    appointment_datetime = None
    if date and time_:
        appointment_datetime = appointment_epoch(date, time_)
        if appointment_datetime is None:
            logger.warning(f"Could not parse appointment datetime: {date} {time_}")

    return EnrichmentUpdate(
        intent=analysis.intent,
        sentiment=analysis.sentiment,
        outcome=analysis.outcome,
        customer_name=authoritative.customer_name or analysis.customer_name,
        customer_email=authoritative.customer_email or analysis.customer_email,
        appointment_date=date,
        appointment_time=time_,
        appointment_datetime=appointment_datetime,
        appointment_type=authoritative.appointment_type or analysis.appointment_type,
        appointment_notes=analysis.appointment_notes,
    )


class EnrichmentOrchestrator:
    """
    Runs the best-effort enrichment sequence for one CallRecord.

    Scheduled once per record on the background runner. Every step is
    guarded on its own and run() never raises.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        cache: VoiceCache,
        analyzer: Optional[CallAnalyzer],
        keyword_aggregator: KeywordAggregator,
        trigger_dispatcher: SchedulingTriggerDispatcher,
        addon_service: AddonService,
        max_keywords: int = MAX_KEYWORDS,
        min_occurrences: int = MIN_OCCURRENCES
    ):
        self.gateway = gateway
        self.cache = cache
        self.analyzer = analyzer
        self.keyword_aggregator = keyword_aggregator
        self.trigger_dispatcher = trigger_dispatcher
        self.addon_service = addon_service
        self.max_keywords = max_keywords
        self.min_occurrences = min_occurrences

    async def run(self, record: CallRecord) -> None:
        try:
            await self._enrich(record)
        except Exception as e:
            logger.error(f"Background processing error for call {record.id}: {e}", exc_info=True)

        try:
            await self.addon_service.process(record.tenant_id, record.id, record.customer_number)
        except Exception as e:
            logger.error(f"Addon processing error for call {record.id}: {e}", exc_info=True)

    async def _enrich(self, record: CallRecord) -> None:
        authoritative = AuthoritativeFields.from_structured_data(record.structured_data)
        analysis = await self._analyze(record)

        if analysis is not None:
            self._aggregate_keywords(record, analysis.sentiment)
        elif not authoritative.has_appointment:
            logger.info(f"Call {record.id} left unanalyzed (no analysis, no appointment data)")
            return

        update = merge_enrichment(authoritative, analysis)
        self.gateway.apply_enrichment(record.id, update)
        logger.info(
            f"Call {record.id} enriched: intent={update.intent}, "
            f"sentiment={update.sentiment}, appointment={update.has_appointment}"
        )

        await self.cache.invalidate_call(record.tenant_id, record.id)

        if update.intent == SCHEDULING_INTENT and update.has_appointment:
            try:
                await self.trigger_dispatcher.dispatch(record.tenant_id, record.id)
            except Exception as e:
                logger.error(f"Scheduling trigger dispatch failed for call {record.id}: {e}", exc_info=True)

    async def _analyze(self, record: CallRecord) -> Optional[AnalysisResult]:
        if self.analyzer is None:
            return None

        try:
            settings = self.gateway.get_tenant_settings(record.tenant_id)
        except Exception as e:
            logger.error(f"Could not load settings for tenant {record.tenant_id}: {e}")
            return None

        if not settings.has_analysis_credentials:
            return None

        try:
            return await self.analyzer.analyze(record.summary, record.transcript, settings.analysis_api_key)
        except Exception as e:
            logger.error(f"Call analysis failed for {record.id}: {e}")
            return None

    def _aggregate_keywords(self, record: CallRecord, sentiment: str) -> None:
        if not record.transcript:
            return

        try:
            keywords = extract_keywords(record.transcript, self.max_keywords, self.min_occurrences)
            if keywords:
                self.keyword_aggregator.merge(record.tenant_id, keywords, sentiment)
        except Exception as e:
            logger.error(f"Keyword aggregation failed for call {record.id}: {e}")

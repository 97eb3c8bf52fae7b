"""Sync service -- one engine instance wired from settings.

SyncService.run_cycle() is the unit the scheduler repeats:
ingest today's new records, dispatch them oldest first, report a CycleResult.
build_sync_service() assembles adapters, stores and components from Settings.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

import structlog

from src.call_sync.calls.source import CallSource
from src.call_sync.calls.threec import ThreeCClient
from src.call_sync.config import Settings
from src.call_sync.crm.adapter import CRMAdapter
from src.call_sync.crm.hubspot import HubSpotAdapter
from src.call_sync.sync.decision import SyncDecisionEngine
from src.call_sync.sync.dispatcher import Dispatcher
from src.call_sync.sync.identity import IdentityResolver
from src.call_sync.sync.ingestion import PaginatedIngestion
from src.call_sync.sync.scheduler import CycleScheduler
from src.call_sync.sync.schemas import CycleResult
from src.call_sync.sync.stores import (
    IdentityCache,
    InMemoryIdentityCache,
    InMemorySeenIdStore,
    SeenIdStore,
)

logger = structlog.get_logger(__name__)


class SyncService:
    """Owns the per-process stores and runs sync cycles.

    Args:
        ingestion: Paginated ingestion for today's records.
        dispatcher: Chronological dispatcher for the ingested batch.
        seen_store: Shared with ingestion and dispatcher.
        identity_cache: Shared with the identity resolver.
    """

    def __init__(
        self,
        ingestion: PaginatedIngestion,
        dispatcher: Dispatcher,
        seen_store: SeenIdStore,
        identity_cache: IdentityCache,
    ) -> None:
        self.ingestion = ingestion
        self.dispatcher = dispatcher
        self.seen_store = seen_store
        self.identity_cache = identity_cache

    async def run_cycle(self, today: date | None = None) -> CycleResult:
        started_at = datetime.now(timezone.utc)
        logger.info("sync.cycle_started")

        batch = await self.ingestion.ingest_today(today)
        dispatch = await self.dispatcher.dispatch(batch.records)

        result = CycleResult(
            started_at=started_at,
            finished_at=datetime.now(timezone.utc),
            fetched=batch.fetched,
            new_records=len(batch.records),
            pages_fetched=batch.pages_fetched,
            interrupted=batch.interrupted,
            dispatch=dispatch,
        )
        logger.info(
            "sync.cycle_completed",
            fetched=result.fetched,
            new=result.new_records,
            created=dispatch.created,
            updated=dispatch.updated,
            skipped=dispatch.skipped,
            failed=dispatch.failed,
            interrupted=result.interrupted,
            duration_seconds=round(result.duration_seconds, 3),
            seen_ids=len(self.seen_store),
            cached_contacts=len(self.identity_cache),
        )
        return result

    def scheduler(self, interval_seconds: float) -> CycleScheduler:
        """Create a scheduler that repeats this service's cycle."""
        return CycleScheduler(self.run_cycle, interval_seconds=interval_seconds)


def build_sync_service(
    settings: Settings,
    source: CallSource | None = None,
    crm: CRMAdapter | None = None,
    seen_store: SeenIdStore | None = None,
    identity_cache: IdentityCache | None = None,
) -> SyncService:
    """Wire a SyncService from settings.

    Remote adapters and stores can be injected; anything omitted is built
    from ``settings`` (3C and HubSpot clients, in-memory stores).
    """
    if source is None:
        source = ThreeCClient(
            api_token=settings.THREEC_API_TOKEN,
            base_url=settings.THREEC_BASE_URL,
            verify_tls=settings.THREEC_VERIFY_TLS,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
        )
    if crm is None:
        crm = HubSpotAdapter(
            token=settings.HUBSPOT_TOKEN,
            base_url=settings.HUBSPOT_BASE_URL,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
        )
    if seen_store is None:
        seen_store = InMemorySeenIdStore()
    if identity_cache is None:
        identity_cache = InMemoryIdentityCache()

    resolver = IdentityResolver(crm, identity_cache)
    engine = SyncDecisionEngine(
        crm,
        resolver,
        unanswered_policy=settings.UNANSWERED_NEW_CONTACT_POLICY,
        default_label=settings.DEFAULT_STATUS_LABEL,
        not_answered_label=settings.NOT_ANSWERED_LABEL,
    )
    ingestion = PaginatedIngestion(
        source,
        seen_store,
        page_size=settings.PAGE_SIZE,
        max_pages=settings.MAX_PAGES,
        tz_name=settings.TIMEZONE,
    )
    dispatcher = Dispatcher(
        source,
        resolver,
        engine,
        seen_store,
        pacing_seconds=settings.WRITE_PACING_SECONDS,
        tz_name=settings.TIMEZONE,
        placeholder_name=settings.PLACEHOLDER_NAME,
        voicemail_labels=settings.VOICEMAIL_LABELS,
        default_label=settings.DEFAULT_STATUS_LABEL,
    )

    logger.info(
        "sync.service_built",
        page_size=settings.PAGE_SIZE,
        timezone=settings.TIMEZONE,
        unanswered_policy=settings.UNANSWERED_NEW_CONTACT_POLICY.value,
    )
    return SyncService(ingestion, dispatcher, seen_store, identity_cache)

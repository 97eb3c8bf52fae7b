"""Paginated ingestion of today's call records.

Pages are fetched sequentially, advancing the offset by the page size, until:
- a page comes back shorter than the page size (the last page), or
- a page fetch fails (records from earlier pages are still returned), or
- the page cap is reached (guards against an upstream ignoring the offset).

Records already in the Seen-Id store are dropped, repeats within the cycle
collapse to the first occurrence, and records without an id or with an
unusable shape are dropped with a warning.
"""

from __future__ import annotations

from datetime import date

import structlog
from pydantic import ValidationError

from src.call_sync.calls.source import CallSource
from src.call_sync.core.monitoring import page_fetches_total
from src.call_sync.errors import RemoteRejection, TransportFailure
from src.call_sync.sync.normalize import DEFAULT_TIMEZONE, day_bounds, local_today
from src.call_sync.sync.schemas import CallRecord, IngestionBatch
from src.call_sync.sync.stores import SeenIdStore

logger = structlog.get_logger(__name__)


class PaginatedIngestion:
    """Fetches and deduplicates one day of call records.

    Args:
        source: Call source to page through.
        seen_store: Cross-cycle set of already dispatched call ids.
        page_size: Records requested per page.
        max_pages: Hard cap on pages per cycle.
        tz_name: Timezone that defines "today".
    """

    def __init__(
        self,
        source: CallSource,
        seen_store: SeenIdStore,
        page_size: int = 100,
        max_pages: int = 50,
        tz_name: str = DEFAULT_TIMEZONE,
    ) -> None:
        self._source = source
        self._seen = seen_store
        self._page_size = page_size
        self._max_pages = max_pages
        self._tz_name = tz_name

    async def ingest_today(self, today: date | None = None) -> IngestionBatch:
        day = today or local_today(self._tz_name)
        start, end = day_bounds(day)

        batch = IngestionBatch()
        batch_ids: set[str] = set()
        offset = 0

        while batch.pages_fetched < self._max_pages:
            try:
                page = await self._source.list_calls(
                    start,
                    end,
                    per_page=self._page_size,
                    offset=offset,
                    with_mailing=True,
                )
            except (TransportFailure, RemoteRejection) as exc:
                page_fetches_total.labels(status="error").inc()
                logger.error(
                    "ingestion.page_failed",
                    offset=offset,
                    error=str(exc),
                    records_so_far=len(batch.records),
                )
                batch.interrupted = True
                break

            page_fetches_total.labels(status="ok").inc()
            batch.pages_fetched += 1
            batch.fetched += len(page)

            for raw in page:
                try:
                    record = CallRecord.model_validate(raw)
                except ValidationError as exc:
                    batch.malformed += 1
                    logger.warning(
                        "ingestion.record_malformed",
                        errors=exc.error_count(),
                        keys=sorted(raw)[:10] if isinstance(raw, dict) else None,
                    )
                    continue

                if self._seen.contains(record.id):
                    batch.already_seen += 1
                    continue
                if record.id in batch_ids:
                    batch.duplicates += 1
                    continue

                batch_ids.add(record.id)
                batch.records.append(record)

            if len(page) < self._page_size:
                break
            offset += self._page_size
        else:
            logger.warning(
                "ingestion.page_cap_reached",
                max_pages=self._max_pages,
                fetched=batch.fetched,
            )

        logger.info(
            "ingestion.completed",
            day=day.isoformat(),
            pages=batch.pages_fetched,
            fetched=batch.fetched,
            new=len(batch.records),
            already_seen=batch.already_seen,
            duplicates=batch.duplicates,
            malformed=batch.malformed,
            interrupted=batch.interrupted,
        )
        return batch

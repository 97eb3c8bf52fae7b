"""Chronological, sequential dispatch of one ingested batch.

For every record, oldest first:
1. skip it if its id was already dispatched, otherwise mark it seen
2. normalize the phone; an empty phone is skipped with no remote call
3. classify, derive the name, format the contact timestamp
4. resolve the contact, decide the action, execute exactly one write
5. pause for the pacing delay after each attempted write

A failure on one record is logged and counted; the batch continues.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence

import structlog

from src.call_sync.calls.source import CallSource
from src.call_sync.core.monitoring import identity_cache_size, sync_records_total
from src.call_sync.errors import CallSyncError, MalformedRecord
from src.call_sync.sync.classifier import DEFAULT_STATUS_LABEL, VOICEMAIL_LABELS, classify
from src.call_sync.sync.decision import SyncDecisionEngine
from src.call_sync.sync.identity import IdentityResolver
from src.call_sync.sync.names import PLACEHOLDER_NAME, derive_name
from src.call_sync.sync.normalize import (
    DEFAULT_TIMEZONE,
    first_timestamp,
    format_crm_timestamp,
    normalize_phone,
)
from src.call_sync.sync.schemas import (
    ActionKind,
    CallContext,
    CallRecord,
    DispatchResult,
)
from src.call_sync.sync.stores import SeenIdStore

logger = structlog.get_logger(__name__)


def sort_chronologically(
    records: Iterable[CallRecord],
    tz_name: str = DEFAULT_TIMEZONE,
) -> list[CallRecord]:
    """Stable ascending sort by call timestamp; records with no parseable
    timestamp go last.

    The call date is preferred; the creation timestamp is used when the call
    date is absent or unparseable.
    """
    dated = []
    undated = []
    for record in records:
        parsed = first_timestamp(record.timestamps, tz_name)
        if parsed is None:
            undated.append(record)
        else:
            dated.append((parsed, record))

    dated.sort(key=lambda item: item[0])
    return [record for _, record in dated] + undated


class Dispatcher:
    """Sends one batch of call records to the CRM, oldest first.

    Args:
        source: Call source, used to build recording links.
        resolver: Phone -> contact id resolver.
        engine: Decision engine that picks and executes the write.
        seen_store: Cross-cycle set of dispatched call ids.
        pacing_seconds: Pause after every attempted write.
        tz_name: Timezone for ordering and CRM timestamps.
        placeholder_name: Name used when the mailing data has none.
        voicemail_labels: Status labels that mean the call hit voicemail.
        default_label: Status label for calls without a qualification.
    """

    def __init__(
        self,
        source: CallSource,
        resolver: IdentityResolver,
        engine: SyncDecisionEngine,
        seen_store: SeenIdStore,
        pacing_seconds: float = 0.3,
        tz_name: str = DEFAULT_TIMEZONE,
        placeholder_name: str = PLACEHOLDER_NAME,
        voicemail_labels: Iterable[str] = VOICEMAIL_LABELS,
        default_label: str = DEFAULT_STATUS_LABEL,
    ) -> None:
        self._source = source
        self._resolver = resolver
        self._engine = engine
        self._seen = seen_store
        self._pacing_seconds = pacing_seconds
        self._tz_name = tz_name
        self._placeholder_name = placeholder_name
        self._voicemail_labels = frozenset(voicemail_labels)
        self._default_label = default_label

    async def dispatch(self, records: Sequence[CallRecord]) -> DispatchResult:
        result = DispatchResult()

        for record in sort_chronologically(records, self._tz_name):
            if self._seen.contains(record.id):
                result.skipped += 1
                sync_records_total.labels(action="already_seen").inc()
                continue
            self._seen.add(record.id)

            try:
                kind = await self._dispatch_one(record)
            except MalformedRecord as exc:
                result.skipped += 1
                sync_records_total.labels(action="malformed").inc()
                logger.warning("dispatch.record_skipped", call_id=record.id, reason=str(exc))
                continue
            except CallSyncError as exc:
                result.failed += 1
                sync_records_total.labels(action="failed").inc()
                logger.error(
                    "dispatch.record_failed",
                    call_id=record.id,
                    error_type=type(exc).__name__,
                    error=str(exc),
                )
            except Exception:
                result.failed += 1
                sync_records_total.labels(action="failed").inc()
                logger.exception("dispatch.record_crashed", call_id=record.id)
            else:
                sync_records_total.labels(action=kind.value).inc()
                if kind == ActionKind.SKIP:
                    result.skipped += 1
                    continue
                if kind in (ActionKind.CREATE, ActionKind.CREATE_UNANSWERED):
                    result.created += 1
                else:
                    result.updated += 1

            await asyncio.sleep(self._pacing_seconds)

        identity_cache_size.set(len(self._resolver.cache))
        logger.info(
            "dispatch.completed",
            created=result.created,
            updated=result.updated,
            skipped=result.skipped,
            failed=result.failed,
        )
        return result

    async def _dispatch_one(self, record: CallRecord) -> ActionKind:
        phone = normalize_phone(record.number)
        if not phone:
            raise MalformedRecord("record has no usable phone number")

        classification = classify(
            record,
            voicemail_labels=self._voicemail_labels,
            default_label=self._default_label,
        )
        context = CallContext(
            call_id=record.id,
            phone=phone,
            name=derive_name(record.mailing_data, self._placeholder_name),
            recording_url=self._source.recording_url(record.id),
            contact_timestamp=format_crm_timestamp(
                first_timestamp(record.timestamps, self._tz_name), self._tz_name
            ),
        )

        existing_id = await self._resolver.resolve(phone)
        action = self._engine.decide(existing_id, classification, context)
        contact_id = await self._engine.execute(action)

        logger.info(
            "dispatch.record_synced",
            call_id=record.id,
            phone=phone,
            action=action.kind.value,
            verdict=classification.verdict.value,
            status_label=classification.status_label,
            contact_id=contact_id,
        )
        return action.kind

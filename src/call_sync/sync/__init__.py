"""Call sync engine -- classification and CRM reconciliation of call records.

Pure building blocks exported here:
- classify / parse_talk_time: outcome verdict and status label per call
- derive_name / sanitize_name: best-effort contact name from mailing data
- normalize_phone / format_crm_timestamp: dispatcher helpers
- SeenIdStore / IdentityCache: injectable per-engine memory

Orchestration lives in the submodules (identity, decision, ingestion,
dispatcher, scheduler, service), which depend on the remote adapters.
"""

from src.call_sync.sync.classifier import classify, parse_talk_time
from src.call_sync.sync.names import derive_name, extract_name, sanitize_name
from src.call_sync.sync.normalize import format_crm_timestamp, normalize_phone
from src.call_sync.sync.schemas import (
    ActionKind,
    CallRecord,
    Classification,
    CycleResult,
    OutcomeVerdict,
    WriteAction,
)
from src.call_sync.sync.stores import (
    IdentityCache,
    InMemoryIdentityCache,
    InMemorySeenIdStore,
    SeenIdStore,
)

__all__ = [
    "classify",
    "parse_talk_time",
    "derive_name",
    "extract_name",
    "sanitize_name",
    "format_crm_timestamp",
    "normalize_phone",
    "ActionKind",
    "CallRecord",
    "Classification",
    "CycleResult",
    "OutcomeVerdict",
    "WriteAction",
    "SeenIdStore",
    "IdentityCache",
    "InMemorySeenIdStore",
    "InMemoryIdentityCache",
]

"""Pydantic schemas for the call sync engine.

Defines the structured types that flow through one sync cycle:
- Source data: Qualification, CallRecord
- Classification: OutcomeVerdict, Classification, DerivedName
- CRM writes: ContactProperties, CallContext, ActionKind, WriteAction
- Cycle bookkeeping: IngestionBatch, DispatchResult, CycleResult
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ── Source Records ──────────────────────────────────────────────────────────


class Qualification(BaseModel):
    """Structured qualification as returned by some 3C endpoints."""

    model_config = ConfigDict(extra="allow")

    name: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def scalar_name(cls, value: Any) -> str | None:
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return None


class CallRecord(BaseModel):
    """One call attempt as returned by the call-source API.

    Only the fields the engine consumes are typed; everything else is kept
    as extra data. The id falls back to ``_id`` and is always a string.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    number: str | None = None
    speaking_time: str | None = None
    qualification: str | Qualification | None = None
    readable_status_text: str | None = None
    call_date_rfc3339: str | None = None
    created_at: str | None = None
    mailing_data: Any = None

    @model_validator(mode="before")
    @classmethod
    def resolve_id(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        raw_id = data.get("id") or data.get("_id")
        if raw_id is None or raw_id == "":
            raise ValueError("call record has no id")
        return {**data, "id": str(raw_id)}

    @field_validator("number", mode="before")
    @classmethod
    def coerce_number(cls, value: Any) -> str | None:
        if value is None:
            return None
        return str(value)

    @field_validator(
        "speaking_time",
        "readable_status_text",
        "call_date_rfc3339",
        "created_at",
        mode="before",
    )
    @classmethod
    def text_or_none(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None

    @field_validator("qualification", mode="before")
    @classmethod
    def coerce_qualification(cls, value: Any) -> Any:
        if isinstance(value, (str, dict)) or value is None:
            return value
        return None

    @property
    def timestamps(self) -> tuple[str | None, str | None]:
        """Timestamp candidates in preference order: call date, then creation."""
        return self.call_date_rfc3339, self.created_at


# ── Classification ──────────────────────────────────────────────────────────


class OutcomeVerdict(str, Enum):
    """Outcome of a single call attempt."""

    SUCCESS = "success"
    NO_ANSWER = "no_answer"
    VOICEMAIL = "voicemail"


class Classification(BaseModel):
    """Result of classifying one call record."""

    status_label: str
    verdict: OutcomeVerdict
    talk_seconds: int = 0

    @property
    def is_success(self) -> bool:
        return self.verdict == OutcomeVerdict.SUCCESS


class DerivedName(BaseModel):
    """Best-effort contact name; generic names never overwrite CRM data."""

    value: str
    is_generic: bool = True


# ── CRM Writes ──────────────────────────────────────────────────────────────


class ContactProperties(BaseModel):
    """Contact property set in internal field names.

    Fields left as None are not sent, so every write is a property merge.
    """

    phone: str | None = None
    first_name: str | None = None
    status_label: str | None = None
    recording_link: str | None = None
    contacted: bool | None = None
    last_success_at: str | None = None
    last_failure_at: str | None = None


class CallContext(BaseModel):
    """Per-record inputs to the decision engine, derived by the dispatcher."""

    call_id: str
    phone: str
    name: DerivedName
    recording_url: str
    contact_timestamp: str


class ActionKind(str, Enum):
    """The five write actions the decision engine can choose."""

    FULL_UPDATE = "full_update"
    PARTIAL_UPDATE = "partial_update"
    CREATE = "create"
    CREATE_UNANSWERED = "create_unanswered"
    SKIP = "skip"


class WriteAction(BaseModel):
    """A single CRM write chosen for one call record."""

    kind: ActionKind
    phone: str
    contact_id: str | None = None
    properties: ContactProperties = Field(default_factory=ContactProperties)


# ── Cycle Bookkeeping ───────────────────────────────────────────────────────


class IngestionBatch(BaseModel):
    """New, deduplicated call records fetched during one cycle (unordered)."""

    records: list[CallRecord] = Field(default_factory=list)
    pages_fetched: int = 0
    fetched: int = 0
    already_seen: int = 0
    duplicates: int = 0
    malformed: int = 0
    interrupted: bool = False


class DispatchResult(BaseModel):
    """Per-action counters for one dispatched batch."""

    created: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0

    @property
    def attempted(self) -> int:
        return self.created + self.updated + self.failed


class CycleResult(BaseModel):
    """Summary of one complete ingest-classify-sync cycle."""

    started_at: datetime
    finished_at: datetime
    fetched: int = 0
    new_records: int = 0
    pages_fetched: int = 0
    interrupted: bool = False
    dispatch: DispatchResult = Field(default_factory=DispatchResult)

    @property
    def duration_seconds(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()

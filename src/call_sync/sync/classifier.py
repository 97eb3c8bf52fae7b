"""Outcome classification for call records.

classify() is a pure function of (qualification, status text, talk time):
- status label: qualification name, else readable status text, else the
  default "uncategorized" label ("-" counts as absent everywhere)
- talk time: "HH:MM:SS" parsed field by field, anything malformed is 0s
- voicemail: exact, case-sensitive match against a small label set
- success: talked for more than zero seconds and not a voicemail
"""

from __future__ import annotations

from collections.abc import Iterable

from src.call_sync.sync.schemas import (
    CallRecord,
    Classification,
    OutcomeVerdict,
    Qualification,
)

DEFAULT_STATUS_LABEL = "Sem tabulação"
VOICEMAIL_LABELS: frozenset[str] = frozenset(
    {"Caixa Postal", "Caixa postal", "Secretária Eletrônica"}
)

_PLACEHOLDER = "-"


def parse_talk_time(value: str | None) -> int:
    """Convert an ``HH:MM:SS`` duration to whole seconds (0 when malformed)."""
    if not value or not isinstance(value, str):
        return 0
    parts = value.strip().split(":")
    if len(parts) != 3:
        return 0
    try:
        hours, minutes, seconds = (int(part) for part in parts)
    except ValueError:
        return 0
    if min(hours, minutes, seconds) < 0:
        return 0
    return hours * 3600 + minutes * 60 + seconds


def _qualification_name(qualification: str | Qualification | None) -> str | None:
    if isinstance(qualification, Qualification):
        return qualification.name
    return qualification


def _meaningful(value: str | None) -> str | None:
    if value is None:
        return None
    text = value.strip()
    if not text or text == _PLACEHOLDER:
        return None
    return text


def resolve_status_label(
    record: CallRecord,
    default_label: str = DEFAULT_STATUS_LABEL,
) -> str:
    """Pick the human status label for a call."""
    return (
        _meaningful(_qualification_name(record.qualification))
        or _meaningful(record.readable_status_text)
        or default_label
    )


def classify(
    record: CallRecord,
    *,
    voicemail_labels: Iterable[str] = VOICEMAIL_LABELS,
    default_label: str = DEFAULT_STATUS_LABEL,
) -> Classification:
    """Classify a call record into an outcome verdict and status label.

    Never raises: unparseable input degrades to a non-success verdict.
    """
    status_label = resolve_status_label(record, default_label)
    talk_seconds = parse_talk_time(record.speaking_time)

    if status_label in frozenset(voicemail_labels):
        verdict = OutcomeVerdict.VOICEMAIL
    elif talk_seconds > 0:
        verdict = OutcomeVerdict.SUCCESS
    else:
        verdict = OutcomeVerdict.NO_ANSWER

    return Classification(
        status_label=status_label,
        verdict=verdict,
        talk_seconds=talk_seconds,
    )

"""Phone and timestamp normalization helpers.

format_crm_timestamp() is the only place that knows the CRM's display
convention (pt-BR: day/month/year, 24-hour clock, local timezone).
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = "America/Sao_Paulo"
CRM_TIMESTAMP_FORMAT = "%d/%m/%Y %H:%M:%S"

_NON_DIGITS = re.compile(r"\D")


def normalize_phone(raw: str | int | None) -> str:
    """Keep only the digits of a phone number ("" when none are left)."""
    if raw is None:
        return ""
    return _NON_DIGITS.sub("", str(raw))


def parse_timestamp(value: str | None, tz_name: str = DEFAULT_TIMEZONE) -> datetime | None:
    """Parse an ISO-8601-like timestamp into an aware datetime.

    Naive values are interpreted in ``tz_name``. Returns None when the value
    is absent or unparseable.
    """
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=ZoneInfo(tz_name))
    return parsed


def first_timestamp(
    values: Iterable[str | None],
    tz_name: str = DEFAULT_TIMEZONE,
) -> datetime | None:
    """First candidate that parses, or None when none does."""
    for value in values:
        parsed = parse_timestamp(value, tz_name)
        if parsed is not None:
            return parsed
    return None


def format_crm_timestamp(
    value: str | datetime | None,
    tz_name: str = DEFAULT_TIMEZONE,
    now: datetime | None = None,
) -> str:
    """Render a call timestamp in the CRM's local display format.

    Absent or unparseable timestamps fall back to the current time.
    """
    zone = ZoneInfo(tz_name)
    if isinstance(value, datetime):
        parsed = value if value.tzinfo is not None else value.replace(tzinfo=zone)
    else:
        parsed = parse_timestamp(value, tz_name)
    if parsed is None:
        parsed = now or datetime.now(timezone.utc)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=zone)
    return parsed.astimezone(zone).strftime(CRM_TIMESTAMP_FORMAT)


def day_bounds(day: date) -> tuple[str, str]:
    """Start and end of a calendar day as the call-source API expects them."""
    stamp = day.isoformat()
    return f"{stamp} 00:00:00", f"{stamp} 23:59:59"


def local_today(tz_name: str = DEFAULT_TIMEZONE, now: datetime | None = None) -> date:
    """Current calendar day in the configured timezone."""
    current = now or datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    return current.astimezone(ZoneInfo(tz_name)).date()

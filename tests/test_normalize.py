"""Unit tests for phone and timestamp normalization."""

from __future__ import annotations

from datetime import date, datetime, timezone

from src.call_sync.sync.normalize import (
    day_bounds,
    first_timestamp,
    format_crm_timestamp,
    local_today,
    normalize_phone,
    parse_timestamp,
)


class TestNormalizePhone:
    def test_keeps_digits_only(self):
        assert normalize_phone("+55 (11) 99999-0000") == "5511999990000"

    def test_no_digits_is_empty(self):
        assert normalize_phone("anônimo") == ""
        assert normalize_phone(None) == ""

    def test_integers(self):
        assert normalize_phone(11999990000) == "11999990000"


class TestParseTimestamp:
    def test_zulu_suffix(self):
        parsed = parse_timestamp("2024-05-17T13:00:00Z")
        assert parsed == datetime(2024, 5, 17, 13, 0, tzinfo=timezone.utc)

    def test_naive_uses_configured_zone(self):
        parsed = parse_timestamp("2024-05-17 10:00:00", "America/Sao_Paulo")
        assert parsed.astimezone(timezone.utc).hour == 13

    def test_garbage_is_none(self):
        assert parse_timestamp("yesterday") is None
        assert parse_timestamp(None) is None

    def test_first_parseable_candidate_wins(self):
        parsed = first_timestamp(["not a date", None, "2024-05-17T13:00:00Z"])
        assert parsed == datetime(2024, 5, 17, 13, 0, tzinfo=timezone.utc)

    def test_no_parseable_candidate(self):
        assert first_timestamp(["not a date", None]) is None


class TestFormatCrmTimestamp:
    def test_converts_to_local_display_format(self):
        assert format_crm_timestamp("2024-05-17T13:05:09Z") == "17/05/2024 10:05:09"

    def test_offset_timestamp(self):
        assert format_crm_timestamp("2024-05-17T10:05:09-03:00") == "17/05/2024 10:05:09"

    def test_accepts_a_parsed_datetime(self):
        value = datetime(2024, 5, 17, 13, 5, 9, tzinfo=timezone.utc)
        assert format_crm_timestamp(value) == "17/05/2024 10:05:09"

    def test_missing_uses_now(self):
        now = datetime(2024, 1, 2, 15, 30, 0, tzinfo=timezone.utc)
        assert format_crm_timestamp(None, now=now) == "02/01/2024 12:30:00"


class TestDayHelpers:
    def test_day_bounds(self):
        assert day_bounds(date(2024, 5, 17)) == ("2024-05-17 00:00:00", "2024-05-17 23:59:59")

    def test_local_today_crosses_midnight(self):
        # 01:30 UTC is still the previous evening in Sao Paulo
        now = datetime(2024, 5, 18, 1, 30, tzinfo=timezone.utc)
        assert local_today("America/Sao_Paulo", now=now) == date(2024, 5, 17)

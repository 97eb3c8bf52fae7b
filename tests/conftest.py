"""Shared fixtures for call sync tests.

Provides:
- FakeCallSource: scripted pages of raw call records, records every request
- FakeCRM: in-memory contact book with phone token-containment search,
  records every search/create/update
- make_call: factory for raw 3C call record dicts
"""

from __future__ import annotations

from typing import Any

import pytest

from src.call_sync.calls.source import CallSource
from src.call_sync.crm.adapter import CRMAdapter
from src.call_sync.errors import RemoteRejection, TransportFailure
from src.call_sync.sync.schemas import ContactProperties


class FakeCallSource(CallSource):
    """Serves ``pages`` in order; requests past the end get an empty page."""

    def __init__(self, pages: list[list[Any]] | None = None) -> None:
        self.pages = pages or []
        self.requests: list[dict[str, Any]] = []
        self.fail_on_request: int | None = None

    async def list_calls(
        self,
        start: str,
        end: str,
        *,
        per_page: int,
        offset: int = 0,
        with_mailing: bool = True,
    ) -> list[Any]:
        index = len(self.requests)
        self.requests.append(
            {
                "start": start,
                "end": end,
                "per_page": per_page,
                "offset": offset,
                "with_mailing": with_mailing,
            }
        )
        if self.fail_on_request == index:
            raise TransportFailure("3c", "connection reset")
        if index < len(self.pages):
            return list(self.pages[index])
        return []

    def recording_url(self, call_id: str) -> str:
        return f"https://calls.test/api/v1/calls/{call_id}/recording?api_token=tok"


class FakeCRM(CRMAdapter):
    """Contact book keyed by phone; search matches when the query is contained."""

    def __init__(self, contacts: dict[str, str] | None = None) -> None:
        self.contacts: dict[str, str] = dict(contacts or {})
        self.searches: list[str] = []
        self.creates: list[ContactProperties] = []
        self.updates: list[tuple[str, ContactProperties]] = []
        self.reject_updates_for: set[str] = set()
        self._next_id = 1

    async def search_contact_by_phone(self, phone: str) -> str | None:
        self.searches.append(phone)
        for known_phone, contact_id in self.contacts.items():
            if phone in known_phone:
                return contact_id
        return None

    async def create_contact(self, properties: ContactProperties) -> str:
        self.creates.append(properties)
        contact_id = f"hs-{self._next_id}"
        self._next_id += 1
        if properties.phone:
            self.contacts[properties.phone] = contact_id
        return contact_id

    async def update_contact(self, contact_id: str, properties: ContactProperties) -> None:
        if contact_id in self.reject_updates_for:
            raise RemoteRejection("hubspot", 400, '{"message": "Property values were not valid"}')
        self.updates.append((contact_id, properties))

    @property
    def writes(self) -> int:
        return len(self.creates) + len(self.updates)


def _make_call(
    call_id: str = "c-1",
    number: str | None = "11999990000",
    speaking_time: str | None = "00:01:30",
    qualification: Any = "Interested",
    call_date: str | None = "2024-05-17T10:00:00-03:00",
    **extra: Any,
) -> dict[str, Any]:
    """Raw 3C call record with sensible defaults."""
    record: dict[str, Any] = {
        "id": call_id,
        "number": number,
        "speaking_time": speaking_time,
        "qualification": qualification,
        "readable_status_text": "Atendida",
        "call_date_rfc3339": call_date,
        "mailing_data": {"data": {"Nome": "Maria Souza"}},
    }
    record.update(extra)
    return record


@pytest.fixture
def make_call():
    return _make_call


@pytest.fixture
def call_source() -> FakeCallSource:
    return FakeCallSource()


@pytest.fixture
def crm() -> FakeCRM:
    return FakeCRM()

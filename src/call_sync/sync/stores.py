"""Process-lifetime memory for the sync engine.

Two injectable key-value stores, scoped to one engine instance:
- SeenIdStore: call ids already dispatched (grows monotonically)
- IdentityCache: normalized phone -> CRM contact id, or a known miss (never evicted)

Both in-memory implementations are unsynchronized; all mutation happens on
the single cycle task. A durable backend only needs to implement the ABCs.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class SeenIdStore(ABC):
    """Set of call ids that were already handed to the dispatcher."""

    @abstractmethod
    def contains(self, call_id: str) -> bool:
        ...

    @abstractmethod
    def add(self, call_id: str) -> None:
        ...

    @abstractmethod
    def __len__(self) -> int:
        ...


class IdentityCache(ABC):
    """Mapping from normalized phone number to CRM contact id.

    A phone the CRM search did not find is kept as a miss. ``set`` replaces a
    miss; ``__len__`` counts resolved contacts only.
    """

    @abstractmethod
    def get(self, phone: str) -> str | None:
        ...

    @abstractmethod
    def set(self, phone: str, contact_id: str) -> None:
        ...

    @abstractmethod
    def mark_missing(self, phone: str) -> None:
        ...

    @abstractmethod
    def is_missing(self, phone: str) -> bool:
        ...

    @abstractmethod
    def __len__(self) -> int:
        ...


class InMemorySeenIdStore(SeenIdStore):
    def __init__(self) -> None:
        self._ids: set[str] = set()

    def contains(self, call_id: str) -> bool:
        return call_id in self._ids

    def add(self, call_id: str) -> None:
        self._ids.add(call_id)

    def __len__(self) -> int:
        return len(self._ids)


class InMemoryIdentityCache(IdentityCache):
    def __init__(self) -> None:
        self._contacts: dict[str, str] = {}
        self._missing: set[str] = set()

    def get(self, phone: str) -> str | None:
        return self._contacts.get(phone)

    def set(self, phone: str, contact_id: str) -> None:
        self._missing.discard(phone)
        self._contacts[phone] = contact_id

    def mark_missing(self, phone: str) -> None:
        if phone not in self._contacts:
            self._missing.add(phone)

    def is_missing(self, phone: str) -> bool:
        return phone in self._missing

    def __len__(self) -> int:
        return len(self._contacts)

"""Call source abstract base class."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class CallSource(ABC):
    """Paginated listing of call records from a dialer platform."""

    @abstractmethod
    async def list_calls(
        self,
        start: str,
        end: str,
        *,
        per_page: int,
        offset: int = 0,
        with_mailing: bool = True,
    ) -> list[Any]:
        """Return one page of raw call records between ``start`` and ``end``.

        ``offset`` counts records, not pages. A page shorter than ``per_page``
        is the last one. Items are returned unfiltered so the page length is
        the one the source reported; validation happens downstream.
        """
        ...

    @abstractmethod
    def recording_url(self, call_id: str) -> str:
        """Build the shareable recording link for a call id."""
        ...

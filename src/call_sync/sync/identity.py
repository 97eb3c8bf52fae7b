"""Phone -> CRM contact id resolution with a volatile read-through cache."""

from __future__ import annotations

import structlog

from src.call_sync.crm.adapter import CRMAdapter
from src.call_sync.sync.stores import IdentityCache, InMemoryIdentityCache

logger = structlog.get_logger(__name__)


class IdentityResolver:
    """Resolves normalized phones to contact ids.

    Cache first, then at most one remote search per phone for the life of
    the process. Hits and misses are both cached; a miss is replaced once
    this process creates the contact.

    Args:
        crm: CRM adapter used for the remote lookup.
        cache: Identity cache (an in-memory one by default).
    """

    def __init__(self, crm: CRMAdapter, cache: IdentityCache | None = None) -> None:
        self._crm = crm
        self._cache = cache if cache is not None else InMemoryIdentityCache()

    @property
    def cache(self) -> IdentityCache:
        return self._cache

    async def resolve(self, phone: str) -> str | None:
        cached = self._cache.get(phone)
        if cached is not None:
            return cached
        if self._cache.is_missing(phone):
            return None

        contact_id = await self._crm.search_contact_by_phone(phone)
        if contact_id is None:
            self._cache.mark_missing(phone)
            logger.debug("identity.miss_cached", phone=phone)
        else:
            self._cache.set(phone, contact_id)
            logger.debug("identity.cached", phone=phone, contact_id=contact_id)
        return contact_id

    def remember(self, phone: str, contact_id: str) -> None:
        """Record a locally created contact so later records reuse it."""
        self._cache.set(phone, contact_id)

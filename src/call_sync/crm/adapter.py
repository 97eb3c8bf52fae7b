"""CRM adapter abstract base class -- the contact operations the sync engine needs.

Every CRM backend implements this ABC. The engine only ever looks contacts up
by phone, creates them, and merges properties into them; it never deletes or
replaces a contact record.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.call_sync.sync.schemas import ContactProperties


class CRMAdapter(ABC):
    """Abstract interface for CRM contact operations.

    Methods:
        search_contact_by_phone: Best match for a normalized phone, or None.
        create_contact: Create a contact, return its CRM id.
        update_contact: Merge properties into an existing contact.
    """

    @abstractmethod
    async def search_contact_by_phone(self, phone: str) -> str | None:
        """Return the id of the best contact whose phone contains ``phone``."""
        ...

    @abstractmethod
    async def create_contact(self, properties: ContactProperties) -> str:
        """Create a contact, return its CRM id."""
        ...

    @abstractmethod
    async def update_contact(self, contact_id: str, properties: ContactProperties) -> None:
        """Merge the non-empty properties into the contact."""
        ...

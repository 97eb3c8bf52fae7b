"""CRM integration layer -- pluggable adapter for contact writes.

Provides the abstract CRMAdapter interface with one concrete implementation:
- HubSpotAdapter: contacts search/create/update via the HubSpot CRM v3 API
- HUBSPOT_PROPERTY_MAP: internal contact fields -> HubSpot property names
"""

from src.call_sync.crm.adapter import CRMAdapter
from src.call_sync.crm.field_mapping import HUBSPOT_PROPERTY_MAP, to_hubspot_properties
from src.call_sync.crm.hubspot import HubSpotAdapter

__all__ = [
    "CRMAdapter",
    "HubSpotAdapter",
    "HUBSPOT_PROPERTY_MAP",
    "to_hubspot_properties",
]

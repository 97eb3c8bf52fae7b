"""HubSpot CRM adapter -- contact search, create and merge-update via CRM v3.

Implements CRMAdapter against the HubSpot contacts API with a private-app
bearer token. Raw requests carry the shared tenacity retry policy; failures
that survive it surface as TransportFailure, 4xx answers as RemoteRejection.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from src.call_sync.core.http import decode_json, remote_retry, translate_http_errors
from src.call_sync.crm.adapter import CRMAdapter
from src.call_sync.crm.field_mapping import to_hubspot_properties
from src.call_sync.errors import RemoteRejection
from src.call_sync.sync.schemas import ContactProperties

logger = structlog.get_logger(__name__)

CONTACTS_PATH = "/crm/v3/objects/contacts"


class HubSpotAdapter(CRMAdapter):
    """HubSpot contacts adapter.

    Args:
        token: HubSpot private app access token.
        base_url: API root (default: https://api.hubapi.com).
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport, used by tests to stub the API.
    """

    SYSTEM = "hubspot"

    def __init__(
        self,
        token: str,
        base_url: str = "https://api.hubapi.com",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    def _client(self) -> httpx.AsyncClient:
        """Create a new httpx client for one request."""
        return httpx.AsyncClient(
            headers=self._headers,
            timeout=self._timeout,
            transport=self._transport,
        )

    @remote_retry
    async def _request(self, method: str, path: str, payload: dict | None = None) -> Any:
        async with self._client() as client:
            response = await client.request(method, f"{self._base_url}{path}", json=payload)
            response.raise_for_status()
            if not response.content:
                return {}
            return decode_json(self.SYSTEM, response)

    async def search_contact_by_phone(self, phone: str) -> str | None:
        """Search contacts whose phone property contains the normalized number.

        Returns the id of the first result, or None when HubSpot reports no
        matches.
        """
        body = {
            "filterGroups": [
                {
                    "filters": [
                        {
                            "propertyName": "phone",
                            "operator": "CONTAINS_TOKEN",
                            "value": phone,
                        }
                    ]
                }
            ]
        }
        with translate_http_errors(self.SYSTEM):
            data = await self._request("POST", f"{CONTACTS_PATH}/search", body)

        results = data.get("results") or []
        if data.get("total", 0) > 0 and results:
            contact_id = str(results[0]["id"])
            logger.debug("hubspot.contact_found", phone=phone, contact_id=contact_id)
            return contact_id
        return None

    async def create_contact(self, properties: ContactProperties) -> str:
        payload = {"properties": to_hubspot_properties(properties)}
        with translate_http_errors(self.SYSTEM):
            data = await self._request("POST", CONTACTS_PATH, payload)

        contact_id = data.get("id")
        if not contact_id:
            raise RemoteRejection(self.SYSTEM, 200, "create response has no contact id")
        logger.info("hubspot.contact_created", contact_id=str(contact_id))
        return str(contact_id)

    async def update_contact(self, contact_id: str, properties: ContactProperties) -> None:
        payload = {"properties": to_hubspot_properties(properties)}
        with translate_http_errors(self.SYSTEM):
            await self._request("PATCH", f"{CONTACTS_PATH}/{contact_id}", payload)
        logger.info(
            "hubspot.contact_updated",
            contact_id=contact_id,
            fields=sorted(payload["properties"]),
        )

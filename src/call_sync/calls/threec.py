"""Async HTTP client for the 3C Plus dialer REST API.

Lists the day's calls page by page with the contact's mailing data attached
and builds recording links. The API authenticates with an ``api_token``
query parameter rather than a header, so the same token ends up in the
recording links written to the CRM.

Responses come either as a bare list or wrapped Laravel-style as
``{"data": [...], "meta": {...}}``; both are accepted.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from src.call_sync.calls.source import CallSource
from src.call_sync.core.http import decode_json, remote_retry, translate_http_errors

logger = structlog.get_logger(__name__)


def unwrap_calls(payload: Any) -> list[Any]:
    """Extract the list of raw call records from a listing response.

    Items are not filtered; a non-object entry still counts towards the
    page length.
    """
    if isinstance(payload, dict):
        payload = payload.get("data", payload)
    if isinstance(payload, list):
        return payload
    logger.warning("threec.unexpected_payload", payload_type=type(payload).__name__)
    return []


class ThreeCClient(CallSource):
    """Async client for the 3C Plus calls endpoint.

    Args:
        api_token: 3C Plus API token.
        base_url: API root (default: https://3c.fluxoti.com/api/v1).
        verify_tls: Verify the server certificate. Some 3C deployments serve
            an incomplete chain and need this turned off.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport, used by tests to stub the API.
    """

    SYSTEM = "3c"

    def __init__(
        self,
        api_token: str,
        base_url: str = "https://3c.fluxoti.com/api/v1",
        verify_tls: bool = True,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_token = api_token
        self._base_url = base_url.rstrip("/")
        self._verify_tls = verify_tls
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        """Create a new httpx client for one request."""
        return httpx.AsyncClient(
            timeout=self._timeout,
            verify=self._verify_tls,
            transport=self._transport,
        )

    @remote_retry
    async def _get(self, path: str, params: dict[str, Any]) -> Any:
        async with self._client() as client:
            response = await client.get(f"{self._base_url}{path}", params=params)
            response.raise_for_status()
            return decode_json(self.SYSTEM, response)

    async def list_calls(
        self,
        start: str,
        end: str,
        *,
        per_page: int,
        offset: int = 0,
        with_mailing: bool = True,
    ) -> list[Any]:
        """GET /calls for one page.

        The API pages by 1-based page number, so ``offset`` is converted
        with ``offset // per_page + 1``.
        """
        params = {
            "api_token": self._api_token,
            "start_date": start,
            "end_date": end,
            "per_page": per_page,
            "page": offset // per_page + 1,
            "with_mailing": "true" if with_mailing else "false",
        }
        with translate_http_errors(self.SYSTEM):
            payload = await self._get("/calls", params)

        calls = unwrap_calls(payload)
        logger.debug(
            "threec.page_fetched",
            page=params["page"],
            per_page=per_page,
            count=len(calls),
        )
        return calls

    def recording_url(self, call_id: str) -> str:
        return f"{self._base_url}/calls/{call_id}/recording?api_token={self._api_token}"

"""Shared HTTP retry policy and error translation for the remote adapters.

Every remote call is retried with tenacity (3 attempts, exponential backoff
1-10s) on transport errors and 429/5xx responses, matching the retry pattern
used by the other API clients. Whatever survives the retries is translated
into the service's error taxonomy by ``translate_http_errors``.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import httpx
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from src.call_sync.errors import RemoteRejection, TransportFailure

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


def is_retryable(exc: BaseException) -> bool:
    """True for failures that may succeed on a later attempt."""
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in RETRYABLE_STATUS_CODES
    return isinstance(exc, httpx.TransportError)


# Applied to every raw remote request; reraise keeps the httpx error for translation
remote_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception(is_retryable),
    reraise=True,
)


@contextmanager
def translate_http_errors(system: str) -> Iterator[None]:
    """Re-raise httpx errors as TransportFailure or RemoteRejection."""
    try:
        yield
    except httpx.HTTPStatusError as exc:
        status_code = exc.response.status_code
        if status_code in RETRYABLE_STATUS_CODES:
            raise TransportFailure(system, f"HTTP {status_code} after retries") from exc
        raise RemoteRejection(system, status_code, exc.response.text) from exc
    except httpx.TransportError as exc:
        raise TransportFailure(system, str(exc) or type(exc).__name__) from exc


def decode_json(system: str, response: httpx.Response):
    """Parse a JSON body, treating garbage as a remote rejection."""
    try:
        return response.json()
    except ValueError as exc:
        raise RemoteRejection(system, response.status_code, response.text[:500]) from exc

"""Exception taxonomy for the call sync service.

TransportFailure and RemoteRejection are raised by the remote adapters and
absorbed by ingestion (ends the page loop) or the dispatcher (skips the record).
MalformedRecord never leaves the sync package; it marks records that are
skipped with a conservative default.
"""

from __future__ import annotations


class CallSyncError(Exception):
    """Base class for all call sync errors."""


class TransportFailure(CallSyncError):
    """Network or HTTP-level failure talking to a remote system.

    Args:
        system: Remote system name ("3c" or "hubspot").
        message: Human-readable description of the failure.
    """

    def __init__(self, system: str, message: str) -> None:
        self.system = system
        super().__init__(f"{system}: {message}")


class RemoteRejection(CallSyncError):
    """The remote system answered with an application-level error.

    Args:
        system: Remote system name.
        status_code: HTTP status code of the rejected request.
        body: Response body, kept for the error log.
    """

    def __init__(self, system: str, status_code: int, body: str = "") -> None:
        self.system = system
        self.status_code = status_code
        self.body = body
        super().__init__(f"{system}: rejected with HTTP {status_code}")


class MalformedRecord(CallSyncError):
    """A call record cannot be processed (no id, no usable phone, bad shape)."""

"""API middleware package."""

from src.call_sync.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]

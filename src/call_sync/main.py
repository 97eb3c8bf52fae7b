"""FastAPI application factory.

Creates the app with logging middleware, metrics middleware, Sentry, the v1
API router, and a lifespan that builds the sync service and runs its
scheduler in the background.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.requests import Request
from fastapi.responses import Response

from src.call_sync.api.middleware.logging import LoggingMiddleware, configure_structlog
from src.call_sync.api.v1.router import router as v1_router
from src.call_sync.config import get_settings
from src.call_sync.core.monitoring import MetricsMiddleware, get_metrics_response, init_sentry
from src.call_sync.sync.service import build_sync_service

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: start the sync scheduler, stop it on shutdown."""
    settings = get_settings()
    configure_structlog()

    if settings.SENTRY_DSN:
        init_sentry(dsn=settings.SENTRY_DSN, environment=settings.ENVIRONMENT.value)

    app.state.scheduler = None
    app.state.sync_expected = False
    app.state.sync_disabled_reason = None

    missing = settings.missing_credentials()
    if not settings.SYNC_ENABLED:
        app.state.sync_disabled_reason = "SYNC_ENABLED is false"
        log.info("sync.disabled", reason=app.state.sync_disabled_reason)
    elif missing:
        app.state.sync_disabled_reason = f"missing credentials: {', '.join(missing)}"
        log.warning("sync.disabled", missing=missing)
    else:
        service = build_sync_service(settings)
        scheduler = service.scheduler(settings.POLL_INTERVAL_SECONDS)
        scheduler.start()
        app.state.sync_service = service
        app.state.scheduler = scheduler
        app.state.sync_expected = True

    yield

    scheduler = app.state.scheduler
    if scheduler is not None:
        await scheduler.stop()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Call Sync",
        version="0.1.0",
        description="Synchronizes 3C Plus call outcomes into HubSpot contacts",
        lifespan=lifespan,
    )

    # Middleware is added in reverse order (last added = outermost)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(MetricsMiddleware)

    app.include_router(v1_router)

    @app.get("/metrics", include_in_schema=False)
    async def metrics(request: Request) -> Response:
        """Prometheus metrics endpoint."""
        return get_metrics_response()

    return app


# Module-level app for uvicorn
app = create_app()


def run() -> None:
    """Serve the app on HOST:PORT from settings (the `call-sync` console script)."""
    settings = get_settings()
    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()

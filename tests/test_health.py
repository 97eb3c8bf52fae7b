"""Tests for the HTTP surface: health probes and metrics.

Drives the app through httpx.ASGITransport. The lifespan does not run
under ASGITransport, so app.state is arranged per test.
"""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest
import structlog
from httpx import ASGITransport, AsyncClient

from src.call_sync.config import Settings
from src.call_sync.main import create_app, run
from src.call_sync.sync.scheduler import CycleScheduler
from src.call_sync.sync.schemas import CycleResult, DispatchResult


@pytest.fixture
def app():
    application = create_app()
    application.state.scheduler = None
    application.state.sync_expected = False
    application.state.sync_disabled_reason = "SYNC_ENABLED is false"
    return application


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


class TestHealth:
    async def test_liveness(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert "X-Request-ID" in response.headers

    async def test_ready_when_sync_disabled(self, client):
        response = await client.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["checks"]["scheduler"] == "disabled"

    async def test_degraded_when_scheduler_expected_but_stopped(self, app, client):
        app.state.sync_expected = True
        app.state.scheduler = CycleScheduler(AsyncMock())

        response = await client.get("/health/ready")

        assert response.status_code == 503
        assert response.json()["status"] == "degraded"

    async def test_ready_reports_last_cycle(self, app, client):
        now = datetime(2024, 5, 17, 13, 0, tzinfo=timezone.utc)
        result = CycleResult(
            started_at=now,
            finished_at=now,
            fetched=12,
            new_records=4,
            dispatch=DispatchResult(created=1, updated=3),
        )
        scheduler = CycleScheduler(AsyncMock(return_value=result), interval_seconds=3600)
        scheduler.start()
        await scheduler.trigger()
        app.state.sync_expected = True
        app.state.scheduler = scheduler

        try:
            response = await client.get("/health/ready")
        finally:
            await scheduler.stop()

        assert response.status_code == 200
        checks = response.json()["checks"]
        assert checks["last_cycle"]["fetched"] == 12
        assert checks["last_cycle"]["updated"] == 3
        assert checks["cycles_run"] >= 1


class TestRequestContext:
    async def test_request_id_is_bound_while_handling(self, app, client):
        @app.get("/_context")
        async def context() -> dict:
            return structlog.contextvars.get_contextvars()

        response = await client.get("/_context")

        assert response.json()["request_id"] == response.headers["X-Request-ID"]
        assert "request_id" not in structlog.contextvars.get_contextvars()

    async def test_incoming_request_id_is_reused(self, client):
        response = await client.get("/health", headers={"X-Request-ID": "abc-123"})

        assert response.headers["X-Request-ID"] == "abc-123"


class TestMetrics:
    async def test_metrics_exposition(self, client):
        response = await client.get("/metrics")

        assert response.status_code == 200
        assert "sync_cycles_total" in response.text


class TestEntryPoint:
    def test_run_serves_on_configured_port(self):
        settings = Settings(_env_file=None, PORT=4100)

        with (
            patch("src.call_sync.main.get_settings", return_value=settings),
            patch("src.call_sync.main.uvicorn.run") as uvicorn_run,
        ):
            run()

        uvicorn_run.assert_called_once()
        assert uvicorn_run.call_args.kwargs["port"] == 4100
        assert uvicorn_run.call_args.kwargs["host"] == settings.HOST

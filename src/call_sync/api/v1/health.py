"""Health check endpoints.

Provides liveness (/health) and readiness (/health/ready). Readiness reports
the sync scheduler: 503 when the scheduler should be running but is not.
"""

from __future__ import annotations

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from src.call_sync.config import get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Basic liveness check. No remote systems are contacted."""
    settings = get_settings()
    return {"status": "ok", "environment": settings.ENVIRONMENT.value}


def _scheduler_report(request: Request) -> tuple[bool, dict]:
    state = request.app.state
    expected = getattr(state, "sync_expected", False)
    scheduler = getattr(state, "scheduler", None)

    if not expected:
        return True, {"scheduler": "disabled", "reason": getattr(state, "sync_disabled_reason", None)}

    if scheduler is None or not scheduler.is_running:
        return False, {"scheduler": "stopped"}

    report: dict = {
        "scheduler": scheduler.state.value,
        "cycles_run": scheduler.cycles_run,
        "last_completed_at": (
            scheduler.last_completed_at.isoformat() if scheduler.last_completed_at else None
        ),
        "last_error": scheduler.last_error,
    }
    last = scheduler.last_result
    if last is not None:
        report["last_cycle"] = {
            "fetched": last.fetched,
            "new_records": last.new_records,
            "interrupted": last.interrupted,
            "created": last.dispatch.created,
            "updated": last.dispatch.updated,
            "skipped": last.dispatch.skipped,
            "failed": last.dispatch.failed,
            "duration_seconds": round(last.duration_seconds, 3),
        }
    return True, report


@router.get("/health/ready")
async def readiness_check(request: Request):
    """Readiness check: the sync scheduler is running when it should be.

    Returns 200 when ready (or sync is disabled), 503 otherwise.
    """
    ready, checks = _scheduler_report(request)
    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if ready else "degraded",
            "checks": checks,
        },
    )

"""Self-rescheduling background loop for sync cycles.

One cycle at a time: trigger() while a cycle is running is a no-op. The
loop sleeps a fixed delay measured from the end of each cycle, so a slow
cycle pushes the next one back instead of overlapping it. Cycle failures
are logged and never stop the loop.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from enum import Enum

import structlog

from src.call_sync.core.monitoring import sync_cycle_duration_seconds, sync_cycles_total
from src.call_sync.sync.schemas import CycleResult

logger = structlog.get_logger(__name__)


class SchedulerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


class CycleScheduler:
    """Runs ``cycle`` now and then every ``interval_seconds`` after it finishes.

    Args:
        cycle: Async callable performing one ingest-sort-dispatch pass.
        interval_seconds: Delay between the end of a cycle and the next trigger.
    """

    def __init__(
        self,
        cycle: Callable[[], Awaitable[CycleResult]],
        interval_seconds: float = 60.0,
    ) -> None:
        self._cycle = cycle
        self._interval = interval_seconds
        self._state = SchedulerState.IDLE
        self._task: asyncio.Task | None = None

        self.last_result: CycleResult | None = None
        self.last_completed_at: datetime | None = None
        self.last_error: str | None = None
        self.cycles_run = 0

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def is_running(self) -> bool:
        """True while the background loop task is alive."""
        return self._task is not None and not self._task.done()

    async def trigger(self) -> bool:
        """Run one cycle unless one is already in progress.

        Returns:
            True if a cycle ran (successfully or not), False if skipped.
        """
        if self._state == SchedulerState.RUNNING:
            logger.info("scheduler.cycle_skipped", reason="already_running")
            return False

        self._state = SchedulerState.RUNNING
        with structlog.contextvars.bound_contextvars(cycle=self.cycles_run + 1):
            try:
                result = await self._cycle()
                self.last_result = result
                self.last_error = None
                sync_cycles_total.labels(
                    status="interrupted" if result.interrupted else "ok"
                ).inc()
                sync_cycle_duration_seconds.observe(result.duration_seconds)
            except Exception as exc:
                self.last_error = f"{type(exc).__name__}: {exc}"
                sync_cycles_total.labels(status="error").inc()
                logger.exception("scheduler.cycle_failed")
            finally:
                self._state = SchedulerState.IDLE
                self.cycles_run += 1
                self.last_completed_at = datetime.now(timezone.utc)
        return True

    async def run_forever(self) -> None:
        while True:
            await self.trigger()
            await asyncio.sleep(self._interval)

    def start(self) -> None:
        """Start the background loop on the running event loop."""
        if self.is_running:
            return
        self._task = asyncio.create_task(self.run_forever(), name="call_sync_scheduler")
        logger.info("scheduler.started", interval_seconds=self._interval)

    async def stop(self) -> None:
        """Cancel the background loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("scheduler.stopped", cycles_run=self.cycles_run)

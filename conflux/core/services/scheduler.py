"""
Periodic scan scheduler.

Drives scheduled scans at a fixed rate on the running event loop. Ticks
never queue up: a tick that falls due while the previous scan is still
running is dropped.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from ..domain.snapshot import SchedulerState

logger = logging.getLogger(__name__)


class ScanScheduler:
    """Cancellable periodic task bound to the retriever lifecycle."""

    def __init__(self, tick: Callable[[], Awaitable[Any]]) -> None:
        """
        Initialize the scheduler.

        Args:
            tick: Coroutine function run on every tick
        """
        self._tick = tick
        self._state = SchedulerState.STOPPED
        self._period = 0.0
        self._task: Optional[asyncio.Task[None]] = None
        self._ticks = 0
        self._missed_ticks = 0

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def period(self) -> float:
        return self._period

    def is_running(self) -> bool:
        """Check whether periodic ticking is active."""
        return self._task is not None and not self._task.done()

    async def start(self, period: float) -> None:
        """
        Start the scheduler.

        Args:
            period: Seconds between ticks; ``<= 0`` disables periodic scans
                and leaves the retriever in on-demand mode
        """
        if self._state is SchedulerState.CLOSED:
            raise RuntimeError("Scheduler is closed")
        if self._state is SchedulerState.RUNNING:
            logger.warning("Scan scheduler is already running")
            return

        self._period = period
        self._state = SchedulerState.RUNNING

        if period <= 0:
            logger.info("Periodic scanning disabled, configuration is scanned on demand only")
            return

        self._task = asyncio.create_task(self._run())
        logger.info(f"Started periodic configuration scan every {period}s")

    async def stop(self) -> None:
        """Stop ticking; the scheduler can be started again."""
        if self._state is not SchedulerState.RUNNING:
            return

        await self._cancel_task()
        self._state = SchedulerState.STOPPED
        logger.info("Stopped periodic configuration scan")

    async def close(self) -> None:
        """Stop ticking for good. Idempotent."""
        if self._state is SchedulerState.CLOSED:
            return

        await self._cancel_task()
        self._state = SchedulerState.CLOSED
        logger.debug("Scan scheduler closed")

    async def _cancel_task(self) -> None:
        task, self._task = self._task, None
        if task is None or task.done():
            return

        task.cancel()
        if task is asyncio.current_task():
            return
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        """Fixed-rate tick loop."""
        loop = asyncio.get_running_loop()
        next_tick = loop.time() + self._period

        try:
            while True:
                await asyncio.sleep(max(0.0, next_tick - loop.time()))

                self._ticks += 1
                try:
                    # shielded so close() never interrupts a scan mid-fetch
                    await asyncio.shield(self._tick())
                except Exception as e:
                    logger.error(f"Error in scheduled scan: {e}")

                next_tick += self._period
                now = loop.time()
                if now > next_tick:
                    missed = int((now - next_tick) // self._period) + 1
                    self._missed_ticks += missed
                    next_tick += missed * self._period
                    logger.debug(f"Scan overran its period, dropped {missed} tick(s)")

        except asyncio.CancelledError:
            logger.debug("Scan scheduler loop cancelled")
            raise

    def get_metrics(self) -> dict:
        return {
            'state': self._state.value,
            'period': self._period,
            'ticks': self._ticks,
            'missed_ticks': self._missed_ticks,
        }

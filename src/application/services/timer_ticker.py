"""Timer display polling.

The ticker runs only while the committee timer is running. Each tick
invokes an async callback that re-projects the remaining time and, when
it reaches zero, writes the idempotent expiry transition.

Note:
    start() and cancel() are synchronous so they can be called from
    store subscription callbacks. Both are idempotent, and cancel() is
    safe to call from inside a tick.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import structlog

DEFAULT_TICK_INTERVAL_SECONDS = 1.0

TickCallback = Callable[[], Awaitable[None]]


class TimerTicker:
    """Background countdown poller for one editor session.

    Attributes:
        running: Whether the poll loop is active.
        interval_seconds: Seconds between ticks.

    Example:
        >>> ticker = TimerTicker(on_tick=session.tick)
        >>> ticker.start()
        >>> # ... committee timer runs ...
        >>> ticker.cancel()
        >>> ticker.cancel()  # no-op
    """

    def __init__(
        self,
        on_tick: TickCallback,
        interval_seconds: float = DEFAULT_TICK_INTERVAL_SECONDS,
    ) -> None:
        """Initialize the ticker.

        Args:
            on_tick: Coroutine function called once per tick.
            interval_seconds: Seconds between ticks.
        """
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be > 0, got {interval_seconds}")
        self._on_tick = on_tick
        self._interval = interval_seconds
        self._running: bool = False
        self._task: asyncio.Task[None] | None = None
        self._log = structlog.get_logger().bind(service="timer_ticker")

    @property
    def running(self) -> bool:
        """Check if the ticker is running."""
        return self._running

    @property
    def interval_seconds(self) -> float:
        """Get the tick interval in seconds."""
        return self._interval

    def start(self) -> None:
        """Start polling on the running event loop (idempotent)."""
        if self._running:
            return
        self._running = True
        self._task = asyncio.get_running_loop().create_task(self._run_loop())
        self._log.debug("timer_ticker_started", interval=self._interval)

    def cancel(self) -> None:
        """Stop polling (idempotent).

        When called from inside a tick the loop simply exits after the
        current callback returns.
        """
        if not self._running and self._task is None:
            return
        self._running = False
        task, self._task = self._task, None
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()
        self._log.debug("timer_ticker_cancelled")

    async def aclose(self) -> None:
        """Cancel and wait for the poll loop to finish."""
        task = self._task
        self.cancel()
        if task is None or task is asyncio.current_task():
            return
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def run_once(self) -> None:
        """Run a single tick (for testing).

        In production, use start() and cancel() instead.
        """
        await self._on_tick()

    def _is_live(self, task: asyncio.Task[None] | None) -> bool:
        return self._running and task is not None and self._task is task

    async def _run_loop(self) -> None:
        me = asyncio.current_task()
        while self._is_live(me):
            try:
                await asyncio.sleep(self._interval)
                if not self._is_live(me):
                    break
                await self._on_tick()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self._log.error("timer_tick_failed", error=str(e))

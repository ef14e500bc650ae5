"""
Debouncer for the query aggregator.

Coalesces bursts of calls into a single delayed callback on the running event
loop. Last write wins.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Set


logger = logging.getLogger(__name__)


class Debouncer:
    """
    Single-timer, last-write-wins debouncer.

    Each call to ``schedule`` cancels the pending timer and starts a new one.
    Once a timer fires its callback runs to completion; later calls do not
    cancel it.

    Attributes:
        delay_ms: Quiet period in milliseconds before the callback fires
    """

    def __init__(self, delay_ms: int = 300):
        if delay_ms <= 0:
            raise ValueError(f"delay_ms must be > 0, got {delay_ms}")
        self.delay_ms = delay_ms
        self._pending: Optional[asyncio.Task] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        """True while a timer is waiting to fire."""
        return self._pending is not None and not self._pending.done()

    def schedule(self, callback: Callable[[], Awaitable[None]]) -> None:
        """
        (Re)start the timer so that ``callback`` runs after the quiet period.

        Must be called from inside a running event loop.

        Args:
            callback: Zero-argument coroutine function to run when the timer fires
        """
        self.cancel()
        task = asyncio.get_running_loop().create_task(self._fire(callback))
        self._pending = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def cancel(self) -> None:
        """Cancel the pending timer, if any. Running callbacks are left alone."""
        if self.pending:
            self._pending.cancel()
        self._pending = None

    async def wait_idle(self) -> None:
        """Wait until no timer is pending and no fired callback is running."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _fire(self, callback: Callable[[], Awaitable[None]]) -> None:
        await asyncio.sleep(self.delay_ms / 1000.0)
        if self._pending is asyncio.current_task():
            self._pending = None
        try:
            await callback()
        except Exception:
            logger.exception("Debounced callback failed")

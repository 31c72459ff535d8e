"""
Tick schedulers: the single 1 Hz time source shared by the session clock
and the rest countdown.

A scheduler holds at most one callback. Binding a new callback replaces the
old one, so the clock and the rest countdown can never tick at the same
time when they share a scheduler.
"""

import asyncio
from typing import Callable, Optional, Protocol

from .config import TICK_INTERVAL_SECONDS

TickCallback = Callable[[], None]


class TickScheduler(Protocol):
    def on_tick(self, callback: TickCallback) -> None: ...

    def cancel(self) -> None: ...

    @property
    def is_active(self) -> bool: ...


class ManualTicker:
    """Scheduler driven explicitly by fire(); used by tests and simulations."""

    def __init__(self) -> None:
        self._callback: Optional[TickCallback] = None

    @property
    def is_active(self) -> bool:
        return self._callback is not None

    def on_tick(self, callback: TickCallback) -> None:
        self._callback = callback

    def cancel(self) -> None:
        self._callback = None

    def fire(self, count: int = 1) -> int:
        """
        Deliver up to count ticks to whichever callback is bound.

        The binding is re-read before every tick, so a callback that cancels
        or re-binds the scheduler takes effect immediately.

        Returns:
            Number of ticks actually delivered
        """
        delivered = 0
        for _ in range(count):
            callback = self._callback
            if callback is None:
                break
            callback()
            delivered += 1
        return delivered


class AsyncioTicker:
    """Wall-clock scheduler running on the current asyncio event loop."""

    def __init__(self, interval: float = TICK_INTERVAL_SECONDS) -> None:
        self._interval = interval
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def is_active(self) -> bool:
        return self._task is not None and not self._task.done()

    def on_tick(self, callback: TickCallback) -> None:
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._run(callback))

    def cancel(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self, callback: TickCallback) -> None:
        # Late ticks are not caught up: lost time stays lost.
        while True:
            await asyncio.sleep(self._interval)
            callback()

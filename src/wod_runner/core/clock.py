"""
Session clock.

Counts elapsed seconds while ticking. For AMRAP workouts with a time cap it
also counts down to the cap and stops itself when the cap is reached.
"""

import logging
from typing import Callable, Optional

from .audio import AudioCues
from .models import SessionState
from .ticker import TickScheduler

logger = logging.getLogger(__name__)


class SessionClock:
    """Stopped/Ticking machine over the shared tick scheduler."""

    def __init__(
        self,
        state: SessionState,
        ticker: TickScheduler,
        cues: AudioCues,
        time_cap: int | None = None,
        on_expire: Optional[Callable[[], None]] = None,
    ) -> None:
        self._state = state
        self._ticker = ticker
        self._cues = cues
        self._time_cap = time_cap
        self._on_expire = on_expire

    @property
    def is_ticking(self) -> bool:
        return self._state.is_clock_running

    @property
    def time_remaining(self) -> int | None:
        """Seconds left until the cap, or None for a count-up clock."""
        if self._time_cap is None:
            return None
        return max(0, self._time_cap - self._state.elapsed_seconds)

    def start(self) -> None:
        if self._state.is_clock_running:
            return
        self._state.is_clock_running = True
        self._ticker.on_tick(self.tick)

    def pause(self) -> None:
        if not self._state.is_clock_running:
            return
        self._state.is_clock_running = False
        self._ticker.cancel()

    def tick(self) -> None:
        """Advance one second; no-op unless ticking in the running phase."""
        if not self._state.is_clock_running or self._state.phase != "running":
            return

        self._state.elapsed_seconds += 1
        if self._time_cap is None:
            return

        remaining = self._time_cap - self._state.elapsed_seconds
        self._cues.amrap_tick(remaining)
        if remaining <= 0:
            logger.debug("Time cap reached at %ss", self._state.elapsed_seconds)
            self.pause()
            if self._on_expire is not None:
                self._on_expire()

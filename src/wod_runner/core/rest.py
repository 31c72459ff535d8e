"""
Rest sub-machine: fixed countdown or manual "ready" wait between movements.

The owning session pauses its clock before entering rest and resumes it in
the on_done callback; cancel() leaves rest without calling back, for
sessions that are terminating.
"""

import logging
from typing import Callable, Literal

from .audio import AudioCues
from .models import SessionState
from .ticker import TickScheduler

logger = logging.getLogger(__name__)

RestMode = Literal["idle", "counting", "manual_wait"]


class RestTimer:
    def __init__(
        self,
        state: SessionState,
        ticker: TickScheduler,
        cues: AudioCues,
        on_done: Callable[[bool], None],
    ) -> None:
        """
        Args:
            state: Session state; rest_remaining_seconds is kept in sync
            ticker: Tick scheduler shared with the session clock
            cues: Audio cues for the countdown
            on_done: Called with skipped=True/False when rest ends
        """
        self._state = state
        self._ticker = ticker
        self._cues = cues
        self._on_done = on_done
        self._mode: RestMode = "idle"

    @property
    def mode(self) -> RestMode:
        return self._mode

    @property
    def remaining(self) -> int:
        return self._state.rest_remaining_seconds

    def begin_countdown(self, seconds: int) -> None:
        self._mode = "counting"
        self._state.rest_remaining_seconds = seconds
        self._ticker.on_tick(self.tick)
        logger.debug("Rest countdown: %ss", seconds)

    def begin_manual(self) -> None:
        self._mode = "manual_wait"
        self._state.rest_remaining_seconds = 0
        logger.debug("Rest: waiting for ready")

    def tick(self) -> None:
        if self._mode != "counting":
            return
        previous = self._state.rest_remaining_seconds
        self._cues.rest_tick(previous)
        self._state.rest_remaining_seconds = max(0, previous - 1)
        if self._state.rest_remaining_seconds <= 0:
            self._complete(skipped=False)

    def adjust(self, delta: int) -> bool:
        """Shift the countdown by delta seconds, clamped at 0. Never completes rest."""
        if self._mode != "counting":
            return False
        self._state.rest_remaining_seconds = max(0, self._state.rest_remaining_seconds + delta)
        return True

    def skip(self) -> bool:
        """End rest now, from either a countdown or a manual wait."""
        if self._mode == "idle":
            return False
        self._state.rest_remaining_seconds = 0
        self._complete(skipped=True)
        return True

    def cancel(self) -> None:
        """Leave rest without handing back to the clock."""
        if self._mode == "counting":
            self._ticker.cancel()
        self._mode = "idle"
        self._state.rest_remaining_seconds = 0

    def _complete(self, skipped: bool) -> None:
        if self._mode == "counting":
            self._ticker.cancel()
        self._mode = "idle"
        self._on_done(skipped)

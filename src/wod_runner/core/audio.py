"""
Audio cues.

Cues are advisory: they are derived from clock/rest values after the state
has been updated, and any failure in the sink is swallowed so a broken or
missing audio device can never alter a session.
"""

import asyncio
import logging
from typing import Callable, Optional, Protocol

from rich.console import Console

from .config import (
    AMRAP_DISTINCT_SECOND,
    AMRAP_WARNING_SECONDS,
    FINISH_SEQUENCE,
    FINISH_SEQUENCE_OFFSETS_MS,
    TONE_ADVANCE,
    TONE_AMRAP_THREE,
    TONE_AMRAP_WARNING,
    TONE_AUDIO_ON,
    TONE_COUNTDOWN,
    TONE_COUNTDOWN_FINAL,
    TONE_REST_GO,
    TONE_REST_SKIP,
    TONE_START,
    Tone,
)

logger = logging.getLogger(__name__)

Defer = Callable[[float, Callable[[], None]], None]


class AudioSink(Protocol):
    def play_tone(self, freq: float, duration: float, shape: str) -> None: ...


class NullAudioSink:
    """Sink that plays nothing."""

    def play_tone(self, freq: float, duration: float, shape: str) -> None:
        return None


class BellAudioSink:
    """Terminal bell; frequency and shape are not representable and ignored."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console(stderr=True)

    def play_tone(self, freq: float, duration: float, shape: str) -> None:
        self._console.bell()


def call_later(delay: float, fn: Callable[[], None]) -> None:
    """Schedule fn on the running event loop, or call it now if there is none."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        fn()
        return
    loop.call_later(delay, fn)


class AudioCues:
    """Maps clock values and session events to tones on an AudioSink."""

    def __init__(
        self,
        sink: AudioSink | None = None,
        enabled: bool = True,
        defer: Optional[Defer] = None,
    ) -> None:
        self._sink: AudioSink = sink or NullAudioSink()
        self._enabled = enabled
        self._defer: Defer = defer or call_later

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        """Toggle output; switching on plays a short test ping."""
        was_enabled = self._enabled
        self._enabled = enabled
        if enabled and not was_enabled:
            self._emit(TONE_AUDIO_ON)

    # ── per-tick cues ─────────────────────────────────────────────────────

    def amrap_tick(self, remaining: int) -> None:
        """Cue for the AMRAP countdown after a clock tick."""
        if remaining == 0:
            self._finish_sequence()
        elif remaining == AMRAP_DISTINCT_SECOND:
            self._emit(TONE_AMRAP_THREE)
        elif 0 < remaining <= AMRAP_WARNING_SECONDS:
            self._emit(TONE_AMRAP_WARNING)

    def rest_tick(self, remaining: int) -> None:
        """Cue for a fixed rest tick; remaining is the value before decrement."""
        if remaining == 1:
            self._emit(TONE_COUNTDOWN_FINAL)
        elif 2 <= remaining < 4:
            self._emit(TONE_COUNTDOWN)

    # ── discrete events ───────────────────────────────────────────────────

    def started(self) -> None:
        self._emit(TONE_START)

    def advanced(self) -> None:
        self._emit(TONE_ADVANCE)

    def rest_skipped(self) -> None:
        self._emit(TONE_REST_SKIP)

    def rest_completed(self) -> None:
        self._emit(TONE_REST_GO)

    def finished(self) -> None:
        self._finish_sequence()

    # ── internals ─────────────────────────────────────────────────────────

    def _finish_sequence(self) -> None:
        for offset_ms, tone in zip(FINISH_SEQUENCE_OFFSETS_MS, FINISH_SEQUENCE):
            if offset_ms == 0:
                self._emit(tone)
                continue
            try:
                self._defer(offset_ms / 1000.0, lambda t=tone: self._emit(t))
            except Exception as exc:
                logger.debug("Could not schedule tone %s: %s", tone, exc)

    def _emit(self, tone: Tone) -> None:
        if not self._enabled:
            return
        try:
            self._sink.play_tone(tone.freq, tone.duration, tone.shape)
        except Exception as exc:
            logger.debug("Audio sink failed for %s: %s", tone, exc)

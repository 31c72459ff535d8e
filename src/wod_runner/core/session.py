"""
Workout session: the transition controller tying together the schedule,
the session clock, the rest sub-machine and the audio cues.

Every command returns True when it was applied and False when it is not
valid in the current phase; invalid commands never change state.
"""

import logging
from dataclasses import dataclass

from .audio import AudioCues
from .classify import classify_score_kind
from .clock import SessionClock
from .config import DEFAULT_FIXED_REST_SECONDS
from .models import Phase, ScheduleItem, ScoreKind, ScoreResult, SessionState, WorkoutDefinition
from .rest import RestMode, RestTimer
from .schedule import expand_schedule, round_of
from .scoring import ScoreInputs, resolve_score
from .ticker import ManualTicker, TickScheduler

logger = logging.getLogger(__name__)


class SessionError(RuntimeError):
    """Raised when a finished-session operation is used on the wrong session."""


@dataclass(frozen=True)
class SessionStatus:
    """Read-only view of a session for display."""

    phase: Phase
    elapsed_seconds: int
    time_remaining: int | None
    is_clock_running: bool
    rest_mode: RestMode
    rest_remaining_seconds: int
    active_index: int
    schedule_length: int
    current_item: ScheduleItem | None
    current_round: int
    total_rounds: int
    amrap_rounds_completed: int


class WorkoutSession:
    def __init__(
        self,
        workout: WorkoutDefinition,
        ticker: TickScheduler | None = None,
        cues: AudioCues | None = None,
        default_rest_seconds: int = DEFAULT_FIXED_REST_SECONDS,
    ) -> None:
        self.workout = workout
        self.score_kind: ScoreKind = classify_score_kind(workout)
        self.schedule: list[ScheduleItem] = expand_schedule(workout)
        self.state = SessionState()
        self.cues = cues or AudioCues()
        self._ticker: TickScheduler = ticker or ManualTicker()
        self._default_rest_seconds = default_rest_seconds
        self._closed_reason: str | None = None

        time_cap = workout.time_cap_seconds if self.is_amrap else None
        self.clock = SessionClock(
            self.state, self._ticker, self.cues, time_cap=time_cap, on_expire=self._on_time_cap
        )
        self.rest = RestTimer(self.state, self._ticker, self.cues, on_done=self._finish_rest)

    # ── properties ────────────────────────────────────────────────────────

    @property
    def is_amrap(self) -> bool:
        return self.workout.scheme == "AMRAP"

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def is_closed(self) -> bool:
        """True once the session was quit, discarded or submitted."""
        return self._closed_reason is not None

    @property
    def closed_reason(self) -> str | None:
        return self._closed_reason

    @property
    def current_item(self) -> ScheduleItem | None:
        if self.state.phase == "finished" or not self.schedule:
            return None
        return self.schedule[self.state.active_index]

    def status(self) -> SessionStatus:
        if self.is_amrap:
            current_round = self.state.amrap_rounds_completed + 1
            total_rounds = 0
        else:
            current_round = round_of(self.schedule, self.state.active_index)
            total_rounds = self.workout.rounds
        return SessionStatus(
            phase=self.state.phase,
            elapsed_seconds=self.state.elapsed_seconds,
            time_remaining=self.clock.time_remaining,
            is_clock_running=self.state.is_clock_running,
            rest_mode=self.rest.mode,
            rest_remaining_seconds=self.state.rest_remaining_seconds,
            active_index=self.state.active_index,
            schedule_length=len(self.schedule),
            current_item=self.current_item,
            current_round=current_round,
            total_rounds=total_rounds,
            amrap_rounds_completed=self.state.amrap_rounds_completed,
        )

    # ── commands ──────────────────────────────────────────────────────────

    def start(self) -> bool:
        """Leave the briefing and start the clock."""
        if self.is_closed or self.state.phase != "briefing":
            return False
        self.cues.started()
        if not self.schedule:
            logger.debug("Empty schedule for %s; finishing immediately", self.workout.workout_id)
            self._finish(play_cue=True)
            return True
        self.state.phase = "running"
        self.clock.start()
        logger.debug("Session started: %s", self.workout.workout_id)
        return True

    def pause(self) -> bool:
        if self.is_closed or self.state.phase != "running" or not self.clock.is_ticking:
            return False
        self.clock.pause()
        return True

    def resume(self) -> bool:
        if self.is_closed or self.state.phase != "running" or self.clock.is_ticking:
            return False
        self.clock.start()
        return True

    def toggle_pause(self) -> bool:
        if self.clock.is_ticking:
            return self.pause()
        return self.resume()

    def advance(self) -> bool:
        """The current movement is done."""
        if self.is_closed or self.state.phase != "running":
            return False
        self.cues.advanced()
        if self.is_amrap:
            self._advance_amrap()
        else:
            self._advance_linear()
        return True

    def skip_rest(self) -> bool:
        if self.is_closed or self.state.phase != "resting":
            return False
        return self.rest.skip()

    def adjust_rest(self, delta: int) -> bool:
        if self.is_closed or self.state.phase != "resting":
            return False
        return self.rest.adjust(delta)

    def finish_early(self) -> bool:
        """Stop now; for AMRAP the current round count becomes the provisional score."""
        if self.is_closed or self.state.phase not in ("running", "resting"):
            return False
        self.rest.cancel()
        self._finish(play_cue=True)
        return True

    def log_without_timer(self) -> bool:
        """Skip the live session; the score will come from manual inputs."""
        if self.is_closed or self.state.phase != "briefing":
            return False
        self.state.timer_skipped = True
        self.state.phase = "finished"
        return True

    def quit(self) -> bool:
        """Abandon an unfinished session; no score is produced."""
        if self.is_closed or self.state.phase == "finished":
            return False
        self.rest.cancel()
        self.clock.pause()
        self._ticker.cancel()
        self._closed_reason = "quit"
        logger.debug("Session quit in phase %s", self.state.phase)
        return True

    def discard(self) -> bool:
        """Drop a finished session's draft score."""
        if self.is_closed or self.state.phase != "finished":
            return False
        self._closed_reason = "discarded"
        return True

    # ── scoring ───────────────────────────────────────────────────────────

    def resolve(self, inputs: ScoreInputs | None = None) -> ScoreResult:
        """
        Resolve the final score for a finished session.

        Raises:
            SessionError: If the session is not finished or already closed
            MissingScoreInput: If a required manual value is absent
        """
        if self.is_closed:
            raise SessionError(f"Session is closed ({self._closed_reason})")
        if self.state.phase != "finished":
            raise SessionError("Session is not finished")
        return resolve_score(self.state, self.score_kind, inputs or ScoreInputs())

    def mark_submitted(self) -> None:
        self._closed_reason = "submitted"

    # ── transitions ───────────────────────────────────────────────────────

    def _advance_amrap(self) -> None:
        if self.state.active_index < len(self.schedule) - 1:
            self.state.active_index += 1
        else:
            self.state.amrap_rounds_completed += 1
            self.state.active_index = 0
            logger.debug("AMRAP round %d complete", self.state.amrap_rounds_completed)

    def _advance_linear(self) -> None:
        if self.state.active_index >= len(self.schedule) - 1:
            self._finish(play_cue=True)
            return

        self.state.active_index += 1
        policy = self.workout.rest
        if policy.rest_type == "none":
            return
        if policy.rest_type == "manual":
            self._enter_rest(None)
        else:
            # A fixed rest of 0 or without a duration uses the configured default.
            seconds = policy.seconds or self._default_rest_seconds
            self._enter_rest(seconds)

    def _enter_rest(self, seconds: int | None) -> None:
        self.clock.pause()
        self.state.phase = "resting"
        if seconds is None:
            self.rest.begin_manual()
        else:
            self.rest.begin_countdown(seconds)

    def _finish_rest(self, skipped: bool) -> None:
        self.state.phase = "running"
        self.clock.start()
        if skipped:
            self.cues.rest_skipped()
        else:
            self.cues.rest_completed()

    def _on_time_cap(self) -> None:
        # The clock already played the completion sequence at zero.
        self._finish(play_cue=False)

    def _finish(self, play_cue: bool) -> None:
        self.clock.pause()
        self.state.phase = "finished"
        if self.is_amrap:
            self.state.rounds_snapshot = self.state.amrap_rounds_completed
        logger.debug(
            "Session finished: elapsed=%ss rounds=%d",
            self.state.elapsed_seconds,
            self.state.amrap_rounds_completed,
        )
        if play_cue:
            self.cues.finished()

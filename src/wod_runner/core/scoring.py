"""
Score resolution.

Reconciles what the session tracked (elapsed time, AMRAP rounds) with the
values the athlete typed in, according to the session's score kind.

Manual values are checked for presence only: a value that is None or zero
counts as missing. Sign and range are not checked.
"""

from dataclasses import dataclass

from .config import DEFAULT_WEIGHT_UNIT
from .models import (
    RepsScore,
    RoundsScore,
    ScoreKind,
    ScoreResult,
    SessionState,
    TimeScore,
    WeightScore,
)


class MissingScoreInput(ValueError):
    """Raised when a value the score kind requires was not provided."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


@dataclass
class ScoreInputs:
    """Manual score fields collected at submit time; all optional."""

    rounds: int | float | None = None  # overrides the tracked AMRAP counter
    extra_reps: int | float | None = None
    max_reps: int | float | None = None
    weight: int | float | None = None
    weight_unit: str = DEFAULT_WEIGHT_UNIT
    manual_minutes: int | float | None = None  # "log without timer" path
    manual_seconds: int | float | None = None


def _present(value: int | float | None) -> bool:
    return value is not None and value != 0


def resolve_score(state: SessionState, kind: ScoreKind, inputs: ScoreInputs) -> ScoreResult:
    """
    Produce the typed score for a finished session.

    Args:
        state: Final session state
        kind: Score kind from classify_score_kind()
        inputs: Manual fields

    Returns:
        TimeScore, RoundsScore, WeightScore or RepsScore

    Raises:
        MissingScoreInput: If a required value is absent or zero
    """
    if kind == "rounds":
        rounds = inputs.rounds
        if not _present(rounds):
            rounds = (
                state.rounds_snapshot
                if state.rounds_snapshot is not None
                else state.amrap_rounds_completed
            )
        if not _present(rounds):
            raise MissingScoreInput("rounds", "Please enter the rounds you completed.")
        return RoundsScore(rounds=rounds, extra_reps=inputs.extra_reps)  # type: ignore[arg-type]

    if kind == "reps":
        if not _present(inputs.max_reps):
            raise MissingScoreInput("max_reps", "Please enter your max reps.")
        return RepsScore(reps=inputs.max_reps)  # type: ignore[arg-type]

    if kind == "weight":
        if not _present(inputs.weight):
            raise MissingScoreInput("weight", "Please enter your 1RM weight.")
        return WeightScore(value=inputs.weight, unit=inputs.weight_unit)  # type: ignore[arg-type]

    if state.timer_skipped:
        total = (inputs.manual_minutes or 0) * 60 + (inputs.manual_seconds or 0)
        if not _present(total):
            raise MissingScoreInput("time", "Please enter a valid time.")
        return TimeScore(seconds=total)

    return TimeScore(seconds=state.elapsed_seconds)

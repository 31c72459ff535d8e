"""
Data models for wod-runner.

Workout definitions are read-only inputs; SessionState is the only mutable
model and is owned by a WorkoutSession. Scores are tagged by kind so the
display string and the persisted record follow from the variant alone.
"""

from dataclasses import dataclass, field
from typing import ClassVar, Literal, Union

Scheme = Literal["FOR_TIME", "AMRAP", "EMOM", "TABATA", "MIXED", "ONE_REP_MAX", "MAX_REPS"]
RestType = Literal["none", "fixed", "manual"]
Phase = Literal["briefing", "running", "resting", "finished"]
ScalingTier = Literal["Beginner", "Intermediate", "Advanced", "RX"]
VerificationStatus = Literal["pending", "verified", "unverified"]
ScoreKind = Literal["time", "rounds", "weight", "reps"]

SCHEMES: tuple[str, ...] = ("FOR_TIME", "AMRAP", "EMOM", "TABATA", "MIXED", "ONE_REP_MAX", "MAX_REPS")
REST_TYPES: tuple[str, ...] = ("none", "fixed", "manual")
SCALING_TIERS: tuple[str, ...] = ("Beginner", "Intermediate", "Advanced", "RX")


def format_time(seconds: int | float) -> str:
    """Format a duration as M:SS (minutes are not wrapped into hours)."""
    mins, secs = divmod(int(seconds), 60)
    return f"{mins}:{secs:02d}"


def _fmt_number(value: int | float) -> str:
    """Render 100.0 as '100' and 102.5 as '102.5'."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class Movement:
    """One movement of a workout, e.g. '21 Thrusters' @ '43/30kg'."""

    exercise_id: str
    target: str
    order: int
    weight: str | None = None  # free-text annotation, e.g. "20kg" or "BW"


@dataclass(frozen=True)
class RestPolicy:
    """
    Inter-movement rest rule.

    seconds is only meaningful for rest_type="fixed"; None there means
    "use the configured default".
    """

    rest_type: RestType = "none"
    seconds: int | None = None

    def __post_init__(self) -> None:
        if self.rest_type not in REST_TYPES:
            raise ValueError(f"Invalid rest_type: {self.rest_type}")
        if self.seconds is not None and self.seconds < 0:
            raise ValueError("rest seconds must be non-negative")


@dataclass(frozen=True)
class WorkoutDefinition:
    """
    A structured workout, owned by the catalog and read-only to a session.

    category is an optional free-text tag; some categories (see
    WEIGHT_SCORED_CATEGORIES) force weight scoring.
    """

    workout_id: str
    name: str
    scheme: Scheme
    movements: tuple[Movement, ...] = ()
    rounds: int = 1
    rest: RestPolicy = field(default_factory=RestPolicy)
    time_cap_seconds: int | None = None
    description: str = ""
    category: str | None = None
    scaling: dict[str, str] = field(default_factory=dict)  # tier -> instructions
    is_featured: bool = False
    is_kids_friendly: bool = False

    def __post_init__(self) -> None:
        if self.scheme not in SCHEMES:
            raise ValueError(f"Invalid scheme: {self.scheme}")
        if self.rounds < 1:
            raise ValueError("rounds must be at least 1")
        if self.time_cap_seconds is not None and self.time_cap_seconds <= 0:
            raise ValueError("time_cap_seconds must be positive")

    @property
    def ordered_movements(self) -> tuple[Movement, ...]:
        """Movements sorted by their order index (stable for ties)."""
        return tuple(sorted(self.movements, key=lambda m: m.order))


@dataclass(frozen=True)
class ScheduleItem:
    """One (movement, round) unit of work in the expanded schedule."""

    movement: Movement
    round_number: int  # 1-based
    order_index: int  # position of the movement within a single round


@dataclass
class SessionState:
    """
    Live state of one workout attempt.

    Invariant: is_clock_running is False whenever phase == "resting".
    """

    phase: Phase = "briefing"
    elapsed_seconds: int = 0
    active_index: int = 0
    amrap_rounds_completed: int = 0
    rest_remaining_seconds: int = 0
    is_clock_running: bool = False
    timer_skipped: bool = False  # "log without timer" path was used
    rounds_snapshot: int | None = None  # AMRAP counter frozen at finish


# =============================================================================
# SCORES
# =============================================================================


@dataclass(frozen=True)
class TimeScore:
    """Elapsed time in seconds."""

    kind: ClassVar[ScoreKind] = "time"
    seconds: int | float

    @property
    def display(self) -> str:
        return format_time(self.seconds)


@dataclass(frozen=True)
class RoundsScore:
    """AMRAP rounds plus optional extra reps into the next round."""

    kind: ClassVar[ScoreKind] = "rounds"
    rounds: int | float
    extra_reps: int | float | None = None

    @property
    def display(self) -> str:
        text = f"{_fmt_number(self.rounds)} rounds"
        if self.extra_reps:
            text += f" + {_fmt_number(self.extra_reps)} reps"
        return text


@dataclass(frozen=True)
class WeightScore:
    """Max load lifted."""

    kind: ClassVar[ScoreKind] = "weight"
    value: int | float
    unit: str = "kg"

    @property
    def display(self) -> str:
        return f"{_fmt_number(self.value)}{self.unit}"


@dataclass(frozen=True)
class RepsScore:
    """Max reps achieved."""

    kind: ClassVar[ScoreKind] = "reps"
    reps: int | float

    @property
    def display(self) -> str:
        return f"{_fmt_number(self.reps)} reps"


ScoreResult = Union[TimeScore, RoundsScore, WeightScore, RepsScore]


# =============================================================================
# SUBMISSION
# =============================================================================


@dataclass(frozen=True)
class Venue:
    """A training location; venue_type drives location-string formatting."""

    venue_id: str
    name: str
    venue_type: str  # HDB | Commercial | Outdoor | Home | Other


@dataclass
class ResultRecord:
    """
    The record handed to the persistence collaborator.

    total_time_seconds holds real elapsed time for time-scored workouts and a
    fixed placeholder otherwise.
    """

    log_id: str
    user_id: str
    workout_id: str
    workout_name: str
    timestamp: int  # epoch milliseconds
    location: str
    total_time_seconds: int | float
    score_display: str
    notes: str
    difficulty_tier: ScalingTier
    verification_status: VerificationStatus
    witness_id: str | None = None

    def __post_init__(self) -> None:
        if self.difficulty_tier not in SCALING_TIERS:
            raise ValueError(f"Invalid difficulty_tier: {self.difficulty_tier}")
        if self.verification_status not in ("pending", "verified", "unverified"):
            raise ValueError(f"Invalid verification_status: {self.verification_status}")

"""
Result submission: turns a resolved score into the record handed to the
persistence collaborator.

Persistence happens only after scoring succeeds. A failed write leaves the
session open so the athlete can resubmit.
"""

import time
from typing import Callable
from uuid import uuid4

from .config import CUSTOM_DETAIL_VENUE_TYPES, NON_TIME_PLACEHOLDER_SECONDS, UNKNOWN_LOCATION
from .models import ResultRecord, ScalingTier, ScoreResult, TimeScore, Venue, WorkoutDefinition
from .scoring import ScoreInputs
from .session import WorkoutSession

PersistFn = Callable[[ResultRecord], None]


class PersistenceFailure(Exception):
    """Raised when the persistence collaborator rejects a result."""


def resolve_location(venue: Venue | None, detail: str | None = None) -> str:
    """
    Build the location string stored on a result.

    Venues where the name alone is ambiguous (commercial gyms, home, other)
    get the athlete's free-text detail appended.
    """
    if venue is None:
        return UNKNOWN_LOCATION
    detail = (detail or "").strip()
    if venue.venue_type in CUSTOM_DETAIL_VENUE_TYPES and detail:
        return f"{venue.name}: {detail}"
    return venue.name


def total_time_for(score: ScoreResult) -> int | float:
    """Seconds stored on the record; non-time scores get a placeholder."""
    if isinstance(score, TimeScore):
        return score.seconds
    return NON_TIME_PLACEHOLDER_SECONDS


def build_result_record(
    workout: WorkoutDefinition,
    score: ScoreResult,
    *,
    user_id: str,
    location: str,
    difficulty_tier: ScalingTier = "RX",
    notes: str = "",
    witness_id: str | None = None,
    timestamp_ms: int | None = None,
) -> ResultRecord:
    """Assemble a ResultRecord; a chosen witness makes the result pending verification."""
    witness_id = witness_id or None
    return ResultRecord(
        log_id=f"log_{uuid4().hex[:12]}",
        user_id=user_id,
        workout_id=workout.workout_id,
        workout_name=workout.name,
        timestamp=timestamp_ms if timestamp_ms is not None else int(time.time() * 1000),
        location=location,
        total_time_seconds=total_time_for(score),
        score_display=score.display,
        notes=notes,
        difficulty_tier=difficulty_tier,
        verification_status="pending" if witness_id else "unverified",
        witness_id=witness_id,
    )


def submit_result(
    session: WorkoutSession,
    inputs: ScoreInputs,
    persist: PersistFn,
    *,
    user_id: str,
    location: str,
    difficulty_tier: ScalingTier = "RX",
    notes: str = "",
    witness_id: str | None = None,
) -> ResultRecord:
    """
    Resolve, build and persist the result of a finished session.

    Raises:
        MissingScoreInput: Required manual value absent; nothing is persisted
        PersistenceFailure: persist() raised; the session stays open
        SessionError: Session not finished or already closed
    """
    score = session.resolve(inputs)
    record = build_result_record(
        session.workout,
        score,
        user_id=user_id,
        location=location,
        difficulty_tier=difficulty_tier,
        notes=notes,
        witness_id=witness_id,
    )
    try:
        persist(record)
    except Exception as exc:
        raise PersistenceFailure(f"Could not save result: {exc}") from exc
    session.mark_submitted()
    return record

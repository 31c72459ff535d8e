"""
Score-kind classification.

Schemes and categories overlap in the definition (an AMRAP can carry a
"weight" category), so the precedence lives in exactly one place:
AMRAP -> MAX_REPS -> weight-scored -> time.
"""

from .config import WEIGHT_SCORED_CATEGORIES
from .models import ScoreKind, WorkoutDefinition


def is_weight_category(category: str | None) -> bool:
    return category is not None and category.strip().lower() in WEIGHT_SCORED_CATEGORIES


def classify_score_kind(workout: WorkoutDefinition) -> ScoreKind:
    """Return how a finished session of this workout is scored."""
    if workout.scheme == "AMRAP":
        return "rounds"
    if workout.scheme == "MAX_REPS":
        return "reps"
    if workout.scheme == "ONE_REP_MAX" or is_weight_category(workout.category):
        return "weight"
    return "time"

"""
Workout catalog.

Workouts are loaded lazily from the bundled and user YAML directories the
first time the catalog is needed; reload_catalog() drops the cache.
"""

from ..models import WorkoutDefinition
from .loader import load_workouts_from_yaml

_CATALOG: dict[str, WorkoutDefinition] | None = None


def get_catalog() -> dict[str, WorkoutDefinition]:
    global _CATALOG
    if _CATALOG is None:
        _CATALOG = load_workouts_from_yaml()
    return _CATALOG


def reload_catalog() -> dict[str, WorkoutDefinition]:
    global _CATALOG
    _CATALOG = None
    return get_catalog()


def list_workouts() -> list[WorkoutDefinition]:
    """All catalog workouts, featured first, then by name."""
    return sorted(get_catalog().values(), key=lambda w: (not w.is_featured, w.name.lower()))


def get_workout(workout_id: str) -> WorkoutDefinition:
    """
    Return the WorkoutDefinition for the given workout_id.

    Raises:
        ValueError: If workout_id is not in the catalog
    """
    catalog = get_catalog()
    if workout_id not in catalog:
        valid = ", ".join(sorted(catalog))
        raise ValueError(f"Unknown workout '{workout_id}'. Valid IDs: {valid}")
    return catalog[workout_id]

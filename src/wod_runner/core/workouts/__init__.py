"""
Workout catalog for wod-runner.

Each workout is described by a WorkoutDefinition loaded from YAML.
"""

from .loader import WorkoutDefinitionError, load_workout_file, workout_from_dict
from .registry import get_catalog, get_workout, list_workouts, reload_catalog

__all__ = [
    "WorkoutDefinitionError",
    "get_catalog",
    "get_workout",
    "list_workouts",
    "load_workout_file",
    "reload_catalog",
    "workout_from_dict",
]

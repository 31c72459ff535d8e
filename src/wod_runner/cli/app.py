"""Shared Typer app object, shared option types, and store/lookup utilities."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.models import WorkoutDefinition
from ..core.workouts import WorkoutDefinitionError, get_workout, load_workout_file
from ..io.result_store import ResultStore, get_default_results_path
from . import views

# Shared --results-path option type used by every command that touches results
ResultsPathOption = Annotated[
    Optional[Path],
    typer.Option("--results-path", help="Results JSONL file (default: ~/.wod-runner/results.jsonl)"),
]

# Shared --file option: load a workout definition from YAML/JSON instead of the catalog
WorkoutFileOption = Annotated[
    Optional[Path],
    typer.Option("--file", "-f", help="Load the workout from a YAML or JSON file"),
]

app = typer.Typer(
    name="wod-runner",
    help="Guided workout timer: run a WOD with live cues, then log your score.",
    no_args_is_help=True,
)


def get_store(results_path: Path | None) -> ResultStore:
    """Get result store from path or default location."""
    if results_path is None:
        results_path = get_default_results_path()
    return ResultStore(results_path)


def resolve_workout(workout_id: str | None, workout_file: Path | None) -> WorkoutDefinition:
    """
    Look up a workout in the catalog, or load it from --file.

    Exits with status 1 and an error message if the workout cannot be found.
    """
    try:
        if workout_file is not None:
            return load_workout_file(workout_file)
        if not workout_id:
            views.print_error("Give a workout ID or --file")
            raise typer.Exit(1)
        return get_workout(workout_id)
    except (WorkoutDefinitionError, ValueError, OSError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

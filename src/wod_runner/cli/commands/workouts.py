"""Catalog commands: list, show."""

from typing import Annotated, Optional

import typer

from ...core.engine.config_loader import load_settings
from ...core.workouts import list_workouts
from ...io.serializers import ValidationError, validate_tier
from .. import views
from ..app import WorkoutFileOption, app, resolve_workout


@app.command("list")
def list_cmd(
    featured: Annotated[
        bool,
        typer.Option("--featured", help="Only show featured workouts"),
    ] = False,
    kids: Annotated[
        bool,
        typer.Option("--kids", help="Only show kids-friendly workouts"),
    ] = False,
    scheme: Annotated[
        Optional[str],
        typer.Option("--scheme", "-s", help="Filter by scheme, e.g. AMRAP or FOR_TIME"),
    ] = None,
) -> None:
    """
    List the workouts in the catalog.
    """
    workouts = list_workouts()
    if featured:
        workouts = [w for w in workouts if w.is_featured]
    if kids:
        workouts = [w for w in workouts if w.is_kids_friendly]
    if scheme:
        wanted = scheme.strip().upper().replace("-", "_").replace(" ", "_")
        workouts = [w for w in workouts if w.scheme == wanted]
    views.print_workouts(workouts)


@app.command()
def show(
    workout_id: Annotated[Optional[str], typer.Argument(help="Workout ID from the catalog")] = None,
    workout_file: WorkoutFileOption = None,
    tier: Annotated[
        Optional[str],
        typer.Option("--tier", "-t", help="Highlight a scaling tier: Beginner, Intermediate, Advanced, RX"),
    ] = None,
) -> None:
    """
    Show the briefing for a workout: scheme, cap, rest and movements.
    """
    workout = resolve_workout(workout_id, workout_file)
    if tier is not None:
        try:
            tier = validate_tier(tier)
        except ValidationError as e:
            views.print_error(str(e))
            raise typer.Exit(1)
    settings = load_settings()
    views.print_briefing(workout, tier=tier, default_rest_seconds=settings.rest_default_seconds)

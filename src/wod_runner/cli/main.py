"""
CLI entry point using Typer.

Provides commands for running and logging workouts:
- list: Show the workout catalog
- show: Show a workout briefing
- run: Run a workout with the live timer and log the score
- log: Log a result without the timer
- history: Show saved results
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from . import views
from .app import app

# Command modules register themselves on `app` at import time.
from .commands import results, sessions, workouts  # noqa: F401


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """
    Guided workout timer. Run a WOD with live cues, then log your score.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=views.console, show_path=False)],
        )


if __name__ == "__main__":
    app()

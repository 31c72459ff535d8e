"""Result commands: history."""

import json
from typing import Annotated, Optional

import typer

from ...io.serializers import ValidationError, result_to_dict
from .. import views
from ..app import ResultsPathOption, app, get_store


@app.command()
def history(
    workout_id: Annotated[
        Optional[str],
        typer.Option("--workout", "-w", help="Only show results for this workout ID"),
    ] = None,
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-n", help="Show at most N results"),
    ] = None,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON"),
    ] = False,
    results_path: ResultsPathOption = None,
) -> None:
    """
    Show saved results, newest first.
    """
    store = get_store(results_path)
    if not store.exists():
        if json_out:
            print("[]")
        else:
            views.print_info(f"No results recorded yet ({store.results_path})")
        return

    try:
        records = store.load_results(workout_id=workout_id, limit=limit)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps([result_to_dict(r) for r in records], indent=2))
        return

    views.print_history(records)

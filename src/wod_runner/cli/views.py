"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of workouts, live session status and
saved results.
"""

from datetime import datetime

from rich.console import Console
from rich.table import Table

from ..core.config import DEFAULT_FIXED_REST_SECONDS
from ..core.models import SCALING_TIERS, ResultRecord, RestPolicy, WorkoutDefinition, format_time
from ..core.session import SessionStatus, WorkoutSession

console = Console()

SCHEME_LABELS: dict[str, str] = {
    "FOR_TIME": "For Time",
    "AMRAP": "AMRAP",
    "EMOM": "EMOM",
    "TABATA": "Tabata",
    "MIXED": "Mixed",
    "ONE_REP_MAX": "1RM",
    "MAX_REPS": "Max Reps",
}


def describe_rest(policy: RestPolicy, default_seconds: int = DEFAULT_FIXED_REST_SECONDS) -> str:
    """Short label for a rest policy, e.g. 'None', 'Manual', '60s'."""
    if policy.rest_type == "none":
        return "None"
    if policy.rest_type == "manual":
        return "Manual"
    seconds = policy.seconds if policy.seconds is not None else default_seconds
    return f"{seconds}s"


def _fmt_cap(workout: WorkoutDefinition) -> str:
    if workout.time_cap_seconds is None:
        return "-"
    return f"{workout.time_cap_seconds // 60} min"


def format_workout_table(workouts: list[WorkoutDefinition]) -> Table:
    """
    Create a Rich table for the workout catalog.

    Args:
        workouts: Workouts to display

    Returns:
        Rich Table object
    """
    table = Table(title="Workouts", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Name")
    table.add_column("Scheme", justify="center")
    table.add_column("Cap", justify="right")
    table.add_column("Rounds", justify="right")
    table.add_column("Rest", justify="center")
    table.add_column("Moves", justify="right")

    for w in workouts:
        name = f"[bold]{w.name}[/bold] ★" if w.is_featured else w.name
        table.add_row(
            w.workout_id,
            name,
            SCHEME_LABELS.get(w.scheme, w.scheme),
            _fmt_cap(w),
            str(w.rounds),
            describe_rest(w.rest),
            str(len(w.movements)),
        )
    return table


def print_workouts(workouts: list[WorkoutDefinition]) -> None:
    if not workouts:
        console.print("[yellow]No workouts available.[/yellow]")
        return
    console.print(format_workout_table(workouts))


def print_briefing(
    workout: WorkoutDefinition,
    tier: str | None = None,
    default_rest_seconds: int = DEFAULT_FIXED_REST_SECONDS,
) -> None:
    """
    Print the pre-session briefing: scheme, cap, rest, movements and scaling.

    Args:
        workout: Workout to describe
        tier: Highlight the scaling line for this tier
        default_rest_seconds: Shown for fixed rest without a duration
    """
    console.print()
    console.print(f"[bold cyan]{workout.name}[/bold cyan]  [dim]({workout.workout_id})[/dim]")
    if workout.description:
        console.print(f"[dim]{workout.description}[/dim]")

    facts = [SCHEME_LABELS.get(workout.scheme, workout.scheme)]
    if workout.time_cap_seconds:
        facts.append(f"{workout.time_cap_seconds // 60} MIN CAP")
    if workout.rounds > 1 and workout.scheme != "AMRAP":
        facts.append(f"{workout.rounds} Rounds")
    facts.append(f"Rest: {describe_rest(workout.rest, default_rest_seconds)}")
    console.print("  ·  ".join(facts))
    console.print()

    for i, m in enumerate(workout.ordered_movements, 1):
        weight = f" [magenta]@ {m.weight}[/magenta]" if m.weight else ""
        console.print(f"  {i}. {m.target}{weight}")

    if workout.scaling:
        console.print()
        console.print("[bold]Scaling[/bold]")
        for name in reversed(SCALING_TIERS):
            if name not in workout.scaling:
                continue
            marker = "[green]›[/green]" if tier == name else " "
            console.print(f" {marker} {name:<12} {workout.scaling[name]}")
    console.print()


def format_status_line(session: WorkoutSession, status: SessionStatus | None = None) -> str:
    """One-line live status for the current phase."""
    status = status or session.status()

    if status.phase == "briefing":
        return "[dim]Briefing — press Enter to start[/dim]"
    if status.phase == "finished":
        text = f"[bold green]Finished[/bold green]  {format_time(status.elapsed_seconds)}"
        if session.is_amrap:
            text += f"  ·  {status.amrap_rounds_completed} rounds"
        return text

    if status.time_remaining is not None:
        clock = f"[bold]{format_time(status.time_remaining)}[/bold] left"
    else:
        clock = f"[bold]{format_time(status.elapsed_seconds)}[/bold]"
    if not status.is_clock_running and status.phase == "running":
        clock += " [yellow](paused)[/yellow]"

    if status.phase == "resting":
        if status.rest_mode == "manual_wait":
            rest = "[cyan]REST[/cyan] — press Enter when ready"
        else:
            rest = f"[cyan]REST {status.rest_remaining_seconds}s[/cyan]"
        nxt = status.current_item.movement.target if status.current_item else ""
        return f"{clock}  ·  {rest}  ·  next: {nxt}"

    item = status.current_item
    target = item.movement.target if item else "-"
    if item is not None and item.movement.weight:
        target += f" @ {item.movement.weight}"
    if session.is_amrap:
        progress = f"Round {status.current_round}"
    else:
        progress = f"{status.active_index + 1}/{status.schedule_length}"
        if status.total_rounds > 1:
            progress += f" (Round {status.current_round}/{status.total_rounds})"
    return f"{clock}  ·  [bold]{target}[/bold]  ·  {progress}"


def print_status(session: WorkoutSession) -> None:
    console.print(format_status_line(session))


def print_result(record: ResultRecord) -> None:
    """Print a saved result summary."""
    console.print()
    console.print(f"[bold green]✓ Logged {record.workout_name}: {record.score_display}[/bold green]")
    console.print(f"  Location: {record.location}   Tier: {record.difficulty_tier}")
    if record.witness_id:
        console.print(f"  [yellow]Pending verification by {record.witness_id}[/yellow]")
    else:
        console.print("  [dim]Unverified[/dim]")


def format_results_table(records: list[ResultRecord]) -> Table:
    """
    Create a Rich table for saved results.

    Args:
        records: Results to display (already ordered)

    Returns:
        Rich Table object
    """
    table = Table(title="Results", show_header=True, header_style="bold cyan")
    table.add_column("Date", style="dim")
    table.add_column("Workout")
    table.add_column("Score", justify="right", style="bold")
    table.add_column("Tier", justify="center")
    table.add_column("Location")
    table.add_column("Status", justify="center")

    status_styles = {"verified": "green", "pending": "yellow", "unverified": "dim"}
    for r in records:
        when = datetime.fromtimestamp(r.timestamp / 1000).strftime("%Y-%m-%d %H:%M")
        style = status_styles.get(r.verification_status, "")
        table.add_row(
            when,
            r.workout_name,
            r.score_display,
            r.difficulty_tier,
            r.location,
            f"[{style}]{r.verification_status}[/{style}]",
        )
    return table


def print_history(records: list[ResultRecord]) -> None:
    if not records:
        console.print("[yellow]No results recorded yet.[/yellow]")
        return
    console.print(format_results_table(records))


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")

"""Session commands: run (live timer), log (no timer), and helpers."""

import asyncio
import dataclasses
import logging
import sys
from dataclasses import dataclass
from typing import Annotated, Optional

import typer

from ...core.audio import AudioCues, BellAudioSink, NullAudioSink
from ...core.config import CUSTOM_DETAIL_VENUE_TYPES, FINISH_SEQUENCE_OFFSETS_MS, WEIGHT_UNITS
from ...core.engine.config_loader import Settings, load_settings
from ...core.models import ResultRecord, ScalingTier
from ...core.scoring import MissingScoreInput, ScoreInputs
from ...core.session import WorkoutSession
from ...core.submission import PersistenceFailure, resolve_location, submit_result
from ...core.ticker import AsyncioTicker
from ...io.result_store import ResultStore
from ...io.serializers import ValidationError, validate_tier
from .. import views
from ..app import ResultsPathOption, WorkoutFileOption, app, get_store, resolve_workout

logger = logging.getLogger(__name__)

# How often the watcher checks for phase changes made by the clock
WATCH_INTERVAL_SECONDS = 0.25

KEY_HELP = (
    "[bold]Enter[/bold] done/ready  [bold]p[/bold] pause  [bold]s[/bold] skip rest  "
    "[bold]+[/bold]/[bold]-[/bold] rest time  [bold]f[/bold] finish  "
    "[bold]m[/bold] audio  [bold].[/bold] status  [bold]q[/bold] quit"
)

# Shared options for run and log
VenueOption = Annotated[
    Optional[str],
    typer.Option("--venue", help="Venue ID from settings (asked if omitted)"),
]
VenueDetailOption = Annotated[
    Optional[str],
    typer.Option("--venue-detail", help="Gym name or detail for Commercial/Home/Other venues"),
]
TierOption = Annotated[
    str,
    typer.Option("--tier", "-t", help="Difficulty tier: Beginner, Intermediate, Advanced, RX"),
]
WitnessOption = Annotated[
    Optional[str],
    typer.Option("--witness", help="ID of the person who witnessed the workout"),
]
NotesOption = Annotated[
    str,
    typer.Option("--notes", help="Free-text notes saved with the result"),
]
RoundsOption = Annotated[
    Optional[int],
    typer.Option("--rounds", help="Rounds completed (AMRAP)"),
]
ExtraRepsOption = Annotated[
    Optional[int],
    typer.Option("--extra-reps", help="Extra reps into the unfinished round (AMRAP)"),
]
RepsOption = Annotated[
    Optional[int],
    typer.Option("--reps", help="Max reps (Max Reps workouts)"),
]
WeightOption = Annotated[
    Optional[float],
    typer.Option("--weight", help="Weight lifted (1RM / weight workouts)"),
]
UnitOption = Annotated[
    str,
    typer.Option("--unit", help="Weight unit: kg or lbs"),
]


@dataclass
class _SubmitContext:
    """Everything the result record needs besides the score."""

    user_id: str
    location: str
    tier: ScalingTier
    notes: str = ""
    witness_id: str | None = None


def _is_interactive() -> bool:
    return sys.stdin.isatty()


def _ask_number(label: str, default: int | float | None = None) -> int | float | None:
    """Prompt for a number; Enter keeps the default."""
    suffix = f" [{default}]" if default is not None else ""
    while True:
        raw = views.console.input(f"  {label}{suffix}: ").strip()
        if not raw:
            return default
        try:
            return int(raw)
        except ValueError:
            pass
        try:
            return float(raw)
        except ValueError:
            views.print_error("Enter a number")


def _ask_unit(default: str) -> str:
    while True:
        raw = views.console.input(f"  Unit ({'/'.join(WEIGHT_UNITS)}) [{default}]: ").strip().lower()
        if not raw:
            return default
        if raw in WEIGHT_UNITS:
            return raw
        views.print_error(f"Unit must be one of {', '.join(WEIGHT_UNITS)}")


def _choose_venue(settings: Settings) -> tuple[str, bool]:
    """
    Interactive venue picker.

    Returns:
        (venue_id, picked_interactively)
    """
    views.console.print()
    views.console.print("[bold]Where are you training?[/bold]")
    for i, venue in enumerate(settings.venues, 1):
        views.console.print(f"  {i}. {venue.name} [dim]({venue.venue_type})[/dim]")
    while True:
        raw = views.console.input("Venue #: ").strip()
        try:
            choice = int(raw)
        except ValueError:
            views.print_error("Enter a number")
            continue
        if 1 <= choice <= len(settings.venues):
            return settings.venues[choice - 1].venue_id, True
        views.print_error(f"Enter a number between 1 and {len(settings.venues)}")


def _build_context(
    settings: Settings,
    venue_id: str | None,
    venue_detail: str | None,
    tier: str,
    witness: str | None,
    notes: str,
    interactive: bool,
) -> _SubmitContext:
    """Validate tier and venue options, asking for the venue when allowed."""
    try:
        canonical_tier = validate_tier(tier)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    picked = False
    if venue_id is None:
        if not interactive or not settings.venues:
            views.print_error("Please select a location first (--venue). See settings.yaml for IDs.")
            raise typer.Exit(1)
        venue_id, picked = _choose_venue(settings)

    venue = settings.find_venue(venue_id)
    if venue is None:
        valid = ", ".join(v.venue_id for v in settings.venues)
        views.print_error(f"Unknown venue '{venue_id}'. Valid IDs: {valid}")
        raise typer.Exit(1)

    if picked and venue_detail is None and venue.venue_type in CUSTOM_DETAIL_VENUE_TYPES:
        venue_detail = views.console.input("  Gym name / details (optional): ").strip()

    return _SubmitContext(
        user_id=settings.user_id,
        location=resolve_location(venue, venue_detail),
        tier=canonical_tier,  # type: ignore[arg-type]
        notes=notes,
        witness_id=witness or None,
    )


def _prompt_score_inputs(session: WorkoutSession, inputs: ScoreInputs, force: bool = False) -> ScoreInputs:
    """
    Ask for the manual values this session's score kind needs.

    Values already given on the command line are not asked again unless
    force is set (after the previous attempt was rejected).
    """
    kind = session.score_kind
    views.console.print()

    if kind == "rounds":
        tracked = session.state.rounds_snapshot
        if inputs.rounds is None or force:
            rounds = _ask_number("Rounds completed", default=tracked if tracked else None)
            inputs = dataclasses.replace(inputs, rounds=rounds)
        if inputs.extra_reps is None:
            inputs = dataclasses.replace(inputs, extra_reps=_ask_number("Extra reps", default=0))
    elif kind == "reps":
        if inputs.max_reps is None or force:
            inputs = dataclasses.replace(inputs, max_reps=_ask_number("Max reps"))
    elif kind == "weight":
        if inputs.weight is None or force:
            inputs = dataclasses.replace(
                inputs,
                weight=_ask_number("1RM weight"),
                weight_unit=_ask_unit(inputs.weight_unit),
            )
    elif session.state.timer_skipped:
        if (inputs.manual_minutes is None and inputs.manual_seconds is None) or force:
            inputs = dataclasses.replace(
                inputs,
                manual_minutes=_ask_number("Minutes", default=0),
                manual_seconds=_ask_number("Seconds", default=0),
            )
    return inputs


def _submit(
    session: WorkoutSession,
    inputs: ScoreInputs,
    store: ResultStore,
    ctx: _SubmitContext,
    interactive: bool,
) -> ResultRecord:
    """Submit, re-asking for rejected values and offering a retry on write errors."""
    while True:
        try:
            record = submit_result(
                session,
                inputs,
                store.append_result,
                user_id=ctx.user_id,
                location=ctx.location,
                difficulty_tier=ctx.tier,
                notes=ctx.notes,
                witness_id=ctx.witness_id,
            )
        except MissingScoreInput as e:
            views.print_error(str(e))
            if not interactive:
                raise typer.Exit(1)
            inputs = _prompt_score_inputs(session, inputs, force=True)
            continue
        except PersistenceFailure as e:
            views.print_error(str(e))
            if interactive and views.confirm_action("Retry saving?"):
                continue
            session.discard()
            raise typer.Exit(1)

        views.print_result(record)
        return record


def _validate_unit(unit: str) -> str:
    unit = unit.strip().lower()
    if unit not in WEIGHT_UNITS:
        views.print_error(f"Unit must be one of {', '.join(WEIGHT_UNITS)}")
        raise typer.Exit(1)
    return unit


# =============================================================================
# Live session loop
# =============================================================================


def _prompt_for(session: WorkoutSession) -> str:
    if session.phase == "resting":
        return "[cyan]rest›[/cyan] "
    return "› "


async def _watch(session: WorkoutSession) -> None:
    """Announce phase changes made by the clock while waiting for input."""
    last = session.phase
    while not session.is_closed:
        await asyncio.sleep(WATCH_INTERVAL_SECONDS)
        if session.phase == last:
            continue
        last = session.phase
        if last == "running":
            views.console.print("[bold green]GO![/bold green]")
            views.print_status(session)
        elif last == "finished":
            views.console.print()
            views.console.print("[bold red]TIME![/bold red] Press Enter to continue.")
            return


async def _handle_key(session: WorkoutSession, key: str, adjust_step: int) -> None:
    if key in ("", "n"):
        if session.phase == "resting" and session.rest.mode == "manual_wait":
            applied = session.skip_rest()
        else:
            applied = session.advance()
    elif key == "p":
        applied = session.toggle_pause()
    elif key == "s":
        applied = session.skip_rest()
    elif key in ("+", "="):
        applied = session.adjust_rest(adjust_step)
    elif key == "-":
        applied = session.adjust_rest(-adjust_step)
    elif key == "f":
        applied = session.finish_early()
    elif key == "m":
        session.cues.set_enabled(not session.cues.enabled)
        views.print_info(f"Audio {'on' if session.cues.enabled else 'off'}")
        return
    elif key == ".":
        applied = True
    elif key == "?":
        views.console.print(KEY_HELP)
        return
    elif key == "q":
        was_running = session.pause()
        if await asyncio.to_thread(views.confirm_action, "Quit workout? Progress will be lost."):
            session.quit()
            return
        if was_running:
            session.resume()
        applied = True
    else:
        views.print_warning(f"Unknown key '{key}'. Press ? for help.")
        return

    if not applied:
        views.print_warning(f"'{key or 'Enter'}' is not available while {session.phase}")
        return
    if session.phase != "finished":
        views.print_status(session)


async def _drive(session: WorkoutSession, adjust_step: int) -> None:
    """Run the session until it finishes or is quit."""
    session.start()
    views.console.print(KEY_HELP)
    views.print_status(session)

    watcher = asyncio.get_running_loop().create_task(_watch(session))
    try:
        while not session.is_closed and session.phase != "finished":
            raw = await asyncio.to_thread(views.console.input, _prompt_for(session))
            if session.phase == "finished":
                break
            await _handle_key(session, raw.strip().lower(), adjust_step)
    finally:
        watcher.cancel()

    if session.phase == "finished":
        # Let the deferred tones of the completion sequence play out.
        await asyncio.sleep(FINISH_SEQUENCE_OFFSETS_MS[-1] / 1000 + 0.1)


# =============================================================================
# Commands
# =============================================================================


@app.command()
def run(
    workout_id: Annotated[Optional[str], typer.Argument(help="Workout ID from the catalog")] = None,
    workout_file: WorkoutFileOption = None,
    venue: VenueOption = None,
    venue_detail: VenueDetailOption = None,
    tier: TierOption = "RX",
    witness: WitnessOption = None,
    notes: NotesOption = "",
    rounds: RoundsOption = None,
    extra_reps: ExtraRepsOption = None,
    reps: RepsOption = None,
    weight: WeightOption = None,
    unit: UnitOption = "kg",
    mute: Annotated[
        bool,
        typer.Option("--mute", help="Start with audio cues off"),
    ] = False,
    results_path: ResultsPathOption = None,
) -> None:
    """
    Run a workout with the live timer, then log the score.

    The briefing is shown first. Press Enter to start, l to log without the
    timer, or q to cancel.
    """
    workout = resolve_workout(workout_id, workout_file)
    settings = load_settings()
    unit = _validate_unit(unit)
    ctx = _build_context(settings, venue, venue_detail, tier, witness, notes, interactive=True)

    cues = AudioCues(
        sink=BellAudioSink() if not mute else NullAudioSink(),
        enabled=settings.audio_enabled and not mute,
    )
    session = WorkoutSession(
        workout,
        ticker=AsyncioTicker(),
        cues=cues,
        default_rest_seconds=settings.rest_default_seconds,
    )

    views.print_briefing(workout, tier=ctx.tier, default_rest_seconds=settings.rest_default_seconds)
    choice = views.console.input("Press Enter to start, [bold]l[/bold] to log without timer, [bold]q[/bold] to cancel: ")
    choice = choice.strip().lower()
    if choice == "q":
        session.quit()
        views.print_info("Cancelled.")
        return

    if choice == "l":
        session.log_without_timer()
    else:
        asyncio.run(_drive(session, settings.rest_adjust_step_seconds))
        if session.closed_reason == "quit":
            views.print_info("Workout quit. Nothing was saved.")
            return
        views.print_status(session)

    inputs = ScoreInputs(
        rounds=rounds,
        extra_reps=extra_reps,
        max_reps=reps,
        weight=weight,
        weight_unit=unit,
    )
    inputs = _prompt_score_inputs(session, inputs)

    save = views.console.input("Save result? [Y/n]: ").strip().lower()
    if save not in ("", "y", "yes"):
        session.discard()
        views.print_info("Result discarded.")
        return

    _submit(session, inputs, get_store(results_path), ctx, interactive=True)


@app.command("log")
def log_cmd(
    workout_id: Annotated[Optional[str], typer.Argument(help="Workout ID from the catalog")] = None,
    workout_file: WorkoutFileOption = None,
    minutes: Annotated[
        Optional[int],
        typer.Option("--minutes", "-m", help="Total time: minutes part"),
    ] = None,
    seconds: Annotated[
        Optional[int],
        typer.Option("--seconds", "-s", help="Total time: seconds part"),
    ] = None,
    rounds: RoundsOption = None,
    extra_reps: ExtraRepsOption = None,
    reps: RepsOption = None,
    weight: WeightOption = None,
    unit: UnitOption = "kg",
    venue: VenueOption = None,
    venue_detail: VenueDetailOption = None,
    tier: TierOption = "RX",
    witness: WitnessOption = None,
    notes: NotesOption = "",
    results_path: ResultsPathOption = None,
) -> None:
    """
    Log a result without running the timer.

    Timed workouts take --minutes/--seconds; AMRAPs take --rounds and
    optionally --extra-reps; Max Reps take --reps; 1RM and weight workouts
    take --weight and --unit. Missing values are asked for on a terminal.
    """
    workout = resolve_workout(workout_id, workout_file)
    settings = load_settings()
    interactive = _is_interactive()
    unit = _validate_unit(unit)
    ctx = _build_context(settings, venue, venue_detail, tier, witness, notes, interactive)

    session = WorkoutSession(workout, default_rest_seconds=settings.rest_default_seconds)
    session.log_without_timer()
    logger.debug("Logging %s without timer (score kind %s)", workout.workout_id, session.score_kind)

    inputs = ScoreInputs(
        rounds=rounds,
        extra_reps=extra_reps,
        max_reps=reps,
        weight=weight,
        weight_unit=unit,
        manual_minutes=minutes,
        manual_seconds=seconds,
    )
    if interactive:
        inputs = _prompt_score_inputs(session, inputs)

    _submit(session, inputs, get_store(results_path), ctx, interactive)

"""
YAML/JSON → WorkoutDefinition loader.

Loads workout definitions from individual YAML files in the bundled
``src/wod_runner/workouts/`` directory.  Each file (e.g. fran.yaml) holds one
workout matching the WorkoutDefinition schema.

User overrides: place matching files in ``~/.wod-runner/workouts/``.
A user file is deep-merged over the bundled definition, so only changed
keys need to be listed.  A user file with no bundled counterpart is added
as a new workout.
"""

from __future__ import annotations

import json
import warnings
from pathlib import Path
from typing import Any

import yaml

from ..engine.config_loader import _deep_merge, _load_yaml_file, app_home
from ..models import SCHEMES, Movement, RestPolicy, WorkoutDefinition

_REQUIRED_WORKOUT_FIELDS: frozenset[str] = frozenset({"workout_id", "name", "scheme", "movements"})


class WorkoutDefinitionError(ValueError):
    """Raised when a workout definition is invalid."""


def _int_field(raw: Any, field_name: str, context: str) -> int:
    try:
        return int(str(raw).strip())
    except ValueError as exc:
        raise WorkoutDefinitionError(f"{context}: invalid {field_name} {raw!r}") from exc


def _movement_from_dict(raw: Any, index: int) -> Movement:
    context = f"Movement {index + 1}"
    if not isinstance(raw, dict):
        raise WorkoutDefinitionError(f"{context}: must be a mapping")
    exercise = raw.get("exercise")
    target = raw.get("target")
    if not exercise or not isinstance(exercise, str):
        raise WorkoutDefinitionError(f"{context}: 'exercise' must be a non-empty string")
    if not target or not isinstance(target, str):
        raise WorkoutDefinitionError(f"{context}: 'target' must be a non-empty string")
    weight = raw.get("weight")
    return Movement(
        exercise_id=exercise.strip(),
        target=target.strip(),
        order=_int_field(raw.get("order", index + 1), "order", context),
        weight=str(weight).strip() if weight is not None else None,
    )


def _rest_from_raw(raw: Any) -> RestPolicy:
    if raw is None:
        return RestPolicy()
    if isinstance(raw, str):
        raw = {"type": raw}
    if not isinstance(raw, dict):
        raise WorkoutDefinitionError("'rest' must be a mapping or one of none/fixed/manual")
    seconds = raw.get("seconds")
    try:
        return RestPolicy(
            rest_type=str(raw.get("type", "none")),  # type: ignore[arg-type]
            seconds=_int_field(seconds, "rest seconds", "Rest") if seconds is not None else None,
        )
    except ValueError as exc:
        raise WorkoutDefinitionError(str(exc)) from exc


def workout_from_dict(d: dict) -> WorkoutDefinition:
    """Convert a raw dict (from YAML or JSON) to a WorkoutDefinition.

    Raises WorkoutDefinitionError if any required field is absent or invalid.
    An empty movement list is accepted; such a session finishes on start.
    """
    missing = _REQUIRED_WORKOUT_FIELDS - set(d)
    if missing:
        raise WorkoutDefinitionError(f"Workout missing fields: {sorted(missing)}")

    scheme = str(d["scheme"]).strip().upper().replace(" ", "_").replace("-", "_")
    if scheme not in SCHEMES:
        raise WorkoutDefinitionError(f"Invalid scheme {d['scheme']!r}. Must be one of {SCHEMES}")

    raw_movements = d["movements"] or []
    if not isinstance(raw_movements, list):
        raise WorkoutDefinitionError("'movements' must be a list")
    movements = tuple(_movement_from_dict(m, i) for i, m in enumerate(raw_movements))

    time_cap = d.get("time_cap_seconds")
    scaling_raw = d.get("scaling") or {}
    if not isinstance(scaling_raw, dict):
        raise WorkoutDefinitionError("'scaling' must be a mapping of tier -> description")
    category = d.get("category")

    try:
        return WorkoutDefinition(
            workout_id=str(d["workout_id"]),
            name=str(d["name"]),
            scheme=scheme,  # type: ignore[arg-type]
            movements=movements,
            rounds=_int_field(d.get("rounds", 1), "rounds", "Workout"),
            rest=_rest_from_raw(d.get("rest")),
            time_cap_seconds=(
                _int_field(time_cap, "time_cap_seconds", "Workout") if time_cap is not None else None
            ),
            description=str(d.get("description", "")),
            category=str(category) if category is not None else None,
            scaling={str(k): str(v) for k, v in scaling_raw.items()},
            is_featured=bool(d.get("featured", False)),
            is_kids_friendly=bool(d.get("kids_friendly", False)),
        )
    except WorkoutDefinitionError:
        raise
    except ValueError as exc:
        raise WorkoutDefinitionError(str(exc)) from exc


def load_workout_file(path: str | Path) -> WorkoutDefinition:
    """
    Load a single workout from a .yaml/.yml or .json file.

    Raises:
        WorkoutDefinitionError: If the file is unreadable or invalid
    """
    file_path = Path(path)
    suffix = file_path.suffix.lower()
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise WorkoutDefinitionError(f"Cannot read {file_path}: {exc}") from exc

    if suffix in (".yaml", ".yml"):
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise WorkoutDefinitionError(f"Invalid YAML: {exc}") from exc
    elif suffix == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise WorkoutDefinitionError(f"Invalid JSON: {exc}") from exc
    else:
        raise WorkoutDefinitionError(
            f"Unsupported workout format '{file_path.suffix}'. Use .yaml or .json"
        )

    if not isinstance(data, dict):
        raise WorkoutDefinitionError("Workout file must contain a mapping")
    data.setdefault("workout_id", file_path.stem)
    return workout_from_dict(data)


def _get_bundled_workouts_dir() -> Path | None:
    """Return path to the bundled workouts/ data directory, or None if not found."""
    # loader.py lives at src/wod_runner/core/workouts/loader.py
    candidate = Path(__file__).parent.parent.parent / "workouts"
    return candidate if candidate.is_dir() else None


def _get_user_workouts_dir() -> Path | None:
    """Return ~/.wod-runner/workouts/ if it exists, else None."""
    p = app_home() / "workouts"
    return p if p.is_dir() else None


def load_workouts_from_yaml() -> dict[str, WorkoutDefinition]:
    """Return {workout_id: WorkoutDefinition} loaded from per-workout YAML files.

    Loads each ``<workout_id>.yaml`` from the bundled workouts/ directory.
    If a matching file exists in ``~/.wod-runner/workouts/`` it is deep-merged
    over the bundled definition.  User-only files are loaded as new workouts.
    Invalid files are skipped with a warning.
    """
    bundled_dir = _get_bundled_workouts_dir()
    user_dir = _get_user_workouts_dir()

    stems: dict[str, Path] = {}
    if bundled_dir is not None:
        for p in sorted(bundled_dir.glob("*.yaml")):
            stems[p.stem] = p

    user_only: list[Path] = []
    if user_dir is not None:
        for p in sorted(user_dir.glob("*.yaml")):
            if p.stem not in stems:
                user_only.append(p)

    result: dict[str, WorkoutDefinition] = {}

    for stem, bundled_path in stems.items():
        raw = _load_yaml_file(bundled_path)
        if not raw:
            continue
        if user_dir is not None:
            user_path = user_dir / f"{stem}.yaml"
            if user_path.exists():
                user_raw = _load_yaml_file(user_path)
                if user_raw:
                    raw = _deep_merge(raw, user_raw)
        raw.setdefault("workout_id", stem)
        try:
            workout = workout_from_dict(raw)
            result[workout.workout_id] = workout
        except WorkoutDefinitionError as exc:
            warnings.warn(f"wod-runner: skipping workout '{stem}' — {exc}", stacklevel=2)

    for p in user_only:
        raw = _load_yaml_file(p)
        if not raw:
            continue
        raw.setdefault("workout_id", p.stem)
        try:
            workout = workout_from_dict(raw)
            result[workout.workout_id] = workout
        except WorkoutDefinitionError as exc:
            warnings.warn(f"wod-runner: skipping user workout '{p.stem}' — {exc}", stacklevel=2)

    return result

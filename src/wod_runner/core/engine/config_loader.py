"""
YAML → typed settings loader.

Loads settings from settings.yaml (bundled with the package) and optionally
merges user overrides from ~/.wod-runner/settings.yaml.

Usage:
    from wod_runner.core.engine.config_loader import load_settings
    settings = load_settings()
    settings.rest_adjust_step_seconds  # 10 unless overridden

If the bundled YAML cannot be parsed, all values fall back to the Python
defaults from config.py (no crash).  If the user override file exists but has
parse errors, a warning is issued and the file is ignored.
"""

from __future__ import annotations

import importlib.resources
import os
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from ..config import DEFAULT_FIXED_REST_SECONDS, REST_ADJUST_STEP_SECONDS
from ..models import Venue

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; return {} on any error."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
            return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError):
        return {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def app_home() -> Path:
    """Return ~/.wod-runner (not created)."""
    return Path(os.environ.get("HOME", "~")).expanduser() / ".wod-runner"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


@dataclass
class Settings:
    """Resolved user-facing settings."""

    user_id: str = "local"
    audio_enabled: bool = True
    rest_default_seconds: int = DEFAULT_FIXED_REST_SECONDS
    rest_adjust_step_seconds: int = REST_ADJUST_STEP_SECONDS
    venues: list[Venue] = field(default_factory=list)

    def find_venue(self, venue_id: str) -> Venue | None:
        for venue in self.venues:
            if venue.venue_id == venue_id:
                return venue
        return None


def get_bundled_yaml_path() -> Path | None:
    """Return the path to the bundled settings.yaml, or None if not found."""
    try:
        ref = importlib.resources.files("wod_runner").joinpath("settings.yaml")
        with importlib.resources.as_file(ref) as p:
            return p if p.exists() else None
    except (ModuleNotFoundError, FileNotFoundError):
        candidate = Path(__file__).parent.parent.parent / "settings.yaml"
        return candidate if candidate.exists() else None


def get_user_yaml_path() -> Path | None:
    """Return ~/.wod-runner/settings.yaml if it exists, else None."""
    p = app_home() / "settings.yaml"
    return p if p.exists() else None


def load_settings_config() -> dict[str, Any]:
    """
    Load and merge raw settings from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/wod_runner/settings.yaml
    2. User override at ~/.wod-runner/settings.yaml

    Returns:
        Merged dict of settings sections.  Empty dict if no YAML available.
    """
    config: dict[str, Any] = {}

    bundled = get_bundled_yaml_path()
    if bundled is not None:
        config = _deep_merge(config, _load_yaml_file(bundled))

    user = get_user_yaml_path()
    if user is not None:
        user_cfg = _load_yaml_file(user)
        if user_cfg:
            config = _deep_merge(config, user_cfg)
        else:
            warnings.warn(
                f"wod-runner: ignoring empty or unreadable settings override {user}",
                stacklevel=2,
            )

    return config


def settings_from_dict(cfg: dict[str, Any]) -> Settings:
    """Convert a raw settings dict to Settings, keeping defaults for absent keys."""
    user = cfg.get("user", {}) or {}
    audio = cfg.get("audio", {}) or {}
    rest = cfg.get("rest", {}) or {}

    venues: list[Venue] = []
    for raw in cfg.get("venues", []) or []:
        try:
            venues.append(
                Venue(
                    venue_id=str(raw["id"]),
                    name=str(raw["name"]),
                    venue_type=str(raw.get("type", "Other")),
                )
            )
        except (AttributeError, KeyError, TypeError) as exc:
            warnings.warn(f"wod-runner: skipping venue {raw!r} ({exc})", stacklevel=2)

    return Settings(
        user_id=str(user.get("id", "local")),
        audio_enabled=bool(audio.get("enabled", True)),
        rest_default_seconds=int(rest.get("default_seconds", DEFAULT_FIXED_REST_SECONDS)),
        rest_adjust_step_seconds=int(rest.get("adjust_step_seconds", REST_ADJUST_STEP_SECONDS)),
        venues=venues,
    )


def load_settings() -> Settings:
    """Load bundled + user settings into a Settings object."""
    return settings_from_dict(load_settings_config())

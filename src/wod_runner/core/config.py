"""
Configuration constants for the workout session engine.

All adjustable parameters are centralized here. User-facing values
(default rest, adjust step, audio) can be overridden in settings.yaml;
see core/engine/config_loader.py.
"""

from dataclasses import dataclass
from typing import Final

# =============================================================================
# CLOCK
# =============================================================================

TICK_INTERVAL_SECONDS: Final[float] = 1.0  # One tick per second, live and rest

# =============================================================================
# REST
# =============================================================================

DEFAULT_FIXED_REST_SECONDS: Final[int] = 60  # Fixed rest without an explicit duration
REST_ADJUST_STEP_SECONDS: Final[int] = 10  # +/- step for the rest countdown

# =============================================================================
# SCORING
# =============================================================================

# Stored in total_time_seconds for results that are not scored by time
NON_TIME_PLACEHOLDER_SECONDS: Final[int] = 1

WEIGHT_UNITS: Final[tuple[str, ...]] = ("kg", "lbs")
DEFAULT_WEIGHT_UNIT: Final[str] = "kg"

# Categories that force weight scoring regardless of scheme (compared lowercased)
WEIGHT_SCORED_CATEGORIES: Final[frozenset[str]] = frozenset({"weight", "street lift"})

# =============================================================================
# LOCATION
# =============================================================================

UNKNOWN_LOCATION: Final[str] = "Unknown"

# Venue types where a free-text detail is appended to the venue name
CUSTOM_DETAIL_VENUE_TYPES: Final[frozenset[str]] = frozenset({"Commercial", "Other", "Home"})

# =============================================================================
# AUDIO CUES
# =============================================================================

AMRAP_WARNING_SECONDS: Final[int] = 10  # Short tone each tick in the last 10s
AMRAP_DISTINCT_SECOND: Final[int] = 3  # Distinct tone at T-3
FINISH_SEQUENCE_OFFSETS_MS: Final[tuple[int, ...]] = (0, 150, 300)


@dataclass(frozen=True)
class Tone:
    """A single tone emission: frequency (Hz), duration (s) and wave shape."""

    freq: float
    duration: float
    shape: str = "sine"


TONE_START: Final[Tone] = Tone(600, 0.1)
TONE_ADVANCE: Final[Tone] = Tone(600, 0.1)
TONE_COUNTDOWN: Final[Tone] = Tone(600, 0.1)
TONE_COUNTDOWN_FINAL: Final[Tone] = Tone(800, 0.5, "square")
TONE_AMRAP_WARNING: Final[Tone] = Tone(700, 0.1)
TONE_AMRAP_THREE: Final[Tone] = Tone(900, 0.3, "square")
TONE_REST_GO: Final[Tone] = Tone(1000, 0.2)
TONE_REST_SKIP: Final[Tone] = Tone(1000, 0.1)
TONE_AUDIO_ON: Final[Tone] = Tone(880, 0.15)

# C5, E5, G5
FINISH_SEQUENCE: Final[tuple[Tone, ...]] = (
    Tone(523.25, 0.1),
    Tone(659.25, 0.1),
    Tone(783.99, 0.4),
)

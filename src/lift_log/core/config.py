"""
Configuration constants for lift-log.

All fixed vocabularies and defaults are centralized here.
Weights are always kilograms.
"""

import os
from pathlib import Path
from typing import Final

# =============================================================================
# CATEGORIES
# =============================================================================

SPECIFIC_MUSCLE: Final[str] = "specific muscle"

# Top-level categories offered when choosing what to train
TOP_CATEGORIES: Final[tuple[str, ...]] = (
    "upper body",
    "lower body",
    "full body",
    "push",
    "pull",
    "hinge",
    "squat",
    "core",
    SPECIFIC_MUSCLE,
)

# Shorthand category names accepted from user input
CATEGORY_ALIASES: Final[dict[str, str]] = {
    "upper": "upper body",
    "lower": "lower body",
    "legs": "lower body",
}

# =============================================================================
# EQUIPMENT
# =============================================================================

HOME_EQUIPMENT: Final[frozenset[str]] = frozenset(
    {"body weight", "resistance bands", "kettlebell"}
)

EQUIPMENT_ALIASES: Final[dict[str, str]] = {
    "bodyweight": "body weight",
    "band": "resistance bands",
    "bands": "resistance bands",
    "resistance band": "resistance bands",
    "resistance-band": "resistance bands",
}

# Offered when a category/location filter leaves no equipment at all
FALLBACK_EQUIPMENT: Final[tuple[str, ...]] = (
    "barbell",
    "dumbbell",
    "cable machine",
    "machine",
    "body weight",
    "resistance bands",
    "kettlebell",
    "smith machine",
)

LOCATIONS: Final[tuple[str, ...]] = ("gym", "home")

# =============================================================================
# SESSION ENTRY
# =============================================================================

DEFAULT_SET_COUNT: Final[int] = 3
MOVEMENT_KINDS: Final[tuple[str, ...]] = ("bilateral", "unilateral")

# Trend deltas are reported at this precision to hide float noise
DELTA_DECIMALS: Final[int] = 2

# =============================================================================
# PERSISTENCE
# =============================================================================

STORE_SLOT: Final[str] = "userWorkoutData"  # key of the history mapping in the store file
HISTORY_FILENAME: Final[str] = "history.json"
DATA_DIR_ENV: Final[str] = "LIFT_LOG_HOME"
DEFAULT_DATA_DIRNAME: Final[str] = ".lift-log"


def get_data_dir() -> Path:
    """Return the lift-log data directory ($LIFT_LOG_HOME or ~/.lift-log)."""
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        return Path(override).expanduser()
    home = Path(os.environ.get("HOME", "~")).expanduser()
    return home / DEFAULT_DATA_DIRNAME

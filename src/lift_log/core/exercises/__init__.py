"""
Exercise catalog for lift-log.

A read-only lookup table of exercises with their categories, equipment
and target muscles, loaded from bundled YAML.
"""

from .base import CatalogExercise
from .registry import EXERCISE_CATALOG, find_exercise, get_exercise

__all__ = [
    "CatalogExercise",
    "EXERCISE_CATALOG",
    "find_exercise",
    "get_exercise",
]

"""
Pure metric computation functions.

Volume, set counts and per-side heaviest values for layouts, records and
whole sessions.  All functions are pure and typed for testability.
"""

import math
from typing import Sequence

from .models import (
    PerformanceLayout,
    SessionExercise,
    SessionTotals,
    UnilateralLayout,
    WorkoutRecord,
)


def layout_volume(layout: PerformanceLayout) -> float:
    """
    Training volume of a layout: Σ reps × weight over every set.

    Both sides are pooled for unilateral layouts; summary layouts have
    no per-set data and contribute 0.

    Args:
        layout: Layout to measure

    Returns:
        Volume in kg·reps
    """
    return sum(s.reps * s.weight for s in layout.all_sets())


def record_volume(record: WorkoutRecord | SessionExercise) -> float:
    """Volume of a stored record or session entry."""
    return layout_volume(record.layout)


def side_heaviest(layout: PerformanceLayout) -> dict[str, tuple[float, int]]:
    """
    Heaviest weight and its set count per side.

    Bilateral layouts report a single "both" side; unilateral layouts
    report "left" and "right" separately; summary layouts report nothing.

    Example:
        left [(10, 60), (8, 60)], right [(10, 50)]
        -> {"left": (60.0, 2), "right": (50.0, 1)}
    """
    def _top(weights: list[float]) -> tuple[float, int]:
        if not weights:
            return 0.0, 0
        top = max(weights)
        return top, weights.count(top)

    if isinstance(layout, UnilateralLayout):
        return {
            "left": _top([s.weight for s in layout.left]),
            "right": _top([s.weight for s in layout.right]),
        }
    if layout.kind == "summary":
        return {}
    return {"both": _top([s.weight for s in layout.all_sets()])}


def session_totals(entries: Sequence[SessionExercise]) -> SessionTotals:
    """
    Roll up a session.

    total_sets counts each unilateral set twice (both limbs performed it).
    A non-finite volume total is reported as 0.

    Args:
        entries: Session entries in order

    Returns:
        SessionTotals
    """
    total_sets = 0
    total_volume = 0.0
    for entry in entries:
        total_sets += entry.layout.total_sets()
        total_volume += record_volume(entry)

    if not math.isfinite(total_volume):
        total_volume = 0.0

    return SessionTotals(
        total_exercises=len(entries),
        total_sets=total_sets,
        total_volume=total_volume,
    )


def history_volume(records: Sequence[WorkoutRecord]) -> float:
    """Σ volume across stored records (0 if non-finite)."""
    total = sum(record_volume(r) for r in records)
    return total if math.isfinite(total) else 0.0

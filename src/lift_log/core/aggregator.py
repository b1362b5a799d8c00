"""
Set aggregator: previous per-set values for a new entry.

Given an exercise, the movement layout the user is about to log and the
number of sets, rebuild "previous weight / previous reps" for every set
slot from the most recent record.  The stored layout may differ from the
requested one (the user switched between one- and two-sided logging, or
changed the set count); the reconciliation rules below keep a sensible
reference value in every slot the old record can fill.

Rules by (stored, requested) layout:
  same layout          copy per index up to min(requested, stored) sets
  unilateral -> bilat  per index: max of the two side weights, left reps
                       preferred; a single present side is used as is
  bilateral -> unilat  mirror each stored set onto both sides
  summary -> any       every weight slot = stored heaviest weight, reps blank
"""

from .models import (
    BilateralLayout,
    BilateralPrevious,
    MovementKind,
    PerformedSet,
    PreviousSet,
    PreviousSets,
    UnilateralLayout,
    UnilateralPrevious,
    WorkoutRecord,
)
from .record_store import RecordStore


def _blanks(count: int) -> list[PreviousSet]:
    return [PreviousSet() for _ in range(count)]


def _empty(movement: MovementKind, count: int) -> PreviousSets:
    if movement == "unilateral":
        return UnilateralPrevious(left=_blanks(count), right=_blanks(count))
    return BilateralPrevious(sets=_blanks(count))


def _copy(sets: list[PerformedSet], count: int) -> list[PreviousSet]:
    """Per-index copy, blank beyond the stored length."""
    out = _blanks(count)
    for i, s in enumerate(sets[:count]):
        out[i] = PreviousSet(weight=s.weight, reps=s.reps)
    return out


def _collapse_sides(layout: UnilateralLayout, count: int) -> list[PreviousSet]:
    """Fold left/right into one column: heavier side's weight, left reps first."""
    out = _blanks(count)
    for i in range(count):
        left = layout.left[i] if i < len(layout.left) else None
        right = layout.right[i] if i < len(layout.right) else None
        if left is not None and right is not None:
            out[i] = PreviousSet(
                weight=max(left.weight, right.weight),
                reps=left.reps if left.reps else right.reps,
            )
        elif left is not None:
            out[i] = PreviousSet(weight=left.weight, reps=left.reps)
        elif right is not None:
            out[i] = PreviousSet(weight=right.weight, reps=right.reps)
    return out


def previous_sets_from_record(
    record: WorkoutRecord,
    movement: MovementKind,
    set_count: int,
) -> PreviousSets:
    """
    Reconcile one stored record into previous values for the requested layout.

    Args:
        record: Most recent record of the exercise
        movement: "bilateral" or "unilateral" (layout being logged now)
        set_count: Number of set slots to fill

    Returns:
        BilateralPrevious or UnilateralPrevious with exactly ``set_count``
        slots per side
    """
    count = max(0, set_count)
    layout = record.layout

    if layout.kind == "summary":
        filled = [PreviousSet(weight=record.heaviest_weight) for _ in range(count)]
        if movement == "unilateral":
            return UnilateralPrevious(left=filled, right=list(filled))
        return BilateralPrevious(sets=filled)

    if movement == "unilateral":
        if isinstance(layout, UnilateralLayout):
            return UnilateralPrevious(
                left=_copy(layout.left, count),
                right=_copy(layout.right, count),
            )
        mirrored = _copy(layout.sets, count)
        return UnilateralPrevious(left=mirrored, right=list(mirrored))

    if isinstance(layout, BilateralLayout):
        return BilateralPrevious(sets=_copy(layout.sets, count))
    return BilateralPrevious(sets=_collapse_sides(layout, count))


def compute_previous_sets(
    store: RecordStore,
    exercise_name: str | None,
    movement: MovementKind,
    set_count: int,
) -> PreviousSets:
    """
    Previous per-set (weight, reps) for a new entry of ``exercise_name``.

    Without a name or without history, every slot is blank.

    Args:
        store: Record store to read
        exercise_name: Exercise being logged (may be empty while choosing)
        movement: "bilateral" or "unilateral"
        set_count: Requested number of sets

    Returns:
        Previous values shaped like ``movement`` with ``set_count`` slots
    """
    if movement not in ("bilateral", "unilateral"):
        raise ValueError(f"Invalid movement: {movement!r}")

    count = max(0, set_count)
    last = store.most_recent_record(exercise_name) if exercise_name else None
    if last is None:
        return _empty(movement, count)
    return previous_sets_from_record(last, movement, count)

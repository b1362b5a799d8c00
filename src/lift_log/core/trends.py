"""
Trend analysis: heaviest lifts and deltas against history.

All functions are pure reads of the RecordStore.
"""

from .config import DELTA_DECIMALS
from .models import (
    EntryComparison,
    LiftSnapshot,
    SessionExercise,
    Trend,
    WorkoutRecord,
    heaviest_with_reps,
)
from .record_store import RecordStore

__all__ = [
    "best_lift",
    "compare_entry",
    "delta_against_best",
    "heaviest_with_reps",
    "last_lift",
    "snapshot",
    "trend_against_last",
]


def _round_delta(value: float) -> float:
    return round(value, DELTA_DECIMALS)


def snapshot(record: WorkoutRecord) -> LiftSnapshot:
    """Summarise a record as its heaviest lift."""
    weight, reps = heaviest_with_reps(record)
    return LiftSnapshot(record_id=record.id, date=record.date, weight=weight, reps=reps)


def last_lift(store: RecordStore, exercise_name: str) -> LiftSnapshot | None:
    """Heaviest lift of the most recent record, or None without history."""
    record = store.most_recent_record(exercise_name)
    return snapshot(record) if record is not None else None


def best_lift(store: RecordStore, exercise_name: str) -> LiftSnapshot | None:
    """Heaviest lift of the all-time best record, or None without history."""
    record = store.best_record(exercise_name)
    return snapshot(record) if record is not None else None


def trend_against_last(
    store: RecordStore,
    exercise_name: str,
    candidate_heaviest_weight: float,
) -> Trend:
    """
    Compare a new heaviest weight with the last session's heaviest weight.

    Returns:
        Trend("no-history") when the exercise has no records, otherwise
        "up" / "down" / "same" with the signed delta (2 decimals)
    """
    last = store.most_recent_record(exercise_name)
    if last is None:
        return Trend(direction="no-history", delta=0.0)

    delta = _round_delta(candidate_heaviest_weight - last.heaviest_weight)
    if delta > 0:
        return Trend(direction="up", delta=delta)
    if delta < 0:
        return Trend(direction="down", delta=delta)
    return Trend(direction="same", delta=0.0)


def delta_against_best(
    store: RecordStore,
    exercise_name: str,
    candidate_heaviest_weight: float,
) -> float | None:
    """Signed difference to the all-time best weight, or None without history."""
    best = store.best_record(exercise_name)
    if best is None:
        return None
    return _round_delta(candidate_heaviest_weight - best.heaviest_weight)


def compare_entry(store: RecordStore, entry: SessionExercise) -> EntryComparison:
    """Collect last/best snapshots and both deltas for a session entry."""
    return EntryComparison(
        name=entry.name,
        heaviest_weight=entry.heaviest_weight,
        last=last_lift(store, entry.name),
        best=best_lift(store, entry.name),
        trend=trend_against_last(store, entry.name, entry.heaviest_weight),
        delta_best=delta_against_best(store, entry.name, entry.heaviest_weight),
    )

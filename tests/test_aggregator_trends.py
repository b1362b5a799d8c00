"""
Tests for the set aggregator and the trend analyzer.

Expected values are hand-computed; each reconciliation rule between the
stored and the requested layout gets its own case.
"""

from datetime import datetime

import pytest

from lift_log.core.aggregator import compute_previous_sets
from lift_log.core.models import (
    BilateralLayout,
    PerformedSet,
    PreviousSet,
    SessionExercise,
    SummaryLayout,
    UnilateralLayout,
    WorkoutRecord,
)
from lift_log.core.record_store import RecordStore
from lift_log.core.trends import (
    compare_entry,
    delta_against_best,
    heaviest_with_reps,
    trend_against_last,
)


def _sets(*pairs: tuple[int, float]) -> list[PerformedSet]:
    return [PerformedSet(reps=r, weight=w) for r, w in pairs]


def _record(rid: str, layout, day: int = 1) -> WorkoutRecord:
    return WorkoutRecord.build(
        id=rid,
        date=datetime(2026, 2, day, 9, 30),
        category="lower body",
        equipment="dumbbells",
        layout=layout,
    )


def _store_with(name: str, *records: WorkoutRecord) -> RecordStore:
    store = RecordStore()
    for r in records:
        store.add_record(name, r)
    return store


def _entry(name: str, *pairs: tuple[int, float]) -> SessionExercise:
    layout = BilateralLayout(sets=_sets(*pairs))
    weights = [w for _, w in pairs]
    return SessionExercise(
        id="tmp",
        name=name,
        category="push",
        equipment="barbell",
        layout=layout,
        heaviest_weight=max(weights),
        heaviest_set_count=weights.count(max(weights)),
    )


# ===========================================================================
# aggregator.py
# ===========================================================================

class TestNoHistory:
    """Without history every slot is blank."""

    def test_unknown_exercise_bilateral(self):
        prev = compute_previous_sets(RecordStore(), "Bench Press", "bilateral", 3)
        assert prev.kind == "bilateral"
        assert prev.sets == [PreviousSet()] * 3
        assert all(p.is_blank for p in prev.sets)

    def test_unknown_exercise_unilateral(self):
        prev = compute_previous_sets(RecordStore(), "Lunge", "unilateral", 2)
        assert prev.left == [PreviousSet(), PreviousSet()]
        assert prev.right == [PreviousSet(), PreviousSet()]

    def test_no_name(self):
        prev = compute_previous_sets(RecordStore(), "", "bilateral", 2)
        assert len(prev.sets) == 2

    def test_invalid_movement(self):
        with pytest.raises(ValueError):
            compute_previous_sets(RecordStore(), "Lunge", "sideways", 2)


class TestSameLayout:
    """Copy per index up to min(requested, stored)."""

    def test_more_sets_requested_pads_with_blanks(self):
        store = _store_with("Squat", _record("a", BilateralLayout(sets=_sets((5, 100), (5, 105)))))
        prev = compute_previous_sets(store, "Squat", "bilateral", 3)
        assert prev.sets == [
            PreviousSet(weight=100, reps=5),
            PreviousSet(weight=105, reps=5),
            PreviousSet(),
        ]

    def test_fewer_sets_requested_truncates(self):
        store = _store_with("Squat", _record("a", BilateralLayout(sets=_sets((5, 100), (5, 105)))))
        prev = compute_previous_sets(store, "Squat", "bilateral", 1)
        assert prev.sets == [PreviousSet(weight=100, reps=5)]

    def test_unilateral_copies_each_side(self):
        layout = UnilateralLayout(left=_sets((10, 20)), right=_sets((9, 22)))
        store = _store_with("Lunge", _record("a", layout))
        prev = compute_previous_sets(store, "Lunge", "unilateral", 1)
        assert prev.left == [PreviousSet(weight=20, reps=10)]
        assert prev.right == [PreviousSet(weight=22, reps=9)]

    def test_uses_most_recent_record(self):
        store = _store_with(
            "Squat",
            _record("new", BilateralLayout(sets=_sets((3, 120))), day=10),
            _record("old", BilateralLayout(sets=_sets((5, 100))), day=1),
        )
        prev = compute_previous_sets(store, "Squat", "bilateral", 1)
        assert prev.sets == [PreviousSet(weight=120, reps=3)]


class TestLayoutSwitch:
    """Reconciliation when the stored layout differs from the requested one."""

    def test_bilateral_mirrored_to_both_sides(self):
        store = _store_with("Split Squat", _record("a", BilateralLayout(sets=_sets((8, 40), (8, 42)))))
        prev = compute_previous_sets(store, "Split Squat", "unilateral", 2)
        expected = [PreviousSet(weight=40, reps=8), PreviousSet(weight=42, reps=8)]
        assert prev.kind == "unilateral"
        assert prev.left == expected
        assert prev.right == expected

    def test_unilateral_collapsed_heavier_side_wins(self):
        layout = UnilateralLayout(left=_sets((10, 60)), right=_sets((10, 50)))
        store = _store_with("Row", _record("a", layout))
        prev = compute_previous_sets(store, "Row", "bilateral", 1)
        assert prev.sets == [PreviousSet(weight=60, reps=10)]

    def test_collapse_prefers_left_reps(self):
        layout = UnilateralLayout(left=_sets((12, 20)), right=_sets((8, 25)))
        store = _store_with("Row", _record("a", layout))
        prev = compute_previous_sets(store, "Row", "bilateral", 1)
        assert prev.sets == [PreviousSet(weight=25, reps=12)]

    def test_collapse_single_present_side(self):
        layout = UnilateralLayout(left=_sets((10, 20), (10, 22)), right=_sets((10, 21)))
        store = _store_with("Row", _record("a", layout))
        prev = compute_previous_sets(store, "Row", "bilateral", 3)
        assert prev.sets == [
            PreviousSet(weight=21, reps=10),
            PreviousSet(weight=22, reps=10),
            PreviousSet(),
        ]

    def test_summary_record_fills_weights_only(self):
        legacy = WorkoutRecord(
            id="legacy",
            date=datetime(2025, 12, 1),
            category="push",
            equipment="barbell",
            layout=SummaryLayout(set_count=2),
            heaviest_weight=70,
            heaviest_set_count=0,
        )
        store = _store_with("Bench Press", legacy)

        prev = compute_previous_sets(store, "Bench Press", "unilateral", 3)

        assert prev.left == [PreviousSet(weight=70)] * 3
        assert prev.right == [PreviousSet(weight=70)] * 3


# ===========================================================================
# trends.py
# ===========================================================================

class TestHeaviestWithReps:
    """Reps from the first set reaching the max, left before right."""

    def test_first_occurrence(self):
        record = _record("a", BilateralLayout(sets=_sets((8, 40), (6, 45), (4, 45))))
        assert heaviest_with_reps(record) == (45, 6)

    def test_left_side_before_right(self):
        layout = UnilateralLayout(left=_sets((10, 20), (7, 25)), right=_sets((9, 25)))
        assert heaviest_with_reps(_record("a", layout)) == (25, 7)

    def test_summary_record(self):
        legacy = WorkoutRecord(
            id="legacy",
            date=datetime(2025, 12, 1),
            category="push",
            equipment="barbell",
            layout=SummaryLayout(),
            heaviest_weight=70,
            heaviest_set_count=0,
        )
        assert heaviest_with_reps(legacy) == (70, None)


class TestTrend:
    """Direction and delta versus the last session."""

    def test_bench_press_up_five(self):
        store = _store_with("Bench Press", _record("a", BilateralLayout(sets=_sets((8, 60)))))
        trend = trend_against_last(store, "Bench Press", 65)
        assert trend.direction == "up"
        assert trend.delta == 5

    def test_down(self):
        store = _store_with("Bench Press", _record("a", BilateralLayout(sets=_sets((8, 60)))))
        trend = trend_against_last(store, "Bench Press", 57.5)
        assert trend.direction == "down"
        assert trend.delta == -2.5

    def test_same(self):
        store = _store_with("Bench Press", _record("a", BilateralLayout(sets=_sets((8, 60)))))
        assert trend_against_last(store, "Bench Press", 60).direction == "same"

    def test_no_history(self):
        trend = trend_against_last(RecordStore(), "Bench Press", 60)
        assert trend.direction == "no-history"
        assert trend.delta == 0

    def test_delta_rounded_to_two_decimals(self):
        store = _store_with("Curl", _record("a", BilateralLayout(sets=_sets((10, 10.1)))))
        assert trend_against_last(store, "Curl", 10.3).delta == 0.2


class TestDeltaAgainstBest:
    """Signed difference to the all-time best, None without history."""

    def test_no_history(self):
        assert delta_against_best(RecordStore(), "Squat", 100) is None

    def test_below_best(self):
        store = _store_with(
            "Squat",
            _record("a", BilateralLayout(sets=_sets((5, 120))), day=1),
            _record("b", BilateralLayout(sets=_sets((5, 100))), day=2),
        )
        assert delta_against_best(store, "Squat", 110) == -10


class TestCompareEntry:
    """Everything the review screen needs for one entry."""

    def test_with_history(self):
        store = _store_with(
            "Bench Press",
            _record("a", BilateralLayout(sets=_sets((5, 70))), day=1),
            _record("b", BilateralLayout(sets=_sets((8, 60))), day=8),
        )
        cmp = compare_entry(store, _entry("Bench Press", (8, 60), (6, 65)))

        assert cmp.heaviest_weight == 65
        assert cmp.last.record_id == "b"
        assert cmp.last.reps == 8
        assert cmp.best.record_id == "a"
        assert cmp.trend.direction == "up"
        assert cmp.trend.delta == 5
        assert cmp.delta_best == -5

    def test_without_history(self):
        cmp = compare_entry(RecordStore(), _entry("Bench Press", (8, 60)))
        assert cmp.last is None
        assert cmp.best is None
        assert cmp.trend.direction == "no-history"
        assert cmp.delta_best is None

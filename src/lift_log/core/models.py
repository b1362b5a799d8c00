"""
Data models for lift-log.

All core dataclasses representing performed sets, workout records,
per-exercise histories and in-progress session entries.

A record's per-set data is held in exactly one PerformanceLayout variant,
resolved once when the record is built or loaded; downstream code
dispatches on ``layout.kind`` instead of probing for optional fields.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, Union

from .config import SPECIFIC_MUSCLE

LayoutKind = Literal["bilateral", "unilateral", "summary"]
MovementKind = Literal["bilateral", "unilateral"]
TrendDirection = Literal["up", "down", "same", "no-history"]


@dataclass(frozen=True)
class PerformedSet:
    """A single completed set: reps at a weight in kg."""

    reps: int
    weight: float

    def __post_init__(self) -> None:
        """Validate set data."""
        if self.reps <= 0:
            raise ValueError(f"reps must be positive, got {self.reps}")
        if self.weight < 0:
            raise ValueError(f"weight must be non-negative, got {self.weight}")

    @property
    def volume(self) -> float:
        """reps × weight."""
        return self.reps * self.weight


@dataclass
class BilateralLayout:
    """Both limbs work together: one reps/weight pair per set."""

    sets: list[PerformedSet] = field(default_factory=list)

    kind: LayoutKind = field(default="bilateral", init=False, repr=False)

    @property
    def set_count(self) -> int:
        return len(self.sets)

    def all_sets(self) -> list[PerformedSet]:
        return list(self.sets)

    def total_sets(self) -> int:
        return len(self.sets)


@dataclass
class UnilateralLayout:
    """
    One limb at a time: parallel left/right sequences.

    Entries built by the session builder always have equal-length sides.
    Lengths are not enforced here so that older stored data with a
    missing side value can still be loaded and reconciled.
    """

    left: list[PerformedSet] = field(default_factory=list)
    right: list[PerformedSet] = field(default_factory=list)

    kind: LayoutKind = field(default="unilateral", init=False, repr=False)

    @property
    def set_count(self) -> int:
        return max(len(self.left), len(self.right))

    def all_sets(self) -> list[PerformedSet]:
        """Left side first, then right side."""
        return list(self.left) + list(self.right)

    def total_sets(self) -> int:
        # Both limbs performed the sets
        return len(self.left) + len(self.right)


@dataclass
class SummaryLayout:
    """
    Legacy record shape with no per-set data, only an aggregate heaviest weight.

    ``set_count`` is the declared number of sets when it was stored.
    """

    set_count: int = 0

    kind: LayoutKind = field(default="summary", init=False, repr=False)

    def all_sets(self) -> list[PerformedSet]:
        return []

    def total_sets(self) -> int:
        return self.set_count


PerformanceLayout = Union[BilateralLayout, UnilateralLayout, SummaryLayout]


def heaviest_of(layout: PerformanceLayout) -> tuple[float, int]:
    """
    Return (heaviest weight, number of sets at that weight) for a layout.

    Sides are pooled for unilateral layouts.  A layout without sets
    yields (0.0, 0).
    """
    weights = [s.weight for s in layout.all_sets()]
    if not weights:
        return 0.0, 0
    top = max(weights)
    return top, sum(1 for w in weights if w == top)


def to_naive_local(value: datetime) -> datetime:
    """Convert an offset-aware datetime to naive local time; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def heaviest_with_reps(record: "WorkoutRecord | SessionExercise") -> tuple[float, int | None]:
    """
    Return the heaviest weight of a record and the reps done at it.

    Sets are flattened left to right, left side before right side, and
    the reps come from the first set reaching the max.  Records without
    per-set data return their stored heaviest weight and None.

    Args:
        record: Stored record or session entry

    Returns:
        (weight, reps or None)
    """
    sets = record.layout.all_sets()
    if not sets:
        return record.heaviest_weight, None

    weights = [s.weight for s in sets]
    top = max(weights)
    first = weights.index(top)
    return top, sets[first].reps


@dataclass
class WorkoutRecord:
    """
    One exercise as performed in one committed session.

    Invariant: ``heaviest_weight`` is the max weight across all sets in
    ``layout`` and ``heaviest_set_count`` is how many sets (both sides
    pooled) hit it.  Summary layouts keep their stored values.
    """

    id: str
    date: datetime
    category: str
    equipment: str
    layout: PerformanceLayout
    heaviest_weight: float
    heaviest_set_count: int
    muscle: str | None = None  # only for category "specific muscle"

    def __post_init__(self) -> None:
        """Validate record data."""
        if not self.id:
            raise ValueError("record id must be non-empty")
        if self.heaviest_weight < 0:
            raise ValueError("heaviest_weight must be non-negative")
        if self.heaviest_set_count < 0:
            raise ValueError("heaviest_set_count must be non-negative")
        if self.category != SPECIFIC_MUSCLE:
            self.muscle = None
        self.date = to_naive_local(self.date)

    @classmethod
    def build(
        cls,
        id: str,
        date: datetime,
        category: str,
        equipment: str,
        layout: PerformanceLayout,
        muscle: str | None = None,
    ) -> "WorkoutRecord":
        """Create a record whose heaviest fields are derived from ``layout``."""
        heaviest, count = heaviest_of(layout)
        return cls(
            id=id,
            date=date,
            category=category,
            equipment=equipment,
            layout=layout,
            heaviest_weight=heaviest,
            heaviest_set_count=count,
            muscle=muscle,
        )

    @property
    def movement(self) -> LayoutKind:
        return self.layout.kind

    @property
    def set_count(self) -> int:
        """Declared sets per side."""
        return self.layout.set_count


@dataclass
class ExerciseHistory:
    """
    All records for one exercise plus the cached all-time best weight.

    ``records`` keeps insertion order; that order is the tie-break
    whenever two records share a date.
    """

    best_weight: float = 0.0
    records: list[WorkoutRecord] = field(default_factory=list)

    def find(self, record_id: str) -> WorkoutRecord | None:
        """Return the record with ``record_id`` or None."""
        for record in self.records:
            if record.id == record_id:
                return record
        return None

    def recompute_best(self) -> None:
        """Reset ``best_weight`` to the max heaviest weight over records (0 if none)."""
        self.best_weight = max((r.heaviest_weight for r in self.records), default=0.0)


@dataclass
class SessionExercise:
    """
    An exercise entry in the session being built.

    Same shape as WorkoutRecord plus the exercise ``name``.  ``id`` is
    transient; a persisted id is assigned on commit.
    """

    id: str
    name: str
    category: str
    equipment: str
    layout: PerformanceLayout
    heaviest_weight: float
    heaviest_set_count: int
    muscle: str | None = None
    date: datetime | None = None

    @property
    def movement(self) -> LayoutKind:
        return self.layout.kind

    @property
    def set_count(self) -> int:
        return self.layout.set_count

    def to_record(self, date: datetime, record_id: str) -> WorkoutRecord:
        """Convert to a WorkoutRecord for the store."""
        return WorkoutRecord(
            id=record_id,
            date=date,
            category=self.category,
            equipment=self.equipment,
            layout=self.layout,
            heaviest_weight=self.heaviest_weight,
            heaviest_set_count=self.heaviest_set_count,
            muscle=self.muscle,
        )


@dataclass(frozen=True)
class PreviousSet:
    """
    Reference values from the last session for one set slot.

    None means unknown (nothing to show).
    """

    weight: float | None = None
    reps: int | None = None

    @property
    def is_blank(self) -> bool:
        return self.weight is None and self.reps is None


@dataclass
class BilateralPrevious:
    """Previous values for a bilateral entry, one per requested set."""

    sets: list[PreviousSet]

    kind: MovementKind = field(default="bilateral", init=False, repr=False)


@dataclass
class UnilateralPrevious:
    """Previous values for a unilateral entry, per side."""

    left: list[PreviousSet]
    right: list[PreviousSet]

    kind: MovementKind = field(default="unilateral", init=False, repr=False)


PreviousSets = Union[BilateralPrevious, UnilateralPrevious]


@dataclass(frozen=True)
class LiftSnapshot:
    """Heaviest lift of one stored record, with the reps done at it."""

    record_id: str
    date: datetime
    weight: float
    reps: int | None


@dataclass(frozen=True)
class Trend:
    """Direction and signed delta of a new heaviest lift versus the last session."""

    direction: TrendDirection
    delta: float = 0.0


@dataclass(frozen=True)
class EntryComparison:
    """Everything the review screen shows for one session entry."""

    name: str
    heaviest_weight: float
    last: LiftSnapshot | None
    best: LiftSnapshot | None
    trend: Trend
    delta_best: float | None


@dataclass(frozen=True)
class SessionTotals:
    """Session-wide roll-up."""

    total_exercises: int = 0
    total_sets: int = 0
    total_volume: float = 0.0  # kg·reps

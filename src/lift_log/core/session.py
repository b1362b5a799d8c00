"""
Session builder: the in-progress workout.

A SessionBuilder is an explicit value owned by the caller (CLI, tests).
Entries are validated when added, kept in order, rolled up into session
totals, and committed to a RecordStore in one step.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Sequence

from .coerce import to_float, to_int
from .config import SPECIFIC_MUSCLE
from .errors import EmptySessionError, ValidationError
from .metrics import session_totals
from .models import (
    BilateralLayout,
    MovementKind,
    PerformedSet,
    SessionExercise,
    SessionTotals,
    UnilateralLayout,
    WorkoutRecord,
    heaviest_of,
)
from .record_store import RecordStore

RawSet = Sequence[Any]  # (reps, weight) as typed by the user, possibly strings


def new_record_id() -> str:
    """Fresh unique id for an entry or record."""
    return uuid.uuid4().hex


@dataclass
class EntryInput:
    """
    Raw input for one exercise entry.

    ``sets`` is used for bilateral movements, ``left``/``right`` for
    unilateral ones.  Values may be unparsed strings.
    """

    name: str
    category: str
    equipment: str
    movement: MovementKind
    set_count: Any
    sets: list[RawSet] = field(default_factory=list)
    left: list[RawSet] = field(default_factory=list)
    right: list[RawSet] = field(default_factory=list)
    muscle: str | None = None


def _parse_side(raw_sets: Sequence[RawSet], n: int, side: str) -> list[PerformedSet]:
    """Coerce and validate one side's raw (reps, weight) pairs."""
    where = f" on the {side} side" if side else ""
    if len(raw_sets) != n:
        raise ValidationError(
            f"Expected {n} set(s){where}, got {len(raw_sets)}. "
            "Fill reps & weight for every set."
        )

    parsed: list[PerformedSet] = []
    for i, raw in enumerate(raw_sets, 1):
        if len(raw) != 2:
            raise ValidationError(f"Set {i}{where}: expected a (reps, weight) pair")
        reps = to_int(raw[0])
        weight = to_float(raw[1])
        if reps <= 0:
            raise ValidationError(f"Set {i}{where}: reps must be at least 1")
        if weight < 0:
            raise ValidationError(f"Set {i}{where}: weight must be non-negative")
        parsed.append(PerformedSet(reps=reps, weight=weight))
    return parsed


def validate_and_build_entry(
    entry: EntryInput,
    date: datetime | None = None,
) -> SessionExercise:
    """
    Validate raw entry input and build a SessionExercise.

    Heaviest weight and its set count pool both sides for unilateral
    movements.

    Args:
        entry: Raw entry input
        date: Session date carried on the entry, if already known

    Returns:
        Fully formed SessionExercise with a transient id

    Raises:
        ValidationError: Missing exercise name, set count below 1, wrong
            number of sets on any required side, reps <= 0 or weight < 0
    """
    name = (entry.name or "").strip()
    if not name:
        raise ValidationError("Choose an exercise.")

    if entry.movement not in ("bilateral", "unilateral"):
        raise ValidationError(
            f"Invalid movement: {entry.movement!r}. Must be 'bilateral' or 'unilateral'"
        )

    n = to_int(entry.set_count)
    if n < 1:
        raise ValidationError("Number of sets must be at least 1")

    if entry.movement == "unilateral":
        layout = UnilateralLayout(
            left=_parse_side(entry.left, n, "left"),
            right=_parse_side(entry.right, n, "right"),
        )
    else:
        layout = BilateralLayout(sets=_parse_side(entry.sets, n, ""))

    heaviest, count = heaviest_of(layout)
    category = (entry.category or "").strip().lower()

    return SessionExercise(
        id=new_record_id(),
        name=name,
        category=category,
        equipment=(entry.equipment or "").strip().lower(),
        layout=layout,
        heaviest_weight=heaviest,
        heaviest_set_count=count,
        muscle=entry.muscle if category == SPECIFIC_MUSCLE else None,
        date=date,
    )


class SessionBuilder:
    """
    Ordered collection of entries for one sitting.

    Args:
        session_date: When the session took place; may be set later
    """

    def __init__(self, session_date: datetime | None = None):
        self.session_date = session_date
        self._entries: list[SessionExercise] = []

    @property
    def entries(self) -> list[SessionExercise]:
        """Copy of the current entries, in the order they were added."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def is_empty(self) -> bool:
        return not self._entries

    def validate_and_build_entry(self, entry: EntryInput) -> SessionExercise:
        """Build an entry stamped with this session's date (does not add it)."""
        return validate_and_build_entry(entry, self.session_date)

    def add_entry(self, entry: SessionExercise) -> int:
        """
        Append an entry.

        Returns:
            Position of the new entry
        """
        self._entries.append(entry)
        return len(self._entries) - 1

    def add(self, entry: EntryInput) -> SessionExercise:
        """Validate, build and append in one step."""
        built = self.validate_and_build_entry(entry)
        self.add_entry(built)
        return built

    def remove_entry(self, index: int) -> SessionExercise:
        """
        Remove the entry at ``index`` (0-based position).

        Raises:
            IndexError: If index is out of range
        """
        if index < 0 or index >= len(self._entries):
            raise IndexError(
                f"Entry index {index} out of range (0–{len(self._entries) - 1})"
            )
        return self._entries.pop(index)

    def clear(self) -> None:
        self._entries.clear()

    def totals(self) -> SessionTotals:
        """Exercise count, set count (unilateral x2) and volume."""
        return session_totals(self._entries)

    def commit(
        self,
        store: RecordStore,
        date: datetime | None = None,
    ) -> list[tuple[str, WorkoutRecord]]:
        """
        Write every entry to ``store`` as a new WorkoutRecord and clear the session.

        Args:
            store: Record store receiving the records
            date: Session date; defaults to ``session_date``

        Returns:
            (exercise name, record) pairs in entry order

        Raises:
            EmptySessionError: No entries, or no date; the store is untouched
        """
        when = date if date is not None else self.session_date
        if not self._entries:
            raise EmptySessionError("Add at least one exercise before saving.")
        if when is None:
            raise EmptySessionError("Missing session date/time.")

        committed: list[tuple[str, WorkoutRecord]] = []
        for entry in self._entries:
            record = entry.to_record(when, new_record_id())
            store.add_record(entry.name, record)
            committed.append((entry.name, record))

        self._entries.clear()
        return committed

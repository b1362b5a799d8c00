"""
In-memory record store: exercise name -> ExerciseHistory.

The store is the single long-lived owner of workout history.  Only the
session commit step and the edit/delete operations mutate it; analytics
read it through ``most_recent_record`` and ``best_record``.

Operations on an unknown exercise name are no-ops that return an empty
or default result.  Persisting the store after a mutation is the
caller's job (see ``lift_log.io.history_store``).
"""

import dataclasses
from datetime import datetime
from typing import Any, Iterator

from .models import ExerciseHistory, WorkoutRecord, heaviest_of, heaviest_with_reps


class RecordStore:
    """
    Keyed collection of per-exercise histories.

    A history entry is created lazily by the first ``add_record`` for an
    exercise and removed entirely when its last record is deleted, so
    ``name in store`` holds iff that exercise has at least one record.
    """

    def __init__(self, histories: dict[str, ExerciseHistory] | None = None):
        self._histories: dict[str, ExerciseHistory] = dict(histories or {})

    def __contains__(self, exercise_name: object) -> bool:
        return exercise_name in self._histories

    def __iter__(self) -> Iterator[str]:
        return iter(self._histories)

    def __len__(self) -> int:
        return len(self._histories)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RecordStore):
            return NotImplemented
        return self._histories == other._histories

    def exercise_names(self) -> list[str]:
        """Exercise names with history, alphabetically."""
        return sorted(self._histories, key=str.lower)

    def history(self, exercise_name: str) -> ExerciseHistory | None:
        """Return the history for an exercise, or None if it has no records."""
        return self._histories.get(exercise_name)

    def histories(self) -> dict[str, ExerciseHistory]:
        """Shallow copy of the underlying mapping (for serialization)."""
        return dict(self._histories)

    def best_weight(self, exercise_name: str) -> float:
        hist = self._histories.get(exercise_name)
        return hist.best_weight if hist is not None else 0.0

    def records(self, exercise_name: str) -> list[WorkoutRecord]:
        """Records in insertion order (empty list for unknown exercises)."""
        hist = self._histories.get(exercise_name)
        return list(hist.records) if hist is not None else []

    def records_chronological(self, exercise_name: str) -> list[WorkoutRecord]:
        """Records oldest first; same-date records keep insertion order."""
        return sorted(self.records(exercise_name), key=lambda r: r.date)

    def records_newest_first(self, exercise_name: str) -> list[WorkoutRecord]:
        """
        Records newest first.

        Stable sort on date only, so records sharing a date stay in
        insertion order (earliest inserted first).
        """
        return sorted(self.records(exercise_name), key=lambda r: r.date, reverse=True)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_record(self, exercise_name: str, record: WorkoutRecord) -> None:
        """
        Append a record, creating the exercise history if needed.

        Raises:
            ValueError: If a record with the same id already exists for
                this exercise
        """
        hist = self._histories.get(exercise_name)
        if hist is None:
            hist = ExerciseHistory()
            self._histories[exercise_name] = hist
        elif hist.find(record.id) is not None:
            raise ValueError(
                f"Record {record.id!r} already exists for {exercise_name!r}"
            )

        hist.records.append(record)
        if record.heaviest_weight > hist.best_weight:
            hist.best_weight = record.heaviest_weight

    def delete_record(self, exercise_name: str, record_id: str) -> WorkoutRecord | None:
        """
        Remove a record by id.

        Deleting the last record removes the whole exercise entry.
        Otherwise ``best_weight`` is recomputed over the remaining records.
        Unknown exercise or id: no-op returning None, so repeating a
        delete is harmless.

        Returns:
            The removed record, or None if nothing matched
        """
        hist = self._histories.get(exercise_name)
        if hist is None:
            return None
        removed = hist.find(record_id)
        if removed is None:
            return None

        hist.records = [r for r in hist.records if r.id != record_id]
        if not hist.records:
            del self._histories[exercise_name]
        else:
            hist.recompute_best()
        return removed

    def edit_record(
        self,
        exercise_name: str,
        record_id: str,
        **changes: Any,
    ) -> WorkoutRecord | None:
        """
        Replace fields of a stored record, keeping its id.

        Behaves as delete, recompute, then add with the same id, so the
        best-weight invariant holds even when the edited weight drops.
        Unless the resulting layout is a summary layout, the heaviest
        fields are always re-derived from it; values passed for them are
        ignored.

        Args:
            exercise_name: Exercise the record belongs to
            record_id: Id of the record to edit
            **changes: WorkoutRecord fields to replace (``id`` excluded)

        Returns:
            The updated record, or None if the record was not found

        Raises:
            ValueError: If ``changes`` tries to change the id or names an
                unknown field
        """
        if "id" in changes and changes["id"] != record_id:
            raise ValueError("A record's id cannot be changed")
        changes.pop("id", None)

        valid = {f.name for f in dataclasses.fields(WorkoutRecord)}
        unknown = set(changes) - valid
        if unknown:
            raise ValueError(f"Unknown record fields: {sorted(unknown)}")

        hist = self._histories.get(exercise_name)
        if hist is None:
            return None
        original = hist.find(record_id)
        if original is None:
            return None

        updated = dataclasses.replace(original, **changes)
        if updated.layout.kind != "summary":
            heaviest, count = heaviest_of(updated.layout)
            updated = dataclasses.replace(
                updated, heaviest_weight=heaviest, heaviest_set_count=count
            )

        self.delete_record(exercise_name, record_id)
        self.add_record(exercise_name, updated)
        return updated

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def most_recent_record(self, exercise_name: str) -> WorkoutRecord | None:
        """
        Return the record with the latest date.

        Ties on date go to the record inserted first.
        """
        recent = self.records_newest_first(exercise_name)
        return recent[0] if recent else None

    def best_record(self, exercise_name: str) -> WorkoutRecord | None:
        """
        Return the most recent record whose heaviest weight equals the best weight.

        Scans newest to oldest, so when the best weight was hit more than
        once the latest achievement wins.
        """
        hist = self._histories.get(exercise_name)
        if hist is None:
            return None
        for record in self.records_newest_first(exercise_name):
            if record.heaviest_weight == hist.best_weight:
                return record
        return None

    def best_record_and_date(
        self, exercise_name: str
    ) -> tuple[WorkoutRecord, datetime, int | None] | None:
        """
        Return (best record, its date, reps at its heaviest set), or None.

        Reps are None for summary records that carry no per-set data.
        """
        record = self.best_record(exercise_name)
        if record is None:
            return None
        _, reps = heaviest_with_reps(record)
        return record, record.date, reps

    def heaviest_series(self, exercise_name: str) -> list[tuple[datetime, float]]:
        """(date, heaviest weight) per record, oldest first."""
        return [(r.date, r.heaviest_weight) for r in self.records_chronological(exercise_name)]

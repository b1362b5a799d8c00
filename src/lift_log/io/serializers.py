"""
JSON serialization for workout data models.

Handles conversion between dataclasses and JSON-compatible dicts, and
parsing of set strings typed on the command line.

Records are written in a compact snake_case shape that carries only the
arrays of their layout.  The camelCase shape of older exports
(``setWeights``, ``setWeightsL``, ``maxWeight``...) is still accepted on
load and resolved to a layout once.
"""

import math
import re
from datetime import datetime
from typing import Any

from ..core.errors import ValidationError
from ..core.models import (
    BilateralLayout,
    ExerciseHistory,
    PerformanceLayout,
    PerformedSet,
    SummaryLayout,
    UnilateralLayout,
    WorkoutRecord,
    to_naive_local,
)
from ..core.record_store import RecordStore

__all__ = [
    "ValidationError",
    "dict_to_history",
    "dict_to_record",
    "dict_to_store",
    "format_datetime",
    "history_to_dict",
    "parse_datetime",
    "parse_sets_string",
    "record_to_dict",
    "store_to_dict",
]

# Legacy camelCase keys accepted on load, by snake_case name
_LEGACY_KEYS: dict[str, str] = {
    "movement_type": "movementType",
    "set_reps": "setReps",
    "set_weights": "setWeights",
    "set_reps_l": "setRepsL",
    "set_weights_l": "setWeightsL",
    "set_reps_r": "setRepsR",
    "set_weights_r": "setWeightsR",
    "max_weight": "maxWeight",
    "max_weight_set_count": "maxWeightSetCount",
    "best_weight": "bestWeight",
}


def _get(data: dict[str, Any], key: str, default: Any = None) -> Any:
    """Read ``key`` or its legacy camelCase spelling."""
    if key in data:
        return data[key]
    legacy = _LEGACY_KEYS.get(key)
    if legacy is not None and legacy in data:
        return data[legacy]
    return default


def parse_datetime(value: str) -> datetime:
    """
    Parse an ISO date or date-time string to a naive datetime.

    Accepts "YYYY-MM-DD", "YYYY-MM-DDTHH:MM" and full ISO strings; a
    timezone offset is converted to local time and dropped.

    Raises:
        ValidationError: If the string is not a valid ISO date/time
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Invalid date: {value!r}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise ValidationError(
            f"Invalid date: {value}. Expected YYYY-MM-DD or YYYY-MM-DDTHH:MM"
        ) from e
    return to_naive_local(parsed)


def format_datetime(value: datetime) -> str:
    """ISO string, minute precision when seconds are zero."""
    if value.second == 0 and value.microsecond == 0:
        return value.isoformat(timespec="minutes")
    return value.isoformat()


def _sets_to_lists(sets: list[PerformedSet]) -> tuple[list[int], list[float]]:
    return [s.reps for s in sets], [s.weight for s in sets]


def _lists_to_sets(reps: Any, weights: Any, side: str) -> list[PerformedSet] | None:
    """
    Pair parallel reps/weights lists into PerformedSets.

    Returns None when reps are missing or unusable (weights-only data).
    """
    if not isinstance(weights, list):
        return []
    if not isinstance(reps, list) or len(reps) < len(weights):
        return None
    try:
        pairs = [(int(r), float(w)) for r, w in zip(reps, weights)]
    except (TypeError, ValueError, OverflowError) as e:
        raise ValidationError(f"Invalid {side or 'set'} data: {e}") from e

    if any(r <= 0 for r, _ in pairs):
        return None
    if not all(math.isfinite(w) for _, w in pairs):
        raise ValidationError(f"Non-finite weight in {side or 'set'} data")
    if any(w < 0 for _, w in pairs):
        raise ValidationError(f"Negative weight in {side or 'set'} data")
    return [PerformedSet(reps=r, weight=w) for r, w in pairs]


def layout_to_dict(layout: PerformanceLayout) -> dict[str, Any]:
    """Convert a layout to its compact dict fields."""
    if isinstance(layout, UnilateralLayout):
        reps_l, weights_l = _sets_to_lists(layout.left)
        reps_r, weights_r = _sets_to_lists(layout.right)
        return {
            "movement_type": "unilateral",
            "sets": layout.set_count,
            "set_reps_l": reps_l,
            "set_weights_l": weights_l,
            "set_reps_r": reps_r,
            "set_weights_r": weights_r,
        }
    if isinstance(layout, BilateralLayout):
        reps, weights = _sets_to_lists(layout.sets)
        return {
            "movement_type": "bilateral",
            "sets": layout.set_count,
            "set_reps": reps,
            "set_weights": weights,
        }
    return {"movement_type": "summary", "sets": layout.set_count}


def dict_to_layout(data: dict[str, Any]) -> PerformanceLayout:
    """
    Resolve the stored per-set arrays of a record dict to one layout.

    Resolution order: unilateral arrays (or movement_type "unilateral"),
    then bilateral arrays, then a summary layout.  Weights stored without
    usable reps also resolve to a summary layout.

    Raises:
        ValidationError: If set values are out of range
    """
    movement = _get(data, "movement_type")
    weights_l = _get(data, "set_weights_l")
    weights_r = _get(data, "set_weights_r")
    weights = _get(data, "set_weights")
    declared = _get(data, "sets")

    has_uni = bool(weights_l) or bool(weights_r)
    has_bil = bool(weights)

    if has_uni or (movement == "unilateral" and not has_bil):
        left = _lists_to_sets(_get(data, "set_reps_l"), weights_l, "left")
        right = _lists_to_sets(_get(data, "set_reps_r"), weights_r, "right")
        if left is not None and right is not None and (left or right):
            return UnilateralLayout(left=left, right=right)
        count = max(len(weights_l or []), len(weights_r or []))
    elif has_bil:
        sets = _lists_to_sets(_get(data, "set_reps"), weights, "")
        if sets is not None and sets:
            return BilateralLayout(sets=sets)
        count = len(weights)
    else:
        count = 0

    if isinstance(declared, (int, float)) and not isinstance(declared, bool):
        if not math.isfinite(declared):
            raise ValidationError(f"Invalid set count: {declared}")
        count = int(declared)
    return SummaryLayout(set_count=max(0, count))


def record_to_dict(record: WorkoutRecord) -> dict[str, Any]:
    """
    Convert WorkoutRecord to JSON-compatible dict.

    Args:
        record: WorkoutRecord to convert

    Returns:
        Dict representation
    """
    d: dict[str, Any] = {
        "id": record.id,
        "date": format_datetime(record.date),
        "category": record.category,
        "equipment": record.equipment,
        "muscle": record.muscle,
    }
    d.update(layout_to_dict(record.layout))
    d["max_weight"] = record.heaviest_weight
    d["max_weight_set_count"] = record.heaviest_set_count
    return d


def dict_to_record(data: dict[str, Any]) -> WorkoutRecord:
    """
    Convert dict to WorkoutRecord.

    Heaviest fields are re-derived from the per-set data when present;
    summary records keep their stored aggregate.

    Args:
        data: Dict representation (snake_case or legacy camelCase)

    Returns:
        WorkoutRecord instance

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Record must be an object, got {type(data).__name__}")
    if data.get("id") in (None, ""):
        raise ValidationError("Record is missing 'id'")
    if "date" not in data:
        raise ValidationError(f"Record {data['id']} is missing 'date'")

    record_id = str(data["id"])
    try:
        layout = dict_to_layout(data)
        common = {
            "id": record_id,
            "date": parse_datetime(data["date"]),
            "category": str(data.get("category") or ""),
            "equipment": str(data.get("equipment") or ""),
            "layout": layout,
            "muscle": data.get("muscle") or None,
        }
        if layout.kind == "summary":
            heaviest = float(_get(data, "max_weight", 0.0) or 0.0)
            if not math.isfinite(heaviest):
                raise ValueError(f"max weight must be finite, got {heaviest}")
            return WorkoutRecord(
                heaviest_weight=heaviest,
                heaviest_set_count=int(_get(data, "max_weight_set_count", 0) or 0),
                **common,
            )
        return WorkoutRecord.build(**common)
    except (TypeError, ValueError, OverflowError) as e:
        raise ValidationError(f"Invalid record {record_id}: {e}") from e


def history_to_dict(history: ExerciseHistory) -> dict[str, Any]:
    """Convert ExerciseHistory to JSON-compatible dict."""
    return {
        "best_weight": history.best_weight,
        "records": [record_to_dict(r) for r in history.records],
    }


def dict_to_history(data: dict[str, Any]) -> ExerciseHistory:
    """
    Convert dict to ExerciseHistory.

    ``best_weight`` is recomputed from the records rather than trusted.

    Raises:
        ValidationError: If data is invalid or record ids repeat
    """
    if not isinstance(data, dict):
        raise ValidationError("History must be an object")
    raw_records = data.get("records", [])
    if not isinstance(raw_records, list):
        raise ValidationError("History 'records' must be a list")

    records = [dict_to_record(r) for r in raw_records]
    ids = [r.id for r in records]
    if len(ids) != len(set(ids)):
        raise ValidationError("Duplicate record ids in history")

    history = ExerciseHistory(records=records)
    history.recompute_best()
    return history


def store_to_dict(store: RecordStore) -> dict[str, Any]:
    """Convert RecordStore to {exercise name: history dict}."""
    return {name: history_to_dict(hist) for name, hist in store.histories().items()}


def dict_to_store(data: dict[str, Any]) -> RecordStore:
    """
    Convert {exercise name: history dict} to a RecordStore.

    Exercises with no records are dropped.

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError("Stored workout data must be an object")
    histories = {}
    for name, raw in data.items():
        history = dict_to_history(raw)
        if history.records:
            histories[str(name)] = history
    return RecordStore(histories)


def parse_sets_string(sets_str: str) -> list[tuple[int, float]]:
    """
    Parse a sets string.

    Comma-separated groups, each one of:
        RxN@W    e.g. "8x3@40"     N sets of R reps at W kg (compact)
        reps@kg  e.g. "8@42.5"     canonical
        reps kg  e.g. "8 42.5"     space-separated
        reps     e.g. "12"         bare reps, weight 0 (body weight)

    A trailing "kg" on the weight is accepted.

    Args:
        sets_str: Sets string to parse

    Returns:
        List of (reps, weight_kg) tuples

    Raises:
        ValidationError: If format is invalid or a value is out of range
    """
    if not sets_str or not sets_str.strip():
        raise ValidationError("Sets string cannot be empty")

    weight_re = r"(\d+(?:\.\d+)?)\s*(?:kg)?"
    sets: list[tuple[int, float]] = []
    parts = [p.strip() for p in sets_str.split(",") if p.strip()]

    for part in parts:
        match_compact = re.fullmatch(
            rf"(\d+)\s*[xX×]\s*(\d+)\s*@\s*{weight_re}", part, re.IGNORECASE
        )
        match_at = re.fullmatch(rf"(\d+)\s*@\s*{weight_re}", part, re.IGNORECASE)
        match_sp = re.fullmatch(rf"(\d+)\s+{weight_re}", part, re.IGNORECASE)
        match_bare = re.fullmatch(r"(\d+)", part)

        if match_compact:
            reps = int(match_compact.group(1))
            n_sets = int(match_compact.group(2))
            weight = float(match_compact.group(3))
            if n_sets < 1:
                raise ValidationError(f"Set count must be at least 1: '{part}'")
            if reps <= 0:
                raise ValidationError(f"Reps must be at least 1: '{part}'")
            sets.extend((reps, weight) for _ in range(n_sets))
            continue
        elif match_at:
            reps = int(match_at.group(1))
            weight = float(match_at.group(2))
        elif match_sp:
            reps = int(match_sp.group(1))
            weight = float(match_sp.group(2))
        elif match_bare:
            reps = int(match_bare.group(1))
            weight = 0.0
        else:
            raise ValidationError(
                f"Invalid set format: '{part}'.\n"
                f"Use: reps@kg (e.g. 8@40), reps kg (e.g. 8 40),\n"
                f"     or compact RxN@kg (e.g. 8x3@40 for 3 sets of 8)."
            )

        if reps <= 0:
            raise ValidationError(f"Reps must be at least 1: '{part}'")

        sets.append((reps, weight))

    if not sets:
        raise ValidationError("No valid sets found in sets string")

    return sets

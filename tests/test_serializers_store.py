"""
Tests for JSON serialization, set-string parsing and the history file.
"""

import json
from datetime import datetime, timezone

import pytest

from lift_log.core.models import (
    BilateralLayout,
    PerformedSet,
    SummaryLayout,
    UnilateralLayout,
    WorkoutRecord,
)
from lift_log.core.record_store import RecordStore
from lift_log.io.history_store import HistoryStore, get_default_history_path
from lift_log.io.serializers import (
    ValidationError,
    dict_to_record,
    dict_to_store,
    parse_datetime,
    parse_sets_string,
    record_to_dict,
    store_to_dict,
)


def _sets(*pairs):
    return [PerformedSet(reps=r, weight=w) for r, w in pairs]


def _sample_store() -> RecordStore:
    store = RecordStore()
    store.add_record("Bench Press", WorkoutRecord.build(
        id="b1",
        date=datetime(2026, 3, 1, 18, 30),
        category="push",
        equipment="barbell",
        layout=BilateralLayout(sets=_sets((8, 60), (6, 62.5))),
    ))
    store.add_record("Bench Press", WorkoutRecord.build(
        id="b2",
        date=datetime(2026, 3, 8, 18, 30),
        category="push",
        equipment="barbell",
        layout=BilateralLayout(sets=_sets((8, 60), (8, 60))),
    ))
    store.add_record("Bulgarian Split Squat", WorkoutRecord.build(
        id="s1",
        date=datetime(2026, 3, 2, 7, 0),
        category="lower body",
        equipment="dumbbells",
        layout=UnilateralLayout(left=_sets((10, 20), (10, 22)), right=_sets((10, 20), (9, 22))),
    ))
    store.add_record("Lateral Raise", WorkoutRecord.build(
        id="m1",
        date=datetime(2026, 3, 3, 12, 15),
        category="specific muscle",
        equipment="dumbbells",
        layout=BilateralLayout(sets=_sets((15, 8))),
        muscle="Deltoids",
    ))
    store.delete_record("Bench Press", "b2")
    store.edit_record("Lateral Raise", "m1", layout=BilateralLayout(sets=_sets((15, 10))))
    return store


class TestRoundTrip:
    """Serializing then deserializing yields an equal store."""

    def test_store_round_trip(self):
        store = _sample_store()
        restored = dict_to_store(json.loads(json.dumps(store_to_dict(store))))
        assert restored == store
        assert restored.best_weight("Bench Press") == 62.5
        assert restored.history("Lateral Raise").records[0].muscle == "Deltoids"

    def test_record_dict_shape(self):
        record = _sample_store().records("Bulgarian Split Squat")[0]
        d = record_to_dict(record)
        assert d["movement_type"] == "unilateral"
        assert d["set_reps_l"] == [10, 10]
        assert d["set_weights_r"] == [20, 22]
        assert d["max_weight"] == 22
        assert d["max_weight_set_count"] == 2
        assert d["date"] == "2026-03-02T07:00"

    def test_offset_aware_dates_round_trip(self):
        store = RecordStore()
        store.add_record("Deadlift", WorkoutRecord.build(
            id="d1",
            date=datetime(2024, 1, 1, tzinfo=timezone.utc),
            category="pull",
            equipment="barbell",
            layout=BilateralLayout(sets=_sets((5, 140))),
        ))

        restored = dict_to_store(json.loads(json.dumps(store_to_dict(store))))

        assert restored == store
        assert restored.records("Deadlift")[0].date.tzinfo is None


class TestLegacyRecords:
    """camelCase exports and aggregate-only records still load."""

    def test_camel_case_bilateral(self):
        record = dict_to_record({
            "id": "old-1",
            "date": "2025-11-02T10:00:00",
            "category": "push",
            "equipment": "barbell",
            "movementType": "bilateral",
            "sets": 3,
            "setReps": [8, 8, 6],
            "setWeights": [40, 42, 45],
            "maxWeight": 99,
            "maxWeightSetCount": 9,
        })
        assert isinstance(record.layout, BilateralLayout)
        # Heaviest values are re-derived from the sets
        assert record.heaviest_weight == 45
        assert record.heaviest_set_count == 1

    def test_camel_case_unilateral(self):
        record = dict_to_record({
            "id": "old-2",
            "date": "2025-11-03",
            "category": "lower body",
            "equipment": "dumbbells",
            "setRepsL": [10],
            "setWeightsL": [60],
            "setRepsR": [10],
            "setWeightsR": [50],
        })
        assert record.layout == UnilateralLayout(left=_sets((10, 60)), right=_sets((10, 50)))
        assert record.heaviest_weight == 60

    def test_weights_only_becomes_summary(self):
        record = dict_to_record({
            "id": "old-3",
            "date": "2025-10-01",
            "category": "push",
            "equipment": "barbell",
            "setWeights": [50, 55],
            "maxWeight": 55,
            "maxWeightSetCount": 1,
        })
        assert isinstance(record.layout, SummaryLayout)
        assert record.layout.set_count == 2
        assert record.heaviest_weight == 55

    def test_no_arrays_becomes_summary(self):
        record = dict_to_record({
            "id": "old-4",
            "date": "2025-10-01",
            "category": "push",
            "equipment": "barbell",
            "maxWeight": 80,
        })
        assert record.layout == SummaryLayout()
        assert record.heaviest_weight == 80

    def test_utc_timestamp_is_naive(self):
        assert parse_datetime("2025-11-02T10:00:00.000Z").tzinfo is None

    def test_stored_best_is_recomputed(self):
        store = dict_to_store({
            "Squat": {
                "bestWeight": 500,
                "records": [{
                    "id": "s",
                    "date": "2025-10-01",
                    "category": "squat",
                    "equipment": "barbell",
                    "setReps": [5],
                    "setWeights": [100],
                }],
            },
            "Empty": {"bestWeight": 0, "records": []},
        })
        assert store.best_weight("Squat") == 100
        assert "Empty" not in store


class TestInvalidData:
    """Malformed data raises ValidationError."""

    def test_missing_id(self):
        with pytest.raises(ValidationError):
            dict_to_record({"date": "2025-10-01"})

    def test_bad_date(self):
        with pytest.raises(ValidationError):
            dict_to_record({"id": "x", "date": "yesterday"})

    def test_negative_weight(self):
        with pytest.raises(ValidationError):
            dict_to_record({"id": "x", "date": "2025-10-01", "set_reps": [5], "set_weights": [-5]})

    def test_duplicate_ids(self):
        rec = {"id": "x", "date": "2025-10-01", "set_reps": [5], "set_weights": [50]}
        with pytest.raises(ValidationError):
            dict_to_store({"Squat": {"records": [rec, rec]}})

    @pytest.mark.parametrize("declared", [float("nan"), float("inf")])
    def test_non_finite_set_count(self, declared):
        with pytest.raises(ValidationError):
            dict_to_record({"id": "a", "date": "2024-01-01", "maxWeight": 50, "sets": declared})

    def test_non_finite_weight(self):
        with pytest.raises(ValidationError):
            dict_to_record({"id": "a", "date": "2024-01-01", "set_reps": [5], "set_weights": [float("inf")]})

    def test_non_finite_max_weight(self):
        with pytest.raises(ValidationError):
            dict_to_record({"id": "a", "date": "2024-01-01", "maxWeight": float("nan")})


class TestParseSetsString:
    """Compact, canonical, space-separated and bare formats."""

    def test_canonical(self):
        assert parse_sets_string("8@40, 8@42.5, 6@45") == [(8, 40.0), (8, 42.5), (6, 45.0)]

    def test_compact_expands(self):
        assert parse_sets_string("8x3@40") == [(8, 40.0)] * 3

    def test_space_separated_with_unit(self):
        assert parse_sets_string("10 20kg") == [(10, 20.0)]

    def test_bare_reps_is_bodyweight(self):
        assert parse_sets_string("12,10") == [(12, 0.0), (10, 0.0)]

    @pytest.mark.parametrize("raw", ["", "abc", "0@40", "8@-5"])
    def test_invalid(self, raw):
        with pytest.raises(ValidationError):
            parse_sets_string(raw)


class TestHistoryStore:
    """The history file: one slot, atomic rewrite, safe load."""

    def test_absent_file_loads_empty(self, tmp_path):
        store = HistoryStore(tmp_path / "history.json")
        assert not store.exists()
        assert len(store.load_records()) == 0

    def test_save_then_load(self, tmp_path):
        store = HistoryStore(tmp_path / "sub" / "history.json")
        store.save_records(_sample_store())
        assert store.load_records() == _sample_store()

        raw = json.loads(store.history_path.read_text())
        assert "userWorkoutData" in raw

    def test_other_slots_preserved(self, tmp_path):
        path = tmp_path / "history.json"
        path.write_text(json.dumps({"theme": "dark", "userWorkoutData": {}}))
        HistoryStore(path).save_records(_sample_store())
        raw = json.loads(path.read_text())
        assert raw["theme"] == "dark"
        assert "Bench Press" in raw["userWorkoutData"]

    def test_corrupt_json_falls_back_to_empty(self, tmp_path):
        path = tmp_path / "history.json"
        path.write_text("{not json")
        with pytest.warns(UserWarning, match="not valid workout data"):
            records = HistoryStore(path).load_records()
        assert len(records) == 0
        assert (tmp_path / "history.json.corrupt").read_text() == "{not json"

    def test_invalid_records_fall_back_to_empty(self, tmp_path):
        path = tmp_path / "history.json"
        path.write_text(json.dumps({"userWorkoutData": {"Squat": {"records": [{"id": "x"}]}}}))
        with pytest.warns(UserWarning):
            records = HistoryStore(path).load_records()
        assert len(records) == 0

    def test_non_utf8_file_falls_back_to_empty(self, tmp_path):
        path = tmp_path / "history.json"
        path.write_bytes(b'{"userWorkoutData": {"\xff\xfe": {}}}')
        with pytest.warns(UserWarning, match="not valid workout data"):
            records = HistoryStore(path).load_records()
        assert len(records) == 0
        assert (tmp_path / "history.json.corrupt").exists()

    def test_nan_set_count_in_file_falls_back_to_empty(self, tmp_path):
        path = tmp_path / "history.json"
        path.write_text(
            '{"userWorkoutData": {"Bench Press": {"records": '
            '[{"id": "a", "date": "2024-01-01", "maxWeight": 50, "sets": NaN}]}}}'
        )
        with pytest.warns(UserWarning):
            records = HistoryStore(path).load_records()
        assert len(records) == 0

    def test_blank_file_loads_empty(self, tmp_path):
        path = tmp_path / "history.json"
        path.write_text("   ")
        assert len(HistoryStore(path).load_records()) == 0

    def test_init_creates_file(self, tmp_path):
        store = HistoryStore(tmp_path / "a" / "history.json")
        store.init()
        assert store.exists()
        assert len(store.load_records()) == 0

    def test_clear_history(self, tmp_path):
        store = HistoryStore(tmp_path / "history.json")
        store.save_records(_sample_store())
        store.clear_history()
        assert len(store.load_records()) == 0

    def test_default_path_honours_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LIFT_LOG_HOME", str(tmp_path))
        assert get_default_history_path() == tmp_path / "history.json"

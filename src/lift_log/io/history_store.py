"""
JSON-file storage for workout history.

The history file is a small key-value store: a JSON object whose keys
are named slots.  The record store lives under one slot
(``userWorkoutData``) and is loaded once at startup and rewritten in full
after every mutation.  Other slots in the file are preserved.
"""

import json
import shutil
import warnings
from pathlib import Path
from typing import Any

from ..core.config import HISTORY_FILENAME, STORE_SLOT, get_data_dir
from ..core.record_store import RecordStore
from .serializers import ValidationError, dict_to_store, store_to_dict


class HistoryStore:
    """
    Manages the workout history file.

    Loading never fails on bad data: an absent, unreadable or malformed
    slot yields an empty RecordStore.  A malformed file is copied to
    ``<name>.corrupt`` first so the next save does not destroy it.
    """

    def __init__(self, history_path: str | Path, slot: str = STORE_SLOT):
        """
        Initialize the history store.

        Args:
            history_path: Path to the JSON history file
            slot: Key under which the record store is kept
        """
        self.history_path = Path(history_path)
        self.slot = slot

    def exists(self) -> bool:
        """Check if the history file exists."""
        return self.history_path.exists()

    def init(self) -> None:
        """
        Create an empty history file if it doesn't exist.

        Creates parent directories if needed.
        """
        self.history_path.parent.mkdir(parents=True, exist_ok=True)
        if not self.history_path.exists():
            self._write_slots({self.slot: {}})

    def _read_slots(self) -> dict[str, Any] | None:
        """Return the whole file as a dict, {} if absent, None if unreadable."""
        if not self.history_path.exists():
            return {}
        try:
            with open(self.history_path, "r", encoding="utf-8") as f:
                text = f.read()
        except UnicodeDecodeError:
            return None
        except OSError as e:
            warnings.warn(f"lift-log: cannot read {self.history_path} ({e})", stacklevel=3)
            return None
        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            return None
        return data if isinstance(data, dict) else None

    def _write_slots(self, slots: dict[str, Any]) -> None:
        """Write the whole file atomically (temp file + rename)."""
        self.history_path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.history_path.with_suffix(self.history_path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(slots, f, indent=2)
        tmp.replace(self.history_path)

    def _quarantine(self, reason: str) -> None:
        backup = self.history_path.with_suffix(self.history_path.suffix + ".corrupt")
        try:
            shutil.copyfile(self.history_path, backup)
        except OSError:
            backup = None
        where = f"; original saved to {backup}" if backup else ""
        warnings.warn(
            f"lift-log: {self.history_path} is not valid workout data ({reason}); "
            f"starting with empty history{where}",
            stacklevel=3,
        )

    def load_records(self) -> RecordStore:
        """
        Load the record store from its slot.

        Returns:
            RecordStore (empty when the file or slot is absent or malformed)
        """
        slots = self._read_slots()
        if slots is None:
            self._quarantine("unparsable JSON")
            return RecordStore()

        raw = slots.get(self.slot)
        if raw is None:
            return RecordStore()
        try:
            return dict_to_store(raw)
        except ValidationError as e:
            self._quarantine(str(e))
            return RecordStore()

    def save_records(self, store: RecordStore) -> None:
        """
        Rewrite the record store slot, keeping any other slots.

        Raises:
            OSError: If the file cannot be written
        """
        slots = self._read_slots() or {}
        slots[self.slot] = store_to_dict(store)
        self._write_slots(slots)

    def clear_history(self) -> None:
        """
        Clear all history (dangerous - use with caution).
        """
        if self.history_path.exists():
            self.save_records(RecordStore())


def get_default_history_path() -> Path:
    """
    Get the default history file path.

    ``$LIFT_LOG_HOME/history.json`` when the variable is set, otherwise
    ``~/.lift-log/history.json``.
    """
    return get_data_dir() / HISTORY_FILENAME


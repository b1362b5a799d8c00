"""
YAML -> CatalogExercise loader.

Loads the bundled ``src/lift_log/exercises.yaml``.  A user file at
``~/.lift-log/exercises.yaml`` (or under ``$LIFT_LOG_HOME``) is merged on
top: entries whose name matches a bundled exercise replace its listed
fields, new names are appended.

Usage (internal, called by registry.py):
    from .loader import load_catalog_from_yaml
    catalog = load_catalog_from_yaml()   # dict or None on failure
"""

from __future__ import annotations

import warnings
from pathlib import Path

import yaml

from ..config import EQUIPMENT_ALIASES, get_data_dir
from .base import CatalogExercise


def normalize_equipment(value: str) -> str:
    """Lower-case and resolve aliases ("Bodyweight" -> "body weight")."""
    text = str(value or "").strip().lower()
    return EQUIPMENT_ALIASES.get(text, text)


def exercise_from_dict(d: dict) -> CatalogExercise:
    """Convert a raw dict (from YAML) to a CatalogExercise.

    Raises ValueError if name, categories or equipment is absent.
    """
    name = str(d.get("name") or "").strip()
    if not name:
        raise ValueError("catalog entry missing 'name'")
    for key in ("categories", "equipment"):
        if not isinstance(d.get(key), list):
            raise ValueError(f"{name}: '{key}' must be a list")

    return CatalogExercise(
        name=name,
        categories=tuple(str(c).strip().lower() for c in d["categories"]),
        equipment=tuple(dict.fromkeys(normalize_equipment(e) for e in d["equipment"])),
        muscles=tuple(str(m) for m in d.get("muscles") or []),
    )


def _load_yaml_file(path: Path) -> list[dict]:
    """Load the ``exercises`` list from a YAML file; return [] on any error."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"lift-log: cannot read catalog {path} ({exc})", stacklevel=2)
        return []
    if not isinstance(data, dict) or not isinstance(data.get("exercises"), list):
        return []
    return [e for e in data["exercises"] if isinstance(e, dict)]


def _get_bundled_catalog_path() -> Path | None:
    """Return path to the bundled exercises.yaml, or None if not found."""
    # loader.py lives at src/lift_log/core/exercises/loader.py
    # three levels up -> src/lift_log/
    candidate = Path(__file__).parent.parent.parent / "exercises.yaml"
    return candidate if candidate.is_file() else None


def _get_user_catalog_path() -> Path | None:
    """Return the user override catalog if it exists, else None."""
    p = get_data_dir() / "exercises.yaml"
    return p if p.is_file() else None


def load_catalog_from_yaml(
    bundled_path: Path | None = None,
    user_path: Path | None = None,
) -> dict[str, CatalogExercise] | None:
    """Return {name: CatalogExercise} from the bundled and user catalogs.

    Args:
        bundled_path: Override for the bundled file (tests)
        user_path: Override for the user file (tests)

    Returns None (rather than raising) when nothing could be loaded.
    """
    bundled_path = bundled_path or _get_bundled_catalog_path()
    user_path = user_path or _get_user_catalog_path()

    raw: dict[str, dict] = {}
    if bundled_path is not None:
        for entry in _load_yaml_file(bundled_path):
            raw[str(entry.get("name", "")).strip()] = dict(entry)
    if user_path is not None and user_path.is_file():
        for entry in _load_yaml_file(user_path):
            name = str(entry.get("name", "")).strip()
            raw[name] = {**raw.get(name, {}), **entry}

    result: dict[str, CatalogExercise] = {}
    for name, entry in raw.items():
        try:
            ex = exercise_from_dict(entry)
        except ValueError as exc:
            warnings.warn(f"lift-log: skipping catalog entry {name!r}: {exc}", stacklevel=2)
            continue
        result[ex.name] = ex

    return result if result else None

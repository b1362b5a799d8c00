"""
Exercise registry and catalog filters.

The catalog is loaded from YAML at import time.  If nothing can be
loaded a RuntimeError is raised; the application cannot offer exercises
without it.  History never depends on the catalog: names missing from it
are simply exercises without metadata.
"""

from ..config import (
    CATEGORY_ALIASES,
    FALLBACK_EQUIPMENT,
    HOME_EQUIPMENT,
    SPECIFIC_MUSCLE,
    TOP_CATEGORIES,
)
from .base import CatalogExercise


def _build_catalog() -> dict[str, CatalogExercise]:
    from .loader import load_catalog_from_yaml

    loaded = load_catalog_from_yaml()
    if not loaded:
        raise RuntimeError(
            "lift-log: no exercises could be loaded. "
            "Check that src/lift_log/exercises.yaml is present and valid."
        )
    return loaded


EXERCISE_CATALOG: dict[str, CatalogExercise] = _build_catalog()


def get_exercise(name: str) -> CatalogExercise:
    """
    Return the catalog entry for ``name``.

    Raises:
        ValueError: If the name is not in the catalog
    """
    ex = find_exercise(name)
    if ex is None:
        raise ValueError(f"Unknown exercise {name!r}. See 'lift-log exercises'.")
    return ex


def find_exercise(name: str | None) -> CatalogExercise | None:
    """Case-insensitive lookup; None for unknown names."""
    if not name:
        return None
    if name in EXERCISE_CATALOG:
        return EXERCISE_CATALOG[name]
    wanted = name.strip().lower()
    for key, ex in EXERCISE_CATALOG.items():
        if key.lower() == wanted:
            return ex
    return None


def normalize_category(category: str | None) -> str:
    """Lower-case and expand shorthand ("upper" -> "upper body")."""
    c = str(category or "").strip().lower()
    return CATEGORY_ALIASES.get(c, c)


def all_categories() -> list[str]:
    """Top-level categories that at least one catalog entry carries."""
    used = {c for ex in EXERCISE_CATALOG.values() for c in ex.categories}
    return [c for c in TOP_CATEGORIES if c in used]


def all_muscles() -> list[str]:
    return sorted({m for ex in EXERCISE_CATALOG.values() for m in ex.muscles})


def filter_by_location(
    items: list[CatalogExercise],
    location: str | None,
) -> list[CatalogExercise]:
    """
    Keep exercises doable at ``location``.

    "home" keeps exercises that need only home equipment; anything else
    (including no location) keeps everything.
    """
    if str(location or "").strip().lower() != "home":
        return list(items)
    return [ex for ex in items if any(eq in HOME_EQUIPMENT for eq in ex.equipment)]


def filter_by_category(
    items: list[CatalogExercise],
    category: str | None,
    muscle: str | None = None,
) -> list[CatalogExercise]:
    """
    Keep exercises tagged with ``category``.

    "specific muscle" additionally requires ``muscle`` and matches it
    against the display muscles; without a muscle nothing matches.
    No category at all yields an empty list.
    """
    cat = normalize_category(category)
    if not cat:
        return []
    if cat == SPECIFIC_MUSCLE:
        if not muscle:
            return []
        return [ex for ex in items if ex.has_category(SPECIFIC_MUSCLE) and muscle in ex.muscles]
    return [ex for ex in items if ex.has_category(cat)]


def equipment_options(items: list[CatalogExercise]) -> list[str]:
    """Unique equipment across ``items``, sorted; falls back to a generic list if empty."""
    found = sorted({eq for ex in items for eq in ex.equipment})
    return found if found else list(FALLBACK_EQUIPMENT)


def search_catalog(
    category: str | None = None,
    muscle: str | None = None,
    equipment: str | None = None,
    location: str | None = None,
) -> list[CatalogExercise]:
    """
    Combined catalog filter used by the CLI.

    Filters are applied only when given; result is sorted by name.
    """
    from .loader import normalize_equipment

    items = filter_by_location(list(EXERCISE_CATALOG.values()), location)
    if category:
        items = filter_by_category(items, category, muscle)
    elif muscle:
        items = [ex for ex in items if muscle in ex.muscles]
    if equipment:
        eq = normalize_equipment(equipment)
        items = [ex for ex in items if ex.supports(eq)]
    return sorted(items, key=lambda ex: ex.name.lower())

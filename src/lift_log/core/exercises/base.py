"""
Base type for catalog entries.

CatalogExercise is metadata only; history is keyed by the exercise name
and never depends on the entry being present in the catalog.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CatalogExercise:
    """One exercise in the catalog."""

    name: str                                   # e.g. "Bench Press"
    categories: tuple[str, ...]                 # lower case, e.g. ("push", "upper body")
    equipment: tuple[str, ...]                  # lower case, aliases resolved
    muscles: tuple[str, ...] = field(default=())  # display names, e.g. ("Chest",)

    def has_category(self, category: str) -> bool:
        return category in self.categories

    def supports(self, equipment: str) -> bool:
        return equipment in self.equipment

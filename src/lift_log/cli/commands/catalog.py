"""Catalog command: browse the exercise list."""

import json
from typing import Annotated, Optional

import typer

from ...core.config import LOCATIONS, SPECIFIC_MUSCLE
from ...core.exercises.registry import all_muscles, normalize_category, search_catalog
from .. import views
from ..app import JsonOption, app


@app.command()
def exercises(
    category: Annotated[
        Optional[str],
        typer.Option("--category", "-c", help="Filter by category, e.g. push, 'lower body'"),
    ] = None,
    muscle: Annotated[
        Optional[str],
        typer.Option("--muscle", "-m", help="Filter by target muscle"),
    ] = None,
    equipment: Annotated[
        Optional[str],
        typer.Option("--equipment", "-q", help="Filter by equipment"),
    ] = None,
    location: Annotated[
        Optional[str],
        typer.Option("--location", "-l", help="gym | home"),
    ] = None,
    json_out: JsonOption = False,
) -> None:
    """
    List exercises from the catalog.

    The bundled catalog can be extended with ~/.lift-log/exercises.yaml.
    """
    if location is not None and location.lower() not in LOCATIONS:
        views.print_error(f"Location must be one of: {', '.join(LOCATIONS)}")
        raise typer.Exit(1)
    if normalize_category(category) == SPECIFIC_MUSCLE and not muscle:
        views.print_error(
            "Category 'specific muscle' requires --muscle. Known muscles: "
            + ", ".join(all_muscles())
        )
        raise typer.Exit(1)

    items = search_catalog(category=category, muscle=muscle, equipment=equipment, location=location)

    if json_out:
        print(json.dumps([
            {
                "name": ex.name,
                "categories": list(ex.categories),
                "equipment": list(ex.equipment),
                "muscles": list(ex.muscles),
            }
            for ex in items
        ], indent=2))
        return

    views.print_catalog(items)

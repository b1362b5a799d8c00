"""History commands: show-history, delete-record, edit-record."""

import json
from typing import Annotated, Any, Optional

import typer

from ...core.config import SPECIFIC_MUSCLE
from ...core.exercises.loader import normalize_equipment
from ...core.exercises.registry import normalize_category
from ...core.models import BilateralLayout, PerformedSet, UnilateralLayout, WorkoutRecord
from ...core.record_store import RecordStore
from ...io.serializers import (
    ValidationError,
    history_to_dict,
    parse_datetime,
    parse_sets_string,
    record_to_dict,
)
from .. import views
from ..app import HistoryPathOption, JsonOption, app, get_store


def resolve_exercise(records: RecordStore, raw: str) -> str | None:
    """Stored exercise name matching ``raw`` (exact first, then case-insensitive)."""
    if raw in records:
        return raw
    wanted = raw.strip().lower()
    for name in records:
        if name.lower() == wanted:
            return name
    return None


def resolve_record(records: RecordStore, exercise_name: str, raw: str) -> WorkoutRecord | None:
    """
    Find a record by id, or by its # position in show-history.

    Positions are 1-based over the chronological listing.
    """
    hist = records.history(exercise_name)
    if hist is None:
        return None
    found = hist.find(raw)
    if found is not None:
        return found
    if raw.isdigit():
        listing = records.records_chronological(exercise_name)
        pos = int(raw)
        if 1 <= pos <= len(listing):
            return listing[pos - 1]
    return None


def _to_sets(pairs: list[tuple[int, float]]) -> list[PerformedSet]:
    return [PerformedSet(reps=r, weight=w) for r, w in pairs]


@app.command("show-history")
def show_history(
    exercise: Annotated[
        Optional[str],
        typer.Argument(help="Exercise to show (omit to list every exercise)"),
    ] = None,
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-l", help="Show only the most recent N records"),
    ] = None,
    history_path: HistoryPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Display workout history.

    Without an exercise, lists every logged exercise with its best weight.
    """
    records = get_store(history_path).load_records()

    if exercise is None:
        if json_out:
            output = [
                {
                    "exercise": name,
                    "records": len(records.records(name)),
                    "best_weight": records.best_weight(name),
                }
                for name in records.exercise_names()
            ]
            print(json.dumps(output, indent=2))
            return
        views.print_exercise_list(records)
        return

    name = resolve_exercise(records, exercise)
    if name is None:
        views.print_error(f"No history for '{exercise}'")
        raise typer.Exit(1)

    if json_out:
        output = history_to_dict(records.history(name))
        chronological = records.records_chronological(name)
        if limit is not None:
            chronological = chronological[-limit:]
        output["records"] = [record_to_dict(r) for r in chronological]
        print(json.dumps({"exercise": name, **output}, indent=2))
        return

    if limit is None:
        views.print_history(records, name)
        return
    views.console.print(
        f"[bold]Best Weight: {views.format_kg(records.best_weight(name))}kg[/bold]"
    )
    views.console.print(
        views.format_record_table(name, records.records_chronological(name)[-limit:])
    )


@app.command("delete-record")
def delete_record(
    exercise: Annotated[str, typer.Argument(help="Exercise name")],
    record_id: Annotated[
        str,
        typer.Argument(help="Record ID, or its # in show-history"),
    ],
    history_path: HistoryPathOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation prompt"),
    ] = False,
) -> None:
    """
    Remove one record from an exercise's history.

    Removing the last record removes the exercise from the history.
    """
    store = get_store(history_path)
    records = store.load_records()

    name = resolve_exercise(records, exercise)
    if name is None:
        views.print_error(f"No history for '{exercise}'")
        raise typer.Exit(1)

    target = resolve_record(records, name, record_id)
    if target is None:
        views.print_error(f"No record '{record_id}' for {name}")
        raise typer.Exit(1)

    views.console.print(
        f"Record to delete: [bold]{name}[/bold] {views.format_date(target.date)} "
        f"({views.format_kg(target.heaviest_weight)}kg)"
    )
    if not force and not views.confirm_action("Delete this record?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    records.delete_record(name, target.id)
    try:
        store.save_records(records)
    except OSError as e:
        views.print_error(f"Could not save history: {e}")
        raise typer.Exit(1)

    if name in records:
        views.print_success(
            f"Deleted record {target.id}. Best weight now "
            f"{views.format_kg(records.best_weight(name))}kg."
        )
    else:
        views.print_success(f"Deleted record {target.id}. No records left for {name}.")


@app.command("edit-record")
def edit_record(
    exercise: Annotated[str, typer.Argument(help="Exercise name")],
    record_id: Annotated[
        str,
        typer.Argument(help="Record ID, or its # in show-history"),
    ],
    date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="New date/time (YYYY-MM-DD[THH:MM])"),
    ] = None,
    category: Annotated[
        Optional[str],
        typer.Option("--category", "-c", help="New category"),
    ] = None,
    equipment: Annotated[
        Optional[str],
        typer.Option("--equipment", "-q", help="New equipment"),
    ] = None,
    muscle: Annotated[
        Optional[str],
        typer.Option("--muscle", "-m", help="New target muscle"),
    ] = None,
    sets: Annotated[
        Optional[str],
        typer.Option("--sets", "-s", help="Replace sets (bilateral): reps@kg,..."),
    ] = None,
    left: Annotated[
        Optional[str],
        typer.Option("--left", "-L", help="Replace left-side sets (unilateral)"),
    ] = None,
    right: Annotated[
        Optional[str],
        typer.Option("--right", "-R", help="Replace right-side sets (unilateral)"),
    ] = None,
    history_path: HistoryPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Correct a stored record.

    The record keeps its ID.  New sets re-derive its heaviest weight and
    the exercise's best weight is recomputed.
    """
    store = get_store(history_path)
    records = store.load_records()

    name = resolve_exercise(records, exercise)
    if name is None:
        views.print_error(f"No history for '{exercise}'")
        raise typer.Exit(1)
    target = resolve_record(records, name, record_id)
    if target is None:
        views.print_error(f"No record '{record_id}' for {name}")
        raise typer.Exit(1)

    changes: dict[str, Any] = {}
    try:
        if date is not None:
            changes["date"] = parse_datetime(date)
        if category is not None:
            changes["category"] = normalize_category(category)
        if equipment is not None:
            changes["equipment"] = normalize_equipment(equipment)
        if muscle is not None:
            changes["muscle"] = muscle
        if sets is not None:
            if left is not None or right is not None:
                raise ValidationError("Use either --sets or --left/--right, not both")
            changes["layout"] = BilateralLayout(sets=_to_sets(parse_sets_string(sets)))
        elif left is not None or right is not None:
            if left is None or right is None:
                raise ValidationError("Unilateral edits need both --left and --right")
            lsets = _to_sets(parse_sets_string(left))
            rsets = _to_sets(parse_sets_string(right))
            if len(lsets) != len(rsets):
                raise ValidationError("Left and right must have the same number of sets")
            changes["layout"] = UnilateralLayout(left=lsets, right=rsets)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if not changes:
        views.print_error("Nothing to change. Pass at least one option.")
        raise typer.Exit(1)

    new_category = changes.get("category", target.category)
    if new_category == SPECIFIC_MUSCLE and not changes.get("muscle", target.muscle):
        views.print_error("Category 'specific muscle' requires --muscle")
        raise typer.Exit(1)

    updated = records.edit_record(name, target.id, **changes)
    try:
        store.save_records(records)
    except OSError as e:
        views.print_error(f"Could not save history: {e}")
        raise typer.Exit(1)

    if json_out:
        print(json.dumps({"exercise": name, **record_to_dict(updated)}, indent=2))
        return

    views.print_success(
        f"Updated record {updated.id}: heaviest {views.format_kg(updated.heaviest_weight)}kg, "
        f"best now {views.format_kg(records.best_weight(name))}kg."
    )

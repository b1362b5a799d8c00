"""Session commands: log-session and the interactive entry helpers."""

import json
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.aggregator import compute_previous_sets
from ...core.coerce import to_int
from ...core.config import DEFAULT_SET_COUNT, MOVEMENT_KINDS, SPECIFIC_MUSCLE
from ...core.errors import EmptySessionError
from ...core.exercises.registry import (
    all_categories,
    all_muscles,
    equipment_options,
    find_exercise,
    normalize_category,
    search_catalog,
)
from ...core.exercises.loader import normalize_equipment
from ...core.models import PreviousSet, SessionExercise
from ...core.record_store import RecordStore
from ...core.session import EntryInput, SessionBuilder
from ...core.trends import compare_entry
from ...io.serializers import ValidationError, format_datetime, parse_sets_string, record_to_dict
from .. import views
from ..app import HistoryPathOption, JsonOption, app, get_store, parse_when


def _choose(options: list[str], label: str, allow_other: bool = False) -> str | None:
    """
    Numbered single choice.

    Accepts a number or an option typed by name.  With ``allow_other``
    any other text is returned as typed.  Empty input picks the first
    option, or cancels (None) when ``allow_other`` is set.
    """
    for i, opt in enumerate(options, 1):
        views.console.print(f"  \\[{i}] {views.title(opt)}")
    hint = " (number or name, Enter to cancel)" if allow_other else " [1]"
    while True:
        raw = views.console.input(f"{label}{hint}: ").strip()
        if not raw:
            if allow_other:
                return None
            return options[0] if options else None
        if raw.isdigit() and 1 <= int(raw) <= len(options):
            return options[int(raw) - 1]
        for opt in options:
            if opt.lower() == raw.lower():
                return opt
        if allow_other:
            return raw
        views.print_error(f"Choose 1–{len(options)}")


def _prompt_side(prev: list[PreviousSet], side: str) -> list[tuple[int, float]]:
    """
    Prompt one reps@kg pair per set slot.

    Enter on an empty line repeats the previous session's value for that
    slot when one is known.
    """
    if side:
        views.console.print(f"[bold]{side}[/bold]")
    pairs: list[tuple[int, float]] = []
    for i, hint in enumerate(prev, 1):
        while True:
            raw = views.console.input(
                f"  Set {i} reps@kg [dim]({views.format_previous(hint)})[/dim]: "
            ).strip()
            if not raw and hint.weight is not None and hint.reps is not None:
                pairs.append((hint.reps, hint.weight))
                break
            try:
                parsed = parse_sets_string(raw)
            except ValidationError as e:
                views.print_error(str(e))
                continue
            if len(parsed) != 1:
                views.print_error("Enter one set per line, e.g. 8@40")
                continue
            pairs.append(parsed[0])
            break
    return pairs


def _interactive_entry(
    builder: SessionBuilder,
    records: RecordStore,
) -> SessionExercise | None:
    """Walk through category, exercise, equipment and sets for one entry."""
    views.console.print()
    views.console.print("[bold]What are you training?[/bold]")
    category = _choose(all_categories(), "Category")
    if category is None:
        return None

    muscle = None
    if category == SPECIFIC_MUSCLE:
        muscle = _choose(all_muscles(), "Muscle")

    items = search_catalog(category=category, muscle=muscle)
    views.console.print()
    name = _choose([ex.name for ex in items], "Exercise", allow_other=True)
    if not name:
        return None

    catalog_entry = find_exercise(name)
    if catalog_entry is not None:
        name = catalog_entry.name
    options = equipment_options([catalog_entry] if catalog_entry else [])
    views.console.print()
    equipment = _choose(options, "Equipment") or ""

    views.console.print()
    movement = _choose(list(MOVEMENT_KINDS), "Movement") or "bilateral"

    raw_n = views.console.input(f"Number of sets [{DEFAULT_SET_COUNT}]: ").strip()
    n = to_int(raw_n, DEFAULT_SET_COUNT) if raw_n else DEFAULT_SET_COUNT
    if n < 1:
        views.print_error("Number of sets must be at least 1")
        return None

    prev = compute_previous_sets(records, name, movement, n)
    views.console.print()
    if prev.kind == "unilateral":
        left = _prompt_side(prev.left, "Left")
        right = _prompt_side(prev.right, "Right")
        raw = EntryInput(name, category, equipment, movement, n, left=left, right=right, muscle=muscle)
    else:
        sets = _prompt_side(prev.sets, "")
        raw = EntryInput(name, category, equipment, movement, n, sets=sets, muscle=muscle)

    try:
        return builder.validate_and_build_entry(raw)
    except ValidationError as e:
        views.print_error(str(e))
        return None


def _remove_interactive(builder: SessionBuilder) -> None:
    raw = views.console.input("Remove exercise # (Enter to cancel): ").strip()
    if not raw:
        return
    try:
        removed = builder.remove_entry(to_int(raw) - 1)
    except IndexError:
        views.print_error(f"Enter a number between 1 and {len(builder)}")
        return
    views.print_info(f"Removed {removed.name}")


def _entry_from_options(
    builder: SessionBuilder,
    exercise: str,
    category: str | None,
    equipment: str | None,
    muscle: str | None,
    movement: str,
    sets: str | None,
    left: str | None,
    right: str | None,
) -> SessionExercise:
    """
    Build one entry from one-liner options.

    Category and equipment default to the catalog's first listed values.

    Raises:
        ValidationError: On missing or malformed options
    """
    catalog_entry = find_exercise(exercise)
    name = catalog_entry.name if catalog_entry else exercise.strip()

    if category:
        category = normalize_category(category)
    elif catalog_entry is not None:
        category = catalog_entry.categories[0]
    else:
        raise ValidationError(f"'{exercise}' is not in the catalog; pass --category")

    if equipment:
        equipment = normalize_equipment(equipment)
    elif catalog_entry is not None and catalog_entry.equipment:
        equipment = catalog_entry.equipment[0]
    else:
        equipment = ""

    if category == SPECIFIC_MUSCLE and not muscle:
        raise ValidationError("Category 'specific muscle' requires --muscle")

    if movement == "unilateral":
        if not left or not right:
            raise ValidationError("Unilateral movements need both --left and --right")
        left_sets = parse_sets_string(left)
        right_sets = parse_sets_string(right)
        raw = EntryInput(
            name, category, equipment, "unilateral", len(left_sets),
            left=left_sets, right=right_sets, muscle=muscle,
        )
    else:
        if not sets:
            raise ValidationError("Pass the sets with --sets, e.g. 8@40,8@42.5")
        parsed = parse_sets_string(sets)
        raw = EntryInput(
            name, category, equipment, movement, len(parsed), sets=parsed, muscle=muscle,
        )
    return builder.validate_and_build_entry(raw)


@app.command("log-session")
def log_session(
    exercise: Annotated[
        Optional[str],
        typer.Option("--exercise", "-e", help="Exercise name (one-liner mode)"),
    ] = None,
    category: Annotated[
        Optional[str],
        typer.Option("--category", "-c", help="Category, e.g. 'upper body' or 'specific muscle'"),
    ] = None,
    equipment: Annotated[
        Optional[str],
        typer.Option("--equipment", "-q", help="Equipment, e.g. barbell, dumbbells"),
    ] = None,
    muscle: Annotated[
        Optional[str],
        typer.Option("--muscle", "-m", help="Target muscle (category 'specific muscle' only)"),
    ] = None,
    movement: Annotated[
        str,
        typer.Option("--movement", "-M", help="bilateral | unilateral"),
    ] = "bilateral",
    sets: Annotated[
        Optional[str],
        typer.Option("--sets", "-s", help="Sets: reps@kg,... e.g. 8@40,8@42.5 or 8x3@40"),
    ] = None,
    left: Annotated[
        Optional[str],
        typer.Option("--left", "-L", help="Left-side sets for unilateral movements"),
    ] = None,
    right: Annotated[
        Optional[str],
        typer.Option("--right", "-R", help="Right-side sets for unilateral movements"),
    ] = None,
    date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="Session date/time (YYYY-MM-DD[THH:MM], default: now)"),
    ] = None,
    history_path: HistoryPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Log a completed workout session.

    Run without --exercise for interactive entry of several exercises.
    Or supply the options for one-liner use:

      lift-log log-session -e "Bench Press" -s "8@60,8@62.5,6@65"

      lift-log log-session -e "Bulgarian Split Squat" -M unilateral \\
        -L "10@20,10@20" -R "10@20,9@20"
    """
    store = get_store(history_path)
    records = store.load_records()

    if movement not in MOVEMENT_KINDS:
        views.print_error("Movement must be 'bilateral' or 'unilateral'")
        raise typer.Exit(1)

    # Date
    if date is None and exercise is None:
        default_date = datetime.now().strftime("%Y-%m-%dT%H:%M")
        raw = views.console.input(f"Date & time [{default_date}]: ").strip()
        date = raw or default_date
    try:
        when = parse_when(date)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    builder = SessionBuilder(session_date=when)

    if exercise is not None:
        try:
            builder.add_entry(_entry_from_options(
                builder, exercise, category, equipment, muscle, movement, sets, left, right,
            ))
        except ValidationError as e:
            views.print_error(str(e))
            raise typer.Exit(1)
    else:
        # ── Interactive multi-exercise loop ─────────────────────────────────
        while True:
            entry = _interactive_entry(builder, records)
            if entry is not None:
                builder.add_entry(entry)
                views.print_success(f"Added {entry.name}")
            views.print_entries(builder.entries)

            views.console.print()
            views.console.print(
                "  \\[a] Add exercise  \\[r] Remove exercise  "
                "\\[s] Review & save  \\[q] Quit without saving"
            )
            choice = views.console.input("Choose [s]: ").strip().lower() or "s"
            if choice == "q":
                builder.clear()
                views.print_info("Session discarded.")
                raise typer.Exit(0)
            if choice == "r":
                _remove_interactive(builder)
                continue
            if choice == "s":
                if builder.is_empty():
                    views.print_error("Add at least one exercise before saving.")
                    continue
                break

    # ── Review and save ─────────────────────────────────────────────────────

    entries = builder.entries
    comparisons = [compare_entry(records, e) for e in entries]
    totals = builder.totals()

    if exercise is None and not json_out:
        views.print_review(when, entries, comparisons, totals)
        views.console.print()
        if not views.confirm_action("Save this session?"):
            views.print_info("Session discarded.")
            raise typer.Exit(0)

    try:
        committed = builder.commit(records)
    except EmptySessionError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    try:
        store.save_records(records)
    except OSError as e:
        views.print_error(f"Could not save history: {e}")
        raise typer.Exit(1)

    if json_out:
        print(json.dumps({
            "date": format_datetime(when),
            "saved": [
                {
                    "exercise": name,
                    **record_to_dict(record),
                    "trend": cmp.trend.direction,
                    "delta_last": cmp.trend.delta if cmp.last else None,
                    "delta_best": cmp.delta_best,
                }
                for (name, record), cmp in zip(committed, comparisons)
            ],
            "totals": {
                "exercises": totals.total_exercises,
                "sets": totals.total_sets,
                "volume": totals.total_volume,
            },
        }, indent=2))
        return

    if exercise is not None:
        views.print_review(when, entries, comparisons, totals)
        views.console.print()
    views.print_success(f"Workout saved! {len(committed)} exercise(s) logged.")

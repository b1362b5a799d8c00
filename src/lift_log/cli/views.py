"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of workout data.  Nothing here
computes analytics; values come from lift_log.core.
"""

from datetime import datetime
from typing import Sequence

from rich.console import Console
from rich.table import Table

from ..core.ascii_plot import create_heaviest_plot, create_weekly_volume_chart, format_kg
from ..core.exercises.base import CatalogExercise
from ..core.metrics import history_volume, record_volume, side_heaviest
from ..core.models import (
    EntryComparison,
    PerformanceLayout,
    PerformedSet,
    PreviousSet,
    PreviousSets,
    SessionExercise,
    SessionTotals,
    Trend,
    UnilateralLayout,
    WorkoutRecord,
)
from ..core.record_store import RecordStore

console = Console()


def title(text: str | None) -> str:
    """Capitalise the first letter only ("cable machine" -> "Cable machine")."""
    return text[:1].upper() + text[1:] if text else ""


def format_date(value: datetime | None) -> str:
    if value is None:
        return "-"
    if value.hour == 0 and value.minute == 0:
        return value.strftime("%Y-%m-%d")
    return value.strftime("%Y-%m-%d %H:%M")


def format_pairs(sets: Sequence[PerformedSet]) -> str:
    """'8x40kg, 6x45kg' or an em dash when there are no sets."""
    if not sets:
        return "—"
    return ", ".join(f"{s.reps}x{format_kg(s.weight)}kg" for s in sets)


def format_layout(layout: PerformanceLayout) -> list[str]:
    """Human-readable lines for the sets of one record or entry."""
    if isinstance(layout, UnilateralLayout):
        per_side = side_heaviest(layout)
        wl, cl = per_side["left"]
        wr, cr = per_side["right"]
        return [
            f"Left:  {format_pairs(layout.left)}",
            f"Right: {format_pairs(layout.right)}",
            f"Heaviest Left: {format_kg(wl)}kg × {cl} set(s) • "
            f"Heaviest Right: {format_kg(wr)}kg × {cr} set(s)",
        ]
    if layout.kind == "summary":
        return [f"{layout.set_count} sets (no per-set data)"]
    return [f"{layout.set_count} sets → {format_pairs(layout.all_sets())}"]


def format_meta(category: str, equipment: str, muscle: str | None, movement: str) -> str:
    parts = [title(category), title(equipment)]
    if muscle:
        parts.append(muscle)
    parts.append(title(movement))
    return " • ".join(p for p in parts if p)


def format_delta(delta: float | None) -> str:
    """▲ +5kg / ▼ 2.5kg / = 0kg, or an em dash without history."""
    if delta is None:
        return "—"
    if delta > 0:
        return f"[green]▲ +{format_kg(delta)}kg[/green]"
    if delta < 0:
        return f"[red]▼ {format_kg(abs(delta))}kg[/red]"
    return "[yellow]= 0kg[/yellow]"


def format_trend(trend: Trend) -> str:
    if trend.direction == "no-history":
        return "[dim]— no history[/dim]"
    return format_delta(trend.delta)


def format_previous(prev: PreviousSet) -> str:
    """Input hint for one set slot: 'Prev: 40kg × 8' or 'Prev: —'."""
    if prev.weight is None:
        return "Prev: —"
    reps = f" × {prev.reps}" if prev.reps is not None else ""
    return f"Prev: {format_kg(prev.weight)}kg{reps}"


def previous_to_dict(prev: PreviousSets) -> dict:
    """JSON-ready form of aggregator output."""
    def _slots(items: list[PreviousSet]) -> list[dict]:
        return [{"weight": p.weight, "reps": p.reps} for p in items]

    if prev.kind == "unilateral":
        return {"movement": "unilateral", "left": _slots(prev.left), "right": _slots(prev.right)}
    return {"movement": "bilateral", "sets": _slots(prev.sets)}


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


def format_exercise_table(store: RecordStore) -> Table:
    """
    Create a Rich table listing every exercise with history.

    Args:
        store: Record store to display

    Returns:
        Rich Table object
    """
    table = Table(title="Workout History")

    table.add_column("Exercise", style="cyan")
    table.add_column("Records", justify="right")
    table.add_column("Last", style="dim")
    table.add_column("Best (kg)", justify="right", style="bold")
    table.add_column("Volume", justify="right")

    for name in store.exercise_names():
        last = store.most_recent_record(name)
        table.add_row(
            name,
            str(len(store.records(name))),
            format_date(last.date if last else None),
            format_kg(store.best_weight(name)),
            format_kg(history_volume(store.records(name))),
        )

    return table


def format_record_table(exercise_name: str, records: Sequence[WorkoutRecord]) -> Table:
    """
    Create a Rich table of one exercise's records, oldest first.

    Args:
        exercise_name: Exercise shown in the title
        records: Records in display order

    Returns:
        Rich Table object
    """
    table = Table(title=exercise_name, show_lines=True)

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Date", style="cyan")
    table.add_column("Details")
    table.add_column("Sets")
    table.add_column("Heaviest", justify="right", style="bold")
    table.add_column("Volume", justify="right")
    table.add_column("ID", style="dim")

    for i, record in enumerate(records, 1):
        count = record.heaviest_set_count
        heaviest = f"{format_kg(record.heaviest_weight)}kg"
        if count:
            heaviest += f" × {count}"
        table.add_row(
            str(i),
            format_date(record.date),
            format_meta(record.category, record.equipment, record.muscle, record.movement),
            "\n".join(format_layout(record.layout)),
            heaviest,
            format_kg(record_volume(record)),
            record.id,
        )

    return table


def print_exercise_list(store: RecordStore) -> None:
    if len(store) == 0:
        console.print("[yellow]No workouts recorded yet.[/yellow]")
        return
    console.print(format_exercise_table(store))


def print_history(store: RecordStore, exercise_name: str) -> None:
    """
    Print one exercise's history, oldest first.

    Args:
        store: Record store
        exercise_name: Exercise to display
    """
    records = store.records_chronological(exercise_name)
    if not records:
        console.print(f"[yellow]No records for {exercise_name}.[/yellow]")
        return
    console.print(f"[bold]Best Weight: {format_kg(store.best_weight(exercise_name))}kg[/bold]")
    console.print(format_record_table(exercise_name, records))


def print_previous(prev: PreviousSets) -> None:
    """Print per-set previous values."""
    if prev.kind == "unilateral":
        for side, items in (("Left", prev.left), ("Right", prev.right)):
            console.print(f"[bold]{side}[/bold]")
            for i, p in enumerate(items, 1):
                console.print(f"  Set {i}: {format_previous(p)}")
        return
    for i, p in enumerate(prev.sets, 1):
        console.print(f"  Set {i}: {format_previous(p)}")


def print_entries(entries: Sequence[SessionExercise]) -> None:
    """Print the in-progress workout list with 1-based positions."""
    if not entries:
        console.print("[dim]No exercises added yet.[/dim]")
        return
    console.print()
    console.print("[bold]Current workout[/bold]")
    for i, entry in enumerate(entries, 1):
        meta = format_meta(entry.category, entry.equipment, entry.muscle, entry.movement)
        console.print(f"  [{i}] [bold]{entry.name}[/bold] [dim]({meta})[/dim]")
        for line in format_layout(entry.layout):
            console.print(f"      {line}")
        if entry.movement != "unilateral":
            console.print(
                f"      Heaviest: {format_kg(entry.heaviest_weight)}kg × "
                f"{entry.heaviest_set_count} set(s)"
            )


def print_review(
    when: datetime | None,
    entries: Sequence[SessionExercise],
    comparisons: Sequence[EntryComparison],
    totals: SessionTotals,
) -> None:
    """
    Print the session summary shown before saving.

    Args:
        when: Session date/time
        entries: Session entries
        comparisons: One comparison per entry, same order
        totals: Session totals
    """
    console.print()
    console.print("[bold cyan]Session summary[/bold cyan]")
    console.print(f"Date & Time: {format_date(when)}")
    console.print()

    for entry, cmp in zip(entries, comparisons):
        meta = format_meta(entry.category, entry.equipment, entry.muscle, entry.movement)
        console.print(f"[bold]{entry.name}[/bold] [dim]({meta})[/dim]")
        for line in format_layout(entry.layout):
            console.print(f"  {line}")
        console.print(
            f"  Heaviest this session: [bold]{format_kg(cmp.heaviest_weight)}kg[/bold] "
            f"{format_trend(cmp.trend)}"
        )
        last_date = f" ({format_date(cmp.last.date)})" if cmp.last else ""
        best_date = f" ({format_date(cmp.best.date)})" if cmp.best else ""
        last_delta = cmp.trend.delta if cmp.last else None
        console.print(f"  vs Last{last_date}: {format_delta(last_delta)}")
        console.print(f"  vs Best{best_date}: {format_delta(cmp.delta_best)}")
        console.print()

    console.print(f"[bold]Total Exercises:[/bold] {totals.total_exercises}")
    console.print(f"[bold]Total Sets:[/bold] {totals.total_sets}")
    console.print(f"[bold]Estimated Volume:[/bold] {totals.total_volume:.1f} kg·reps")


def format_catalog_table(items: Sequence[CatalogExercise]) -> Table:
    table = Table(title="Exercises")
    table.add_column("Name", style="cyan")
    table.add_column("Categories")
    table.add_column("Equipment", style="green")
    table.add_column("Muscles", style="dim")
    for ex in items:
        table.add_row(
            ex.name,
            ", ".join(ex.categories),
            ", ".join(ex.equipment),
            ", ".join(ex.muscles),
        )
    return table


def print_catalog(items: Sequence[CatalogExercise]) -> None:
    if not items:
        console.print("[yellow]No exercises match these filters.[/yellow]")
        return
    console.print(format_catalog_table(items))


def print_heaviest_plot(store: RecordStore, exercise_name: str) -> None:
    """Print the heaviest-lift chart for one exercise."""
    plot = create_heaviest_plot(
        store.heaviest_series(exercise_name),
        exercise_name=exercise_name,
        best_weight=store.best_weight(exercise_name) if exercise_name in store else None,
    )
    console.print(plot)


def print_volume_chart(store: RecordStore, weeks: int = 4) -> None:
    """
    Print weekly volume chart.

    Args:
        store: Record store to chart
        weeks: Number of weeks to show
    """
    console.print(create_weekly_volume_chart(store, weeks))


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")

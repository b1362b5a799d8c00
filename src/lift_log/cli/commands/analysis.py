"""Analysis commands: previous, plot, volume."""

import json
from datetime import datetime
from typing import Annotated

import typer

from ...core.aggregator import compute_previous_sets
from ...core.ascii_plot import weekly_volume
from ...core.config import DEFAULT_SET_COUNT, MOVEMENT_KINDS
from ...core.trends import best_lift, last_lift
from ...io.serializers import format_datetime
from .. import views
from ..app import HistoryPathOption, JsonOption, app, get_store
from .history import resolve_exercise


@app.command()
def previous(
    exercise: Annotated[str, typer.Argument(help="Exercise name")],
    movement: Annotated[
        str,
        typer.Option("--movement", "-M", help="bilateral | unilateral"),
    ] = "bilateral",
    sets: Annotated[
        int,
        typer.Option("--sets", "-n", help="Number of sets planned"),
    ] = DEFAULT_SET_COUNT,
    history_path: HistoryPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show last session's per-set values to aim for, plus last and best lifts.
    """
    if movement not in MOVEMENT_KINDS:
        views.print_error("Movement must be 'bilateral' or 'unilateral'")
        raise typer.Exit(1)
    if sets < 1:
        views.print_error("Number of sets must be at least 1")
        raise typer.Exit(1)

    records = get_store(history_path).load_records()
    name = resolve_exercise(records, exercise) or exercise
    prev = compute_previous_sets(records, name, movement, sets)  # type: ignore
    last = last_lift(records, name)
    best = best_lift(records, name)

    if json_out:
        def _snap(s):
            if s is None:
                return None
            return {"date": format_datetime(s.date), "weight": s.weight, "reps": s.reps}

        print(json.dumps({
            "exercise": name,
            "previous": views.previous_to_dict(prev),
            "last": _snap(last),
            "best": _snap(best),
        }, indent=2))
        return

    views.console.print(f"[bold cyan]{name}[/bold cyan] ({views.title(movement)}, {sets} sets)")
    views.print_previous(prev)
    if last is None:
        views.print_info("No history yet for this exercise.")
        return
    views.console.print()
    for label, snap in (("Last", last), ("Best", best)):
        reps = f" × {snap.reps}" if snap.reps is not None else ""
        views.console.print(
            f"{label}: [bold]{views.format_kg(snap.weight)}kg{reps}[/bold] "
            f"({views.format_date(snap.date)})"
        )


@app.command()
def plot(
    exercise: Annotated[str, typer.Argument(help="Exercise name")],
    history_path: HistoryPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show ASCII chart of heaviest weight per session.
    """
    records = get_store(history_path).load_records()
    name = resolve_exercise(records, exercise)
    if name is None:
        views.print_error(f"No history for '{exercise}'")
        raise typer.Exit(1)

    if json_out:
        print(json.dumps({
            "exercise": name,
            "best_weight": records.best_weight(name),
            "points": [
                {"date": format_datetime(d), "weight": w}
                for d, w in records.heaviest_series(name)
            ],
        }, indent=2))
        return

    views.print_heaviest_plot(records, name)


@app.command()
def volume(
    weeks: Annotated[
        int,
        typer.Option("--weeks", "-w", help="Number of weeks to show"),
    ] = 4,
    history_path: HistoryPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show weekly volume chart.
    """
    if weeks < 1:
        views.print_error("Weeks must be at least 1")
        raise typer.Exit(1)

    records = get_store(history_path).load_records()

    if json_out:
        totals = weekly_volume(records, weeks, datetime.now())
        print(json.dumps({
            "weeks": [
                {"weeks_ago": i, "volume": round(v, 1)}
                for i, v in enumerate(totals)
            ],
        }, indent=2))
        return

    views.print_volume_chart(records, weeks)

"""
CLI entry point using Typer.

Provides commands for logging workouts and reviewing progress:
- log-session: Log a workout (interactive or one-liner)
- show-history: Display workout history
- previous: Show last session's sets for an exercise
- edit-record / delete-record: Correct or remove a stored record
- plot: ASCII chart of heaviest lift per session
- volume: Weekly volume chart
- exercises: Browse the exercise catalog
"""

import typer

from . import views
from .app import app, get_store
from .commands import analysis, catalog, history, sessions  # noqa: F401  (registers commands)
from .commands.analysis import plot, volume
from .commands.history import show_history
from .commands.sessions import log_session


@app.callback(invoke_without_command=True)
def main_callback(ctx: typer.Context) -> None:
    """
    Strength-training log. Run without a command for interactive mode.
    """
    if ctx.invoked_subcommand is not None:
        return

    # ── Interactive main menu ───────────────────────────────────────────────
    views.console.print()
    views.console.print("[bold cyan]lift-log[/bold cyan] — strength-training log")
    views.console.print()

    menu = {
        "1": ("log-session",   "Log a workout"),
        "2": ("show-history",  "Show history"),
        "3": ("exercise",      "Show one exercise"),
        "4": ("plot",          "Progress chart"),
        "5": ("volume",        "Weekly volume chart"),
        "d": ("delete-record", "Delete a record"),
        "0": ("quit",          "Quit"),
    }

    for key, (_, desc) in menu.items():
        views.console.print(f"  \\[{key}] {desc}")

    views.console.print()
    choice = views.console.input("Choose [1]: ").strip() or "1"

    if choice == "0":
        raise typer.Exit(0)

    chosen = menu.get(choice, (None,))[0]
    if chosen is None:
        views.print_error(f"Unknown choice: {choice}")
        raise typer.Exit(1)

    if chosen == "log-session":
        ctx.invoke(log_session)
    elif chosen == "show-history":
        ctx.invoke(show_history)
    elif chosen == "volume":
        ctx.invoke(volume)
    else:
        name = _menu_pick_exercise()
        if name is None:
            return
        if chosen == "exercise":
            ctx.invoke(show_history, exercise=name)
        elif chosen == "plot":
            ctx.invoke(plot, exercise=name)
        elif chosen == "delete-record":
            _menu_delete_record(name)


def _menu_pick_exercise() -> str | None:
    """Pick one logged exercise by number."""
    records = get_store(None).load_records()
    names = records.exercise_names()
    if not names:
        views.print_info("No workouts recorded yet.")
        return None
    for i, name in enumerate(names, 1):
        views.console.print(f"  \\[{i}] {name}")
    while True:
        raw = views.console.input("Exercise # (Enter to cancel): ").strip()
        if not raw:
            return None
        if raw.isdigit() and 1 <= int(raw) <= len(names):
            return names[int(raw) - 1]
        views.print_error(f"Enter a number between 1 and {len(names)}")


def _menu_delete_record(exercise_name: str) -> None:
    """Interactive delete helper called from the main menu."""
    store = get_store(None)
    records = store.load_records()
    listing = records.records_chronological(exercise_name)
    views.print_history(records, exercise_name)

    while True:
        raw = views.console.input("Delete record # (Enter to cancel): ").strip()
        if not raw:
            views.print_info("Cancelled.")
            return
        if raw.isdigit() and 1 <= int(raw) <= len(listing):
            break
        views.print_error(f"Enter a number between 1 and {len(listing)}")

    target = listing[int(raw) - 1]
    if not views.confirm_action(f"Delete {views.format_date(target.date)}?"):
        views.print_info("Cancelled.")
        return
    records.delete_record(exercise_name, target.id)
    store.save_records(records)
    views.print_success(f"Deleted record #{raw} of {exercise_name}")


if __name__ == "__main__":
    app()

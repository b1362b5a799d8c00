"""Shared Typer app object, shared option types, and store utility."""

from datetime import datetime
from pathlib import Path
from typing import Annotated, Optional

import typer

from ..io.history_store import HistoryStore, get_default_history_path
from ..io.serializers import parse_datetime

# Shared --history-path option type used across all commands
HistoryPathOption = Annotated[
    Optional[Path],
    typer.Option("--history-path", "-p", help="Path to history JSON file"),
]

# Shared --json option type
JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

app = typer.Typer(
    name="lift-log",
    help="Log strength-training sessions and track your heaviest lifts.",
    no_args_is_help=False,
    invoke_without_command=True,
)


def get_store(history_path: Path | None) -> HistoryStore:
    """Get history store from path or default location."""
    if history_path is None:
        history_path = get_default_history_path()
    return HistoryStore(history_path)


def parse_when(raw: str | None) -> datetime:
    """
    Session date/time from a --date value.

    No value means now (minute precision).

    Raises:
        ValidationError: If the value is not an ISO date or date-time
    """
    if raw is None or not raw.strip():
        return datetime.now().replace(second=0, microsecond=0)
    return parse_datetime(raw)

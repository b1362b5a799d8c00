"""
ASCII plotting for heaviest-lift progress.

Creates terminal-friendly charts of training progress over time.
"""

from datetime import datetime

from .metrics import record_volume
from .record_store import RecordStore


def format_kg(value: float) -> str:
    """Weight without trailing zeros: 40.0 -> "40", 42.50 -> "42.5"."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return text if text not in ("", "-0") else "0"


def create_heaviest_plot(
    points: list[tuple[datetime, float]],
    width: int = 60,
    height: int = 20,
    exercise_name: str = "",
    best_weight: float | None = None,
) -> str:
    """
    Create an ASCII plot of heaviest weight per session over time.

    Args:
        points: (date, heaviest kg) pairs, any order
        width: Plot width in characters
        height: Plot height in lines
        exercise_name: Display name shown in the chart title
        best_weight: When given, a dotted line marks the all-time best

    Returns:
        ASCII art string
    """
    if not points:
        return "No records yet. Log a session to see progress."

    points = sorted(points, key=lambda p: p[0])

    min_date = points[0][0]
    max_date = points[-1][0]
    date_range = (max_date - min_date).days
    if date_range == 0:
        date_range = 1

    weights = [w for _, w in points]
    y_min = max(0.0, min(weights) - 5.0)
    y_max = max(weights) + 5.0
    y_range = y_max - y_min
    if y_range == 0:
        y_range = 1.0

    plot_width = width - 8  # Leave room for y-axis labels
    plot_height = height - 3  # Leave room for x-axis and title

    grid = [[" " for _ in range(plot_width)] for _ in range(plot_height)]

    def _row(value: float) -> int:
        y = int(((value - y_min) / y_range) * (plot_height - 1))
        return plot_height - 1 - y  # Flip y-axis

    plot_points: list[tuple[int, int, float]] = []  # (x, y, kg)
    for date, kg in points:
        days_from_start = (date - min_date).days
        x = int((days_from_start / date_range) * (plot_width - 1))
        plot_points.append((x, _row(kg), kg))

    if best_weight is not None:
        best_row = _row(best_weight)
        if 0 <= best_row < plot_height:
            for x in range(plot_width):
                grid[best_row][x] = "·"

    # Connecting lines (staircase style: ╭─╯)
    for i in range(len(plot_points) - 1):
        col1, row1, _ = plot_points[i]
        col2, row2, _ = plot_points[i + 1]

        def _p(x: int, r: int, ch: str) -> None:
            if 0 <= x < plot_width and 0 <= r < plot_height and grid[r][x] in (" ", "·"):
                grid[r][x] = ch

        if row1 == row2:
            for x in range(col1 + 1, col2):
                _p(x, row1, "─")
            continue

        if col1 == col2:
            for r in range(min(row1, row2) + 1, max(row1, row2)):
                _p(col1, r, "│")
            continue

        row_dir = -1 if row2 < row1 else 1  # -1 = going up (heavier)
        corner_exit = "╯" if row_dir == -1 else "╮"
        corner_entry = "╭" if row_dir == -1 else "╰"
        n_segs = abs(row2 - row1) + 1

        for step in range(n_segs):
            row = row1 + row_dir * step
            pivot_in = col1 + (col2 - col1) * step // n_segs
            pivot_out = col1 + (col2 - col1) * (step + 1) // n_segs

            if step == 0:
                for x in range(col1 + 1, pivot_out):
                    _p(x, row, "─")
                _p(pivot_out, row, corner_exit)
            elif step == n_segs - 1:
                _p(pivot_in, row, corner_entry)
                for x in range(pivot_in + 1, col2):
                    _p(x, row, "─")
            else:
                _p(pivot_in, row, corner_entry)
                for x in range(pivot_in + 1, pivot_out):
                    _p(x, row, "─")
                _p(pivot_out, row, corner_exit)

    for x, y, _ in plot_points:
        if 0 <= x < plot_width and 0 <= y < plot_height:
            grid[y][x] = "●"

    lines = []
    title = "Heaviest Lift (kg)"
    if exercise_name:
        title += f" — {exercise_name}"
    lines.append(title)
    lines.append("─" * width)

    for i, row in enumerate(grid):
        y_val = y_max - (i / (plot_height - 1)) * y_range if plot_height > 1 else y_max
        label = f"{y_val:6.1f} ┤"
        lines.append(label + "".join(row))

    lines.append("─" * width)

    # X-axis date labels
    label_line = [" "] * plot_width
    mid_date = min_date + (max_date - min_date) / 2
    for x_pos, date in ((0, min_date), (plot_width // 2, mid_date), (plot_width - 10, max_date)):
        date_str = date.strftime("%b %d")
        for i, c in enumerate(date_str):
            if 0 <= x_pos + i < plot_width:
                label_line[x_pos + i] = c
    lines.append(" " * 8 + "".join(label_line))

    legend = ["● heaviest per session"]
    if best_weight is not None:
        legend.append(f"· best {format_kg(best_weight)} kg")
    lines.append("   ".join(legend))

    return "\n".join(lines)


def create_simple_bar_chart(
    labels: list[str],
    values: list[float],
    width: int = 40,
    title: str = "",
) -> str:
    """
    Create a simple horizontal bar chart.

    Args:
        labels: Labels for each bar
        values: Values for each bar
        width: Maximum bar width
        title: Chart title

    Returns:
        ASCII bar chart string
    """
    if not values:
        return "No data to display."

    max_val = max(values)
    max_label_len = max(len(l) for l in labels) if labels else 0

    lines = []

    if title:
        lines.append(title)
        lines.append("─" * (max_label_len + width + 5))

    for label, value in zip(labels, values):
        bar_len = int((value / max_val) * width) if max_val > 0 else 0
        bar = "█" * bar_len
        lines.append(f"{label:>{max_label_len}} │{bar} {value:.1f}")

    return "\n".join(lines)


def weekly_volume(
    store: RecordStore,
    weeks: int = 4,
    today: datetime | None = None,
) -> list[float]:
    """
    Total volume (kg·reps) per week across every exercise.

    Index 0 is the current week (the 7 days ending at ``today``), index 1
    the week before, and so on.
    """
    anchor = today or datetime.now()
    totals = [0.0] * weeks
    for name in store:
        for record in store.records(name):
            days_ago = (anchor - record.date).days
            if days_ago < 0:
                continue
            idx = days_ago // 7
            if idx < weeks:
                totals[idx] += record_volume(record)
    return totals


def create_weekly_volume_chart(
    store: RecordStore,
    weeks: int = 4,
    today: datetime | None = None,
) -> str:
    """
    Create a chart showing weekly training volume.

    Args:
        store: Record store to read
        weeks: Number of weeks to show
        today: Anchor date (default: now)

    Returns:
        ASCII chart string
    """
    if len(store) == 0:
        return "No training history."

    totals = weekly_volume(store, weeks, today)

    labels = []
    values = []
    for i in range(weeks - 1, -1, -1):
        if i == 0:
            labels.append("This week")
        elif i == 1:
            labels.append("Last week")
        else:
            labels.append(f"{i} weeks ago")
        values.append(totals[i])

    return create_simple_bar_chart(labels, values, title="Weekly Volume (kg·reps)")

"""
ASCII rendering for terminal output.

Creates terminal-friendly plots of progress series, contribution grids and
weekly bar charts from the engine's plain data.
"""

from .grid import month_labels
from .models import ContributionGrid, ProgressPoint, TrendResult

HEATMAP_CHARS = ("·", "░", "▒", "█")  # level 0-3
DAY_LABELS = ("Mon", "", "Wed", "", "Fri", "", "")


def create_progress_plot(
    points: list[ProgressPoint],
    trend: TrendResult | None = None,
    target: float | None = None,
    width: int = 60,
    height: int = 16,
    title: str = "Estimated 1RM",
) -> str:
    """
    Create an ASCII plot of a progress series over time.

    Args:
        points: Progress points (sorted by date inside)
        trend: Fitted trend; its line is drawn as · at each session
        target: Goal value; drawn as a row of ═ when inside the y range
        width: Plot width in characters
        height: Plot height in lines
        title: Chart title

    Returns:
        ASCII art string
    """
    if not points:
        return "No sessions recorded yet for this exercise."

    ordered = sorted(points, key=lambda p: p.date)
    min_date = ordered[0].date
    max_date = ordered[-1].date
    date_range = (max_date - min_date).days or 1

    fitted: list[float] = []
    if trend is not None and trend.classification != "insufficient_data":
        fitted = [trend.intercept + trend.slope * i for i in range(len(ordered))]

    values = [p.value for p in ordered] + fitted
    if target is not None:
        values.append(target)
    y_min = max(0.0, min(values) * 0.95)
    y_max = max(values) * 1.05
    y_range = (y_max - y_min) or 1.0

    plot_width = width - 8  # Leave room for y-axis labels
    plot_height = height - 3  # Leave room for x-axis and title

    grid = [[" " for _ in range(plot_width)] for _ in range(plot_height)]

    def _pos(day_offset: int, value: float) -> tuple[int, int]:
        x = int((day_offset / date_range) * (plot_width - 1))
        y = int(((value - y_min) / y_range) * (plot_height - 1))
        return x, plot_height - 1 - y  # Flip y-axis

    if target is not None and y_min <= target <= y_max:
        _, ty = _pos(0, target)
        for x in range(plot_width):
            grid[ty][x] = "═"

    for p, f in zip(ordered, fitted):
        x, y = _pos((p.date - min_date).days, f)
        if 0 <= y < plot_height:
            grid[y][x] = "·"

    for p in ordered:
        x, y = _pos((p.date - min_date).days, p.value)
        grid[y][x] = "●"

    lines = [title, "─" * width]
    for i, row in enumerate(grid):
        y_val = y_max - (i / (plot_height - 1)) * y_range if plot_height > 1 else y_max
        lines.append(f"{y_val:6.1f} ┤" + "".join(row))
    lines.append("─" * width)

    label_line = [" "] * plot_width
    for x_pos, day in ((0, min_date), (plot_width - 6, max_date)):
        for i, c in enumerate(day.strftime("%b %d")):
            if 0 <= x_pos + i < plot_width:
                label_line[x_pos + i] = c
    lines.append(" " * 8 + "".join(label_line))

    legend = ["● session 1RM"]
    if fitted:
        legend.append("· trend")
    if target is not None:
        legend.append(f"═ target {target:.1f}")
    lines.append("   ".join(legend))

    return "\n".join(lines)


def create_heatmap(grid: ContributionGrid) -> str:
    """
    Render a contribution grid as 7 text rows.

    Out-of-period padding is blank; today is marked with ◆.
    """
    header = [" "] * grid.total_weeks
    for label, week_index in month_labels(grid):
        for i, c in enumerate(label):
            if week_index + i < len(header):
                header[week_index + i] = c

    lines = ["    " + "".join(header)]
    for row in range(7):
        cells = []
        for week in grid.weeks:
            cell = week[row]
            if not cell.is_in_period:
                cells.append(" ")
            elif cell.is_today:
                cells.append("◆")
            else:
                cells.append(HEATMAP_CHARS[cell.level])
        lines.append(f"{DAY_LABELS[row]:<4}" + "".join(cells))

    legend = "less " + "".join(HEATMAP_CHARS) + " more"
    if grid.is_capped_to_year:
        legend += "   (showing the last 365 days)"
    lines.append(legend)
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

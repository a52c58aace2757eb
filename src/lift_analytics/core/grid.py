"""
Contribution grid (calendar heatmap) layout.

Builds a 7-row × N-column grid directly with index arithmetic:
column = weeks since the first Monday, row = weekday (Mon = 0).
"""

import calendar
import math
from datetime import date, timedelta

from .config import GRID_LEVELS, GRID_MAX_DAYS, GRID_ROWS
from .dates import monday_on_or_before, sunday_on_or_after
from .models import ContributionGrid, DateRange, GridCell


def intensity_level(volume: float, max_volume: float) -> int:
    """
    Colour intensity 0-3 for a day's volume.

    0 means no volume; otherwise the volume is placed into thirds of the
    in-period maximum.
    """
    if volume <= 0 or max_volume <= 0:
        return 0
    level = math.ceil(volume / max_volume * GRID_LEVELS)
    return max(1, min(GRID_LEVELS, level))


def capped_range(date_range: DateRange) -> tuple[DateRange, bool]:
    """Clamp a range to its most recent 365 days; second value tells if it was clamped."""
    if date_range.days <= GRID_MAX_DAYS:
        return date_range, False
    start = date_range.end - timedelta(days=GRID_MAX_DAYS - 1)
    return DateRange(start=start, end=date_range.end), True


def build_contribution_grid(
    daily_volume_map: dict[str, float],
    date_range: DateRange,
    today: date | None = None,
) -> ContributionGrid:
    """
    Lay out a date range on a weekday × week grid.

    The grid starts on the Monday on/before the (possibly capped) range start
    and adds whole weeks until the range end is covered.  Days outside the
    range are padding: ``is_in_period`` is False, their level is 0 and they do
    not take part in intensity scaling.  An empty volume map still yields a
    complete grid.

    Args:
        daily_volume_map: ISO local date -> volume
        date_range: Resolved period
        today: Date flagged with ``is_today`` (defaults to the local today)

    Returns:
        ContributionGrid
    """
    if today is None:
        today = date.today()

    shown, is_capped = capped_range(date_range)
    first_monday = monday_on_or_before(shown.start)
    n_weeks = ((sunday_on_or_after(shown.end) - first_monday).days + 1) // GRID_ROWS

    max_volume = max(
        (v for k, v in daily_volume_map.items() if date.fromisoformat(k) in shown),
        default=0.0,
    )

    weeks: list[tuple[GridCell, ...]] = []
    for col in range(n_weeks):
        week: list[GridCell] = []
        for row in range(GRID_ROWS):
            day = first_monday + timedelta(days=col * GRID_ROWS + row)
            in_period = day in shown
            volume = daily_volume_map.get(day.isoformat(), 0.0)
            week.append(
                GridCell(
                    date=day,
                    is_today=day == today,
                    is_in_period=in_period,
                    volume=volume if in_period else 0.0,
                    level=intensity_level(volume, max_volume) if in_period else 0,
                )
            )
        weeks.append(tuple(week))

    return ContributionGrid(weeks=tuple(weeks), is_capped_to_year=is_capped, range=shown)


def month_labels(grid: ContributionGrid) -> list[tuple[str, int]]:
    """
    Header labels for the grid.

    Returns:
        (month abbreviation, week index) for every week containing the 1st
        of a month
    """
    labels: list[tuple[str, int]] = []
    for index, week in enumerate(grid.weeks):
        for cell in week:
            if cell.date.day == 1:
                labels.append((calendar.month_abbr[cell.date.month], index))
                break
    return labels

"""
Period resolution.

Turns a period selector into a concrete inclusive ``DateRange`` relative to a
reference date.
"""

import re
import warnings
from datetime import date, datetime, timedelta

from .config import ALL_TIME_START, DEFAULT_PERIOD_ID, DEFAULT_ROLLING_DAYS
from .dates import local_day, month_end
from .models import DateRange, Period


class InvalidPeriod(ValueError):
    """Raised when a period cannot be resolved (bad window length or kind)."""

    pass


# Persisted selector strings (URL parameter / stored preference) -> Period
PERIOD_OPTIONS: dict[str, Period] = {
    "last_7_days": Period("rolling", 7),
    "last_30_days": Period("rolling", 30),
    "last_90_days": Period("rolling", 90),
    "this_month": Period("calendarMonth"),
    "last_month": Period("previousCalendarMonth"),
    "this_year": Period("calendarYear"),
    "all_time": Period("allTime"),
}

DEFAULT_PERIOD: Period = Period("rolling", DEFAULT_ROLLING_DAYS)


def resolve_period(period: Period, reference_date: date | datetime) -> DateRange:
    """
    Resolve a period to an inclusive date range.

    Args:
        period: Period selector
        reference_date: "Today" for the computation; datetimes are reduced
            to their local calendar date

    Returns:
        DateRange with start <= end

    Raises:
        InvalidPeriod: For rolling windows with days <= 0 or an unknown kind
    """
    ref = local_day(reference_date)

    if period.kind == "rolling":
        if period.days is None or period.days <= 0:
            raise InvalidPeriod(
                f"Rolling period needs a positive number of days, got {period.days!r}"
            )
        return DateRange(start=ref - timedelta(days=period.days - 1), end=ref)

    if period.kind == "calendarMonth":
        start = ref.replace(day=1)
        return DateRange(start=start, end=month_end(start))

    if period.kind == "previousCalendarMonth":
        prev_end = ref.replace(day=1) - timedelta(days=1)
        return DateRange(start=prev_end.replace(day=1), end=prev_end)

    if period.kind == "calendarYear":
        return DateRange(start=date(ref.year, 1, 1), end=date(ref.year, 12, 31))

    if period.kind == "allTime":
        # Reference dates before the sentinel still yield a valid range
        return DateRange(start=min(ALL_TIME_START, ref), end=ref)

    raise InvalidPeriod(f"Unknown period kind: {period.kind!r}")


def parse_period_id(selector: str | None) -> Period:
    """
    Parse a persisted period selector.

    Accepts the keys of ``PERIOD_OPTIONS`` and ``rolling:<days>``.  Unknown or
    invalid values fall back to the default period (last 30 days) with a
    warning rather than an error, since selectors come from URLs and stored
    preferences.

    Args:
        selector: Selector string, or None

    Returns:
        Period
    """
    if selector is None or not selector.strip():
        return DEFAULT_PERIOD

    key = selector.strip().lower()
    if key in PERIOD_OPTIONS:
        return PERIOD_OPTIONS[key]

    m = re.fullmatch(r"rolling:(\d+)", key)
    if m and int(m.group(1)) > 0:
        return Period("rolling", int(m.group(1)))

    warnings.warn(
        f"Unknown period {selector!r}; using default {DEFAULT_PERIOD_ID!r}.",
        stacklevel=2,
    )
    return DEFAULT_PERIOD


def comparison_range(current: DateRange) -> DateRange:
    """
    Equally long range immediately preceding ``current``.

    Used for "vs previous period" deltas.
    """
    end = current.start - timedelta(days=1)
    return DateRange(start=end - timedelta(days=current.days - 1), end=end)


def is_date_in_range(value: date | datetime, date_range: DateRange) -> bool:
    """Inclusive test on the local calendar date of ``value``."""
    return local_day(value) in date_range

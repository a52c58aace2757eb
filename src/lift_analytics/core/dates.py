"""
Local-calendar date helpers.

Every day bucket in the engine is a *local* calendar date.  A workout logged
at 23:30 in Kyiv must land on the same day the user saw on their watch, not
on the UTC day, so aware datetimes are converted with ``astimezone()`` before
their date is taken.
"""

from datetime import date, datetime, timedelta


def local_day(value: date | datetime) -> date:
    """
    Return the local calendar date of a date or datetime.

    Args:
        value: A ``date``, a naive ``datetime`` (already local wall time) or
            an aware ``datetime`` (converted to the system local timezone)

    Returns:
        Local calendar date
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    return value


def to_local_date_string(value: date | datetime) -> str:
    """ISO ``YYYY-MM-DD`` string of the local calendar date."""
    return local_day(value).isoformat()


def monday_on_or_before(day: date) -> date:
    """First Monday on or before ``day``."""
    return day - timedelta(days=day.weekday())


def sunday_on_or_after(day: date) -> date:
    """Last Sunday on or after ``day``."""
    return day + timedelta(days=6 - day.weekday())


def days_between(earlier: date | datetime, later: date | datetime) -> int:
    """Whole calendar days from ``earlier`` to ``later`` (may be negative)."""
    return (local_day(later) - local_day(earlier)).days


def month_end(day: date) -> date:
    """Last calendar day of ``day``'s month."""
    if day.month == 12:
        return date(day.year, 12, 31)
    return date(day.year, day.month + 1, 1) - timedelta(days=1)

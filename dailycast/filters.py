"""
Date range utilities for range-mode statistics.
"""
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator, Optional, Tuple

from dailycast.validators import validate_date_range, validate_period


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar date interval."""
    start: date
    end: date

    @property
    def start_str(self) -> str:
        """Start date as YYYY-MM-DD string."""
        return self.start.strftime("%Y-%m-%d")

    @property
    def end_str(self) -> str:
        """End date as YYYY-MM-DD string."""
        return self.end.strftime("%Y-%m-%d")

    @property
    def days(self) -> int:
        """Number of calendar days covered."""
        return (self.end - self.start).days + 1

    def __contains__(self, day: date) -> bool:
        return self.start <= day <= self.end

    def __iter__(self) -> Iterator[date]:
        current = self.start
        while current <= self.end:
            yield current
            current += timedelta(days=1)

    def as_tuple(self) -> Tuple[date, date]:
        """Return as (start, end) tuple of dates."""
        return (self.start, self.end)

    def as_str_tuple(self) -> Tuple[str, str]:
        """Return as (start, end) tuple of strings."""
        return (self.start_str, self.end_str)


def parse_period(
    period: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    reference_date: Optional[date] = None,
) -> DateRange:
    """
    Parse period shortcut or explicit dates into DateRange.

    Args:
        period: Period shortcut (today, yesterday, week, last_week,
                month, last_month, last_7_days)
        start_date: Explicit start date (YYYY-MM-DD), used if period is None
        end_date: Explicit end date (YYYY-MM-DD), used if period is None
        reference_date: Reference date for calculations (default: today)

    Returns:
        DateRange with start and end dates

    Raises:
        ValidationError: If the period or the explicit dates are invalid

    Examples:
        >>> parse_period("last_7_days", reference_date=date(2026, 3, 10))
        DateRange(start=datetime.date(2026, 3, 4), end=datetime.date(2026, 3, 10))
    """
    today = reference_date or date.today()
    period = validate_period(period)

    if period == "today":
        return DateRange(today, today)

    elif period == "yesterday":
        yesterday = today - timedelta(days=1)
        return DateRange(yesterday, yesterday)

    elif period == "week":
        start_of_week = today - timedelta(days=today.weekday())
        return DateRange(start_of_week, today)

    elif period == "last_week":
        start_of_this_week = today - timedelta(days=today.weekday())
        end_of_last_week = start_of_this_week - timedelta(days=1)
        start_of_last_week = end_of_last_week - timedelta(days=6)
        return DateRange(start_of_last_week, end_of_last_week)

    elif period == "month":
        return DateRange(today.replace(day=1), today)

    elif period == "last_month":
        first_of_this_month = today.replace(day=1)
        last_of_last_month = first_of_this_month - timedelta(days=1)
        return DateRange(last_of_last_month.replace(day=1), last_of_last_month)

    elif period == "last_7_days":
        return DateRange(today - timedelta(days=6), today)

    if start_date and end_date:
        start, end = validate_date_range(start_date, end_date)
        return DateRange(start, end)

    return DateRange(today, today)

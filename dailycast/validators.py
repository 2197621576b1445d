"""
Input validation and value coercion.

Validators raise ValidationError on invalid user input (range queries).
Coercion helpers never raise: values leaking through from ingestion that
are not usable counts become ``None`` (unreported).
"""

import math
from datetime import date, datetime
from typing import Any, Optional, Tuple, Union

from dailycast.exceptions import ValidationError


HOURS_PER_DAY = 24

# Maximum allowed values
MAX_RANGE_DAYS = 366

VALID_PERIODS = {"today", "yesterday", "week", "last_week", "month", "last_month", "last_7_days"}


def coerce_hour_value(value: Any) -> Optional[int]:
    """
    Coerce a raw hourly slot into a cumulative count or ``None``.

    Numbers and numeric strings are accepted; anything else (NaN, booleans,
    negatives, free text) is treated as unreported.

    Examples:
        >>> coerce_hour_value("120")
        120
        >>> coerce_hour_value("n/a") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            value = float(value)
        except ValueError:
            return None

    try:
        number = float(value)
    except (TypeError, ValueError):
        return None

    if math.isnan(number) or math.isinf(number) or number < 0:
        return None

    return int(round(number))


def coerce_total(value: Any) -> Optional[float]:
    """Coerce a self-reported daily total; unusable values become None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number) or number < 0:
        return None
    return number


def validate_date_string(
    value: str,
    field: str = "date",
    format: str = "%Y-%m-%d"
) -> date:
    """
    Validate and parse a date string.

    Args:
        value: Date string to validate
        field: Field name for error messages
        format: Expected date format (default: YYYY-MM-DD)

    Returns:
        Parsed date object

    Raises:
        ValidationError: If date is invalid or in wrong format
    """
    if not value:
        raise ValidationError(field, "Date is required", value)

    if not isinstance(value, str):
        raise ValidationError(field, "Must be a string", value)

    try:
        return datetime.strptime(value.strip(), format).date()
    except ValueError:
        raise ValidationError(
            field,
            f"Invalid date format. Expected {format}",
            value
        )


def validate_date(value: Union[str, date, datetime], field: str = "date") -> date:
    """
    Accept a date, datetime or YYYY-MM-DD string and return a date.

    Raises:
        ValidationError: If value cannot be interpreted as a date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return validate_date_string(value, field)


def validate_date_range(
    start_date: Union[str, date],
    end_date: Union[str, date],
    max_days: int = MAX_RANGE_DAYS
) -> Tuple[date, date]:
    """
    Validate a date range.

    Args:
        start_date: Start date (YYYY-MM-DD string or date)
        end_date: End date (YYYY-MM-DD string or date)
        max_days: Maximum allowed range in days

    Returns:
        Tuple of (start_date, end_date) as date objects

    Raises:
        ValidationError: If dates are invalid or range is too large
    """
    start = validate_date(start_date, "start_date")
    end = validate_date(end_date, "end_date")

    if start > end:
        raise ValidationError(
            "date_range",
            "Start date must be before or equal to end date",
            f"{start} to {end}"
        )

    days_diff = (end - start).days
    if days_diff > max_days:
        raise ValidationError(
            "date_range",
            f"Date range cannot exceed {max_days} days",
            f"{days_diff} days"
        )

    return start, end


def validate_hour(value: int, field: str = "hour") -> int:
    """
    Validate an hour-of-day index (0..23).

    Raises:
        ValidationError: If value is not an integer hour
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, "Must be an integer", value)

    if not 0 <= value < HOURS_PER_DAY:
        raise ValidationError(field, f"Must be between 0 and {HOURS_PER_DAY - 1}", value)

    return value


def validate_period(
    value: Optional[str],
    field: str = "period",
    allow_none: bool = True
) -> Optional[str]:
    """
    Validate a period shortcut.

    Args:
        value: Period string to validate
        field: Field name for error messages
        allow_none: Whether None is allowed

    Returns:
        Validated period string or None

    Raises:
        ValidationError: If period is invalid
    """
    if value is None or value == "":
        if allow_none:
            return None
        raise ValidationError(field, "Period is required")

    if not isinstance(value, str):
        raise ValidationError(field, "Must be a string", value)

    value = value.lower().strip()

    if value not in VALID_PERIODS:
        raise ValidationError(
            field,
            f"Must be one of: {', '.join(sorted(VALID_PERIODS))}",
            value
        )

    return value

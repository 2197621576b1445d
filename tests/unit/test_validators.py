"""
Tests for dailycast.validators module.
"""
import pytest
from datetime import date, datetime

from dailycast.validators import (
    coerce_hour_value,
    coerce_total,
    validate_date,
    validate_date_string,
    validate_date_range,
    validate_hour,
    validate_period,
)
from dailycast.exceptions import ValidationError


class TestCoerceHourValue:
    """Tests for coerce_hour_value function."""

    @pytest.mark.parametrize("raw,expected", [
        (120, 120),
        (0, 0),
        (12.6, 13),
        ("120", 120),
        (" 45 ", 45),
        ("7.2", 7),
    ])
    def test_usable_values(self, raw, expected):
        """Numbers and numeric strings become integer counts."""
        assert coerce_hour_value(raw) == expected

    @pytest.mark.parametrize("raw", [
        None, "", "n/a", float("nan"), float("inf"), -5, True, False, [1], {},
    ])
    def test_unusable_values_are_unreported(self, raw):
        """Anything that is not a non-negative number becomes None."""
        assert coerce_hour_value(raw) is None


class TestCoerceTotal:
    """Tests for coerce_total function."""

    def test_valid(self):
        assert coerce_total("750") == 750.0
        assert coerce_total(12) == 12.0

    @pytest.mark.parametrize("raw", [None, "total", -1, float("nan"), True])
    def test_invalid(self, raw):
        assert coerce_total(raw) is None


class TestValidateDateString:
    """Tests for validate_date_string function."""

    def test_valid_date(self):
        """Valid date string should return date object."""
        result = validate_date_string("2026-01-15")
        assert result == date(2026, 1, 15)

    def test_valid_date_custom_format(self):
        """Custom format should work."""
        result = validate_date_string("15/01/2026", format="%d/%m/%Y")
        assert result == date(2026, 1, 15)

    def test_invalid_format(self):
        """Invalid format should raise ValidationError."""
        with pytest.raises(ValidationError) as exc_info:
            validate_date_string("15-01-2026")  # Wrong format
        assert "Invalid date format" in str(exc_info.value)

    def test_invalid_date(self):
        """Invalid date should raise ValidationError."""
        with pytest.raises(ValidationError):
            validate_date_string("2026-02-30")  # Feb 30 doesn't exist

    def test_empty_string(self):
        """Empty string should raise ValidationError."""
        with pytest.raises(ValidationError) as exc_info:
            validate_date_string("")
        assert "required" in str(exc_info.value).lower()

    def test_non_string(self):
        """Non-string should raise ValidationError."""
        with pytest.raises(ValidationError) as exc_info:
            validate_date_string(12345)
        assert "string" in str(exc_info.value).lower()


class TestValidateDate:
    """Tests for validate_date function."""

    def test_accepts_date(self):
        assert validate_date(date(2026, 3, 1)) == date(2026, 3, 1)

    def test_accepts_datetime(self):
        """Datetimes are truncated to their date."""
        assert validate_date(datetime(2026, 3, 1, 17, 45)) == date(2026, 3, 1)

    def test_accepts_string(self):
        assert validate_date("2026-03-01") == date(2026, 3, 1)

    def test_field_name_in_error(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_date("yesterday", "start_date")
        assert exc_info.value.field == "start_date"


class TestValidateDateRange:
    """Tests for validate_date_range function."""

    def test_valid_range(self):
        """Valid date range should return tuple of dates."""
        start, end = validate_date_range("2026-01-01", "2026-01-31")
        assert start == date(2026, 1, 1)
        assert end == date(2026, 1, 31)

    def test_mixed_inputs(self):
        """Date objects and strings can be mixed."""
        start, end = validate_date_range(date(2026, 1, 1), "2026-01-02")
        assert (start, end) == (date(2026, 1, 1), date(2026, 1, 2))

    def test_same_day(self):
        """Same start and end date should be valid."""
        start, end = validate_date_range("2026-01-15", "2026-01-15")
        assert start == end == date(2026, 1, 15)

    def test_start_after_end(self):
        """Start date after end date should raise ValidationError."""
        with pytest.raises(ValidationError) as exc_info:
            validate_date_range("2026-01-31", "2026-01-01")
        assert "before or equal" in str(exc_info.value)

    def test_range_too_large(self):
        """Range exceeding max_days should raise ValidationError."""
        with pytest.raises(ValidationError) as exc_info:
            validate_date_range("2026-01-01", "2026-03-01", max_days=30)
        assert "cannot exceed" in str(exc_info.value)
        assert exc_info.value.field == "date_range"


class TestValidateHour:
    """Tests for validate_hour function."""

    @pytest.mark.parametrize("hour", [0, 12, 23])
    def test_valid(self, hour):
        assert validate_hour(hour) == hour

    @pytest.mark.parametrize("hour", [-1, 24, 100])
    def test_out_of_range(self, hour):
        with pytest.raises(ValidationError) as exc_info:
            validate_hour(hour)
        assert "between 0 and 23" in str(exc_info.value)

    @pytest.mark.parametrize("hour", ["12", 12.0, True, None])
    def test_not_an_integer(self, hour):
        with pytest.raises(ValidationError) as exc_info:
            validate_hour(hour)
        assert "integer" in str(exc_info.value)


class TestValidatePeriod:
    """Tests for validate_period function."""

    @pytest.mark.parametrize("period", [
        "today", "yesterday", "week", "last_week", "month", "last_month", "last_7_days",
    ])
    def test_valid_periods(self, period):
        """All known shortcuts should validate."""
        assert validate_period(period) == period

    def test_normalizes_case(self):
        """Case and surrounding whitespace are ignored."""
        assert validate_period("  Last_Week ") == "last_week"

    def test_none_allowed(self):
        assert validate_period(None) is None
        assert validate_period("") is None

    def test_none_not_allowed(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_period(None, allow_none=False)
        assert "required" in str(exc_info.value).lower()

    def test_unknown_period(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_period("fortnight")
        assert "Must be one of" in str(exc_info.value)

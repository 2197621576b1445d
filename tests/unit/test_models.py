"""
Tests for dailycast.models module.
"""
import pytest
from datetime import date

from dailycast.exceptions import HistoryDataError
from dailycast.models import (
    HOUR_KEYS,
    BacktestResult,
    DailyRecord,
    DashboardSnapshot,
    ForecastResult,
    GrowthSample,
    StatsSummary,
    TrendDirection,
    hour_key,
)


class TestHourKeys:
    """Tests for wide-row column naming."""

    def test_hour_key(self):
        assert hour_key(0) == "hour_00"
        assert hour_key(23) == "hour_23"

    def test_all_keys(self):
        assert len(HOUR_KEYS) == 24
        assert HOUR_KEYS[7] == "hour_07"


class TestDailyRecord:
    """Tests for DailyRecord model."""

    def test_pads_to_24_slots(self):
        """Short hour lists are padded with unreported slots."""
        record = DailyRecord(date=date(2026, 3, 1), hours=[10, 20])
        assert len(record.hours) == 24
        assert record.hours[2] is None

    def test_truncates_extra_slots(self):
        record = DailyRecord(date=date(2026, 3, 1), hours=list(range(30)))
        assert len(record.hours) == 24
        assert record.hours[23] == 23

    def test_coerces_values(self):
        """Messy slots become counts or None."""
        record = DailyRecord(date=date(2026, 3, 1), hours=["10", "x", -3, float("nan"), 4.4])
        assert record.hours[:5] == [10, None, None, None, 4]

    def test_from_dict_hour_keys(self):
        """Wide rows with hour_XX keys and dayOfWeek."""
        data = {"date": "2026-03-01", "dayOfWeek": "Sunday", "total": "900"}
        data.update({hour_key(h): 10 * h for h in range(24)})

        record = DailyRecord.from_dict(data)

        assert record.date == date(2026, 3, 1)
        assert record.day_of_week == "Sunday"
        assert record.total == 900.0
        assert record.hours[5] == 50

    def test_from_dict_hours_list(self):
        record = DailyRecord.from_dict({"date": date(2026, 3, 1), "hours": [1, 2, 3], "day_of_week": "Sun"})
        assert record.hours[:4] == [1, 2, 3, None]
        assert record.day_of_week == "Sun"

    def test_from_dict_missing_hour_keys(self):
        """Absent columns are unreported."""
        record = DailyRecord.from_dict({"date": "2026-03-01", "hour_03": 40})
        assert record.hours[3] == 40
        assert record.hours[4] is None

    @pytest.mark.parametrize("data", [{}, {"date": None}, {"date": ""}, {"hours": [1]}])
    def test_from_dict_without_date(self, data):
        with pytest.raises(HistoryDataError) as exc_info:
            DailyRecord.from_dict(data)
        assert exc_info.value.missing == ["date"]

    def test_last_observed_hour(self):
        """Highest hour with a positive value; zeros do not count."""
        record = DailyRecord(date=date(2026, 3, 1), hours=[5, 10, None, 20, 0, 0])
        assert record.last_observed_hour == 3
        assert record.has_observations

    def test_no_observations(self):
        record = DailyRecord(date=date(2026, 3, 1), hours=[0, 0, None])
        assert record.last_observed_hour == -1
        assert not record.has_observations

    def test_value_out_of_range(self):
        record = DailyRecord(date=date(2026, 3, 1), hours=[5])
        assert record.value(-1) is None
        assert record.value(24) is None
        assert record.value(0) == 5
        assert record.is_reported(0)
        assert not record.is_reported(1)

    def test_end_of_day_total(self):
        """Last positive value wins over the declared total."""
        record = DailyRecord(date=date(2026, 3, 1), hours=[5, 10, 15], total=999)
        assert record.end_of_day_total == 15

    def test_end_of_day_total_fallbacks(self):
        assert DailyRecord(date=date(2026, 3, 1), total=999).end_of_day_total == 999
        assert DailyRecord(date=date(2026, 3, 1)).end_of_day_total == 0

    def test_masked_after(self):
        """Masking hides later hours and leaves the original untouched."""
        record = DailyRecord(date=date(2026, 3, 1), hours=list(range(1, 25)), total=24)
        masked = record.masked_after(5)

        assert masked.hours[5] == 6
        assert masked.hours[6] is None
        assert masked.total is None
        assert record.hours[6] == 7

    def test_to_dict(self):
        record = DailyRecord(date=date(2026, 3, 1), hours=[1], day_of_week="Sunday")
        result = record.to_dict()

        assert result["date"] == "2026-03-01"
        assert result["day_of_week"] == "Sunday"
        assert len(result["hours"]) == 24


class TestGrowthSample:
    """Tests for GrowthSample model."""

    def test_is_fallback(self):
        assert GrowthSample(20, 20, 15, 30, 0).is_fallback
        assert not GrowthSample(20, 20, 15, 30, 4).is_fallback

    def test_to_dict(self):
        sample = GrowthSample(22.777, 22, 20, 26, 5, TrendDirection.INCREASING)
        result = sample.to_dict()

        assert result["average"] == 22.78
        assert result["trend_direction"] == "increasing"


class TestForecastResult:
    """Tests for ForecastResult model."""

    def _result(self):
        values = [float(10 * h) + 0.333 for h in range(24)]
        flags = [h > 15 for h in range(24)]
        return ForecastResult(date=date(2026, 3, 1), values=values, is_predicted=flags, last_observed_hour=15)

    def test_predicted_hours(self):
        assert self._result().predicted_hours == list(range(16, 24))

    def test_end_of_day_value(self):
        assert self._result().end_of_day_value == pytest.approx(230.333)

    def test_to_dict_rounds(self):
        result = self._result().to_dict()
        assert result["values"][1] == 10.33
        assert result["last_observed_hour"] == 15
        assert result["is_predicted"][16] is True


class TestStatsSummary:
    """Tests for StatsSummary model."""

    def test_to_dict(self):
        summary = StatsSummary(
            today_total=100, yesterday_last=900, avg_daily=1000.456,
            avg_hourly=20.001, today_estimated=950.5, range_mode=True,
        )
        result = summary.to_dict()

        assert result["avg_daily"] == 1000.46
        assert result["avg_hourly"] == 20.0
        assert result["range_mode"] is True


class TestBacktestResult:
    """Tests for BacktestResult model."""

    def test_sufficient(self):
        result = BacktestResult(date=date(2026, 3, 1), cutoff_hour=12, hour_errors={13: 0.1}, mean_error=0.1)
        assert result.sufficient
        assert result.evaluated_hours == [13]

    def test_insufficient(self):
        result = BacktestResult(date=date(2026, 3, 1), cutoff_hour=12)
        assert not result.sufficient
        assert result.to_dict()["mean_error"] is None

    def test_to_dict(self):
        result = BacktestResult(
            date=date(2026, 3, 1), cutoff_hour=18,
            hour_errors={20: 0.012345, 19: 0.5}, mean_error=0.2561725,
        ).to_dict()

        assert list(result["hour_errors"]) == [19, 20]
        assert result["hour_errors"][20] == 0.0123
        assert result["mean_error"] == 0.2562
        assert result["sufficient"] is True


class TestDashboardSnapshot:
    """Tests for DashboardSnapshot model."""

    def _snapshot(self, **kwargs):
        forecast = ForecastResult(date=date(2026, 3, 1), values=[1.0] * 24, is_predicted=[False] * 24)
        stats = StatsSummary(1, 2, 3, 4, 5)
        return DashboardSnapshot(
            target_date=date(2026, 3, 1), forecast=forecast, stats=stats,
            hourly_increments=[None, 2.346], **kwargs,
        )

    def test_to_dict(self):
        result = self._snapshot().to_dict()

        assert result["target_date"] == "2026-03-01"
        assert result["hourly_increments"] == [None, 2.35]
        assert "range" not in result

    def test_to_dict_with_range(self):
        result = self._snapshot(start_date=date(2026, 2, 1), end_date=date(2026, 3, 1)).to_dict()
        assert result["range"] == {"start": "2026-02-01", "end": "2026-03-01"}

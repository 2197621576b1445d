"""
Summary statistics for the dashboard cards.

Computes today's running total, yesterday's final total, averages over a
selection window (the last few completed days, or an explicit date range in
range mode) and an end-of-day estimate for today.
"""
from datetime import datetime
from typing import List, Optional, Sequence
from zoneinfo import ZoneInfo

import numpy as np

from dailycast.config import AppConfig, config as default_config
from dailycast.filters import DateRange
from dailycast.growth import collect_increments
from dailycast.history import HistoryStore
from dailycast.models import DailyRecord, StatsSummary, HOURS_PER_DAY
from dailycast.observability import get_logger
from dailycast.predictor import Predictor

logger = get_logger(__name__)


def end_of_day_total(record: Optional[DailyRecord]) -> float:
    """Final cumulative count of a day, or 0 for a missing record."""
    if record is None:
        return 0
    return record.end_of_day_total


def window_increments(records: Sequence[DailyRecord]) -> List[float]:
    """Every positive hour-to-hour increment across the given days."""
    return [inc for hour in range(1, HOURS_PER_DAY) for inc in collect_increments(records, hour)]


def hourly_increments(values: Sequence[Optional[float]]) -> List[Optional[float]]:
    """Per-hour deltas of a cumulative series for chart bars.

    Hour 0 has no delta; missing, zero-based or non-increasing steps are None.
    """
    increments: List[Optional[float]] = [None]
    for hour in range(1, len(values)):
        current, previous = values[hour], values[hour - 1]
        if current is None or previous is None or current <= 0 or previous <= 0:
            increments.append(None)
            continue
        delta = current - previous
        increments.append(delta if delta > 0 else None)
    return increments


class StatsAggregator:
    """Builds a StatsSummary for one target day."""

    def __init__(self, predictor: Optional[Predictor] = None, app_config: Optional[AppConfig] = None):
        cfg = app_config or default_config
        self.settings = cfg.stats
        self.timezone = cfg.timezone
        self.predictor = predictor or Predictor(app_config=cfg)

    def current_hour(self) -> int:
        """Wall-clock hour in the configured timezone."""
        return datetime.now(ZoneInfo(self.timezone)).hour

    def select_window(
        self,
        history: HistoryStore,
        target: DailyRecord,
        date_range: Optional[DateRange] = None,
    ) -> List[DailyRecord]:
        """Days feeding the averages.

        Default: the last completed days before the target. Range mode:
        every day inside the range.
        """
        if date_range is not None:
            return history.between(date_range.start, date_range.end)
        return history.recent(self.settings.window_days, before=target.date)

    def estimate_end_of_day(
        self,
        history: HistoryStore,
        target: DailyRecord,
        today_total: float,
        avg_daily: float,
        avg_hourly: float,
        current_hour: int,
    ) -> float:
        last_hour = self.settings.last_hour
        if current_hour >= last_hour:
            return today_total

        if not target.has_observations:
            return avg_daily

        forecast = self.predictor.forecast(history, target)
        predicted = forecast.end_of_day_value
        if predicted:
            return predicted

        logger.warning(f"No hour-{last_hour} forecast for {target.date}, using average hourly growth")
        return today_total + avg_hourly * (last_hour - current_hour)

    def summarize(
        self,
        history: HistoryStore,
        target: DailyRecord,
        current_hour: Optional[int] = None,
        date_range: Optional[DateRange] = None,
    ) -> StatsSummary:
        """Compute the summary for ``target``.

        Args:
            history: History snapshot
            target: Today's (possibly partial) record
            current_hour: Hour of day to evaluate at (default: wall clock)
            date_range: Explicit selection window (range mode)
        """
        if current_hour is None:
            current_hour = self.current_hour()

        window = self.select_window(history, target, date_range)

        today_total = end_of_day_total(target)
        yesterday_last = end_of_day_total(history.previous(target.date))

        daily_totals = [end_of_day_total(r) for r in window if end_of_day_total(r) > 0]
        avg_daily = float(np.mean(daily_totals)) if daily_totals else 0.0

        increments = window_increments(window)
        avg_hourly = float(np.mean(increments)) if increments else 0.0

        today_estimated = self.estimate_end_of_day(
            history, target, today_total, avg_daily, avg_hourly, current_hour
        )

        summary = StatsSummary(
            today_total=today_total,
            yesterday_last=yesterday_last,
            avg_daily=avg_daily,
            avg_hourly=avg_hourly,
            today_estimated=today_estimated,
            range_mode=date_range is not None,
        )
        logger.info(
            f"Stats for {target.date}: today={today_total:.0f}, yesterday={yesterday_last:.0f}, "
            f"avg_daily={avg_daily:.0f} over {len(daily_totals)} days, avg_hourly={avg_hourly:.1f}, "
            f"estimated={today_estimated:.0f}"
        )
        return summary

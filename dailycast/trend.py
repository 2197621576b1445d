"""
Bounded trend adjustment.

Compares the in-progress day against historical norms and folds three
signals into one multiplicative factor:

- progress ratio: today's value at the last observed hour vs. the
  historical average at that hour
- velocity: mean fractional growth over the last few observed hours
- the growth sample's trend direction

Every signal and the combined factor are clamped to configured bounds.
"""
from typing import Optional, Tuple

import numpy as np

from dailycast.config import TrendConfig, config
from dailycast.history import HistoryStore
from dailycast.models import DailyRecord, GrowthSample, TrendDirection
from dailycast.observability import get_logger

logger = get_logger(__name__)


def clamp(value: float, bounds: Tuple[float, float]) -> float:
    low, high = bounds
    return max(low, min(high, value))


class TrendAdjuster:
    """Produces the trend factor applied to each predicted increment."""

    def __init__(self, settings: Optional[TrendConfig] = None):
        self.settings = settings or config.trend

    def progress_ratio(self, history: HistoryStore, record: DailyRecord, last_observed_hour: int) -> float:
        """Today's value at the last observed hour relative to history."""
        if last_observed_hour < 0:
            return 1.0

        current = record.value(last_observed_hour)
        average = history.hourly_average(last_observed_hour, before=record.date)
        if current is None or average is None or average <= 0:
            return 1.0

        return clamp(current / average, self.settings.progress_bounds)

    def velocity_factor(self, record: DailyRecord, last_observed_hour: int) -> float:
        """One plus the mean fractional growth over recent observed hour pairs."""
        pairs = min(self.settings.velocity_pairs, last_observed_hour)
        rates = []
        for offset in range(1, pairs + 1):
            prev_value = record.value(last_observed_hour - offset)
            curr_value = record.value(last_observed_hour - offset + 1)
            if prev_value is None or curr_value is None:
                continue
            if curr_value > prev_value > 0:
                rates.append((curr_value - prev_value) / prev_value)

        if not rates:
            return 1.0

        return clamp(float(np.mean(rates)) + 1, self.settings.velocity_bounds)

    def factor(
        self,
        history: HistoryStore,
        record: DailyRecord,
        hour: int,
        last_observed_hour: int,
        sample: GrowthSample,
    ) -> float:
        """Combined trend factor for predicting ``hour``."""
        s = self.settings
        progress = self.progress_ratio(history, record, last_observed_hour)
        velocity = self.velocity_factor(record, last_observed_hour)

        trend_factor = 1.0
        if progress > s.ahead_threshold:
            trend_factor *= s.ahead_multiplier
        elif progress < s.behind_threshold:
            trend_factor *= s.behind_multiplier

        trend_factor *= velocity

        if sample.trend_direction == TrendDirection.INCREASING:
            trend_factor *= s.increasing_multiplier
        elif sample.trend_direction == TrendDirection.DECREASING:
            trend_factor *= s.decreasing_multiplier

        result = clamp(trend_factor, s.factor_bounds)
        logger.debug(
            f"Trend factor for hour {hour}: {result:.3f} "
            f"(progress={progress:.2f}, velocity={velocity:.2f}, trend={sample.trend_direction.value})"
        )
        return result

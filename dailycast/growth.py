"""
Per-hour growth sampling.

For a target hour, collects the hour-to-hour increments observed on the
most recent historical days and summarises them as a GrowthSample. Days
whose pair of slots is missing or not increasing are skipped, so messy
history never raises here.
"""
from datetime import date
from typing import List, Optional

import numpy as np

from dailycast.config import GrowthConfig, config
from dailycast.history import HistoryStore
from dailycast.models import GrowthSample, TrendDirection, LAST_HOUR
from dailycast.observability import get_logger

logger = get_logger(__name__)


def collect_increments(records, hour: int) -> List[float]:
    """Positive increments into ``hour`` across records, in record order."""
    increments = []
    for record in records:
        prev_value = record.value(hour - 1)
        curr_value = record.value(hour)
        if prev_value is None or curr_value is None:
            continue
        if curr_value > prev_value:
            increments.append(float(curr_value - prev_value))
    return increments


def lower_median(values: List[float]) -> float:
    """Median that takes the lower middle element on even counts."""
    ordered = sorted(values)
    return ordered[(len(ordered) - 1) // 2]


class GrowthPatternAnalyzer:
    """Summarises recent increments for one hour of the day."""

    def __init__(self, settings: Optional[GrowthConfig] = None):
        self.settings = settings or config.growth

    def fallback_sample(self) -> GrowthSample:
        """Fixed sample used when history has no usable increments."""
        s = self.settings
        return GrowthSample(
            average=s.fallback_average,
            median=s.fallback_median,
            min=s.fallback_min,
            max=s.fallback_max,
            sample_count=0,
            trend_direction=TrendDirection.STABLE,
        )

    def detect_trend(self, increments: List[float]) -> TrendDirection:
        """Compare the newest increments against the older ones."""
        recent_count = self.settings.trend_recent_count
        if len(increments) <= recent_count:
            return TrendDirection.STABLE

        recent_avg = float(np.mean(increments[-recent_count:]))
        earlier_avg = float(np.mean(increments[:-recent_count]))
        if earlier_avg <= 0:
            return TrendDirection.STABLE

        change = (recent_avg - earlier_avg) / earlier_avg
        if change > self.settings.trend_threshold:
            return TrendDirection.INCREASING
        if change < -self.settings.trend_threshold:
            return TrendDirection.DECREASING
        return TrendDirection.STABLE

    def analyze(
        self,
        history: HistoryStore,
        hour: int,
        before: Optional[date] = None,
        window_days: Optional[int] = None,
    ) -> GrowthSample:
        """Build the GrowthSample for increments from ``hour - 1`` to ``hour``.

        Args:
            history: History snapshot
            hour: Target hour of day (1..23)
            before: Only days strictly before this date are sampled
                    (the in-progress day's date)
            window_days: Number of most recent days to sample
                         (default: configured window)
        """
        if not 1 <= hour <= LAST_HOUR:
            return self.fallback_sample()

        window = window_days or self.settings.window_days
        days = history.recent(window, before=before)
        increments = collect_increments(days, hour)

        if not increments:
            logger.debug(f"No growth samples for hour {hour} across {len(days)} days, using fallback")
            return self.fallback_sample()

        return GrowthSample(
            average=float(np.mean(increments)),
            median=lower_median(increments),
            min=min(increments),
            max=max(increments),
            sample_count=len(increments),
            trend_direction=self.detect_trend(increments),
        )

"""
Sequential forecast of the remainder of an in-progress day.

The predictor copies every observed hour up to the last positive reading
and then extends the series hour by hour. Each step adds a bounded
increment (growth sample median × trend factor) to the previous value, so
the recurrence is a fold over hours carrying the running value; it cannot
be computed per hour in parallel.

A daily ceiling derived from the recent weekly average keeps sparse-history
days from running away.
"""
from functools import reduce
from typing import NamedTuple, Optional, Tuple

import numpy as np

from dailycast.config import AppConfig, config as default_config
from dailycast.growth import GrowthPatternAnalyzer
from dailycast.history import HistoryStore
from dailycast.models import DailyRecord, ForecastResult, ForecastState, HOURS_PER_DAY, LAST_HOUR
from dailycast.observability import get_logger, timed
from dailycast.trend import TrendAdjuster

logger = get_logger(__name__)


class _Carry(NamedTuple):
    """State threaded through the hourly fold."""
    previous_value: float
    values: Tuple[Optional[float], ...]
    flags: Tuple[bool, ...]


class _Context(NamedTuple):
    history: HistoryStore
    record: DailyRecord
    last_observed_hour: int
    weekly_avg: Optional[float]
    trend_factor: Optional[float]


class Predictor:
    """Extends a partial day's cumulative series to 24 hours."""

    def __init__(
        self,
        analyzer: Optional[GrowthPatternAnalyzer] = None,
        adjuster: Optional[TrendAdjuster] = None,
        app_config: Optional[AppConfig] = None,
    ):
        cfg = app_config or default_config
        self.settings = cfg.predictor
        self.analyzer = analyzer or GrowthPatternAnalyzer(cfg.growth)
        self.adjuster = adjuster or TrendAdjuster(cfg.trend)

    def weekly_average(self, history: HistoryStore, record: DailyRecord) -> Optional[float]:
        """Mean positive end-of-day total over the recent ceiling window."""
        days = history.recent(self.settings.ceiling_days, before=record.date)
        totals = [r.end_of_day_total for r in days if r.end_of_day_total > 0]
        if not totals:
            return None
        return float(np.mean(totals))

    def _initial_carry(self, history: HistoryStore, record: DailyRecord, last_observed_hour: int) -> _Carry:
        if last_observed_hour < 0:
            seed = history.hourly_average(0, before=record.date) or 0.0
            return _Carry(seed, (seed,), (True,))

        values = []
        flags = []
        previous = 0
        for hour in range(last_observed_hour + 1):
            value = record.hours[hour]
            if value is None:
                # Unreported gap before the last observation
                values.append(previous)
                flags.append(True)
            else:
                values.append(value)
                flags.append(False)
                previous = value
        return _Carry(values[-1], tuple(values), tuple(flags))

    def _step(self, carry: _Carry, hour: int, ctx: _Context) -> _Carry:
        s = self.settings
        previous_value = carry.previous_value

        sample = self.analyzer.analyze(ctx.history, hour, before=ctx.record.date)
        if ctx.trend_factor is not None:
            factor = ctx.trend_factor
        else:
            factor = self.adjuster.factor(ctx.history, ctx.record, hour, ctx.last_observed_hour, sample)

        raw_increment = sample.median * factor
        lower = max(s.min_increment, s.lower_min_ratio * sample.min)
        upper = min(s.upper_max_ratio * sample.max, s.upper_average_ratio * sample.average)
        increment = max(lower, min(raw_increment, upper))

        predicted = previous_value + increment

        if ctx.weekly_avg is not None:
            ceiling = s.ceiling_ratio * ctx.weekly_avg
            if predicted > ceiling:
                predicted = max(previous_value + s.ceiling_min_step, ceiling)
                logger.debug(f"Hour {hour}: daily ceiling {ceiling:.0f} applied")

        logger.debug(
            f"Hour {hour}: {previous_value:.0f} -> {predicted:.0f} "
            f"(median={sample.median}, factor={factor:.3f}, samples={sample.sample_count})"
        )
        return _Carry(predicted, carry.values + (predicted,), carry.flags + (True,))

    @timed("forecast")
    def forecast(
        self,
        history: HistoryStore,
        record: DailyRecord,
        trend_factor: Optional[float] = None,
    ) -> ForecastResult:
        """Fill the unobserved remainder of ``record``.

        Args:
            history: History snapshot; only days before ``record.date`` are used
            record: The in-progress day
            trend_factor: Pin the trend factor instead of deriving it
                          (used for validation)

        Returns:
            ForecastResult with 24 values and provenance flags
        """
        last_observed_hour = record.last_observed_hour

        if last_observed_hour == LAST_HOUR:
            logger.debug(f"{record.date}: fully observed, nothing to forecast")
            return ForecastResult(
                date=record.date,
                values=list(record.hours),
                is_predicted=[False] * HOURS_PER_DAY,
                last_observed_hour=last_observed_hour,
                state=ForecastState.DONE,
            )

        carry = self._initial_carry(history, record, last_observed_hour)
        start_hour = len(carry.values)
        logger.debug(f"{record.date}: {ForecastState.OBSERVING.value} hours 0..{start_hour - 1}")

        ctx = _Context(
            history=history,
            record=record,
            last_observed_hour=last_observed_hour,
            weekly_avg=self.weekly_average(history, record),
            trend_factor=trend_factor,
        )
        logger.debug(
            f"{record.date}: {ForecastState.FORECASTING.value} hours {start_hour}..{LAST_HOUR} "
            f"from {carry.previous_value:.0f} (weekly_avg={ctx.weekly_avg})"
        )

        carry = reduce(lambda c, h: self._step(c, h, ctx), range(start_hour, HOURS_PER_DAY), carry)

        logger.info(
            f"Forecast for {record.date}: last observed hour {last_observed_hour}, "
            f"end of day {carry.previous_value:.0f}"
        )
        return ForecastResult(
            date=record.date,
            values=list(carry.values),
            is_predicted=list(carry.flags),
            last_observed_hour=last_observed_hour,
            state=ForecastState.DONE,
        )

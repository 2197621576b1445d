"""
Forecast service: the entry point invoked by the data layer.

Two triggers reach the engine from outside:
- a refresh after each ingestion cycle (``refresh``)
- a user-initiated date range query (``query_range`` / ``query_period``)

Both build a DashboardSnapshot from a history snapshot handed in per call.
Nothing is cached between calls.
"""
from datetime import date
from typing import Any, Dict, Optional, Union

from dailycast.backtest import Backtester
from dailycast.config import AppConfig, config as default_config
from dailycast.filters import DateRange, parse_period
from dailycast.history import HistoryStore
from dailycast.models import DailyRecord, DashboardSnapshot
from dailycast.observability import Timer, correlation_context, get_logger
from dailycast.predictor import Predictor
from dailycast.stats import StatsAggregator, hourly_increments
from dailycast.validators import validate_date_range

logger = get_logger(__name__)


class ForecastService:
    """Combines forecast and statistics for the rendering layer."""

    def __init__(self, app_config: Optional[AppConfig] = None):
        self.config = app_config or default_config
        self.predictor = Predictor(app_config=self.config)
        self.stats = StatsAggregator(predictor=self.predictor, app_config=self.config)

    def _snapshot(
        self,
        history: HistoryStore,
        target: DailyRecord,
        current_hour: Optional[int],
        date_range: Optional[DateRange] = None,
    ) -> DashboardSnapshot:
        forecast = self.predictor.forecast(history, target)
        summary = self.stats.summarize(history, target, current_hour=current_hour, date_range=date_range)
        return DashboardSnapshot(
            target_date=target.date,
            forecast=forecast,
            stats=summary,
            hourly_increments=hourly_increments(forecast.values),
            start_date=date_range.start if date_range else None,
            end_date=date_range.end if date_range else None,
        )

    def refresh(
        self,
        history: HistoryStore,
        today: Optional[date] = None,
        current_hour: Optional[int] = None,
    ) -> Optional[DashboardSnapshot]:
        """Recompute the dashboard after an ingestion cycle.

        Args:
            history: Fresh history snapshot
            today: Date of the in-progress day (default: latest record)
            current_hour: Hour of day (default: wall clock)

        Returns:
            DashboardSnapshot, or None when there is nothing to show
        """
        with correlation_context(), Timer("refresh", logger):
            if today is not None:
                target = history.get(today) or DailyRecord(date=today)
            else:
                target = history.latest()

            if target is None:
                logger.info("Refresh skipped: history is empty")
                return None

            logger.info(f"Refreshing dashboard for {target.date} ({len(history)} days of history)")
            return self._snapshot(history, target, current_hour)

    def query_range(
        self,
        history: HistoryStore,
        start_date: Union[str, date],
        end_date: Union[str, date],
        current_hour: Optional[int] = None,
    ) -> Optional[DashboardSnapshot]:
        """Range-mode snapshot for an explicit date interval.

        The target day is the latest record inside the range; averages cover
        every day in the range.

        Raises:
            ValidationError: If the dates are invalid or the range is too long
        """
        start, end = validate_date_range(start_date, end_date, max_days=self.config.stats.max_range_days)
        return self._query(history, DateRange(start, end), current_hour)

    def query_period(
        self,
        history: HistoryStore,
        period: str,
        reference_date: Optional[date] = None,
        current_hour: Optional[int] = None,
    ) -> Optional[DashboardSnapshot]:
        """Range-mode snapshot for a period shortcut such as ``last_week``.

        Raises:
            ValidationError: If the period is unknown
        """
        if reference_date is None and history.latest() is not None:
            reference_date = history.latest().date
        return self._query(history, parse_period(period, reference_date=reference_date), current_hour)

    def _query(
        self,
        history: HistoryStore,
        date_range: DateRange,
        current_hour: Optional[int],
    ) -> Optional[DashboardSnapshot]:
        with correlation_context(), Timer("range_query", logger):
            in_range = history.between(date_range.start, date_range.end)
            if not in_range:
                logger.info(f"Range {date_range.start_str}..{date_range.end_str} has no records")
                return None

            logger.info(
                f"Range query {date_range.start_str}..{date_range.end_str}: {len(in_range)} days"
            )
            return self._snapshot(history, in_range[-1], current_hour, date_range)

    def self_check(self, history: HistoryStore) -> Dict[str, Any]:
        """Optional offline accuracy check on the most recent completed day."""
        with correlation_context(), Timer("self_check", logger):
            results = Backtester(predictor=self.predictor, app_config=self.config).self_check(history)
            scored = [r for r in results if r.sufficient]
            return {
                "results": [r.to_dict() for r in results],
                "scored": len(scored),
                "mean_error": (
                    round(sum(r.mean_error for r in scored) / len(scored), 4) if scored else None
                ),
            }

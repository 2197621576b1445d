"""
Offline validation of the predictor.

Replays historical days with the hours after a cutoff hidden, forecasts
them from the days before, and scores the result with the relative error
|predicted - actual| / actual per hidden hour.

Not part of the refresh path: used by the test suite, by an optional
self-check, and for rolling evaluation over a history export.
"""
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Union

import numpy as np
import pandas as pd

from dailycast.config import AppConfig, config as default_config
from dailycast.history import HistoryStore
from dailycast.models import BacktestResult, DailyRecord, HOURS_PER_DAY, LAST_HOUR
from dailycast.observability import get_logger
from dailycast.predictor import Predictor
from dailycast.validators import validate_hour

logger = get_logger(__name__)

FRAME_COLUMNS = [
    "date", "cutoff_hour", "mean_error", "evaluated_hours",
    "predicted_end", "actual_end", "history_days",
]


def _compute_metrics(y_true: np.ndarray, y_pred: np.ndarray) -> Dict[str, float]:
    """Compute MAE and WAPE of end-of-day predictions."""
    if len(y_true) == 0:
        return {"mae": None, "wape": None}
    mae = float(np.mean(np.abs(y_true - y_pred)))
    total_actual = float(np.sum(y_true))
    wape = float(np.sum(np.abs(y_true - y_pred)) / total_actual * 100) if total_actual > 0 else 0.0
    return {
        "mae": round(mae, 2),
        "wape": round(wape, 2),
    }


class Backtester:
    """Scores the predictor against days whose outcome is known."""

    def __init__(self, predictor: Optional[Predictor] = None, app_config: Optional[AppConfig] = None):
        cfg = app_config or default_config
        self.settings = cfg.backtest
        self.predictor = predictor or Predictor(app_config=cfg)

    def run(
        self,
        history: HistoryStore,
        day: Union[DailyRecord, date],
        cutoff_hour: int,
    ) -> BacktestResult:
        """Replay one day with every hour after ``cutoff_hour`` hidden.

        Hidden hours with no positive actual value are skipped. When nothing
        can be scored the result has ``mean_error=None`` (``sufficient`` is
        False) instead of raising.

        Raises:
            ValidationError: If ``cutoff_hour`` is not an hour of day
        """
        validate_hour(cutoff_hour, "cutoff_hour")

        record = day if isinstance(day, DailyRecord) else history.get(day)
        if record is None:
            logger.warning(f"Backtest skipped: no record for {day}")
            return BacktestResult(date=day, cutoff_hour=cutoff_hour)

        partial = record.masked_after(cutoff_hour)
        forecast = self.predictor.forecast(history, partial)

        hour_errors: Dict[int, float] = {}
        for hour in range(cutoff_hour + 1, HOURS_PER_DAY):
            actual = record.value(hour)
            predicted = forecast.values[hour]
            if not actual or predicted is None:
                continue
            hour_errors[hour] = abs(predicted - actual) / actual

        mean_error = float(np.mean(list(hour_errors.values()))) if hour_errors else None
        result = BacktestResult(
            date=record.date,
            cutoff_hour=cutoff_hour,
            hour_errors=hour_errors,
            mean_error=mean_error,
            forecast=forecast,
            history_days=len(history.before(record.date)),
        )

        if result.sufficient:
            logger.info(
                f"Backtest {record.date} cutoff {cutoff_hour}:00: mean error {mean_error * 100:.1f}% "
                f"over {len(hour_errors)} hours ({result.history_days} days of history)"
            )
        else:
            logger.info(f"Backtest {record.date} cutoff {cutoff_hour}:00: insufficient data to score")
        return result

    def self_check(
        self,
        history: HistoryStore,
        cutoff_hours: Optional[Iterable[int]] = None,
    ) -> List[BacktestResult]:
        """Replay the most recent completed day at several cutoffs.

        The latest record is treated as today (in progress); the record
        before it is replayed.
        """
        latest = history.latest()
        yesterday = history.previous(latest.date) if latest else None
        if yesterday is None:
            logger.info("Self-check skipped: fewer than two days of history")
            return []

        hours = cutoff_hours if cutoff_hours is not None else self.settings.self_check_hours
        return [self.run(history, yesterday, hour) for hour in hours if hour < LAST_HOUR]

    def evaluate(
        self,
        history: HistoryStore,
        cutoff_hour: int,
        days: Optional[int] = None,
    ) -> pd.DataFrame:
        """Rolling backtest over history, one row per replayed day.

        Each day is forecast only from the days before it.

        Args:
            history: History snapshot
            cutoff_hour: Hours after this one are hidden
            days: Only replay the most recent ``days`` records
        """
        records = history.records if days is None else history.recent(days)

        rows = []
        for record in records:
            result = self.run(history, record, cutoff_hour)
            predicted_end = result.forecast.end_of_day_value if result.forecast else None
            rows.append({
                "date": pd.Timestamp(record.date),
                "cutoff_hour": cutoff_hour,
                "mean_error": result.mean_error,
                "evaluated_hours": len(result.hour_errors),
                "predicted_end": predicted_end,
                "actual_end": record.end_of_day_total,
                "history_days": result.history_days,
            })

        return pd.DataFrame(rows, columns=FRAME_COLUMNS)

    @staticmethod
    def summarize(frame: pd.DataFrame) -> Dict[str, Any]:
        """Aggregate an ``evaluate`` frame into headline accuracy figures."""
        scored = frame.dropna(subset=["mean_error", "predicted_end"])
        scored = scored[scored["actual_end"] > 0]

        metrics = _compute_metrics(
            scored["actual_end"].to_numpy(dtype=float),
            scored["predicted_end"].to_numpy(dtype=float),
        )
        mean_error = float(scored["mean_error"].mean()) if not scored.empty else None
        return {
            "days": len(frame),
            "scored_days": len(scored),
            "mean_error": round(mean_error, 4) if mean_error is not None else None,
            "end_of_day_mae": metrics["mae"],
            "end_of_day_wape": metrics["wape"],
        }

"""
Domain models for the forecasting engine.

Provides dataclasses for daily hourly records and for everything the
engine hands to the rendering layer. These models are the single source of
truth for data structures shared by the predictor, statistics and
backtesting code.
"""
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, List, Dict, Any

from dailycast.exceptions import HistoryDataError
from dailycast.validators import HOURS_PER_DAY, coerce_hour_value, coerce_total, validate_date

LAST_HOUR = HOURS_PER_DAY - 1


def hour_key(hour: int) -> str:
    """Column name for an hour slot in the wide row format (``hour_07``)."""
    return f"hour_{hour:02d}"


HOUR_KEYS = [hour_key(h) for h in range(HOURS_PER_DAY)]


# ═══════════════════════════════════════════════════════════════════════════════
# ENUMS
# ═══════════════════════════════════════════════════════════════════════════════

class TrendDirection(str, Enum):
    """Direction of recent hour-to-hour increments."""
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class ForecastState(str, Enum):
    """Predictor lifecycle."""
    OBSERVING = "observing"
    FORECASTING = "forecasting"
    DONE = "done"


# ═══════════════════════════════════════════════════════════════════════════════
# INPUT RECORDS
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class DailyRecord:
    """One calendar day of cumulative hourly counts.

    ``hours`` always holds 24 slots; ``None`` marks an unreported hour.
    """
    date: date
    hours: List[Optional[int]] = field(default_factory=lambda: [None] * HOURS_PER_DAY)
    day_of_week: Optional[str] = None
    total: Optional[float] = None

    def __post_init__(self):
        slots = [coerce_hour_value(v) for v in list(self.hours)[:HOURS_PER_DAY]]
        slots.extend([None] * (HOURS_PER_DAY - len(slots)))
        self.hours = slots
        self.total = coerce_total(self.total)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DailyRecord":
        """Create a record from a row mapping.

        Accepts either an ``hours`` list or ``hour_00``..``hour_23`` keys, and
        ``dayOfWeek`` or ``day_of_week``.
        """
        if not data or data.get("date") in (None, ""):
            raise HistoryDataError("Record has no date", missing=["date"])

        if "hours" in data:
            hours = list(data["hours"] or [])
        else:
            hours = [data.get(key) for key in HOUR_KEYS]

        return cls(
            date=validate_date(data["date"], "date"),
            hours=hours,
            day_of_week=data.get("day_of_week", data.get("dayOfWeek")) or None,
            total=data.get("total"),
        )

    def value(self, hour: int) -> Optional[int]:
        """Reported value at an hour, or None."""
        if not 0 <= hour < HOURS_PER_DAY:
            return None
        return self.hours[hour]

    def is_reported(self, hour: int) -> bool:
        """Check whether an hour carries a reported value."""
        return self.value(hour) is not None

    @property
    def last_observed_hour(self) -> int:
        """Highest hour with a positive reported value, or -1."""
        for hour in range(LAST_HOUR, -1, -1):
            value = self.hours[hour]
            if value is not None and value > 0:
                return hour
        return -1

    @property
    def has_observations(self) -> bool:
        return self.last_observed_hour >= 0

    @property
    def end_of_day_total(self) -> float:
        """Last positive reported value, falling back to ``total``, then 0."""
        hour = self.last_observed_hour
        if hour >= 0:
            return self.hours[hour]
        return self.total or 0

    def masked_after(self, hour: int) -> "DailyRecord":
        """Copy of this record with every hour after ``hour`` unreported."""
        hours = [v if h <= hour else None for h, v in enumerate(self.hours)]
        return DailyRecord(date=self.date, hours=hours, day_of_week=self.day_of_week)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for JSON serialization."""
        return {
            "date": self.date.isoformat(),
            "day_of_week": self.day_of_week,
            "total": self.total,
            "hours": list(self.hours),
        }


# ═══════════════════════════════════════════════════════════════════════════════
# ANALYSIS RESULTS
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class GrowthSample:
    """Distribution of one hour's increments across recent days."""
    average: float
    median: float
    min: float
    max: float
    sample_count: int
    trend_direction: TrendDirection = TrendDirection.STABLE

    @property
    def is_fallback(self) -> bool:
        return self.sample_count == 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for JSON serialization."""
        return {
            "average": round(self.average, 2),
            "median": round(self.median, 2),
            "min": self.min,
            "max": self.max,
            "sample_count": self.sample_count,
            "trend_direction": self.trend_direction.value,
        }


@dataclass
class ForecastResult:
    """A 24-hour series with per-hour provenance."""
    date: date
    values: List[Optional[float]]
    is_predicted: List[bool]
    last_observed_hour: int = -1
    state: ForecastState = ForecastState.DONE

    @property
    def predicted_hours(self) -> List[int]:
        """Hours synthesized by the predictor."""
        return [h for h, flag in enumerate(self.is_predicted) if flag]

    @property
    def end_of_day_value(self) -> Optional[float]:
        return self.values[LAST_HOUR]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for JSON serialization."""
        return {
            "date": self.date.isoformat(),
            "values": [round(v, 2) if v is not None else None for v in self.values],
            "is_predicted": list(self.is_predicted),
            "last_observed_hour": self.last_observed_hour,
        }


@dataclass
class StatsSummary:
    """Summary statistics shown next to the hourly chart."""
    today_total: float
    yesterday_last: float
    avg_daily: float
    avg_hourly: float
    today_estimated: float
    range_mode: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for JSON serialization."""
        return {
            "today_total": round(self.today_total, 2),
            "yesterday_last": round(self.yesterday_last, 2),
            "avg_daily": round(self.avg_daily, 2),
            "avg_hourly": round(self.avg_hourly, 2),
            "today_estimated": round(self.today_estimated, 2),
            "range_mode": self.range_mode,
        }


@dataclass
class BacktestResult:
    """Score of one replayed day."""
    date: date
    cutoff_hour: int
    hour_errors: Dict[int, float] = field(default_factory=dict)
    mean_error: Optional[float] = None
    forecast: Optional[ForecastResult] = None
    history_days: int = 0

    @property
    def evaluated_hours(self) -> List[int]:
        return sorted(self.hour_errors)

    @property
    def sufficient(self) -> bool:
        """False when no hidden hour had a positive actual value to score."""
        return self.mean_error is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for JSON serialization."""
        return {
            "date": self.date.isoformat(),
            "cutoff_hour": self.cutoff_hour,
            "hour_errors": {h: round(e, 4) for h, e in sorted(self.hour_errors.items())},
            "mean_error": round(self.mean_error, 4) if self.mean_error is not None else None,
            "history_days": self.history_days,
            "sufficient": self.sufficient,
        }


@dataclass
class DashboardSnapshot:
    """Everything one refresh or range query hands to the rendering layer."""
    target_date: date
    forecast: ForecastResult
    stats: StatsSummary
    hourly_increments: List[Optional[float]] = field(default_factory=list)
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for JSON serialization."""
        result = {
            "target_date": self.target_date.isoformat(),
            "forecast": self.forecast.to_dict(),
            "stats": self.stats.to_dict(),
            "hourly_increments": [
                round(v, 2) if v is not None else None for v in self.hourly_increments
            ],
        }
        if self.start_date and self.end_date:
            result["range"] = {
                "start": self.start_date.isoformat(),
                "end": self.end_date.isoformat(),
            }
        return result

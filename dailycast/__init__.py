"""
dailycast: intraday forecasting and statistics for cumulative hourly counters.

This package contains the engine used by the dashboard data layer:
- history: in-memory store of daily records
- growth / trend / predictor: the sequential forecast of today's remainder
- stats: summary cards (today, yesterday, averages, end-of-day estimate)
- backtest: offline validation of the predictor
- service: refresh and range-query entry points
"""

# Import in dependency order
from dailycast.exceptions import (
    DailycastError,
    HistoryDataError,
    ValidationError,
)

from dailycast.config import config, validate_config, ConfigurationError

from dailycast.models import (
    DailyRecord,
    ForecastResult,
    GrowthSample,
    StatsSummary,
    BacktestResult,
    DashboardSnapshot,
    TrendDirection,
)

from dailycast.history import HistoryStore
from dailycast.growth import GrowthPatternAnalyzer
from dailycast.trend import TrendAdjuster
from dailycast.predictor import Predictor
from dailycast.stats import StatsAggregator
from dailycast.backtest import Backtester
from dailycast.service import ForecastService

__all__ = [
    # Exceptions
    "DailycastError",
    "HistoryDataError",
    "ValidationError",
    # Config
    "config",
    "validate_config",
    "ConfigurationError",
    # Models
    "DailyRecord",
    "ForecastResult",
    "GrowthSample",
    "StatsSummary",
    "BacktestResult",
    "DashboardSnapshot",
    "TrendDirection",
    # Engine
    "HistoryStore",
    "GrowthPatternAnalyzer",
    "TrendAdjuster",
    "Predictor",
    "StatsAggregator",
    "Backtester",
    "ForecastService",
]

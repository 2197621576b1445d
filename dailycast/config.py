"""
Centralized configuration for the dailycast engine.

This module provides a single source of truth for all tuning constants.
Configuration is loaded from environment variables with sensible defaults.

Usage:
    from dailycast.config import config

    window = config.growth.window_days
    ceiling = config.predictor.ceiling_ratio
"""

import os
from dataclasses import dataclass, field
from typing import Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


@dataclass(frozen=True)
class GrowthConfig:
    """Per-hour growth sampling over recent history."""

    window_days: int = field(
        default_factory=lambda: int(os.getenv("DAILYCAST_GROWTH_WINDOW", "5"))
    )
    trend_recent_count: int = 3
    trend_threshold: float = 0.15

    # Fallback sample used when no increments were observed
    fallback_average: float = 20.0
    fallback_median: float = 20.0
    fallback_min: float = 15.0
    fallback_max: float = 30.0


@dataclass(frozen=True)
class TrendConfig:
    """Bounds and multipliers for the trend factor."""

    progress_bounds: Tuple[float, float] = (0.5, 2.0)
    ahead_threshold: float = 1.2
    behind_threshold: float = 0.8
    ahead_multiplier: float = 1.15
    behind_multiplier: float = 0.9

    velocity_pairs: int = 3
    velocity_bounds: Tuple[float, float] = (0.7, 1.5)

    increasing_multiplier: float = 1.1
    decreasing_multiplier: float = 0.95

    factor_bounds: Tuple[float, float] = (0.8, 1.3)


@dataclass(frozen=True)
class PredictorConfig:
    """Increment clamping and the daily ceiling."""

    min_increment: float = 5.0
    lower_min_ratio: float = 0.8
    upper_max_ratio: float = 1.2
    upper_average_ratio: float = 2.0

    ceiling_days: int = field(
        default_factory=lambda: int(os.getenv("DAILYCAST_CEILING_DAYS", "7"))
    )
    ceiling_ratio: float = 1.1
    ceiling_min_step: float = 10.0


@dataclass(frozen=True)
class StatsConfig:
    """Summary statistics window."""

    window_days: int = field(
        default_factory=lambda: int(os.getenv("DAILYCAST_STATS_WINDOW", "3"))
    )
    last_hour: int = 23
    max_range_days: int = 366


@dataclass(frozen=True)
class BacktestConfig:
    """Offline validation settings."""

    self_check_hours: Tuple[int, ...] = (12, 15, 18, 21)


@dataclass(frozen=True)
class LoggingConfig:
    """Logging output settings."""

    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    json_format: bool = field(
        default_factory=lambda: os.getenv("LOG_JSON", "").lower() in ("1", "true", "yes")
    )


@dataclass(frozen=True)
class AppConfig:
    """Main engine configuration."""

    version: str = "1.0.0"
    timezone: str = field(
        default_factory=lambda: os.getenv("DAILYCAST_TIMEZONE", "Asia/Seoul")
    )
    growth: GrowthConfig = field(default_factory=GrowthConfig)
    trend: TrendConfig = field(default_factory=TrendConfig)
    predictor: PredictorConfig = field(default_factory=PredictorConfig)
    stats: StatsConfig = field(default_factory=StatsConfig)
    backtest: BacktestConfig = field(default_factory=BacktestConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Global config instance
config = AppConfig()


class ConfigurationError(Exception):
    """Raised when configuration values are missing or invalid."""
    pass


def validate_config(app_config: AppConfig = None) -> None:
    """
    Validate configuration values.

    Call this on startup to fail fast with clear error messages
    instead of silently degraded forecasts.

    Args:
        app_config: Configuration to check (default: global config)

    Raises:
        ConfigurationError: If any value is out of range
    """
    cfg = app_config or config
    errors = []

    if cfg.growth.window_days < 1:
        errors.append("DAILYCAST_GROWTH_WINDOW must be at least 1")

    if cfg.stats.window_days < 1:
        errors.append("DAILYCAST_STATS_WINDOW must be at least 1")

    if cfg.predictor.ceiling_days < 1:
        errors.append("DAILYCAST_CEILING_DAYS must be at least 1")

    low, high = cfg.trend.factor_bounds
    if low > high:
        errors.append(f"Trend factor bounds are inverted ({low} > {high})")

    for hour in cfg.backtest.self_check_hours:
        if not 0 <= hour < cfg.stats.last_hour:
            errors.append(f"Self-check hour {hour} must be between 0 and {cfg.stats.last_hour - 1}")

    try:
        ZoneInfo(cfg.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        errors.append(f"DAILYCAST_TIMEZONE is not a known timezone: {cfg.timezone}")

    if cfg.logging.level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        errors.append(f"LOG_LEVEL is invalid: {cfg.logging.level}")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ConfigurationError(error_msg)

"""
Pytest configuration and shared fixtures.
"""
import pytest
from datetime import date, timedelta
from typing import Dict, List, Optional

from dailycast.history import HistoryStore
from dailycast.models import DailyRecord


TODAY = date(2026, 3, 10)


def _linear_hours(hour0: int, step: int, upto: int = 23) -> List[Optional[int]]:
    return [hour0 + step * h if h <= upto else None for h in range(24)]


@pytest.fixture
def today() -> date:
    """Date of the in-progress day used across tests."""
    return TODAY


@pytest.fixture
def make_day():
    """Factory for records with linear cumulative counts.

    make_day(day, hour0=10, step=20, upto=23, overrides={hour: value})
    """
    def _make(
        day: date,
        hour0: int = 10,
        step: int = 20,
        upto: int = 23,
        overrides: Optional[Dict[int, Optional[int]]] = None,
        total: Optional[float] = None,
    ) -> DailyRecord:
        hours = _linear_hours(hour0, step, upto)
        for hour, value in (overrides or {}).items():
            hours[hour] = value
        return DailyRecord(date=day, hours=hours, total=total)

    return _make


@pytest.fixture
def week_history(make_day) -> HistoryStore:
    """Seven completed days before TODAY ending around 480-500 units."""
    records = [
        make_day(TODAY - timedelta(days=offset), hour0=10, step=20 + (offset % 2))
        for offset in range(7, 0, -1)
    ]
    return HistoryStore(records)


@pytest.fixture
def growth_history() -> HistoryStore:
    """Five days whose 10:00 -> 11:00 increments are 20, 25, 22, 21, 26."""
    records = []
    for offset, increment in zip(range(5, 0, -1), [20, 25, 22, 21, 26]):
        hours = [100 + 20 * h for h in range(11)]
        hour11 = hours[10] + increment
        hours += [hour11 + 40 * (h - 11) for h in range(11, 24)]
        records.append(DailyRecord(date=TODAY - timedelta(days=offset), hours=hours))
    return HistoryStore(records)


@pytest.fixture
def partial_today() -> DailyRecord:
    """Today with only 10:00 reported (300 units)."""
    hours = [None] * 24
    hours[10] = 300
    return DailyRecord(date=TODAY, hours=hours)

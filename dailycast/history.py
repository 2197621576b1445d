"""
In-memory history of daily records.

The store is built wholesale by the ingestion layer on every refresh and
handed to the engine per call. It is ordered by date and deduplicated on
date; the engine only reads from it.
"""
from datetime import date
from typing import Dict, Iterable, Iterator, List, Optional

import numpy as np
import pandas as pd

from dailycast.exceptions import HistoryDataError
from dailycast.models import DailyRecord, HOUR_KEYS
from dailycast.observability import get_logger

logger = get_logger(__name__)


class HistoryStore:
    """Ordered, date-unique collection of DailyRecord."""

    def __init__(self, records: Iterable[DailyRecord] = ()):
        by_date: Dict[date, DailyRecord] = {}
        for record in records:
            # Later records for the same date replace earlier ones
            by_date[record.date] = record
        self._records: List[DailyRecord] = [by_date[d] for d in sorted(by_date)]

    @classmethod
    def from_rows(cls, rows: Iterable[dict]) -> "HistoryStore":
        """Build a store from row mappings (see DailyRecord.from_dict)."""
        return cls(DailyRecord.from_dict(row) for row in rows)

    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> "HistoryStore":
        """Build a store from a wide frame.

        Expects a ``date`` column plus ``hour_00``..``hour_23``; ``day_of_week``
        and ``total`` are optional. Missing hour columns are read as unreported.
        """
        if "date" not in df.columns:
            raise HistoryDataError("History frame has no date column", missing=["date"])

        frame = df.copy()
        frame["date"] = pd.to_datetime(frame["date"]).dt.date
        present = [key for key in HOUR_KEYS if key in frame.columns]
        if not present:
            raise HistoryDataError(
                "History frame has no hour columns",
                details="expected hour_00..hour_23",
                missing=HOUR_KEYS,
            )

        records = []
        for row in frame.to_dict(orient="records"):
            records.append(DailyRecord(
                date=row["date"],
                hours=[row.get(key) for key in HOUR_KEYS],
                day_of_week=row.get("day_of_week") if isinstance(row.get("day_of_week"), str) else None,
                total=row.get("total"),
            ))

        store = cls(records)
        logger.debug(f"Loaded {len(store)} days from frame ({len(frame)} rows)")
        return store

    def to_frame(self) -> pd.DataFrame:
        """Export as a wide frame, one row per day."""
        rows = []
        for record in self._records:
            row = {
                "date": pd.Timestamp(record.date),
                "day_of_week": record.day_of_week,
                "total": record.total,
            }
            for key, value in zip(HOUR_KEYS, record.hours):
                row[key] = value
            rows.append(row)
        return pd.DataFrame(rows, columns=["date", "day_of_week", "total"] + HOUR_KEYS)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[DailyRecord]:
        return iter(self._records)

    def __bool__(self) -> bool:
        return bool(self._records)

    @property
    def records(self) -> List[DailyRecord]:
        return list(self._records)

    def get(self, day: date) -> Optional[DailyRecord]:
        """Record for a date, or None."""
        for record in self._records:
            if record.date == day:
                return record
        return None

    def latest(self) -> Optional[DailyRecord]:
        """Most recent record, or None when empty."""
        return self._records[-1] if self._records else None

    def before(self, day: date) -> List[DailyRecord]:
        """All records strictly before a date, oldest first."""
        return [r for r in self._records if r.date < day]

    def recent(self, n: int, before: Optional[date] = None) -> List[DailyRecord]:
        """Up to ``n`` most recent records (strictly before ``before`` if given)."""
        pool = self.before(before) if before is not None else self._records
        if n <= 0:
            return []
        return pool[-n:]

    def previous(self, day: date) -> Optional[DailyRecord]:
        """Record immediately preceding a date, or None."""
        earlier = self.before(day)
        return earlier[-1] if earlier else None

    def between(self, start: date, end: date) -> List[DailyRecord]:
        """Records with start <= date <= end."""
        return [r for r in self._records if start <= r.date <= end]

    def hourly_average(self, hour: int, before: Optional[date] = None) -> Optional[float]:
        """Mean reported value at an hour across history, or None."""
        pool = self.before(before) if before is not None else self._records
        values = [r.hours[hour] for r in pool if r.hours[hour] is not None]
        if not values:
            return None
        return float(np.mean(values))

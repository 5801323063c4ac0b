"""In-memory food log with day-bucketed aggregates."""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Literal
from uuid import UUID
from zoneinfo import ZoneInfo

from food_radar.domain.entries import DailyTotals, FoodEntry
from food_radar.domain.errors import NotFoundError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LogChange:
    """Notification emitted after the log is mutated."""

    kind: Literal["added", "removed"]
    entry: FoodEntry


LogListener = Callable[[LogChange], None]


class FoodLog:
    """Append-only sequence of food entries.

    Entries are kept in insertion order, which is chronological because new
    entries are always stamped with the current time. Calendar-day queries
    use ``timezone_name`` when given and the system local zone otherwise.
    """

    def __init__(self, timezone_name: str | None = None) -> None:
        self._entries: list[FoodEntry] = []
        self._listeners: list[LogListener] = []
        self._lock = threading.Lock()
        self._tz: tzinfo | None = ZoneInfo(timezone_name) if timezone_name else None

    @property
    def tz(self) -> tzinfo | None:
        return self._tz

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def entries(self) -> list[FoodEntry]:
        """Return a snapshot of all entries in insertion order."""
        with self._lock:
            return list(self._entries)

    def add_entry(self, entry: FoodEntry) -> None:
        """Append an entry without validation or deduplication."""
        with self._lock:
            self._entries.append(entry)
        _logger.info("Logged %s (%s kcal)", entry.food_name, entry.calories)
        self._notify(LogChange(kind="added", entry=entry))

    def remove_entry(self, index: int) -> FoodEntry:
        """Remove the entry at ``index`` in insertion order."""
        with self._lock:
            if index < 0 or index >= len(self._entries):
                raise NotFoundError(f"No entry at index {index}")
            removed = self._entries.pop(index)
        self._notify(LogChange(kind="removed", entry=removed))
        return removed

    def remove_entry_by_id(self, entry_id: UUID) -> FoodEntry:
        """Remove the entry with ``entry_id``."""
        with self._lock:
            for position, entry in enumerate(self._entries):
                if entry.id == entry_id:
                    removed = self._entries.pop(position)
                    break
            else:
                raise NotFoundError(f"No entry with id {entry_id}")
        self._notify(LogChange(kind="removed", entry=removed))
        return removed

    def get_entry(self, entry_id: UUID) -> FoodEntry:
        with self._lock:
            for entry in self._entries:
                if entry.id == entry_id:
                    return entry
        raise NotFoundError(f"No entry with id {entry_id}")

    def subscribe(self, listener: LogListener) -> Callable[[], None]:
        """Register a change listener and return a function that removes it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def total_calories(self) -> int:
        return sum(entry.calories for entry in self.entries())

    def total_protein(self) -> int:
        return sum(entry.protein for entry in self.entries())

    def total_carbs(self) -> int:
        return sum(entry.carbs for entry in self.entries())

    def total_fat(self) -> int:
        return sum(entry.fat for entry in self.entries())

    def entries_on_date(self, day: date | datetime) -> list[FoodEntry]:
        """Return entries whose timestamp falls on the calendar day of ``day``."""
        target = self.local_day(day) if isinstance(day, datetime) else day
        return [
            entry
            for entry in self.entries()
            if self.local_day(entry.timestamp) == target
        ]

    def calories_on_date(self, day: date | datetime) -> int:
        return sum(entry.calories for entry in self.entries_on_date(day))

    def protein_on_date(self, day: date | datetime) -> int:
        return sum(entry.protein for entry in self.entries_on_date(day))

    def carbs_on_date(self, day: date | datetime) -> int:
        return sum(entry.carbs for entry in self.entries_on_date(day))

    def fat_on_date(self, day: date | datetime) -> int:
        return sum(entry.fat for entry in self.entries_on_date(day))

    def has_entry_on_date(self, day: date | datetime) -> bool:
        return bool(self.entries_on_date(day))

    def daily_totals(self, day: date | datetime) -> DailyTotals:
        """Return all macro sums for one calendar day."""
        target = self.local_day(day) if isinstance(day, datetime) else day
        return _aggregate_day(target, self.entries_on_date(target))

    def days_with_entries(self) -> list[date]:
        """Return the distinct calendar days that have entries, ascending."""
        return sorted({self.local_day(entry.timestamp) for entry in self.entries()})

    def most_recent(self, n: int) -> list[FoodEntry]:
        """Return the last ``n`` appended entries in insertion order."""
        if n <= 0:
            return []
        return self.entries()[-n:]

    def local_day(self, moment: datetime) -> date:
        """Return the calendar day of ``moment`` in the log's time zone."""
        return moment.astimezone(self._tz).date()

    def _notify(self, change: LogChange) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(change)
            except Exception:
                _logger.exception("Food log listener failed on %s", change.kind)


def _aggregate_day(day: date, entries: list[FoodEntry]) -> DailyTotals:
    total = DailyTotals(day=day, calories=0, protein=0, carbs=0, fat=0)
    for entry in entries:
        total = DailyTotals(
            day=day,
            calories=total.calories + entry.calories,
            protein=total.protein + entry.protein,
            carbs=total.carbs + entry.carbs,
            fat=total.fat + entry.fat,
            entry_count=total.entry_count + 1,
        )
    return total

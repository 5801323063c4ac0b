"""Statistics over the food log for the home, calendar and streak views."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta

from food_radar.domain.entries import (
    DailyGoals,
    DailyTotals,
    FoodEntry,
    MacroProgress,
    RemainingSummary,
)
from food_radar.services.food_log import FoodLog

DECEMBER = 12


@dataclass
class PeriodSummary:
    """Aggregated totals for a period."""

    daily: list[DailyTotals]
    avg_calories: float
    avg_protein: float
    avg_carbs: float
    avg_fat: float


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class StatsService:
    """Day-scoped views over a food log."""

    food_log: FoodLog
    clock: Callable[[], datetime] = field(default=_utc_now)

    def today(self) -> date:
        return self.food_log.local_day(self.clock())

    def get_today(self) -> DailyTotals:
        """Return today's totals in the log's time zone."""
        return self.food_log.daily_totals(self.today())

    def get_remaining(self, goals: DailyGoals) -> RemainingSummary:
        """Return today's consumption against the daily goals."""
        totals = self.get_today()
        return RemainingSummary(
            day=totals.day,
            calories=_progress(totals.calories, goals.calories),
            carbs=_progress(totals.carbs, goals.carbs),
            protein=_progress(totals.protein, goals.protein),
            fat=_progress(totals.fat, goals.fat),
        )

    def get_week(self) -> PeriodSummary:
        """Return week-to-date totals and averages, weeks starting Monday."""
        today = self.today()
        start = today - timedelta(days=today.weekday())
        return self.get_period(start, 7)

    def get_month(self) -> PeriodSummary:
        """Return totals and averages for the current calendar month."""
        start = self.today().replace(day=1)
        if start.month == DECEMBER:
            end = start.replace(year=start.year + 1, month=1)
        else:
            end = start.replace(month=start.month + 1)
        return self.get_period(start, (end - start).days)

    def get_period(self, start: date, days: int) -> PeriodSummary:
        """Return per-day totals and averages for ``days`` days from ``start``."""
        daily = [
            self.food_log.daily_totals(start + timedelta(days=offset))
            for offset in range(days)
        ]
        return _summarize(daily)

    def get_streak(self) -> int:
        """Count consecutive logged days ending today.

        An empty today does not break a streak that ran through yesterday.
        """
        logged_days = set(self.food_log.days_with_entries())
        day = self.today()
        if day not in logged_days:
            day -= timedelta(days=1)
        streak = 0
        while day in logged_days:
            streak += 1
            day -= timedelta(days=1)
        return streak

    def get_history(self, limit: int = 10) -> list[FoodEntry]:
        """Return the most recent entries, newest first."""
        return list(reversed(self.food_log.most_recent(limit)))


def _progress(consumed: int, goal: int) -> MacroProgress:
    percent = round(consumed * 100 / goal) if goal > 0 else 0
    return MacroProgress(
        consumed=consumed,
        goal=goal,
        remaining=max(goal - consumed, 0),
        percent=percent,
    )


def _summarize(daily: list[DailyTotals]) -> PeriodSummary:
    total_days = max(len(daily), 1)
    return PeriodSummary(
        daily=daily,
        avg_calories=sum(day.calories for day in daily) / total_days,
        avg_protein=sum(day.protein for day in daily) / total_days,
        avg_carbs=sum(day.carbs for day in daily) / total_days,
        avg_fat=sum(day.fat for day in daily) / total_days,
    )

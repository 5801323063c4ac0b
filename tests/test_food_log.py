"""Tests for the in-memory food log."""

from datetime import UTC, date, datetime, timedelta
from uuid import uuid4

import pytest

from food_radar.domain.errors import NotFoundError
from food_radar.services.food_log import FoodLog, LogChange
from tests.conftest import make_entry

DAY_A = datetime(2026, 10, 12, 8, 30, tzinfo=UTC)
DAY_B = datetime(2026, 10, 13, 19, 0, tzinfo=UTC)


def _scenario_log() -> FoodLog:
    log = FoodLog(timezone_name="UTC")
    log.add_entry(make_entry(100, DAY_A, protein=5, carbs=10, fat=2))
    log.add_entry(make_entry(150, DAY_A + timedelta(hours=4), protein=7))
    log.add_entry(make_entry(200, DAY_B, fat=9))
    return log


def test_day_scenario_sums_by_calendar_day() -> None:
    log = _scenario_log()

    assert log.calories_on_date(DAY_A.date()) == 250
    assert log.calories_on_date(DAY_B.date()) == 200
    assert log.total_calories() == 450
    assert log.has_entry_on_date(DAY_A.date())
    assert not log.has_entry_on_date(date(2026, 10, 20))


def test_per_day_sums_add_up_to_totals() -> None:
    log = _scenario_log()

    days = log.days_with_entries()

    assert days == [DAY_A.date(), DAY_B.date()]
    assert sum(log.calories_on_date(day) for day in days) == log.total_calories()
    assert sum(log.protein_on_date(day) for day in days) == log.total_protein()
    assert sum(log.carbs_on_date(day) for day in days) == log.total_carbs()
    assert sum(log.fat_on_date(day) for day in days) == log.total_fat()


def test_has_entry_matches_entries_on_date() -> None:
    log = _scenario_log()

    for day in (DAY_A.date(), DAY_B.date(), date(2026, 1, 1)):
        assert log.has_entry_on_date(day) == bool(log.entries_on_date(day))


def test_entries_on_date_preserves_order_and_accepts_datetimes() -> None:
    log = _scenario_log()

    entries = log.entries_on_date(DAY_A)

    assert [entry.calories for entry in entries] == [100, 150]


def test_day_boundary_uses_configured_timezone() -> None:
    log = FoodLog(timezone_name="Europe/Berlin")
    late_evening_utc = datetime(2026, 10, 12, 22, 30, tzinfo=UTC)
    log.add_entry(make_entry(300, late_evening_utc))

    assert log.calories_on_date(date(2026, 10, 13)) == 300
    assert log.calories_on_date(date(2026, 10, 12)) == 0


def test_empty_log_reads_are_zero() -> None:
    log = FoodLog(timezone_name="UTC")

    assert log.total_calories() == 0
    assert log.fat_on_date(date(2026, 10, 12)) == 0
    assert log.entries_on_date(date(2026, 10, 12)) == []
    assert log.most_recent(3) == []
    assert log.days_with_entries() == []
    assert log.daily_totals(date(2026, 10, 12)).entry_count == 0


def test_add_entry_accepts_values_as_is() -> None:
    log = FoodLog(timezone_name="UTC")
    log.add_entry(make_entry(-50, DAY_A))
    log.add_entry(make_entry(-50, DAY_A))

    assert len(log) == 2
    assert log.total_calories() == -100


def test_remove_entry_subtracts_only_its_contribution() -> None:
    log = _scenario_log()
    before_b = log.daily_totals(DAY_B.date())

    removed = log.remove_entry(1)

    assert removed.calories == 150
    assert log.total_calories() == 300
    assert log.total_protein() == 5
    assert log.calories_on_date(DAY_A.date()) == 100
    assert log.daily_totals(DAY_B.date()) == before_b


def test_remove_entry_by_id() -> None:
    log = _scenario_log()
    target = log.entries()[2]

    log.remove_entry_by_id(target.id)

    assert not log.has_entry_on_date(DAY_B.date())
    with pytest.raises(NotFoundError):
        log.get_entry(target.id)


@pytest.mark.parametrize("index", [-1, 3, 10])
def test_remove_entry_out_of_range_raises(index: int) -> None:
    log = _scenario_log()

    with pytest.raises(NotFoundError):
        log.remove_entry(index)
    assert len(log) == 3


def test_remove_unknown_id_raises() -> None:
    log = _scenario_log()

    with pytest.raises(NotFoundError):
        log.remove_entry_by_id(uuid4())


def test_most_recent_reads_from_tail() -> None:
    log = _scenario_log()

    recent = log.most_recent(2)

    assert [entry.calories for entry in recent] == [150, 200]
    assert len(log.most_recent(10)) == 3
    assert log.most_recent(0) == []


def test_aggregates_are_stable_between_mutations() -> None:
    log = _scenario_log()

    assert log.daily_totals(DAY_A) == log.daily_totals(DAY_A)
    assert log.total_carbs() == log.total_carbs()


def test_listeners_receive_changes_until_unsubscribed() -> None:
    log = FoodLog(timezone_name="UTC")
    changes: list[LogChange] = []
    unsubscribe = log.subscribe(changes.append)
    entry = make_entry(100, DAY_A)

    log.add_entry(entry)
    log.remove_entry(0)
    unsubscribe()
    log.add_entry(make_entry(50, DAY_B))

    assert [change.kind for change in changes] == ["added", "removed"]
    assert changes[0].entry == entry


def test_failing_listener_does_not_block_mutation() -> None:
    log = FoodLog(timezone_name="UTC")
    seen: list[str] = []

    def broken(change: LogChange) -> None:
        raise RuntimeError("boom")

    log.subscribe(broken)
    log.subscribe(lambda change: seen.append(change.kind))

    log.add_entry(make_entry(100, DAY_A))

    assert len(log) == 1
    assert seen == ["added"]

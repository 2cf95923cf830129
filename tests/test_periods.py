from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from app.core.errors import DataIntegrityError
from app.services.periods import (
    compute_rollover, period_end, roll_over_goal, roll_over_goals, with_trend,
)

START = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


def test_weekly_rollover_after_22_days_closes_three_periods():
    snapshots, new_start, new_value = compute_rollover("weekly", START, 3, 4, START + timedelta(days=22))

    assert len(snapshots) == 3
    assert [s.final_value for s in snapshots] == [3, 0, 0]
    assert all(s.target_value == 4 for s in snapshots)
    assert snapshots[0].period_start == START
    assert snapshots[-1].period_end == START + timedelta(days=21)
    assert new_start == START + timedelta(days=21)
    assert new_value == 0


def test_periods_are_contiguous():
    snapshots, _, _ = compute_rollover("weekly", START, 1, None, START + timedelta(days=30))
    for older, newer in zip(snapshots, snapshots[1:]):
        assert older.period_end == newer.period_start


def test_no_rollover_inside_period():
    now = START + timedelta(days=6, hours=23)
    assert compute_rollover("weekly", START, 2, 4, now) == ([], START, 2)


def test_period_closes_exactly_at_its_end():
    snapshots, new_start, _ = compute_rollover("weekly", START, 2, 4, START + timedelta(days=7))
    assert len(snapshots) == 1
    assert new_start == START + timedelta(days=7)


def test_monthly_period_clamps_to_month_end():
    start = datetime(2026, 1, 31, tzinfo=timezone.utc)
    assert period_end(start, "monthly") == datetime(2026, 2, 28, tzinfo=timezone.utc)

    snapshots, new_start, _ = compute_rollover(
        "monthly", start, 250, 400, datetime(2026, 3, 1, tzinfo=timezone.utc)
    )
    assert len(snapshots) == 1
    assert snapshots[0].final_value == 250
    assert new_start == datetime(2026, 2, 28, tzinfo=timezone.utc)


def test_naive_period_start_is_read_as_utc():
    naive = START.replace(tzinfo=None)
    snapshots, new_start, _ = compute_rollover("weekly", naive, 1, 2, START + timedelta(days=8))
    assert len(snapshots) == 1
    assert new_start.tzinfo is not None


def test_non_resetting_goal_is_untouched():
    assert compute_rollover("none", None, 7, 10, START) == ([], None, 7)


def test_missing_period_start_is_an_integrity_error():
    with pytest.raises(DataIntegrityError):
        compute_rollover("weekly", None, 1, 4, START)


def test_trend_compares_with_previous_snapshot():
    rows = [
        SimpleNamespace(id=3, goal_id=1, period_type="weekly", period_start=START + timedelta(days=14),
                        period_end=START + timedelta(days=21), final_value=4, target_value=4),
        SimpleNamespace(id=2, goal_id=1, period_type="weekly", period_start=START + timedelta(days=7),
                        period_end=START + timedelta(days=14), final_value=1, target_value=4),
        SimpleNamespace(id=1, goal_id=1, period_type="weekly", period_start=START,
                        period_end=START + timedelta(days=7), final_value=3, target_value=None),
    ]

    history = with_trend(rows)

    assert [h.trend for h in history] == [3, -2, 0]
    assert [h.percentage for h in history] == [100, 25, None]


async def test_leaf_goal_is_never_zeroed_by_rollover():
    room = SimpleNamespace(id=7, type="room", reset_period="weekly", period_start_date=START,
                           current_value=1, target_value=2)
    now = START + timedelta(days=8)

    with pytest.raises(DataIntegrityError):
        await roll_over_goal(None, room, now)

    assert await roll_over_goals(None, [room], now) == 0
    assert (room.current_value, room.period_start_date) == (1, START)

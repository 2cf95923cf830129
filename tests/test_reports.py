from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

from app.services import reports

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def _goal(**fields):
    base = dict(id=1, title="Goal", category="lifestyle", type="counter", current_value=0,
                target_value=None, unit=None, goal_metadata=None)
    base.update(fields)
    return SimpleNamespace(**base)


def _log(goal_id, value, days_ago):
    return SimpleNamespace(goal_id=goal_id, value=value, created_at=NOW - timedelta(days=days_ago))


def test_savings_forecast_from_average_deposit_rate():
    trip = _goal(id=5, title="Tokio Trip", category="savings", type="progress",
                 current_value=1200, target_value=5000, unit="€")
    logs = [_log(5, 300, 60.875), _log(5, 300, 10), _log(5, -50, 5)]

    [item] = reports.savings_forecast([trip], logs, NOW)

    assert item.remaining == 3800
    assert item.monthly_rate == 300.0
    assert item.months_to_target == 13
    assert item.percentage == 24


def test_savings_forecast_without_deposits_has_no_eta():
    trip = _goal(id=5, category="savings", type="progress", current_value=0, target_value=100)
    [item] = reports.savings_forecast([trip], [], NOW)
    assert item.months_to_target is None
    assert item.monthly_rate == 0


def test_reached_savings_goal_needs_zero_months():
    trip = _goal(id=5, category="savings", type="progress", current_value=120, target_value=100)
    [item] = reports.savings_forecast([trip], [], NOW)
    assert item.remaining == 0
    assert item.months_to_target == 0


def test_reminders_put_warnings_first():
    goals = [
        _goal(id=1, title="Tokio Trip", category="savings", type="progress",
              current_value=1200, target_value=5000, unit="€"),
        _goal(id=2, title="Sport per week", category="lifestyle", current_value=1, target_value=4),
        _goal(id=3, title="Alcohol per week", category="lifestyle", current_value=2, target_value=5),
    ]

    reminders = reports.build_reminders(goals, warning_percent=30)

    assert [(r.goal_id, r.type) for r in reminders] == [(2, "warning"), (1, "info")]
    assert reminders[1].message == "3800 € still to go"


def test_category_progress_mixes_leaf_and_value_accounting():
    goals = [
        _goal(id=1, category="casa", type="room",
              goal_metadata={"items": [{"title": "a", "completed": True}, {"title": "b"}]}),
        _goal(id=2, category="milestones", type="boolean", current_value=1, target_value=1),
        _goal(id=3, category="milestones", type="boolean", current_value=0, target_value=1),
        _goal(id=4, category="lifestyle", current_value=6, target_value=4),
    ]

    by_category = {c.category: c for c in reports.category_progress(goals)}

    assert (by_category["casa"].completed, by_category["casa"].total) == (1, 2)
    assert by_category["milestones"].percentage == 50
    assert (by_category["lifestyle"].completed, by_category["lifestyle"].total) == (4, 4)
    assert by_category["fun"].total == 0


def test_progress_chart_accumulates_daily_changes():
    today = NOW.date()
    logs = [_log(1, 2, 2), _log(1, 1, 2), _log(1, -1, 0)]

    points = reports.progress_chart(logs, days=3, today=today)

    assert [p.date for p in points] == [today - timedelta(days=2), today - timedelta(days=1), today]
    assert [p.change for p in points] == [3, 0, -1]
    assert [p.value for p in points] == [3, 3, 2]


def test_stats_use_effective_streaks():
    users = [
        SimpleNamespace(xp=120, current_streak=4, last_active_date=date(2026, 10, 18)),
        SimpleNamespace(xp=30, current_streak=9, last_active_date=date(2026, 10, 1)),
    ]
    goals = [
        _goal(id=1, type="boolean", current_value=1, target_value=1),
        _goal(id=2, type="roadmap", current_value=1, target_value=2,
              goal_metadata={"steps": [{"title": "a", "completed": True}, {"title": "b"}]}),
    ]

    stats = reports.compute_stats(users, goals, total_logs=7, today=NOW.date())

    assert stats.total_xp == 150
    assert stats.current_streak == 4
    assert stats.goals_completed == 1
    assert (stats.completed_items, stats.total_items) == (1, 2)

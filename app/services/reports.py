"""Read-only derived views: forecasts, rollups, reminders, charts and stats.

None of these are stored; every read recomputes them from goals and logs.
"""
import math
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List

from app.models.goal import Goal, Log
from app.models.user import UserProfile
from app.schemas.goal import ChartPoint, RoadmapMetadata, RoomMetadata
from app.schemas.report import (
    CategoryProgress, MonthlyReportResponse, Reminder, SavingsForecastItem, StatsResponse,
)
from app.services import progress
from app.services.gamification import effective_streak
from app.utils.dates import as_utc

DAYS_PER_MONTH = 30.4375
ROLLUP_DAYS = 30
CATEGORIES = ("lifestyle", "savings", "business", "casa", "milestones", "fun")
REMINDER_ORDER = {"warning": 0, "info": 1, "success": 2}


def _logs_by_goal(logs: Iterable[Log]) -> Dict[int, List[Log]]:
    grouped: Dict[int, List[Log]] = {}
    for log in logs:
        grouped.setdefault(log.goal_id, []).append(log)
    return grouped


def _leaves(goal: Goal) -> progress.LeafProgress:
    """Leaf accounting for any goal type (substeps count as their own unit)."""
    metadata = progress.parse_metadata(goal.type, goal.goal_metadata)
    if isinstance(metadata, RoomMetadata):
        return progress.compute_checklist_progress(metadata.items)
    elif isinstance(metadata, RoadmapMetadata):
        return progress.compute_leaf_progress(metadata.steps)
    return progress.LeafProgress(0, 0)


def savings_forecast(goals: List[Goal], logs: List[Log], now: datetime) -> List[SavingsForecastItem]:
    """Projection per savings goal from the average positive deposit rate."""
    grouped = _logs_by_goal(logs)
    items = []
    for goal in goals:
        if goal.category != "savings" or not goal.target_value:
            continue
        deposits = [l for l in grouped.get(goal.id, []) if l.value > 0]
        saved = goal.current_value or 0
        remaining = max(goal.target_value - saved, 0)

        monthly_rate = 0.0
        if deposits:
            first = min(as_utc(l.created_at) for l in deposits)
            elapsed_days = max((as_utc(now) - first).total_seconds() / 86400, 1.0)
            monthly_rate = sum(l.value for l in deposits) / (elapsed_days / DAYS_PER_MONTH)

        if remaining == 0:
            months_to_target = 0
        elif monthly_rate > 0:
            months_to_target = math.ceil(remaining / monthly_rate)
        else:
            months_to_target = None

        items.append(SavingsForecastItem(
            goal_id=goal.id,
            title=goal.title,
            saved=saved,
            target=goal.target_value,
            remaining=remaining,
            percentage=round(progress.compute_percentage(saved, goal.target_value)),
            monthly_rate=round(monthly_rate, 2),
            months_to_target=months_to_target,
        ))
    return items


def monthly_report(goals: List[Goal], logs: List[Log], now: datetime) -> MonthlyReportResponse:
    now = as_utc(now)
    since = now - timedelta(days=ROLLUP_DAYS)
    savings_ids = {g.id for g in goals if g.category == "savings"}
    saved = sum(
        l.value for l in logs
        if l.goal_id in savings_ids and l.value > 0 and as_utc(l.created_at) > since
    )

    milestones = [g for g in goals if g.category == "milestones"]
    casa = [_leaves(g) for g in goals if g.category == "casa"]
    business = [_leaves(g) for g in goals if g.category == "business"]

    return MonthlyReportResponse(
        period_start=since,
        period_end=now,
        saved_last_30_days=saved,
        milestones_completed=sum(1 for g in milestones if (g.current_value or 0) >= 1),
        milestones_total=len(milestones),
        casa_completed=sum(p.completed for p in casa),
        casa_total=sum(p.total for p in casa),
        business_completed=sum(p.completed for p in business),
        business_total=sum(p.total for p in business),
    )


def build_reminders(goals: List[Goal], warning_percent: int) -> List[Reminder]:
    reminders = []

    for goal in goals:
        if goal.category == "lifestyle" and goal.target_value:
            pct = progress.compute_percentage(goal.current_value, goal.target_value)
            if pct < warning_percent:
                reminders.append(Reminder(
                    goal_id=goal.id, title=goal.title, category="lifestyle", type="warning",
                    message=f"Only {round(pct)}% so far - time to catch up!",
                ))
        elif goal.category == "savings" and goal.target_value:
            remaining = goal.target_value - (goal.current_value or 0)
            if remaining > 0:
                unit = f" {goal.unit}" if goal.unit else ""
                reminders.append(Reminder(
                    goal_id=goal.id, title=goal.title, category="savings", type="info",
                    message=f"{remaining}{unit} still to go",
                ))

    casa = [_leaves(g) for g in goals if g.category == "casa"]
    casa_total = sum(p.total for p in casa)
    casa_done = sum(p.completed for p in casa)
    if casa_total and casa_done < casa_total:
        reminders.append(Reminder(
            goal_id=None, title="Casa", category="casa", type="info",
            message=f"{casa_total - casa_done} tasks left to do",
        ))

    milestones = [g for g in goals if g.category == "milestones"]
    reached = sum(1 for g in milestones if (g.current_value or 0) >= 1)
    if 0 < reached < len(milestones):
        reminders.append(Reminder(
            goal_id=None, title="Milestones", category="milestones", type="success",
            message=f"{reached} of {len(milestones)} reached - keep going!",
        ))

    reminders.sort(key=lambda r: REMINDER_ORDER[r.type])
    return reminders


def category_progress(goals: List[Goal]) -> List[CategoryProgress]:
    """Completed/total per category, mixing leaf and counter accounting."""
    totals = {c: [0, 0] for c in CATEGORIES}
    for goal in goals:
        bucket = totals.setdefault(goal.category, [0, 0])
        if goal.type in progress.LEAF_TYPES:
            leaves = _leaves(goal)
            bucket[0] += leaves.completed
            bucket[1] += leaves.total
        elif goal.type == "boolean":
            bucket[0] += 1 if (goal.current_value or 0) >= 1 else 0
            bucket[1] += 1
        elif goal.target_value:
            bucket[0] += max(min(goal.current_value or 0, goal.target_value), 0)
            bucket[1] += goal.target_value

    return [
        CategoryProgress(
            category=category,
            completed=done,
            total=total,
            percentage=round(done / total * 100) if total else 0,
        )
        for category, (done, total) in totals.items()
    ]


def progress_chart(logs: List[Log], days: int, today: date) -> List[ChartPoint]:
    """Daily running total of log deltas over the trailing `days` days."""
    start = today - timedelta(days=days - 1)
    per_day: Dict[date, int] = {}
    for log in logs:
        day = as_utc(log.created_at).date()
        per_day[day] = per_day.get(day, 0) + log.value

    points = []
    running = 0
    for offset in range(days):
        day = start + timedelta(days=offset)
        change = per_day.get(day, 0)
        running += change
        points.append(ChartPoint(date=day, value=max(running, 0), change=change))
    return points


def compute_stats(
    users: List[UserProfile], goals: List[Goal], total_logs: int, today: date
) -> StatsResponse:
    leaves = [_leaves(g) for g in goals if g.type in progress.LEAF_TYPES]
    return StatsResponse(
        total_xp=sum(u.xp or 0 for u in users),
        current_streak=max(
            (effective_streak(u.current_streak, u.last_active_date, today) for u in users), default=0
        ),
        goals_completed=sum(1 for g in goals if progress.is_goal_complete(g)),
        total_logs=total_logs,
        total_items=sum(p.total for p in leaves),
        completed_items=sum(p.completed for p in leaves),
    )

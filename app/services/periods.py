"""Weekly/monthly period rollover.

Evaluated lazily whenever a goal is read or logged against: every fully
elapsed period is snapshotted into period_history and the live counter is
reset, with the next period starting exactly where the previous one ended.
"""
import logging
from datetime import datetime, timedelta
from typing import List, NamedTuple, Optional, Tuple

from dateutil.relativedelta import relativedelta
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import DataIntegrityError
from app.models.goal import Goal, PeriodHistory
from app.schemas.report import PeriodHistoryResponse
from app.services.progress import LEAF_TYPES
from app.utils.dates import as_utc

logger = logging.getLogger(__name__)

RESET_PERIODS = ("weekly", "monthly")


class PeriodSnapshot(NamedTuple):
    period_start: datetime
    period_end: datetime
    final_value: int
    target_value: Optional[int]


def period_end(start: datetime, reset_period: str) -> datetime:
    if reset_period == "weekly":
        return start + timedelta(days=7)
    elif reset_period == "monthly":
        return start + relativedelta(months=1)
    raise ValueError(f"Goal resets {reset_period!r}, not weekly or monthly")


def compute_rollover(
    reset_period: str,
    period_start: Optional[datetime],
    current_value: int,
    target_value: Optional[int],
    now: datetime,
) -> Tuple[List[PeriodSnapshot], Optional[datetime], int]:
    """Returns (snapshots, new period start, new current value).

    Only fully elapsed periods produce a snapshot; missed periods after the
    first one snapshot a value of 0.
    """
    if reset_period not in RESET_PERIODS:
        return [], period_start, current_value
    if period_start is None:
        raise DataIntegrityError(f"{reset_period} goal has no period start date")

    start = as_utc(period_start)
    now = as_utc(now)
    value = current_value or 0
    snapshots = []
    end = period_end(start, reset_period)
    while end <= now:
        snapshots.append(PeriodSnapshot(start, end, value, target_value))
        value = 0
        start = end
        end = period_end(start, reset_period)
    return snapshots, start, value


async def roll_over_goal(db: AsyncSession, goal: Goal, now: datetime) -> int:
    """Apply any pending rollovers to `goal` in the session. Does not commit.

    Returns the number of periods closed.
    """
    if goal.reset_period not in RESET_PERIODS:
        return 0
    try:
        if goal.type in LEAF_TYPES:
            raise DataIntegrityError(f"{goal.type} goal cannot reset {goal.reset_period}")
        snapshots, new_start, new_value = compute_rollover(
            goal.reset_period,
            goal.period_start_date,
            goal.current_value,
            goal.target_value,
            now,
        )
    except DataIntegrityError as e:
        logger.error("Period evaluation rejected for goal %s: %s", goal.id, e.message)
        raise

    if not snapshots:
        return 0

    for snap in snapshots:
        db.add(PeriodHistory(
            goal_id=goal.id,
            period_type=goal.reset_period,
            period_start=snap.period_start,
            period_end=snap.period_end,
            final_value=snap.final_value,
            target_value=snap.target_value,
        ))
    goal.period_start_date = new_start
    goal.current_value = new_value
    logger.info(
        "Goal %s closed %d %s period(s); new period starts %s",
        goal.id, len(snapshots), goal.reset_period, new_start.isoformat(),
    )
    return len(snapshots)


async def roll_over_goals(db: AsyncSession, goals: List[Goal], now: datetime) -> int:
    """Roll over every goal that can be evaluated; skip the ones with bad data."""
    closed = 0
    for goal in goals:
        try:
            closed += await roll_over_goal(db, goal, now)
        except DataIntegrityError:
            continue
    return closed


def with_trend(rows: List[PeriodHistory]) -> List[PeriodHistoryResponse]:
    """rows newest first; trend compares each snapshot to the one before it."""
    result = []
    for index, row in enumerate(rows):
        older = rows[index + 1] if index + 1 < len(rows) else None
        percentage = round(row.final_value / row.target_value * 100) if row.target_value else None
        result.append(PeriodHistoryResponse(
            id=row.id,
            goal_id=row.goal_id,
            period_type=row.period_type,
            period_start=as_utc(row.period_start),
            period_end=as_utc(row.period_end),
            final_value=row.final_value,
            target_value=row.target_value,
            percentage=percentage,
            trend=row.final_value - older.final_value if older else 0,
        ))
    return result


async def get_period_history(db: AsyncSession, goal_id: int) -> List[PeriodHistoryResponse]:
    result = await db.execute(
        select(PeriodHistory)
        .where(PeriodHistory.goal_id == goal_id)
        .order_by(PeriodHistory.period_start.desc(), PeriodHistory.id.desc())
    )
    return with_trend(list(result.scalars().all()))

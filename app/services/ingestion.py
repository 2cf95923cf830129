"""Log ingestion.

Recording a progress event writes four things in one transaction: the Log
row, the goal's running total, the acting user's xp (with streak and badges)
and an activity feed entry. Nothing is committed until all four are staged.
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.acting_user import resolve_acting_user
from app.core.errors import ValidationError
from app.models.goal import Goal, Log
from app.services import progress
from app.services.activity import record_activity
from app.services.goals import load_current_goal

logger = logging.getLogger(__name__)


def describe_log(goal: Goal, value: int) -> str:
    """Human readable feed text, e.g. "+2 workouts on Sport per week"."""
    amount = f"{value:+d}"
    if goal.unit:
        amount = f"{amount} {goal.unit}"
    return f"{amount} on {goal.title}"


async def record_log(
    db: AsyncSession,
    goal_id: int,
    value: int,
    now: datetime,
    note: Optional[str] = None,
    user_id: Optional[int] = None,
) -> Log:
    goal = await load_current_goal(db, goal_id, now)
    acting_user = await resolve_acting_user(db, user_id)
    if goal.type in progress.LEAF_TYPES:
        raise ValidationError(
            f"Progress of a {goal.type} goal comes from its checklist, not from logs", field="goalId"
        )

    log = Log(goal_id=goal.id, user_id=acting_user.id, value=value, note=note, created_at=now)
    db.add(log)

    # increment in SQL so concurrent logs against the same goal do not lose updates
    await db.execute(
        update(Goal)
        .where(Goal.id == goal.id)
        .values(current_value=Goal.current_value + value)
    )

    await record_activity(
        db,
        acting_user,
        "log",
        describe_log(goal, value),
        now,
        goal_id=goal.id,
        xp_earned=settings.LOG_XP_REWARD,
    )

    await db.commit()
    await db.refresh(log)
    logger.info("Logged %+d on goal %s by user %s", value, goal.id, acting_user.id)
    return log

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.activity import Activity
from app.models.user import UserProfile
from app.services.gamification import apply_activity

logger = logging.getLogger(__name__)


async def credit_xp(db: AsyncSession, user: UserProfile, amount: int, now: datetime) -> None:
    """Atomically add xp to the profile, then roll its streak and badges forward."""
    if amount <= 0:
        return
    await db.execute(
        update(UserProfile)
        .where(UserProfile.id == user.id)
        .values(xp=UserProfile.xp + amount)
    )
    await db.refresh(user)
    earned = apply_activity(user, now.date())
    if earned:
        logger.info("User %s earned badges %s", user.id, ", ".join(earned))


async def record_activity(
    db: AsyncSession,
    user: UserProfile,
    action: str,
    description: str,
    now: datetime,
    goal_id: Optional[int] = None,
    xp_earned: int = 0,
) -> Activity:
    """Append a feed entry and credit its xp. Does not commit."""
    await credit_xp(db, user, xp_earned, now)
    activity = Activity(
        user_id=user.id,
        goal_id=goal_id,
        action=action,
        description=description,
        xp_earned=xp_earned,
        created_at=now,
    )
    db.add(activity)
    return activity

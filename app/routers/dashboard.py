from datetime import timedelta
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from app.config import settings
from app.database import get_db
from app.models.goal import Log
from app.models.user import UserProfile
from app.schemas.report import (
    CategoryProgress, MonthlyReportResponse, Reminder, SavingsForecastItem, StatsResponse,
)
from app.services import reports
from app.services.goals import list_goals
from app.utils.dates import utcnow

router = APIRouter(prefix="/api", tags=["dashboard"])


@router.get("/stats", response_model=StatsResponse)
async def get_stats(db: AsyncSession = Depends(get_db)):
    now = utcnow()
    goals = await list_goals(db, now)
    users = await db.execute(select(UserProfile))
    total_logs = await db.execute(select(func.count(Log.id)))
    return reports.compute_stats(
        list(users.scalars().all()), goals, total_logs.scalar_one() or 0, now.date()
    )


@router.get("/reports/forecast", response_model=List[SavingsForecastItem])
async def get_savings_forecast(db: AsyncSession = Depends(get_db)):
    now = utcnow()
    goals = await list_goals(db, now, category="savings")
    logs = await db.execute(
        select(Log).where(Log.goal_id.in_([g.id for g in goals]))
    )
    return reports.savings_forecast(goals, list(logs.scalars().all()), now)


@router.get("/reports/monthly", response_model=MonthlyReportResponse)
async def get_monthly_report(db: AsyncSession = Depends(get_db)):
    now = utcnow()
    goals = await list_goals(db, now)
    since = now - timedelta(days=reports.ROLLUP_DAYS)
    logs = await db.execute(select(Log).where(Log.created_at > since))
    return reports.monthly_report(goals, list(logs.scalars().all()), now)


@router.get("/reports/reminders", response_model=List[Reminder])
async def get_reminders(db: AsyncSession = Depends(get_db)):
    goals = await list_goals(db, utcnow())
    return reports.build_reminders(goals, settings.LIFESTYLE_WARNING_PERCENT)


@router.get("/reports/categories", response_model=List[CategoryProgress])
async def get_category_progress(db: AsyncSession = Depends(get_db)):
    goals = await list_goals(db, utcnow())
    return reports.category_progress(goals)

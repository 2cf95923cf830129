from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.config import settings
from app.database import get_db
from app.models.goal import Log
from app.schemas.log import LogCreate, LogResponse
from app.services.ingestion import record_log
from app.utils.dates import utcnow

router = APIRouter(prefix="/api/logs", tags=["logs"])


@router.post("", response_model=LogResponse, status_code=status.HTTP_201_CREATED)
async def create_log(log_in: LogCreate, db: AsyncSession = Depends(get_db)):
    return await record_log(
        db,
        goal_id=log_in.goal_id,
        value=log_in.value,
        now=utcnow(),
        note=log_in.note,
        user_id=log_in.user_id,
    )


@router.get("", response_model=List[LogResponse])
async def list_recent_logs(db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(Log)
        .order_by(Log.created_at.desc(), Log.id.desc())
        .limit(settings.RECENT_LOGS_LIMIT)
    )
    return result.scalars().all()


@router.get("/{goal_id}", response_model=List[LogResponse])
async def list_goal_logs(goal_id: int, db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(Log)
        .where(Log.goal_id == goal_id)
        .order_by(Log.created_at.desc(), Log.id.desc())
    )
    return result.scalars().all()

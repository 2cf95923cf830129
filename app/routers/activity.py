from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.config import settings
from app.database import get_db
from app.models.activity import Activity
from app.schemas.activity import ActivityResponse

router = APIRouter(prefix="/api/activity", tags=["activity"])


@router.get("", response_model=List[ActivityResponse])
async def list_activity(db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(Activity)
        .order_by(Activity.created_at.desc(), Activity.id.desc())
        .limit(settings.ACTIVITY_FEED_LIMIT)
    )
    return result.scalars().all()

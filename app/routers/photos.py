from typing import List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.database import get_db
from app.core.acting_user import resolve_acting_user
from app.core.errors import NotFoundError
from app.models.attachment import MilestonePhoto
from app.schemas.attachment import PhotoCreate, PhotoResponse
from app.services.goals import get_goal_or_404
from app.utils.dates import utcnow

router = APIRouter(prefix="/api", tags=["photos"])


@router.get("/goals/{goal_id}/photos", response_model=List[PhotoResponse])
async def list_photos(goal_id: int, db: AsyncSession = Depends(get_db)):
    await get_goal_or_404(db, goal_id)
    result = await db.execute(
        select(MilestonePhoto)
        .where(MilestonePhoto.goal_id == goal_id)
        .order_by(MilestonePhoto.created_at.desc(), MilestonePhoto.id.desc())
    )
    return result.scalars().all()


@router.post("/goals/{goal_id}/photos", response_model=PhotoResponse, status_code=status.HTTP_201_CREATED)
async def create_photo(goal_id: int, photo_in: PhotoCreate, db: AsyncSession = Depends(get_db)):
    await get_goal_or_404(db, goal_id)
    uploader = await resolve_acting_user(db, photo_in.user_id)

    photo = MilestonePhoto(
        goal_id=goal_id,
        user_id=uploader.id,
        image_url=photo_in.image_url,
        caption=photo_in.caption,
        created_at=utcnow(),
    )
    db.add(photo)
    await db.commit()
    await db.refresh(photo)
    return photo


@router.delete("/photos/{photo_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_photo(photo_id: int, db: AsyncSession = Depends(get_db)):
    photo = await db.get(MilestonePhoto, photo_id)
    if photo is None:
        raise NotFoundError("Photo not found")
    await db.delete(photo)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)

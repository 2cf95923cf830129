from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.database import get_db
from app.core.acting_user import resolve_acting_user
from app.core.errors import ValidationError
from app.models.user import UserProfile
from app.schemas.user import UserResponse, UserUpdate
from app.services.gamification import compute_level, effective_streak
from app.utils.dates import utcnow

router = APIRouter(prefix="/api/users", tags=["users"])


def build_user_response(user: UserProfile) -> UserResponse:
    level = compute_level(user.xp or 0)
    return UserResponse(
        id=user.id,
        name=user.name,
        avatar=user.avatar,
        xp=user.xp or 0,
        level=level.level,
        level_progress=level.progress,
        current_streak=effective_streak(user.current_streak, user.last_active_date, utcnow().date()),
        longest_streak=user.longest_streak or 0,
        badges=list(user.badges or []),
        created_at=user.created_at,
    )


@router.get("", response_model=List[UserResponse])
async def list_users(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(UserProfile).order_by(UserProfile.id))
    return [build_user_response(u) for u in result.scalars().all()]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, db: AsyncSession = Depends(get_db)):
    user = await resolve_acting_user(db, user_id)
    return build_user_response(user)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(user_id: int, user_in: UserUpdate, db: AsyncSession = Depends(get_db)):
    user = await resolve_acting_user(db, user_id)

    changes = user_in.model_dump(exclude_unset=True)
    if "name" in changes and changes["name"] is None:
        raise ValidationError("name must not be null", field="name")
    for field, value in changes.items():
        setattr(user, field, value)

    db.add(user)
    await db.commit()
    await db.refresh(user)
    return build_user_response(user)

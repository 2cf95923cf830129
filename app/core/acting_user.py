# app/core/acting_user.py
from typing import Optional

from fastapi import Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import DataIntegrityError, NotFoundError
from app.database import get_db
from app.models.user import UserProfile


async def resolve_acting_user(db: AsyncSession, user_id: Optional[int] = None) -> UserProfile:
    """The profile a mutation is attributed to; the first profile when none is named."""
    if user_id is not None:
        result = await db.execute(select(UserProfile).where(UserProfile.id == user_id))
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError("User not found")
        return user

    result = await db.execute(select(UserProfile).order_by(UserProfile.id).limit(1))
    user = result.scalar_one_or_none()
    if user is None:
        raise DataIntegrityError("No user profile exists to attribute the change to")
    return user


async def get_acting_user(
    acting_user_id: Optional[int] = Query(None, alias="actingUserId"),
    db: AsyncSession = Depends(get_db),
) -> UserProfile:
    return await resolve_acting_user(db, acting_user_id)

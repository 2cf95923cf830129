from typing import List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from app.database import get_db
from app.core.errors import NotFoundError, ValidationError
from app.models.idea import Idea, IdeaCategory
from app.schemas.idea import (
    IdeaCategoryCreate, IdeaCategoryResponse, IdeaCategoryUpdate,
    IdeaCreate, IdeaResponse, IdeaUpdate,
)
from app.utils.dates import utcnow

router = APIRouter(prefix="/api", tags=["ideas"])


async def _get_category_or_404(db: AsyncSession, category_id: int) -> IdeaCategory:
    category = await db.get(IdeaCategory, category_id)
    if category is None:
        raise NotFoundError("Idea category not found")
    return category


async def _get_idea_or_404(db: AsyncSession, idea_id: int) -> Idea:
    idea = await db.get(Idea, idea_id)
    if idea is None:
        raise NotFoundError("Idea not found")
    return idea


# --- categories ---

@router.get("/idea-categories", response_model=List[IdeaCategoryResponse])
async def list_categories(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(IdeaCategory).order_by(IdeaCategory.id))
    return result.scalars().all()


@router.post("/idea-categories", response_model=IdeaCategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(category_in: IdeaCategoryCreate, db: AsyncSession = Depends(get_db)):
    category = IdeaCategory(**category_in.model_dump(), created_at=utcnow())
    if category.icon is None:
        category.icon = "folder"
    db.add(category)
    await db.commit()
    await db.refresh(category)
    return category


@router.patch("/idea-categories/{category_id}", response_model=IdeaCategoryResponse)
async def update_category(
    category_id: int, category_in: IdeaCategoryUpdate, db: AsyncSession = Depends(get_db)
):
    category = await _get_category_or_404(db, category_id)
    changes = category_in.model_dump(exclude_unset=True)
    if "name" in changes and changes["name"] is None:
        raise ValidationError("name must not be null", field="name")
    for field, value in changes.items():
        setattr(category, field, value)
    await db.commit()
    await db.refresh(category)
    return category


@router.delete("/idea-categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(category_id: int, db: AsyncSession = Depends(get_db)):
    category = await _get_category_or_404(db, category_id)
    await db.execute(delete(Idea).where(Idea.category_id == category_id))
    await db.delete(category)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/idea-categories/{category_id}/ideas", response_model=List[IdeaResponse])
async def list_category_ideas(category_id: int, db: AsyncSession = Depends(get_db)):
    await _get_category_or_404(db, category_id)
    result = await db.execute(
        select(Idea).where(Idea.category_id == category_id).order_by(Idea.created_at.desc(), Idea.id.desc())
    )
    return result.scalars().all()


# --- ideas ---

@router.get("/ideas", response_model=List[IdeaResponse])
async def list_ideas(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Idea).order_by(Idea.created_at.desc(), Idea.id.desc()))
    return result.scalars().all()


@router.post("/ideas", response_model=IdeaResponse, status_code=status.HTTP_201_CREATED)
async def create_idea(idea_in: IdeaCreate, db: AsyncSession = Depends(get_db)):
    await _get_category_or_404(db, idea_in.category_id)
    idea = Idea(**idea_in.model_dump(), completed=False, created_at=utcnow())
    db.add(idea)
    await db.commit()
    await db.refresh(idea)
    return idea


@router.patch("/ideas/{idea_id}", response_model=IdeaResponse)
async def update_idea(idea_id: int, idea_in: IdeaUpdate, db: AsyncSession = Depends(get_db)):
    idea = await _get_idea_or_404(db, idea_id)
    changes = idea_in.model_dump(exclude_unset=True)
    for field in ("category_id", "title", "completed"):
        if field in changes and changes[field] is None:
            raise ValidationError(f"{field} must not be null", field=field)
    if "category_id" in changes:
        await _get_category_or_404(db, changes["category_id"])
    for field, value in changes.items():
        setattr(idea, field, value)
    await db.commit()
    await db.refresh(idea)
    return idea


@router.delete("/ideas/{idea_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_idea(idea_id: int, db: AsyncSession = Depends(get_db)):
    idea = await _get_idea_or_404(db, idea_id)
    await db.delete(idea)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)

from typing import List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.database import get_db
from app.core.acting_user import resolve_acting_user
from app.core.errors import NotFoundError
from app.models.attachment import GoalNote
from app.schemas.attachment import NoteCreate, NoteResponse
from app.services.goals import get_goal_or_404
from app.utils.dates import utcnow

router = APIRouter(prefix="/api", tags=["notes"])


@router.get("/goals/{goal_id}/notes", response_model=List[NoteResponse])
async def list_notes(goal_id: int, db: AsyncSession = Depends(get_db)):
    await get_goal_or_404(db, goal_id)
    result = await db.execute(
        select(GoalNote)
        .where(GoalNote.goal_id == goal_id)
        .order_by(GoalNote.created_at.desc(), GoalNote.id.desc())
    )
    return result.scalars().all()


@router.post("/goals/{goal_id}/notes", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
async def create_note(goal_id: int, note_in: NoteCreate, db: AsyncSession = Depends(get_db)):
    await get_goal_or_404(db, goal_id)
    author = await resolve_acting_user(db, note_in.user_id)

    note = GoalNote(goal_id=goal_id, user_id=author.id, content=note_in.content, created_at=utcnow())
    db.add(note)
    await db.commit()
    await db.refresh(note)
    return note


@router.delete("/notes/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(note_id: int, db: AsyncSession = Depends(get_db)):
    note = await db.get(GoalNote, note_id)
    if note is None:
        raise NotFoundError("Note not found")
    await db.delete(note)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)

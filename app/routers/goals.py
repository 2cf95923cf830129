from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.database import get_db
from app.core.acting_user import get_acting_user
from app.models.goal import Log
from app.schemas.goal import ChartPoint, GoalCreate, GoalReorder, GoalResponse, GoalUpdate, LeafCreate
from app.schemas.report import PeriodHistoryResponse
from app.services import goals as goal_service
from app.services.periods import get_period_history, roll_over_goals
from app.services.reports import progress_chart
from app.utils.dates import utcnow

router = APIRouter(prefix="/api/goals", tags=["goals"])


@router.get("", response_model=List[GoalResponse])
async def list_goals(
    category: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    now = utcnow()
    goals = await goal_service.list_goals(db, now, category)
    return [goal_service.build_goal_response(g, now) for g in goals]


@router.post("", response_model=GoalResponse, status_code=status.HTTP_201_CREATED)
async def create_goal(goal_in: GoalCreate, db: AsyncSession = Depends(get_db)):
    now = utcnow()
    goal = await goal_service.create_goal(db, goal_in, now)
    return goal_service.build_goal_response(goal, now)


@router.post("/reorder", response_model=List[GoalResponse])
async def reorder_goals(reorder_in: GoalReorder, db: AsyncSession = Depends(get_db)):
    now = utcnow()
    goals = await goal_service.reorder_goals(db, reorder_in.goal_ids)
    return [goal_service.build_goal_response(g, now) for g in goals]


@router.get("/{goal_id}", response_model=GoalResponse)
async def get_goal(goal_id: int, db: AsyncSession = Depends(get_db)):
    now = utcnow()
    goal = await goal_service.get_goal_or_404(db, goal_id)
    if await roll_over_goals(db, [goal], now):
        await db.commit()
    return goal_service.build_goal_response(goal, now)


@router.patch("/{goal_id}", response_model=GoalResponse)
async def update_goal(goal_id: int, goal_in: GoalUpdate, db: AsyncSession = Depends(get_db)):
    now = utcnow()
    goal = await goal_service.load_current_goal(db, goal_id, now)
    changes = goal_in.model_dump(exclude_unset=True)
    goal = await goal_service.update_goal(db, goal, changes, now)
    return goal_service.build_goal_response(goal, now)


@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_goal(goal_id: int, db: AsyncSession = Depends(get_db)):
    goal = await goal_service.get_goal_or_404(db, goal_id)
    await goal_service.delete_goal(db, goal)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{goal_id}/history", response_model=List[PeriodHistoryResponse])
async def get_goal_history(goal_id: int, db: AsyncSession = Depends(get_db)):
    goal = await goal_service.get_goal_or_404(db, goal_id)
    if await roll_over_goals(db, [goal], utcnow()):
        await db.commit()
    return await get_period_history(db, goal_id)


@router.get("/{goal_id}/chart", response_model=List[ChartPoint])
async def get_goal_chart(
    goal_id: int,
    days: int = Query(14, ge=1, le=365),
    db: AsyncSession = Depends(get_db),
):
    await goal_service.get_goal_or_404(db, goal_id)
    result = await db.execute(select(Log).where(Log.goal_id == goal_id))
    return progress_chart(list(result.scalars().all()), days, utcnow().date())


# --- room checklist ---

@router.post("/{goal_id}/items", response_model=GoalResponse, status_code=status.HTTP_201_CREATED)
async def add_room_item(
    goal_id: int,
    item_in: LeafCreate,
    db: AsyncSession = Depends(get_db),
    acting_user = Depends(get_acting_user),
):
    now = utcnow()
    goal = await goal_service.get_goal_or_404(db, goal_id)
    goal = await goal_service.add_item(db, goal, item_in.title, acting_user, now)
    return goal_service.build_goal_response(goal, now)


@router.delete("/{goal_id}/items/{index}", response_model=GoalResponse)
async def remove_room_item(goal_id: int, index: int, db: AsyncSession = Depends(get_db)):
    now = utcnow()
    goal = await goal_service.get_goal_or_404(db, goal_id)
    goal = await goal_service.remove_item(db, goal, index, now)
    return goal_service.build_goal_response(goal, now)


@router.post("/{goal_id}/items/{index}/toggle", response_model=GoalResponse)
async def toggle_room_item(
    goal_id: int,
    index: int,
    db: AsyncSession = Depends(get_db),
    acting_user = Depends(get_acting_user),
):
    now = utcnow()
    goal = await goal_service.get_goal_or_404(db, goal_id)
    goal = await goal_service.toggle_item(db, goal, index, acting_user, now)
    return goal_service.build_goal_response(goal, now)


# --- roadmap steps ---

@router.post("/{goal_id}/steps", response_model=GoalResponse, status_code=status.HTTP_201_CREATED)
async def add_roadmap_step(
    goal_id: int,
    step_in: LeafCreate,
    db: AsyncSession = Depends(get_db),
    acting_user = Depends(get_acting_user),
):
    now = utcnow()
    goal = await goal_service.get_goal_or_404(db, goal_id)
    goal = await goal_service.add_step(db, goal, step_in.title, acting_user, now)
    return goal_service.build_goal_response(goal, now)


@router.delete("/{goal_id}/steps/{index}", response_model=GoalResponse)
async def remove_roadmap_step(goal_id: int, index: int, db: AsyncSession = Depends(get_db)):
    now = utcnow()
    goal = await goal_service.get_goal_or_404(db, goal_id)
    goal = await goal_service.remove_step(db, goal, index, now)
    return goal_service.build_goal_response(goal, now)


@router.post("/{goal_id}/steps/{index}/toggle", response_model=GoalResponse)
async def toggle_roadmap_step(
    goal_id: int,
    index: int,
    db: AsyncSession = Depends(get_db),
    acting_user = Depends(get_acting_user),
):
    now = utcnow()
    goal = await goal_service.get_goal_or_404(db, goal_id)
    goal = await goal_service.toggle_step(db, goal, index, None, acting_user, now)
    return goal_service.build_goal_response(goal, now)


@router.post("/{goal_id}/steps/{index}/substeps", response_model=GoalResponse, status_code=status.HTTP_201_CREATED)
async def add_roadmap_substep(
    goal_id: int,
    index: int,
    substep_in: LeafCreate,
    db: AsyncSession = Depends(get_db),
    acting_user = Depends(get_acting_user),
):
    now = utcnow()
    goal = await goal_service.get_goal_or_404(db, goal_id)
    goal = await goal_service.add_substep(db, goal, index, substep_in.title, acting_user, now)
    return goal_service.build_goal_response(goal, now)


@router.delete("/{goal_id}/steps/{index}/substeps/{sub_index}", response_model=GoalResponse)
async def remove_roadmap_substep(
    goal_id: int,
    index: int,
    sub_index: int,
    db: AsyncSession = Depends(get_db),
):
    now = utcnow()
    goal = await goal_service.get_goal_or_404(db, goal_id)
    goal = await goal_service.remove_substep(db, goal, index, sub_index, now)
    return goal_service.build_goal_response(goal, now)


@router.post("/{goal_id}/steps/{index}/substeps/{sub_index}/toggle", response_model=GoalResponse)
async def toggle_roadmap_substep(
    goal_id: int,
    index: int,
    sub_index: int,
    db: AsyncSession = Depends(get_db),
    acting_user = Depends(get_acting_user),
):
    now = utcnow()
    goal = await goal_service.get_goal_or_404(db, goal_id)
    goal = await goal_service.toggle_step(db, goal, index, sub_index, acting_user, now)
    return goal_service.build_goal_response(goal, now)

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.errors import NotFoundError, OutOfRangeError, ValidationError, first_validation_error
from app.models.activity import Activity
from app.models.attachment import GoalNote, MilestonePhoto
from app.models.goal import Goal, Log, PeriodHistory
from app.models.user import UserProfile
from app.schemas.goal import (
    GoalCreate, GoalResponse, RoadmapMetadata, RoadmapStep, RoadmapSubstep, RoomItem,
)
from app.services import progress
from app.services.activity import record_activity
from app.services.periods import RESET_PERIODS, roll_over_goal, roll_over_goals
from app.utils.dates import as_utc

logger = logging.getLogger(__name__)

NOT_NULL_FIELDS = {
    "title": "title",
    "category": "category",
    "current_value": "currentValue",
    "reset_period": "resetPeriod",
    "is_auto_calculated": "isAutoCalculated",
}


def build_goal_response(goal: Goal, now: datetime) -> GoalResponse:
    metadata = progress.parse_metadata(goal.type, goal.goal_metadata)
    shown = progress.display_value(goal, settings.RELATIONSHIP_START_DATE, now)

    step_ratio = leaf_ratio = None
    if isinstance(metadata, RoadmapMetadata):
        step_ratio = round(progress.compute_roadmap_progress(metadata.steps).ratio, 4)
        leaf_ratio = round(progress.compute_leaf_progress(metadata.steps).ratio, 4)

    return GoalResponse(
        id=goal.id,
        title=goal.title,
        category=goal.category,
        type=goal.type,
        current_value=goal.current_value or 0,
        target_value=goal.target_value,
        unit=goal.unit,
        icon=goal.icon,
        color=goal.color,
        metadata=progress.dump_metadata(metadata),
        reset_period=goal.reset_period or "none",
        period_start_date=as_utc(goal.period_start_date),
        target_date=as_utc(goal.target_date),
        is_auto_calculated=bool(goal.is_auto_calculated),
        auto_start_date=goal.auto_start_date,
        sort_order=goal.sort_order or 0,
        created_at=as_utc(goal.created_at),
        percentage=round(progress.compute_percentage(shown, goal.target_value), 2),
        display_value=shown,
        step_completion_ratio=step_ratio,
        leaf_completion_ratio=leaf_ratio,
    )


async def get_goal_or_404(db: AsyncSession, goal_id: int) -> Goal:
    result = await db.execute(select(Goal).where(Goal.id == goal_id))
    goal = result.scalar_one_or_none()
    if goal is None:
        logger.debug("Goal %s not found", goal_id)
        raise NotFoundError("Goal not found")
    return goal


async def load_current_goal(db: AsyncSession, goal_id: int, now: datetime) -> Goal:
    """Fetch a goal and close any periods that ended before `now`. Does not commit."""
    goal = await get_goal_or_404(db, goal_id)
    await roll_over_goal(db, goal, now)
    return goal


async def list_goals(db: AsyncSession, now: datetime, category: Optional[str] = None) -> List[Goal]:
    query = select(Goal).order_by(Goal.sort_order, Goal.id)
    if category:
        query = query.where(Goal.category == category)
    result = await db.execute(query)
    goals = list(result.scalars().all())
    if await roll_over_goals(db, goals, now):
        await db.commit()
    return goals


def _parse_leaf_metadata(goal_type: str, raw: Optional[dict]):
    try:
        return progress.parse_metadata(goal_type, raw)
    except PydanticValidationError as e:
        raise first_validation_error(e, prefix="metadata")


def _check_reset_period(goal: Goal) -> None:
    # leaf goals take their value from the checklist, a period reset would desync it
    if goal.type in progress.LEAF_TYPES and goal.reset_period in RESET_PERIODS:
        raise ValidationError(
            f"resetPeriod of a {goal.type} goal must be none", field="resetPeriod"
        )


async def create_goal(db: AsyncSession, goal_in: GoalCreate, now: datetime) -> Goal:
    data = goal_in.model_dump()
    raw_metadata = data.pop("metadata")
    goal = Goal(**data)
    goal.title = goal.title.strip()

    if goal.type in progress.LEAF_TYPES:
        progress.sync_leaf_counts(goal, _parse_leaf_metadata(goal.type, raw_metadata))
    elif raw_metadata is not None:
        raise ValidationError("metadata is only allowed for room and roadmap goals", field="metadata")
    elif goal.type == "boolean":
        if goal.current_value not in (0, 1):
            raise ValidationError("currentValue of a boolean goal must be 0 or 1", field="currentValue")
        goal.target_value = 1

    _check_reset_period(goal)
    if goal.reset_period in RESET_PERIODS and goal.period_start_date is None:
        goal.period_start_date = now

    result = await db.execute(select(func.max(Goal.sort_order)))
    highest = result.scalar_one_or_none()
    goal.sort_order = 0 if highest is None else highest + 1
    goal.created_at = now

    db.add(goal)
    await db.commit()
    await db.refresh(goal)
    logger.info("Created %s goal %s (%s)", goal.type, goal.id, goal.title)
    return goal


async def update_goal(db: AsyncSession, goal: Goal, changes: Dict[str, Any], now: datetime) -> Goal:
    """Apply a partial update. `changes` holds only the fields the client sent."""
    for field, alias in NOT_NULL_FIELDS.items():
        if field in changes and changes[field] is None:
            raise ValidationError(f"{alias} must not be null", field=alias)
    if "metadata" in changes and changes["metadata"] is None and goal.type in progress.LEAF_TYPES:
        raise ValidationError("metadata must not be null", field="metadata")

    if goal.type in progress.LEAF_TYPES:
        for field, alias in (("current_value", "currentValue"), ("target_value", "targetValue")):
            if field in changes:
                raise ValidationError(
                    f"{alias} of a {goal.type} goal is derived from its metadata", field=alias
                )
    elif changes.get("metadata") is not None:
        raise ValidationError("metadata is only allowed for room and roadmap goals", field="metadata")

    if goal.type == "boolean" and changes.get("current_value") not in (None, 0, 1):
        raise ValidationError("currentValue of a boolean goal must be 0 or 1", field="currentValue")

    if "metadata" in changes:
        raw_metadata = changes.pop("metadata")
        if goal.type in progress.LEAF_TYPES:
            progress.sync_leaf_counts(goal, _parse_leaf_metadata(goal.type, raw_metadata))

    if "title" in changes:
        changes["title"] = changes["title"].strip()

    for field, value in changes.items():
        setattr(goal, field, value)

    _check_reset_period(goal)
    if goal.reset_period in RESET_PERIODS and goal.period_start_date is None:
        goal.period_start_date = now

    await db.commit()
    await db.refresh(goal)
    return goal


async def delete_goal(db: AsyncSession, goal: Goal) -> None:
    """Remove a goal with its logs, notes, photos and period history.

    Activity rows are kept for the feed and lose their goal reference.
    """
    goal_id = goal.id
    for model in (Log, PeriodHistory, GoalNote, MilestonePhoto):
        await db.execute(delete(model).where(model.goal_id == goal_id))
    await db.execute(update(Activity).where(Activity.goal_id == goal_id).values(goal_id=None))
    await db.delete(goal)
    await db.commit()
    logger.info("Deleted goal %s", goal_id)


async def reorder_goals(db: AsyncSession, goal_ids: List[int]) -> List[Goal]:
    if len(set(goal_ids)) != len(goal_ids):
        raise ValidationError("goalIds must not contain duplicates", field="goalIds")

    result = await db.execute(select(Goal).order_by(Goal.sort_order, Goal.id))
    goals = list(result.scalars().all())
    by_id = {g.id: g for g in goals}
    missing = [gid for gid in goal_ids if gid not in by_id]
    if missing:
        raise NotFoundError(f"Goal {missing[0]} not found")

    # listed goals first, in the given order; the rest keep their relative order
    listed = [by_id[gid] for gid in goal_ids]
    rest = [g for g in goals if g.id not in set(goal_ids)]
    for position, goal in enumerate(listed + rest):
        goal.sort_order = position
    await db.commit()
    return listed + rest


# --- leaf mutations ---

def _leaf_metadata(goal: Goal, expected_type: str):
    if goal.type != expected_type:
        raise ValidationError(f"Goal {goal.id} is a {goal.type} goal, not a {expected_type} goal", field="type")
    return progress.parse_metadata(goal.type, goal.goal_metadata)


async def _save_leaves(
    db: AsyncSession,
    goal: Goal,
    metadata,
    user: Optional[UserProfile],
    now: datetime,
) -> Goal:
    """Re-sync counts, credit goal completion and commit the mutation."""
    was_complete = progress.is_goal_complete(goal)
    progress.sync_leaf_counts(goal, metadata)
    if user is not None and not was_complete and progress.is_goal_complete(goal):
        await record_activity(
            db, user, "complete", f"{goal.title} completed", now,
            goal_id=goal.id, xp_earned=settings.GOAL_COMPLETE_XP_REWARD,
        )
    await db.commit()
    await db.refresh(goal)
    return goal


def _blank_title() -> ValidationError:
    return ValidationError("title must not be blank", field="title")


async def toggle_item(db: AsyncSession, goal: Goal, index: int, user: UserProfile, now: datetime) -> Goal:
    metadata = _leaf_metadata(goal, "room")
    metadata.items = progress.toggle_room_item(metadata.items, index)
    item = metadata.items[index]
    if item.completed:
        await record_activity(db, user, "complete", f"Checked off {item.title} in {goal.title}", now, goal_id=goal.id)
    return await _save_leaves(db, goal, metadata, user, now)


async def add_item(db: AsyncSession, goal: Goal, title: str, user: UserProfile, now: datetime) -> Goal:
    metadata = _leaf_metadata(goal, "room")
    items = progress.add_leaf(metadata.items, title, RoomItem)
    if len(items) == len(metadata.items):
        raise _blank_title()
    metadata.items = items
    await record_activity(db, user, "add", f"Added {items[-1].title} to {goal.title}", now, goal_id=goal.id)
    return await _save_leaves(db, goal, metadata, None, now)


async def remove_item(db: AsyncSession, goal: Goal, index: int, now: datetime) -> Goal:
    metadata = _leaf_metadata(goal, "room")
    metadata.items = progress.remove_leaf(metadata.items, index, "items")
    return await _save_leaves(db, goal, metadata, None, now)


async def toggle_step(
    db: AsyncSession,
    goal: Goal,
    step_index: int,
    substep_index: Optional[int],
    user: UserProfile,
    now: datetime,
) -> Goal:
    metadata = _leaf_metadata(goal, "roadmap")
    before = metadata.steps[step_index].completed if 0 <= step_index < len(metadata.steps) else None
    metadata.steps = progress.toggle_roadmap_step(metadata.steps, step_index, substep_index)
    step = metadata.steps[step_index]
    if step.completed and not before:
        await record_activity(
            db, user, "step_complete", f"{goal.title}: {step.title} done", now,
            goal_id=goal.id, xp_earned=settings.STEP_XP_REWARD,
        )
    return await _save_leaves(db, goal, metadata, user, now)


async def add_step(db: AsyncSession, goal: Goal, title: str, user: UserProfile, now: datetime) -> Goal:
    metadata = _leaf_metadata(goal, "roadmap")
    steps = progress.add_leaf(metadata.steps, title, RoadmapStep)
    if len(steps) == len(metadata.steps):
        raise _blank_title()
    metadata.steps = steps
    await record_activity(db, user, "add", f"Added step {steps[-1].title} to {goal.title}", now, goal_id=goal.id)
    return await _save_leaves(db, goal, metadata, None, now)


async def remove_step(db: AsyncSession, goal: Goal, index: int, now: datetime) -> Goal:
    metadata = _leaf_metadata(goal, "roadmap")
    metadata.steps = progress.remove_leaf(metadata.steps, index, "steps")
    return await _save_leaves(db, goal, metadata, None, now)


def _step_at(metadata: RoadmapMetadata, step_index: int) -> RoadmapStep:
    if step_index < 0 or step_index >= len(metadata.steps):
        raise OutOfRangeError("steps", step_index)
    return metadata.steps[step_index]


async def add_substep(
    db: AsyncSession, goal: Goal, step_index: int, title: str, user: UserProfile, now: datetime
) -> Goal:
    metadata = _leaf_metadata(goal, "roadmap")
    step = _step_at(metadata, step_index)
    substeps = progress.add_leaf(step.substeps, title, RoadmapSubstep)
    if len(substeps) == len(step.substeps):
        raise _blank_title()
    metadata.steps[step_index] = step.model_copy(update={"substeps": substeps})
    await record_activity(
        db, user, "add", f"Added {substeps[-1].title} under {step.title} in {goal.title}", now, goal_id=goal.id
    )
    return await _save_leaves(db, goal, metadata, None, now)


async def remove_substep(db: AsyncSession, goal: Goal, step_index: int, substep_index: int, now: datetime) -> Goal:
    metadata = _leaf_metadata(goal, "roadmap")
    step = _step_at(metadata, step_index)
    substeps = progress.remove_leaf(step.substeps, substep_index, "substeps")
    metadata.steps[step_index] = step.model_copy(update={"substeps": substeps})
    return await _save_leaves(db, goal, metadata, None, now)

"""Goal progress aggregation.

Pure functions over a goal's counters and its leaf collections (room items,
roadmap steps and substeps). Toggle/add/remove never mutate their input; they
return a new list which the caller stores and then re-syncs the goal's
counters from with :func:`sync_leaf_counts`.
"""
from datetime import date, datetime
from typing import List, NamedTuple, Optional, TypeVar, Union

from app.core.errors import DataIntegrityError, OutOfRangeError
from app.schemas.goal import (
    RoadmapMetadata, RoadmapStep, RoadmapSubstep, RoomItem, RoomMetadata,
)
from app.utils.dates import whole_days_between

LEAF_TYPES = ("room", "roadmap")
SCALAR_TYPES = ("counter", "progress", "boolean")

Leaf = TypeVar("Leaf", RoomItem, RoadmapStep, RoadmapSubstep)
GoalMetadata = Union[RoomMetadata, RoadmapMetadata]


class LeafProgress(NamedTuple):
    completed: int
    total: int

    @property
    def ratio(self) -> float:
        return self.completed / self.total if self.total else 0.0


# --- metadata ---

def parse_metadata(goal_type: str, raw: Optional[dict]) -> Optional[GoalMetadata]:
    """Typed view of a goal's stored metadata, chosen by the goal type."""
    if goal_type == "room":
        return RoomMetadata.model_validate(raw or {})
    elif goal_type == "roadmap":
        return RoadmapMetadata.model_validate(raw or {})
    elif goal_type in SCALAR_TYPES:
        return None
    raise DataIntegrityError(f"Unknown goal type {goal_type!r}")


def dump_metadata(metadata: Optional[GoalMetadata]) -> Optional[dict]:
    if metadata is None:
        return None
    return metadata.model_dump(by_alias=True, exclude_none=True)


# --- percentages ---

def compute_percentage(current_value: Optional[int], target_value: Optional[int]) -> float:
    """current/target as a percentage clamped to [0, 100]; 0 without a target."""
    if not target_value or target_value <= 0:
        return 0.0
    pct = (current_value or 0) / target_value * 100
    return max(0.0, min(pct, 100.0))


def compute_checklist_progress(items: List[RoomItem]) -> LeafProgress:
    return LeafProgress(sum(1 for i in items if i.completed), len(items))


def compute_roadmap_progress(steps: List[RoadmapStep]) -> LeafProgress:
    """Per-step accounting: a step counts once regardless of its substeps."""
    return LeafProgress(sum(1 for s in steps if s.completed), len(steps))


def compute_leaf_progress(steps: List[RoadmapStep]) -> LeafProgress:
    """Per-leaf accounting: every step and every substep is one unit."""
    completed = total = 0
    for step in steps:
        total += 1 + len(step.substeps)
        completed += int(step.completed) + sum(1 for s in step.substeps if s.completed)
    return LeafProgress(completed, total)


def sync_leaf_counts(goal, metadata: GoalMetadata) -> LeafProgress:
    """Write the completed/total leaf counts back onto the goal row.

    The only place aggregation has a side effect: room and roadmap goals keep
    current_value/target_value equal to their leaf counts.
    """
    if isinstance(metadata, RoomMetadata):
        progress = compute_checklist_progress(metadata.items)
    elif isinstance(metadata, RoadmapMetadata):
        progress = compute_roadmap_progress(metadata.steps)
    else:
        raise DataIntegrityError(f"Goal {goal.id} has no leaf metadata")
    goal.goal_metadata = dump_metadata(metadata)
    goal.current_value = progress.completed
    goal.target_value = progress.total
    return progress


# --- leaf mutations ---

def _check_index(collection: list, index: int, name: str) -> None:
    if index < 0 or index >= len(collection):
        raise OutOfRangeError(name, index)


def toggle_room_item(items: List[RoomItem], item_index: int) -> List[RoomItem]:
    _check_index(items, item_index, "items")
    updated = list(items)
    item = updated[item_index]
    updated[item_index] = item.model_copy(update={"completed": not item.completed})
    return updated


def toggle_roadmap_step(
    steps: List[RoadmapStep],
    step_index: int,
    substep_index: Optional[int] = None,
) -> List[RoadmapStep]:
    """Flip a step, or one of its substeps.

    Completing the last open substep completes the step. Reopening a substep
    never reopens the step.
    """
    _check_index(steps, step_index, "steps")
    step = steps[step_index]

    if substep_index is None:
        new_step = step.model_copy(update={"completed": not step.completed})
    else:
        _check_index(step.substeps, substep_index, "substeps")
        substeps = list(step.substeps)
        sub = substeps[substep_index]
        substeps[substep_index] = sub.model_copy(update={"completed": not sub.completed})
        completed = step.completed or all(s.completed for s in substeps)
        new_step = step.model_copy(update={"substeps": substeps, "completed": completed})

    updated = list(steps)
    updated[step_index] = new_step
    return updated


def add_leaf(collection: List[Leaf], title: str, leaf_cls) -> List[Leaf]:
    """Append an open leaf; a blank title leaves the collection unchanged."""
    title = (title or "").strip()
    if not title:
        return list(collection)
    return list(collection) + [leaf_cls(title=title, completed=False)]


def remove_leaf(collection: List[Leaf], index: int, name: str = "items") -> List[Leaf]:
    _check_index(collection, index, name)
    return list(collection[:index]) + list(collection[index + 1:])


# --- date-derived goals ---

def compute_auto_calculated_value(
    reference_start: date,
    now: Union[date, datetime],
) -> int:
    """Whole days elapsed since reference_start. Display only, never stored."""
    return whole_days_between(reference_start, now)


def display_value(goal, default_start: date, now: datetime) -> int:
    if goal.is_auto_calculated:
        return compute_auto_calculated_value(goal.auto_start_date or default_start, now)
    return goal.current_value or 0


def is_goal_complete(goal) -> bool:
    if goal.type == "boolean":
        return (goal.current_value or 0) >= 1
    return bool(goal.target_value) and (goal.current_value or 0) >= goal.target_value

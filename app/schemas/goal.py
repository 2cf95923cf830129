from pydantic import Field
from datetime import date, datetime
from typing import Any, Dict, List, Literal, Optional

from app.schemas.base import CamelModel

Category = Literal["lifestyle", "savings", "business", "casa", "milestones", "fun"]
GoalType = Literal["counter", "progress", "boolean", "room", "roadmap"]
ResetPeriod = Literal["none", "weekly", "monthly"]


# --- metadata payloads, one per leaf-based goal type ---

class RoomItem(CamelModel):
    title: str = Field(..., min_length=1)
    completed: bool = False
    notes: Optional[str] = None

class RoadmapSubstep(CamelModel):
    title: str = Field(..., min_length=1)
    completed: bool = False
    notes: Optional[str] = None

class RoadmapStep(CamelModel):
    title: str = Field(..., min_length=1)
    completed: bool = False
    notes: Optional[str] = None
    blocked: bool = False
    substeps: List[RoadmapSubstep] = Field(default_factory=list)

class RoomMetadata(CamelModel):
    items: List[RoomItem] = Field(default_factory=list)

class RoadmapMetadata(CamelModel):
    steps: List[RoadmapStep] = Field(default_factory=list)


# --- requests ---

class GoalCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    category: Category
    type: GoalType
    current_value: int = 0
    target_value: Optional[int] = Field(None, ge=0)
    unit: Optional[str] = Field(None, max_length=30)
    icon: Optional[str] = None
    color: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    reset_period: ResetPeriod = "none"
    period_start_date: Optional[datetime] = None
    target_date: Optional[datetime] = None
    is_auto_calculated: bool = False
    auto_start_date: Optional[date] = None

class GoalUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    category: Optional[Category] = None
    current_value: Optional[int] = None
    target_value: Optional[int] = Field(None, ge=0)
    unit: Optional[str] = Field(None, max_length=30)
    icon: Optional[str] = None
    color: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    reset_period: Optional[ResetPeriod] = None
    period_start_date: Optional[datetime] = None
    target_date: Optional[datetime] = None
    is_auto_calculated: Optional[bool] = None
    auto_start_date: Optional[date] = None

class GoalReorder(CamelModel):
    goal_ids: List[int] = Field(..., min_length=1)

class LeafCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)


# --- responses ---

class GoalResponse(CamelModel):
    id: int
    title: str
    category: str
    type: str
    current_value: int
    target_value: Optional[int]
    unit: Optional[str]
    icon: Optional[str]
    color: Optional[str]
    metadata: Optional[Dict[str, Any]]
    reset_period: str
    period_start_date: Optional[datetime]
    target_date: Optional[datetime]
    is_auto_calculated: bool
    auto_start_date: Optional[date]
    sort_order: int
    created_at: Optional[datetime]

    # derived, never stored
    percentage: float
    display_value: int
    step_completion_ratio: Optional[float] = None
    leaf_completion_ratio: Optional[float] = None

class ChartPoint(CamelModel):
    date: date
    value: int
    change: int

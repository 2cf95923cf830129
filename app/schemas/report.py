from datetime import datetime
from typing import Literal, Optional

from app.schemas.base import CamelModel

class PeriodHistoryResponse(CamelModel):
    id: int
    goal_id: int
    period_type: str  # "weekly" or "monthly"
    period_start: datetime
    period_end: datetime
    final_value: int
    target_value: Optional[int]
    percentage: Optional[int]  # None when the snapshot has no target
    trend: int  # final_value minus the previous (older) snapshot's final_value

class StatsResponse(CamelModel):
    total_xp: int
    current_streak: int
    goals_completed: int
    total_logs: int
    total_items: int
    completed_items: int

class SavingsForecastItem(CamelModel):
    goal_id: int
    title: str
    saved: int
    target: int
    remaining: int
    percentage: int
    monthly_rate: float
    months_to_target: Optional[int]  # None when no positive savings rate exists

class MonthlyReportResponse(CamelModel):
    period_start: datetime
    period_end: datetime
    saved_last_30_days: int
    milestones_completed: int
    milestones_total: int
    casa_completed: int
    casa_total: int
    business_completed: int
    business_total: int

class Reminder(CamelModel):
    goal_id: Optional[int]
    title: str
    message: str
    category: str
    type: Literal["warning", "info", "success"]

class CategoryProgress(CamelModel):
    category: str
    completed: int
    total: int
    percentage: int

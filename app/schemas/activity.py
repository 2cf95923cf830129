from datetime import datetime
from typing import Optional

from app.schemas.base import CamelModel

class ActivityResponse(CamelModel):
    id: int
    user_id: int
    goal_id: Optional[int]
    action: str  # "log", "complete", "add", "step_complete"
    description: str
    xp_earned: int
    created_at: datetime

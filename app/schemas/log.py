from pydantic import Field
from datetime import datetime
from typing import Optional

from app.schemas.base import CamelModel

class LogCreate(CamelModel):
    goal_id: int
    value: int  # signed delta
    note: Optional[str] = Field(None, max_length=500)
    user_id: Optional[int] = None  # acting user; the first profile when omitted

class LogResponse(CamelModel):
    id: int
    goal_id: int
    user_id: Optional[int]
    value: int
    note: Optional[str]
    created_at: datetime

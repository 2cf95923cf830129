from pydantic import Field, field_validator
from datetime import datetime
from typing import List, Optional

from app.schemas.base import CamelModel

class UserUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    avatar: Optional[str] = Field(None, max_length=2_000_000)  # data-URIs can be large

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v

    @field_validator("avatar")
    @classmethod
    def empty_avatar_is_none(cls, v: Optional[str]) -> Optional[str]:
        # "" means "use the initial letter"
        return v or None

class UserResponse(CamelModel):
    id: int
    name: str
    avatar: Optional[str]
    xp: int
    level: int
    level_progress: float
    current_streak: int
    longest_streak: int
    badges: List[str]
    created_at: Optional[datetime]

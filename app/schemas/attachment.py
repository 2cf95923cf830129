from pydantic import Field, field_validator
from datetime import datetime
from typing import Optional

from app.schemas.base import CamelModel

class NoteCreate(CamelModel):
    content: str = Field(..., min_length=1, max_length=2000)
    user_id: Optional[int] = None

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("content must not be blank")
        return v

class NoteResponse(CamelModel):
    id: int
    goal_id: int
    user_id: int
    content: str
    created_at: datetime


class PhotoCreate(CamelModel):
    image_url: str = Field(..., min_length=1)
    caption: Optional[str] = Field(None, max_length=200)
    user_id: Optional[int] = None

    @field_validator("image_url")
    @classmethod
    def image_url_scheme(cls, v: str) -> str:
        if not v.startswith(("http://", "https://", "data:image/")):
            raise ValueError("imageUrl must be an http(s) URL or an image data-URI")
        return v

class PhotoResponse(CamelModel):
    id: int
    goal_id: int
    user_id: int
    image_url: str
    caption: Optional[str]
    created_at: datetime

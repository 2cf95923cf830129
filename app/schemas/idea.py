from pydantic import Field
from datetime import datetime
from typing import Optional

from app.schemas.base import CamelModel

class IdeaCategoryCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    icon: Optional[str] = "folder"
    color: Optional[str] = None

class IdeaCategoryUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    icon: Optional[str] = None
    color: Optional[str] = None

class IdeaCategoryResponse(CamelModel):
    id: int
    name: str
    icon: Optional[str]
    color: Optional[str]
    created_at: Optional[datetime]


class IdeaCreate(CamelModel):
    category_id: int
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None

class IdeaUpdate(CamelModel):
    category_id: Optional[int] = None
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    completed: Optional[bool] = None

class IdeaResponse(CamelModel):
    id: int
    category_id: int
    title: str
    description: Optional[str]
    completed: bool
    created_at: Optional[datetime]

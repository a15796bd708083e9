from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class CommentCreate(BaseModel):
    content: str


class CommentUpdate(BaseModel):
    content: str


class CommentPin(BaseModel):
    is_pinned: bool


class CommentResponse(BaseModel):
    id: str
    booking_id: str
    user_id: str
    content: str
    is_pinned: bool = False
    created_at: Optional[datetime] = None
    author_name: Optional[str] = None

    class Config:
        from_attributes = True

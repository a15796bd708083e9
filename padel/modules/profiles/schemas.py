from pydantic import BaseModel
from typing import Optional, List, Literal
from datetime import datetime

SkillLevel = Literal["beginner", "intermediate", "advanced", "pro"]


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None
    skill_level: Optional[SkillLevel] = None
    avatar_url: Optional[str] = None
    email_notifications: Optional[bool] = None


class ProfileResponse(BaseModel):
    id: str
    full_name: str
    email: str
    phone: Optional[str] = None
    skill_level: Optional[SkillLevel] = None
    avatar_url: Optional[str] = None
    email_notifications: bool = True
    is_admin: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AvailabilitySlot(BaseModel):
    day_of_week: int
    start_time: str
    end_time: str


class MemberResponse(BaseModel):
    id: str
    full_name: str
    email: str
    phone: Optional[str] = None
    skill_level: Optional[SkillLevel] = None
    avatar_url: Optional[str] = None
    is_admin: bool = False
    created_at: Optional[datetime] = None
    whatsapp_url: Optional[str] = None
    availability: List[AvailabilitySlot] = []


class ProfileStats(BaseModel):
    games_played: int
    games_upcoming: int
    games_paid: int

from pydantic import BaseModel, EmailStr
from typing import Optional, List
from datetime import datetime


class AdminProfile(BaseModel):
    id: str
    full_name: str
    email: str
    phone: Optional[str] = None
    skill_level: Optional[str] = None
    is_admin: bool = False
    created_at: Optional[datetime] = None


class BlacklistEntry(BaseModel):
    id: str
    email: str
    reason: Optional[str] = None
    blacklisted_by: Optional[str] = None
    created_at: Optional[datetime] = None


class AdminData(BaseModel):
    profiles: List[AdminProfile]
    blacklist: List[BlacklistEntry]


class BlacklistUserRequest(BaseModel):
    reason: Optional[str] = None


class BlacklistEmailRequest(BaseModel):
    email: EmailStr
    reason: Optional[str] = None


class ToggleAdminRequest(BaseModel):
    is_admin: bool

from pydantic import BaseModel, Field, model_validator
from typing import Optional, List, Dict
from datetime import datetime, date as date_type, time

from padel.modules.bookings.schemas import BookingSummary


class AvailabilityCreate(BaseModel):
    day_of_week: int = Field(ge=0, le=6)  # 0 = Sunday
    start_time: time
    end_time: time

    @model_validator(mode="after")
    def end_after_start(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class AvailabilityResponse(BaseModel):
    id: str
    user_id: str
    day_of_week: int
    start_time: str
    end_time: str
    created_at: Optional[datetime] = None


class UnavailableDateCreate(BaseModel):
    date: date_type
    reason: Optional[str] = None


class UnavailableDateResponse(BaseModel):
    id: str
    user_id: str
    date: date_type
    reason: Optional[str] = None
    created_at: Optional[datetime] = None


class AvailablePlayer(BaseModel):
    user_id: str
    full_name: Optional[str] = None
    skill_level: Optional[str] = None
    start_time: str
    end_time: str


class CalendarResponse(BaseModel):
    start_date: date_type
    end_date: date_type
    bookings: List[BookingSummary]
    available: Dict[str, List[AvailablePlayer]]

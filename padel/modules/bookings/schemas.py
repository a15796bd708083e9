from pydantic import BaseModel, Field, model_validator
from typing import Optional, List, Literal
from datetime import datetime, date as date_type, time

BookingStatus = Literal["open", "full", "confirmed", "completed", "cancelled"]


class BookingForm(BaseModel):
    venue_name: str = Field(min_length=1)
    venue_address: Optional[str] = None
    court_number: Optional[str] = None
    is_outdoor: bool = False
    date: date_type
    start_time: time
    end_time: time
    total_cost: float = Field(default=0, ge=0)
    max_players: int = Field(default=4, ge=1, le=20)
    notes: Optional[str] = None
    signup_deadline: Optional[datetime] = None

    @model_validator(mode="after")
    def end_after_start(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self

    def to_row(self) -> dict:
        """Insert/update payload; blank optional text is stored as null"""
        row = self.model_dump(mode="json")
        for key in ("venue_address", "court_number", "notes", "signup_deadline"):
            if isinstance(row.get(key), str):
                row[key] = row[key].strip() or None
        row["venue_name"] = row["venue_name"].strip()
        return row


class BookingStatusUpdate(BaseModel):
    status: Literal["confirmed", "completed"]


class BookingResponse(BaseModel):
    id: str
    organiser_id: str
    venue_name: str
    venue_address: Optional[str] = None
    venue_lat: Optional[float] = None
    venue_lng: Optional[float] = None
    court_number: Optional[str] = None
    is_outdoor: bool = False
    date: date_type
    start_time: str
    end_time: str
    total_cost: float = 0
    max_players: int = 4
    notes: Optional[str] = None
    status: BookingStatus = "open"
    signup_deadline: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BookingSummary(BookingResponse):
    confirmed_count: int = 0
    waitlist_count: int = 0
    organiser_name: Optional[str] = None
    my_status: Optional[str] = None
    my_payment_status: Optional[str] = None


class SignupPlayer(BaseModel):
    id: str
    user_id: str
    full_name: Optional[str] = None
    skill_level: Optional[str] = None
    status: str
    position: Optional[int] = None
    payment_status: str = "unpaid"
    signed_up_at: Optional[datetime] = None


class OrganiserInfo(BaseModel):
    id: str
    full_name: Optional[str] = None
    skill_level: Optional[str] = None


class BookingDetail(BaseModel):
    booking: BookingResponse
    organiser: Optional[OrganiserInfo] = None
    signups: List[SignupPlayer]
    confirmed_count: int
    cost_per_player: float


class MyGamesResponse(BaseModel):
    upcoming: List[BookingSummary]
    past: List[BookingSummary]
    games_played: int
    games_paid: int

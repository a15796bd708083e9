from pydantic import BaseModel
from typing import Optional, Literal

SignupStatus = Literal["confirmed", "waitlist", "interested"]


class SignupResult(BaseModel):
    status: SignupStatus
    position: Optional[int] = None
    booking_status: Optional[str] = None


class LeaveResult(BaseModel):
    success: bool = True
    promoted_user_id: Optional[str] = None
    booking_status: Optional[str] = None

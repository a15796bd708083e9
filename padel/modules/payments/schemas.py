from pydantic import BaseModel
from typing import Optional, List, Literal

PaymentStatus = Literal["unpaid", "paid"]


class PaymentToggleResponse(BaseModel):
    signup_id: str
    status: PaymentStatus


class Debt(BaseModel):
    from_id: str
    to_id: str
    amount: float
    booking_id: str
    venue_name: Optional[str] = None
    date: Optional[str] = None
    from_name: Optional[str] = None
    to_name: Optional[str] = None


class Settlement(BaseModel):
    from_id: str
    to_id: str
    amount: float
    from_name: Optional[str] = None
    to_name: Optional[str] = None


class BalancesResponse(BaseModel):
    debts: List[Debt]
    settlements: List[Settlement]
    i_owe: float = 0.0
    owed_to_me: float = 0.0

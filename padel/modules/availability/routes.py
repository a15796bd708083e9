from fastapi import APIRouter, Depends
from datetime import date, datetime, timezone
from padel.database.supabase_client import get_service_supabase
from padel.modules.availability.schemas import (
    AvailabilityCreate, AvailabilityResponse,
    UnavailableDateCreate, UnavailableDateResponse, CalendarResponse
)
from padel.modules.availability.service import AvailabilityService
from padel.modules.bookings.service import BookingService
from padel.core.dependencies import get_current_user_id, get_user_supabase
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(tags=["availability"])


def get_availability_service(supabase: Client = Depends(get_user_supabase)) -> AvailabilityService:
    return AvailabilityService(supabase)


@router.get("/availability", response_model=List[AvailabilityResponse])
async def list_my_availability(
    current_user: Dict = Depends(get_current_user_id),
    service: AvailabilityService = Depends(get_availability_service)
):
    return service.list_availability(current_user["id"])


@router.post("/availability", response_model=AvailabilityResponse, status_code=201)
async def add_availability(
    slot: AvailabilityCreate,
    current_user: Dict = Depends(get_current_user_id),
    service: AvailabilityService = Depends(get_availability_service)
):
    """Add a weekly slot (0 = Sunday)"""
    return service.add_availability(current_user["id"], slot)


@router.delete("/availability/{availability_id}", status_code=204)
async def remove_availability(
    availability_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: AvailabilityService = Depends(get_availability_service)
):
    service.remove_availability(availability_id, current_user["id"])
    return None


@router.get("/unavailable-dates", response_model=List[UnavailableDateResponse])
async def list_my_unavailable_dates(
    from_date: Optional[date] = None,
    current_user: Dict = Depends(get_current_user_id),
    service: AvailabilityService = Depends(get_availability_service)
):
    return service.list_unavailable_dates(current_user["id"], from_date.isoformat() if from_date else None)


@router.post("/unavailable-dates", response_model=UnavailableDateResponse, status_code=201)
async def add_unavailable_date(
    entry: UnavailableDateCreate,
    current_user: Dict = Depends(get_current_user_id),
    service: AvailabilityService = Depends(get_availability_service)
):
    return service.add_unavailable_date(current_user["id"], entry)


@router.delete("/unavailable-dates/{entry_id}", status_code=204)
async def remove_unavailable_date(
    entry_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: AvailabilityService = Depends(get_availability_service)
):
    service.remove_unavailable_date(entry_id, current_user["id"])
    return None


@router.get("/calendar", response_model=CalendarResponse)
async def get_calendar(
    start: Optional[date] = None,
    days: int = 30,
    current_user: Dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_user_supabase),
    service_supabase: Client = Depends(get_service_supabase),
    service: AvailabilityService = Depends(get_availability_service)
):
    """Games and player availability for the next `days` days"""
    start = start or datetime.now(timezone.utc).date()
    return service.get_calendar(start, days, BookingService(supabase, service_supabase))

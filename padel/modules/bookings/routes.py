from fastapi import APIRouter, Depends
from padel.database.supabase_client import get_service_supabase
from padel.modules.bookings.schemas import (
    BookingForm, BookingResponse, BookingSummary, BookingDetail,
    BookingStatusUpdate, MyGamesResponse
)
from padel.modules.bookings.service import BookingService
from padel.modules.profiles.service import ProfileService
from padel.modules.geocoding.service import geocode_address
from padel.core.dependencies import get_current_user_id, get_user_supabase, check_booking_organiser
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/bookings", tags=["bookings"])


def get_booking_service(
    supabase: Client = Depends(get_user_supabase),
    service_supabase: Client = Depends(get_service_supabase)
) -> BookingService:
    return BookingService(supabase, service_supabase)


@router.post("", response_model=BookingResponse, status_code=201)
async def create_booking(
    form: BookingForm,
    current_user: Dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_user_supabase),
    service: BookingService = Depends(get_booking_service)
):
    """Create a game; the organiser is signed up automatically"""
    ProfileService(supabase).ensure_profile(current_user)
    coordinates = await geocode_address(form.venue_address) if form.venue_address else None
    return service.create_booking(form, current_user["id"], coordinates)


@router.get("", response_model=List[BookingSummary])
async def list_upcoming(
    current_user: Dict = Depends(get_current_user_id),
    service: BookingService = Depends(get_booking_service)
):
    """Upcoming open, full and confirmed games"""
    return service.list_upcoming(current_user["id"])


@router.get("/mine", response_model=MyGamesResponse)
async def list_my_games(
    current_user: Dict = Depends(get_current_user_id),
    service: BookingService = Depends(get_booking_service)
):
    """Games the caller is playing in or waiting for"""
    return service.list_my_games(current_user["id"])


@router.get("/{booking_id}", response_model=BookingDetail)
async def get_booking(
    booking_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: BookingService = Depends(get_booking_service)
):
    return service.get_booking_detail(booking_id)


@router.put("/{booking_id}", response_model=BookingResponse)
async def update_booking(
    booking_id: str,
    form: BookingForm,
    current_user: Dict = Depends(get_current_user_id),
    service_supabase: Client = Depends(get_service_supabase),
    service: BookingService = Depends(get_booking_service)
):
    """Edit a game (organiser or admin)"""
    booking = check_booking_organiser(
        booking_id, current_user, service_supabase,
        detail="Only the organiser can edit this booking"
    )
    coordinates = None
    if form.venue_address:
        if form.venue_address.strip() != (booking.get("venue_address") or "") or booking.get("venue_lat") is None:
            coordinates = await geocode_address(form.venue_address)
        else:
            coordinates = (booking["venue_lat"], booking["venue_lng"])
    return service.update_booking(booking, form, current_user["id"], coordinates)


@router.put("/{booking_id}/status", response_model=BookingResponse)
async def set_booking_status(
    booking_id: str,
    body: BookingStatusUpdate,
    current_user: Dict = Depends(get_current_user_id),
    service_supabase: Client = Depends(get_service_supabase),
    service: BookingService = Depends(get_booking_service)
):
    """Mark a game confirmed or completed (organiser or admin)"""
    booking = check_booking_organiser(booking_id, current_user, service_supabase)
    return service.set_status(booking, body.status)


@router.delete("/{booking_id}", response_model=BookingResponse)
async def cancel_booking(
    booking_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service_supabase: Client = Depends(get_service_supabase),
    service: BookingService = Depends(get_booking_service)
):
    """Cancel a game and notify its players (organiser or admin)"""
    booking = check_booking_organiser(
        booking_id, current_user, service_supabase,
        detail="Only the organiser can cancel this booking"
    )
    return service.cancel_booking(booking, current_user["id"])

from fastapi import APIRouter, Depends
from padel.database.supabase_client import get_service_supabase
from padel.modules.signups.schemas import SignupResult, LeaveResult
from padel.modules.signups.service import SignupService
from padel.modules.profiles.service import ProfileService
from padel.core.dependencies import get_current_user_id, get_user_supabase
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/bookings", tags=["signups"])


def get_signup_service(
    supabase: Client = Depends(get_user_supabase),
    service_supabase: Client = Depends(get_service_supabase)
) -> SignupService:
    return SignupService(supabase, service_supabase)


@router.post("/{booking_id}/signup", response_model=SignupResult, status_code=201)
async def sign_up(
    booking_id: str,
    current_user: Dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_user_supabase),
    service: SignupService = Depends(get_signup_service)
):
    """Join a booking: confirmed while there is room, waitlisted after that"""
    ProfileService(supabase).ensure_profile(current_user)
    return service.sign_up(booking_id, current_user["id"])


@router.post("/{booking_id}/interested", response_model=SignupResult, status_code=201)
async def mark_interested(
    booking_id: str,
    current_user: Dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_user_supabase),
    service: SignupService = Depends(get_signup_service)
):
    ProfileService(supabase).ensure_profile(current_user)
    return service.mark_interested(booking_id, current_user["id"])


@router.delete("/{booking_id}/signup", response_model=LeaveResult)
async def leave_booking(
    booking_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: SignupService = Depends(get_signup_service)
):
    """Leave a booking; the next waitlisted player is promoted if a confirmed spot frees up"""
    user_name = (current_user.get("user_metadata") or {}).get("full_name")
    return service.leave_booking(booking_id, current_user["id"], user_name)

"""
Core dependencies for route protection and per-request Supabase clients
"""

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from padel.database.supabase_client import SupabaseClient, get_supabase, get_service_supabase
from padel.modules.auth.service import AuthService
from supabase import Client
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_access_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


def get_current_user_id(
    token: str = Depends(get_access_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    return auth_service.get_current_user(token)


def get_user_supabase(
    token: str = Depends(get_access_token),
    user_data: dict = Depends(get_current_user_id)
) -> Client:
    """Client acting as the caller so row-level security applies. Token is validated first."""
    return SupabaseClient.create_user_client(token)


def is_admin_user(user_id: str, service_supabase: Client) -> bool:
    """True when the player's profile carries is_admin"""
    try:
        result = service_supabase.table("profiles")\
            .select("is_admin")\
            .eq("id", user_id)\
            .maybe_single()\
            .execute()
    except Exception as e:
        logger.error(f"Error checking admin flag for {user_id}: {e}")
        return False
    return bool(result and result.data and result.data.get("is_admin") is True)


def require_admin(
    user_data: dict = Depends(get_current_user_id),
    service_supabase: Client = Depends(get_service_supabase)
) -> dict:
    """Dependency that only lets admins through"""
    if not is_admin_user(user_data["id"], service_supabase):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not an admin"
        )
    return user_data


def check_booking_organiser(
    booking_id: str,
    user_data: dict,
    supabase: Client,
    allow_admin: bool = True,
    detail: str = "Only the organiser can do this"
) -> Dict[str, Any]:
    """Return the booking row if the user organises it (or is an admin), else raise."""
    result = supabase.table("bookings")\
        .select("*")\
        .eq("id", booking_id)\
        .maybe_single()\
        .execute()
    if not result or not result.data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Booking not found"
        )
    booking = result.data
    if booking.get("organiser_id") == user_data["id"]:
        return booking
    if allow_admin and is_admin_user(user_data["id"], supabase):
        return booking
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=detail
    )

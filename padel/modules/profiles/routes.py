from fastapi import APIRouter, Depends
from padel.database.supabase_client import get_service_supabase
from padel.modules.profiles.schemas import ProfileUpdate, ProfileResponse, MemberResponse, ProfileStats
from padel.modules.profiles.service import ProfileService
from padel.modules.admin.service import delete_account_rows
from padel.core.dependencies import get_current_user_id, get_user_supabase
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/profiles", tags=["profiles"])


def get_profile_service(supabase: Client = Depends(get_user_supabase)) -> ProfileService:
    return ProfileService(supabase)


@router.get("", response_model=List[MemberResponse])
async def list_members(
    skill_level: Optional[str] = None,
    search: Optional[str] = None,
    current_user: Dict = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service)
):
    """Members directory with availability and WhatsApp links"""
    return service.list_members(skill_level=skill_level, search=search)


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    current_user: Dict = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service)
):
    service.ensure_profile(current_user)
    return service.get_profile(current_user["id"])


@router.put("/me", response_model=ProfileResponse)
async def update_my_profile(
    profile_data: ProfileUpdate,
    current_user: Dict = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service)
):
    service.ensure_profile(current_user)
    return service.update_profile(current_user["id"], profile_data)


@router.get("/me/stats", response_model=ProfileStats)
async def get_my_stats(
    current_user: Dict = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service)
):
    return service.get_stats(current_user["id"])


@router.delete("/me", status_code=204)
async def delete_my_account(
    current_user: Dict = Depends(get_current_user_id),
    service_supabase: Client = Depends(get_service_supabase)
):
    """Delete own account: notifications, profile (cascades) and the auth user"""
    delete_account_rows(service_supabase, current_user["id"])
    return None


@router.get("/{user_id}", response_model=ProfileResponse)
async def get_profile(
    user_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service)
):
    return service.get_profile(user_id)

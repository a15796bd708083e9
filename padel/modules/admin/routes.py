from fastapi import APIRouter, Depends
from padel.database.supabase_client import get_service_supabase
from padel.modules.admin.schemas import (
    AdminData, AdminProfile, BlacklistEntry,
    BlacklistUserRequest, BlacklistEmailRequest, ToggleAdminRequest
)
from padel.modules.admin.service import AdminService
from padel.core.dependencies import require_admin, get_current_user_id, is_admin_user
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/admin", tags=["admin"])


def get_admin_service(supabase: Client = Depends(get_service_supabase)) -> AdminService:
    return AdminService(supabase)


@router.get("/check")
async def check_is_admin(
    current_user: Dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_service_supabase)
):
    """Whether the caller is an admin (drives the admin link in the UI)"""
    return {"is_admin": is_admin_user(current_user["id"], supabase)}


@router.get("", response_model=AdminData)
async def get_admin_data(
    admin_user: Dict = Depends(require_admin),
    service: AdminService = Depends(get_admin_service)
):
    """All members and the blacklist"""
    return service.get_admin_data()


@router.delete("/users/{user_id}", status_code=204)
async def delete_user(
    user_id: str,
    admin_user: Dict = Depends(require_admin),
    service: AdminService = Depends(get_admin_service)
):
    service.delete_user(user_id, admin_user["id"])
    return None


@router.post("/users/{user_id}/blacklist", response_model=BlacklistEntry, status_code=201)
async def blacklist_user(
    user_id: str,
    body: Optional[BlacklistUserRequest] = None,
    admin_user: Dict = Depends(require_admin),
    service: AdminService = Depends(get_admin_service)
):
    """Delete the member and block their email"""
    reason = body.reason if body else None
    return service.blacklist_user(user_id, admin_user["id"], reason)


@router.put("/users/{user_id}/admin", response_model=AdminProfile)
async def toggle_admin(
    user_id: str,
    body: ToggleAdminRequest,
    admin_user: Dict = Depends(require_admin),
    service: AdminService = Depends(get_admin_service)
):
    return service.toggle_admin(user_id, admin_user["id"], body.is_admin)


@router.post("/blacklist", response_model=BlacklistEntry, status_code=201)
async def add_to_blacklist(
    body: BlacklistEmailRequest,
    admin_user: Dict = Depends(require_admin),
    service: AdminService = Depends(get_admin_service)
):
    return service.add_to_blacklist(body.email, admin_user["id"], body.reason)


@router.delete("/blacklist/{blacklist_id}", status_code=204)
async def remove_from_blacklist(
    blacklist_id: str,
    admin_user: Dict = Depends(require_admin),
    service: AdminService = Depends(get_admin_service)
):
    service.remove_from_blacklist(blacklist_id)
    return None

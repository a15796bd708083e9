from fastapi import APIRouter, Depends
from padel.modules.notifications.schemas import NotificationResponse, UnreadCountResponse
from padel.modules.notifications.service import NotificationService
from padel.core.dependencies import get_current_user_id, get_user_supabase
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/notifications", tags=["notifications"])


def get_notification_service(supabase: Client = Depends(get_user_supabase)) -> NotificationService:
    return NotificationService(supabase)


@router.get("", response_model=List[NotificationResponse])
async def list_notifications(
    limit: int = 50,
    unread_only: bool = False,
    current_user: Dict = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service)
):
    """Newest first"""
    return service.list_notifications(current_user["id"], limit=limit, unread_only=unread_only)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    current_user: Dict = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service)
):
    """Polled by the notification bell"""
    return UnreadCountResponse(unread_count=service.get_unread_count(current_user["id"]))


@router.put("/read-all")
async def mark_all_as_read(
    current_user: Dict = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service)
):
    updated = service.mark_all_as_read(current_user["id"])
    return {"success": True, "updated": updated}


@router.put("/{notification_id}/read")
async def mark_as_read(
    notification_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service)
):
    service.mark_as_read(notification_id, current_user["id"])
    return {"success": True}

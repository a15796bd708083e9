import logging
from supabase import Client
from padel.modules.notifications.schemas import NotificationResponse
from typing import List, Optional, Iterable
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class NotificationType:
    BOOKING_CANCELLED = "booking_cancelled"
    BOOKING_UPDATED = "booking_updated"
    WAITLIST_PROMOTED = "waitlist_promoted"
    PLAYER_LEFT = "player_left"
    NEW_COMMENT = "new_comment"
    REMINDER_24H = "reminder_24h"
    REMINDER_3H = "reminder_3h"


def create_notifications(
    service_supabase: Client,
    user_ids: Iterable[str],
    booking_id: Optional[str],
    type: str,
    title: str,
    message: str
) -> int:
    """
    Insert one notification row per user with the service client.

    Notifications are a side effect of another action, so a failed insert is
    logged and reported as 0 rows rather than failing that action.
    """
    unique_ids = list(dict.fromkeys(user_ids))
    if not unique_ids:
        return 0
    rows = [
        {
            "user_id": user_id,
            "booking_id": booking_id,
            "type": type,
            "title": title,
            "message": message
        }
        for user_id in unique_ids
    ]
    try:
        service_supabase.table("notifications").insert(rows).execute()
    except Exception as e:
        logger.error(f"Failed to create {type} notifications for booking {booking_id}: {e}")
        return 0
    logger.debug(f"Created {len(rows)} {type} notification(s) for booking {booking_id}")
    return len(rows)


class NotificationService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_unread_count(self, user_id: str) -> int:
        result = self.supabase.table("notifications")\
            .select("id", count="exact")\
            .eq("user_id", user_id)\
            .eq("is_read", False)\
            .execute()
        return result.count or 0

    def list_notifications(self, user_id: str, limit: int = 50, unread_only: bool = False) -> List[NotificationResponse]:
        query = self.supabase.table("notifications")\
            .select("*")\
            .eq("user_id", user_id)
        if unread_only:
            query = query.eq("is_read", False)
        result = query.order("created_at", desc=True)\
            .limit(limit)\
            .execute()
        return [NotificationResponse(**n) for n in (result.data or [])]

    def mark_as_read(self, notification_id: str, user_id: str) -> bool:
        result = self.supabase.table("notifications")\
            .update({"is_read": True})\
            .eq("id", notification_id)\
            .eq("user_id", user_id)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Notification not found")
        return True

    def mark_all_as_read(self, user_id: str) -> int:
        result = self.supabase.table("notifications")\
            .update({"is_read": True})\
            .eq("user_id", user_id)\
            .eq("is_read", False)\
            .execute()
        return len(result.data or [])

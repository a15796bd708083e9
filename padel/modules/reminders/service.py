import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo
from supabase import Client
from padel.config import settings
from padel.database.supabase_client import get_service_supabase
from padel.modules.notifications.service import NotificationType
from padel.modules.signups.capacity import ACTIVE_BOOKING_STATUSES
from typing import List, Dict, Any, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReminderWindow:
    type: str
    hours_before_min: float
    hours_before_max: float
    title: str

    def message(self, venue_name: str, time_str: str) -> str:
        if self.type == NotificationType.REMINDER_24H:
            return f"{venue_name} tomorrow at {time_str}"
        return f"{venue_name} starts in 3 hours at {time_str}"


REMINDER_WINDOWS = (
    ReminderWindow(NotificationType.REMINDER_24H, 23, 24, "Game tomorrow"),
    ReminderWindow(NotificationType.REMINDER_3H, 2.5, 3, "Game starting soon"),
)


def format_time(start_time: str) -> str:
    """'18:00:00' -> '6:00 PM'"""
    hours, minutes = (int(part) for part in str(start_time).split(":")[:2])
    period = "PM" if hours >= 12 else "AM"
    return f"{hours % 12 or 12}:{minutes:02d} {period}"


def booking_start(booking: Dict[str, Any], tz: ZoneInfo) -> datetime:
    naive = datetime.fromisoformat(f"{booking['date']}T{str(booking['start_time'])[:8]}")
    return naive.replace(tzinfo=tz)


def in_window(start: datetime, now: datetime, window: ReminderWindow) -> bool:
    window_start = now + timedelta(hours=window.hours_before_min)
    window_end = now + timedelta(hours=window.hours_before_max)
    return window_start <= start <= window_end


class ReminderService:
    """Sends 24 hour and 3 hour reminders to confirmed players. Runs with the service role."""

    def __init__(self, service_supabase: Client, tz: Optional[str] = None):
        self.supabase = service_supabase
        self.tz = ZoneInfo(tz or settings.local_timezone)

    def _candidates(self, window: ReminderWindow, now: datetime) -> List[Dict[str, Any]]:
        local_now = now.astimezone(self.tz)
        start_date = (local_now + timedelta(hours=window.hours_before_min)).date().isoformat()
        end_date = (local_now + timedelta(hours=window.hours_before_max)).date().isoformat()
        bookings = self.supabase.table("bookings")\
            .select("id, venue_name, date, start_time")\
            .in_("status", list(ACTIVE_BOOKING_STATUSES))\
            .gte("date", start_date)\
            .lte("date", end_date)\
            .execute().data or []
        return [b for b in bookings if in_window(booking_start(b, self.tz), now, window)]

    def _already_notified(self, booking_ids: List[str], type: str) -> set:
        existing = self.supabase.table("notifications")\
            .select("booking_id")\
            .in_("booking_id", booking_ids)\
            .eq("type", type)\
            .execute().data or []
        return {n["booking_id"] for n in existing}

    def send_reminders(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now or datetime.now(timezone.utc)
        sent = 0
        reminders = []

        for window in REMINDER_WINDOWS:
            bookings = self._candidates(window, now)
            if not bookings:
                continue
            notified = self._already_notified([b["id"] for b in bookings], window.type)

            for booking in bookings:
                if booking["id"] in notified:
                    continue
                signups = self.supabase.table("signups")\
                    .select("user_id")\
                    .eq("booking_id", booking["id"])\
                    .eq("status", "confirmed")\
                    .execute().data or []
                user_ids = [s["user_id"] for s in signups]
                if not user_ids:
                    continue

                message = window.message(booking["venue_name"], format_time(booking["start_time"]))
                rows = [
                    {
                        "user_id": user_id,
                        "booking_id": booking["id"],
                        "type": window.type,
                        "title": window.title,
                        "message": message
                    }
                    for user_id in user_ids
                ]
                try:
                    self.supabase.table("notifications").insert(rows).execute()
                except Exception as e:
                    logger.error(f"Failed to send {window.type} for booking {booking['id']}: {e}")
                    continue
                sent += len(user_ids)
                reminders.append({"type": window.type, "booking_id": booking["id"], "player_count": len(user_ids)})

        if sent:
            logger.info(f"Sent {sent} reminder(s) across {len(reminders)} booking(s)")
        return {"ok": True, "sent": sent, "reminders": reminders}


async def reminder_loop(interval_sec: Optional[int] = None):
    """Background task that periodically sends due reminders"""
    interval = interval_sec or settings.reminder_loop_interval_sec
    while True:
        try:
            ReminderService(get_service_supabase()).send_reminders()
        except Exception as e:
            logger.error(f"Error in reminder loop: {str(e)}")
        await asyncio.sleep(interval)

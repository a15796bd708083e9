import logging
from datetime import date, timedelta
from supabase import Client
from postgrest.exceptions import APIError
from padel.modules.availability.schemas import (
    AvailabilityCreate, AvailabilityResponse,
    UnavailableDateCreate, UnavailableDateResponse,
    AvailablePlayer, CalendarResponse
)
from padel.modules.bookings.service import BookingService
from typing import List, Dict, Any, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

MAX_CALENDAR_DAYS = 90


def day_of_week(day: date) -> int:
    """Sunday is 0, Saturday is 6"""
    return (day.weekday() + 1) % 7


def available_on(
    day: date,
    slots: List[Dict[str, Any]],
    unavailable: List[Dict[str, Any]],
    profiles: Dict[str, Dict[str, Any]]
) -> List[AvailablePlayer]:
    """Players with a weekly slot on this weekday who have not blocked the date"""
    blocked = {u["user_id"] for u in unavailable if str(u["date"]) == day.isoformat()}
    players = []
    for slot in slots:
        if slot["day_of_week"] != day_of_week(day) or slot["user_id"] in blocked:
            continue
        profile = profiles.get(slot["user_id"], {})
        players.append(AvailablePlayer(
            user_id=slot["user_id"],
            full_name=profile.get("full_name"),
            skill_level=profile.get("skill_level"),
            start_time=str(slot["start_time"])[:5],
            end_time=str(slot["end_time"])[:5]
        ))
    players.sort(key=lambda p: (p.start_time, p.full_name or ""))
    return players


class AvailabilityService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_availability(self, user_id: str) -> List[AvailabilityResponse]:
        result = self.supabase.table("availability")\
            .select("*")\
            .eq("user_id", user_id)\
            .order("day_of_week")\
            .order("start_time")\
            .execute()
        return [AvailabilityResponse(**row) for row in (result.data or [])]

    def add_availability(self, user_id: str, slot: AvailabilityCreate) -> AvailabilityResponse:
        try:
            result = self.supabase.table("availability").insert({
                "user_id": user_id,
                "day_of_week": slot.day_of_week,
                "start_time": slot.start_time.isoformat(),
                "end_time": slot.end_time.isoformat()
            }).execute()
        except APIError as e:
            raise HTTPException(status_code=400, detail=e.message)
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to add availability")
        return AvailabilityResponse(**result.data[0])

    def remove_availability(self, availability_id: str, user_id: str) -> bool:
        result = self.supabase.table("availability")\
            .delete()\
            .eq("id", availability_id)\
            .eq("user_id", user_id)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Availability not found")
        return True

    def list_unavailable_dates(self, user_id: str, from_date: Optional[str] = None) -> List[UnavailableDateResponse]:
        query = self.supabase.table("unavailable_dates")\
            .select("*")\
            .eq("user_id", user_id)
        if from_date:
            query = query.gte("date", from_date)
        result = query.order("date").execute()
        return [UnavailableDateResponse(**row) for row in (result.data or [])]

    def add_unavailable_date(self, user_id: str, entry: UnavailableDateCreate) -> UnavailableDateResponse:
        reason = entry.reason.strip() if entry.reason else None
        try:
            result = self.supabase.table("unavailable_dates").insert({
                "user_id": user_id,
                "date": entry.date.isoformat(),
                "reason": reason or None
            }).execute()
        except APIError as e:
            if e.code == "23505":
                raise HTTPException(status_code=409, detail="Date already marked unavailable")
            raise HTTPException(status_code=400, detail=e.message)
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to add unavailable date")
        return UnavailableDateResponse(**result.data[0])

    def remove_unavailable_date(self, entry_id: str, user_id: str) -> bool:
        result = self.supabase.table("unavailable_dates")\
            .delete()\
            .eq("id", entry_id)\
            .eq("user_id", user_id)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Unavailable date not found")
        return True

    def get_calendar(self, start: date, days: int, bookings: BookingService) -> CalendarResponse:
        """Active games in the range plus, per day, who said they can play"""
        if days < 1 or days > MAX_CALENDAR_DAYS:
            raise HTTPException(status_code=400, detail=f"days must be between 1 and {MAX_CALENDAR_DAYS}")
        end = start + timedelta(days=days - 1)

        games = bookings.list_in_range(start.isoformat(), end.isoformat())
        slots = self.supabase.table("availability").select("*").execute().data or []
        unavailable = self.supabase.table("unavailable_dates")\
            .select("user_id, date")\
            .gte("date", start.isoformat())\
            .lte("date", end.isoformat())\
            .execute().data or []

        profiles = {}
        user_ids = list({s["user_id"] for s in slots})
        if user_ids:
            rows = self.supabase.table("profiles")\
                .select("id, full_name, skill_level")\
                .in_("id", user_ids)\
                .execute().data or []
            profiles = {p["id"]: p for p in rows}

        available = {}
        for offset in range(days):
            day = start + timedelta(days=offset)
            players = available_on(day, slots, unavailable, profiles)
            if players:
                available[day.isoformat()] = players

        return CalendarResponse(start_date=start, end_date=end, bookings=games, available=available)

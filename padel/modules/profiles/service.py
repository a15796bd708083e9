import logging
import re
from datetime import datetime, timezone
from supabase import Client
from postgrest.exceptions import APIError
from padel.modules.profiles.schemas import (
    ProfileUpdate, ProfileResponse, MemberResponse, AvailabilitySlot, ProfileStats
)
from typing import List, Optional, Dict, Any
from fastapi import HTTPException

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


def whatsapp_url(phone: Optional[str]) -> Optional[str]:
    """wa.me deep link built from the digits of a phone number"""
    if not phone:
        return None
    digits = re.sub(r"\D", "", phone)
    return f"https://wa.me/{digits}" if digits else None


def default_full_name(user_data: Dict[str, Any]) -> str:
    metadata = user_data.get("user_metadata") or {}
    if metadata.get("full_name"):
        return metadata["full_name"]
    email = user_data.get("email") or ""
    return email.split("@")[0] or "New Player"


class ProfileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def ensure_profile(self, user_data: Dict[str, Any]) -> None:
        """Create the caller's profile on first use. A concurrent insert of the same row is fine."""
        existing = self.supabase.table("profiles")\
            .select("id")\
            .eq("id", user_data["id"])\
            .maybe_single()\
            .execute()
        if existing and existing.data:
            return
        try:
            self.supabase.table("profiles").insert({
                "id": user_data["id"],
                "full_name": default_full_name(user_data),
                "email": user_data.get("email") or ""
            }).execute()
            logger.info(f"Created profile for {user_data['id']}")
        except APIError as e:
            if e.code != UNIQUE_VIOLATION:
                raise HTTPException(status_code=400, detail=e.message)

    def get_profile(self, user_id: str) -> ProfileResponse:
        result = self.supabase.table("profiles")\
            .select("*")\
            .eq("id", user_id)\
            .maybe_single()\
            .execute()
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="User not found")
        return ProfileResponse(**result.data)

    def update_profile(self, user_id: str, profile_data: ProfileUpdate) -> ProfileResponse:
        """Update own profile. Blank phone clears it."""
        update_data = {}
        if profile_data.full_name is not None:
            if not profile_data.full_name.strip():
                raise HTTPException(status_code=400, detail="Name cannot be empty")
            update_data["full_name"] = profile_data.full_name.strip()
        if profile_data.phone is not None:
            update_data["phone"] = profile_data.phone.strip() or None
        if profile_data.skill_level is not None:
            update_data["skill_level"] = profile_data.skill_level
        if profile_data.avatar_url is not None:
            update_data["avatar_url"] = profile_data.avatar_url or None
        if profile_data.email_notifications is not None:
            update_data["email_notifications"] = profile_data.email_notifications
        if not update_data:
            return self.get_profile(user_id)

        try:
            result = self.supabase.table("profiles")\
                .update(update_data)\
                .eq("id", user_id)\
                .execute()
        except APIError as e:
            raise HTTPException(status_code=400, detail=e.message)
        if not result.data:
            raise HTTPException(status_code=404, detail="User not found")
        return ProfileResponse(**result.data[0])

    def list_members(self, skill_level: Optional[str] = None, search: Optional[str] = None) -> List[MemberResponse]:
        """Everyone in the community, by name, with weekly availability and a WhatsApp link"""
        query = self.supabase.table("profiles").select("*")
        if skill_level and skill_level != "all":
            query = query.eq("skill_level", skill_level)
        profiles = query.order("full_name").execute().data or []

        if search:
            needle = search.strip().lower()
            profiles = [
                p for p in profiles
                if needle in (p.get("full_name") or "").lower() or needle in (p.get("email") or "").lower()
            ]

        availability = self.supabase.table("availability")\
            .select("user_id, day_of_week, start_time, end_time")\
            .order("day_of_week")\
            .order("start_time")\
            .execute().data or []
        by_user: Dict[str, List[AvailabilitySlot]] = {}
        for slot in availability:
            by_user.setdefault(slot["user_id"], []).append(AvailabilitySlot(
                day_of_week=slot["day_of_week"],
                start_time=slot["start_time"],
                end_time=slot["end_time"]
            ))

        members = []
        for p in profiles:
            member = {k: v for k, v in p.items() if k in MemberResponse.model_fields}
            member["whatsapp_url"] = whatsapp_url(p.get("phone"))
            member["availability"] = by_user.get(p["id"], [])
            members.append(MemberResponse(**member))
        return members

    def get_stats(self, user_id: str) -> ProfileStats:
        """Games played / upcoming (confirmed, not cancelled) and games paid"""
        today = datetime.now(timezone.utc).date().isoformat()
        signups = self.supabase.table("signups")\
            .select("booking_id, status, payment_status")\
            .eq("user_id", user_id)\
            .eq("status", "confirmed")\
            .execute().data or []
        games_paid = sum(1 for s in signups if s.get("payment_status") == "paid")
        booking_ids = [s["booking_id"] for s in signups]
        played = 0
        upcoming = 0
        if booking_ids:
            bookings = self.supabase.table("bookings")\
                .select("id, date, status")\
                .in_("id", booking_ids)\
                .execute().data or []
            for b in bookings:
                if b["status"] == "cancelled":
                    continue
                if b["date"] < today:
                    played += 1
                else:
                    upcoming += 1
        return ProfileStats(games_played=played, games_upcoming=upcoming, games_paid=games_paid)

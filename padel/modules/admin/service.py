import logging
from supabase import Client
from postgrest.exceptions import APIError
from padel.modules.admin.schemas import AdminData, AdminProfile, BlacklistEntry
from typing import Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


def is_email_blacklisted(supabase: Client, email: str) -> bool:
    """Case-insensitive lookup in the blacklist table (service client expected)"""
    result = supabase.table("blacklist")\
        .select("id")\
        .eq("email", email.lower())\
        .limit(1)\
        .execute()
    return bool(result.data)


def delete_account_rows(supabase: Client, user_id: str):
    """
    Delete a player everywhere: notifications, then the profile (cascades to
    availability, unavailable_dates, signups, comments and organised bookings),
    then the auth user. Requires the service client.
    """
    supabase.table("notifications").delete().eq("user_id", user_id).execute()
    try:
        supabase.table("profiles").delete().eq("id", user_id).execute()
    except APIError as e:
        raise HTTPException(status_code=400, detail=e.message or "Failed to delete profile")
    try:
        supabase.auth.admin.delete_user(user_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
    logger.info(f"Deleted account {user_id}")


class AdminService:
    def __init__(self, supabase: Client):
        # Always the service client: admin work crosses RLS boundaries
        self.supabase = supabase

    def get_admin_data(self) -> AdminData:
        """All profiles by name and the blacklist, newest first"""
        profiles = self.supabase.table("profiles")\
            .select("*")\
            .order("full_name")\
            .execute()
        blacklist = self.supabase.table("blacklist")\
            .select("*")\
            .order("created_at", desc=True)\
            .execute()
        return AdminData(
            profiles=[AdminProfile(**p) for p in (profiles.data or [])],
            blacklist=[BlacklistEntry(**b) for b in (blacklist.data or [])]
        )

    def delete_user(self, user_id: str, current_user_id: str) -> bool:
        if user_id == current_user_id:
            raise HTTPException(status_code=400, detail="Cannot delete your own account from admin panel")
        delete_account_rows(self.supabase, user_id)
        return True

    def blacklist_user(self, user_id: str, current_user_id: str, reason: Optional[str] = None) -> BlacklistEntry:
        """Delete the player's account and block their email from coming back"""
        if user_id == current_user_id:
            raise HTTPException(status_code=400, detail="Cannot blacklist yourself")

        profile = self.supabase.table("profiles")\
            .select("email")\
            .eq("id", user_id)\
            .maybe_single()\
            .execute()
        if not profile or not profile.data:
            raise HTTPException(status_code=404, detail="User not found")

        email = (profile.data.get("email") or "").lower()
        delete_account_rows(self.supabase, user_id)
        entry = self._insert_blacklist(email, reason, current_user_id)
        logger.info(f"Blacklisted user {user_id}")
        return entry

    def add_to_blacklist(self, email: str, current_user_id: str, reason: Optional[str] = None) -> BlacklistEntry:
        return self._insert_blacklist(email.lower(), reason, current_user_id)

    def _insert_blacklist(self, email: str, reason: Optional[str], blacklisted_by: str) -> BlacklistEntry:
        try:
            result = self.supabase.table("blacklist").insert({
                "email": email,
                "reason": reason or None,
                "blacklisted_by": blacklisted_by
            }).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise HTTPException(status_code=409, detail="Email is already blacklisted")
            raise HTTPException(status_code=400, detail=e.message)
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to blacklist email")
        return BlacklistEntry(**result.data[0])

    def remove_from_blacklist(self, blacklist_id: str) -> bool:
        result = self.supabase.table("blacklist")\
            .delete()\
            .eq("id", blacklist_id)\
            .execute()
        return len(result.data or []) > 0

    def toggle_admin(self, user_id: str, current_user_id: str, is_admin: bool) -> AdminProfile:
        if user_id == current_user_id:
            raise HTTPException(status_code=400, detail="Cannot change your own admin status")
        result = self.supabase.table("profiles")\
            .update({"is_admin": is_admin})\
            .eq("id", user_id)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="User not found")
        logger.info(f"Set is_admin={is_admin} for {user_id}")
        return AdminProfile(**result.data[0])

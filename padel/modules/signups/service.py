import logging
from datetime import datetime, timezone
from supabase import Client
from postgrest.exceptions import APIError
from padel.modules.signups import capacity
from padel.modules.signups.schemas import SignupResult, LeaveResult
from padel.modules.notifications.service import create_notifications, NotificationType
from typing import List, Optional, Dict, Any
from fastapi import HTTPException

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """ISO timestamp from the database as an aware datetime (naive values are UTC)"""
    if not value:
        return None
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class SignupService:
    """
    Joining, waitlisting and leaving bookings.

    Reads and the caller's own rows go through the user client (RLS applies);
    booking status changes, promotions and notifications use the service client
    because they touch rows the caller does not own.
    """

    def __init__(self, supabase: Client, service_supabase: Optional[Client] = None):
        self.supabase = supabase
        self.service_supabase = service_supabase or supabase

    def _get_booking(self, booking_id: str, client: Optional[Client] = None) -> Dict[str, Any]:
        result = (client or self.supabase).table("bookings")\
            .select("*")\
            .eq("id", booking_id)\
            .maybe_single()\
            .execute()
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Booking not found")
        return result.data

    def _get_own_signup(self, booking_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table("signups")\
            .select("*")\
            .eq("booking_id", booking_id)\
            .eq("user_id", user_id)\
            .maybe_single()\
            .execute()
        return result.data if result else None

    def count_confirmed(self, booking_id: str, client: Optional[Client] = None) -> int:
        result = (client or self.supabase).table("signups")\
            .select("id", count="exact")\
            .eq("booking_id", booking_id)\
            .eq("status", "confirmed")\
            .execute()
        return result.count or 0

    def _waitlist(self, booking_id: str, client: Optional[Client] = None) -> List[Dict[str, Any]]:
        result = (client or self.supabase).table("signups")\
            .select("id, user_id, status, position, signed_up_at")\
            .eq("booking_id", booking_id)\
            .eq("status", "waitlist")\
            .order("position")\
            .execute()
        return result.data or []

    def _set_booking_status(self, booking_id: str, status: str):
        self.service_supabase.table("bookings")\
            .update({"status": status})\
            .eq("id", booking_id)\
            .execute()

    def _check_open_for_signups(self, booking: Dict[str, Any]):
        if booking["status"] == "cancelled":
            raise HTTPException(status_code=400, detail="Booking is cancelled")
        if booking["status"] == "completed":
            raise HTTPException(status_code=400, detail="Booking is already completed")
        deadline = parse_timestamp(booking.get("signup_deadline"))
        if deadline and datetime.now(timezone.utc) > deadline:
            raise HTTPException(status_code=400, detail="Signups for this booking have closed")

    def sign_up(self, booking_id: str, user_id: str) -> SignupResult:
        """Confirm the player if there is room, otherwise put them at the back of the waitlist"""
        booking = self._get_booking(booking_id)
        self._check_open_for_signups(booking)

        existing = self._get_own_signup(booking_id, user_id)
        if existing and existing["status"] != "interested":
            raise HTTPException(status_code=409, detail="Already signed up")

        confirmed_count = self.count_confirmed(booking_id)
        positions = [s.get("position") for s in self._waitlist(booking_id)]
        status, position = capacity.classify_signup(confirmed_count, booking["max_players"], positions)

        try:
            if existing:
                self.supabase.table("signups")\
                    .update({"status": status, "position": position})\
                    .eq("id", existing["id"])\
                    .execute()
            else:
                self.supabase.table("signups").insert({
                    "booking_id": booking_id,
                    "user_id": user_id,
                    "status": status,
                    "position": position
                }).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise HTTPException(status_code=409, detail="Already signed up")
            raise HTTPException(status_code=400, detail=e.message)

        booking_status = booking["status"]
        if status == "confirmed" and booking_status == "open" \
                and capacity.becomes_full(confirmed_count + 1, booking["max_players"]):
            self._set_booking_status(booking_id, "full")
            booking_status = "full"

        logger.info(f"User {user_id} signed up for booking {booking_id} as {status}")
        return SignupResult(status=status, position=position, booking_status=booking_status)

    def mark_interested(self, booking_id: str, user_id: str) -> SignupResult:
        booking = self._get_booking(booking_id)
        if booking["status"] == "cancelled":
            raise HTTPException(status_code=400, detail="Booking is cancelled")
        try:
            self.supabase.table("signups").insert({
                "booking_id": booking_id,
                "user_id": user_id,
                "status": "interested"
            }).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise HTTPException(status_code=409, detail="Already signed up")
            raise HTTPException(status_code=400, detail=e.message)
        return SignupResult(status="interested", booking_status=booking["status"])

    def promote_next(self, booking_id: str) -> Optional[Dict[str, Any]]:
        """Confirm the earliest waitlisted signup, if any. Returns the promoted row."""
        next_in_line = capacity.pick_next_in_line(self._waitlist(booking_id, self.service_supabase))
        if not next_in_line:
            return None
        self.service_supabase.table("signups")\
            .update({"status": "confirmed", "position": None})\
            .eq("id", next_in_line["id"])\
            .execute()
        logger.info(f"Promoted user {next_in_line['user_id']} from waitlist on booking {booking_id}")
        return next_in_line

    def refresh_booking_status(self, booking_id: str, max_players: int) -> str:
        """Re-count confirmed signups and store open/full accordingly"""
        confirmed_count = self.count_confirmed(booking_id, self.service_supabase)
        status = capacity.booking_status_for(confirmed_count, max_players)
        self._set_booking_status(booking_id, status)
        return status

    def fill_open_spots(self, booking: Dict[str, Any]) -> List[str]:
        """Promote from the waitlist until the booking is full or the waitlist is empty (after capacity changes)"""
        promoted = []
        confirmed_count = self.count_confirmed(booking["id"], self.service_supabase)
        for _ in range(capacity.open_spots(confirmed_count, booking["max_players"])):
            signup = self.promote_next(booking["id"])
            if not signup:
                break
            promoted.append(signup["user_id"])
        if promoted:
            self._notify_promoted(booking, promoted)
        return promoted

    def _notify_promoted(self, booking: Dict[str, Any], user_ids: List[str]):
        create_notifications(
            self.service_supabase,
            user_ids,
            booking["id"],
            NotificationType.WAITLIST_PROMOTED,
            "You're in!",
            f"A spot opened up at {booking['venue_name']} on {booking['date']}. You're now confirmed."
        )

    def leave_booking(self, booking_id: str, user_id: str, user_name: Optional[str] = None) -> LeaveResult:
        """Drop the player's signup; a freed confirmed spot goes to the next waitlisted player"""
        signup = self._get_own_signup(booking_id, user_id)
        if not signup:
            raise HTTPException(status_code=404, detail="Signup not found")

        try:
            self.supabase.table("signups")\
                .delete()\
                .eq("booking_id", booking_id)\
                .eq("user_id", user_id)\
                .execute()
        except APIError as e:
            raise HTTPException(status_code=400, detail=e.message)

        if signup["status"] != "confirmed":
            return LeaveResult()

        booking = self._get_booking(booking_id, self.service_supabase)
        if booking["status"] not in capacity.ACTIVE_BOOKING_STATUSES:
            return LeaveResult(booking_status=booking["status"])

        promoted = self.promote_next(booking_id)
        # A booking the organiser has locked as confirmed keeps that status
        if booking["status"] == "confirmed":
            booking_status = "confirmed"
        else:
            booking_status = self.refresh_booking_status(booking_id, booking["max_players"])

        if promoted:
            self._notify_promoted(booking, [promoted["user_id"]])
        if booking["organiser_id"] != user_id:
            create_notifications(
                self.service_supabase,
                [booking["organiser_id"]],
                booking_id,
                NotificationType.PLAYER_LEFT,
                "A player left your game",
                f"{user_name or 'A player'} left {booking['venue_name']} on {booking['date']}."
            )

        return LeaveResult(
            promoted_user_id=promoted["user_id"] if promoted else None,
            booking_status=booking_status
        )

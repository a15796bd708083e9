import logging
from datetime import datetime, timezone
from supabase import Client
from postgrest.exceptions import APIError
from padel.modules.bookings.schemas import (
    BookingForm, BookingResponse, BookingSummary, BookingDetail,
    SignupPlayer, OrganiserInfo, MyGamesResponse
)
from padel.modules.signups import capacity
from padel.modules.signups.service import SignupService
from padel.modules.payments.balances import cost_share
from padel.modules.notifications.service import create_notifications, NotificationType
from typing import List, Optional, Dict, Any, Tuple, Iterable
from fastapi import HTTPException

logger = logging.getLogger(__name__)

# Changing any of these moves the game, so signed-up players are told
SCHEDULE_FIELDS = ("venue_name", "date", "start_time", "end_time")


def today_iso() -> str:
    return datetime.now(timezone.utc).date().isoformat()


class BookingService:
    def __init__(self, supabase: Client, service_supabase: Optional[Client] = None):
        self.supabase = supabase
        self.service_supabase = service_supabase or supabase

    def _get_booking_row(self, booking_id: str) -> Dict[str, Any]:
        result = self.supabase.table("bookings")\
            .select("*")\
            .eq("id", booking_id)\
            .maybe_single()\
            .execute()
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Booking not found")
        return result.data

    def _names(self, user_ids: Iterable[str]) -> Dict[str, Dict[str, Any]]:
        ids = list(set(user_ids))
        if not ids:
            return {}
        result = self.supabase.table("profiles")\
            .select("id, full_name, skill_level")\
            .in_("id", ids)\
            .execute()
        return {p["id"]: p for p in (result.data or [])}

    def _signups_for(self, booking_ids: List[str]) -> List[Dict[str, Any]]:
        if not booking_ids:
            return []
        result = self.supabase.table("signups")\
            .select("*")\
            .in_("booking_id", booking_ids)\
            .execute()
        return result.data or []

    def create_booking(
        self,
        form: BookingForm,
        organiser_id: str,
        coordinates: Optional[Tuple[float, float]] = None
    ) -> BookingResponse:
        """Create a booking and sign the organiser up as its first confirmed player"""
        row = form.to_row()
        row["organiser_id"] = organiser_id
        row["status"] = "open"
        if coordinates:
            row["venue_lat"], row["venue_lng"] = coordinates

        try:
            result = self.supabase.table("bookings").insert(row).execute()
        except APIError as e:
            raise HTTPException(status_code=400, detail=e.message)
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create booking")
        booking = result.data[0]

        try:
            self.supabase.table("signups").insert({
                "booking_id": booking["id"],
                "user_id": organiser_id,
                "status": "confirmed"
            }).execute()
        except APIError as e:
            logger.error(f"Failed to sign organiser up for booking {booking['id']}: {e.message}")
        else:
            if capacity.becomes_full(1, booking["max_players"]):
                self.service_supabase.table("bookings")\
                    .update({"status": "full"})\
                    .eq("id", booking["id"])\
                    .execute()
                booking["status"] = "full"

        logger.info(f"Booking {booking['id']} created by {organiser_id} for {booking['date']}")
        return BookingResponse(**booking)

    def update_booking(
        self,
        booking: Dict[str, Any],
        form: BookingForm,
        editor_id: str,
        coordinates: Optional[Tuple[float, float]] = None
    ) -> BookingResponse:
        """
        Apply an edit from the organiser. Capacity is re-evaluated afterwards:
        extra room is filled from the waitlist and open/full is recomputed.
        """
        if booking["status"] == "cancelled":
            raise HTTPException(status_code=400, detail="Booking is cancelled")

        row = form.to_row()
        row["updated_at"] = datetime.now(timezone.utc).isoformat()
        if coordinates:
            row["venue_lat"], row["venue_lng"] = coordinates
        elif not row.get("venue_address"):
            row["venue_lat"] = None
            row["venue_lng"] = None

        try:
            result = self.service_supabase.table("bookings")\
                .update(row)\
                .eq("id", booking["id"])\
                .execute()
        except APIError as e:
            raise HTTPException(status_code=400, detail=e.message)
        if not result.data:
            raise HTTPException(status_code=404, detail="Booking not found")
        updated = result.data[0]

        if updated["status"] in ("open", "full"):
            signups = SignupService(self.supabase, self.service_supabase)
            signups.fill_open_spots(updated)
            updated["status"] = signups.refresh_booking_status(updated["id"], updated["max_players"])

        if any(str(booking.get(f)) != str(updated.get(f)) for f in SCHEDULE_FIELDS):
            self._notify_players(
                updated,
                exclude=editor_id,
                type=NotificationType.BOOKING_UPDATED,
                title="Game details changed",
                message=f"{updated['venue_name']} on {updated['date']} at {str(updated['start_time'])[:5]} has been updated."
            )

        logger.info(f"Booking {booking['id']} updated by {editor_id}")
        return BookingResponse(**updated)

    def cancel_booking(self, booking: Dict[str, Any], user_id: str) -> BookingResponse:
        """Cancel (soft delete) a booking and tell everyone who signed up"""
        if booking["status"] == "cancelled":
            return BookingResponse(**booking)
        result = self.service_supabase.table("bookings")\
            .update({"status": "cancelled", "updated_at": datetime.now(timezone.utc).isoformat()})\
            .eq("id", booking["id"])\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Booking not found")
        cancelled = result.data[0]

        self._notify_players(
            cancelled,
            exclude=user_id,
            type=NotificationType.BOOKING_CANCELLED,
            title="Game cancelled",
            message=f"{cancelled['venue_name']} on {cancelled['date']} has been cancelled."
        )
        logger.info(f"Booking {booking['id']} cancelled by {user_id}")
        return BookingResponse(**cancelled)

    def set_status(self, booking: Dict[str, Any], status: str) -> BookingResponse:
        """Organiser locks a game (confirmed) or closes it after play (completed)"""
        if booking["status"] == "cancelled":
            raise HTTPException(status_code=400, detail="Booking is cancelled")
        if booking["status"] == "completed":
            raise HTTPException(status_code=400, detail="Booking is already completed")
        result = self.service_supabase.table("bookings")\
            .update({"status": status, "updated_at": datetime.now(timezone.utc).isoformat()})\
            .eq("id", booking["id"])\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Booking not found")
        logger.info(f"Booking {booking['id']} marked {status}")
        return BookingResponse(**result.data[0])

    def _notify_players(self, booking: Dict[str, Any], exclude: str, type: str, title: str, message: str):
        signups = self.service_supabase.table("signups")\
            .select("user_id")\
            .eq("booking_id", booking["id"])\
            .execute().data or []
        recipients = [s["user_id"] for s in signups if s["user_id"] != exclude]
        create_notifications(self.service_supabase, recipients, booking["id"], type, title, message)

    def get_booking_detail(self, booking_id: str) -> BookingDetail:
        booking = self._get_booking_row(booking_id)
        signups = self.supabase.table("signups")\
            .select("*")\
            .eq("booking_id", booking_id)\
            .order("signed_up_at")\
            .execute().data or []

        profiles = self._names([booking["organiser_id"]] + [s["user_id"] for s in signups])
        players = [
            SignupPlayer(
                id=s["id"],
                user_id=s["user_id"],
                full_name=profiles.get(s["user_id"], {}).get("full_name"),
                skill_level=profiles.get(s["user_id"], {}).get("skill_level"),
                status=s["status"],
                position=s.get("position"),
                payment_status=s.get("payment_status") or "unpaid",
                signed_up_at=s.get("signed_up_at")
            )
            for s in signups
        ]
        confirmed_count = sum(1 for s in signups if s["status"] == "confirmed")
        organiser = profiles.get(booking["organiser_id"])

        return BookingDetail(
            booking=BookingResponse(**booking),
            organiser=OrganiserInfo(**organiser) if organiser else None,
            signups=players,
            confirmed_count=confirmed_count,
            cost_per_player=cost_share(booking.get("total_cost") or 0, confirmed_count)
        )

    def _summaries(self, bookings: List[Dict[str, Any]], user_id: Optional[str] = None) -> List[BookingSummary]:
        signups = self._signups_for([b["id"] for b in bookings])
        organisers = self._names(b["organiser_id"] for b in bookings)

        summaries = []
        for b in bookings:
            booking_signups = [s for s in signups if s["booking_id"] == b["id"]]
            mine = next((s for s in booking_signups if user_id and s["user_id"] == user_id), None)
            summaries.append(BookingSummary(
                **b,
                confirmed_count=sum(1 for s in booking_signups if s["status"] == "confirmed"),
                waitlist_count=sum(1 for s in booking_signups if s["status"] == "waitlist"),
                organiser_name=organisers.get(b["organiser_id"], {}).get("full_name"),
                my_status=mine["status"] if mine else None,
                my_payment_status=mine.get("payment_status") if mine else None
            ))
        return summaries

    def list_upcoming(self, user_id: Optional[str] = None) -> List[BookingSummary]:
        """Active bookings from today on, soonest first"""
        bookings = self.supabase.table("bookings")\
            .select("*")\
            .gte("date", today_iso())\
            .in_("status", list(capacity.ACTIVE_BOOKING_STATUSES))\
            .order("date")\
            .order("start_time")\
            .execute().data or []
        return self._summaries(bookings, user_id)

    def list_my_games(self, user_id: str) -> MyGamesResponse:
        """Bookings the player is confirmed or waitlisted on, split into upcoming and past"""
        my_signups = self.supabase.table("signups")\
            .select("booking_id, status, payment_status")\
            .eq("user_id", user_id)\
            .in_("status", ["confirmed", "waitlist"])\
            .execute().data or []
        booking_ids = [s["booking_id"] for s in my_signups]
        if not booking_ids:
            return MyGamesResponse(upcoming=[], past=[], games_played=0, games_paid=0)

        bookings = self.supabase.table("bookings")\
            .select("*")\
            .in_("id", booking_ids)\
            .order("date", desc=True)\
            .order("start_time", desc=True)\
            .execute().data or []
        summaries = self._summaries(bookings, user_id)

        today = today_iso()
        upcoming = [
            b for b in summaries
            if b.date.isoformat() >= today and b.status not in capacity.CLOSED_BOOKING_STATUSES
        ]
        past = [
            b for b in summaries
            if b.date.isoformat() < today or b.status in capacity.CLOSED_BOOKING_STATUSES
        ]
        upcoming.reverse()

        return MyGamesResponse(
            upcoming=upcoming,
            past=past,
            games_played=sum(1 for b in past if b.status != "cancelled"),
            games_paid=sum(1 for s in my_signups if s.get("payment_status") == "paid")
        )

    def list_in_range(self, start_date: str, end_date: str) -> List[BookingSummary]:
        bookings = self.supabase.table("bookings")\
            .select("*")\
            .gte("date", start_date)\
            .lte("date", end_date)\
            .in_("status", list(capacity.ACTIVE_BOOKING_STATUSES))\
            .order("date")\
            .order("start_time")\
            .execute().data or []
        return self._summaries(bookings)

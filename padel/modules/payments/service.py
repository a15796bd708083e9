import logging
from supabase import Client
from padel.modules.payments import balances
from padel.modules.payments.schemas import PaymentToggleResponse, BalancesResponse
from typing import Optional, Dict, Iterable
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class PaymentService:
    def __init__(self, supabase: Client, service_supabase: Optional[Client] = None):
        self.supabase = supabase
        self.service_supabase = service_supabase or supabase

    def toggle_payment_status(self, signup_id: str, user_id: str) -> PaymentToggleResponse:
        """Flip paid/unpaid. Allowed for the player themselves or the booking's organiser."""
        signup_result = self.supabase.table("signups")\
            .select("id, payment_status, user_id, booking_id")\
            .eq("id", signup_id)\
            .maybe_single()\
            .execute()
        if not signup_result or not signup_result.data:
            raise HTTPException(status_code=404, detail="Signup not found")
        signup = signup_result.data

        booking_result = self.supabase.table("bookings")\
            .select("organiser_id")\
            .eq("id", signup["booking_id"])\
            .maybe_single()\
            .execute()
        organiser_id = booking_result.data.get("organiser_id") if booking_result and booking_result.data else None

        if signup["user_id"] != user_id and organiser_id != user_id:
            raise HTTPException(status_code=403, detail="Not authorized")

        new_status = "unpaid" if signup["payment_status"] == "paid" else "paid"
        # Organisers do not own the signup row, so the write goes through the service role
        self.service_supabase.table("signups")\
            .update({"payment_status": new_status})\
            .eq("id", signup_id)\
            .execute()
        logger.info(f"Signup {signup_id} marked {new_status} by {user_id}")
        return PaymentToggleResponse(signup_id=signup_id, status=new_status)

    def _names(self, user_ids: Iterable[str]) -> Dict[str, str]:
        ids = list(set(user_ids))
        if not ids:
            return {}
        result = self.supabase.table("profiles")\
            .select("id, full_name")\
            .in_("id", ids)\
            .execute()
        return {p["id"]: p["full_name"] for p in (result.data or [])}

    def get_balances(self, user_id: Optional[str] = None) -> BalancesResponse:
        """Individual debts, netted settlements and the caller's totals"""
        bookings = self.supabase.table("bookings")\
            .select("id, organiser_id, total_cost, status, venue_name, date")\
            .in_("status", list(balances.CHARGEABLE_BOOKING_STATUSES))\
            .gt("total_cost", 0)\
            .execute().data or []
        if not bookings:
            return BalancesResponse(debts=[], settlements=[])

        signups = self.supabase.table("signups")\
            .select("booking_id, user_id, status, payment_status")\
            .in_("booking_id", [b["id"] for b in bookings])\
            .eq("status", "confirmed")\
            .execute().data or []

        debts = balances.compute_debts(bookings, signups)
        settlements = balances.net_settlements(debts)

        names = self._names([d.from_id for d in debts] + [d.to_id for d in debts])
        for item in list(debts) + list(settlements):
            item.from_name = names.get(item.from_id)
            item.to_name = names.get(item.to_id)

        i_owe, owed_to_me = balances.summarise_for_user(settlements, user_id) if user_id else (0.0, 0.0)
        return BalancesResponse(debts=debts, settlements=settlements, i_owe=i_owe, owed_to_me=owed_to_me)

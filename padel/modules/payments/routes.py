from fastapi import APIRouter, Depends
from padel.database.supabase_client import get_service_supabase
from padel.modules.payments.schemas import PaymentToggleResponse, BalancesResponse
from padel.modules.payments.service import PaymentService
from padel.core.dependencies import get_current_user_id, get_user_supabase
from supabase import Client
from typing import Dict

router = APIRouter(tags=["payments"])


def get_payment_service(
    supabase: Client = Depends(get_user_supabase),
    service_supabase: Client = Depends(get_service_supabase)
) -> PaymentService:
    return PaymentService(supabase, service_supabase)


@router.post("/signups/{signup_id}/payment", response_model=PaymentToggleResponse)
async def toggle_payment_status(
    signup_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: PaymentService = Depends(get_payment_service)
):
    """Toggle a signup between paid and unpaid (player or organiser)"""
    return service.toggle_payment_status(signup_id, current_user["id"])


@router.get("/balances", response_model=BalancesResponse)
async def get_balances(
    current_user: Dict = Depends(get_current_user_id),
    service: PaymentService = Depends(get_payment_service)
):
    """Outstanding debts across all bookings, netted per pair of players"""
    return service.get_balances(current_user["id"])

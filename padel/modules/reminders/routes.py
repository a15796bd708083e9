import hmac
from fastapi import APIRouter, Depends, Header, HTTPException, status
from padel.config import settings
from padel.database.supabase_client import get_service_supabase
from padel.modules.reminders.service import ReminderService
from supabase import Client
from typing import Optional

router = APIRouter(prefix="/cron", tags=["cron"])


def verify_cron_secret(authorization: Optional[str] = Header(None)):
    """Only enforced when CRON_SECRET is configured"""
    if not settings.cron_secret:
        return
    expected = f"Bearer {settings.cron_secret}"
    if not authorization or not hmac.compare_digest(authorization, expected):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


@router.get("/reminders", dependencies=[Depends(verify_cron_secret)])
async def send_reminders(service_supabase: Client = Depends(get_service_supabase)):
    """Called by the scheduler; sends reminders for games starting in ~24h and ~3h"""
    return ReminderService(service_supabase).send_reminders()

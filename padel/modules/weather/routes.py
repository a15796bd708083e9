from fastapi import APIRouter, Depends, HTTPException
from padel.database.supabase_client import get_service_supabase
from padel.modules.weather.schemas import WeatherForecast
from padel.modules.weather.service import WeatherService
from supabase import Client
from typing import Optional

router = APIRouter(prefix="/weather", tags=["weather"])


def get_weather_service(supabase: Client = Depends(get_service_supabase)) -> WeatherService:
    return WeatherService(supabase)


@router.get("", response_model=WeatherForecast)
async def get_weather(
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    date: Optional[str] = None,
    service: WeatherService = Depends(get_weather_service)
):
    """Daily forecast for an outdoor venue, cached for a few hours"""
    if lat is None or lng is None or not date:
        raise HTTPException(status_code=400, detail="Missing lat, lng, or date")
    return await service.get_forecast(lat, lng, date)

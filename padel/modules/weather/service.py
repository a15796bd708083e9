import logging
from datetime import datetime, timezone
from typing import Optional, Dict, Any

import httpx
from fastapi import HTTPException
from supabase import Client

from padel.config import settings
from padel.modules.weather.schemas import WeatherForecast

logger = logging.getLogger(__name__)

DAILY_FIELDS = "temperature_2m_max,temperature_2m_min,precipitation_probability_max,wind_speed_10m_max,weather_code"


def round_coordinate(value: float) -> float:
    """Cache key precision: 4 decimals (about 11 m)"""
    return round(float(value), 4)


def is_fresh(fetched_at: Optional[str], max_age_hours: float, now: Optional[datetime] = None) -> bool:
    if not fetched_at:
        return False
    fetched = datetime.fromisoformat(fetched_at.replace("Z", "+00:00"))
    if fetched.tzinfo is None:
        fetched = fetched.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    return (now - fetched).total_seconds() / 3600 < max_age_hours


def parse_daily_forecast(payload: Dict[str, Any]) -> Optional[WeatherForecast]:
    """First day of an Open-Meteo daily response, or None when the day is out of range"""
    daily = payload.get("daily") or {}
    if not daily.get("time"):
        return None
    return WeatherForecast(
        temperature_max=daily["temperature_2m_max"][0],
        temperature_min=daily["temperature_2m_min"][0],
        precipitation_probability=daily["precipitation_probability_max"][0],
        wind_speed_max=daily["wind_speed_10m_max"][0],
        weather_code=daily["weather_code"][0],
    )


class WeatherService:
    """Open-Meteo daily forecast behind a TTL cache in the weather_cache table (service client)."""

    def __init__(self, supabase: Client, http_client: Optional[httpx.AsyncClient] = None):
        self.supabase = supabase
        self.http_client = http_client

    def _get_cached(self, lat: float, lng: float, date: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table("weather_cache")\
            .select("forecast_data, fetched_at")\
            .eq("lat", lat)\
            .eq("lng", lng)\
            .eq("date", date)\
            .maybe_single()\
            .execute()
        return result.data if result else None

    def _store(self, lat: float, lng: float, date: str, forecast: WeatherForecast):
        try:
            self.supabase.table("weather_cache").upsert(
                {
                    "lat": lat,
                    "lng": lng,
                    "date": date,
                    "forecast_data": forecast.model_dump(),
                    "fetched_at": datetime.now(timezone.utc).isoformat(),
                },
                on_conflict="lat,lng,date"
            ).execute()
        except Exception as e:
            logger.warning(f"Failed to cache weather for {lat},{lng} on {date}: {e}")

    async def _fetch(self, lat: float, lng: float, date: str) -> Dict[str, Any]:
        params = {
            "latitude": lat,
            "longitude": lng,
            "daily": DAILY_FIELDS,
            "timezone": "auto",
            "start_date": date,
            "end_date": date,
        }
        client = self.http_client or httpx.AsyncClient(timeout=settings.http_timeout_sec)
        try:
            resp = await client.get(settings.weather_api_url, params=params)
        finally:
            if self.http_client is None:
                await client.aclose()
        if resp.status_code != 200:
            raise HTTPException(status_code=502, detail="Failed to fetch weather")
        return resp.json()

    async def get_forecast(self, lat: float, lng: float, date: str) -> WeatherForecast:
        lat = round_coordinate(lat)
        lng = round_coordinate(lng)

        cached = self._get_cached(lat, lng, date)
        if cached and is_fresh(cached.get("fetched_at"), settings.weather_cache_hours):
            return WeatherForecast(**cached["forecast_data"])

        try:
            payload = await self._fetch(lat, lng, date)
        except HTTPException:
            raise
        except Exception as e:
            logger.warning(f"Weather service unavailable: {e}")
            raise HTTPException(status_code=502, detail="Weather service unavailable")

        forecast = parse_daily_forecast(payload)
        if forecast is None:
            raise HTTPException(status_code=404, detail="No forecast data available")

        self._store(lat, lng, date, forecast)
        return forecast

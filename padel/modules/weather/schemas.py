from pydantic import BaseModel
from typing import Optional


class WeatherForecast(BaseModel):
    temperature_max: Optional[float] = None
    temperature_min: Optional[float] = None
    precipitation_probability: Optional[float] = None
    wind_speed_max: Optional[float] = None
    weather_code: Optional[int] = None

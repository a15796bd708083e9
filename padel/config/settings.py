from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Required for waitlist promotion, admin and cron work

    # Cron
    cron_secret: Optional[str] = None  # Bearer secret for /cron/reminders; unset means open (local dev)
    reminder_loop_enabled: bool = False
    reminder_loop_interval_sec: int = 900
    local_timezone: str = "Europe/London"  # Booking dates and times are stored in this zone

    # Weather (Open-Meteo)
    weather_api_url: str = "https://api.open-meteo.com/v1/forecast"
    weather_cache_hours: float = 3

    # Geocoding (Nominatim)
    geocoding_api_url: str = "https://nominatim.openstreetmap.org/search"
    geocoding_country_codes: str = "gb"
    geocoding_user_agent: str = "PadelOrganiser/1.0"

    http_timeout_sec: float = 10.0

    # App
    app_name: str = "padel-organiser"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
        extra="ignore"
    )


settings = Settings()

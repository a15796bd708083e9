# Supabase table: weather_cache
# Written and read only with the service-role client

"""
Expected Supabase table structure:

weather_cache:
- id: uuid (primary key)
- lat: numeric (not null) - rounded to 4 decimals
- lng: numeric (not null) - rounded to 4 decimals
- date: date (not null)
- forecast_data: jsonb (not null)
- fetched_at: timestamp (default: now())
- unique constraint on (lat, lng, date)
"""

# Supabase tables: availability, unavailable_dates
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

availability:
- id: uuid (primary key)
- user_id: uuid (foreign key to profiles.id, on delete cascade)
- day_of_week: smallint (not null) - 0 = Sunday ... 6 = Saturday
- start_time: time (not null)
- end_time: time (not null)
- created_at: timestamp (default: now())

unavailable_dates:
- id: uuid (primary key)
- user_id: uuid (foreign key to profiles.id, on delete cascade)
- date: date (not null)
- reason: text (nullable)
- created_at: timestamp (default: now())

RLS: every authenticated player reads both tables (members list, calendar);
players write only their own rows.
"""

# Supabase table: bookings
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

bookings:
- id: uuid (primary key)
- organiser_id: uuid (foreign key to profiles.id, on delete cascade)
- venue_name: text (not null)
- venue_address: text (nullable)
- venue_lat: double precision (nullable) - filled by geocoding
- venue_lng: double precision (nullable)
- court_number: text (nullable)
- is_outdoor: boolean (default: false)
- date: date (not null)
- start_time: time (not null)
- end_time: time (not null)
- total_cost: numeric(10,2) (default: 0)
- max_players: integer (default: 4)
- notes: text (nullable)
- status: text (default: 'open') - values: open, full, confirmed, completed, cancelled
- signup_deadline: timestamptz (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

Status: open while confirmed signups < max_players, full at capacity.
The organiser may lock a game (confirmed), close it (completed) or cancel it.
Cancelling is a status change, rows are never deleted by the application.

RLS: every authenticated player reads all bookings; inserts require
organiser_id = auth.uid(); updates are allowed to the organiser only.
"""

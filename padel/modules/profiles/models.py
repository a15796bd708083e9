# Supabase tables: profiles, auth.users
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key, references auth.users.id on delete cascade)
- full_name: text (not null)
- email: text (not null)
- phone: text (nullable)
- skill_level: text (nullable) - values: beginner, intermediate, advanced, pro
- avatar_url: text (nullable)
- email_notifications: boolean (default: true)
- is_admin: boolean (default: false)
- created_at: timestamp (default: now())

Deleting a profile cascades to availability, unavailable_dates, signups,
comments and bookings (organiser_id). Notifications are deleted first by
the application.

RLS: every authenticated player may read all profiles; a player may insert
and update only their own row (is_admin is not updatable by players).
"""

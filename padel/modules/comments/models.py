# Supabase table: comments
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

comments:
- id: uuid (primary key)
- booking_id: uuid (foreign key to bookings.id, on delete cascade)
- user_id: uuid (foreign key to profiles.id, on delete cascade)
- content: text (not null)
- is_pinned: boolean (default: false)
- created_at: timestamp (default: now())

RLS: every authenticated player reads comments; authors insert, update and
delete their own rows. Pinning is done by the organiser through the service role.
"""

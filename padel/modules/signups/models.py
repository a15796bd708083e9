# Supabase table: signups
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

signups:
- id: uuid (primary key)
- booking_id: uuid (foreign key to bookings.id, on delete cascade)
- user_id: uuid (foreign key to profiles.id, on delete cascade)
- status: text (not null, default: 'confirmed') - values: confirmed, waitlist, interested
- position: integer (nullable) - waitlist order, lowest is promoted first
- payment_status: text (not null, default: 'unpaid') - values: unpaid, paid
- signed_up_at: timestamp (default: now())
- unique constraint on (booking_id, user_id)

RLS: every authenticated player reads all signups; a player inserts, updates
and deletes only their own rows. Promotions and payment toggles by the
organiser go through the service role.

The capacity check and the insert are separate requests, so two players can
both take the last confirmed spot. Accepted at community scale.
"""

# Supabase table: notifications
# Rows are written by other actions (service-role client) and read by polling

"""
Expected Supabase table structure:

notifications:
- id: uuid (primary key)
- user_id: uuid (foreign key to profiles.id, not null)
- booking_id: uuid (foreign key to bookings.id, nullable, on delete cascade)
- type: text (not null) - booking_cancelled, booking_updated, waitlist_promoted,
  player_left, new_comment, reminder_24h, reminder_3h
- title: text (not null)
- message: text (not null)
- is_read: boolean (default: false)
- created_at: timestamp (default: now())

RLS: a player may select and update only rows where user_id = auth.uid().
"""

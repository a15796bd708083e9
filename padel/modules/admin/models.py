# Supabase tables: blacklist (plus profiles.is_admin)
# Actual operations are handled via Supabase SDK in service.py with the service-role client

"""
Expected Supabase table structure:

blacklist:
- id: uuid (primary key)
- email: text (unique, not null) - stored lower-case
- reason: text (nullable)
- blacklisted_by: uuid (foreign key to profiles.id, nullable, on delete set null)
- created_at: timestamp (default: now())

RLS: no policies for authenticated users; only the service role reads or writes.
"""

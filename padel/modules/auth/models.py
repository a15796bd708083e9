# Supabase Auth
# This module uses Supabase's built-in authentication system.
# Supabase Auth owns auth.users, password hashing, sessions and JWTs.

"""
Supabase Auth provides:
- auth.sign_up() - Register new players
- auth.sign_in_with_password() - Authenticate players
- auth.exchange_code_for_session() - OAuth / magic-link callback
- auth.get_user() - Resolve the current player from a JWT
- auth.sign_out() - Logout

Every authenticated player also gets a row in public.profiles (see the
profiles module), created lazily on first action or on the auth callback.
Blacklisted emails (public.blacklist) are refused at register and login.
"""

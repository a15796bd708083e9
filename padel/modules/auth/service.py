import hashlib
import logging
import time
from supabase import Client
from padel.modules.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, RegisterResponse
from padel.modules.admin.service import is_email_blacklisted
from fastapi import HTTPException
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (pages poll the unread count)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500

BLOCKED_EMAIL_DETAIL = "This email address has been blocked"


def _user_to_dict(user) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "user_metadata": user.user_metadata or {},
        "app_metadata": user.app_metadata or {},
        "created_at": user.created_at,
        "updated_at": user.updated_at
    }


def clear_auth_cache():
    _AUTH_USER_CACHE.clear()


def _prune_auth_cache(now: float):
    """Drop expired entries; if the cache is still full, drop the one closest to expiry."""
    for key in [k for k, (_, expiry) in _AUTH_USER_CACHE.items() if expiry <= now]:
        del _AUTH_USER_CACHE[key]
    if len(_AUTH_USER_CACHE) >= _AUTH_CACHE_MAX_SIZE:
        oldest = min(_AUTH_USER_CACHE, key=lambda k: _AUTH_USER_CACHE[k][1])
        del _AUTH_USER_CACHE[oldest]


class AuthService:
    def __init__(self, supabase: Client, service_supabase: Optional[Client] = None):
        self.supabase = supabase
        self.service_supabase = service_supabase or supabase

    def _ensure_not_blacklisted(self, email: str):
        if is_email_blacklisted(self.service_supabase, email):
            logger.info("Refused auth attempt for blacklisted email")
            raise HTTPException(status_code=403, detail=BLOCKED_EMAIL_DETAIL)

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Register a new player using Supabase Auth"""
        self._ensure_not_blacklisted(register_data.email)
        try:
            user_metadata = {}
            if register_data.full_name:
                user_metadata["full_name"] = register_data.full_name

            auth_response = self.supabase.auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": {
                    "data": user_metadata
                }
            })

            if not auth_response.user:
                raise HTTPException(status_code=400, detail="Failed to register user")

            logger.info(f"Registered user {auth_response.user.id}")
            return RegisterResponse(
                user_id=auth_response.user.id,
                email=auth_response.user.email or register_data.email,
                message="User registered successfully"
            )
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "already registered" in error_message.lower() or "already exists" in error_message.lower():
                raise HTTPException(status_code=400, detail="User already exists")
            raise HTTPException(status_code=500, detail=f"Registration failed: {error_message}")

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate player using Supabase Auth"""
        self._ensure_not_blacklisted(login_data.email)
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })

            if not auth_response.user or not auth_response.session:
                raise HTTPException(status_code=401, detail="Invalid credentials")

            return TokenResponse(
                access_token=auth_response.session.access_token,
                refresh_token=auth_response.session.refresh_token,
                token_type="bearer",
                user_id=auth_response.user.id,
                email=auth_response.user.email or login_data.email
            )
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "invalid" in error_message.lower() or "credentials" in error_message.lower():
                raise HTTPException(status_code=401, detail="Invalid email or password")
            raise HTTPException(status_code=500, detail=f"Login failed: {error_message}")

    def exchange_code(self, code: str, code_verifier: Optional[str] = None, redirect_to: Optional[str] = None) -> tuple:
        """
        Exchange an OAuth / magic-link code for a session. Returns (TokenResponse, user dict).

        The PKCE verifier lives with the client that started the flow, so it is
        passed through here; this request's client has none stored.
        """
        params = {"auth_code": code, "code_verifier": code_verifier}
        if redirect_to:
            params["redirect_to"] = redirect_to
        try:
            auth_response = self.supabase.auth.exchange_code_for_session(params)
        except Exception as e:
            logger.warning(f"Code exchange failed: {e}")
            raise HTTPException(status_code=401, detail="Invalid or expired code")

        if not auth_response.user or not auth_response.session:
            raise HTTPException(status_code=401, detail="Invalid or expired code")

        user = auth_response.user
        if user.email:
            self._ensure_not_blacklisted(user.email)

        token = TokenResponse(
            access_token=auth_response.session.access_token,
            refresh_token=auth_response.session.refresh_token,
            user_id=user.id,
            email=user.email or ""
        )
        return token, _user_to_dict(user)

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = hashlib.sha256(token.encode()).hexdigest()
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            user_data = _user_to_dict(user_response.user)
            if len(_AUTH_USER_CACHE) >= _AUTH_CACHE_MAX_SIZE:
                _prune_auth_cache(now)
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + _AUTH_CACHE_TTL_SEC)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")

    def logout(self, token: str) -> bool:
        """Logout player. Supabase JWTs are stateless; this drops our cache entry and the client session."""
        _AUTH_USER_CACHE.pop(hashlib.sha256(token.encode()).hexdigest(), None)
        try:
            self.supabase.auth.sign_out()
            return True
        except Exception as e:
            logger.warning(f"Sign out failed: {e}")
            return False

from fastapi import APIRouter, Depends
from padel.database.supabase_client import SupabaseClient, get_service_supabase
from padel.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse, CodeExchangeRequest
)
from padel.modules.auth.service import AuthService
from padel.modules.profiles.service import ProfileService
from padel.core.dependencies import get_current_user_id, get_access_token, is_admin_user
from padel.config import settings
from supabase import Client, create_client
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


def get_session_auth_service(service_supabase: Client = Depends(get_service_supabase)) -> AuthService:
    """Sign-in flows store a session on the client, so each request gets its own anon client."""
    return AuthService(create_client(settings.supabase_url, settings.supabase_key), service_supabase)


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_session_auth_service)
):
    """Register a new player"""
    return service.register(register_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_session_auth_service)
):
    """Login and get access token"""
    return service.login(login_data)


@router.post("/callback", response_model=TokenResponse)
async def auth_callback(
    body: CodeExchangeRequest,
    service: AuthService = Depends(get_session_auth_service)
):
    """OAuth / magic-link callback: exchange the code and make sure the player has a profile"""
    token, user_data = service.exchange_code(body.code, body.code_verifier, body.redirect_to)
    user_client = SupabaseClient.create_user_client(token.access_token)
    ProfileService(user_client).ensure_profile(user_data)
    return token


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_access_token),
    service: AuthService = Depends(get_session_auth_service)
):
    """Logout and invalidate token"""
    service.logout(token)
    return {"message": "Logged out successfully"}


@router.get("/me")
async def get_current_user(
    current_user: Dict = Depends(get_current_user_id),
    service_supabase: Client = Depends(get_service_supabase)
):
    """Current authenticated player and whether they are an admin"""
    return {**current_user, "is_admin": is_admin_user(current_user["id"], service_supabase)}

"""AuthService against a mocked Supabase auth client; blacklist via the fake."""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from fastapi import HTTPException

from padel.modules.auth.schemas import LoginRequest, RegisterRequest
from padel.modules.auth.service import AuthService, clear_auth_cache
from tests.fakes import FakeSupabase


def _user(id="u1", email="player@example.com", full_name=None):
    return SimpleNamespace(
        id=id, email=email,
        user_metadata={"full_name": full_name} if full_name else {},
        app_metadata={}, created_at="2026-01-01T00:00:00Z", updated_at=None
    )


def _session():
    return SimpleNamespace(access_token="access", refresh_token="refresh")


@pytest.fixture(autouse=True)
def _clear_cache():
    clear_auth_cache()
    yield
    clear_auth_cache()


@pytest.fixture
def service_db():
    return FakeSupabase()


def test_login_returns_tokens(service_db):
    supabase = MagicMock()
    supabase.auth.sign_in_with_password.return_value = SimpleNamespace(user=_user(), session=_session())

    token = AuthService(supabase, service_db).login(LoginRequest(email="player@example.com", password="pw"))

    assert token.access_token == "access"
    assert token.user_id == "u1"


def test_login_invalid_credentials(service_db):
    supabase = MagicMock()
    supabase.auth.sign_in_with_password.side_effect = Exception("Invalid login credentials")
    with pytest.raises(HTTPException) as exc:
        AuthService(supabase, service_db).login(LoginRequest(email="player@example.com", password="bad"))
    assert exc.value.status_code == 401


def test_blacklisted_email_cannot_register_or_login(service_db):
    service_db.add("blacklist", email="banned@example.com")
    supabase = MagicMock()
    service = AuthService(supabase, service_db)

    with pytest.raises(HTTPException) as exc:
        service.register(RegisterRequest(email="Banned@Example.com", password="pw"))
    assert exc.value.status_code == 403
    assert exc.value.detail == "This email address has been blocked"

    with pytest.raises(HTTPException):
        service.login(LoginRequest(email="banned@example.com", password="pw"))
    supabase.auth.sign_up.assert_not_called()
    supabase.auth.sign_in_with_password.assert_not_called()


def test_register_passes_full_name_as_metadata(service_db):
    supabase = MagicMock()
    supabase.auth.sign_up.return_value = SimpleNamespace(user=_user(full_name="Pat"), session=None)

    result = AuthService(supabase, service_db).register(
        RegisterRequest(email="player@example.com", password="pw", full_name="Pat")
    )

    assert result.user_id == "u1"
    sent = supabase.auth.sign_up.call_args.args[0]
    assert sent["options"]["data"] == {"full_name": "Pat"}


def test_register_duplicate(service_db):
    supabase = MagicMock()
    supabase.auth.sign_up.side_effect = Exception("User already registered")
    with pytest.raises(HTTPException) as exc:
        AuthService(supabase, service_db).register(RegisterRequest(email="player@example.com", password="pw"))
    assert exc.value.status_code == 400


def test_exchange_code(service_db):
    supabase = MagicMock()
    supabase.auth.exchange_code_for_session.return_value = SimpleNamespace(user=_user(), session=_session())

    token, user = AuthService(supabase, service_db).exchange_code("abc")

    assert token.refresh_token == "refresh"
    assert user["id"] == "u1"
    supabase.auth.exchange_code_for_session.assert_called_once_with({"auth_code": "abc", "code_verifier": None})


def test_exchange_code_failure(service_db):
    supabase = MagicMock()
    supabase.auth.exchange_code_for_session.side_effect = Exception("bad code")
    with pytest.raises(HTTPException) as exc:
        AuthService(supabase, service_db).exchange_code("abc")
    assert exc.value.status_code == 401


def test_get_current_user_is_cached(service_db):
    supabase = MagicMock()
    supabase.auth.get_user.return_value = SimpleNamespace(user=_user())
    service = AuthService(supabase, service_db)

    assert service.get_current_user("jwt")["id"] == "u1"
    assert service.get_current_user("jwt")["email"] == "player@example.com"
    assert supabase.auth.get_user.call_count == 1


def test_get_current_user_invalid_token(service_db):
    supabase = MagicMock()
    supabase.auth.get_user.side_effect = Exception("invalid JWT")
    with pytest.raises(HTTPException) as exc:
        AuthService(supabase, service_db).get_current_user("bad")
    assert exc.value.status_code == 401


def test_me_reports_admin_flag(client, db):
    db.add("profiles", id="alice", full_name="Alice", email="alice@example.com", is_admin=True)
    body = client.get("/api/v1/auth/me").json()
    assert body["id"] == "alice"
    assert body["is_admin"] is True


def test_callback_forwards_pkce_verifier(client, db):
    from padel.main import app
    from padel.modules.auth.routes import get_session_auth_service

    supabase = MagicMock()
    supabase.auth.exchange_code_for_session.return_value = SimpleNamespace(
        user=_user(id="carol", email="carol@example.com", full_name="Carol"), session=_session()
    )
    app.dependency_overrides[get_session_auth_service] = lambda: AuthService(supabase, db)

    with patch("padel.modules.auth.routes.SupabaseClient.create_user_client", return_value=db):
        response = client.post(
            "/api/v1/auth/callback",
            json={"code": "abc", "code_verifier": "verifier-123", "redirect_to": "http://localhost:3000/"}
        )

    assert response.status_code == 200
    assert response.json()["access_token"] == "access"
    supabase.auth.exchange_code_for_session.assert_called_once_with(
        {"auth_code": "abc", "code_verifier": "verifier-123", "redirect_to": "http://localhost:3000/"}
    )
    assert [p["full_name"] for p in db.rows("profiles")] == ["Carol"]


def test_full_auth_cache_evicts_expired_entries(service_db, monkeypatch):
    from padel.modules.auth import service as auth_service

    monkeypatch.setattr(auth_service, "_AUTH_CACHE_MAX_SIZE", 2)
    clock = {"now": 1000.0}
    monkeypatch.setattr(auth_service.time, "monotonic", lambda: clock["now"])
    supabase = MagicMock()
    supabase.auth.get_user.return_value = SimpleNamespace(user=_user())
    service = AuthService(supabase, service_db)

    service.get_current_user("t1")
    service.get_current_user("t2")
    clock["now"] += auth_service._AUTH_CACHE_TTL_SEC + 1
    service.get_current_user("t3")
    service.get_current_user("t3")

    assert supabase.auth.get_user.call_count == 3
    assert len(auth_service._AUTH_USER_CACHE) == 1


def test_full_auth_cache_drops_entry_closest_to_expiry(service_db, monkeypatch):
    from padel.modules.auth import service as auth_service

    monkeypatch.setattr(auth_service, "_AUTH_CACHE_MAX_SIZE", 2)
    clock = {"now": 1000.0}
    monkeypatch.setattr(auth_service.time, "monotonic", lambda: clock["now"])
    supabase = MagicMock()
    supabase.auth.get_user.return_value = SimpleNamespace(user=_user())
    service = AuthService(supabase, service_db)

    service.get_current_user("t1")
    clock["now"] += 1
    service.get_current_user("t2")
    clock["now"] += 1
    service.get_current_user("t3")
    service.get_current_user("t3")

    assert supabase.auth.get_user.call_count == 3
    assert len(auth_service._AUTH_USER_CACHE) == 2

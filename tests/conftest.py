"""
Shared fixtures: an in-memory Supabase fake and a TestClient whose auth and
Supabase dependencies are overridden so routes run without a real project.
"""

import pytest
from fastapi.testclient import TestClient

from padel.main import app
from padel.core.dependencies import get_current_user_id, get_user_supabase
from padel.database.supabase_client import get_supabase, get_service_supabase
from tests.fakes import FakeSupabase

ALICE = {"id": "alice", "email": "alice@example.com", "user_metadata": {"full_name": "Alice"}}
BOB = {"id": "bob", "email": "bob@example.com", "user_metadata": {"full_name": "Bob"}}


@pytest.fixture
def db():
    return FakeSupabase()


@pytest.fixture
def current_user():
    """Mutable so a test can switch who is calling mid-way"""
    return dict(ALICE)


@pytest.fixture
def client(db, current_user):
    app.dependency_overrides[get_current_user_id] = lambda: current_user
    app.dependency_overrides[get_user_supabase] = lambda: db
    app.dependency_overrides[get_service_supabase] = lambda: db
    app.dependency_overrides[get_supabase] = lambda: db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def act_as(current_user: dict, user: dict):
    current_user.clear()
    current_user.update(user)


def seed_profile(db: FakeSupabase, user_id: str, full_name: str, **extra):
    values = {"id": user_id, "full_name": full_name, "email": f"{user_id}@example.com"}
    values.update(extra)
    return db.add("profiles", **values)


def seed_booking(db: FakeSupabase, organiser_id: str = "alice", **extra):
    values = {
        "organiser_id": organiser_id,
        "venue_name": "Rocket Padel",
        "date": "2099-06-01",
        "start_time": "18:00:00",
        "end_time": "19:30:00",
        "total_cost": 40,
        "max_players": 4,
    }
    values.update(extra)
    return db.add("bookings", **values)
